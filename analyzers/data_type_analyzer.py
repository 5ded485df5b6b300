import math
import re
from datetime import date, datetime

import pandas as pd

BOOLEAN_STRINGS = ('true', 'false', '1', '0')
TYPE_SAMPLE_SIZE = 100

RADIX_LITERAL = re.compile(r'0[xX][0-9a-fA-F]+|0[oO][0-7]+|0[bB][01]+')
INFINITY_LITERALS = ('Infinity', '+Infinity', '-Infinity')


def to_number(value):
    """Coerce a loosely-typed cell value to a float, NaN when it is not numeric.

    Mirrors the permissive coercion browsers apply to form and CSV values:
    booleans count as 1/0, numeric strings may carry surrounding whitespace,
    unsigned 0x/0o/0b literals are read in their base, infinity must be
    spelled "Infinity" and a blank string is zero.
    """
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        text = value.strip()
        if text == '':
            return 0.0
        if '_' in text:
            return math.nan
        if RADIX_LITERAL.fullmatch(text):
            return float(int(text, 0))
        if text.lstrip('+-').lower() in ('inf', 'infinity') and text not in INFINITY_LITERALS:
            return math.nan
        try:
            return float(text)
        except ValueError:
            return math.nan
    if hasattr(value, 'item'):  # numpy scalars
        try:
            return float(value.item())
        except (TypeError, ValueError):
            return math.nan
    return math.nan


def is_number(value):
    return not math.isnan(to_number(value)) and value != ''


def looks_like_date(value):
    """Check whether a single value parses as a date"""
    if isinstance(value, (datetime, date, pd.Timestamp)):
        return True
    if not isinstance(value, str) or not value.strip():
        return False
    try:
        return not pd.isna(pd.to_datetime(value, errors='coerce'))
    except (ValueError, TypeError, OverflowError):
        return False


def _distinct_key(value):
    # True and 1 compare equal in Python but are different cell values
    try:
        hash(value)
    except TypeError:
        return ('unhashable', repr(value))
    return (isinstance(value, bool), value)


class DataTypeAnalyzer:
    """Profiles the columns of a list of records: semantic type and summary statistics"""

    def analyze(self, records):
        """Build one column profile per key of the first record"""
        if not records:
            return []

        columns = []
        for key in records[0].keys():
            values = [row.get(key) for row in records]
            values = [value for value in values if value is not None]

            column_type = self.infer_data_type(values)
            columns.append({
                'name': key,
                'type': column_type,
                'values': values,
                'stats': self.calculate_stats(values, column_type)
            })

        return columns

    def infer_data_type(self, values):
        """Infer boolean, number, date or string from the first values of a column.

        First match wins. The date test only needs a single parseable value,
        unlike the boolean and number tests which need every sampled value.
        """
        sample = values[:TYPE_SAMPLE_SIZE]

        if all(isinstance(value, bool) or value in BOOLEAN_STRINGS for value in sample):
            return 'boolean'

        if all(is_number(value) for value in sample):
            return 'number'

        if any(looks_like_date(value) for value in sample):
            return 'date'

        return 'string'

    def calculate_stats(self, values, column_type):
        """Distinct count for every column, min/max/avg/median for numeric ones"""
        unique_count = len({_distinct_key(value) for value in values})

        if column_type != 'number':
            return {'uniqueCount': unique_count}

        nums = [to_number(value) for value in values]
        nums = sorted(n for n in nums if not math.isnan(n))
        if not nums:
            return {'uniqueCount': unique_count}

        lowest = nums[0]
        highest = nums[-1]
        # float rounding can push the mean just outside the observed range
        avg = min(max(sum(nums) / len(nums), lowest), highest)

        return {
            'min': lowest,
            'max': highest,
            'avg': avg,
            'median': nums[len(nums) // 2],
            'uniqueCount': unique_count
        }
