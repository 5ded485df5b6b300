import numpy as np
from itertools import combinations

from analyzers.data_type_analyzer import to_number

REPORT_THRESHOLD = 0.3
STRONG_THRESHOLD = 0.7


class RelationshipAnalyzer:
    """Analyzer for detecting linear relationships between numeric columns"""

    def find_relationships(self, columns):
        """Correlate every pair of numeric columns and keep the notable ones.

        Pairs are visited in column order (i < j) and reported in that order.
        """
        relationships = []

        numeric_columns = [col for col in columns if col['type'] == 'number']

        for col1, col2 in combinations(numeric_columns, 2):
            correlation = self.calculate_correlation(col1['values'], col2['values'])
            strength = abs(correlation)

            # NaN never passes the comparison
            if strength > REPORT_THRESHOLD:
                relationships.append({
                    'column1': col1['name'],
                    'column2': col2['name'],
                    'type': 'correlation' if strength > STRONG_THRESHOLD else 'independence',
                    'strength': strength,
                    'description': self._describe(correlation, col1['name'], col2['name'])
                })

        return relationships

    def calculate_correlation(self, x, y):
        """Pearson correlation of two index-aligned value lists.

        The longer list is truncated to the length of the shorter one. Returns 0
        when either series is constant or there is nothing to pair.
        """
        n = min(len(x), len(y))
        if n == 0:
            return 0.0

        x_num = np.array([to_number(value) for value in x[:n]], dtype=float)
        y_num = np.array([to_number(value) for value in y[:n]], dtype=float)

        x_diff = x_num - x_num.mean()
        y_diff = y_num - y_num.mean()

        numerator = float(np.sum(x_diff * y_diff))
        denominator = float(np.sqrt(np.sum(x_diff * x_diff) * np.sum(y_diff * y_diff)))

        if denominator == 0:
            return 0.0
        return numerator / denominator

    def _describe(self, correlation, name1, name2):
        strength_label = 'Strong' if abs(correlation) > STRONG_THRESHOLD else 'Moderate'
        direction = 'positive' if correlation > 0 else 'negative'
        return f"{strength_label} {direction} relationship between {name1} and {name2}"
