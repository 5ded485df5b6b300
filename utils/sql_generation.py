import logging
import random
import re
from datetime import datetime, timedelta, timezone

import sqlparse

from ai_client import AIServiceError

SAMPLE_ROW_COUNT = 5
DEFAULT_COLUMNS = ['id', 'name', 'created_at']

SELECT_PATTERN = re.compile(r'SELECT\s+(.*?)\s+FROM', re.IGNORECASE | re.DOTALL)
FROM_PATTERN = re.compile(r'FROM\s+(\w+)', re.IGNORECASE)
ALIAS_PREFIX = re.compile(r'.*\s+AS\s+', re.IGNORECASE)
QUALIFIER_PREFIX = re.compile(r'.*\.')

SAMPLE_NAMES = ['John Doe', 'Jane Smith', 'Bob Johnson', 'Alice Brown', 'Charlie Wilson']
SAMPLE_EMAILS = ['john@example.com', 'jane@example.com', 'bob@example.com',
                 'alice@example.com', 'charlie@example.com']
SAMPLE_STATUSES = ['active', 'inactive', 'pending', 'completed', 'cancelled']


class SQLGenerationError(Exception):
    """Raised when SQL cannot be generated for a request"""


def generate_sql_query(tables, prompt, client):
    """Generate SQL for a natural-language request against user-defined table schemas"""
    if not tables:
        raise SQLGenerationError('No table schemas provided')
    if not isinstance(prompt, str) or not prompt.strip():
        raise SQLGenerationError('No prompt provided')

    try:
        return client.generate_sql(tables, prompt)
    except AIServiceError as e:
        logging.error(f"SQL generation error: {str(e)}")
        raise SQLGenerationError('Failed to generate SQL query. Please try again.') from e


def refine_prompt(prompt, current_sql):
    return f"{prompt}\n\nCurrent query: {current_sql}\n\nPlease refine this query based on the new requirements."


def _selected_columns(sql_query, tables):
    match = SELECT_PATTERN.search(sql_query)
    if not match:
        raise ValueError('Could not parse SELECT statement')

    select_clause = match.group(1).strip()

    if select_clause == '*':
        from_match = FROM_PATTERN.search(sql_query)
        if not from_match:
            return []
        table_name = from_match.group(1).lower()
        for table in tables:
            if str(table.get('name', '')).lower() == table_name:
                return [col['name'] for col in table.get('columns') or []
                        if isinstance(col, dict) and col.get('name')]
        return []

    columns = []
    for item in select_clause.split(','):
        name = QUALIFIER_PREFIX.sub('', ALIAS_PREFIX.sub('', item.strip()))
        # aggregates without an alias are skipped
        if name and '(' not in name:
            columns.append(name)
    return columns


def execute_sample_query(sql_query, tables, rng=None):
    """Mock execution: derive the selected columns and fabricate a few sample rows"""
    rng = rng or random.Random()
    try:
        cleaned = sqlparse.format(sql_query, strip_comments=True)
        columns = _selected_columns(cleaned, tables) or list(DEFAULT_COLUMNS)

        rows = []
        for i in range(SAMPLE_ROW_COUNT):
            rows.append({column: generate_sample_value(column, i, rng) for column in columns})

        return {
            'success': True,
            'columns': columns,
            'rows': rows,
            'executedAt': datetime.now(timezone.utc).isoformat()
        }

    except ValueError as e:
        return {
            'success': False,
            'error': str(e)
        }


def generate_sample_value(column_name, index, rng=None):
    """Plausible value for a column, chosen by substrings of its name"""
    rng = rng or random.Random()
    lower_name = column_name.lower()

    if 'id' in lower_name:
        return index + 1
    elif 'name' in lower_name:
        return SAMPLE_NAMES[index % len(SAMPLE_NAMES)]
    elif 'email' in lower_name:
        return SAMPLE_EMAILS[index % len(SAMPLE_EMAILS)]
    elif 'date' in lower_name or 'created' in lower_name or 'updated' in lower_name:
        return (datetime.now(timezone.utc) - timedelta(days=index)).date().isoformat()
    elif 'price' in lower_name or 'amount' in lower_name or 'cost' in lower_name:
        return f"{rng.random() * 1000 + 10:.2f}"
    elif 'count' in lower_name or 'quantity' in lower_name or 'number' in lower_name:
        return rng.randint(1, 100)
    elif 'status' in lower_name:
        return SAMPLE_STATUSES[index % len(SAMPLE_STATUSES)]
    elif 'description' in lower_name or 'comment' in lower_name:
        descriptions = [
            f"Sample description for item {index + 1}",
            'This is a test description',
            'Lorem ipsum dolor sit amet',
            'Sample data for demonstration',
            'Generated sample content'
        ]
        return descriptions[index % len(descriptions)]
    else:
        return f"Sample {column_name} {index + 1}"
