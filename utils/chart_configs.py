import logging
import math
from collections import Counter

from analyzers.data_type_analyzer import to_number

SCATTER_POINT_LIMIT = 50
AI_SCATTER_ROW_LIMIT = 100
BAR_CATEGORY_LIMIT = 10
PIE_CATEGORY_LIMIT = 8

CHART_TYPES = ('bar', 'line', 'scatter', 'pie', 'doughnut', 'polarArea', 'radar')

CHART_TYPE_ALIASES = {
    'histogram': 'bar',
    'column': 'bar',
    'area': 'line',
    'donut': 'doughnut',
    'polar': 'polarArea',
    'spider': 'radar',
}

BLUE = ('rgba(59, 130, 246, 0.6)', 'rgba(59, 130, 246, 1)')
PURPLE = ('rgba(139, 92, 246, 0.6)', 'rgba(139, 92, 246, 1)')
RED = ('rgba(239, 68, 68, 0.6)', 'rgba(239, 68, 68, 1)')
GREEN = ('rgba(34, 197, 94, 0.6)', 'rgba(34, 197, 94, 1)')
GREY = ('rgba(156, 163, 175, 0.6)', 'rgba(156, 163, 175, 1)')

PIE_COLORS = [
    'rgba(59, 130, 246, 0.8)',
    'rgba(139, 92, 246, 0.8)',
    'rgba(34, 197, 94, 0.8)',
    'rgba(245, 158, 11, 0.8)',
    'rgba(239, 68, 68, 0.8)',
    'rgba(168, 85, 247, 0.8)',
    'rgba(6, 182, 212, 0.8)',
    'rgba(251, 146, 60, 0.8)',
]


def normalize_chart_type(chart_type):
    """Map chart type aliases onto the types the renderer understands"""
    lower_type = str(chart_type).lower().strip()
    return CHART_TYPE_ALIASES.get(lower_type, lower_type)


def find_relevant_column(title, columns):
    """First column whose name appears in the chart title, else the first column"""
    title_lower = (title or '').lower()
    for col in columns:
        if str(col).lower() in title_lower:
            return col
    return columns[0] if columns else None


def _is_numeric(value):
    return not math.isnan(to_number(value))


def _placeholder(label, dataset_label, colors):
    return {
        'labels': [label],
        'datasets': [{
            'label': dataset_label,
            'data': [0],
            'backgroundColor': colors[0],
            'borderColor': colors[1],
            'borderWidth': 1
        }]
    }


class ChartConfigBuilder:
    """Builds declarative chart configurations for the rendering layer"""

    def generate_chart_configs(self, columns, relationships):
        """Bar charts for numeric columns, scatter charts for relationships"""
        charts = []

        for col in columns:
            if col['type'] != 'number':
                continue
            stats = col.get('stats', {})
            charts.append({
                'type': 'bar',
                'title': f"Distribution of {col['name']}",
                'data': {
                    'labels': ['Min', 'Avg', 'Max'],
                    'datasets': [{
                        'label': col['name'],
                        'data': [stats.get('min'), stats.get('avg'), stats.get('max')],
                        'backgroundColor': BLUE[0],
                        'borderColor': BLUE[1],
                        'borderWidth': 1
                    }]
                }
            })

        by_name = {col['name']: col for col in columns}
        for rel in relationships:
            col1 = by_name.get(rel['column1'])
            col2 = by_name.get(rel['column2'])
            if col1 is None or col2 is None:
                continue

            label = f"{rel['column1']} vs {rel['column2']}"
            points = [
                {'x': to_number(x), 'y': to_number(y)}
                for x, y in zip(col1['values'][:SCATTER_POINT_LIMIT], col2['values'])
            ]
            charts.append({
                'type': 'scatter',
                'title': label,
                'data': {
                    'datasets': [{
                        'label': label,
                        'data': points,
                        'backgroundColor': PURPLE[0],
                        'borderColor': PURPLE[1],
                    }]
                }
            })

        return charts

    def enhance_chart_with_real_data(self, config, data, columns):
        """Replace the series of an AI-suggested chart with values computed from the dataset"""
        config = dict(config)
        try:
            config['type'] = normalize_chart_type(config.get('type') or 'bar')
            chart_type = config['type']

            if chart_type == 'bar':
                self._fill_bar(config, data, columns)
            elif chart_type in ('pie', 'doughnut'):
                self._fill_pie(config, data, columns)
            elif chart_type == 'scatter':
                self._fill_scatter(config, data, columns)

            if not config.get('data'):
                config['data'] = _placeholder('No Data', 'No Data Available', GREY)

            return config

        except Exception as e:
            logging.error(f"Error enhancing chart data: {str(e)}")
            config['type'] = 'bar'
            config['data'] = _placeholder('Error', 'Chart Error', RED)
            return config

    def _column_values(self, data, column):
        return [row.get(column) for row in data if row.get(column) is not None]

    def _top_frequencies(self, values, limit):
        counts = Counter(str(value) for value in values)
        return sorted(counts.items(), key=lambda item: -item[1])[:limit]

    def _fill_bar(self, config, data, columns):
        column = find_relevant_column(config.get('title'), columns)
        if column is None:
            return
        values = self._column_values(data, column)
        if not values:
            return

        if all(_is_numeric(value) for value in values):
            nums = [to_number(value) for value in values]
            config['data'] = {
                'labels': ['Minimum', 'Average', 'Maximum'],
                'datasets': [{
                    'label': column,
                    'data': [min(nums), sum(nums) / len(nums), max(nums)],
                    'backgroundColor': [RED[0], BLUE[0], GREEN[0]],
                    'borderColor': [RED[1], BLUE[1], GREEN[1]],
                    'borderWidth': 1
                }]
            }
        else:
            entries = self._top_frequencies(values, BAR_CATEGORY_LIMIT)
            config['data'] = {
                'labels': [key for key, _ in entries],
                'datasets': [{
                    'label': 'Frequency',
                    'data': [count for _, count in entries],
                    'backgroundColor': BLUE[0],
                    'borderColor': BLUE[1],
                    'borderWidth': 1
                }]
            }

    def _fill_pie(self, config, data, columns):
        column = find_relevant_column(config.get('title'), columns)
        if column is None:
            return
        entries = self._top_frequencies(self._column_values(data, column), PIE_CATEGORY_LIMIT)
        colors = PIE_COLORS[:len(entries)]

        config['data'] = {
            'labels': [key for key, _ in entries],
            'datasets': [{
                'label': column,
                'data': [count for _, count in entries],
                'backgroundColor': colors,
                'borderColor': [color.replace('0.8', '1') for color in colors],
                'borderWidth': 2
            }]
        }
        config['title'] = f"{column} Distribution"

    def _fill_scatter(self, config, data, columns):
        numeric_columns = []
        for col in columns:
            values = self._column_values(data, col)
            if values and all(_is_numeric(value) for value in values):
                numeric_columns.append(col)

        if len(numeric_columns) < 2:
            return

        x_col, y_col = numeric_columns[0], numeric_columns[1]
        points = []
        for row in data[:AI_SCATTER_ROW_LIMIT]:
            point = {'x': to_number(row.get(x_col)), 'y': to_number(row.get(y_col))}
            if not math.isnan(point['x']) and not math.isnan(point['y']):
                points.append(point)

        config['data'] = {
            'datasets': [{
                'label': f"{x_col} vs {y_col}",
                'data': points,
                'backgroundColor': PURPLE[0],
                'borderColor': PURPLE[1],
            }]
        }
        config['title'] = f"{x_col} vs {y_col} Relationship"
