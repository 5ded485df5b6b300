import logging
import math

from ai_client import AIServiceError
from analyzers.data_type_analyzer import to_number
from data_analysis import analyze_data
from utils.chart_configs import ChartConfigBuilder
from utils.data_insights import INSIGHT_TYPES


def fallback_summary(file_name, row_count, column_count):
    return (f"Analysis of {file_name} with {row_count} rows and {column_count} columns. "
            f"Basic analysis completed due to AI service unavailability.")


def clean_insight(insight):
    """Coerce one model-supplied insight into the stored shape, None when unusable"""
    if not isinstance(insight, dict) or insight.get('type') not in INSIGHT_TYPES:
        return None

    confidence = to_number(insight.get('confidence'))
    columns = insight.get('affectedColumns')

    return {
        'type': insight['type'],
        'title': str(insight.get('title') or ''),
        'description': str(insight.get('description') or ''),
        'confidence': confidence if math.isfinite(confidence) else 0.0,
        'affectedColumns': [str(col) for col in columns] if isinstance(columns, list) else []
    }


def analyze_with_ai(data, file_name, client):
    """Analyze records with the hosted AI, falling back to the local pipeline.

    Returns a dict with summary, insights, chartConfigs and source ("ai" or
    "fallback"). Fallback results also carry the columns and relationships
    of the local analysis.
    """
    if not data:
        raise ValueError('Invalid data provided')

    columns = list(data[0].keys())

    try:
        result = client.analyze_dataset(data, file_name)
    except AIServiceError as e:
        logging.warning(f"AI analysis unavailable for {file_name}, using local analysis: {str(e)}")
        bundle = analyze_data(data)
        bundle['summary'] = fallback_summary(file_name, len(data), len(columns))
        bundle['source'] = 'fallback'
        return bundle

    chart_builder = ChartConfigBuilder()
    raw_charts = result.get('chartConfigs')
    chart_configs = [
        chart_builder.enhance_chart_with_real_data(config, data, columns)
        for config in (raw_charts if isinstance(raw_charts, list) else [])
        if isinstance(config, dict)
    ]

    raw_insights = result.get('insights')
    if not isinstance(raw_insights, list):
        raw_insights = []
    insights = [insight for insight in map(clean_insight, raw_insights) if insight is not None]
    if len(insights) < len(raw_insights):
        logging.warning(f"Dropped {len(raw_insights) - len(insights)} malformed AI insights for {file_name}")

    logging.info(f"AI analysis of {file_name}: {len(insights)} insights, "
                 f"{len(chart_configs)} charts")

    return {
        'summary': str(result.get('summary') or ''),
        'insights': insights,
        'chartConfigs': chart_configs,
        'source': 'ai'
    }
