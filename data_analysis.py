from analyzers.data_type_analyzer import DataTypeAnalyzer
from analyzers.relationship_analyzer import RelationshipAnalyzer
from utils.chart_configs import ChartConfigBuilder
from utils.data_insights import DataInsights


class DataAnalyzer:
    """Local statistical analysis of a rectangular list of records.

    Used when the hosted AI analysis is unavailable. Every call works on fresh
    per-call structures, so one instance can be shared freely.
    """

    def __init__(self):
        self.data_type_analyzer = DataTypeAnalyzer()
        self.relationship_analyzer = RelationshipAnalyzer()
        self.chart_builder = ChartConfigBuilder()

    def analyze(self, data):
        """
        Run the profiling pipeline and return the analysis bundle
        """
        if not data:
            return {'columns': [], 'relationships': [], 'insights': [], 'chartConfigs': []}

        columns = self.data_type_analyzer.analyze(data)
        relationships = self.relationship_analyzer.find_relationships(columns)
        insights = DataInsights.generate_insights(columns, relationships)
        chart_configs = self.chart_builder.generate_chart_configs(columns, relationships)

        return {
            'columns': columns,
            'relationships': relationships,
            'insights': insights,
            'chartConfigs': chart_configs
        }


def analyze_data(data):
    return DataAnalyzer().analyze(data)
