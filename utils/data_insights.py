INSIGHT_TYPES = ('trend', 'outlier', 'pattern', 'recommendation')
PATTERN_CONFIDENCE = 0.9
RECOMMENDATION_CONFIDENCE = 0.8
COMPLEX_DATASET_COLUMNS = 5


class DataInsights:
    """Utility class for turning column profiles and relationships into readable insights"""

    @staticmethod
    def generate_insights(columns, relationships):
        """Generate pattern, trend and recommendation insights.

        Pattern insights (one per numeric column) come first, then one trend
        insight per relationship, then at most one recommendation.
        """
        insights = []

        for col in columns:
            if col['type'] == 'number' and 'min' in col.get('stats', {}):
                insights.append(DataInsights.describe_distribution(col))

        for rel in relationships:
            insights.append({
                'type': 'trend',
                'title': 'Relationship Discovery',
                'description': rel['description'],
                'confidence': rel['strength'],
                'affectedColumns': [rel['column1'], rel['column2']]
            })

        if len(columns) > COMPLEX_DATASET_COLUMNS:
            insights.append({
                'type': 'recommendation',
                'title': 'Data Complexity',
                'description': ('Your dataset has multiple variables. Consider focusing on the '
                                 'strongest relationships for initial analysis.'),
                'confidence': RECOMMENDATION_CONFIDENCE,
                'affectedColumns': [col['name'] for col in columns]
            })

        return insights

    @staticmethod
    def describe_distribution(column):
        """Pattern insight describing the range and average of a numeric column"""
        stats = column['stats']
        name = column['name']

        return {
            'type': 'pattern',
            'title': f"Data Distribution in {name}",
            'description': (f"The {name} column shows values ranging from {stats['min']:.2f} "
                            f"to {stats['max']:.2f} with an average of {stats['avg']:.2f}."),
            'confidence': PATTERN_CONFIDENCE,
            'affectedColumns': [name]
        }
