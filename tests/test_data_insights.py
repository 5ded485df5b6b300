from utils.data_insights import DataInsights


def numeric(name, lo, avg, hi):
    return {"name": name, "type": "number", "values": [lo, hi],
            "stats": {"min": lo, "max": hi, "avg": avg, "median": hi, "uniqueCount": 2}}


def test_pattern_insight_for_numeric_column():
    [insight] = DataInsights.generate_insights([numeric("price", 1, 2.5, 4)], [])
    assert insight == {
        "type": "pattern",
        "title": "Data Distribution in price",
        "description": "The price column shows values ranging from 1.00 to 4.00 with an average of 2.50.",
        "confidence": 0.9,
        "affectedColumns": ["price"],
    }


def test_trend_insight_copies_relationship():
    rel = {"column1": "a", "column2": "b", "type": "independence", "strength": 0.55,
           "description": "Moderate negative relationship between a and b"}
    [insight] = DataInsights.generate_insights([], [rel])
    assert insight["type"] == "trend"
    assert insight["title"] == "Relationship Discovery"
    assert insight["confidence"] == 0.55
    assert insight["description"] == rel["description"]
    assert insight["affectedColumns"] == ["a", "b"]


def test_string_columns_get_no_pattern_insight():
    column = {"name": "x", "type": "string", "values": ["a"], "stats": {"uniqueCount": 1}}
    assert DataInsights.generate_insights([column], []) == []


def test_recommendation_confidence_and_columns():
    columns = [{"name": f"c{i}", "type": "date", "values": [], "stats": {"uniqueCount": 0}} for i in range(6)]
    [insight] = DataInsights.generate_insights(columns, [])
    assert insight["type"] == "recommendation"
    assert insight["title"] == "Data Complexity"
    assert insight["confidence"] == 0.8
    assert insight["affectedColumns"] == [f"c{i}" for i in range(6)]
