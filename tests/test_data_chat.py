from ai_client import AIClient
from utils.data_chat import build_analysis_context, chat_with_analysis, generate_fallback_response

ANALYSIS = {
    "file_name": "sales.csv",
    "created_at": "2024-03-01T10:00:00",
    "file_data": [{"region": "north", "sales": 10}, {"region": "south", "sales": 20}],
    "insights": [
        {"type": "pattern", "title": "Spread", "description": "Sales vary", "confidence": 0.9,
         "affectedColumns": ["sales"]},
        {"type": "recommendation", "title": "Focus", "description": "Look at north", "confidence": 0.8,
         "affectedColumns": ["region"]},
    ],
    "charts_config": [{"type": "bar", "title": "Sales by region"}, {"type": "pie"}],
}


def test_build_analysis_context():
    context = build_analysis_context(ANALYSIS)
    assert context["fileName"] == "sales.csv"
    assert context["totalRows"] == 2
    assert context["totalColumns"] == 2
    assert context["columns"] == ["region", "sales"]
    assert context["charts"] == ANALYSIS["charts_config"]
    assert context["analysisDate"] == "2024-03-01T10:00:00"


def test_chat_uses_ai_answer(ai_client):
    ai_client.chat_response = "North sells less."
    assert chat_with_analysis("Who sells more?", ANALYSIS, ai_client) == "North sells less."


def test_chat_falls_back_when_service_unavailable(ai_client):
    response = chat_with_analysis("What are the key insights?", ANALYSIS, ai_client)
    assert response.startswith("Based on your data analysis")
    assert "1. Spread: Sales vary" in response


def test_fallback_charts():
    response = generate_fallback_response("Explain the charts", ANALYSIS)
    assert "2 visualizations" in response
    assert "2. Chart 2 (pie)" in response


def test_fallback_dataset_shape():
    response = generate_fallback_response("how many rows?", ANALYSIS)
    assert "• 2 rows of data" in response
    assert "• 2 columns: region, sales" in response


def test_fallback_recommendations():
    response = generate_fallback_response("any advice?", ANALYSIS)
    assert response == "Here are my recommendations based on your data:\n\n1. Focus: Look at north"


def test_fallback_generic_answer():
    response = generate_fallback_response("hello", ANALYSIS)
    assert '"hello"' in response
    assert "2 AI-generated insights" in response


def test_chat_falls_back_for_saved_insight_with_text_confidence():
    analysis = dict(ANALYSIS, insights=[{"type": "trend", "title": "Growth", "confidence": "high"}])
    response = chat_with_analysis("key findings?", analysis, AIClient(api_key=None))
    assert response.startswith("Based on your data analysis")
    assert "1. Growth: " in response
