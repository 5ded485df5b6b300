import logging

from ai_client import AIServiceError

CONTEXT_SAMPLE_ROWS = 10


def build_analysis_context(analysis):
    """Condense a saved analysis into the context handed to the chat model"""
    file_data = analysis.get('file_data') or []
    columns = list(file_data[0].keys()) if file_data else []
    return {
        'fileName': analysis.get('file_name'),
        'totalRows': len(file_data),
        'totalColumns': len(columns),
        'columns': columns,
        'insights': analysis.get('insights') or [],
        'charts': analysis.get('charts_config') or [],
        'sampleData': file_data[:CONTEXT_SAMPLE_ROWS],
        'analysisDate': analysis.get('created_at')
    }


def chat_with_analysis(message, analysis, client):
    """Answer a question about an analysis, with a keyword-based fallback"""
    try:
        response = client.chat(message, build_analysis_context(analysis))
    except AIServiceError as e:
        logging.warning(f"Chat falling back to canned answers: {str(e)}")
        return generate_fallback_response(message, analysis)

    return response or ('I apologize, but I could not generate a response. '
                        'Please try rephrasing your question.')


def _numbered(items, separator='\n\n'):
    return separator.join(f"{i + 1}. {item}" for i, item in enumerate(items))


def generate_fallback_response(message, analysis):
    lower_message = message.lower()
    insights = analysis.get('insights') or []
    charts = analysis.get('charts_config') or []
    file_data = analysis.get('file_data') or []
    file_name = analysis.get('file_name')

    if any(word in lower_message for word in ('insight', 'key', 'important')) and insights:
        return ("Based on your data analysis, here are the key insights I found:\n\n"
                + _numbered(f"{i.get('title', '')}: {i.get('description', '')}" for i in insights[:3]))

    if any(word in lower_message for word in ('chart', 'visualization', 'graph')) and charts:
        return (f"Your analysis includes {len(charts)} visualizations:\n\n"
                + _numbered((f"{c.get('title') or f'Chart {n + 1}'} ({c.get('type')})"
                             for n, c in enumerate(charts)), separator='\n'))

    if any(word in lower_message for word in ('data', 'rows', 'columns')):
        columns = list(file_data[0].keys()) if file_data else []
        return (f'Your dataset "{file_name}" contains:\n\n'
                f"• {len(file_data)} rows of data\n"
                f"• {len(columns)} columns: {', '.join(columns)}\n\n"
                "This gives you a comprehensive view of your data structure.")

    if any(word in lower_message for word in ('recommend', 'suggestion', 'advice')):
        recommendations = [i for i in insights if i.get('type') == 'recommendation']
        if recommendations:
            return ("Here are my recommendations based on your data:\n\n"
                    + _numbered(f"{r.get('title', '')}: {r.get('description', '')}" for r in recommendations))

    return (f'I understand you\'re asking about "{message}". While I\'m having trouble connecting to '
            f'the AI service right now, I can tell you that your analysis of "{file_name}" contains '
            f"{len(file_data)} rows of data with {len(insights)} AI-generated insights and "
            f"{len(charts)} visualizations. Please try asking a more specific question about your "
            "data, insights, or charts.")
