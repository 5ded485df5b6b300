"""
Hosted AI backend: Woodcrest dataset analysis, SQL generation and data chat

```mermaid
flowchart TD
  A[Parsed upload rows] --> B[Build dataset summary (types + samples)]
  B --> C[Prompt Gemini (google-genai) for JSON: summary, insights, chartConfigs]
  C --> D[Extract JSON from the response]
  D --> E[Caller enhances charts with real data]
  F[Table schemas + request] --> G[Prompt Gemini for SQL] --> H[Strip code fences]
  I[Saved analysis + question] --> J[Prompt Gemini as data analyst] --> K[Answer text]
```

Every failure (missing key, SDK error, empty or unparseable response) surfaces
as AIServiceError so callers can fall back to local behaviour.
"""

import json
import logging
import math
import re
from typing import Any, Dict, List

from google import genai
from google.genai import types

from analyzers.data_type_analyzer import is_number, looks_like_date, to_number

DEFAULT_MODEL = "gemini-2.5-flash"
ANALYSIS_SAMPLE_ROWS = 100


class AIServiceError(RuntimeError):
    """Raised when the hosted AI backend cannot produce a usable answer"""


ANALYSIS_PROMPT_TEMPLATE = """
You are a data analyst AI. Analyze the following dataset and provide insights and chart recommendations.

Dataset Information:
- File: {file_name}
- Total Rows: {total_rows}
- Columns: {column_names}

Column Details:
{column_details}

Sample Data (first 10 rows):
{sample_rows}

Please provide a JSON response with the following structure:
{{
  "summary": "Brief overview of the dataset and key findings",
  "insights": [
    {{
      "type": "trend|outlier|pattern|recommendation",
      "title": "Insight title",
      "description": "Detailed description of the insight",
      "confidence": 0.8,
      "affectedColumns": ["column1", "column2"]
    }}
  ],
  "chartConfigs": [
    {{
      "type": "bar|line|scatter|pie|histogram",
      "title": "Chart title",
      "description": "What this chart shows",
      "data": {{
        "labels": ["label1", "label2"],
        "datasets": [{{"label": "Dataset name", "data": [1, 2]}}]
      }}
    }}
  ]
}}

Guidelines:
1. Generate 10 meaningful insights based on the data
2. Create 8 relevant charts that best visualize the data relationships
3. Use appropriate chart types for the data (bar for categories, scatter for correlations, etc.)
4. Ensure chart data uses actual values from the dataset
5. Provide actionable recommendations where possible
6. Focus on the most significant patterns and relationships
"""

SQL_PROMPT_TEMPLATE = """You are an expert SQL developer. Generate SQL queries based on the provided database schema and user requirements.

Database Schema:
{schema}

Guidelines:
1. Generate clean, well-formatted SQL queries
2. Use proper SQL syntax and best practices
3. Include appropriate JOINs when multiple tables are involved
4. Add comments to explain complex parts
5. Use meaningful aliases for tables and columns
6. Consider performance optimizations where applicable
7. Return ONLY the SQL query, no additional text or formatting

User Request: {prompt}"""

CHAT_PROMPT_TEMPLATE = """You are an expert data analyst AI assistant helping users understand their specific data analysis. You have access to the following information about their data:

File: {fileName}
Total Rows: {totalRows}
Total Columns: {totalColumns}
Columns: {columns}
Analysis Date: {analysisDate}

AI Insights Generated:
{insights}

Charts/Visualizations Created:
{charts}

Sample Data (first few rows):
{sample_rows}

Guidelines for your responses:
1. Be conversational and helpful
2. Reference specific insights, charts, or data points when relevant
3. Provide actionable advice when asked
4. Explain complex concepts in simple terms
5. If asked about something not in the data, politely redirect to what you can help with
6. Keep responses focused and concise but informative
7. Use the actual data and insights to support your answers

The user is asking about their specific data analysis, so always relate your answers back to their actual data, insights, and visualizations."""


def extract_json(text: str) -> Dict[str, Any]:
    """Parse a JSON object out of a model response.
    Falls back to the span between the first '{' and the last '}'.
    """
    try:
        return json.loads(text)
    except (TypeError, ValueError):
        start = text.find('{')
        end = text.rfind('}')
        if start != -1 and end != -1 and end > start:
            try:
                return json.loads(text[start:end + 1])
            except ValueError:
                raise AIServiceError(f'Failed to parse JSON from Gemini. Raw response (first 1000 chars): {text[:1000]}')
        raise AIServiceError(f'No JSON object found in Gemini response. Raw response (first 1000 chars): {text[:1000]}')


def strip_code_fences(sql: str) -> str:
    sql = re.sub(r'^```sql\s*', '', sql, flags=re.IGNORECASE)
    sql = re.sub(r'^```\s*', '', sql)
    sql = re.sub(r'\s*```$', '', sql)
    return sql.strip()


def summarize_column_type(values: List[Any]) -> str:
    """Rough column type for the prompt; numbers first, then dates, then booleans"""
    non_null = [v for v in values if v is not None and v != '']
    if not non_null:
        return 'unknown'
    if all(is_number(v) for v in non_null):
        return 'number'
    if any(looks_like_date(v) for v in non_null):
        return 'date'
    if all(str(v).lower() in ('true', 'false', '1', '0', 'yes', 'no') for v in non_null):
        return 'boolean'
    return 'string'


def describe_insight(index: int, insight: Dict[str, Any]) -> str:
    """One numbered insight for the chat prompt; unreadable confidence counts as 0%"""
    confidence = to_number(insight.get('confidence'))
    percent = round(confidence * 100) if math.isfinite(confidence) else 0
    columns = insight.get('affectedColumns')
    columns = ', '.join(str(col) for col in columns) if isinstance(columns, list) else ''
    return (f"{index + 1}. {insight.get('title')} ({insight.get('type')}, {percent}% confidence)\n"
            f"     Description: {insight.get('description')}\n"
            f"     Affected Columns: {columns}")


def build_dataset_summary(records: List[Dict[str, Any]], file_name: str) -> Dict[str, Any]:
    """Compact description of a dataset to include in the analysis prompt"""
    sample = records[:ANALYSIS_SAMPLE_ROWS]
    columns = list(sample[0].keys()) if sample else []
    return {
        'fileName': file_name,
        'totalRows': len(records),
        'columns': [{
            'name': col,
            'type': summarize_column_type([row.get(col) for row in sample]),
            'sampleValues': [row.get(col) for row in sample[:5]],
        } for col in columns],
        'sampleRows': sample[:10],
    }


class AIClient:
    """Thin wrapper around the Google Gen AI SDK"""

    def __init__(self, api_key=None, model=DEFAULT_MODEL):
        self.api_key = api_key
        self.model = model
        self._client = None

    def _get_client(self):
        if self._client is None:
            if not self.api_key:
                raise AIServiceError('GEMINI_API_KEY is not configured')
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    def _generate(self, contents, system_instruction=None, temperature=None, max_output_tokens=None):
        client = self._get_client()
        config = types.GenerateContentConfig(
            system_instruction=system_instruction,
            temperature=temperature,
            max_output_tokens=max_output_tokens,
        )
        logging.info(f"Sending prompt to Gemini model {self.model} ({len(contents)} chars)")
        try:
            resp = client.models.generate_content(model=self.model, contents=contents, config=config)
            text = resp.text
        except Exception as e:
            raise AIServiceError(f'Gemini request failed: {str(e)}') from e

        if not text:
            raise AIServiceError('No response from Gemini')
        return text

    def analyze_dataset(self, records: List[Dict[str, Any]], file_name: str) -> Dict[str, Any]:
        """Ask the model for a summary, insights and chart suggestions"""
        summary = build_dataset_summary(records, file_name)
        column_details = '\n'.join(
            f"- {col['name']} ({col['type']}): Sample values: {', '.join(str(v) for v in col['sampleValues'])}"
            for col in summary['columns']
        )
        prompt = ANALYSIS_PROMPT_TEMPLATE.format(
            file_name=file_name,
            total_rows=summary['totalRows'],
            column_names=', '.join(col['name'] for col in summary['columns']),
            column_details=column_details,
            sample_rows=json.dumps(summary['sampleRows'], indent=2, default=str),
        )

        text = self._generate(
            prompt,
            system_instruction='You are an expert data analyst. Always respond with valid JSON only, no additional text or formatting.',
            temperature=0.3,
            max_output_tokens=4000,
        )
        result = extract_json(text)
        if not isinstance(result, dict):
            raise AIServiceError('Invalid response format from AI analysis')

        result.setdefault('summary', '')
        result.setdefault('insights', [])
        result.setdefault('chartConfigs', [])
        return result

    def generate_sql(self, tables: List[Dict[str, Any]], prompt: str) -> str:
        """Turn a natural-language request into SQL against the given table schemas"""
        schema = '\n'.join(
            f"\nTable: {table.get('name')}\nDescription: {table.get('description', '')}\nColumns:\n"
            + '\n'.join(
                f"  - {col.get('name')} ({col.get('type')}): {col.get('description', '')}"
                for col in table.get('columns') or [] if isinstance(col, dict)
            )
            for table in tables
        )
        text = self._generate(
            prompt,
            system_instruction=SQL_PROMPT_TEMPLATE.format(schema=schema, prompt=prompt),
            temperature=0.1,
            max_output_tokens=1000,
        )
        sql = strip_code_fences(text.strip())
        if not sql:
            raise AIServiceError('No SQL query generated')
        return sql

    def chat(self, message: str, context: Dict[str, Any]) -> str:
        """Answer a question about a saved analysis"""
        insights = '\n\n'.join(
            describe_insight(i, insight)
            for i, insight in enumerate(
                insight for insight in context.get('insights', []) if isinstance(insight, dict))
        )
        charts = '\n\n'.join(
            f"{i + 1}. {chart.get('title') or f'Chart {i + 1}'} (Type: {chart.get('type')})\n"
            f"     Description: {chart.get('description') or 'No description available'}"
            for i, chart in enumerate(context.get('charts', []))
        )
        system_prompt = CHAT_PROMPT_TEMPLATE.format(
            fileName=context.get('fileName'),
            totalRows=context.get('totalRows', 0),
            totalColumns=context.get('totalColumns', 0),
            columns=', '.join(context.get('columns', [])),
            analysisDate=context.get('analysisDate'),
            insights=insights,
            charts=charts,
            sample_rows=json.dumps(context.get('sampleData', [])[:5], indent=2, default=str),
        )
        return self._generate(
            message,
            system_instruction=system_prompt,
            temperature=0.7,
            max_output_tokens=1000,
        )
