from flask_sqlalchemy import SQLAlchemy
from datetime import datetime
import json
import numpy as np
import pandas as pd

db = SQLAlchemy()

TITLE_LENGTH = 100


def make_json_serializable(obj):
    """Convert numpy types and other non-serializable objects to JSON-compatible types"""
    if isinstance(obj, dict):
        return {key: make_json_serializable(value) for key, value in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [make_json_serializable(item) for item in obj]
    elif isinstance(obj, (np.bool_, bool)):
        return bool(obj)
    elif isinstance(obj, np.integer):
        return int(obj)
    elif isinstance(obj, (float, np.floating)):
        return float(obj) if np.isfinite(obj) else None
    elif isinstance(obj, np.ndarray):
        return obj.tolist()
    elif isinstance(obj, (str, int)) or obj is None:
        return obj
    elif pd.isna(obj):
        return None
    elif hasattr(obj, 'isoformat'):  # datetime objects
        return obj.isoformat()
    elif hasattr(obj, 'item'):  # numpy scalars
        return obj.item()
    else:
        return obj


def _dump(value):
    return json.dumps(make_json_serializable(value))


def _load(text, default):
    return json.loads(text) if text else default


class Analysis(db.Model):
    """Saved analysis of one uploaded file"""
    id = db.Column(db.Integer, primary_key=True)
    file_name = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    summary = db.Column(db.Text, default='')
    source = db.Column(db.String(20), default='ai')
    file_data = db.Column(db.Text)  # JSON list of records
    insights = db.Column(db.Text)  # JSON list of insights
    charts_config = db.Column(db.Text)  # JSON list of chart configs

    def set_results(self, data, result):
        """Store the uploaded rows together with an analysis result"""
        self.file_data = _dump(data)
        self.insights = _dump(result.get('insights', []))
        self.charts_config = _dump(result.get('chartConfigs', []))
        self.summary = result.get('summary', '')
        self.source = result.get('source', 'ai')

    def get_file_data(self):
        return _load(self.file_data, [])

    def get_insights(self):
        return _load(self.insights, [])

    def get_charts_config(self):
        return _load(self.charts_config, [])

    def to_dict(self, include_data=True):
        result = {
            'id': self.id,
            'file_name': self.file_name,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'summary': self.summary,
            'source': self.source,
            'insights': self.get_insights(),
            'charts_config': self.get_charts_config()
        }
        file_data = self.get_file_data()
        result['row_count'] = len(file_data)
        if include_data:
            result['file_data'] = file_data
        return result


class SQLQuery(db.Model):
    """Generated SQL query saved to the user's history"""
    __tablename__ = 'sql_query'

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    prompt = db.Column(db.Text, nullable=False)
    sql_query = db.Column(db.Text, nullable=False)
    table_schemas = db.Column(db.Text)
    execution_result = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    @staticmethod
    def make_title(prompt):
        return prompt[:TITLE_LENGTH] + ('...' if len(prompt) > TITLE_LENGTH else '')

    def set_tables(self, tables):
        self.table_schemas = _dump(tables)

    def set_execution_result(self, result):
        self.execution_result = _dump(result) if result is not None else None

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'prompt': self.prompt,
            'sql_query': self.sql_query,
            'table_schemas': _load(self.table_schemas, []),
            'execution_result': _load(self.execution_result, None),
            'created_at': self.created_at.isoformat() if self.created_at else None
        }
