import os
import logging
import uuid
from flask import request, jsonify, send_file, current_app
from werkzeug.utils import secure_filename
from models import db, Analysis, SQLQuery, make_json_serializable
from parsers.file_parser import FileParserFactory
from data_analysis import analyze_data
from utils.ai_analysis import analyze_with_ai
from utils.data_chat import chat_with_analysis
from utils.data_insights import INSIGHT_TYPES
from utils.export_utils import ExportUtils
from utils.sql_generation import (SQLGenerationError, execute_sample_query,
                                  generate_sql_query, refine_prompt)

ALLOWED_EXTENSIONS = {'csv', 'xls', 'xlsx'}
RECENT_ANALYSES = 5


def allowed_file(filename):
    """Check if file extension is allowed"""
    return '.' in filename and \
           filename.rsplit('.', 1)[1].lower() in ALLOWED_EXTENSIONS


def error_response(message, status):
    return jsonify({
        'status': 'error',
        'message': message
    }), status


def get_ai_client():
    return current_app.extensions['ai_client']


def get_payload():
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def valid_tables(tables):
    return isinstance(tables, list) and all(isinstance(table, dict) for table in tables)


def register_routes(app):
    """Register all routes with the Flask app"""

    # =======================
    # ANALYSES
    # =======================
    @app.route('/api/analyses', methods=['POST'])
    def api_create_analysis():
        """Upload a CSV/Excel file, analyze it and save the result"""
        file = request.files.get('file')

        if not file or file.filename == '':
            return error_response('No file selected', 400)

        if not allowed_file(file.filename):
            return error_response('Unsupported file format. Please upload CSV or Excel files.', 400)

        filename = secure_filename(file.filename) or 'upload'
        file_type = file.filename.rsplit('.', 1)[1].lower()
        file_path = os.path.join(current_app.config['UPLOAD_FOLDER'], f"{uuid.uuid4().hex}_{filename}")
        file.save(file_path)

        try:
            logging.info(f"Parsing file: {file.filename}")
            parser = FileParserFactory().get_parser(file_type)
            data = parser.parse(file_path)
        except ValueError as e:
            return error_response(str(e), 400)
        finally:
            os.remove(file_path)

        if not data:
            return error_response('The uploaded file contains no data rows', 400)

        try:
            result = analyze_with_ai(data, file.filename, get_ai_client())

            analysis = Analysis(file_name=file.filename)
            analysis.set_results(data, result)
            db.session.add(analysis)
            db.session.commit()

            return jsonify({
                'status': 'success',
                'message': 'Analysis completed successfully',
                'analysis': analysis.to_dict()
            })

        except Exception as e:
            db.session.rollback()
            logging.error(f"Analysis error: {str(e)}")
            return error_response(f'Analysis failed: {str(e)}', 500)

    @app.route('/api/analyze', methods=['POST'])
    def api_analyze_records():
        """Run the local statistical analysis on posted records without saving"""
        payload = get_payload()
        data = payload.get('data')

        if not isinstance(data, list) or not all(isinstance(row, dict) for row in data):
            return error_response('data must be a list of records', 400)

        return jsonify({
            'status': 'success',
            'results': make_json_serializable(analyze_data(data))
        })

    @app.route('/api/analyses')
    def api_list_analyses():
        """List saved analyses, newest first"""
        analyses = Analysis.query.order_by(Analysis.created_at.desc()).all()
        return jsonify({
            'status': 'success',
            'analyses': [analysis.to_dict(include_data=False) for analysis in analyses]
        })

    @app.route('/api/analyses/<int:analysis_id>')
    def api_get_analysis(analysis_id):
        analysis = db.session.get(Analysis, analysis_id)

        if not analysis:
            return error_response('Analysis not found', 404)

        return jsonify({
            'status': 'success',
            'analysis': analysis.to_dict()
        })

    @app.route('/api/analyses/<int:analysis_id>', methods=['DELETE'])
    def api_delete_analysis(analysis_id):
        analysis = db.session.get(Analysis, analysis_id)

        if not analysis:
            return error_response('Analysis not found', 404)

        file_name = analysis.file_name
        db.session.delete(analysis)
        db.session.commit()

        return jsonify({
            'status': 'success',
            'message': 'Analysis deleted successfully',
            'file_name': file_name
        })

    @app.route('/api/insights')
    def api_list_insights():
        """All insights across saved analyses, optionally filtered by type"""
        insight_type = request.args.get('type', 'all')

        if insight_type != 'all' and insight_type not in INSIGHT_TYPES:
            return error_response(f'Unknown insight type: {insight_type}', 400)

        insights = []
        for analysis in Analysis.query.order_by(Analysis.created_at.desc()).all():
            created_at = analysis.created_at.isoformat() if analysis.created_at else None
            for insight in analysis.get_insights():
                if insight_type == 'all' or insight.get('type') == insight_type:
                    insights.append(dict(insight, fileName=analysis.file_name, createdAt=created_at))

        return jsonify({
            'status': 'success',
            'insights': insights
        })

    @app.route('/api/dashboard')
    def api_dashboard():
        analyses = Analysis.query.order_by(Analysis.created_at.desc()).all()

        return jsonify({
            'status': 'success',
            'stats': {
                'totalAnalyses': len(analyses),
                'chartsGenerated': sum(len(a.get_charts_config()) for a in analyses),
                'sqlQueriesGenerated': SQLQuery.query.count(),
                'lastAnalysis': analyses[0].created_at.isoformat() if analyses else None
            },
            'recent_analyses': [a.to_dict(include_data=False) for a in analyses[:RECENT_ANALYSES]]
        })

    @app.route('/api/analyses/<int:analysis_id>/export/<format>')
    def api_export_analysis(analysis_id, format):
        """Export a saved analysis as json, csv, html or txt"""
        analysis = db.session.get(Analysis, analysis_id)

        if not analysis:
            return error_response('Analysis not found', 404)

        try:
            export_utils = ExportUtils(current_app.config['EXPORT_FOLDER'])
            file_path = export_utils.export(analysis.to_dict(), format, analysis.file_name)
        except ValueError as e:
            return error_response(str(e), 400)
        except OSError as e:
            logging.error(f"Export error: {str(e)}")
            return error_response(f'Export failed: {str(e)}', 500)

        return send_file(os.path.abspath(file_path), as_attachment=True)

    @app.route('/api/analyses/<int:analysis_id>/chat', methods=['POST'])
    def api_chat(analysis_id):
        analysis = db.session.get(Analysis, analysis_id)

        if not analysis:
            return error_response('Analysis not found', 404)

        payload = get_payload()
        message = payload.get('message')
        if not isinstance(message, str) or not message.strip():
            return error_response('Message is required', 400)

        response = chat_with_analysis(message, analysis.to_dict(), get_ai_client())
        return jsonify({
            'status': 'success',
            'response': response
        })

    # =======================
    # SQL GENERATOR
    # =======================
    @app.route('/api/sql/generate', methods=['POST'])
    def api_generate_sql():
        payload = get_payload()
        tables = payload.get('tables') or []
        prompt = payload.get('prompt') or ''
        current_sql = payload.get('currentSql')

        if not valid_tables(tables):
            return error_response('tables must be a list of table schemas', 400)
        if not isinstance(prompt, str) or not isinstance(current_sql, (str, type(None))):
            return error_response('prompt and currentSql must be strings', 400)

        if current_sql and prompt.strip():
            prompt = refine_prompt(prompt, current_sql)

        try:
            sql = generate_sql_query(tables, prompt, get_ai_client())
        except SQLGenerationError as e:
            return error_response(str(e), 400)

        return jsonify({
            'status': 'success',
            'sql': sql
        })

    @app.route('/api/sql/execute', methods=['POST'])
    def api_execute_sql():
        """Mock execution returning generated sample rows"""
        payload = get_payload()
        sql = payload.get('sql')
        tables = payload.get('tables') or []

        if not isinstance(sql, str) or not sql.strip():
            return error_response('No query to execute', 400)
        if not valid_tables(tables):
            return error_response('tables must be a list of table schemas', 400)

        return jsonify({
            'status': 'success',
            'result': execute_sample_query(sql, tables)
        })

    @app.route('/api/sql/queries', methods=['POST'])
    def api_save_query():
        payload = get_payload()
        prompt = payload.get('prompt') or ''
        sql = payload.get('sql') or ''

        if not isinstance(prompt, str) or not isinstance(sql, str) or not prompt.strip() or not sql.strip():
            return error_response('No query to save', 400)

        prompt = prompt.strip()
        query = SQLQuery(title=SQLQuery.make_title(prompt), prompt=prompt, sql_query=sql.strip())
        query.set_tables(payload.get('tables') or [])
        query.set_execution_result(payload.get('executionResult'))
        db.session.add(query)
        db.session.commit()

        return jsonify({
            'status': 'success',
            'query': query.to_dict()
        })

    @app.route('/api/sql/queries')
    def api_list_queries():
        queries = SQLQuery.query.order_by(SQLQuery.created_at.desc()).all()
        return jsonify({
            'status': 'success',
            'queries': [query.to_dict() for query in queries]
        })

    @app.route('/api/sql/queries/<int:query_id>', methods=['DELETE'])
    def api_delete_query(query_id):
        query = db.session.get(SQLQuery, query_id)

        if not query:
            return error_response('Query not found', 404)

        db.session.delete(query)
        db.session.commit()

        return jsonify({
            'status': 'success',
            'message': 'Query deleted successfully'
        })
