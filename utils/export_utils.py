import json
import csv
import os
import re
from datetime import datetime
from html import escape

from models import make_json_serializable


class ExportUtils:
    """Utility class for exporting saved analyses in various formats"""

    def __init__(self, export_dir="exports"):
        self.export_dir = export_dir
        os.makedirs(self.export_dir, exist_ok=True)

    def export(self, analysis, format_type, name):
        """Export an analysis in the specified format and return the file path"""
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        base_name = re.sub(r'\.[^/.]+$', '', name)
        base_name = re.sub(r'[^\w\-]+', '_', base_name) or 'analysis'
        filename = f"{base_name}_analysis_{timestamp}"

        if format_type.lower() == 'json':
            return self._export_json(analysis, filename)
        elif format_type.lower() == 'csv':
            return self._export_csv(analysis, filename)
        elif format_type.lower() == 'html':
            return self._export_html(analysis, filename)
        elif format_type.lower() == 'txt':
            return self._export_text(analysis, filename)
        else:
            raise ValueError(f"Unsupported export format: {format_type}")

    def build_summary(self, analysis):
        file_data = analysis.get('file_data') or []
        return {
            'totalRows': len(file_data),
            'totalColumns': len(file_data[0]) if file_data else 0,
            'totalCharts': len(analysis.get('charts_config') or []),
            'totalInsights': len(analysis.get('insights') or []),
            'analysisDate': analysis.get('created_at')
        }

    def _export_json(self, analysis, filename):
        """Export the analysis as JSON"""
        filepath = os.path.join(self.export_dir, f"{filename}.json")

        payload = {
            'fileName': analysis.get('file_name'),
            'summary': self.build_summary(analysis),
            'overview': analysis.get('summary', ''),
            'insights': analysis.get('insights') or [],
            'charts': analysis.get('charts_config') or []
        }

        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(make_json_serializable(payload), f, indent=2, ensure_ascii=False)

        return filepath

    def _export_csv(self, analysis, filename):
        """Export insights and charts as CSV, one row each"""
        filepath = os.path.join(self.export_dir, f"{filename}.csv")

        fieldnames = ['record_type', 'type', 'title', 'description', 'confidence', 'affected_columns']

        with open(filepath, 'w', newline='', encoding='utf-8') as f:
            writer = csv.DictWriter(f, fieldnames=fieldnames)
            writer.writeheader()
            writer.writerows(self._flatten_for_csv(analysis))

        return filepath

    def _flatten_for_csv(self, analysis):
        rows = []

        for insight in analysis.get('insights') or []:
            rows.append({
                'record_type': 'insight',
                'type': insight.get('type', ''),
                'title': insight.get('title', ''),
                'description': insight.get('description', ''),
                'confidence': insight.get('confidence', ''),
                'affected_columns': ', '.join(insight.get('affectedColumns') or [])
            })

        for chart in analysis.get('charts_config') or []:
            rows.append({
                'record_type': 'chart',
                'type': chart.get('type', ''),
                'title': chart.get('title', ''),
                'description': chart.get('description', ''),
                'confidence': '',
                'affected_columns': ''
            })

        return rows

    def _export_html(self, analysis, filename):
        """Export the analysis as an HTML report"""
        filepath = os.path.join(self.export_dir, f"{filename}.html")

        with open(filepath, 'w', encoding='utf-8') as f:
            f.write(self._generate_html_report(analysis))

        return filepath

    def _export_text(self, analysis, filename):
        """Export the analysis as a plain text report"""
        filepath = os.path.join(self.export_dir, f"{filename}.txt")

        with open(filepath, 'w', encoding='utf-8') as f:
            f.write(self._generate_text_report(analysis))

        return filepath

    def _generate_html_report(self, analysis):
        summary = self.build_summary(analysis)
        file_name = escape(str(analysis.get('file_name', '')))

        html = f"""
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Woodcrest AI Analysis Report - {file_name}</title>
    <style>
        body {{ font-family: Arial, sans-serif; margin: 20px; line-height: 1.6; }}
        .header {{ background-color: #f4f4f4; padding: 20px; border-radius: 5px; margin-bottom: 20px; }}
        .section {{ margin-bottom: 30px; }}
        table {{ border-collapse: collapse; width: 100%; margin-bottom: 20px; }}
        th, td {{ border: 1px solid #ddd; padding: 8px; text-align: left; }}
        th {{ background-color: #f2f2f2; }}
        .metric {{ background-color: #e7f3ff; padding: 10px; border-radius: 3px; margin: 5px 0; }}
    </style>
</head>
<body>
    <div class="header">
        <h1>Data Analysis Report</h1>
        <p><strong>File:</strong> {file_name}</p>
        <p><strong>Generated:</strong> {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}</p>
        <p>{escape(str(analysis.get('summary') or ''))}</p>
    </div>

    <div class="section">
        <h2>Summary</h2>
        <div class="metric">Total Rows: {summary['totalRows']}</div>
        <div class="metric">Total Columns: {summary['totalColumns']}</div>
        <div class="metric">Charts: {summary['totalCharts']}</div>
        <div class="metric">Insights: {summary['totalInsights']}</div>
    </div>
"""

        html += """
    <div class="section">
        <h2>Insights</h2>
        <table>
            <tr>
                <th>Type</th>
                <th>Title</th>
                <th>Description</th>
                <th>Confidence</th>
                <th>Columns</th>
            </tr>
"""
        for insight in analysis.get('insights') or []:
            html += f"""
            <tr>
                <td>{escape(str(insight.get('type', '')))}</td>
                <td>{escape(str(insight.get('title', '')))}</td>
                <td>{escape(str(insight.get('description', '')))}</td>
                <td>{float(insight.get('confidence') or 0) * 100:.0f}%</td>
                <td>{escape(', '.join(insight.get('affectedColumns') or []))}</td>
            </tr>
"""
        html += """
        </table>
    </div>

    <div class="section">
        <h2>Charts</h2>
        <ul>
"""
        for chart in analysis.get('charts_config') or []:
            html += f"            <li>{escape(str(chart.get('title', '')))} ({escape(str(chart.get('type', '')))})</li>\n"

        html += """
        </ul>
    </div>
</body>
</html>
"""

        return html

    def _generate_text_report(self, analysis):
        summary = self.build_summary(analysis)

        report = f"""
DATA ANALYSIS REPORT
{'=' * 50}

File: {analysis.get('file_name', '')}
Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}

SUMMARY
{'-' * 20}
Total Rows: {summary['totalRows']}
Total Columns: {summary['totalColumns']}
Charts: {summary['totalCharts']}
Insights: {summary['totalInsights']}
{analysis.get('summary') or ''}

INSIGHTS
{'-' * 30}
"""
        for insight in analysis.get('insights') or []:
            report += f"[{insight.get('type', '')}] {insight.get('title', '')}\n"
            report += f"{insight.get('description', '')}\n"
            report += f"Confidence: {float(insight.get('confidence') or 0) * 100:.0f}%\n"
            report += f"Columns: {', '.join(insight.get('affectedColumns') or [])}\n"
            report += f"{'-' * 40}\n"

        report += f"\nCHARTS\n{'-' * 30}\n"
        for i, chart in enumerate(analysis.get('charts_config') or []):
            report += f"{i + 1}. {chart.get('title', '')} ({chart.get('type', '')})\n"

        return report
