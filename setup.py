"""
Woodcrest AI Setup Instructions

To run this application on your local system:

1. Install Python 3.11+ if not already installed

2. Create a virtual environment:
   python -m venv woodcrest_env

3. Activate the virtual environment:
   - Windows: woodcrest_env\\Scripts\\activate
   - Mac/Linux: source woodcrest_env/bin/activate

4. Install the application and its packages:
   pip install -e .            (add ".[test]" for pytest)

5. Set environment variables (optional, a .env file is read too):
   - SESSION_SECRET=your-secret-key-here
   - DATABASE_URL=sqlite:///woodcrest.db (default)
   - GEMINI_API_KEY=your-gemini-api-key (without it analyses use the local fallback)
   - GEMINI_MODEL=gemini-2.5-flash (default)
   - UPLOAD_FOLDER=uploads, EXPORT_FOLDER=exports
   - LOG_LEVEL=INFO

6. Run the application:
   python app.py

   Or with gunicorn:
   gunicorn --bind 0.0.0.0:5000 "app:create_app()"

7. Run the tests:
   pytest

File Structure:
├── app.py                      # Flask app factory and configuration
├── models.py                   # Database models (analyses, SQL history)
├── routes.py                   # JSON API routes
├── data_analysis.py            # Local analysis pipeline (fallback path)
├── ai_client.py                # Gemini client: analysis, SQL, chat
├── analyzers/
│   ├── data_type_analyzer.py   # Column type inference and statistics
│   └── relationship_analyzer.py # Pearson correlation between columns
├── parsers/
│   ├── file_parser.py          # Base parser and factory
│   ├── csv_parser.py           # CSV parser
│   └── excel_parser.py         # Excel parser
├── utils/
│   ├── data_insights.py        # Insight generation
│   ├── chart_configs.py        # Chart configuration synthesis
│   ├── ai_analysis.py          # AI analysis with local fallback
│   ├── sql_generation.py       # Natural language to SQL + mock execution
│   ├── data_chat.py            # Chat about a saved analysis
│   └── export_utils.py         # Export functionality
└── tests/                      # pytest suite
"""
from setuptools import setup

setup(
    name="woodcrest-ai",
    version="0.1.0",
    description="Upload tabular data, generate AI insights and charts, and turn questions into SQL",
    python_requires=">=3.9",
    py_modules=["app", "models", "routes", "data_analysis", "ai_client"],
    packages=["analyzers", "parsers", "utils"],
    install_requires=[
        "Flask>=2.3.3",
        "Flask-SQLAlchemy>=3.0.5",
        "Werkzeug>=2.3.7",
        "gunicorn>=21.2.0",
        "pandas>=2.1.1",
        "numpy>=1.25.2",
        "openpyxl>=3.1.2",
        "xlrd>=2.0.1",
        "sqlparse>=0.4.4",
        "google-genai>=1.0.0",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "test": ["pytest>=7.4"],
    },
)
