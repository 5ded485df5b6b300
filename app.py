import os
import logging
from dotenv import load_dotenv
from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix

# Load environment (.env is optional)
load_dotenv()

# Configure logging
logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO"))


def create_app(config=None):
    """Application factory pattern"""
    app = Flask(__name__)
    app.secret_key = os.environ.get("SESSION_SECRET", "dev-secret-key-change-in-production")
    app.wsgi_app = ProxyFix(app.wsgi_app, x_proto=1, x_host=1)

    # Configure the database
    app.config["SQLALCHEMY_DATABASE_URI"] = os.environ.get("DATABASE_URL", "sqlite:///woodcrest.db")
    app.config["SQLALCHEMY_ENGINE_OPTIONS"] = {
        "pool_recycle": 300,
        "pool_pre_ping": True,
    }

    # Configure upload and export settings
    app.config['MAX_CONTENT_LENGTH'] = int(os.environ.get("MAX_CONTENT_LENGTH", 50 * 1024 * 1024))  # 50MB max file size
    app.config['UPLOAD_FOLDER'] = os.environ.get("UPLOAD_FOLDER", 'uploads')
    app.config['EXPORT_FOLDER'] = os.environ.get("EXPORT_FOLDER", 'exports')

    # Hosted AI backend
    app.config['GEMINI_API_KEY'] = os.environ.get("GEMINI_API_KEY")
    app.config['GEMINI_MODEL'] = os.environ.get("GEMINI_MODEL", "gemini-2.5-flash")

    if config:
        app.config.update(config)

    if not app.config['GEMINI_API_KEY']:
        logging.warning("GEMINI_API_KEY not set; analyses will use the local fallback.")

    # Create upload directory if it doesn't exist
    os.makedirs(app.config['UPLOAD_FOLDER'], exist_ok=True)

    # Initialize extensions
    from models import db
    db.init_app(app)

    from ai_client import AIClient
    app.extensions['ai_client'] = AIClient(
        api_key=app.config['GEMINI_API_KEY'],
        model=app.config['GEMINI_MODEL'],
    )

    # Register routes
    from routes import register_routes
    register_routes(app)

    with app.app_context():
        # Create all database tables
        db.create_all()

    return app


if __name__ == '__main__':
    create_app().run(host='0.0.0.0', port=5000, debug=True)
