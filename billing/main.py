import logging
import os

from dotenv import load_dotenv
from flask import Flask, jsonify
from flask_cors import CORS

from billing.models import db
from billing.seed import init_database
from billing.blueprints.products import bp as products_bp
from billing.blueprints.bills import bp as bills_bp
from billing.blueprints.admin import admin_bp
from billing.utils.debug_routes import register_debug_routes

BASE_DIR = os.path.dirname(__file__)
ENV_PATH = os.path.join(os.path.dirname(BASE_DIR), "instance", ".env")


def _normalize_database_url(raw_url: str) -> str:
    """
    Hosted Postgres hands out DATABASE_URL as:
      - postgres://...  (needs postgresql+psycopg://)
    and requires SSL.
    """
    if not raw_url:
        # local SQLite file (billing/database/billing.db)
        return f"sqlite:///{os.path.join(BASE_DIR, 'database', 'billing.db')}"
    url = raw_url
    if url.startswith("postgres://"):
        url = "postgresql+psycopg://" + url[len("postgres://"):]
    elif url.startswith("postgresql://"):
        # add the psycopg driver if none is given
        url = "postgresql+psycopg://" + url[len("postgresql://"):]
    if "postgresql+psycopg://" in url and "sslmode=" not in url:
        sep = "&" if "?" in url else "?"
        url = f"{url}{sep}sslmode=require"
    return url


def _env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes")


def create_app(config=None) -> Flask:
    if os.path.exists(ENV_PATH):
        load_dotenv(ENV_PATH)

    app = Flask(__name__)
    app.config["SECRET_KEY"] = os.getenv("SECRET_KEY", "billing_dev_secret_key")

    raw_db_url = os.getenv("SQLALCHEMY_DATABASE_URI") or os.getenv("DATABASE_URL", "")
    app.config["SQLALCHEMY_DATABASE_URI"] = _normalize_database_url(raw_db_url)
    app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False
    app.config["SQLALCHEMY_ENGINE_OPTIONS"] = {"pool_pre_ping": True}
    app.config["RESET_STOCK_DEFAULT"] = int(os.getenv("RESET_STOCK_DEFAULT", "500"))
    app.config["SEED_CATALOG"] = _env_flag("SEED_CATALOG", "1")
    app.config["DEBUG_ROUTES"] = _env_flag("DEBUG_ROUTES")
    app.config["CORS_ORIGINS"] = os.getenv("CORS_ORIGINS", "*")
    app.config["LOG_LEVEL"] = os.getenv("LOG_LEVEL", "INFO").upper()
    if config:
        app.config.update(config)

    logging.basicConfig(level=app.config["LOG_LEVEL"])

    origins = app.config["CORS_ORIGINS"]
    if isinstance(origins, str) and origins != "*":
        origins = [o.strip() for o in origins.split(",") if o.strip()]
    CORS(app, resources={r"/*": {"origins": origins}})

    # Database
    db.init_app(app)
    with app.app_context():
        if app.config["SQLALCHEMY_DATABASE_URI"].startswith("sqlite:///"):
            os.makedirs(os.path.join(BASE_DIR, "database"), exist_ok=True)
        init_database(seed=app.config["SEED_CATALOG"])

    @app.get("/health")
    def health():
        return jsonify({"status": "healthy", "service": "Billing Backend"}), 200

    @app.errorhandler(404)
    def not_found(_e):
        return jsonify({"error": "Not found"}), 404

    @app.errorhandler(405)
    def method_not_allowed(_e):
        return jsonify({"error": "Method not allowed"}), 405

    @app.errorhandler(500)
    def server_error(_e):
        return jsonify({"error": "Internal server error"}), 500

    app.register_blueprint(products_bp)
    app.register_blueprint(bills_bp)
    app.register_blueprint(admin_bp)
    register_debug_routes(app)

    return app
