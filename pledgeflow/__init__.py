# pledgeflow/__init__.py
from flask import Flask, jsonify
from dotenv import load_dotenv
from werkzeug.exceptions import HTTPException

from pledgeflow.config import Settings
from pledgeflow.errors import ApiError
from pledgeflow.routes import admin_bp, config_bp, core, cron_bp, pledges_bp

load_dotenv(dotenv_path=".env")


def create_app(settings: Settings | None = None):
    settings = settings or Settings.from_env()

    app = Flask(__name__)
    app.url_map.strict_slashes = False
    app.config["SETTINGS"] = settings

    missing = settings.missing()
    if missing:
        print(f"*** missing configuration: {', '.join(missing)}")

    @app.errorhandler(ApiError)
    def handle_api_error(e: ApiError):
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(404)
    def handle_not_found(e):
        return jsonify({"error": "not found"}), 404

    @app.errorhandler(405)
    def handle_method_not_allowed(e):
        return jsonify({"error": "Method not allowed"}), 405

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        if isinstance(e, HTTPException):
            return jsonify({"error": e.description}), e.code
        print(f"[error] {type(e).__name__}: {e}")
        return jsonify({"error": str(e)}), 500

    app.register_blueprint(core)
    app.register_blueprint(config_bp)
    app.register_blueprint(pledges_bp)
    app.register_blueprint(cron_bp)
    app.register_blueprint(admin_bp)

    return app
