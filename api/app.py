"""Flask application factory."""

from __future__ import annotations

from flask import Flask, jsonify, request
from flask_cors import CORS

from api.routes import api_bp
from config import configure_logging, settings


def create_app() -> Flask:
    """Create and configure the Flask application."""
    configure_logging()

    app = Flask(__name__)
    app.config["SECRET_KEY"] = settings.flask_secret_key
    app.config["MAX_CONTENT_LENGTH"] = settings.max_upload_size_mb * 1024 * 1024

    CORS(app, origins=settings.cors_origins)

    app.register_blueprint(api_bp)

    @app.route("/api/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    # --- Error handlers ---

    @app.errorhandler(413)
    def too_large(e):
        return jsonify({
            "error": "File too large",
            "details": f"Maximum upload size is {settings.max_upload_size_mb}MB",
        }), 413

    @app.errorhandler(404)
    def not_found(e):
        return jsonify({"error": "Not found", "path": request.path}), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify({"error": "Method not allowed"}), 405

    return app
