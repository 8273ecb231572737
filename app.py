import logging
import os
import uuid

from flask import Flask, g, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from config import Config
from extensions import db, limiter, migrate
from routes.auth_routes import auth_bp
from routes.dashboard_routes import dashboard_bp
from routes.fee_routes import fee_bp
from routes.student_routes import student_bp
from routes.whatsapp_routes import whatsapp_bp
from utils.errors import MadarsaError


def _configure_logging(app):
    level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    app.logger.setLevel(level)


def _register_error_handlers(app):
    @app.errorhandler(MadarsaError)
    def _madarsa_error(exc):
        return jsonify({"success": False, "error": exc.message}), exc.status_code

    @app.errorhandler(HTTPException)
    def _http_error(exc):
        return jsonify({"success": False, "error": exc.description or exc.name}), exc.code

    @app.errorhandler(Exception)
    def _server_error(exc):
        app.logger.exception("Unhandled error on request %s", getattr(g, "request_id", "-"))
        return jsonify({"success": False, "error": "Server Error"}), 500


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)
    _configure_logging(app)

    db.init_app(app)
    migrate.init_app(app, db)
    limiter.init_app(app)
    CORS(app, origins=app.config.get("CORS_ORIGINS", []), supports_credentials=True)

    # Assign a per-request correlation id for tracing
    @app.before_request
    def _assign_request_id():
        g.request_id = uuid.uuid4().hex[:16]

    # Basic hardening headers on every response
    @app.after_request
    def _set_security_headers(resp):
        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        resp.headers.setdefault("X-Frame-Options", "SAMEORIGIN")
        resp.headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
        if app.config.get("SESSION_COOKIE_SECURE", False):
            resp.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
        return resp

    app.register_blueprint(auth_bp)
    app.register_blueprint(student_bp)
    app.register_blueprint(fee_bp)
    app.register_blueprint(dashboard_bp)
    app.register_blueprint(whatsapp_bp)
    _register_error_handlers(app)

    @app.route("/api/health")
    def health():
        return jsonify({"success": True, "message": "Madarsa Management System API is running"})

    with app.app_context():
        db.create_all()

    if app.config.get("SCHEDULER_ENABLED"):
        from scheduler import start_scheduler

        app.extensions["fee_scheduler"] = start_scheduler(app)

    app.logger.info("Madarsa API started")
    return app


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=int(os.environ.get("PORT", "5000")))
