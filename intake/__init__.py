# intake/__init__.py
import logging
import os

from dotenv import load_dotenv
from flask import Flask, jsonify

from intake.routes import core, inquiry_bp, quotation_bp, chat_bp
from intake.services.messenger_hub import DEFAULT_HUB_URL
from intake.utils.rate_limit import (
    DEFAULT_MAX_PER_WINDOW,
    DEFAULT_SWEEP_SECONDS,
    DEFAULT_WINDOW_SECONDS,
    build_rate_limiter,
)

load_dotenv(dotenv_path=".env")

logger = logging.getLogger(__name__)


def _env_config():
    return {
        "RATE_LIMIT_ENABLED": os.getenv("RATE_LIMIT_ENABLED", "1") == "1",
        "RATE_LIMIT_BACKEND": os.getenv("RATE_LIMIT_BACKEND", "memory"),
        "RATE_LIMIT_MAX_PER_WINDOW": int(
            os.getenv("RATE_LIMIT_MAX_PER_WINDOW", DEFAULT_MAX_PER_WINDOW)
        ),
        "RATE_LIMIT_WINDOW_SECONDS": int(
            os.getenv("RATE_LIMIT_WINDOW_SECONDS", DEFAULT_WINDOW_SECONDS)
        ),
        "RATE_LIMIT_SWEEP_SECONDS": int(
            os.getenv("RATE_LIMIT_SWEEP_SECONDS", DEFAULT_SWEEP_SECONDS)
        ),
        "REDIS_URL": os.getenv("REDIS_URL", "redis://127.0.0.1:6379/0"),
        "NOTIFICATION_EMAIL": os.getenv("NOTIFICATION_EMAIL", "").strip() or None,
        "MESSENGER_HUB_URL": os.getenv("MESSENGER_HUB_URL") or DEFAULT_HUB_URL,
        "MESSENGER_HUB_TIMEOUT": float(os.getenv("MESSENGER_HUB_TIMEOUT", "10")),
        "LOG_LEVEL": os.getenv("LOG_LEVEL", "INFO").upper(),
    }


def create_app(config=None, rate_limiter=None):
    app = Flask(__name__)
    app.url_map.strict_slashes = False
    app.config.update(_env_config())
    if config:
        app.config.update(config)

    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    if rate_limiter is None:
        rate_limiter = build_rate_limiter(app.config)
    app.extensions["rate_limiter"] = rate_limiter

    @app.errorhandler(404)
    def handle_not_found(e):
        return jsonify({"error": "Not found"}), 404

    @app.errorhandler(405)
    def handle_method_not_allowed(e):
        return jsonify({"error": "Method not allowed"}), 405

    @app.errorhandler(500)
    def handle_internal_error(e):
        logger.error("[app] unhandled error: %s", getattr(e, "original_exception", e))
        return jsonify({"error": "Internal server error"}), 500

    app.register_blueprint(core)
    app.register_blueprint(inquiry_bp)
    app.register_blueprint(quotation_bp)
    app.register_blueprint(chat_bp)

    for rule in app.url_map.iter_rules():
        logger.debug("route %s methods=%s", rule, sorted(rule.methods or ()))

    if not app.config["NOTIFICATION_EMAIL"]:
        logger.warning("NOTIFICATION_EMAIL not set; staff notifications will fail")

    return app
