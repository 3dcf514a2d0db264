"""Application factory and app-wide configuration."""

import logging
from typing import Optional

from flask import Flask
from flask_cors import CORS

from retirement_sim.app.api.routes import api_bp
from retirement_sim.config import Settings, get_settings


def create_app(settings: Optional[Settings] = None) -> Flask:
    """Build the Flask app instance."""
    settings = settings or get_settings()

    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = Flask(__name__)
    app.config["SETTINGS"] = settings

    CORS(
        app,
        resources={rf"{settings.API_PREFIX}/*": {"origins": settings.CORS_ORIGIN_URLS}},
        supports_credentials=True,
    )

    app.register_blueprint(api_bp, url_prefix=settings.API_PREFIX)
    return app
