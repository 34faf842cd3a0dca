"""Application factory for the Kinen affiliation dashboard."""

from __future__ import annotations

import logging

from typing import Any, Mapping, Optional, Union

import requests
from flask import Flask, redirect, url_for

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("kinen")

from .config import Config
from .errors import AuthorizationError
from .routes import unauthorized_guard
from .routes.auth import bp as auth_bp
from .routes.reports import bp as reports_bp


def create_app(
    config_object: Optional[Union[str, Mapping[str, Any], type]] = None,
) -> Flask:
    """Create and configure the Flask application."""
    app = Flask(__name__)

    if config_object is None:
        app.config.from_object(Config)
    elif isinstance(config_object, Mapping):
        app.config.from_object(Config)
        app.config.from_mapping(config_object)
    else:
        app.config.from_object(config_object)

    http = requests.Session()
    http.headers.update({"Accept": "application/json"})
    app.extensions["http"] = http

    app.register_blueprint(auth_bp)
    app.register_blueprint(reports_bp)

    @app.errorhandler(AuthorizationError)
    def handle_unauthorized(exc: AuthorizationError):
        # Backend rejected the token: drop it and start over at sign-in.
        logger.info("Backend returned 401; redirecting to sign-in")
        unauthorized_guard()()
        return redirect(url_for("auth.login"))

    return app


__all__ = ["create_app"]
