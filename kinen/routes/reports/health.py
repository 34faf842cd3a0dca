"""Healthcheck endpoint."""

from __future__ import annotations

from flask import current_app, jsonify

from . import bp


@bp.route("/health", methods=["GET"])
def health():
    return (
        jsonify(
            {
                "ok": True,
                "api_base_url": current_app.config["API_BASE_URL"],
                "timezone": current_app.config["APP_TIMEZONE"],
            }
        ),
        200,
    )
