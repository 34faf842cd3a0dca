"""Flask blueprints and the per-request service accessors they share."""

from __future__ import annotations

from typing import Optional

from flask import current_app, g, session

from kinen.services.report_client import RedirectOnce, ReportClient
from kinen.services.session import AuthSession, SessionManager


def get_http():
    return current_app.extensions["http"]


def get_session_manager() -> SessionManager:
    return SessionManager(
        current_app.config["API_BASE_URL"],
        session,
        timeout=current_app.config["REQUEST_TIMEOUT"],
        http=get_http(),
    )


def unauthorized_guard() -> RedirectOnce:
    """The request's single sign-out-on-401 handler."""
    if "unauthorized" not in g:
        g.unauthorized = RedirectOnce(get_session_manager().sign_out)
    return g.unauthorized


def get_report_client(auth: Optional[AuthSession]) -> ReportClient:
    return ReportClient(
        current_app.config["API_BASE_URL"],
        auth=auth,
        timeout=current_app.config["REQUEST_TIMEOUT"],
        retries=current_app.config["REQUEST_RETRIES"],
        http=get_http(),
        on_unauthorized=unauthorized_guard(),
    )


__all__ = ["get_http", "get_report_client", "get_session_manager", "unauthorized_guard"]
