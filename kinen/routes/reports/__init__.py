"""Reports blueprint package."""

from __future__ import annotations

from functools import wraps

from flask import Blueprint, redirect, request, url_for

from kinen.routes import get_session_manager

bp = Blueprint("reports", __name__)


def login_required(view):
    """Resolve the signed-in session and hand it to the view as ``auth``."""

    @wraps(view)
    def wrapped(*args, **kwargs):
        auth = get_session_manager().current()
        if auth is None:
            return redirect(url_for("auth.login", next=request.full_path.rstrip("?")))
        return view(auth, *args, **kwargs)

    return wrapped


from . import date_picker, health, views  # noqa: E402,F401

__all__ = ["bp", "login_required"]
