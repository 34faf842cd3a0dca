"""Sign-in and sign-out."""

from __future__ import annotations

import logging
from typing import Optional

from flask import Blueprint, redirect, render_template, request, session, url_for

from kinen.utils.validation import validate_login_form

from . import get_session_manager

bp = Blueprint("auth", __name__)
logger = logging.getLogger("kinen.auth")


def _safe_next(target: Optional[str]) -> Optional[str]:
    """Only follow same-site relative redirects."""
    if target and target.startswith("/") and not target.startswith("//"):
        return target
    return None


@bp.route("/auth/login/", methods=["GET", "POST"])
def login():
    manager = get_session_manager()
    next_url = _safe_next(request.values.get("next"))

    if request.method == "GET":
        if manager.current() is not None:
            return redirect(next_url or url_for("reports.index"))
        return render_template("login.html", form={}, errors={}, error=None, next_url=next_url)

    result = validate_login_form(request.form)
    if not result.ok:
        return (
            render_template(
                "login.html",
                form=request.form,
                errors=result.errors,
                error=None,
                next_url=next_url,
            ),
            400,
        )

    outcome = manager.login(result.value.email, result.value.password)
    if not outcome.ok:
        logger.info("Sign-in failed for %s", result.value.email)
        return (
            render_template(
                "login.html",
                form={"email": result.value.email},
                errors={},
                error=outcome.error.message,
                next_url=next_url,
            ),
            401,
        )

    session.permanent = True
    return redirect(next_url or outcome.redirect_to)


@bp.route("/auth/logout", methods=["GET", "POST"])
def logout():
    get_session_manager().sign_out()
    return redirect(url_for("auth.login"))
