"""Reports index view: filter form, tabs and the active report table."""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

from flask import current_app, redirect, render_template, request

from kinen.errors import AuthorizationError, KinenError, describe_error
from kinen.routes import get_report_client
from kinen.services.query_builder import build_active_params
from kinen.services.session import AuthSession
from kinen.services.tables import render_table, row_type
from kinen.utils.filter_params import FilterStore
from kinen.utils.validation import DEFAULT_DATA_TYPE, check_date_range, validate_filter_form

from . import bp, login_required
from .helpers import (
    app_tz,
    form_defaults,
    index_url,
    pagination,
    store_from_args,
    tab_urls,
    today,
)

logger = logging.getLogger("kinen.reports")


def _render_index(
    auth: AuthSession,
    store: FilterStore,
    form: Optional[Mapping[str, Any]] = None,
    form_errors: Optional[Dict[str, str]] = None,
    status: int = 200,
):
    criteria = store.criteria
    errors = dict(form_errors or {})

    range_errors = check_date_range(
        criteria.start, criteria.end, current_app.config["MAX_RANGE_MONTHS"]
    )
    variant, params = (None, None) if range_errors else build_active_params(criteria)
    if not form_errors:
        errors.update(range_errors)

    report = None
    report_error = None
    table_html = ""
    if params is not None:
        try:
            report = get_report_client(auth).fetch(variant, params)
        except AuthorizationError:
            raise
        except KinenError as exc:
            report_error = describe_error(exc)
            logger.warning("Loading %s report failed: %s", variant, report_error.message)

    if report is not None and report.rows:
        row_cls = row_type(criteria.data_type or DEFAULT_DATA_TYPE, summary=criteria.summary)
        table_html = render_table(report.rows, row_cls, app_tz())

    return (
        render_template(
            "index.html",
            auth=auth,
            criteria=criteria,
            form=form if form is not None else form_defaults(store),
            errors=errors,
            variant=variant,
            report=report,
            report_error=report_error,
            table_html=table_html,
            tabs=tab_urls(store) if criteria.has_active_filter else {},
            paging=pagination(store, report.page) if report is not None else None,
            max_range_days=current_app.config["MAX_RANGE_DAYS"],
            today=today().isoformat(),
        ),
        status,
    )


@login_required
def index(auth: AuthSession):
    return _render_index(auth, store_from_args(request.args))


@login_required
def submit(auth: AuthSession):
    """Validate the filter form and move the URL to the new state."""
    store = store_from_args(request.args)
    result = validate_filter_form(
        request.form,
        today=today(),
        tz=app_tz(),
        max_months=current_app.config["MAX_RANGE_MONTHS"],
    )
    if not result.ok:
        return _render_index(auth, store, form=request.form, form_errors=result.errors, status=400)

    store.submit(result.value)
    return redirect(index_url(store))


bp.add_url_rule("/", view_func=index, methods=["GET"])
bp.add_url_rule("/", endpoint="submit", view_func=submit, methods=["POST"])
