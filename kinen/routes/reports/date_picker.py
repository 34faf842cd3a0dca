"""Endpoints backing the report date-range picker."""

from __future__ import annotations

from flask import current_app, jsonify, request

from kinen.utils.date_range import (
    DateRangeSelection,
    PickerRules,
    apply_selection,
    clamp_selection,
    disabled_days,
    format_display_date,
    format_request_date,
)

from . import bp
from .helpers import app_tz, today


def _flag(name: str, default: bool) -> bool:
    raw = request.args.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _max_days(raw) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return current_app.config["MAX_RANGE_DAYS"]
    return value if value > 0 else current_app.config["MAX_RANGE_DAYS"]


@bp.route("/date-range/disabled", methods=["GET"])
def disabled():
    """Days of one calendar month the picker must grey out."""
    tz = app_tz()
    month = (request.args.get("month") or today().strftime("%Y-%m")).strip()
    try:
        year, month_num = (int(part) for part in month.split("-", 1))
        if not (1 <= year <= 9999 and 1 <= month_num <= 12):
            raise ValueError(month)
    except ValueError:
        return jsonify({"error": "month must look like YYYY-MM"}), 400

    try:
        selection = DateRangeSelection.from_values(
            request.args.get("from"), request.args.get("to"), tz
        )
    except (ValueError, OverflowError):
        return jsonify({"error": "from/to must be ISO dates"}), 400

    rules = PickerRules(
        today=today(),
        past_allowed=_flag("past", True),
        future_allowed=_flag("future", True),
        today_allowed=_flag("today", True),
        max_days=_max_days(request.args.get("max_days")),
        pending_from=selection.start,
        pending_to=selection.end,
        tz=tz,
    )
    days = disabled_days(year, month_num, rules)
    return jsonify({"month": f"{year:04d}-{month_num:02d}", "disabled": [d.isoformat() for d in days]})


@bp.route("/date-range/apply", methods=["POST"])
def apply():
    """Clamp and apply a picked range; returns both instants and form values."""
    tz = app_tz()
    payload = request.get_json(silent=True) or {}
    try:
        selection = DateRangeSelection.from_values(payload.get("from"), payload.get("to"), tz)
    except (ValueError, OverflowError):
        return jsonify({"error": "from/to must be ISO dates"}), 400

    if selection.is_empty:
        return jsonify({"from": None, "to": None, "start_date": "", "end_date": "", "label": ""})

    clamped = clamp_selection(selection, _max_days(payload.get("max_days")), tz)
    applied = apply_selection(clamped, tz)

    start_label = format_display_date(applied.start, tz) if applied.start is not None else ""
    end_label = format_display_date(applied.end, tz) if applied.end is not None else ""
    return jsonify(
        {
            "from": format_request_date(applied.start, tz),
            "to": format_request_date(applied.end, tz),
            "start_date": applied.start.date().isoformat() if applied.start is not None else "",
            "end_date": applied.end.date().isoformat() if applied.end is not None else "",
            "label": " - ".join(part for part in (start_label, end_label) if part),
        }
    )
