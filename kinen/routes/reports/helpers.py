"""Shared helper functions for report routes."""

from __future__ import annotations

from datetime import date
from typing import Dict, List, Tuple

from flask import current_app, url_for

from kinen.services.tables import PageInfo
from kinen.utils.date_range import app_today
from kinen.utils.filter_params import FilterStore


def app_tz() -> str:
    return current_app.config["APP_TIMEZONE"]


def today() -> date:
    return app_today(tz=app_tz())


def store_from_args(args) -> FilterStore:
    return FilterStore.from_args(
        args,
        tz=app_tz(),
        max_months=current_app.config["MAX_RANGE_MONTHS"],
    )


def index_url(store: FilterStore) -> str:
    return url_for("reports.index", **store.to_args())


def tab_urls(store: FilterStore) -> Dict[str, str]:
    urls: Dict[str, str] = {}
    for name, summary in (("detail", False), ("summary", True)):
        preview = store.copy()
        preview.select_tab(summary)
        urls[name] = index_url(preview)
    return urls


def page_url(store: FilterStore, page: int) -> str:
    preview = store.copy()
    preview.set_page(page)
    return index_url(preview)


def page_size_options(store: FilterStore) -> List[Tuple[int, str]]:
    options: List[Tuple[int, str]] = []
    for size in current_app.config["PAGE_SIZE_OPTIONS"]:
        preview = store.copy()
        preview.set_page_size(size)
        options.append((size, index_url(preview)))
    return options


def pagination(store: FilterStore, page: PageInfo) -> Dict[str, object]:
    return {
        "page": page,
        "previous_url": page_url(store, page.current_page - 1) if page.has_previous else None,
        "next_url": page_url(store, page.current_page + 1) if page.has_next else None,
        "page_sizes": page_size_options(store),
        "page_size": store.criteria.page_size,
    }


def form_defaults(store: FilterStore) -> Dict[str, str]:
    """Prefill the filter form from the URL state."""
    criteria = store.criteria
    return {
        "code": criteria.code,
        "start_date": criteria.start_date,
        "end_date": criteria.end_date,
        "data_type": criteria.data_type or "SALES",
        "summary": "true" if criteria.summary else "",
    }


__all__ = [
    "app_tz",
    "form_defaults",
    "index_url",
    "page_size_options",
    "page_url",
    "pagination",
    "store_from_args",
    "tab_urls",
    "today",
]
