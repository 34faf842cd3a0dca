"""Derive backend report parameters from filter criteria."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple
from urllib.parse import urlencode

from kinen.utils.filter_params import FilterCriteria, Variant

DETAIL_ORDER_BY = "created_at"
DETAIL_ORDERING = "desc"


@dataclass(frozen=True)
class ReportQueryParams:
    """Request parameters for one report call. Never stored, always derived."""

    code: str
    start_date: str
    end_date: str
    data_type: str
    page: int
    page_size: int
    order_by_fields: Optional[str] = None
    ordering: Optional[str] = None

    def to_body(self) -> Dict[str, Any]:
        """JSON body; the backend wants the query repeated here."""
        body: Dict[str, Any] = {
            "code": self.code,
            "start_date": self.start_date,
            "end_date": self.end_date,
            "data_type": self.data_type,
            "page": self.page,
            "page_size": self.page_size,
        }
        if self.order_by_fields is not None:
            body["order_by_fields"] = self.order_by_fields
        if self.ordering is not None:
            body["ordering"] = self.ordering
        return body

    def to_query_string(self) -> str:
        """Query string with empty fields dropped; an omitted field means no filter."""
        pairs = [
            (key, str(value))
            for key, value in self.to_body().items()
            if value is not None and value != ""
        ]
        return urlencode(pairs)


def _base(criteria: FilterCriteria) -> Dict[str, Any]:
    return {
        "code": criteria.code,
        "start_date": criteria.start_date,
        "end_date": criteria.end_date,
        "data_type": criteria.data_type,
        "page": criteria.page,
        "page_size": criteria.page_size,
    }


def build_detail_params(criteria: FilterCriteria) -> ReportQueryParams:
    return ReportQueryParams(
        **_base(criteria),
        order_by_fields=DETAIL_ORDER_BY,
        ordering=DETAIL_ORDERING,
    )


def build_summary_params(criteria: FilterCriteria) -> ReportQueryParams:
    return ReportQueryParams(**_base(criteria))


def build_active_params(
    criteria: FilterCriteria,
) -> Tuple[Optional[Variant], Optional[ReportQueryParams]]:
    """Params for whichever report the criteria select.

    Returns ``(None, None)`` until code, both dates and type are all set, so
    no partially scoped query is ever issued. ``has_active_filter`` alone
    only decides whether the results area is shown.
    """
    if not criteria.is_query_ready:
        return None, None
    variant = criteria.active_variant
    if variant == "detail":
        return variant, build_detail_params(criteria)
    if variant == "summary":
        return variant, build_summary_params(criteria)
    return None, None


__all__ = [
    "DETAIL_ORDERING",
    "DETAIL_ORDER_BY",
    "ReportQueryParams",
    "build_active_params",
    "build_detail_params",
    "build_summary_params",
]
