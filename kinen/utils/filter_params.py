# filter_params.py
import logging
from dataclasses import dataclass, fields, replace
from datetime import date
from typing import Any, Dict, Literal, Mapping, Optional
from urllib.parse import urlencode

from kinen.errors import ValidationError

from .date_range import APP_TIMEZONE, parse_day
from .validation import DATA_TYPES, MAX_RANGE_MONTHS, FilterForm, check_date_range

logger = logging.getLogger("kinen.filters")

Variant = Literal["detail", "summary"]

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10

# Order of keys in the serialized query string
URL_KEYS = ("code", "start_date", "end_date", "data_type", "summary", "page", "page_size")


def _parse_int(value: Any, default: int) -> int:
    try:
        parsed = int(str(value).strip())
    except (TypeError, ValueError):
        return default
    return parsed if parsed >= 1 else default


def _parse_bool(value: Any) -> bool:
    return str(value or "").strip().lower() == "true"


@dataclass(frozen=True)
class FilterCriteria:
    code: str = ""
    start: Optional[date] = None
    end: Optional[date] = None
    data_type: str = ""
    summary: bool = False
    page: int = DEFAULT_PAGE
    page_size: int = DEFAULT_PAGE_SIZE

    @property
    def start_date(self) -> str:
        return self.start.isoformat() if self.start else ""

    @property
    def end_date(self) -> str:
        return self.end.isoformat() if self.end else ""

    @property
    def has_active_filter(self) -> bool:
        """True once any scoping field is set; shows the tabs and results area."""
        return bool(self.code or self.start_date or self.end_date or self.data_type)

    @property
    def is_query_ready(self) -> bool:
        """All of code, both dates and type are set; only then is a report fetched."""
        return bool(self.code and self.start and self.end and self.data_type)

    @property
    def active_variant(self) -> Optional[Variant]:
        if not self.has_active_filter:
            return None
        return "summary" if self.summary else "detail"

    # -------- URL path --------
    @classmethod
    def from_args(cls, args: Mapping[str, Any], tz: str = APP_TIMEZONE) -> "FilterCriteria":
        """
        Build criteria from URL query args.

        Missing or unparseable values fall back to their defaults, so any URL
        yields a usable state.
        """
        data_type = str(args.get("data_type") or "")
        if data_type not in DATA_TYPES:
            data_type = ""

        return cls(
            code=str(args.get("code") or ""),
            start=parse_day(str(args.get("start_date") or ""), tz),
            end=parse_day(str(args.get("end_date") or ""), tz),
            data_type=data_type,
            summary=_parse_bool(args.get("summary")),
            page=_parse_int(args.get("page"), DEFAULT_PAGE),
            page_size=_parse_int(args.get("page_size"), DEFAULT_PAGE_SIZE),
        )

    def to_args(self) -> Dict[str, str]:
        """Query args in ``URL_KEYS`` order with default values left out."""
        values = {
            "code": self.code,
            "start_date": self.start_date,
            "end_date": self.end_date,
            "data_type": self.data_type,
            "summary": "true" if self.summary else "",
            "page": str(self.page) if self.page != DEFAULT_PAGE else "",
            "page_size": str(self.page_size) if self.page_size != DEFAULT_PAGE_SIZE else "",
        }
        return {key: values[key] for key in URL_KEYS if values[key]}

    def to_query(self) -> str:
        return urlencode(self.to_args())


_FIELD_NAMES = {f.name for f in fields(FilterCriteria)}


class FilterStore:
    """Own the authoritative ``FilterCriteria`` for one page view.

    The URL is the persistent copy: build the store from ``request.args``,
    mutate it through ``update`` (or one of the named transitions), then
    redirect to ``to_args()``.
    """

    def __init__(
        self,
        criteria: Optional[FilterCriteria] = None,
        max_months: int = MAX_RANGE_MONTHS,
    ):
        self._criteria = criteria or FilterCriteria()
        self.max_months = max_months

    @classmethod
    def from_args(
        cls,
        args: Mapping[str, Any],
        tz: str = APP_TIMEZONE,
        max_months: int = MAX_RANGE_MONTHS,
    ) -> "FilterStore":
        return cls(FilterCriteria.from_args(args, tz), max_months=max_months)

    @property
    def criteria(self) -> FilterCriteria:
        return self._criteria

    def update(self, **patch: Any) -> FilterCriteria:
        unknown = set(patch) - _FIELD_NAMES
        if unknown:
            raise TypeError(f"Unknown filter fields: {sorted(unknown)}")

        candidate = replace(self._criteria, **patch)
        if "start" in patch or "end" in patch:
            errors = check_date_range(candidate.start, candidate.end, self.max_months)
            if errors:
                raise ValidationError("Invalid date range", errors)

        self._criteria = candidate
        logger.debug("Filter state updated: %s", candidate.to_args())
        return candidate

    def submit(self, form: FilterForm) -> FilterCriteria:
        """Apply a validated filter form; always starts from the first page."""
        return self.update(
            code=form.code,
            start=form.start,
            end=form.end,
            data_type=form.data_type,
            summary=form.summary,
            page=DEFAULT_PAGE,
        )

    def select_tab(self, summary: bool) -> FilterCriteria:
        return self.update(summary=summary)

    def set_page(self, page: int) -> FilterCriteria:
        return self.update(page=max(int(page), DEFAULT_PAGE))

    def set_page_size(self, page_size: int) -> FilterCriteria:
        return self.update(page=DEFAULT_PAGE, page_size=max(int(page_size), 1))

    def copy(self) -> "FilterStore":
        """Independent store for previewing a transition (links, tabs)."""
        return FilterStore(self._criteria, max_months=self.max_months)

    def to_args(self) -> Dict[str, str]:
        return self._criteria.to_args()

    def to_query(self) -> str:
        return self._criteria.to_query()


__all__ = [
    "DEFAULT_PAGE",
    "DEFAULT_PAGE_SIZE",
    "FilterCriteria",
    "FilterStore",
    "URL_KEYS",
    "Variant",
]
