"""Report row models and HTML table rendering."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, ClassVar, Dict, List, Mapping, Optional, Sequence, Tuple, Type, Union

import pandas as pd

from kinen.utils.date_range import APP_TIMEZONE, format_display_date

TABLE_CLASSES = "table table-sm table-striped table-hover"
EMPTY_CELL = "-"


@dataclass(frozen=True)
class Column:
    key: str
    header: str
    kind: str = "text"  # text | date | amount | count


class ReportRow:
    """Base for the four row shapes; ``COLUMNS`` drives rendering."""

    DATA_TYPE: ClassVar[str]
    SUMMARY: ClassVar[bool]
    COLUMNS: ClassVar[Tuple[Column, ...]]

    @classmethod
    def from_api(cls, item: Mapping[str, Any]):
        return cls(**{f.name: item.get(f.name) for f in fields(cls)})


@dataclass(frozen=True)
class SalesRow(ReportRow):
    DATA_TYPE: ClassVar[str] = "SALES"
    SUMMARY: ClassVar[bool] = False
    COLUMNS: ClassVar[Tuple[Column, ...]] = (
        Column("id", "Sales Order ID"),
        Column("customer_name", "Name"),
        Column("customer_phone", "MSISDN"),
        Column("customer_nid_no", "NID"),
        Column("customer_joining_date", "Joining Date", "date"),
        Column("partner_reference_id", "Partner Reference Id"),
        Column("source_affiliation_code", "Source Affiliation Code"),
        Column("purchase_amount", "Principal Amount", "amount"),
        Column("purchase_quantity", "Sale Gold (Gm)", "amount"),
        Column("vat_amount", "VAT Amount (On Gold)", "amount"),
        Column("amount_before_settlement", "Payment Before Settlement Fee", "amount"),
    )

    id: Optional[str] = None
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    customer_nid_no: Optional[str] = None
    customer_joining_date: Optional[str] = None
    partner_reference_id: Optional[str] = None
    source_affiliation_code: Optional[str] = None
    purchase_amount: Optional[str] = None
    purchase_quantity: Optional[str] = None
    vat_amount: Optional[str] = None
    amount_before_settlement: Optional[str] = None
    status: Optional[str] = None
    transacted_at: Optional[str] = None


@dataclass(frozen=True)
class RegistrationRow(ReportRow):
    DATA_TYPE: ClassVar[str] = "REGISTRATION"
    SUMMARY: ClassVar[bool] = False
    COLUMNS: ClassVar[Tuple[Column, ...]] = (
        Column("id", "User ID"),
        Column("name", "Name"),
        Column("phone", "Phone"),
        Column("affiliation_partner_reference_id", "Partner Reference ID"),
        Column("source_affiliation_code", "Source Affiliation Code"),
    )

    id: Optional[str] = None
    name: Optional[str] = None
    phone: Optional[str] = None
    affiliation_partner_reference_id: Optional[str] = None
    source_affiliation_code: Optional[str] = None


@dataclass(frozen=True)
class SalesSummaryRow(ReportRow):
    DATA_TYPE: ClassVar[str] = "SALES"
    SUMMARY: ClassVar[bool] = True
    COLUMNS: ClassVar[Tuple[Column, ...]] = (
        Column("created_date", "Date", "date"),
        Column("total_sales", "Total Sales", "count"),
        Column("total_customers", "Total Customers", "count"),
        Column("purchase_amount", "Purchase Amount", "amount"),
        Column("paid_amount", "Paid Amount", "amount"),
        Column("vat_amount", "VAT Amount", "amount"),
        Column("business_receivable_amount", "Business Receivable", "amount"),
    )

    created_date: Optional[str] = None
    total_sales: Optional[int] = None
    total_customers: Optional[int] = None
    purchase_amount: Optional[str] = None
    service_charge_amount: Optional[str] = None
    paid_amount: Optional[str] = None
    vat_amount: Optional[str] = None
    pgw_settlement_fee_amount: Optional[str] = None
    business_receivable_amount: Optional[str] = None


@dataclass(frozen=True)
class RegistrationSummaryRow(ReportRow):
    DATA_TYPE: ClassVar[str] = "REGISTRATION"
    SUMMARY: ClassVar[bool] = True
    COLUMNS: ClassVar[Tuple[Column, ...]] = (
        Column("created_date", "Date", "date"),
        Column("total_users", "Total Users", "count"),
    )

    created_date: Optional[str] = None
    total_users: Optional[int] = None


DetailRow = Union[SalesRow, RegistrationRow]
SummaryRow = Union[SalesSummaryRow, RegistrationSummaryRow]


def row_type(data_type: str, summary: bool) -> Type[ReportRow]:
    """Pick the row shape for a report; unknown data types are an error."""
    if data_type == "SALES":
        return SalesSummaryRow if summary else SalesRow
    if data_type == "REGISTRATION":
        return RegistrationSummaryRow if summary else RegistrationRow
    raise ValueError(f"Unknown data type: {data_type!r}")


def _meta_int(value: Any, default: Optional[int]) -> Optional[int]:
    if value in (None, ""):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class PageInfo:
    total: int = 0
    current_page: int = 1
    last_page: int = 1
    next_page: Optional[int] = None
    prev_page: Optional[int] = None

    @classmethod
    def from_meta(cls, meta: Optional[Mapping[str, Any]]) -> "PageInfo":
        if not isinstance(meta, Mapping):
            meta = {}
        return cls(
            total=_meta_int(meta.get("total"), 0),
            current_page=_meta_int(meta.get("current_page"), 1) or 1,
            last_page=_meta_int(meta.get("last_page"), 1) or 1,
            next_page=_meta_int(meta.get("next_page"), None),
            prev_page=_meta_int(meta.get("prev_page"), None),
        )

    @property
    def has_previous(self) -> bool:
        return self.current_page > 1

    @property
    def has_next(self) -> bool:
        return self.current_page < self.last_page


@dataclass(frozen=True)
class ApiResponse:
    success: bool
    rows: List[ReportRow]
    message: str = ""
    code: Optional[int] = None
    page: PageInfo = field(default_factory=PageInfo)

    @classmethod
    def from_json(cls, payload: Mapping[str, Any], row_cls: Type[ReportRow]) -> "ApiResponse":
        items = payload.get("data") or []
        return cls(
            success=bool(payload.get("success", True)),
            rows=[row_cls.from_api(item) for item in items if isinstance(item, Mapping)],
            message=str(payload.get("message") or ""),
            code=payload.get("code"),
            page=PageInfo.from_meta(payload.get("meta_info")),
        )


def format_cell(value: Any, kind: str, tz: str = APP_TIMEZONE) -> str:
    if value is None or value == "":
        return EMPTY_CELL
    if kind == "date":
        try:
            return format_display_date(str(value), tz)
        except (ValueError, TypeError, OverflowError):
            return str(value)
    if kind == "amount":
        try:
            return f"{float(value):,.2f}"
        except (TypeError, ValueError):
            return str(value)
    if kind == "count":
        try:
            return f"{int(value):,}"
        except (TypeError, ValueError):
            return str(value)
    return str(value)


def rows_to_frame(rows: Sequence[ReportRow], row_cls: Type[ReportRow], tz: str = APP_TIMEZONE) -> pd.DataFrame:
    headers = [c.header for c in row_cls.COLUMNS]
    records: List[Dict[str, str]] = [
        {c.header: format_cell(getattr(row, c.key), c.kind, tz) for c in row_cls.COLUMNS}
        for row in rows
    ]
    return pd.DataFrame(records, columns=headers)


def render_table(rows: Sequence[ReportRow], row_cls: Type[ReportRow], tz: str = APP_TIMEZONE) -> str:
    return rows_to_frame(rows, row_cls, tz).to_html(
        classes=TABLE_CLASSES, index=False, border=0, escape=True
    )


__all__ = [
    "ApiResponse",
    "Column",
    "DetailRow",
    "PageInfo",
    "RegistrationRow",
    "RegistrationSummaryRow",
    "ReportRow",
    "SalesRow",
    "SalesSummaryRow",
    "SummaryRow",
    "format_cell",
    "render_table",
    "row_type",
    "rows_to_frame",
]
