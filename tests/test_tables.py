import pytest

from kinen.services.tables import (
    ApiResponse,
    PageInfo,
    RegistrationRow,
    RegistrationSummaryRow,
    SalesRow,
    SalesSummaryRow,
    format_cell,
    render_table,
    row_type,
    rows_to_frame,
)


@pytest.mark.parametrize(
    "data_type, summary, expected",
    [
        ("SALES", False, SalesRow),
        ("SALES", True, SalesSummaryRow),
        ("REGISTRATION", False, RegistrationRow),
        ("REGISTRATION", True, RegistrationSummaryRow),
    ],
)
def test_row_type_dispatch(data_type, summary, expected):
    assert row_type(data_type, summary) is expected


def test_row_type_rejects_unknown():
    with pytest.raises(ValueError):
        row_type("REFUNDS", False)


def test_from_api_ignores_unknown_keys():
    row = RegistrationRow.from_api({"id": "U1", "name": "Karim", "password_hash": "x"})
    assert row == RegistrationRow(id="U1", name="Karim")


def test_api_response_defaults():
    response = ApiResponse.from_json({"data": None}, SalesRow)
    assert response.success
    assert response.rows == []
    assert response.page == PageInfo()
    assert not response.page.has_next


@pytest.mark.parametrize(
    "value, kind, expected",
    [
        (None, "text", "-"),
        ("", "amount", "-"),
        ("abc", "text", "abc"),
        ("1234.5", "amount", "1,234.50"),
        ("n/a", "amount", "n/a"),
        (12345, "count", "12,345"),
        ("2024-01-02", "date", "Jan 2, 2024"),
        ("2024-01-01T20:00:00Z", "date", "Jan 2, 2024"),
    ],
)
def test_format_cell(value, kind, expected):
    assert format_cell(value, kind) == expected


def test_frame_columns_follow_headers():
    rows = [SalesSummaryRow(created_date="2024-01-02", total_sales=3, purchase_amount="100")]
    frame = rows_to_frame(rows, SalesSummaryRow)
    assert list(frame.columns) == [c.header for c in SalesSummaryRow.COLUMNS]
    assert frame.iloc[0]["Total Sales"] == "3"
    assert frame.iloc[0]["Paid Amount"] == "-"


def test_render_table_escapes_values():
    html = render_table([RegistrationRow(id="U1", name="<b>Eve</b>")], RegistrationRow)
    assert 'class="dataframe table table-sm table-striped table-hover"' in html
    assert "<th>User ID</th>" in html
    assert "&lt;b&gt;Eve&lt;/b&gt;" in html
    assert "<b>Eve</b>" not in html


@pytest.mark.parametrize(
    "meta",
    [
        {"total": "n/a", "current_page": "x", "last_page": None, "next_page": "?"},
        "not a mapping",
        None,
    ],
)
def test_page_info_tolerates_malformed_meta(meta):
    assert PageInfo.from_meta(meta) == PageInfo()


def test_page_info_accepts_numeric_strings():
    page = PageInfo.from_meta({"total": "47", "current_page": "2", "last_page": "5", "next_page": "3"})
    assert (page.total, page.current_page, page.last_page, page.next_page) == (47, 2, 5, 3)
