from urllib.parse import parse_qs, urlsplit

from kinen.services.session import SESSION_KEY

from .fakes import make_response, report_payload

FILTER_QUERY = "code=ABC&start_date=2024-01-01&end_date=2024-02-01&data_type=SALES"


def _session(client):
    with client.session_transaction() as sess:
        return dict(sess)


# --- Auth ---

def test_reports_require_sign_in(client, http):
    resp = client.get("/?code=ABC")
    assert resp.status_code == 302
    location = urlsplit(resp.headers["Location"])
    assert location.path == "/auth/login/"
    assert parse_qs(location.query)["next"] == ["/?code=ABC"]
    assert http.calls == []


def test_login_page_renders(client):
    resp = client.get("/auth/login/")
    assert resp.status_code == 200
    assert b"Welcome Back" in resp.data


def test_login_success(client, http):
    http.queue(make_response(200, {"access_token": "T", "refresh_token": "R", "user_id": "U"}))
    resp = client.post("/auth/login/", data={"email": "a@b.com", "password": "secret1"})

    assert resp.status_code == 302
    assert resp.headers["Location"] == "/"
    assert _session(client)[SESSION_KEY]["access_token"] == "T"
    assert http.calls[0]["url"] == "http://api.test/api/v1/auth/login/"


def test_login_follows_safe_next_only(client, http):
    http.queue(
        make_response(200, {"access_token": "T", "refresh_token": "R", "user_id": "U"}),
        make_response(200, {"access_token": "T", "refresh_token": "R", "user_id": "U"}),
    )
    resp = client.post(
        "/auth/login/",
        data={"email": "a@b.com", "password": "secret1", "next": "/?code=ABC"},
    )
    assert resp.headers["Location"] == "/?code=ABC"

    client.get("/auth/logout")
    resp = client.post(
        "/auth/login/",
        data={"email": "a@b.com", "password": "secret1", "next": "//evil.example"},
    )
    assert resp.headers["Location"] == "/"


def test_login_form_errors_skip_backend(client, http):
    resp = client.post("/auth/login/", data={"email": "nope", "password": "123"})
    assert resp.status_code == 400
    assert b"Please enter a valid email address" in resp.data
    assert b"Password must be at least 6 characters" in resp.data
    assert http.calls == []


def test_login_rejected_shows_message(client, http):
    http.queue(make_response(401, {"message": "Invalid credentials"}, "Unauthorized"))
    resp = client.post("/auth/login/", data={"email": "a@b.com", "password": "secret1"})
    assert resp.status_code == 401
    assert b"Invalid credentials" in resp.data
    assert SESSION_KEY not in _session(client)


def test_signed_in_user_skips_login_page(signed_in):
    resp = signed_in.get("/auth/login/")
    assert resp.status_code == 302
    assert resp.headers["Location"] == "/"


def test_logout_clears_session(signed_in):
    resp = signed_in.post("/auth/logout")
    assert resp.status_code == 302
    assert resp.headers["Location"] == "/auth/login/"
    assert SESSION_KEY not in _session(signed_in)


# --- Reports ---

def test_no_filter_means_no_report_call(signed_in, http):
    resp = signed_in.get("/?page=2&summary=true")
    assert resp.status_code == 200
    assert b"Without Summary" not in resp.data
    assert http.calls == []


def test_invalid_submit_keeps_url_and_skips_backend(signed_in, http):
    resp = signed_in.post("/", data={"code": "", "data_type": "SALES"})
    assert resp.status_code == 400
    assert b"Input value is required" in resp.data
    assert http.calls == []


def test_valid_submit_moves_url(signed_in, http):
    resp = signed_in.post(
        "/?page=4",
        data={
            "code": "ABC",
            "start_date": "2024-01-01",
            "end_date": "2024-02-01",
            "data_type": "SALES",
        },
    )
    assert resp.status_code == 302
    assert resp.headers["Location"] == f"/?{FILTER_QUERY}"
    assert http.calls == []


def test_detail_report_rendered(signed_in, http):
    http.queue(
        make_response(
            200,
            report_payload(
                [{"id": "SO-1", "customer_name": "Rahim", "purchase_amount": "1500"}],
                page=1,
                last_page=3,
                total=21,
            ),
        )
    )
    resp = signed_in.get(f"/?{FILTER_QUERY}")

    assert resp.status_code == 200
    assert b"Rahim" in resp.data
    assert b"1,500.00" in resp.data
    assert b"Page 1 of 3" in resp.data
    assert b"page=2" in resp.data

    call = http.calls[0]
    assert urlsplit(call["url"]).path == "/api/v1/reports/"
    assert call["headers"]["Authorization"] == "Bearer T"
    assert call["json"]["start_date"] == "2024-01-01"


def test_summary_tab_calls_summary_endpoint(signed_in, http):
    http.queue(
        make_response(200, report_payload([{"created_date": "2024-01-05", "total_sales": 4}]))
    )
    resp = signed_in.get(f"/?{FILTER_QUERY}&summary=true")

    assert resp.status_code == 200
    assert b"Summary Reports" in resp.data
    assert b"Jan 5, 2024" in resp.data
    assert len(http.calls) == 1
    assert urlsplit(http.calls[0]["url"]).path == "/api/v1/reports/summaries/"


def test_empty_report_message(signed_in, http):
    http.queue(make_response(200, report_payload([])))
    resp = signed_in.get(f"/?{FILTER_QUERY}")
    assert b"No affiliation reports found" in resp.data


def test_server_error_is_shown_inline(signed_in, http):
    http.queue(make_response(500, None, "Internal Server Error"))
    resp = signed_in.get(f"/?{FILTER_QUERY}")
    assert resp.status_code == 200
    assert b"Internal server error: Please try again later" in resp.data


def test_unauthorized_report_signs_out(signed_in, http):
    http.queue(make_response(401, None, "Unauthorized"))
    resp = signed_in.get(f"/?{FILTER_QUERY}")
    assert resp.status_code == 302
    assert resp.headers["Location"] == "/auth/login/"
    assert SESSION_KEY not in _session(signed_in)
    assert len(http.calls) == 1


def test_out_of_range_url_skips_backend(signed_in, http):
    resp = signed_in.get("/?code=ABC&start_date=2024-01-01&end_date=2024-06-01&data_type=SALES")
    assert resp.status_code == 200
    assert b"Date range cannot exceed 3 months" in resp.data
    assert http.calls == []


# --- Date picker endpoints ---

def test_disabled_days_for_a_past_month(client):
    resp = client.get("/date-range/disabled?month=2000-01&past=false")
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["month"] == "2000-01"
    assert len(body["disabled"]) == 31
    assert body["disabled"][0] == "2000-01-01"


def test_disabled_days_rejects_bad_month(client):
    assert client.get("/date-range/disabled?month=2000-13").status_code == 400
    assert client.get("/date-range/disabled?month=soon").status_code == 400


def test_apply_clamps_to_max_days(client):
    resp = client.post(
        "/date-range/apply",
        json={"from": "2024-01-01", "to": "2024-04-10", "max_days": 90},
    )
    body = resp.get_json()
    assert body["start_date"] == "2024-01-01"
    assert body["end_date"] == "2024-03-30"
    assert body["from"] == "2024-01-01T00:00:00+06:00"
    assert body["to"] == "2024-03-30T23:59:59+06:00"
    assert body["label"] == "Jan 1, 2024 - Mar 30, 2024"


def test_apply_empty_and_invalid(client):
    assert client.post("/date-range/apply", json={}).get_json()["label"] == ""
    assert client.post("/date-range/apply", json={"from": "soon"}).status_code == 400


def test_health(client):
    body = client.get("/health").get_json()
    assert body == {"ok": True, "api_base_url": "http://api.test/api/v1", "timezone": "Asia/Dhaka"}


# --- Input edge cases ---

def test_submit_with_unplaceable_date_stays_in_form(signed_in, http):
    resp = signed_in.post(
        "/",
        data={"code": "A", "start_date": "1600-01-01", "end_date": "1600-02-01", "data_type": "SALES"},
    )
    assert resp.status_code == 400
    assert b"From date is not a valid date" in resp.data
    assert http.calls == []


def test_url_with_unplaceable_dates_renders(signed_in, http):
    resp = signed_in.get("/?code=A&start_date=0001-01-01&end_date=0001-02-01&data_type=SALES")
    assert resp.status_code == 200
    assert http.calls == []


def test_partial_filter_url_shows_results_area_without_query(signed_in, http):
    resp = signed_in.get("/?data_type=SALES")
    assert resp.status_code == 200
    assert b"Without Summary" in resp.data
    assert b"Enter a code, date range and type to load reports" in resp.data
    assert http.calls == []


def test_submit_without_dates_does_not_query(signed_in, http):
    resp = signed_in.post("/", data={"code": "ABC", "data_type": "SALES"})
    assert resp.status_code == 302
    resp = signed_in.get(resp.headers["Location"])
    assert resp.status_code == 200
    assert http.calls == []


def test_malformed_page_metadata_still_renders(signed_in, http):
    payload = report_payload([{"id": "SO-1", "customer_name": "Rahim"}])
    payload["meta_info"]["total"] = "n/a"
    http.queue(make_response(200, payload))
    resp = signed_in.get(f"/?{FILTER_QUERY}")
    assert resp.status_code == 200
    assert b"Rahim" in resp.data
    assert b"0 total items" in resp.data


def test_disabled_days_rejects_out_of_range_year(client):
    assert client.get("/date-range/disabled?month=0-01").status_code == 400
    assert client.get("/date-range/disabled?month=10000-01").status_code == 400
    assert client.get("/date-range/disabled?month=0001-01").status_code == 200
