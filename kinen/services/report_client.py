"""Authenticated access to the affiliation report endpoints."""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

import requests

from kinen.errors import (
    KinenError,
    NetworkError,
    UnknownError,
    error_from_status,
)
from kinen.utils.validation import DEFAULT_DATA_TYPE

from .query_builder import ReportQueryParams
from .session import AuthSession
from .tables import ApiResponse, row_type

logger = logging.getLogger("kinen.reports")

DETAIL_PATH = "/reports/"
SUMMARY_PATH = "/reports/summaries/"

# Statuses worth a silent retry
TRANSIENT_STATUSES = {502, 503, 504}


class RedirectOnce:
    """Send the user to sign-in on the first 401, ignore the rest.

    One instance is shared by every client call made while rendering a page,
    so several 401s still produce a single navigation.
    """

    def __init__(self, navigate: Callable[[], Any]):
        self._navigate = navigate
        self.fired = False
        self.result: Any = None

    def __call__(self) -> Any:
        if not self.fired:
            self.fired = True
            self.result = self._navigate()
        return self.result


class ReportClient:
    def __init__(
        self,
        base_url: str,
        auth: Optional[AuthSession] = None,
        timeout: float = 10.0,
        retries: int = 2,
        http: Optional[requests.Session] = None,
        on_unauthorized: Optional[Callable[[], Any]] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.auth = auth
        self.timeout = timeout
        self.retries = retries
        self.http = http or requests.Session()
        self.on_unauthorized = on_unauthorized

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self.auth is not None:
            headers.update(self.auth.auth_headers())
        return headers

    def _post(self, path: str, params: ReportQueryParams) -> Any:
        query = params.to_query_string()
        url = f"{self.base_url}{path}?{query}" if query else f"{self.base_url}{path}"

        resp: Optional[requests.Response] = None
        for attempt in range(self.retries + 1):
            try:
                resp = self.http.post(
                    url, json=params.to_body(), headers=self._headers(), timeout=self.timeout
                )
            except (requests.ConnectionError, requests.Timeout) as exc:
                logger.warning("POST %s failed (attempt %d): %s", path, attempt + 1, exc)
                if attempt < self.retries:
                    continue
                raise NetworkError(f"Network error: {exc}") from exc
            except requests.RequestException as exc:
                raise UnknownError(str(exc) or "An unexpected error occurred") from exc

            if resp.status_code in TRANSIENT_STATUSES and attempt < self.retries:
                logger.warning(
                    "POST %s returned %s (attempt %d); retrying",
                    path,
                    resp.status_code,
                    attempt + 1,
                )
                continue
            break

        try:
            payload = resp.json()
        except ValueError:
            payload = None

        if resp.status_code == 401:
            logger.info("POST %s returned 401; sending user to sign-in", path)
            if self.on_unauthorized is not None:
                self.on_unauthorized()
            raise error_from_status(401, payload, resp.reason)

        if not resp.ok:
            raise error_from_status(resp.status_code, payload, resp.reason)

        if not isinstance(payload, dict):
            raise UnknownError("Unexpected response from the report service")
        return payload

    def fetch_detail(self, params: ReportQueryParams) -> ApiResponse:
        payload = self._post(DETAIL_PATH, params)
        row_cls = row_type(params.data_type or DEFAULT_DATA_TYPE, summary=False)
        return ApiResponse.from_json(payload, row_cls)

    def fetch_summary(self, params: ReportQueryParams) -> ApiResponse:
        payload = self._post(SUMMARY_PATH, params)
        row_cls = row_type(params.data_type or DEFAULT_DATA_TYPE, summary=True)
        return ApiResponse.from_json(payload, row_cls)

    def fetch(self, variant: str, params: ReportQueryParams) -> ApiResponse:
        if variant == "detail":
            return self.fetch_detail(params)
        if variant == "summary":
            return self.fetch_summary(params)
        raise KinenError(f"Unknown report variant: {variant!r}")


__all__ = [
    "DETAIL_PATH",
    "RedirectOnce",
    "ReportClient",
    "SUMMARY_PATH",
    "TRANSIENT_STATUSES",
]
