"""HTTP doubles shared across the test modules."""

import json
from typing import Any, Dict, List, Optional

import requests


def make_response(status: int = 200, payload: Any = None, reason: str = "OK") -> requests.Response:
    """A real ``requests.Response`` carrying a JSON body."""
    resp = requests.Response()
    resp.status_code = status
    resp.reason = reason
    resp.headers["Content-Type"] = "application/json"
    resp._content = json.dumps(payload).encode() if payload is not None else b""
    return resp


def report_payload(
    rows: List[Dict[str, Any]],
    page: int = 1,
    last_page: int = 1,
    total: Optional[int] = None,
) -> Dict[str, Any]:
    return {
        "success": True,
        "data": rows,
        "message": "OK",
        "code": 200,
        "meta_info": {
            "total": len(rows) if total is None else total,
            "current_page": page,
            "last_page": last_page,
            "next_page": page + 1 if page < last_page else None,
            "prev_page": page - 1 if page > 1 else None,
            "extra": None,
        },
    }


class FakeHttp:
    """Stands in for ``requests.Session``: records posts, replays queued results."""

    def __init__(self, *results):
        self.results = list(results)
        self.calls: List[Dict[str, Any]] = []
        self.headers: Dict[str, str] = {}

    def queue(self, *results) -> None:
        self.results.extend(results)

    def post(self, url, json=None, headers=None, timeout=None):
        self.calls.append(
            {"url": url, "json": json, "headers": dict(headers or {}), "timeout": timeout}
        )
        if not self.results:
            raise AssertionError(f"unexpected request to {url}")
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result
