"""Application configuration objects."""

import os
from datetime import timedelta
from typing import Tuple

from dotenv import load_dotenv

load_dotenv()


class Config:
    """Base configuration for the Kinen affiliation dashboard."""

    # -------------------------
    # Backend API
    # -------------------------
    API_BASE_URL = os.getenv(
        "KINEN_API_BASE_URL", "https://affiliation-api.gktechbd.com/api/v1"
    )
    # Seconds before an outgoing request is abandoned
    REQUEST_TIMEOUT = float(os.getenv("KINEN_REQUEST_TIMEOUT", "10"))
    # Silent retries for connection errors, timeouts and 502/503/504
    REQUEST_RETRIES = 2

    # -------------------------
    # Session (signed cookie, no server-side store)
    # -------------------------
    SECRET_KEY = os.getenv("KINEN_SECRET_KEY", "change-me-in-production")
    PERMANENT_SESSION_LIFETIME = timedelta(hours=24)
    SESSION_COOKIE_NAME = "kinen_session"
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"
    SESSION_COOKIE_SECURE = os.getenv("KINEN_SECURE_COOKIES", "0") == "1"

    # -------------------------
    # Dates
    # -------------------------
    APP_TIMEZONE = "Asia/Dhaka"
    # Longest span the range picker lets a user select, in days
    MAX_RANGE_DAYS = int(os.getenv("KINEN_MAX_RANGE_DAYS", "90"))
    # Longest span the filter form accepts, by calendar month index
    MAX_RANGE_MONTHS = 3

    # -------------------------
    # Tables
    # -------------------------
    DEFAULT_PAGE_SIZE = 10
    PAGE_SIZE_OPTIONS: Tuple[int, ...] = (10, 20, 30, 50, 100)


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    API_BASE_URL = "http://api.test/api/v1"


__all__ = ["Config", "TestConfig"]
