"""Credential exchange and the signed-cookie session that carries tokens."""

from __future__ import annotations

import logging
import time
from dataclasses import asdict, dataclass, replace
from enum import Enum
from typing import Any, Callable, Dict, Mapping, MutableMapping, Optional

import jwt
import requests

from kinen.errors import AuthenticationError

logger = logging.getLogger("kinen.session")

SESSION_KEY = "auth"
LOGIN_PATH = "/auth/login/"
ROOT_URL = "/"

DEFAULT_LOGIN_ERROR = "Check your Credentials"


class SessionState(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"


@dataclass(frozen=True)
class AuthSession:
    """Token pair and identity for the signed-in user.

    Passed explicitly to whatever needs the access token.
    """

    access_token: str
    refresh_token: str
    user_id: str
    email: Optional[str] = None
    expires_at_ms: Optional[int] = None

    def is_expired(self, now_ms: int) -> bool:
        return self.expires_at_ms is not None and now_ms >= self.expires_at_ms

    def auth_headers(self) -> Dict[str, str]:
        if not self.access_token:
            return {}
        return {"Authorization": f"Bearer {self.access_token}"}

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> Optional["AuthSession"]:
        if not data or not data.get("access_token"):
            return None
        return cls(
            access_token=str(data["access_token"]),
            refresh_token=str(data.get("refresh_token") or ""),
            user_id=str(data.get("user_id") or ""),
            email=data.get("email"),
            expires_at_ms=data.get("expires_at_ms"),
        )


@dataclass(frozen=True)
class LoginResult:
    ok: bool
    session: Optional[AuthSession] = None
    error: Optional[AuthenticationError] = None
    redirect_to: Optional[str] = None


def decode_expiry(token: str) -> Optional[int]:
    """Epoch milliseconds from the token's ``exp`` claim, if any.

    The signature is not verified here; the backend owns the signing key
    and checks every request itself.
    """
    try:
        claims = jwt.decode(
            token,
            options={"verify_signature": False, "verify_exp": False},
        )
    except jwt.InvalidTokenError as exc:
        logger.warning("Could not decode access token: %s", exc)
        return None
    exp = claims.get("exp")
    if exp is None:
        return None
    return int(float(exp) * 1000)


def _pick(data: Mapping[str, Any], *keys: str) -> Optional[str]:
    for key in keys:
        value = data.get(key)
        if value not in (None, ""):
            return str(value)
    return None


def _json(resp: requests.Response) -> Any:
    try:
        return resp.json()
    except ValueError:
        return None


class SessionManager:
    """Login, read and sign-out over a mutable session mapping.

    ``store`` is normally ``flask.session``; tests pass a plain dict.
    """

    def __init__(
        self,
        api_base_url: str,
        store: MutableMapping[str, Any],
        timeout: float = 10.0,
        http: Optional[requests.Session] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.api_base_url = api_base_url.rstrip("/")
        self._store = store
        self.timeout = timeout
        self.http = http or requests.Session()
        self._clock = clock
        self.state = (
            SessionState.AUTHENTICATED
            if AuthSession.from_dict(store.get(SESSION_KEY))
            else SessionState.UNAUTHENTICATED
        )

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def _fail(self, message: str) -> LoginResult:
        self.state = SessionState.UNAUTHENTICATED
        return LoginResult(ok=False, error=AuthenticationError(message))

    def login(self, email: str, password: str) -> LoginResult:
        """Exchange credentials for tokens. Failures are returned, not raised."""
        self.state = SessionState.AUTHENTICATING
        url = f"{self.api_base_url}{LOGIN_PATH}"
        try:
            resp = self.http.post(
                url,
                json={"email": email, "password": password},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.error("Login request failed: %s", exc)
            return self._fail(str(exc) or DEFAULT_LOGIN_ERROR)

        payload = _json(resp)
        if not resp.ok:
            message = payload.get("message") if isinstance(payload, dict) else None
            logger.info("Login rejected for %s with status %s", email, resp.status_code)
            return self._fail(str(message) if message else DEFAULT_LOGIN_ERROR)

        if not isinstance(payload, dict):
            logger.error("Login response was not a JSON object")
            return self._fail(DEFAULT_LOGIN_ERROR)

        body = payload.get("data") if isinstance(payload.get("data"), dict) else payload

        access_token = _pick(body, "access_token", "accessToken")
        if not access_token:
            logger.error("Login response did not include an access token")
            return self._fail(DEFAULT_LOGIN_ERROR)

        session = AuthSession(
            access_token=access_token,
            refresh_token=_pick(body, "refresh_token", "refreshToken") or "",
            user_id=_pick(body, "user_id", "userId", "id") or "",
            email=_pick(body, "email") or email,
            expires_at_ms=decode_expiry(access_token),
        )
        self._store[SESSION_KEY] = session.to_dict()
        self.state = SessionState.AUTHENTICATED
        logger.info("User %s signed in", session.user_id)
        return LoginResult(ok=True, session=session, redirect_to=ROOT_URL)

    def current(self) -> Optional[AuthSession]:
        """The signed-in session, or ``None``.

        An access token past its ``exp`` ends the session so the user signs
        in again.
        """
        session = AuthSession.from_dict(self._store.get(SESSION_KEY))
        if session is None:
            self.state = SessionState.UNAUTHENTICATED
            return None

        session = replace(session, expires_at_ms=decode_expiry(session.access_token))
        if session.is_expired(self._now_ms()):
            logger.info("Access token for user %s expired; signing out", session.user_id)
            self.sign_out()
            return None

        self.state = SessionState.AUTHENTICATED
        return session

    def sign_out(self) -> str:
        """Drop the session and return the login URL to send the user to."""
        self._store.pop(SESSION_KEY, None)
        self.state = SessionState.UNAUTHENTICATED
        return LOGIN_PATH


__all__ = [
    "AuthSession",
    "LOGIN_PATH",
    "LoginResult",
    "ROOT_URL",
    "SESSION_KEY",
    "SessionManager",
    "SessionState",
    "decode_expiry",
]
