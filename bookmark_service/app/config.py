from __future__ import annotations

import os
from dataclasses import dataclass


SESSION_SECRET_KEY = "SESSION_SECRET_KEY"
SESSION_MAX_AGE_SECONDS = "SESSION_MAX_AGE_SECONDS"
SESSION_HTTPS_ONLY = "SESSION_HTTPS_ONLY"
GOOGLE_CLIENT_ID = "GOOGLE_CLIENT_ID"
GOOGLE_CLIENT_SECRET = "GOOGLE_CLIENT_SECRET"
OAUTH_REDIRECT_URI = "OAUTH_REDIRECT_URI"
BOOKMARK_POLL_INTERVAL_MS = "BOOKMARK_POLL_INTERVAL_MS"

DEFAULT_SESSION_MAX_AGE_SECONDS = 14 * 24 * 60 * 60
DEFAULT_POLL_INTERVAL_MS = 2000

GOOGLE_SERVER_METADATA_URL = (
    "https://accounts.google.com/.well-known/openid-configuration"
)


@dataclass(slots=True)
class SessionConfig:
    """서명된 세션 쿠키 설정."""

    secret_key: str
    max_age_seconds: int
    https_only: bool


@dataclass(slots=True)
class OAuthConfig:
    """Google OAuth(OpenID Connect) 클라이언트 설정."""

    client_id: str
    client_secret: str
    redirect_uri: str | None
    server_metadata_url: str = GOOGLE_SERVER_METADATA_URL


@dataclass(slots=True)
class UIConfig:
    poll_interval_ms: int


@dataclass(slots=True)
class AppConfig:
    """bookmark-service 전체 설정."""

    session: SessionConfig
    oauth: OAuthConfig
    ui: UIConfig


def _read_int(name: str, default: int, *, minimum: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise RuntimeError(
            f"{name} must be an integer if set, got: {raw!r}"
        ) from exc
    if value < minimum:
        raise RuntimeError(f"{name} must be >= {minimum}, got: {value}")
    return value


def _read_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name, "").strip().lower()
    if not raw:
        return default
    if raw in {"1", "true", "yes", "on"}:
        return True
    if raw in {"0", "false", "no", "off"}:
        return False
    raise RuntimeError(f"{name} must be a boolean if set, got: {raw!r}")


def load_session_config() -> SessionConfig:
    secret_key = os.getenv(SESSION_SECRET_KEY, "").strip()
    if not secret_key:
        raise RuntimeError(
            f"{SESSION_SECRET_KEY} environment variable is required for bookmark-service",
        )

    return SessionConfig(
        secret_key=secret_key,
        max_age_seconds=_read_int(
            SESSION_MAX_AGE_SECONDS, DEFAULT_SESSION_MAX_AGE_SECONDS, minimum=1
        ),
        https_only=_read_bool(SESSION_HTTPS_ONLY, False),
    )


def load_oauth_config() -> OAuthConfig:
    """Google OAuth 설정을 로드한다.

    client id/secret 이 비어 있어도 앱은 기동되며, 로그인 시도 시점에 provider 가 거절한다.
    """

    return OAuthConfig(
        client_id=os.getenv(GOOGLE_CLIENT_ID, "").strip(),
        client_secret=os.getenv(GOOGLE_CLIENT_SECRET, "").strip(),
        redirect_uri=os.getenv(OAUTH_REDIRECT_URI, "").strip() or None,
    )


def load_ui_config() -> UIConfig:
    return UIConfig(
        poll_interval_ms=_read_int(
            BOOKMARK_POLL_INTERVAL_MS, DEFAULT_POLL_INTERVAL_MS, minimum=1
        ),
    )


def load_config() -> AppConfig:
    """bookmark-service 설정을 로드하여 AppConfig 로 반환한다."""

    return AppConfig(
        session=load_session_config(),
        oauth=load_oauth_config(),
        ui=load_ui_config(),
    )
