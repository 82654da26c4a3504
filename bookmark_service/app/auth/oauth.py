from __future__ import annotations

from typing import Any

import httpx
from authlib.integrations.starlette_client import OAuth, OAuthError
from fastapi import Request

from common.models.user import UserUpsertInput

from ..config import OAuthConfig


GOOGLE_PROVIDER = "google"
GOOGLE_USERINFO_URL = "https://openidconnect.googleapis.com/v1/userinfo"


class IdentityError(Exception):
    """OAuth provider 로부터 유효한 신원 정보를 얻지 못한 경우."""


def create_oauth(config: OAuthConfig) -> OAuth:
    """Google OpenID Connect 클라이언트를 등록한 OAuth 레지스트리를 만든다."""

    oauth = OAuth()
    oauth.register(
        name=GOOGLE_PROVIDER,
        server_metadata_url=config.server_metadata_url,
        client_id=config.client_id,
        client_secret=config.client_secret,
        client_kwargs={"scope": "openid email profile"},
    )
    return oauth


async def fetch_google_identity(oauth: OAuth, request: Request) -> UserUpsertInput:
    """콜백 요청에서 토큰을 교환하고 유저 upsert 입력으로 변환한다.

    - ID 토큰의 userinfo 를 우선 사용하고, 없으면 userinfo 엔드포인트를 호출한다.
    - sub 또는 email 이 없으면 IdentityError 를 발생시킨다.
    """

    client = oauth.create_client(GOOGLE_PROVIDER)
    try:
        token: dict[str, Any] = await client.authorize_access_token(request)
    except OAuthError as exc:
        raise IdentityError(f"token exchange failed: {exc.error}") from exc

    userinfo = token.get("userinfo")
    if not userinfo:
        try:
            resp = await client.get(GOOGLE_USERINFO_URL, token=token)
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            raise IdentityError(f"userinfo fetch failed: {exc}") from exc
        userinfo = resp.json()

    sub = str(userinfo.get("sub") or "")
    email = str(userinfo.get("email") or "")
    if not sub or not email:
        raise IdentityError("google account has no subject or email")

    return UserUpsertInput(
        provider=GOOGLE_PROVIDER,
        provider_sub=sub,
        email=email,
        name=str(userinfo.get("name") or ""),
        profile_image=str(userinfo.get("picture") or ""),
    )
