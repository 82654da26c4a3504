from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from fastapi import Request


SESSION_USER_KEY = "user"
SESSION_OWNER_KEY = "user_code"


class SessionResolver:
    """세션에서 북마크 소유자 식별자(user_code)를 꺼낸다.

    OAuth 라이브러리와 무관하게 세션 dict 만 읽으며 부수효과가 없다.
    유효한 소유자가 없으면 None 을 반환하고, 호출 측이 UnauthenticatedError 로 바꾼다.
    """

    def resolve(self, session: Mapping[str, Any] | None) -> str | None:
        if not session:
            return None

        user = session.get(SESSION_USER_KEY)
        if not isinstance(user, Mapping):
            return None

        owner_id = user.get(SESSION_OWNER_KEY)
        if not isinstance(owner_id, str) or not owner_id:
            return None
        return owner_id


def build_session_user(
    user_code: str, name: str, email: str, image: str
) -> dict[str, str]:
    """로그인 콜백에서 세션에 저장할 유저 정보."""

    return {
        SESSION_OWNER_KEY: user_code,
        "name": name,
        "email": email,
        "image": image,
    }


def get_session_data(request: Request) -> Mapping[str, Any]:
    """FastAPI DI용 요청 세션 접근자."""

    return request.session


def get_session_resolver() -> SessionResolver:
    """FastAPI DI용 SessionResolver 팩토리."""

    return SessionResolver()
