from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class User(BaseModel):
    """유저 도메인 모델.

    - Mongo users 컬렉션과 1:1로 매핑된다.
    - provider/provider_sub 조합으로 식별하며, 내부 식별자는 user_code("<provider>:<uuid>")로 관리한다.
    - user_code 는 북마크의 owner_id 로 쓰이므로 한 번 발급되면 바뀌지 않는다.
    """

    user_code: str
    provider: str
    provider_sub: str
    email: str
    name: str
    profile_image: str
    created_at: datetime
    updated_at: datetime


class UserUpsertInput(BaseModel):
    """OAuth 로그인 콜백에서 전달받은 식별 정보."""

    provider: str
    provider_sub: str
    email: str
    name: str = ""
    profile_image: str = ""
