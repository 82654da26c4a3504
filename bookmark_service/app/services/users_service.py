from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

from fastapi import Depends

from common.models.user import User, UserUpsertInput

from ..exceptions import UserConflictError
from ..repositories.interfaces import UserRepositoryInterface
from ..repositories.user_repository import UserRepository


class UsersService:
    """OAuth 로그인 유저 upsert 비즈니스 로직.

    - Repository(UserRepositoryInterface)에만 의존하고, Mongo 세부 구현은 알지 않는다.
    - 처음 로그인한 유저에게는 user_code("<provider>:<uuid>")를 발급하고, 이후 로그인에서는
      프로필(email/name/profile_image)만 갱신한다. user_code 는 북마크 소유자 식별자이므로 유지된다.
    - 동시 첫 로그인으로 insert 가 충돌하면 먼저 생성된 유저를 다시 읽어 갱신한다.
    """

    def __init__(self, user_repo: UserRepositoryInterface) -> None:
        self._user_repo = user_repo

    def upsert_user(self, input_model: UserUpsertInput) -> User:
        existing = self._user_repo.find_by_provider_and_sub(
            provider=input_model.provider,
            provider_sub=input_model.provider_sub,
        )

        if existing is None:
            now = datetime.now(timezone.utc)
            user = User(
                user_code=f"{input_model.provider}:{uuid4()}",
                provider=input_model.provider,
                provider_sub=input_model.provider_sub,
                email=input_model.email,
                name=input_model.name,
                profile_image=input_model.profile_image,
                created_at=now,
                updated_at=now,
            )
            try:
                return self._user_repo.insert(user)
            except UserConflictError:
                # 같은 계정의 동시 첫 로그인에서 다른 요청이 먼저 insert 한 경우
                existing = self._user_repo.find_by_provider_and_sub(
                    provider=input_model.provider,
                    provider_sub=input_model.provider_sub,
                )
                if existing is None:
                    raise

        return self._user_repo.update_profile(
            user_code=existing.user_code,
            email=input_model.email,
            name=input_model.name,
            profile_image=input_model.profile_image,
        )


def get_user_repository() -> UserRepositoryInterface:
    """FastAPI DI용 UserRepository 팩토리."""

    return UserRepository()


def get_users_service(
    user_repo: UserRepositoryInterface = Depends(get_user_repository),
) -> UsersService:
    """FastAPI DI용 UsersService 팩토리."""

    return UsersService(user_repo)
