from __future__ import annotations

from typing import Protocol

from common.models.user import User
from ..models.bookmark import Bookmark


class BookmarkRepositoryInterface(Protocol):
    """BookmarkRepository가 따라야 할 최소한의 계약.

    - Service 레이어는 이 인터페이스에만 의존하고, 구체 구현(Mongo 등)은 몰라도 된다.
    - 저장소 장애는 StoreError 로 올려 보낸다.
    - 수정(update) 연산은 존재하지 않는다.
    """

    def create(
        self, owner_id: str, title: str, url: str
    ) -> Bookmark:  # pragma: no cover - Protocol
        ...

    def list_by_owner(
        self, owner_id: str
    ) -> list[Bookmark]:  # pragma: no cover - Protocol
        """owner_id 의 모든 북마크를 created_at 내림차순으로 반환한다."""
        ...

    def find_by_id(
        self, bookmark_id: str
    ) -> Bookmark | None:  # pragma: no cover - Protocol
        ...

    def delete_by_id(
        self, bookmark_id: str
    ) -> bool:  # pragma: no cover - Protocol
        """삭제된 경우 True, 대상이 없었으면 False 를 반환한다."""
        ...


class BookmarkRevisionRepositoryInterface(Protocol):
    """유저별 북마크 목록 revision 카운터 계약."""

    def get(self, owner_id: str) -> int:  # pragma: no cover - Protocol
        """기록이 없으면 0 을 반환한다."""
        ...

    def increment(self, owner_id: str) -> int:  # pragma: no cover - Protocol
        ...


class UserRepositoryInterface(Protocol):
    def find_by_provider_and_sub(
        self, provider: str, provider_sub: str
    ) -> User | None:  # pragma: no cover - Protocol
        ...

    def insert(self, user: User) -> User:  # pragma: no cover - Protocol
        """(provider, provider_sub) 가 이미 있으면 UserConflictError 를 발생시킨다."""
        ...

    def update_profile(
        self,
        user_code: str,
        email: str,
        name: str,
        profile_image: str,
    ) -> User:  # pragma: no cover - Protocol
        ...
