from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from bson import ObjectId

from bookmark_service.app.exceptions import StoreError, UserConflictError
from bookmark_service.app.models.bookmark import Bookmark
from common.models.user import User
from common.mongo import client as mongo_client


class FakeBookmarkRepository:
    """메모리 기반 BookmarkRepositoryInterface 구현.

    fail_on 에 operation 이름을 넣으면 해당 호출에서 StoreError 를 발생시킨다.
    """

    def __init__(self) -> None:
        self.records: dict[str, Bookmark] = {}
        self.fail_on: set[str] = set()
        self.calls: list[tuple[str, str]] = []
        self.delete_result_override: bool | None = None
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def _enter(self, operation: str, arg: str) -> None:
        self.calls.append((operation, arg))
        if operation in self.fail_on:
            raise StoreError(f"bookmarks.{operation} failed: connection reset")

    def create(self, owner_id: str, title: str, url: str) -> Bookmark:
        self._enter("create", owner_id)
        self._clock += timedelta(seconds=1)
        bookmark = Bookmark(
            id=str(ObjectId()),
            owner_id=owner_id,
            title=title,
            url=url,
            created_at=self._clock,
            updated_at=self._clock,
        )
        assert bookmark.id is not None
        self.records[bookmark.id] = bookmark
        return bookmark

    def list_by_owner(self, owner_id: str) -> list[Bookmark]:
        self._enter("list_by_owner", owner_id)
        owned = [b for b in self.records.values() if b.owner_id == owner_id]
        return sorted(owned, key=lambda b: (b.created_at, b.id or ""), reverse=True)

    def find_by_id(self, bookmark_id: str) -> Bookmark | None:
        self._enter("find_by_id", bookmark_id)
        return self.records.get(bookmark_id)

    def delete_by_id(self, bookmark_id: str) -> bool:
        self._enter("delete_by_id", bookmark_id)
        removed = self.records.pop(bookmark_id, None) is not None
        if self.delete_result_override is not None:
            return self.delete_result_override
        return removed


class FakeRevisionRepository:
    def __init__(self) -> None:
        self.revisions: dict[str, int] = {}
        self.fail = False
        # True 이면 increment 만 실패한다 (저장은 성공, invalidation 실패).
        self.fail_increment = False
        self.increment_calls: list[str] = []

    def get(self, owner_id: str) -> int:
        if self.fail:
            raise StoreError("bookmark_revisions.find_one failed: timeout")
        return self.revisions.get(owner_id, 0)

    def increment(self, owner_id: str) -> int:
        self.increment_calls.append(owner_id)
        if self.fail or self.fail_increment:
            raise StoreError("bookmark_revisions.find_one_and_update failed: timeout")
        self.revisions[owner_id] = self.revisions.get(owner_id, 0) + 1
        return self.revisions[owner_id]


class FakeUserRepository:
    def __init__(self) -> None:
        self.users: dict[tuple[str, str], User] = {}
        self.update_calls: list[str] = []
        # 설정하면 insert 직전에 이 유저가 먼저 저장된 것처럼 동작한다.
        self.concurrent_winner: User | None = None

    def find_by_provider_and_sub(self, provider: str, provider_sub: str) -> User | None:
        return self.users.get((provider, provider_sub))

    def insert(self, user: User) -> User:
        if self.concurrent_winner is not None:
            winner = self.concurrent_winner
            self.users[(winner.provider, winner.provider_sub)] = winner
            raise UserConflictError("user already exists (provider=google)")
        self.users[(user.provider, user.provider_sub)] = user
        return user

    def update_profile(
        self, user_code: str, email: str, name: str, profile_image: str
    ) -> User:
        self.update_calls.append(user_code)
        for key, user in self.users.items():
            if user.user_code == user_code:
                updated = user.model_copy(
                    update={"email": email, "name": name, "profile_image": profile_image}
                )
                self.users[key] = updated
                return updated
        raise RuntimeError(f"user not found for update (user_code={user_code})")


@pytest.fixture
def bookmark_repo() -> FakeBookmarkRepository:
    return FakeBookmarkRepository()


@pytest.fixture
def revision_repo() -> FakeRevisionRepository:
    return FakeRevisionRepository()


@pytest.fixture
def user_repo() -> FakeUserRepository:
    return FakeUserRepository()


@pytest.fixture
def mongo_unconfigured(monkeypatch) -> None:
    """MONGO_URI 가 없고 아직 연결된 적 없는 상태의 MongoDB 클라이언트."""

    monkeypatch.delenv("MONGO_URI", raising=False)
    monkeypatch.setattr(mongo_client, "_client", None)
    monkeypatch.setattr(mongo_client, "_db", None)
