from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from fastapi import Depends

from ..auth.session_resolver import SessionResolver, get_session_resolver
from ..exceptions import (
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
    OperationFailedError,
    StoreError,
    UnauthenticatedError,
)
from ..models.bookmark import Bookmark
from ..repositories.bookmark_repository import BookmarkRepository
from ..repositories.interfaces import BookmarkRepositoryInterface
from .invalidation_service import BookmarkInvalidator, get_bookmark_invalidator


logger = logging.getLogger(__name__)


class BookmarksService:
    """북마크 생성/삭제 비즈니스 로직.

    - Repository(BookmarkRepositoryInterface)에만 의존하고, Mongo 세부 구현은 알지 않는다.
    - 모든 요청은 세션 확인 -> 입력 검증(생성) 또는 소유권 확인(삭제) -> 저장 -> invalidation 순서로
      진행되며, 어느 단계든 실패하면 재시도 없이 바로 종료한다.
    - 저장소 오류는 서버 로그에만 상세히 남기고 호출 측에는 OperationFailedError 로 알린다.
    """

    def __init__(
        self,
        repo: BookmarkRepositoryInterface,
        invalidator: BookmarkInvalidator,
        resolver: SessionResolver,
    ) -> None:
        self._repo = repo
        self._invalidator = invalidator
        self._resolver = resolver

    def add_bookmark(self, session: Mapping[str, Any], title: Any, url: Any) -> Bookmark:
        owner_id = self._require_owner(session)

        if not _is_present(title) or not _is_present(url):
            raise InvalidInputError("Title and URL are required")

        try:
            bookmark = self._repo.create(owner_id=owner_id, title=title, url=url)
            self._invalidator.invalidate(owner_id)
        except StoreError as exc:
            logger.exception(
                "error adding bookmark",
                extra={"owner_id": owner_id, "operation": "add"},
            )
            raise OperationFailedError("add") from exc

        logger.info(
            "bookmark added",
            extra={"owner_id": owner_id, "bookmark_id": bookmark.id},
        )
        return bookmark

    def delete_bookmark(self, session: Mapping[str, Any], bookmark_id: str) -> None:
        """소유자 본인의 북마크만 삭제한다.

        조회 시점에 이미 없으면 NotFoundError, 소유자가 다르면 ForbiddenError 를 발생시킨다.
        소유권 확인 이후 동시 삭제에 밀려 삭제 결과가 0건이어도 목표 상태(레코드 없음)는
        달성되었으므로 성공으로 처리한다.
        """

        owner_id = self._require_owner(session)
        log_extra = {"owner_id": owner_id, "bookmark_id": bookmark_id}

        try:
            bookmark = self._repo.find_by_id(bookmark_id)
            if bookmark is None:
                raise NotFoundError()

            if bookmark.owner_id != owner_id:
                logger.warning("bookmark delete forbidden", extra=log_extra)
                raise ForbiddenError()

            deleted = self._repo.delete_by_id(bookmark_id)
            if not deleted:
                logger.info("bookmark already removed by a concurrent delete", extra=log_extra)

            self._invalidator.invalidate(owner_id)
        except StoreError as exc:
            logger.exception(
                "error deleting bookmark",
                extra={**log_extra, "operation": "delete"},
            )
            raise OperationFailedError("delete") from exc

        logger.info("bookmark deleted", extra=log_extra)

    def _require_owner(self, session: Mapping[str, Any]) -> str:
        owner_id = self._resolver.resolve(session)
        if owner_id is None:
            raise UnauthenticatedError()
        return owner_id


def _is_present(value: Any) -> bool:
    return isinstance(value, str) and value != ""


def get_bookmark_repository() -> BookmarkRepositoryInterface:
    """FastAPI DI용 BookmarkRepository 팩토리."""

    return BookmarkRepository()


def get_bookmarks_service(
    repo: BookmarkRepositoryInterface = Depends(get_bookmark_repository),
    invalidator: BookmarkInvalidator = Depends(get_bookmark_invalidator),
    resolver: SessionResolver = Depends(get_session_resolver),
) -> BookmarksService:
    """FastAPI DI용 BookmarksService 팩토리."""

    return BookmarksService(repo, invalidator, resolver)
