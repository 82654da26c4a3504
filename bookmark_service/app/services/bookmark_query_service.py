from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from fastapi import Depends

from ..auth.session_resolver import SessionResolver, get_session_resolver
from ..exceptions import OperationFailedError, StoreError, UnauthenticatedError
from ..models.bookmark import BookmarkListing
from ..repositories.interfaces import (
    BookmarkRepositoryInterface,
    BookmarkRevisionRepositoryInterface,
)
from .bookmarks_service import get_bookmark_repository
from .invalidation_service import get_revision_repository


logger = logging.getLogger(__name__)


class BookmarkQueryService:
    """현재 세션 유저의 북마크 목록 조회 (페이지 렌더/폴링 공용).

    부수효과가 없는 읽기 전용 경로이며 반복/동시 호출해도 안전하다.
    조건부 GET 도 항상 저장소에서 목록을 다시 읽은 뒤 ETag 를 비교한다.
    """

    def __init__(
        self,
        repo: BookmarkRepositoryInterface,
        revisions: BookmarkRevisionRepositoryInterface,
        resolver: SessionResolver,
    ) -> None:
        self._repo = repo
        self._revisions = revisions
        self._resolver = resolver

    def list_bookmarks(self, session: Mapping[str, Any]) -> BookmarkListing:
        owner_id = self._require_owner(session)

        try:
            # revision 을 먼저 읽어야 목록보다 새로운 revision 이 붙는 일이 없다.
            revision = self._revisions.get(owner_id)
            bookmarks = self._repo.list_by_owner(owner_id)
        except StoreError as exc:
            logger.exception(
                "error listing bookmarks",
                extra={"owner_id": owner_id, "operation": "list"},
            )
            raise OperationFailedError("list") from exc

        return BookmarkListing(
            owner_id=owner_id, revision=revision, bookmarks=bookmarks
        )

    def _require_owner(self, session: Mapping[str, Any]) -> str:
        owner_id = self._resolver.resolve(session)
        if owner_id is None:
            raise UnauthenticatedError()
        return owner_id


def get_bookmark_query_service(
    repo: BookmarkRepositoryInterface = Depends(get_bookmark_repository),
    revisions: BookmarkRevisionRepositoryInterface = Depends(get_revision_repository),
    resolver: SessionResolver = Depends(get_session_resolver),
) -> BookmarkQueryService:
    """FastAPI DI용 BookmarkQueryService 팩토리."""

    return BookmarkQueryService(repo, revisions, resolver)
