from __future__ import annotations

import logging

from fastapi import Depends

from ..repositories.bookmark_revision_repository import BookmarkRevisionRepository
from ..repositories.interfaces import BookmarkRevisionRepositoryInterface


logger = logging.getLogger(__name__)


class BookmarkInvalidator:
    """북마크 목록이 바뀌었음을 알리는 invalidation 신호.

    유저별 revision 을 저장소에 올려 두면 다음 조회(페이지 렌더/폴링)가 ETag 불일치로
    목록을 저장소에서 다시 계산한다. 프로세스 내부 캐시는 두지 않는다.
    """

    def __init__(self, revisions: BookmarkRevisionRepositoryInterface) -> None:
        self._revisions = revisions

    def invalidate(self, owner_id: str) -> int:
        revision = self._revisions.increment(owner_id)
        logger.debug(
            "bookmark list invalidated (revision=%s)",
            revision,
            extra={"owner_id": owner_id},
        )
        return revision


def get_revision_repository() -> BookmarkRevisionRepositoryInterface:
    """FastAPI DI용 BookmarkRevisionRepository 팩토리."""

    return BookmarkRevisionRepository()


def get_bookmark_invalidator(
    revisions: BookmarkRevisionRepositoryInterface = Depends(get_revision_repository),
) -> BookmarkInvalidator:
    return BookmarkInvalidator(revisions)
