from __future__ import annotations

from pydantic import BaseModel

from common.types.datetime import UtcDateTime
from ...models.bookmark import Bookmark, BookmarkListing


class BookmarkCreateRequest(BaseModel):
    # 누락/빈 값 검증은 Service 에서 InvalidInputError 로 처리한다.
    title: str = ""
    url: str = ""


class BookmarkItem(BaseModel):
    """API 응답용 북마크. owner_id 는 노출하지 않는다."""

    id: str
    title: str
    url: str
    created_at: UtcDateTime
    updated_at: UtcDateTime

    @classmethod
    def from_domain(cls, bookmark: Bookmark) -> "BookmarkItem":
        return cls(
            id=bookmark.id or "",
            title=bookmark.title,
            url=bookmark.url,
            created_at=bookmark.created_at,
            updated_at=bookmark.updated_at,
        )


class ListBookmarksResponse(BaseModel):
    revision: int
    bookmarks: list[BookmarkItem]

    @classmethod
    def from_domain(cls, listing: BookmarkListing) -> "ListBookmarksResponse":
        return cls(
            revision=listing.revision,
            bookmarks=[BookmarkItem.from_domain(b) for b in listing.bookmarks],
        )


class BookmarkDeleteResponse(BaseModel):
    message: str = "bookmark_deleted"


class ErrorResponse(BaseModel):
    detail: str
    error: str
