from __future__ import annotations

from common.mongo.types import BaseDocument, from_object_id
from ...models.bookmark import Bookmark


class BookmarkDocument(BaseDocument):
    """MongoDB bookmarks 컬렉션 도큐먼트 모델."""

    owner_id: str
    title: str
    url: str

    @classmethod
    def from_domain(cls, bookmark: Bookmark) -> "BookmarkDocument":
        data = {
            "owner_id": bookmark.owner_id,
            "title": bookmark.title,
            "url": bookmark.url,
            "created_at": bookmark.created_at,
            "updated_at": bookmark.updated_at,
        }
        if bookmark.id is not None:
            data["_id"] = bookmark.id
        return cls.model_validate(data)

    def to_domain(self) -> Bookmark:
        return Bookmark(
            id=from_object_id(self.id),
            owner_id=self.owner_id,
            title=self.title,
            url=self.url,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )
