from __future__ import annotations

from datetime import datetime, timezone

from pymongo import DESCENDING
from pymongo.collection import Collection
from pymongo.database import Database

from common.mongo.client import BOOKMARKS_COLLECTION, get_database
from common.mongo.types import parse_object_id

from .documents.bookmark_document import BookmarkDocument
from .interfaces import BookmarkRepositoryInterface
from .store_errors import translate_store_errors
from ..models.bookmark import Bookmark


class BookmarkRepository(BookmarkRepositoryInterface):
    """bookmarks 컬렉션에 대한 MongoDB 접근 레이어."""

    def __init__(self, database: Database | None = None) -> None:
        self._db = database

    # database 를 주입하지 않으면 첫 저장소 호출 시점에 공용 Database 에 연결한다.
    # 연결 실패도 translate_store_errors 안에서 StoreError 로 바뀐다.
    def _collection(self) -> Collection:
        if self._db is None:
            self._db = get_database()
        return self._db[BOOKMARKS_COLLECTION]

    def create(self, owner_id: str, title: str, url: str) -> Bookmark:
        now = datetime.now(timezone.utc)
        doc = BookmarkDocument.from_domain(
            Bookmark(
                owner_id=owner_id,
                title=title,
                url=url,
                created_at=now,
                updated_at=now,
            )
        )
        payload = doc.to_mongo_record()
        with translate_store_errors(BOOKMARKS_COLLECTION, "insert_one"):
            result = self._collection().insert_one(payload)

        payload["_id"] = result.inserted_id
        return BookmarkDocument.model_validate(payload).to_domain()

    def list_by_owner(self, owner_id: str) -> list[Bookmark]:
        items: list[Bookmark] = []
        with translate_store_errors(BOOKMARKS_COLLECTION, "find"):
            cursor = self._collection().find(
                {"owner_id": owner_id},
                sort=[("created_at", DESCENDING), ("_id", DESCENDING)],
            )
            for raw in cursor:
                items.append(BookmarkDocument.model_validate(raw).to_domain())
        return items

    def find_by_id(self, bookmark_id: str) -> Bookmark | None:
        object_id = parse_object_id(bookmark_id)
        if object_id is None:
            return None

        with translate_store_errors(BOOKMARKS_COLLECTION, "find_one"):
            raw = self._collection().find_one({"_id": object_id})
        if not raw:
            return None
        return BookmarkDocument.model_validate(raw).to_domain()

    def delete_by_id(self, bookmark_id: str) -> bool:
        object_id = parse_object_id(bookmark_id)
        if object_id is None:
            return False

        with translate_store_errors(BOOKMARKS_COLLECTION, "delete_one"):
            result = self._collection().delete_one({"_id": object_id})
        return result.deleted_count > 0
