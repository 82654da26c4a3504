from __future__ import annotations

from datetime import datetime, timezone

from pymongo import ReturnDocument
from pymongo.collection import Collection
from pymongo.database import Database

from common.mongo.client import BOOKMARK_REVISIONS_COLLECTION, get_database

from .interfaces import BookmarkRevisionRepositoryInterface
from .store_errors import translate_store_errors


class BookmarkRevisionRepository(BookmarkRevisionRepositoryInterface):
    """bookmark_revisions 컬렉션에 대한 MongoDB 접근 레이어.

    유저마다 도큐먼트 하나에 revision 정수를 두고, 변경이 있을 때마다 $inc 로 올린다.
    """

    def __init__(self, database: Database | None = None) -> None:
        self._db = database

    def _collection(self) -> Collection:
        if self._db is None:
            self._db = get_database()
        return self._db[BOOKMARK_REVISIONS_COLLECTION]

    def get(self, owner_id: str) -> int:
        with translate_store_errors(BOOKMARK_REVISIONS_COLLECTION, "find_one"):
            raw = self._collection().find_one({"owner_id": owner_id}, {"revision": 1})
        if not raw:
            return 0
        return int(raw.get("revision", 0))

    def increment(self, owner_id: str) -> int:
        now = datetime.now(timezone.utc)
        with translate_store_errors(
            BOOKMARK_REVISIONS_COLLECTION, "find_one_and_update"
        ):
            raw = self._collection().find_one_and_update(
                {"owner_id": owner_id},
                {
                    "$inc": {"revision": 1},
                    "$set": {"updated_at": now},
                    "$setOnInsert": {"created_at": now},
                },
                upsert=True,
                return_document=ReturnDocument.AFTER,
            )
        return int(raw["revision"])
