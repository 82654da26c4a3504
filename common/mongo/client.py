from __future__ import annotations

import logging
import threading
from typing import Optional

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.database import Database

from .config import get_mongo_db_name, get_mongo_uri


logger = logging.getLogger(__name__)


BOOKMARKS_COLLECTION = "bookmarks"
USERS_COLLECTION = "users"
BOOKMARK_REVISIONS_COLLECTION = "bookmark_revisions"


class MongoConnectionError(RuntimeError):
    """MongoDB 설정 누락 또는 연결 실패로 Database 를 얻지 못한 경우."""


_client: Optional[MongoClient] = None
_db: Optional[Database] = None
_lock = threading.Lock()


def get_client() -> MongoClient:
    """프로세스 단위 MongoClient 싱글톤을 반환한다.

    - MONGO_URI 에서 URI 를 읽어온다.
    - ping 으로 연결을 검증한다.
    - 설정 누락, 연결 실패는 MongoConnectionError 로 알린다.
    - 사용할 DB 를 결정하고 필요한 인덱스를 한 번만 생성한다.

    MongoClient 는 자체 커넥션 풀을 가지므로 스레드풀에서 실행되는 요청 핸들러들이
    하나의 인스턴스를 공유해도 안전하다.
    """

    global _client, _db

    if _client is not None:
        return _client

    with _lock:
        if _client is not None:
            return _client

        try:
            uri = get_mongo_uri()
            client: MongoClient = MongoClient(uri, tz_aware=True)
        except Exception as exc:  # noqa: BLE001
            raise MongoConnectionError(f"invalid MongoDB configuration: {exc}") from exc

        try:
            client.admin.command("ping")
        except Exception as exc:  # noqa: BLE001
            client.close()
            raise MongoConnectionError(f"failed to connect to MongoDB: {exc}") from exc

        db_name = get_mongo_db_name()
        try:
            db = client[db_name] if db_name else client.get_default_database()
        except Exception as exc:  # noqa: BLE001
            client.close()
            raise MongoConnectionError(
                "MongoDB database name must be specified via MONGO_DB_NAME or in MONGO_URI (mongodb://.../db_name)",
            ) from exc

        try:
            ensure_indexes(db)
        except Exception as exc:  # noqa: BLE001
            client.close()
            logger.error("failed to ensure MongoDB indexes: %s", exc)
            raise

        _client = client
        _db = db

        logger.info("MongoDB connected and indexes ensured (db=%s)", db.name)
        return _client


def get_database() -> Database:
    """전역 기본 Database 객체를 반환한다."""

    if _db is None:
        get_client()
    assert _db is not None
    return _db


def close_client() -> None:
    """애플리케이션 종료 시 커넥션 풀을 정리한다."""

    global _client, _db

    with _lock:
        if _client is not None:
            _client.close()
        _client = None
        _db = None


def ensure_indexes(db: Database) -> None:
    """필수 인덱스를 생성한다. 중복 생성해도 MongoDB 가 처리하므로 idempotent 하다."""

    bookmarks = db[BOOKMARKS_COLLECTION]

    # 목록 조회: owner_id 일치 + created_at desc, _id desc
    bookmarks.create_index(
        [("owner_id", ASCENDING), ("created_at", DESCENDING), ("_id", DESCENDING)],
        name="idx_owner_created_at_id_desc",
    )

    users = db[USERS_COLLECTION]

    users.create_index(
        [("user_code", ASCENDING)],
        name="uniq_user_code",
        unique=True,
    )

    users.create_index(
        [("provider", ASCENDING), ("provider_sub", ASCENDING)],
        name="uniq_provider_provider_sub",
        unique=True,
    )

    revisions = db[BOOKMARK_REVISIONS_COLLECTION]

    revisions.create_index(
        [("owner_id", ASCENDING)],
        name="uniq_owner_id",
        unique=True,
    )
