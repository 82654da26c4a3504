from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from pymongo.errors import PyMongoError

from common.mongo.client import MongoConnectionError

from ..exceptions import StoreError


@contextmanager
def translate_store_errors(collection: str, operation: str) -> Iterator[None]:
    """pymongo 예외와 연결 실패를 StoreError 로 감싸 Service 레이어가 드라이버를 몰라도 되게 한다."""

    try:
        yield
    except (PyMongoError, MongoConnectionError) as exc:
        raise StoreError(f"{collection}.{operation} failed: {exc}") from exc
