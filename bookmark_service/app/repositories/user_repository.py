from __future__ import annotations

from datetime import datetime, timezone

from pymongo import ReturnDocument
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from common.models.user import User
from common.mongo.client import USERS_COLLECTION, get_database

from .documents.user_document import UserDocument
from .interfaces import UserRepositoryInterface
from .store_errors import translate_store_errors
from ..exceptions import UserConflictError


class UserRepository(UserRepositoryInterface):
    """users 컬렉션에 대한 MongoDB 접근 레이어."""

    def __init__(self, database: Database | None = None) -> None:
        self._db = database

    def _collection(self) -> Collection:
        if self._db is None:
            self._db = get_database()
        return self._db[USERS_COLLECTION]

    @staticmethod
    def _from_document(doc: dict) -> User:
        return UserDocument.model_validate(doc).to_domain()

    def find_by_provider_and_sub(self, provider: str, provider_sub: str) -> User | None:
        with translate_store_errors(USERS_COLLECTION, "find_one"):
            doc = self._collection().find_one(
                {"provider": provider, "provider_sub": provider_sub}
            )
        if not doc:
            return None
        return self._from_document(doc)

    def insert(self, user: User) -> User:
        payload = UserDocument.from_domain(user).to_mongo_record()
        with translate_store_errors(USERS_COLLECTION, "insert_one"):
            try:
                self._collection().insert_one(payload)
            except DuplicateKeyError as exc:
                raise UserConflictError(
                    f"user already exists (provider={user.provider})"
                ) from exc
        return self._from_document(payload)

    def update_profile(
        self,
        user_code: str,
        email: str,
        name: str,
        profile_image: str,
    ) -> User:
        now = datetime.now(timezone.utc)
        with translate_store_errors(USERS_COLLECTION, "find_one_and_update"):
            result = self._collection().find_one_and_update(
                {"user_code": user_code},
                {
                    "$set": {
                        "email": email,
                        "name": name,
                        "profile_image": profile_image,
                        "updated_at": now,
                    }
                },
                return_document=ReturnDocument.AFTER,
            )
        if not result:
            raise RuntimeError(f"user not found for update (user_code={user_code})")
        return self._from_document(result)
