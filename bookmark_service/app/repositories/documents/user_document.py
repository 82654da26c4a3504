from __future__ import annotations

from common.models.user import User
from common.mongo.types import BaseDocument


class UserDocument(BaseDocument):
    """MongoDB users 컬렉션 도큐먼트 모델."""

    user_code: str
    provider: str
    provider_sub: str
    email: str
    name: str
    profile_image: str

    @classmethod
    def from_domain(cls, user: User) -> "UserDocument":
        # User 도메인 모델에는 _id 를 노출하지 않으므로 Mongo 가 새로 발급한다.
        return cls.model_validate(user.model_dump())

    def to_domain(self) -> User:
        return User(
            user_code=self.user_code,
            provider=self.provider,
            provider_sub=self.provider_sub,
            email=self.email,
            name=self.name,
            profile_image=self.profile_image,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )
