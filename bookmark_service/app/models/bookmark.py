from __future__ import annotations

import hashlib
from datetime import datetime

from pydantic import BaseModel, Field


class Bookmark(BaseModel):
    """유저가 저장한 링크 도메인 모델.

    - owner_id 는 생성한 유저의 user_code 이며 생성 이후 바뀌지 않는다.
    - 수정 경로가 없으므로 updated_at 은 항상 created_at 과 같다.
    """

    id: str | None = None
    owner_id: str
    title: str
    url: str
    created_at: datetime
    updated_at: datetime


class BookmarkListing(BaseModel):
    """한 유저의 북마크 목록과 그 목록을 계산한 시점의 revision.

    revision 은 변경(invalidation)이 있을 때마다 1씩 증가한다.
    """

    owner_id: str
    revision: int = 0
    bookmarks: list[Bookmark] = Field(default_factory=list)

    def etag(self) -> str:
        """조건부 GET(If-None-Match)에 쓰는 weak ETag.

        저장소에서 실제로 읽은 북마크 id 목록까지 해시에 포함하므로, invalidation 이
        실패해 revision 이 그대로여도 목록이 바뀌면 ETag 도 바뀐다.
        유저마다 값이 겹치지 않도록 owner_id 도 포함한다.
        """

        digest = hashlib.sha256()
        digest.update(self.owner_id.encode("utf-8"))
        digest.update(f"\x00{self.revision}".encode("utf-8"))
        for bookmark in self.bookmarks:
            digest.update(f"\x00{bookmark.id}".encode("utf-8"))
        return f'W/"{digest.hexdigest()[:32]}"'
