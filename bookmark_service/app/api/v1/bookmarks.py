from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from fastapi import APIRouter, Depends, Request, Response, status

from ..schemas.bookmarks import (
    BookmarkCreateRequest,
    BookmarkDeleteResponse,
    BookmarkItem,
    ErrorResponse,
    ListBookmarksResponse,
)
from ...auth.session_resolver import get_session_data
from ...services.bookmark_query_service import (
    BookmarkQueryService,
    get_bookmark_query_service,
)
from ...services.bookmarks_service import BookmarksService, get_bookmarks_service


router = APIRouter()

# 폴링 응답은 브라우저 캐시 대신 ETag 로만 재검증한다.
CACHE_CONTROL = "no-cache"

_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    status.HTTP_401_UNAUTHORIZED: {"model": ErrorResponse},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
}


# 저장소 호출이 블로킹이므로 핸들러는 일반 def 로 두어 스레드풀에서 실행되게 한다.
@router.get(
    "",
    response_model=ListBookmarksResponse,
    summary="내 북마크 목록 조회 (초기 렌더/폴링 공용)",
    responses={status.HTTP_304_NOT_MODIFIED: {"description": "변경 없음"}, **_ERROR_RESPONSES},
)
def list_bookmarks(
    request: Request,
    response: Response,
    session: Mapping[str, Any] = Depends(get_session_data),
    service: BookmarkQueryService = Depends(get_bookmark_query_service),
) -> Any:
    listing = service.list_bookmarks(session)
    etag = listing.etag()
    if request.headers.get("if-none-match") == etag:
        return Response(
            status_code=status.HTTP_304_NOT_MODIFIED,
            headers={"ETag": etag, "Cache-Control": CACHE_CONTROL},
        )

    response.headers["ETag"] = etag
    response.headers["Cache-Control"] = CACHE_CONTROL
    return ListBookmarksResponse.from_domain(listing)


@router.post(
    "",
    response_model=BookmarkItem,
    status_code=status.HTTP_201_CREATED,
    summary="북마크 추가",
    responses={status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse}, **_ERROR_RESPONSES},
)
def add_bookmark(
    body: BookmarkCreateRequest,
    session: Mapping[str, Any] = Depends(get_session_data),
    service: BookmarksService = Depends(get_bookmarks_service),
) -> BookmarkItem:
    bookmark = service.add_bookmark(session, title=body.title, url=body.url)
    return BookmarkItem.from_domain(bookmark)


@router.delete(
    "/{bookmark_id}",
    response_model=BookmarkDeleteResponse,
    summary="북마크 삭제 (소유자만 가능)",
    responses={
        status.HTTP_403_FORBIDDEN: {"model": ErrorResponse},
        status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
        **_ERROR_RESPONSES,
    },
)
def delete_bookmark(
    bookmark_id: str,
    session: Mapping[str, Any] = Depends(get_session_data),
    service: BookmarksService = Depends(get_bookmarks_service),
) -> BookmarkDeleteResponse:
    service.delete_bookmark(session, bookmark_id)
    return BookmarkDeleteResponse()
