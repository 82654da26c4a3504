from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse, Response

from ..api.schemas.bookmarks import ListBookmarksResponse
from ..auth.session_resolver import (
    SESSION_USER_KEY,
    SessionResolver,
    get_session_data,
    get_session_resolver,
)
from ..exceptions import OperationFailedError, UnauthenticatedError
from ..services.bookmark_query_service import (
    BookmarkQueryService,
    get_bookmark_query_service,
)
from .templating import templates


router = APIRouter()

LOGIN_PATH = "/login"
HOME_PATH = "/"


@router.get(HOME_PATH, response_class=HTMLResponse, include_in_schema=False)
def home(
    request: Request,
    session: Mapping[str, Any] = Depends(get_session_data),
    service: BookmarkQueryService = Depends(get_bookmark_query_service),
) -> Response:
    """북마크 홈 화면. 로그인하지 않았으면 로그인 페이지로 보낸다."""

    try:
        listing = service.list_bookmarks(session)
    except UnauthenticatedError:
        return RedirectResponse(LOGIN_PATH, status_code=status.HTTP_303_SEE_OTHER)
    except OperationFailedError as exc:
        return templates.TemplateResponse(
            request,
            "error.html",
            {"message": str(exc)},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    initial = ListBookmarksResponse.from_domain(listing)
    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "user": session.get(SESSION_USER_KEY) or {},
            "bookmarks": initial.bookmarks,
            "etag": listing.etag(),
            "poll_interval_ms": request.app.state.config.ui.poll_interval_ms,
        },
        headers={"Cache-Control": "no-store"},
    )


@router.get(LOGIN_PATH, response_class=HTMLResponse, include_in_schema=False)
def login_page(
    request: Request,
    session: Mapping[str, Any] = Depends(get_session_data),
    resolver: SessionResolver = Depends(get_session_resolver),
) -> Response:
    if resolver.resolve(session) is not None:
        return RedirectResponse(HOME_PATH, status_code=status.HTTP_303_SEE_OTHER)
    return templates.TemplateResponse(request, "login.html", {"error": None})
