from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import RedirectResponse, Response
from starlette.concurrency import run_in_threadpool

from ..auth.oauth import GOOGLE_PROVIDER, IdentityError, fetch_google_identity
from ..auth.session_resolver import SESSION_USER_KEY, build_session_user
from ..exceptions import StoreError
from ..services.users_service import UsersService, get_users_service
from .pages import HOME_PATH, LOGIN_PATH
from .templating import templates


logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/login", include_in_schema=False)
async def auth_login(request: Request) -> Response:
    """Google 로그인 화면으로 리다이렉트한다."""

    config = request.app.state.config
    redirect_uri = config.oauth.redirect_uri or str(request.url_for("auth_callback"))
    client = request.app.state.oauth.create_client(GOOGLE_PROVIDER)
    return await client.authorize_redirect(request, redirect_uri)


@router.get("/callback", name="auth_callback", include_in_schema=False)
async def auth_callback(
    request: Request,
    service: UsersService = Depends(get_users_service),
) -> Response:
    """OAuth 콜백: 유저를 upsert 하고 세션에 user_code 를 저장한다."""

    try:
        identity = await fetch_google_identity(request.app.state.oauth, request)
    except IdentityError as exc:
        logger.warning("oauth login failed: %s", exc)
        return templates.TemplateResponse(
            request,
            "login.html",
            {"error": "Sign-in with Google failed. Please try again."},
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    try:
        user = await run_in_threadpool(service.upsert_user, identity)
    except StoreError:
        logger.exception("error upserting user on login")
        return templates.TemplateResponse(
            request,
            "error.html",
            {"message": "Failed to sign in"},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    request.session.clear()
    request.session[SESSION_USER_KEY] = build_session_user(
        user_code=user.user_code,
        name=user.name,
        email=user.email,
        image=user.profile_image,
    )
    logger.info("user signed in", extra={"owner_id": user.user_code})
    return RedirectResponse(HOME_PATH, status_code=status.HTTP_303_SEE_OTHER)


@router.post("/logout", include_in_schema=False)
async def auth_logout(request: Request) -> Response:
    request.session.clear()
    return RedirectResponse(LOGIN_PATH, status_code=status.HTTP_303_SEE_OTHER)
