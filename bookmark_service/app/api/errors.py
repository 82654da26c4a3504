from __future__ import annotations

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from ..exceptions import (
    BookmarkServiceError,
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
    OperationFailedError,
    UnauthenticatedError,
)


_STATUS_BY_ERROR: dict[type[BookmarkServiceError], int] = {
    UnauthenticatedError: status.HTTP_401_UNAUTHORIZED,
    InvalidInputError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ForbiddenError: status.HTTP_403_FORBIDDEN,
    OperationFailedError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_code_for(exc: BookmarkServiceError) -> int:
    for error_type, code in _STATUS_BY_ERROR.items():
        if isinstance(exc, error_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def bookmark_service_error_handler(
    request: Request, exc: BookmarkServiceError
) -> JSONResponse:
    """Service 예외를 {"detail", "error"} JSON 응답으로 변환한다.

    StoreError 는 Service 에서 항상 OperationFailedError 로 감싸지므로 여기까지 오면
    내부 메시지를 숨기고 일반 오류로 응답한다.
    """

    if isinstance(exc, tuple(_STATUS_BY_ERROR)):
        detail, kind = str(exc), exc.kind
    else:
        detail, kind = "Internal server error", OperationFailedError.kind

    return JSONResponse(
        status_code=status_code_for(exc),
        content={"detail": detail, "error": kind},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BookmarkServiceError, bookmark_service_error_handler)  # type: ignore[arg-type]
