from __future__ import annotations


class BookmarkServiceError(Exception):
    """bookmark-service 예외의 공통 베이스. kind 는 API 오류 응답의 error 값이다."""

    kind = "error"


class UnauthenticatedError(BookmarkServiceError):
    """세션이 없거나 세션에 소유자 식별자(user_code)가 없는 경우."""

    kind = "unauthenticated"

    def __init__(self, message: str = "User not authenticated") -> None:
        super().__init__(message)


class InvalidInputError(BookmarkServiceError):
    """title/url 등 사용자 입력이 누락되었거나 빈 값인 경우."""

    kind = "invalid_input"


class NotFoundError(BookmarkServiceError):
    """요청한 북마크가 존재하지 않는 경우."""

    kind = "not_found"

    def __init__(self, message: str = "Bookmark not found") -> None:
        super().__init__(message)


class ForbiddenError(BookmarkServiceError):
    """북마크는 존재하지만 다른 유저의 소유인 경우."""

    kind = "forbidden"

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


# list 는 조회 경로에서 사용하는 operation 이름이다.
_OPERATION_MESSAGES = {
    "add": "Failed to add bookmark",
    "delete": "Failed to delete bookmark",
    "list": "Failed to load bookmarks",
}


class OperationFailedError(BookmarkServiceError):
    """저장소 장애를 내부 메시지 없이 호출 측에 알리기 위한 예외."""

    kind = "operation_failed"

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(
            _OPERATION_MESSAGES.get(operation, f"Failed to {operation} bookmark")
        )


class StoreError(BookmarkServiceError):
    """저장소(연결 끊김, 쓰기 실패 등)에서 발생한 오류. Service 에서 항상 감싸진다."""

    kind = "store_error"


class UserConflictError(StoreError):
    """(provider, provider_sub) 유니크 인덱스 충돌. 동시에 처음 로그인한 경우 발생한다."""

    kind = "conflict"
