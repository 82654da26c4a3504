import logging
import time
import uuid
from urllib.parse import parse_qs

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response


REQUEST_ID_HEADER = "X-Request-Id"
SPAN_ID_HEADER = "X-Span-Id"

# 헬스체크, 정적 파일, 폴링 304 응답 등 노이즈가 많은 경로는 로그에서 제외한다.
IGNORED_LOG_PATHS: set[str] = {"/health", "/favicon.ico"}
IGNORED_LOG_PREFIXES: tuple[str, ...] = ("/static/",)

# OAuth 콜백의 인가 코드 등은 로그에 남기지 않는다.
REDACTED_QUERY_KEYS: set[str] = {"code", "state", "id_token", "access_token"}
REDACTED_VALUE = "***"

MAX_BODY_LOG_LENGTH = 1024


class RequestTraceMiddleware(BaseHTTPMiddleware):
    """공통 Request/Span ID 로그 미들웨어.

    - 들어오는 요청에서 X-Request-Id, X-Span-Id 를 읽고, 없으면 request_id만 새로 생성한다.
    - request.state 에 request_id, span_id 를 저장한다.
    - 응답 헤더에 동일한 값을 설정한다.
    - 요청당 한 줄의 completed/failed 로그를 남긴다.
    """

    def __init__(self, app, logger: logging.Logger | None = None) -> None:  # type: ignore[override]
        super().__init__(app)
        self._logger = logger or logging.getLogger("request_trace")

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id, span_id = self._extract_trace_ids(request)

        request.state.request_id = request_id
        request.state.span_id = span_id

        raw_body: str | None = None
        if request.method in {"POST", "PUT", "PATCH", "DELETE"}:
            try:
                body_bytes = await request.body()
            except Exception:
                body_bytes = b""
            if body_bytes:
                text = body_bytes.decode("utf-8", errors="replace")
                raw_body = text[:MAX_BODY_LOG_LENGTH]

        request.state.request_body = raw_body

        should_log = self._should_log_request(request)

        start = time.monotonic()

        try:
            response = await call_next(request)
        except Exception:
            if should_log:
                duration = time.monotonic() - start
                self._log_exception(request, request_id, span_id, duration)
            raise

        self._set_response_headers(response, request_id, span_id)

        if should_log:
            duration = time.monotonic() - start
            self._log_completed(request, response, request_id, span_id, duration)

        return response

    def _extract_trace_ids(self, request: Request) -> tuple[str, str]:
        request_id = request.headers.get(REQUEST_ID_HEADER)
        if not request_id:
            request_id = self._generate_request_id()

        span_id = request.headers.get(SPAN_ID_HEADER) or "0"
        return request_id, span_id

    def _should_log_request(self, request: Request) -> bool:
        path = request.url.path
        if path in IGNORED_LOG_PATHS:
            return False
        return not path.startswith(IGNORED_LOG_PREFIXES)

    def _build_log_extra(
        self,
        request: Request,
        request_id: str,
        span_id: str,
        status: int | None = None,
        duration: float | None = None,
    ) -> dict[str, object]:
        extra: dict[str, object] = {
            "request_id": request_id,
            "span_id": span_id,
            "method": request.method,
            "path": request.url.path,
        }

        query = request.url.query
        if query:
            query_params = redact_query_params(query)
            if query_params:
                extra["query_params"] = query_params

        body = getattr(request.state, "request_body", None)
        if body:
            extra["body"] = body

        if status is not None:
            extra["status"] = status

        if duration is not None:
            extra["duration"] = f"{duration * 1000:.3f}ms"

        return extra

    def _log_completed(
        self,
        request: Request,
        response: Response,
        request_id: str,
        span_id: str,
        duration: float,
    ) -> None:
        self._logger.info(
            "completed request",
            extra=self._build_log_extra(
                request,
                request_id,
                span_id,
                status=response.status_code,
                duration=duration,
            ),
        )

    def _log_exception(
        self,
        request: Request,
        request_id: str,
        span_id: str,
        duration: float | None = None,
    ) -> None:
        self._logger.exception(
            "request failed",
            extra=self._build_log_extra(
                request,
                request_id,
                span_id,
                duration=duration,
            ),
        )

    def _set_response_headers(
        self,
        response: Response,
        request_id: str,
        span_id: str,
    ) -> None:
        response.headers.setdefault(REQUEST_ID_HEADER, request_id)
        response.headers.setdefault(SPAN_ID_HEADER, span_id)

    def _generate_request_id(self) -> str:
        return uuid.uuid4().hex


def redact_query_params(query: str) -> dict[str, object]:
    """쿼리 문자열을 dict 로 변환하면서 민감한 키의 값은 가린다."""

    parsed = parse_qs(query, keep_blank_values=True)
    result: dict[str, object] = {}
    for key, values in parsed.items():
        if key in REDACTED_QUERY_KEYS:
            result[key] = REDACTED_VALUE
        else:
            result[key] = values[0] if len(values) == 1 else values
    return result
