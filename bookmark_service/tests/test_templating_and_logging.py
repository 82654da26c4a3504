from __future__ import annotations

import json
import logging

import pytest

from common.logger import JsonFormatter
from common.middleware.request_trace import redact_query_params

from bookmark_service.app.web.templating import safe_href


@pytest.mark.parametrize(
    "url",
    ["https://example.com", "http://example.com/a?b=1", "mailto:me@example.com", "ftp://files.example"],
)
def test_safe_href_keeps_allowed_schemes(url: str) -> None:
    assert safe_href(url) == url


@pytest.mark.parametrize(
    "url",
    ["javascript:alert(1)", " JavaScript:alert(1)", "data:text/html,hi", "example.com", "", "http://[::1"],
)
def test_safe_href_neutralizes_other_values(url: str) -> None:
    assert safe_href(url) == "#"


def test_oauth_callback_query_is_redacted() -> None:
    params = redact_query_params("code=secret&state=xyz&next=%2F&tag=a&tag=b")

    assert params == {"code": "***", "state": "***", "next": "/", "tag": ["a", "b"]}


def test_json_formatter_includes_bookmark_extras() -> None:
    record = logging.LogRecord(
        name="bookmark_service",
        level=logging.ERROR,
        pathname=__file__,
        lineno=1,
        msg="error deleting bookmark",
        args=(),
        exc_info=None,
    )
    record.owner_id = "google:abc"
    record.bookmark_id = "65a000000000000000000000"
    record.operation = "delete"
    record.unrelated = "dropped"

    payload = json.loads(JsonFormatter().format(record))

    assert payload["message"] == "error deleting bookmark"
    assert payload["level"] == "ERROR"
    assert payload["owner_id"] == "google:abc"
    assert payload["operation"] == "delete"
    assert "unrelated" not in payload
