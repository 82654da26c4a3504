from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated

from pydantic.functional_serializers import PlainSerializer


def serialize_datetime_to_utc_iso8601(value: datetime) -> str:
    """datetime 을 UTC 기준 ISO8601(+00:00) 문자열로 직렬화한다.

    naive datetime 은 UTC 로 간주한다.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    else:
        value = value.astimezone(timezone.utc)
    return value.isoformat()


# API 응답(JSON)과 템플릿 data 속성에서 동일한 타임스탬프 표기를 쓰기 위한 타입
UtcDateTime = Annotated[
    datetime,
    PlainSerializer(
        serialize_datetime_to_utc_iso8601,
        return_type=str,
        when_used="json",
    ),
]
