from __future__ import annotations

from pathlib import Path
from urllib.parse import urlsplit

from fastapi.templating import Jinja2Templates


WEB_DIR = Path(__file__).resolve().parent
TEMPLATES_DIR = WEB_DIR / "templates"
STATIC_DIR = WEB_DIR / "static"

# static/bookmarks.js 의 SAFE_SCHEMES 와 같은 목록을 유지한다.
SAFE_LINK_SCHEMES = frozenset({"http", "https", "mailto", "ftp"})


def safe_href(url: str) -> str:
    """url 은 서버에서 형식 검증을 하지 않으므로, 링크로 쓸 때만 허용된 scheme 인지 확인한다.

    javascript: 등 그 외 scheme 은 클릭해도 아무 동작이 없도록 "#" 을 반환한다.
    """

    try:
        scheme = urlsplit(url.strip()).scheme.lower()
    except ValueError:
        return "#"
    if scheme in SAFE_LINK_SCHEMES:
        return url
    return "#"


templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters["safe_href"] = safe_href
