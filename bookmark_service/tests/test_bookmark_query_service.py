from __future__ import annotations

from datetime import datetime, timezone

import pytest

from bookmark_service.app.auth.session_resolver import SessionResolver, build_session_user
from bookmark_service.app.exceptions import OperationFailedError, UnauthenticatedError
from bookmark_service.app.models.bookmark import Bookmark, BookmarkListing
from bookmark_service.app.services.bookmark_query_service import BookmarkQueryService


def _session(owner_id: str) -> dict[str, object]:
    return {"user": build_session_user(user_code=owner_id, name="", email="", image="")}


def _build_service(bookmark_repo, revision_repo) -> BookmarkQueryService:
    return BookmarkQueryService(bookmark_repo, revision_repo, SessionResolver())


def test_list_returns_newest_first(bookmark_repo, revision_repo) -> None:
    first = bookmark_repo.create("u1", "First", "https://one.example")
    second = bookmark_repo.create("u1", "Second", "https://two.example")
    service = _build_service(bookmark_repo, revision_repo)

    listing = service.list_bookmarks(_session("u1"))

    assert [b.id for b in listing.bookmarks] == [second.id, first.id]


def test_list_only_returns_session_owner_bookmarks(bookmark_repo, revision_repo) -> None:
    mine = bookmark_repo.create("u1", "Mine", "https://mine.example")
    bookmark_repo.create("u2", "Theirs", "https://theirs.example")
    service = _build_service(bookmark_repo, revision_repo)

    listing = service.list_bookmarks(_session("u1"))

    assert [b.id for b in listing.bookmarks] == [mine.id]
    assert all(b.owner_id == "u1" for b in listing.bookmarks)


def test_list_for_new_user_is_empty(bookmark_repo, revision_repo) -> None:
    service = _build_service(bookmark_repo, revision_repo)

    listing = service.list_bookmarks(_session("u1"))

    assert listing.bookmarks == []
    assert listing.revision == 0


def test_list_requires_session(bookmark_repo, revision_repo) -> None:
    service = _build_service(bookmark_repo, revision_repo)

    with pytest.raises(UnauthenticatedError):
        service.list_bookmarks({})
    with pytest.raises(UnauthenticatedError):
        service.list_bookmarks({"user": {"user_code": ""}})

    assert bookmark_repo.calls == []


def test_list_store_failure_is_wrapped(bookmark_repo, revision_repo) -> None:
    bookmark_repo.fail_on.add("list_by_owner")
    service = _build_service(bookmark_repo, revision_repo)

    with pytest.raises(OperationFailedError) as exc_info:
        service.list_bookmarks(_session("u1"))

    assert exc_info.value.operation == "list"
    assert str(exc_info.value) == "Failed to load bookmarks"


def test_repeated_reads_are_stable(bookmark_repo, revision_repo) -> None:
    bookmark_repo.create("u1", "Docs", "https://example.com")
    revision_repo.revisions["u1"] = 3
    service = _build_service(bookmark_repo, revision_repo)

    first = service.list_bookmarks(_session("u1"))
    second = service.list_bookmarks(_session("u1"))

    assert first == second
    assert first.etag() == second.etag()


def _bookmark(bookmark_id: str) -> Bookmark:
    now = datetime(2024, 1, 1, tzinfo=timezone.utc)
    return Bookmark(
        id=bookmark_id,
        owner_id="u1",
        title="Docs",
        url="https://example.com",
        created_at=now,
        updated_at=now,
    )


def test_etag_changes_with_revision_owner_and_listed_bookmarks() -> None:
    base = BookmarkListing(owner_id="u1", revision=1, bookmarks=[_bookmark("a")])

    assert base.etag().startswith('W/"')
    assert base.etag() == BookmarkListing(
        owner_id="u1", revision=1, bookmarks=[_bookmark("a")]
    ).etag()
    assert base.etag() != BookmarkListing(
        owner_id="u1", revision=2, bookmarks=[_bookmark("a")]
    ).etag()
    assert base.etag() != BookmarkListing(
        owner_id="u2", revision=1, bookmarks=[_bookmark("a")]
    ).etag()
    # revision 이 그대로여도 목록이 다르면 다른 ETag
    assert base.etag() != BookmarkListing(
        owner_id="u1", revision=1, bookmarks=[_bookmark("b"), _bookmark("a")]
    ).etag()


def test_listing_after_failed_invalidation_gets_new_etag(bookmark_repo, revision_repo) -> None:
    service = _build_service(bookmark_repo, revision_repo)
    before = service.list_bookmarks(_session("u1"))

    revision_repo.fail_increment = True
    bookmark_repo.create("u1", "Docs", "https://example.com")
    after = service.list_bookmarks(_session("u1"))

    assert after.revision == before.revision
    assert after.etag() != before.etag()
