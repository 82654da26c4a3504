from __future__ import annotations

from datetime import datetime, timezone

from common.models.user import User, UserUpsertInput

from bookmark_service.app.services.users_service import UsersService


def _input(**overrides: str) -> UserUpsertInput:
    data = {
        "provider": "google",
        "provider_sub": "sub-123",
        "email": "ada@example.com",
        "name": "Ada",
        "profile_image": "",
    }
    data.update(overrides)
    return UserUpsertInput(**data)


def test_first_login_issues_user_code(user_repo) -> None:
    service = UsersService(user_repo)

    user = service.upsert_user(_input())

    assert user.user_code.startswith("google:")
    assert user.email == "ada@example.com"
    assert user.created_at == user.updated_at
    assert user_repo.update_calls == []


def test_repeat_login_keeps_user_code_and_updates_profile(user_repo) -> None:
    service = UsersService(user_repo)
    first = service.upsert_user(_input())

    second = service.upsert_user(_input(name="Ada L.", email="ada@new.example"))

    assert second.user_code == first.user_code
    assert second.created_at == first.created_at
    assert second.name == "Ada L."
    assert second.email == "ada@new.example"
    assert user_repo.update_calls == [first.user_code]


def test_different_subjects_get_different_owners(user_repo) -> None:
    service = UsersService(user_repo)

    a = service.upsert_user(_input(provider_sub="sub-a"))
    b = service.upsert_user(_input(provider_sub="sub-b"))

    assert a.user_code != b.user_code


def test_concurrent_first_login_reuses_existing_user(user_repo) -> None:
    created = datetime(2024, 1, 1, tzinfo=timezone.utc)
    winner = User(
        user_code="google:winner",
        provider="google",
        provider_sub="sub-123",
        email="ada@example.com",
        name="Ada",
        profile_image="",
        created_at=created,
        updated_at=created,
    )
    user_repo.concurrent_winner = winner
    service = UsersService(user_repo)

    user = service.upsert_user(_input(name="Ada L."))

    assert user.user_code == "google:winner"
    assert user.name == "Ada L."
    assert user.created_at == created
    assert user_repo.update_calls == ["google:winner"]
