from __future__ import annotations

import asyncio
from datetime import timedelta

import pytest

from parkingslot.application.services.reset_email import RESET_SUBJECT
from parkingslot.application.use_cases.users.authenticate_user import AuthenticateUserUseCase
from parkingslot.application.use_cases.users.check_token import CheckTokenUseCase
from parkingslot.application.use_cases.users.confirm_password import ConfirmPasswordUseCase
from parkingslot.application.use_cases.users.delete_user import DeleteUserUseCase
from parkingslot.application.use_cases.users.forgot_password import ForgotPasswordUseCase
from parkingslot.application.use_cases.users.list_users import ListUsersUseCase
from parkingslot.application.use_cases.users.register_user import Registration, RegisterUserUseCase
from parkingslot.application.use_cases.users.reset_password import ResetPasswordUseCase
from parkingslot.application.use_cases.users.update_user import ProfileChanges, UpdateUserUseCase
from parkingslot.domain.exceptions import UnknownSortKeyError
from parkingslot.domain.pagination import PageRequest
from parkingslot.domain.users.entities import Role, TokenPurpose
from parkingslot.domain.users.exceptions import (
    EmailAlreadyExistsError,
    EmailNotFoundError,
    InvalidCredentialsError,
    InvalidResetRequestError,
    InvalidTokenError,
    TokenExpiredError,
    TokenRequiredError,
    TokenRevokedError,
    TokenSubjectNotFoundError,
    UserAlreadyExistsError,
)
from parkingslot.shared.errors.base import NotFoundError


def test_authenticate_success_issues_session_token(users, hasher, token_service, user_factory) -> None:
    users.add(user_factory("alice", password="Secret123"))
    use_case = AuthenticateUserUseCase(users=users, password_hasher=hasher, tokens=token_service)

    result = use_case.execute("alice", "Secret123")

    claims = token_service.validate(result.token)
    assert result.user.username == "alice"
    assert claims.subject_id == result.user.id
    assert claims.role == "User"


@pytest.mark.parametrize(("username", "password"), [("alice", "wrong"), ("nobody", "Secret123")])
def test_authenticate_failures_are_uniform(
    users, hasher, token_service, user_factory, username: str, password: str
) -> None:
    users.add(user_factory("alice", password="Secret123"))
    use_case = AuthenticateUserUseCase(users=users, password_hasher=hasher, tokens=token_service)

    with pytest.raises(InvalidCredentialsError) as exc_info:
        use_case.execute(username, password)

    assert exc_info.value.message == "Username or password is incorrect"


def _registration(**overrides) -> Registration:
    data = {
        "first_name": "Carol",
        "last_name": "Lim",
        "username": "carol",
        "password": "Secret123",
        "email": "carol@example.com",
        "phone_number": None,
    }
    data.update(overrides)
    return Registration(**data)


def test_register_creates_plain_user(users, hasher) -> None:
    use_case = RegisterUserUseCase(users=users, password_hasher=hasher)

    user = use_case.execute(_registration())

    assert user.role is Role.USER
    assert user.password_hash == "hashed:Secret123"
    assert users.find_by_username("carol") == user


def test_register_rejects_duplicates(users, hasher, user_factory) -> None:
    users.add(user_factory("carol", email="taken@example.com"))
    use_case = RegisterUserUseCase(users=users, password_hasher=hasher)

    with pytest.raises(UserAlreadyExistsError):
        use_case.execute(_registration())
    with pytest.raises(EmailAlreadyExistsError):
        use_case.execute(_registration(username="carol2", email="TAKEN@example.com"))


def test_list_users_caps_page_size_and_orders(users, user_factory) -> None:
    for index in range(25):
        users.add(user_factory(f"user{index:02d}"))
    use_case = ListUsersUseCase(users=users)

    page = use_case.execute(PageRequest(page_number=2, page_size=50, order_by="username desc"))

    assert page.page_size == 20
    assert page.total_count == 25
    assert [u.username for u in page.items] == ["user04", "user03", "user02", "user01", "user00"]


def test_list_users_rejects_unknown_sort_key(users) -> None:
    with pytest.raises(UnknownSortKeyError):
        ListUsersUseCase(users=users).execute(PageRequest(order_by="password"))


def test_update_user_rejects_taken_username(users, user_factory) -> None:
    users.add(user_factory("alice"))
    bob = users.add(user_factory("bob"))
    use_case = UpdateUserUseCase(users=users)
    changes = ProfileChanges(first_name="B", last_name="T", username="alice", email="bob@example.com")

    with pytest.raises(UserAlreadyExistsError):
        use_case.execute(bob.id, changes)


def test_update_user_persists_profile(users, user_factory) -> None:
    bob = users.add(user_factory("bob"))
    changes = ProfileChanges(
        first_name="Robert", last_name="Tan", username="robert", email="robert@example.com"
    )

    updated = UpdateUserUseCase(users=users).execute(bob.id, changes)

    assert updated.username == "robert"
    assert updated.password_hash == bob.password_hash
    assert users.find_by_id(bob.id).first_name == "Robert"


def test_delete_missing_user_is_not_found(users) -> None:
    with pytest.raises(NotFoundError):
        DeleteUserUseCase(users=users).execute("missing")


def _forgot(users, token_service, mailer) -> ForgotPasswordUseCase:
    return ForgotPasswordUseCase(
        users=users,
        tokens=token_service,
        mailer=mailer,
        frontend_url="http://localhost:8080/",
    )


def test_forgot_password_unknown_email_sends_nothing(users, token_service, mailer) -> None:
    with pytest.raises(EmailNotFoundError):
        asyncio.run(_forgot(users, token_service, mailer).execute("ghost@example.com"))

    assert mailer.sent == []


def test_forgot_password_emails_reset_link(users, token_service, mailer, user_factory) -> None:
    alice = users.add(user_factory("alice"))

    asyncio.run(_forgot(users, token_service, mailer).execute("ALICE@example.com"))

    assert len(mailer.sent) == 1
    message = mailer.sent[0]
    assert message.to_email == alice.email
    assert message.subject == RESET_SUBJECT
    prefix = f"http://localhost:8080/resetpassword/{alice.id}/"
    assert prefix in message.html_body
    token = message.html_body.split(prefix, 1)[1].split('"', 1)[0]
    assert token_service.validate(token).subject_id == alice.id


def test_reset_password_requires_current_password(users, hasher, user_factory) -> None:
    users.add(user_factory("alice", password="Secret123"))
    use_case = ResetPasswordUseCase(users=users, password_hasher=hasher)

    with pytest.raises(InvalidCredentialsError):
        use_case.execute("alice", "wrong", "NewSecret456")

    updated = use_case.execute("alice", "Secret123", "NewSecret456")
    assert updated.password_hash == "hashed:NewSecret456"
    assert updated.token_version == 1


def test_check_token_accepts_fresh_token(users, token_service, user_factory) -> None:
    alice = users.add(user_factory("alice"))

    claims = CheckTokenUseCase(users=users, tokens=token_service).execute(
        token_service.issue_reset(alice)
    )

    assert claims.subject_id == alice.id


def test_check_token_requires_a_token(users, token_service) -> None:
    with pytest.raises(TokenRequiredError):
        CheckTokenUseCase(users=users, tokens=token_service).execute("")


def test_check_token_reports_expiry(users, token_service, clock, user_factory) -> None:
    alice = users.add(user_factory("alice"))
    token = token_service.issue_reset(alice)
    clock.now += timedelta(days=2)

    with pytest.raises(TokenExpiredError) as exc_info:
        CheckTokenUseCase(users=users, tokens=token_service).execute(token)

    assert exc_info.value.status == 400
    assert exc_info.value.message.startswith("Token expired on:")


def test_check_token_for_deleted_subject(users, token_service, user_factory) -> None:
    alice = users.add(user_factory("alice"))
    token = token_service.issue_reset(alice)
    users.delete(alice.id)

    with pytest.raises(TokenSubjectNotFoundError):
        CheckTokenUseCase(users=users, tokens=token_service).execute(token)


def test_password_change_revokes_earlier_tokens(users, hasher, token_service, user_factory) -> None:
    alice = users.add(user_factory("alice", password="Secret123"))
    old_token = token_service.issue_session(alice)

    ResetPasswordUseCase(users=users, password_hasher=hasher).execute(
        "alice", "Secret123", "NewSecret456"
    )

    with pytest.raises(TokenRevokedError):
        CheckTokenUseCase(users=users, tokens=token_service).execute(old_token)


def test_confirm_password_with_reset_token(users, hasher, token_service, user_factory) -> None:
    alice = users.add(user_factory("alice"))
    token = token_service.issue_reset(alice)
    use_case = ConfirmPasswordUseCase(users=users, tokens=token_service, password_hasher=hasher)

    updated = use_case.execute(alice.id, "NewSecret456", token)

    assert updated.password_hash == "hashed:NewSecret456"
    # the same link cannot be used twice
    with pytest.raises(TokenRevokedError):
        use_case.execute(alice.id, "Another789", token)


def test_confirm_password_rejects_token_for_other_user(users, hasher, token_service, user_factory) -> None:
    alice = users.add(user_factory("alice"))
    bob = users.add(user_factory("bob"))
    use_case = ConfirmPasswordUseCase(users=users, tokens=token_service, password_hasher=hasher)

    with pytest.raises(InvalidResetRequestError):
        use_case.execute(bob.id, "NewSecret456", token_service.issue_reset(alice))


def test_confirm_password_unknown_id_is_generic(users, hasher, token_service) -> None:
    use_case = ConfirmPasswordUseCase(users=users, tokens=token_service, password_hasher=hasher)
    token = token_service.issue("missing", None, timedelta(hours=1), purpose=TokenPurpose.RESET)

    with pytest.raises(InvalidResetRequestError) as exc_info:
        use_case.execute("missing", "NewSecret456", token)

    assert exc_info.value.status == 400


def test_confirm_password_rejects_session_token(users, hasher, token_service, user_factory) -> None:
    alice = users.add(user_factory("alice"))
    use_case = ConfirmPasswordUseCase(users=users, tokens=token_service, password_hasher=hasher)

    with pytest.raises(InvalidResetRequestError):
        use_case.execute(alice.id, "NewSecret456", token_service.issue_session(alice))

    assert users.find_by_id(alice.id).password_hash == "hashed:Secret123"


def test_confirm_password_requires_readable_token(users, hasher, token_service, user_factory) -> None:
    alice = users.add(user_factory("alice"))
    use_case = ConfirmPasswordUseCase(users=users, tokens=token_service, password_hasher=hasher)

    with pytest.raises(InvalidTokenError):
        use_case.execute(alice.id, "NewSecret456", "not-a-token")

    assert users.find_by_id(alice.id).token_version == 0
