from __future__ import annotations

import json
from datetime import UTC, datetime
from unittest.mock import MagicMock

import pytest
from flask import Flask

from parkingslot.application.use_cases.users.authenticate_user import AuthenticatedUser
from parkingslot.domain.pagination import PageRequest, paginate
from parkingslot.domain.users.entities import Role
from parkingslot.domain.users.exceptions import (
    EmailNotFoundError,
    InvalidCredentialsError,
    TokenExpiredError,
)
from parkingslot.infrastructure.auth_middleware import BearerAuthenticator
from parkingslot.interfaces.http.controllers.users_controller import UsersController
from parkingslot.shared.middleware.error_handler import configure_error_handling


@pytest.fixture()
def use_cases() -> dict[str, MagicMock]:
    names = [
        "authenticate_use_case",
        "register_use_case",
        "list_use_case",
        "get_use_case",
        "update_use_case",
        "delete_use_case",
        "forgot_password_use_case",
        "reset_password_use_case",
        "check_token_use_case",
        "confirm_password_use_case",
    ]
    return {name: MagicMock() for name in names}


@pytest.fixture()
def flask_app(use_cases, users, token_service) -> Flask:
    app = Flask(__name__)
    configure_error_handling(app)
    controller = UsersController(
        authenticator=BearerAuthenticator(tokens=token_service, users=users),
        **use_cases,
    )
    app.register_blueprint(controller.as_blueprint())
    return app


def test_authenticate_returns_user_and_token(flask_app, use_cases, user_factory) -> None:
    alice = user_factory("alice")
    use_cases["authenticate_use_case"].execute.return_value = AuthenticatedUser(alice, "tok")

    with flask_app.test_client() as client:
        response = client.post(
            "/api/users/authenticate", json={"username": "alice", "password": "Secret123"}
        )

    assert response.status_code == 200
    body = response.get_json()
    assert body["token"] == "tok"
    assert body["username"] == "alice"
    assert body["firstName"] == "Alice"
    assert "passwordHash" not in body
    use_cases["authenticate_use_case"].execute.assert_called_once_with("alice", "Secret123")


def test_authenticate_bad_credentials_returns_400(flask_app, use_cases) -> None:
    use_cases["authenticate_use_case"].execute.side_effect = InvalidCredentialsError()

    with flask_app.test_client() as client:
        response = client.post(
            "/api/users/authenticate", json={"username": "alice", "password": "nope"}
        )

    assert response.status_code == 400
    body = response.get_json()
    assert body["message"] == "Username or password is incorrect"
    assert "token" not in body


def test_authenticate_invalid_payload_returns_422(flask_app, use_cases) -> None:
    with flask_app.test_client() as client:
        response = client.post("/api/users/authenticate", json={"username": ""})

    assert response.status_code == 422
    assert response.get_json()["error"] == "validation_error"
    use_cases["authenticate_use_case"].execute.assert_not_called()


def test_list_sets_pagination_header(flask_app, use_cases, user_factory) -> None:
    records = [user_factory(f"user{i:02d}") for i in range(25)]
    use_cases["list_use_case"].execute.side_effect = lambda req: paginate(records, req)

    with flask_app.test_client() as client:
        response = client.get("/api/users?pageNumber=2&pageSize=10&orderBy=lastName")

    assert response.status_code == 200
    body = response.get_json()
    assert body["totalCount"] == 25
    assert len(body["items"]) == 10
    header = json.loads(response.headers["X-Pagination"])
    assert header["totalCount"] == 25
    assert header["pageSize"] == 10
    assert header["currentPage"] == 2
    assert header["totalPages"] == 3
    assert "pageNumber=1" in header["previousPageLink"]
    assert "pageNumber=3" in header["nextPageLink"]
    assert "orderBy=lastName" in header["nextPageLink"]
    assert header["nextPageLink"].startswith("http://localhost/api/users")
    use_cases["list_use_case"].execute.assert_called_once_with(
        PageRequest(page_number=2, page_size=10, order_by="lastName")
    )


def test_list_last_page_has_null_next_link(flask_app, use_cases, user_factory) -> None:
    records = [user_factory(f"user{i:02d}") for i in range(25)]
    use_cases["list_use_case"].execute.side_effect = lambda req: paginate(records, req)

    with flask_app.test_client() as client:
        response = client.get("/api/users?pageNumber=3&pageSize=10")

    header = json.loads(response.headers["X-Pagination"])
    assert len(response.get_json()["items"]) == 5
    assert header["nextPageLink"] is None
    assert header["previousPageLink"] is not None


def test_list_rejects_non_numeric_page(flask_app) -> None:
    with flask_app.test_client() as client:
        response = client.get("/api/users?pageNumber=abc")

    assert response.status_code == 422


def test_forget_password_unknown_email_returns_400(flask_app, use_cases) -> None:
    async def _missing(email: str):
        raise EmailNotFoundError()

    use_cases["forgot_password_use_case"].execute.side_effect = _missing

    with flask_app.test_client() as client:
        response = client.post("/api/users/ForgetPassword", json={"email": "ghost@example.com"})

    assert response.status_code == 400
    assert response.get_json()["error"] == "email_not_found"


def test_check_token_expired_message(flask_app, use_cases) -> None:
    expired_at = datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC)
    use_cases["check_token_use_case"].execute.side_effect = TokenExpiredError(expired_at)

    with flask_app.test_client() as client:
        response = client.post("/api/users/CheckToken", json={"token": "abc"})

    assert response.status_code == 400
    body = response.get_json()
    assert body["error"] == "token_expired"
    assert body["message"] == "Token expired on: 2024-01-02 03:04:05 UTC"


def test_update_requires_bearer_token(flask_app, use_cases) -> None:
    with flask_app.test_client() as client:
        response = client.put("/api/users/id-alice", json={})

    assert response.status_code == 401
    use_cases["update_use_case"].execute.assert_not_called()


def test_update_other_user_is_forbidden(flask_app, use_cases, users, token_service, user_factory) -> None:
    bob = users.add(user_factory("bob"))
    users.add(user_factory("alice"))
    token = token_service.issue_session(bob)

    with flask_app.test_client() as client:
        response = client.put(
            "/api/users/id-alice",
            json={
                "firstName": "A",
                "lastName": "B",
                "username": "alice",
                "email": "alice@example.com",
            },
            headers={"Authorization": f"Bearer {token}"},
        )

    assert response.status_code == 403
    use_cases["update_use_case"].execute.assert_not_called()


def test_update_self_returns_204(flask_app, use_cases, users, token_service, user_factory) -> None:
    bob = users.add(user_factory("bob"))
    token = token_service.issue_session(bob)

    with flask_app.test_client() as client:
        response = client.put(
            f"/api/users/{bob.id}",
            json={
                "firstName": "Robert",
                "lastName": "Tan",
                "username": "robert",
                "email": "robert@example.com",
                "phoneNumber": "+65 6000 0000",
            },
            headers={"Authorization": f"Bearer {token}"},
        )

    assert response.status_code == 204
    user_id, changes = use_cases["update_use_case"].execute.call_args.args
    assert user_id == bob.id
    assert changes.username == "robert"


def test_delete_requires_admin(flask_app, use_cases, users, token_service, user_factory) -> None:
    bob = users.add(user_factory("bob"))
    admin = users.add(user_factory("root", role=Role.ADMIN))

    with flask_app.test_client() as client:
        denied = client.delete(
            "/api/users/id-alice",
            headers={"Authorization": f"Bearer {token_service.issue_session(bob)}"},
        )
        allowed = client.delete(
            "/api/users/id-alice",
            headers={"Authorization": f"Bearer {token_service.issue_session(admin)}"},
        )

    assert denied.status_code == 403
    assert allowed.status_code == 204
    use_cases["delete_use_case"].execute.assert_called_once_with("id-alice")


def test_reset_token_cannot_authenticate_requests(flask_app, users, token_service, user_factory) -> None:
    admin = users.add(user_factory("root", role=Role.ADMIN))

    with flask_app.test_client() as client:
        response = client.delete(
            "/api/users/id-alice",
            headers={"Authorization": f"Bearer {token_service.issue_reset(admin)}"},
        )

    assert response.status_code == 401
