# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, jsonify, request
from pydantic import ValidationError

from parkingslot.application.use_cases.users.authenticate_user import AuthenticateUserUseCase
from parkingslot.application.use_cases.users.check_token import CheckTokenUseCase
from parkingslot.application.use_cases.users.confirm_password import ConfirmPasswordUseCase
from parkingslot.application.use_cases.users.delete_user import DeleteUserUseCase
from parkingslot.application.use_cases.users.forgot_password import ForgotPasswordUseCase
from parkingslot.application.use_cases.users.get_user import GetUserUseCase
from parkingslot.application.use_cases.users.list_users import ListUsersUseCase
from parkingslot.application.use_cases.users.register_user import RegisterUserUseCase
from parkingslot.application.use_cases.users.reset_password import ResetPasswordUseCase
from parkingslot.application.use_cases.users.update_user import UpdateUserUseCase
from parkingslot.domain.pagination import DEFAULT_PAGE_SIZE
from parkingslot.domain.users.entities import Role
from parkingslot.infrastructure.audit import AuditAction, audit_log
from parkingslot.infrastructure.auth_middleware import (
    BearerAuthenticator,
    current_principal,
    ensure_self_or_admin,
)
from parkingslot.interfaces.http.dto.base import MessageDTO
from parkingslot.interfaces.http.dto.users import (
    AuthenticatedUserDTO,
    AuthenticateRequestDTO,
    CheckTokenRequestDTO,
    ConfirmPasswordRequestDTO,
    ForgotPasswordRequestDTO,
    RegisterRequestDTO,
    ResetPasswordRequestDTO,
    UpdateUserRequestDTO,
    UserDTO,
)
from parkingslot.interfaces.http.pagination import paged_response, parse_page_query
from parkingslot.shared.errors.base import AppError
from parkingslot.shared.errors.validation import raise_validation_error
from parkingslot.shared.logging import logger
from parkingslot.shared.middleware.rate_limit import rate_limit
from parkingslot.shared.utils.asyncio_utils import run_async


def _get_client_ip() -> str | None:
    ip_address = request.headers.get("X-Forwarded-For", request.remote_addr)
    if ip_address and "," in ip_address:
        ip_address = ip_address.split(",")[0].strip()
    return ip_address


def _message(text: str) -> tuple[Response, int]:
    return jsonify(MessageDTO(message=text).to_json()), 200


class UsersController:
    def __init__(
        self,
        *,
        authenticator: BearerAuthenticator,
        authenticate_use_case: AuthenticateUserUseCase,
        register_use_case: RegisterUserUseCase,
        list_use_case: ListUsersUseCase,
        get_use_case: GetUserUseCase,
        update_use_case: UpdateUserUseCase,
        delete_use_case: DeleteUserUseCase,
        forgot_password_use_case: ForgotPasswordUseCase,
        reset_password_use_case: ResetPasswordUseCase,
        check_token_use_case: CheckTokenUseCase,
        confirm_password_use_case: ConfirmPasswordUseCase,
        default_page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        self._auth = authenticator
        self._authenticate_use_case = authenticate_use_case
        self._register_use_case = register_use_case
        self._list_use_case = list_use_case
        self._get_use_case = get_use_case
        self._update_use_case = update_use_case
        self._delete_use_case = delete_use_case
        self._forgot_password_use_case = forgot_password_use_case
        self._reset_password_use_case = reset_password_use_case
        self._check_token_use_case = check_token_use_case
        self._confirm_password_use_case = confirm_password_use_case
        self._default_page_size = default_page_size

    @rate_limit(limit=10, window_seconds=60.0)
    def authenticate(self) -> tuple[Response, int]:
        try:
            dto = AuthenticateRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        ip_address = _get_client_ip()
        try:
            result = self._authenticate_use_case.execute(dto.username, dto.password)
        except AppError as exc:
            audit_log(
                AuditAction.LOGIN_FAILED,
                ip_address=ip_address,
                details={"username": dto.username, "error": exc.code},
                success=False,
            )
            raise

        audit_log(
            AuditAction.LOGIN_SUCCESS,
            user_id=result.user.id,
            ip_address=ip_address,
            details={"username": dto.username},
        )
        logger.info(f"users.authenticate: ok user_id={result.user.id}")
        payload = AuthenticatedUserDTO.from_result(result.user, result.token)
        return jsonify(payload.to_json()), 200

    def list_users(self) -> tuple[Response, int]:
        page_request = parse_page_query(self._default_page_size)
        page = self._list_use_case.execute(page_request)
        response = paged_response(
            page, "users.list_users", lambda user: UserDTO.from_entity(user).to_json()
        )
        return response, 200

    def get_user(self, user_id: str) -> tuple[Response, int]:
        user = self._get_use_case.execute(user_id)
        return jsonify(UserDTO.from_entity(user).to_json()), 200

    @rate_limit(limit=5, window_seconds=60.0)
    def register(self) -> tuple[Response, int]:
        try:
            dto = RegisterRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        user = self._register_use_case.execute(dto.to_registration())

        audit_log(
            AuditAction.REGISTER,
            user_id=user.id,
            ip_address=_get_client_ip(),
            details={"username": user.username},
        )
        logger.info(f"users.register: ok user_id={user.id}")
        return jsonify(UserDTO.from_entity(user).to_json()), 200

    def update_user(self, user_id: str) -> tuple[str, int]:
        principal = ensure_self_or_admin(user_id)
        try:
            dto = UpdateUserRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        self._update_use_case.execute(user_id, dto.to_changes())

        audit_log(
            AuditAction.USER_UPDATED,
            user_id=principal.user_id,
            ip_address=_get_client_ip(),
            details={"target_user_id": user_id},
        )
        return "", 204

    def delete_user(self, user_id: str) -> tuple[str, int]:
        self._delete_use_case.execute(user_id)

        audit_log(
            AuditAction.USER_DELETED,
            user_id=current_principal().user_id,
            ip_address=_get_client_ip(),
            details={"target_user_id": user_id},
        )
        return "", 204

    @rate_limit(limit=5, window_seconds=300.0)
    def forget_password(self) -> tuple[Response, int]:
        try:
            dto = ForgotPasswordRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        ip_address = _get_client_ip()
        try:
            user = run_async(self._forgot_password_use_case.execute(str(dto.email)))
        except AppError as exc:
            audit_log(
                AuditAction.PASSWORD_RESET_REQUESTED,
                ip_address=ip_address,
                details={"error": exc.code},
                success=False,
            )
            raise

        audit_log(AuditAction.PASSWORD_RESET_REQUESTED, user_id=user.id, ip_address=ip_address)
        return _message("Reset password email sent.")

    def reset_password(self) -> tuple[Response, int]:
        try:
            dto = ResetPasswordRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        user = self._reset_password_use_case.execute(
            dto.username, dto.old_password, dto.new_password
        )

        audit_log(
            AuditAction.PASSWORD_CHANGED,
            user_id=user.id,
            ip_address=_get_client_ip(),
            details={"flow": "reset"},
        )
        return _message("Password reset successfully.")

    def check_token(self) -> tuple[Response, int]:
        try:
            dto = CheckTokenRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        self._check_token_use_case.execute(dto.token)
        return _message("Token is valid.")

    def confirm_password(self) -> tuple[Response, int]:
        try:
            dto = ConfirmPasswordRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        user = self._confirm_password_use_case.execute(dto.id, dto.new_password, dto.token)

        audit_log(
            AuditAction.PASSWORD_CHANGED,
            user_id=user.id,
            ip_address=_get_client_ip(),
            details={"flow": "confirm"},
        )
        return _message("Password successfully changed.")

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("users", __name__, url_prefix="/api/users")
        bp.add_url_rule("/authenticate", view_func=self.authenticate, methods=["POST"])
        bp.add_url_rule("", view_func=self.list_users, methods=["GET"])
        bp.add_url_rule("", view_func=self.register, methods=["POST"])
        bp.add_url_rule("/<user_id>", view_func=self.get_user, methods=["GET"])
        bp.add_url_rule(
            "/<user_id>", view_func=self._auth.require_auth(self.update_user), methods=["PUT"]
        )
        bp.add_url_rule(
            "/<user_id>",
            view_func=self._auth.require_role(Role.ADMIN)(self.delete_user),
            methods=["DELETE"],
        )
        bp.add_url_rule("/ForgetPassword", view_func=self.forget_password, methods=["POST"])
        bp.add_url_rule("/ResetPassword", view_func=self.reset_password, methods=["POST"])
        bp.add_url_rule("/CheckToken", view_func=self.check_token, methods=["POST"])
        bp.add_url_rule("/ConfirmPassword", view_func=self.confirm_password, methods=["POST"])
        return bp
