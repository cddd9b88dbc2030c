# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from functools import cached_property

from parkingslot.application.services.password_hashing import WerkzeugPasswordHasher
from parkingslot.application.services.token_service import JwtTokenService
from parkingslot.application.use_cases.carparks.create_carpark import CreateCarparkUseCase
from parkingslot.application.use_cases.carparks.delete_carpark import DeleteCarparkUseCase
from parkingslot.application.use_cases.carparks.get_carpark import GetCarparkUseCase
from parkingslot.application.use_cases.carparks.list_carparks import ListCarparksUseCase
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
from parkingslot.infrastructure.auth_middleware import BearerAuthenticator
from parkingslot.infrastructure.email.sendgrid_sender import SendGridEmailSender
from parkingslot.infrastructure.repositories.carparks.sqlalchemy_carpark_repository import (
    SqlAlchemyCarparkRepository,
)
from parkingslot.infrastructure.repositories.users.sqlalchemy_user_repository import (
    SqlAlchemyUserRepository,
)
from parkingslot.interfaces.http.controllers.carparks_controller import CarparksController
from parkingslot.interfaces.http.controllers.users_controller import UsersController
from parkingslot.shared.config import AppConfig, load_config


class Container:
    def __init__(self, config: AppConfig | None = None) -> None:
        self.config = config or load_config()

    @cached_property
    def password_hasher(self) -> WerkzeugPasswordHasher:
        return WerkzeugPasswordHasher()

    @cached_property
    def token_service(self) -> JwtTokenService:
        return JwtTokenService(self.config.auth)

    @cached_property
    def email_sender(self) -> SendGridEmailSender:
        return SendGridEmailSender(self.config.mail, self.config.resilience)

    @cached_property
    def user_repository(self) -> SqlAlchemyUserRepository:
        return SqlAlchemyUserRepository()

    @cached_property
    def carpark_repository(self) -> SqlAlchemyCarparkRepository:
        return SqlAlchemyCarparkRepository()

    @cached_property
    def authenticator(self) -> BearerAuthenticator:
        return BearerAuthenticator(tokens=self.token_service, users=self.user_repository)

    # User use cases

    @cached_property
    def authenticate_user_use_case(self) -> AuthenticateUserUseCase:
        return AuthenticateUserUseCase(
            users=self.user_repository,
            password_hasher=self.password_hasher,
            tokens=self.token_service,
        )

    @cached_property
    def register_user_use_case(self) -> RegisterUserUseCase:
        return RegisterUserUseCase(users=self.user_repository, password_hasher=self.password_hasher)

    @cached_property
    def list_users_use_case(self) -> ListUsersUseCase:
        return ListUsersUseCase(
            users=self.user_repository,
            max_page_size=self.config.pagination.max_page_size,
        )

    @cached_property
    def get_user_use_case(self) -> GetUserUseCase:
        return GetUserUseCase(users=self.user_repository)

    @cached_property
    def update_user_use_case(self) -> UpdateUserUseCase:
        return UpdateUserUseCase(users=self.user_repository)

    @cached_property
    def delete_user_use_case(self) -> DeleteUserUseCase:
        return DeleteUserUseCase(users=self.user_repository)

    @cached_property
    def forgot_password_use_case(self) -> ForgotPasswordUseCase:
        return ForgotPasswordUseCase(
            users=self.user_repository,
            tokens=self.token_service,
            mailer=self.email_sender,
            frontend_url=self.config.mail.frontend_url,
            reset_valid_hours=int(self.config.auth.reset_token_ttl.total_seconds() // 3600),
        )

    @cached_property
    def reset_password_use_case(self) -> ResetPasswordUseCase:
        return ResetPasswordUseCase(users=self.user_repository, password_hasher=self.password_hasher)

    @cached_property
    def check_token_use_case(self) -> CheckTokenUseCase:
        return CheckTokenUseCase(users=self.user_repository, tokens=self.token_service)

    @cached_property
    def confirm_password_use_case(self) -> ConfirmPasswordUseCase:
        return ConfirmPasswordUseCase(
            users=self.user_repository,
            tokens=self.token_service,
            password_hasher=self.password_hasher,
        )

    # Carpark use cases

    @cached_property
    def list_carparks_use_case(self) -> ListCarparksUseCase:
        return ListCarparksUseCase(
            carparks=self.carpark_repository,
            max_page_size=self.config.pagination.max_page_size,
        )

    @cached_property
    def get_carpark_use_case(self) -> GetCarparkUseCase:
        return GetCarparkUseCase(carparks=self.carpark_repository)

    @cached_property
    def create_carpark_use_case(self) -> CreateCarparkUseCase:
        return CreateCarparkUseCase(carparks=self.carpark_repository)

    @cached_property
    def delete_carpark_use_case(self) -> DeleteCarparkUseCase:
        return DeleteCarparkUseCase(carparks=self.carpark_repository)

    # Controllers

    @cached_property
    def users_controller(self) -> UsersController:
        return UsersController(
            authenticator=self.authenticator,
            authenticate_use_case=self.authenticate_user_use_case,
            register_use_case=self.register_user_use_case,
            list_use_case=self.list_users_use_case,
            get_use_case=self.get_user_use_case,
            update_use_case=self.update_user_use_case,
            delete_use_case=self.delete_user_use_case,
            forgot_password_use_case=self.forgot_password_use_case,
            reset_password_use_case=self.reset_password_use_case,
            check_token_use_case=self.check_token_use_case,
            confirm_password_use_case=self.confirm_password_use_case,
            default_page_size=self.config.pagination.default_page_size,
        )

    @cached_property
    def carparks_controller(self) -> CarparksController:
        return CarparksController(
            authenticator=self.authenticator,
            list_use_case=self.list_carparks_use_case,
            get_use_case=self.get_carpark_use_case,
            create_use_case=self.create_carpark_use_case,
            delete_use_case=self.delete_carpark_use_case,
            default_page_size=self.config.pagination.default_page_size,
        )


container = Container()
