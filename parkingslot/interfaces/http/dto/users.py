from __future__ import annotations

import re
from typing import Annotated

from pydantic import EmailStr, Field, StringConstraints, field_validator
from pydantic_core import PydanticCustomError

from parkingslot.application.use_cases.users.register_user import Registration
from parkingslot.application.use_cases.users.update_user import ProfileChanges
from parkingslot.domain.users.entities import User

from .base import CamelModel

_USERNAME_PATTERN = r"^[A-Za-z][A-Za-z0-9._-]*$"
_PHONE_PATTERN = r"^\+?[0-9 ()-]{6,20}$"

# Passwords keep surrounding whitespace
Password = Annotated[str, StringConstraints(strip_whitespace=False, min_length=1, max_length=128)]


def _check_password_strength(value: str) -> str:
    if len(value) < 8:
        raise PydanticCustomError(
            "password_too_short",
            "Password must be at least 8 characters long",
            {"min_length": 8},
        )

    if not re.search(r"[A-Za-z]", value):
        raise PydanticCustomError(
            "password_no_letter",
            "Password must contain at least one letter",
            {},
        )

    if not re.search(r"\d", value):
        raise PydanticCustomError(
            "password_no_digit",
            "Password must contain at least one digit",
            {},
        )

    return value


class _ProfileFieldsDTO(CamelModel):
    first_name: str = Field(min_length=1, max_length=128)
    last_name: str = Field(min_length=1, max_length=128)
    username: str = Field(min_length=3, max_length=64)
    email: EmailStr
    phone_number: str | None = Field(default=None, max_length=32)

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str) -> str:
        if not re.match(_USERNAME_PATTERN, value):
            raise PydanticCustomError(
                "username_invalid_chars",
                "Username must start with a letter and contain only letters, digits, '.', '_' or '-'",
                {"pattern": _USERNAME_PATTERN},
            )
        return value

    @field_validator("phone_number")
    @classmethod
    def validate_phone_number(cls, value: str | None) -> str | None:
        if not value:
            return None
        if not re.match(_PHONE_PATTERN, value):
            raise PydanticCustomError(
                "phone_invalid",
                "Phone number may contain only digits, spaces, '(', ')', '-' and a leading '+'",
                {"pattern": _PHONE_PATTERN},
            )
        return value


class RegisterRequestDTO(_ProfileFieldsDTO):
    password: Password

    @field_validator("password")
    @classmethod
    def validate_password_strength(cls, value: str) -> str:
        return _check_password_strength(value)

    def to_registration(self) -> Registration:
        return Registration(
            first_name=self.first_name,
            last_name=self.last_name,
            username=self.username,
            password=self.password,
            email=str(self.email),
            phone_number=self.phone_number,
        )


class UpdateUserRequestDTO(_ProfileFieldsDTO):
    def to_changes(self) -> ProfileChanges:
        return ProfileChanges(
            first_name=self.first_name,
            last_name=self.last_name,
            username=self.username,
            email=str(self.email),
            phone_number=self.phone_number,
        )


class AuthenticateRequestDTO(CamelModel):
    username: str = Field(min_length=1, max_length=64)
    password: Password  # No strength check on login


class ForgotPasswordRequestDTO(CamelModel):
    email: EmailStr


class ResetPasswordRequestDTO(CamelModel):
    username: str = Field(min_length=1, max_length=64)
    old_password: Password
    new_password: Password

    @field_validator("new_password")
    @classmethod
    def validate_password_strength(cls, value: str) -> str:
        return _check_password_strength(value)


class CheckTokenRequestDTO(CamelModel):
    token: str | None = Field(default=None, max_length=4096)


class ConfirmPasswordRequestDTO(CamelModel):
    id: str = Field(min_length=1, max_length=64)
    new_password: Password
    token: str = Field(min_length=1, max_length=4096)

    @field_validator("new_password")
    @classmethod
    def validate_password_strength(cls, value: str) -> str:
        return _check_password_strength(value)


class UserDTO(CamelModel):
    id: str
    first_name: str
    last_name: str
    username: str
    email: str
    phone_number: str | None = None
    role: str

    @classmethod
    def from_entity(cls, user: User) -> UserDTO:
        return cls(
            id=user.id,
            first_name=user.first_name,
            last_name=user.last_name,
            username=user.username,
            email=user.email,
            phone_number=user.phone_number,
            role=user.role.value,
        )


class AuthenticatedUserDTO(UserDTO):
    token: str

    @classmethod
    def from_result(cls, user: User, token: str) -> AuthenticatedUserDTO:
        return cls(**UserDTO.from_entity(user).model_dump(), token=token)
