# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import datetime

from parkingslot.shared.errors.base import DomainError


class UserAlreadyExistsError(DomainError):
    code = "user_already_exists"
    message = "Username is already taken"


class EmailAlreadyExistsError(DomainError):
    code = "email_already_exists"
    message = "Email is already registered"


class InvalidCredentialsError(DomainError):
    code = "invalid_credentials"
    message = "Username or password is incorrect"


class EmailNotFoundError(DomainError):
    code = "email_not_found"
    message = "Cannot find a user with that email"


class InvalidResetRequestError(DomainError):
    code = "invalid_reset_request"
    message = "The password reset request is invalid"


class NotificationDispatchError(DomainError):
    code = "notification_failed"
    message = "Could not send the reset password email"


class TokenRequiredError(DomainError):
    code = "token_required"
    message = "Need a token."


class InvalidTokenError(DomainError):
    code = "invalid_token"
    message = "Please check the token. Cannot read it."


class MalformedTokenError(InvalidTokenError):
    code = "malformed_token"


class MissingClaimError(InvalidTokenError):
    code = "missing_claim"

    def __init__(self, claim: str) -> None:
        super().__init__(f"Could not get {claim} claim from token", context={"claim": claim})
        self.claim = claim


class TokenExpiredError(InvalidTokenError):
    code = "token_expired"

    def __init__(self, expired_at: datetime) -> None:
        super().__init__(
            f"Token expired on: {expired_at:%Y-%m-%d %H:%M:%S} UTC",
            context={"expiredAt": expired_at.isoformat()},
        )
        self.expired_at = expired_at


class TokenRevokedError(InvalidTokenError):
    code = "token_revoked"
    message = "Token is no longer valid. Please sign in again."


class TokenSubjectNotFoundError(InvalidTokenError):
    code = "token_subject_not_found"
    message = "The user does not exist in the database."
