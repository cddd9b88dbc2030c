from .base import (
    AppError,
    AuthenticationError,
    AuthorizationError,
    DomainError,
    InfrastructureError,
    NotFoundError,
    RateLimitedError,
    ValidationError,
)
from .http import handle_app_error, register_error_handler

__all__ = [
    "AppError",
    "AuthenticationError",
    "AuthorizationError",
    "DomainError",
    "InfrastructureError",
    "NotFoundError",
    "RateLimitedError",
    "ValidationError",
    "handle_app_error",
    "register_error_handler",
]
