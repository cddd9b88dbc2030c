# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import sys
from datetime import timedelta
from functools import lru_cache

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_NESTED_CONFIG = SettingsConfigDict(
    env_file=".env",
    env_file_encoding="utf-8",
    extra="ignore",
    validate_by_name=True,
)


class DatabaseConfig(BaseSettings):
    url: str = Field("sqlite:///parkingslot.db", alias="DATABASE_URL")
    pool_size: int = Field(10, ge=1, alias="DATABASE_POOL_SIZE")
    max_overflow: int = Field(5, ge=0, alias="DATABASE_MAX_OVERFLOW")
    pool_timeout: float = Field(30.0, ge=0.1, alias="DATABASE_POOL_TIMEOUT")

    model_config = _NESTED_CONFIG


class AuthConfig(BaseSettings):
    secret_key: str = Field("dev", alias="SECRET_KEY")
    algorithm: str = Field("HS256", alias="JWT_ALGORITHM")
    session_token_ttl_days: int = Field(7, ge=1, alias="SESSION_TOKEN_TTL_DAYS")
    reset_token_ttl_days: int = Field(1, ge=1, alias="RESET_TOKEN_TTL_DAYS")

    model_config = _NESTED_CONFIG

    @property
    def session_token_ttl(self) -> timedelta:
        return timedelta(days=self.session_token_ttl_days)

    @property
    def reset_token_ttl(self) -> timedelta:
        return timedelta(days=self.reset_token_ttl_days)


class PaginationConfig(BaseSettings):
    max_page_size: int = Field(20, ge=1, alias="MAX_PAGE_SIZE")
    default_page_size: int = Field(10, ge=1, alias="DEFAULT_PAGE_SIZE")

    model_config = _NESTED_CONFIG

    @model_validator(mode="after")
    def _default_within_cap(self) -> "PaginationConfig":
        if self.default_page_size > self.max_page_size:
            self.default_page_size = self.max_page_size
        return self


class MailConfig(BaseSettings):
    sendgrid_api_key: str = Field("", alias="SENDGRID_API_KEY")
    sendgrid_api_url: str = Field(
        "https://api.sendgrid.com/v3/mail/send", alias="SENDGRID_API_URL"
    )
    from_email: str = Field("no-reply@parkingslot.local", alias="MAIL_FROM_EMAIL")
    from_name: str = Field("ParkingSlot", alias="MAIL_FROM_NAME")
    frontend_url: str = Field("http://localhost:8080", alias="FRONTEND_URL")
    timeout: float = Field(10.0, ge=0.1, alias="MAIL_TIMEOUT")

    model_config = _NESTED_CONFIG

    @field_validator("frontend_url", mode="after")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


class ResilienceConfig(BaseSettings):
    default_timeout: float = Field(15.0, ge=0.1, alias="RESILIENCE_TIMEOUT")
    max_retries: int = Field(3, ge=0, alias="RESILIENCE_RETRIES")
    backoff_base: float = Field(0.5, ge=0.0, alias="RESILIENCE_BACKOFF_BASE")
    backoff_cap: float = Field(8.0, ge=0.0, alias="RESILIENCE_BACKOFF_CAP")
    circuit_fail_threshold: int = Field(5, ge=1, alias="RESILIENCE_CIRCUIT_THRESHOLD")
    circuit_reset_timeout: float = Field(60.0, ge=1.0, alias="RESILIENCE_CIRCUIT_RESET")

    model_config = _NESTED_CONFIG


class SecurityConfig(BaseSettings):
    # CORS
    allowed_origins: list[str] = Field(["*"], alias="ALLOWED_ORIGINS")

    # Rate limiting
    enable_rate_limit: bool = Field(True, alias="ENABLE_RATE_LIMIT")
    rate_limit_requests: int = Field(10, alias="RL_LIMIT")
    rate_limit_window: float = Field(60.0, alias="RL_WINDOW")

    # HSTS
    enable_hsts: bool = Field(False, alias="ENABLE_HSTS")

    model_config = _NESTED_CONFIG

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _parse_origins(cls, value: str | list[str]) -> list[str]:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator("enable_rate_limit", "enable_hsts", mode="before")
    @classmethod
    def _parse_bool(cls, value: str | bool) -> bool:
        if isinstance(value, str):
            return value.lower() in ("1", "true", "yes")
        return bool(value)


def _database_config_factory() -> DatabaseConfig:
    return DatabaseConfig()  # type: ignore[call-arg]


def _auth_config_factory() -> AuthConfig:
    return AuthConfig()  # type: ignore[call-arg]


def _pagination_config_factory() -> PaginationConfig:
    return PaginationConfig()  # type: ignore[call-arg]


def _mail_config_factory() -> MailConfig:
    return MailConfig()  # type: ignore[call-arg]


def _resilience_config_factory() -> ResilienceConfig:
    return ResilienceConfig()  # type: ignore[call-arg]


def _security_config_factory() -> SecurityConfig:
    return SecurityConfig()  # type: ignore[call-arg]


class AppConfig(BaseSettings):
    app_env: str = Field("development", alias="APP_ENV")
    admin_username: str | None = Field(None, alias="ADMIN_USERNAME")
    debug_logging: bool = Field(False, alias="DEBUG_LOGGING")

    database: DatabaseConfig = Field(default_factory=_database_config_factory)
    auth: AuthConfig = Field(default_factory=_auth_config_factory)
    pagination: PaginationConfig = Field(default_factory=_pagination_config_factory)
    mail: MailConfig = Field(default_factory=_mail_config_factory)
    resilience: ResilienceConfig = Field(default_factory=_resilience_config_factory)
    security: SecurityConfig = Field(default_factory=_security_config_factory)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        validate_assignment=True,
        extra="ignore",
    )

    @field_validator("debug_logging", mode="before")
    @classmethod
    def _parse_debug_logging(cls, value: str | bool) -> bool:
        if isinstance(value, str):
            return value.lower() in ("1", "true", "yes")
        return bool(value)

    @model_validator(mode="after")
    def _validate_production_settings(self) -> "AppConfig":
        if not self.is_production():
            return self

        if self.auth.secret_key in ("dev", "development", "test", ""):
            print(
                "\n❌ CRITICAL SECURITY ERROR: Insecure SECRET_KEY detected in production!\n"
                "   SECRET_KEY signs every session token and must be a strong random value.\n"
                "   Generate one with: python -c \"import secrets; print(secrets.token_urlsafe(32))\"\n",
                file=sys.stderr,
            )
            sys.exit(1)

        warnings = []
        if "*" in self.security.allowed_origins:
            warnings.append("⚠️  CORS allows wildcard (*) origins")
        if not self.security.enable_hsts:
            warnings.append("⚠️  HSTS is DISABLED (recommended for HTTPS)")
        if not self.mail.sendgrid_api_key:
            warnings.append("⚠️  SENDGRID_API_KEY is empty, password reset emails will fail")

        if warnings:
            print("\n⚠️  PRODUCTION SECURITY WARNINGS:", file=sys.stderr)
            for warning in warnings:
                print(f"   {warning}", file=sys.stderr)
            print(
                "   Consider enabling these security features in production.\n",
                file=sys.stderr,
            )

        return self

    def is_production(self) -> bool:
        return self.app_env.lower() in ("production", "prod")


@lru_cache(maxsize=1)
def load_config() -> AppConfig:
    return AppConfig()


__all__ = [
    "AppConfig",
    "AuthConfig",
    "DatabaseConfig",
    "MailConfig",
    "PaginationConfig",
    "ResilienceConfig",
    "SecurityConfig",
    "load_config",
]
