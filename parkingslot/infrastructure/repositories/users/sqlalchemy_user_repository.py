# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError

from parkingslot.domain.pagination import PageRequest, PageResult, SortColumn, SortMapping
from parkingslot.domain.users.entities import Role
from parkingslot.domain.users.entities import User as DomainUser
from parkingslot.domain.users.exceptions import UserAlreadyExistsError
from parkingslot.domain.users.repositories import UserRepository
from parkingslot.infrastructure.db.models import User
from parkingslot.infrastructure.db.session import session_scope
from parkingslot.infrastructure.repositories.sorting import fetch_page
from parkingslot.shared.errors.base import NotFoundError

USER_SORT_MAPPING = SortMapping(
    name="users",
    columns={
        "firstName": SortColumn.of("first_name"),
        "lastName": SortColumn.of("last_name"),
        "name": SortColumn.of("last_name", "first_name"),
        "email": SortColumn.of("email"),
        "username": SortColumn.of("username"),
        "role": SortColumn.of("role"),
        "createdAt": SortColumn.of("created_at"),
        "newest": SortColumn.of("created_at", revert=True),
    },
    default_key="username",
)


def _to_domain(row: User) -> DomainUser:
    return DomainUser(
        id=row.id,
        first_name=row.first_name,
        last_name=row.last_name,
        username=row.username,
        email=row.email,
        phone_number=row.phone_number,
        password_hash=row.password_hash,
        created_at=row.created_at,
        role=Role(row.role),
        token_version=row.token_version,
    )


class SqlAlchemyUserRepository(UserRepository):
    def find_by_id(self, user_id: str) -> DomainUser | None:
        with session_scope() as session:
            row = session.get(User, user_id)
            return _to_domain(row) if row else None

    def find_by_username(self, username: str) -> DomainUser | None:
        with session_scope() as session:
            row = session.scalars(select(User).where(User.username == username)).first()
            return _to_domain(row) if row else None

    def find_by_email(self, email: str) -> DomainUser | None:
        with session_scope() as session:
            row = session.scalars(
                select(User).where(func.lower(User.email) == email.lower())
            ).first()
            return _to_domain(row) if row else None

    def add(self, user: DomainUser) -> DomainUser:
        try:
            with session_scope() as session:
                row = User(
                    id=user.id,
                    first_name=user.first_name,
                    last_name=user.last_name,
                    username=user.username,
                    email=user.email,
                    phone_number=user.phone_number,
                    password_hash=user.password_hash,
                    role=user.role.value,
                    token_version=user.token_version,
                    created_at=user.created_at,
                )
                session.add(row)
                session.flush()
                session.refresh(row)
                return _to_domain(row)
        except IntegrityError as exc:
            raise UserAlreadyExistsError() from exc

    def update(self, user: DomainUser) -> DomainUser:
        try:
            with session_scope() as session:
                row = session.get(User, user.id)
                if row is None:
                    raise NotFoundError("user", user.id)
                row.first_name = user.first_name
                row.last_name = user.last_name
                row.username = user.username
                row.email = user.email
                row.phone_number = user.phone_number
                row.role = user.role.value
                session.flush()
                return _to_domain(row)
        except IntegrityError as exc:
            raise UserAlreadyExistsError() from exc

    def update_password(self, user_id: str, password_hash: str) -> DomainUser:
        with session_scope() as session:
            row = session.get(User, user_id)
            if row is None:
                raise NotFoundError("user", user_id)
            row.password_hash = password_hash
            row.token_version = row.token_version + 1
            session.flush()
            return _to_domain(row)

    def set_role(self, username: str, role: Role) -> DomainUser | None:
        with session_scope() as session:
            row = session.scalars(select(User).where(User.username == username)).first()
            if row is None:
                return None
            row.role = role.value
            session.flush()
            return _to_domain(row)

    def delete(self, user_id: str) -> bool:
        with session_scope() as session:
            result = session.execute(delete(User).where(User.id == user_id))
            return bool(result.rowcount)

    def list_page(self, request: PageRequest) -> PageResult[DomainUser]:
        with session_scope() as session:
            page = fetch_page(session, User, USER_SORT_MAPPING, request)
            return page.map(_to_domain)


__all__ = ["USER_SORT_MAPPING", "SqlAlchemyUserRepository"]
