# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, scoped_session, sessionmaker

from parkingslot.shared.config import load_config
from parkingslot.shared.config.settings import DatabaseConfig
from parkingslot.shared.logging import logger

_config = load_config()


class Base(DeclarativeBase):
    pass


def _engine_kwargs(database: DatabaseConfig) -> dict[str, object]:
    kwargs: dict[str, object] = {"echo": False, "pool_pre_ping": True}
    if database.url.startswith("sqlite"):
        kwargs["connect_args"] = {
            "check_same_thread": False,
            "timeout": int(database.pool_timeout),
        }
        # in-memory databases use a singleton pool without overflow settings
        if ":memory:" in database.url or database.url in ("sqlite://", "sqlite:///"):
            return kwargs
    kwargs.update(
        pool_size=database.pool_size,
        max_overflow=database.max_overflow,
        pool_timeout=database.pool_timeout,
    )
    return kwargs


ENGINE: Engine = create_engine(_config.database.url, **_engine_kwargs(_config.database))


SessionLocal = scoped_session(
    sessionmaker(bind=ENGINE, autoflush=False, autocommit=False, expire_on_commit=False)
)


@contextmanager
def session_scope() -> Iterator[Session]:
    session = SessionLocal()
    logger.debug("db.session: opened scoped session")
    try:
        yield session
        session.commit()
        logger.debug("db.session: committed scoped session")
    except Exception:
        logger.exception("db.session: error, rolling back")
        session.rollback()
        raise
    finally:
        session.close()
        SessionLocal.remove()
        logger.debug("db.session: closed scoped session")


def init_db() -> None:
    # models must be imported so their tables are registered on Base.metadata
    from parkingslot.infrastructure.db import models  # noqa: F401

    Base.metadata.create_all(bind=ENGINE)
    logger.info("Database schema ensured")
