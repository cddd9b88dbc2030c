# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from sqlalchemy import inspect, text
from sqlalchemy.engine import Engine

from parkingslot.infrastructure.db import ENGINE

REQUIRED_TABLES = ("users", "carparks", "audit_logs")


def check_database(engine: Engine = ENGINE) -> list[str]:
    """Round-trip the database and return the required tables it is missing."""
    with engine.connect() as connection:
        connection.execute(text("SELECT 1"))
        present = set(inspect(connection).get_table_names())
    return [name for name in REQUIRED_TABLES if name not in present]


__all__ = ["REQUIRED_TABLES", "check_database"]
