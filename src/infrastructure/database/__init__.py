# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database infrastructure for PostgreSQL connections.

Example:
    from src.infrastructure.database import get_session

    async with get_session() as session:
        result = await session.execute(select(QuizModel))
"""

from src.infrastructure.database.connection import (
    Database,
    DatabaseError,
    _clear_thread_db_connections,
    check_database_connection,
    close_database,
    get_database,
    get_session,
    get_worker_database,
    init_database,
)

__all__ = [
    "Database",
    "DatabaseError",
    "check_database_connection",
    "close_database",
    "get_database",
    "get_session",
    "init_database",
    # Worker thread-local database
    "get_worker_database",
    "_clear_thread_db_connections",
]
