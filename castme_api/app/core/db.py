"""
SQLite backed document store and simple migration system.

Documents are JSON objects kept in one table per collection
(``users``, ``projects``, ``castings``).  Each table holds the generated
``id``, the JSON ``body`` and bookkeeping timestamps.  Uniqueness of
user emails is enforced by an expression index on the JSON body, so
the store rejects duplicates itself instead of relying on a
check-then-write done by the services.

This module provides functions for obtaining a database connection
(``get_connection``), applying migrations on application start
(``init_db``) and the ``DocumentStore`` the services talk to.  The
migration mechanism stores applied migration versions in the
``migrations`` table and executes new migrations in order.
"""

import asyncio
import json
import logging
import os
import sqlite3
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional

from .config import settings

logger = logging.getLogger(__name__)

COLLECTIONS = ("users", "projects", "castings")

# Unique expression indexes, keyed by index name: (collection, field).
UNIQUE_INDEXES = {
    "ux_users_email": ("users", "email"),
}


class DuplicateKeyError(Exception):
    """A write would break a unique index of a collection."""

    def __init__(self, collection: str, field: str, value: Any) -> None:
        super().__init__(f"duplicate {field} {value!r} in {collection}")
        self.collection = collection
        self.field = field
        self.value = value


def get_database_path() -> str:
    """Compute the path to the SQLite database file.

    If ``settings.database_url`` is an absolute path, use it directly.
    Otherwise resolve it relative to the package root.
    """
    db_url = settings.database_url
    if os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent  # castme_api/
    return str((base_dir / db_url).resolve())


def get_connection() -> sqlite3.Connection:
    """Create and return a new SQLite connection.

    Rows are returned as ``sqlite3.Row`` so columns can be accessed by
    name.  Every store operation opens its own connection, which keeps
    connections confined to the worker thread that uses them.
    """
    conn = sqlite3.connect(get_database_path())
    conn.row_factory = sqlite3.Row
    return conn


@contextmanager
def get_cursor() -> Iterator[sqlite3.Cursor]:
    """Context manager that yields a cursor and closes the connection on exit."""
    conn = get_connection()
    try:
        yield conn.cursor()
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def init_db() -> None:
    """Initialise the database and apply pending migrations.

    Creates the ``migrations`` table if it does not exist, checks the
    current schema version, and applies any new migrations.  If you add
    a new migration, append it with an incremented version number.
    """
    migrations: list[tuple[int, str]] = [
        # Migration 1: document collections
        (
            1,
            """
            CREATE TABLE IF NOT EXISTS users (
                id TEXT PRIMARY KEY,
                body TEXT NOT NULL,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            );

            CREATE TABLE IF NOT EXISTS projects (
                id TEXT PRIMARY KEY,
                body TEXT NOT NULL,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            );

            CREATE TABLE IF NOT EXISTS castings (
                id TEXT PRIMARY KEY,
                body TEXT NOT NULL,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            );
            """,
        ),
        # Migration 2: user email uniqueness
        (
            2,
            """
            CREATE UNIQUE INDEX IF NOT EXISTS ux_users_email
                ON users (json_extract(body, '$.email'));
            """,
        ),
    ]

    with get_cursor() as cursor:
        cursor.execute(
            "CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)"
        )
        cursor.execute("SELECT MAX(version) as version FROM migrations")
        row = cursor.fetchone()
        current_version = row["version"] if row and row["version"] is not None else 0

        for version, sql in migrations:
            if version > current_version:
                logger.info("Applying migration %s", version)
                cursor.executescript(sql)
                cursor.execute(
                    "INSERT INTO migrations (version) VALUES (?)", (version,)
                )
                current_version = version


def _check_collection(collection: str) -> str:
    if collection not in COLLECTIONS:
        raise ValueError(f"Unknown collection: {collection}")
    return collection


def _row_to_document(row: sqlite3.Row) -> Dict[str, Any]:
    document = json.loads(row["body"])
    document["id"] = row["id"]
    return document


def _where(filter: Mapping[str, Any]) -> tuple[str, list[Any]]:
    """Translate an equality filter into a WHERE clause.

    ``id`` matches the primary key; every other key matches the
    top-level JSON field of the same name.
    """
    if not filter:
        raise ValueError("Empty filter")
    clauses = []
    params: list[Any] = []
    for field, value in filter.items():
        if field == "id":
            clauses.append("id = ?")
            params.append(value)
        else:
            clauses.append("json_extract(body, ?) = ?")
            params.extend([f"$.{field}", value])
    return " AND ".join(clauses), params


def _translate_integrity_error(
    error: sqlite3.IntegrityError, collection: str, body: Mapping[str, Any]
) -> Exception:
    message = str(error)
    for index_name, (index_collection, field) in UNIQUE_INDEXES.items():
        if index_collection == collection and index_name in message:
            return DuplicateKeyError(collection, field, body.get(field))
    return error


class DocumentStore:
    """Asynchronous CRUD access to the document collections.

    Each method runs its blocking SQLite work in a worker thread so the
    calling coroutine suspends at every store call.
    """

    async def create(self, collection: str, document: Mapping[str, Any]) -> Dict[str, Any]:
        """Insert ``document`` and return it with its generated ``id``."""
        return await asyncio.to_thread(self._create, _check_collection(collection), dict(document))

    async def find_one(self, collection: str, filter: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        return await asyncio.to_thread(self._find_one, _check_collection(collection), dict(filter))

    async def find_by_id(self, collection: str, document_id: str) -> Optional[Dict[str, Any]]:
        return await self.find_one(collection, {"id": document_id})

    async def find_by_ids(self, collection: str, ids: List[str]) -> List[Optional[Dict[str, Any]]]:
        """Fetch several documents at once.

        The result is aligned with ``ids``: position ``i`` holds the
        document for ``ids[i]`` or ``None`` if there is none.
        """
        return await asyncio.to_thread(self._find_by_ids, _check_collection(collection), list(ids))

    async def find_all(self, collection: str) -> List[Dict[str, Any]]:
        """Return every document of a collection in insertion order."""
        return await asyncio.to_thread(self._find_all, _check_collection(collection))

    async def update_one(
        self, collection: str, filter: Mapping[str, Any], changes: Mapping[str, Any]
    ) -> int:
        """Replace top-level fields of the first matching document.

        Returns the number of documents updated (0 or 1).
        """
        changes = dict(changes)
        changes.pop("id", None)
        return await self.modify_one(collection, filter, lambda body: body.update(changes))

    async def modify_one(
        self,
        collection: str,
        filter: Mapping[str, Any],
        mutate: Callable[[Dict[str, Any]], None],
    ) -> int:
        """Apply ``mutate`` to the freshly read body of the first match.

        ``mutate`` changes the body in place.  The read, the mutation and
        the write happen under one write lock, so concurrent calls on the
        same document are applied one after the other.  An exception
        raised by ``mutate`` leaves the document unchanged.

        Returns the number of documents updated (0 or 1).
        """
        return await asyncio.to_thread(
            self._modify_one, _check_collection(collection), dict(filter), mutate
        )

    async def delete_one(self, collection: str, filter: Mapping[str, Any]) -> int:
        """Delete the first matching document and return the count deleted."""
        return await asyncio.to_thread(self._delete_one, _check_collection(collection), dict(filter))

    # ------------------------------------------------------------------
    # Blocking implementations
    # ------------------------------------------------------------------
    def _create(self, collection: str, document: Dict[str, Any]) -> Dict[str, Any]:
        document.pop("id", None)
        document_id = uuid.uuid4().hex
        try:
            with get_cursor() as cursor:
                cursor.execute(
                    f"INSERT INTO {collection} (id, body) VALUES (?, ?)",
                    (document_id, json.dumps(document)),
                )
        except sqlite3.IntegrityError as e:
            raise _translate_integrity_error(e, collection, document) from e
        document["id"] = document_id
        return document

    def _find_one(self, collection: str, filter: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        where, params = _where(filter)
        with get_cursor() as cursor:
            row = cursor.execute(
                f"SELECT id, body FROM {collection} WHERE {where} ORDER BY rowid LIMIT 1",
                params,
            ).fetchone()
        return _row_to_document(row) if row else None

    def _find_by_ids(self, collection: str, ids: List[str]) -> List[Optional[Dict[str, Any]]]:
        if not ids:
            return []
        placeholders = ", ".join("?" for _ in ids)
        with get_cursor() as cursor:
            rows = cursor.execute(
                f"SELECT id, body FROM {collection} WHERE id IN ({placeholders})",
                ids,
            ).fetchall()
        found = {row["id"]: _row_to_document(row) for row in rows}
        return [found.get(document_id) for document_id in ids]

    def _find_all(self, collection: str) -> List[Dict[str, Any]]:
        with get_cursor() as cursor:
            rows = cursor.execute(
                f"SELECT id, body FROM {collection} ORDER BY rowid"
            ).fetchall()
        return [_row_to_document(row) for row in rows]

    def _modify_one(
        self,
        collection: str,
        filter: Dict[str, Any],
        mutate: Callable[[Dict[str, Any]], None],
    ) -> int:
        where, params = _where(filter)
        conn = get_connection()
        try:
            cursor = conn.cursor()
            # Hold the write lock between reading and rewriting the body.
            cursor.execute("BEGIN IMMEDIATE")
            row = cursor.execute(
                f"SELECT id, body FROM {collection} WHERE {where} ORDER BY rowid LIMIT 1",
                params,
            ).fetchone()
            if not row:
                conn.rollback()
                return 0
            body = json.loads(row["body"])
            try:
                mutate(body)
            except Exception:
                conn.rollback()
                raise
            body.pop("id", None)
            try:
                cursor.execute(
                    f"UPDATE {collection} SET body = ?, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                    (json.dumps(body), row["id"]),
                )
            except sqlite3.IntegrityError as e:
                conn.rollback()
                raise _translate_integrity_error(e, collection, body) from e
            conn.commit()
            return 1
        finally:
            conn.close()

    def _delete_one(self, collection: str, filter: Dict[str, Any]) -> int:
        where, params = _where(filter)
        with get_cursor() as cursor:
            row = cursor.execute(
                f"SELECT id FROM {collection} WHERE {where} ORDER BY rowid LIMIT 1",
                params,
            ).fetchone()
            if not row:
                return 0
            cursor.execute(f"DELETE FROM {collection} WHERE id = ?", (row["id"],))
        return 1


# Shared store instance used by the services.
store = DocumentStore()
