"""Persisted configuration record and the stores that hold it.

The core owns exactly one record, the Configuration, stored under a fixed
key. Stores keep a version counter next to it: every commit names the
version it read, and a mismatch raises ConcurrentModificationError instead
of silently overwriting another writer's change.

Two backends:
- MemoryConfigStore: process-local, for tests and embedding
- SqliteConfigStore: single-file database, safe to share between processes

Stores hand out copies (records are serialized on save and rebuilt on
load), so no two operations ever alias the same mutable record.

Usage:
    store = create_store(get_validated_config().storage)
    stored = store.load()
    updated = stored.config.replace(denoms=[...])
    store.replace(updated, expected_version=stored.version)
"""

from __future__ import annotations

import json
import logging
import sqlite3
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass, field, replace as dataclass_replace
from pathlib import Path
from typing import Any, Callable, Iterator, Protocol, TypeVar, runtime_checkable

from ..config_schema import StorageConfig
from .errors import (
    AlreadyInitializedError,
    ConcurrentModificationError,
    NotInitializedError,
    PersistenceError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

CONTRACT_INFO_KEY = "contract_info"

_UPSERT_CONTRACT_INFO = """
    INSERT INTO kv_store (key, value_json, version) VALUES (?, ?, 1)
    ON CONFLICT(key) DO UPDATE SET
        value_json = excluded.value_json,
        version = kv_store.version + 1,
        updated_at = CURRENT_TIMESTAMP
"""


@dataclass
class Configuration:
    """The configuration entity.

    Lists keep insertion order for deterministic query output but are
    treated as sets: no entry ever appears twice.
    """

    manager: str
    allowed_mint_addresses: list[str] = field(default_factory=list)
    denoms: list[str] = field(default_factory=list)

    def replace(self, **changes: Any) -> Configuration:
        """Return a copy with ``changes`` applied; self is left untouched."""
        return dataclass_replace(
            self,
            allowed_mint_addresses=list(
                changes.pop("allowed_mint_addresses", self.allowed_mint_addresses)
            ),
            denoms=list(changes.pop("denoms", self.denoms)),
            **changes,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "manager": self.manager,
            "allowed_mint_addresses": list(self.allowed_mint_addresses),
            "denoms": list(self.denoms),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Configuration:
        """Create from dictionary."""
        return cls(
            manager=data["manager"],
            allowed_mint_addresses=list(data.get("allowed_mint_addresses", [])),
            denoms=list(data.get("denoms", [])),
        )


@dataclass(frozen=True)
class ContractInfo:
    """Name and version recorded when the core was instantiated."""

    contract: str
    version: str

    def to_dict(self) -> dict[str, str]:
        return {"contract": self.contract, "version": self.version}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ContractInfo:
        return cls(contract=data["contract"], version=data["version"])


@dataclass(frozen=True)
class StoredConfig:
    """A loaded configuration together with the version it was read at."""

    config: Configuration
    version: int


@runtime_checkable
class ConfigStore(Protocol):
    """Atomic load/replace of the single configuration record."""

    def exists(self) -> bool:
        """True once the record has been created."""
        ...

    def load(self) -> StoredConfig:
        """Load the record.

        Raises:
            NotInitializedError: If the record was never created
            PersistenceError: If the backend fails
        """
        ...

    def save_new(self, config: Configuration, info: ContractInfo | None = None) -> int:
        """Create the record at version 1, together with ``info`` if given.

        Both rows are written atomically: on failure neither exists.

        Raises:
            AlreadyInitializedError: If the record already exists
        """
        ...

    def replace(self, config: Configuration, expected_version: int) -> int:
        """Overwrite the record if it is still at ``expected_version``.

        Returns:
            The new version

        Raises:
            ConcurrentModificationError: If the stored version moved on
        """
        ...

    def get_contract_info(self) -> ContractInfo | None:
        ...

    def set_contract_info(self, info: ContractInfo) -> None:
        ...


class MemoryConfigStore:
    """Dict-backed store. Values are kept as JSON text, never as live objects.

    Every write holds the store lock across its version check, so cores that
    share one store see each other's commits.
    """

    def __init__(self, key: str = "config") -> None:
        self.key = key
        self._rows: dict[str, tuple[str, int]] = {}
        self._lock = threading.Lock()

    def exists(self) -> bool:
        return self.key in self._rows

    def load(self) -> StoredConfig:
        row = self._rows.get(self.key)
        if row is None:
            raise NotInitializedError(f"No configuration stored under {self.key!r}")
        value_json, version = row
        return StoredConfig(Configuration.from_dict(json.loads(value_json)), version)

    def save_new(self, config: Configuration, info: ContractInfo | None = None) -> int:
        with self._lock:
            if self.key in self._rows:
                raise AlreadyInitializedError(f"Configuration already stored under {self.key!r}")
            self._rows[self.key] = (json.dumps(config.to_dict()), 1)
            if info is not None:
                self._put_contract_info(info)
        return 1

    def replace(self, config: Configuration, expected_version: int) -> int:
        with self._lock:
            row = self._rows.get(self.key)
            if row is None:
                raise NotInitializedError(f"No configuration stored under {self.key!r}")
            current_version = row[1]
            if current_version != expected_version:
                raise ConcurrentModificationError(expected_version, current_version)
            new_version = current_version + 1
            self._rows[self.key] = (json.dumps(config.to_dict()), new_version)
        return new_version

    def raw(self) -> str | None:
        """Serialized record exactly as stored (None before creation)."""
        row = self._rows.get(self.key)
        return row[0] if row else None

    def get_contract_info(self) -> ContractInfo | None:
        row = self._rows.get(CONTRACT_INFO_KEY)
        if row is None:
            return None
        return ContractInfo.from_dict(json.loads(row[0]))

    def set_contract_info(self, info: ContractInfo) -> None:
        with self._lock:
            self._put_contract_info(info)

    def _put_contract_info(self, info: ContractInfo) -> None:
        previous = self._rows.get(CONTRACT_INFO_KEY)
        version = previous[1] + 1 if previous else 1
        self._rows[CONTRACT_INFO_KEY] = (json.dumps(info.to_dict()), version)


def _with_retry(
    func: Callable[[], T],
    max_retries: int,
    base_delay: float,
    max_delay: float,
) -> T:
    """Execute a function with retry logic for SQLite lock errors.

    Uses exponential backoff to handle transient 'database is locked' errors
    that can occur when multiple processes share one database file. Any
    other sqlite3 error, or a lock that outlasts the retries, surfaces as
    PersistenceError.
    """
    attempt = 0
    while True:
        attempt += 1
        try:
            return func()
        except sqlite3.OperationalError as e:
            if "database is locked" not in str(e):
                raise PersistenceError(f"SQLite error: {e}") from e

            if attempt >= max_retries:
                logger.warning(
                    "SQLite lock error after %d attempts, giving up: %s",
                    attempt,
                    e,
                )
                raise PersistenceError(f"Database locked after {attempt} attempts") from e

            delay = min(base_delay * (2 ** (attempt - 1)), max_delay)
            logger.debug(
                "SQLite lock error (attempt %d/%d), retrying in %.2fs: %s",
                attempt,
                max_retries,
                delay,
                e,
            )
            time.sleep(delay)
        except sqlite3.Error as e:
            raise PersistenceError(f"SQLite error: {e}") from e


class SqliteConfigStore:
    """SQLite-backed store.

    Uses WAL mode so readers never block on the single writer. Each call
    opens its own connection, so separate processes (or threads) can point
    separate stores at the same file.
    """

    def __init__(
        self,
        db_path: Path | str,
        key: str = "config",
        lock_timeout: float = 5.0,
        retry_max: int = 5,
        retry_base: float = 0.1,
        retry_max_delay: float = 5.0,
    ) -> None:
        self.db_path = Path(db_path)
        self.key = key
        self._lock_timeout = lock_timeout
        self._retry_max = retry_max
        self._retry_base = retry_base
        self._retry_max_delay = retry_max_delay
        self._run(self._ensure_db)

    def _run(self, func: Callable[[], T]) -> T:
        return _with_retry(func, self._retry_max, self._retry_base, self._retry_max_delay)

    def _ensure_db(self) -> None:
        """Create database and tables if they don't exist."""
        with self._connect_write() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS kv_store (
                    key TEXT PRIMARY KEY,
                    value_json TEXT NOT NULL,
                    version INTEGER NOT NULL,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)
            conn.commit()

    def _open(self, isolation_level: str | None) -> sqlite3.Connection:
        conn = sqlite3.connect(
            str(self.db_path),
            timeout=self._lock_timeout,
            isolation_level=isolation_level,
        )
        conn.execute("PRAGMA journal_mode=WAL")
        return conn

    @contextmanager
    def _connect_read(self) -> Iterator[sqlite3.Connection]:
        """Read connection with DEFERRED isolation (concurrent readers)."""
        conn = self._open("DEFERRED")
        try:
            yield conn
        finally:
            conn.close()

    @contextmanager
    def _connect_write(self) -> Iterator[sqlite3.Connection]:
        """Write connection with IMMEDIATE isolation (writes serialize)."""
        conn = self._open("IMMEDIATE")
        try:
            yield conn
        finally:
            conn.close()

    def _read_row(self, key: str) -> tuple[str, int] | None:
        def do_read() -> tuple[str, int] | None:
            with self._connect_read() as conn:
                cursor = conn.execute(
                    "SELECT value_json, version FROM kv_store WHERE key = ?",
                    (key,),
                )
                result: tuple[str, int] | None = cursor.fetchone()
                return result

        return self._run(do_read)

    def exists(self) -> bool:
        return self._read_row(self.key) is not None

    def load(self) -> StoredConfig:
        row = self._read_row(self.key)
        if row is None:
            raise NotInitializedError(f"No configuration stored under {self.key!r}")
        return StoredConfig(Configuration.from_dict(json.loads(row[0])), int(row[1]))

    def save_new(self, config: Configuration, info: ContractInfo | None = None) -> int:
        value_json = json.dumps(config.to_dict())

        def do_insert() -> None:
            with self._connect_write() as conn:
                try:
                    conn.execute(
                        "INSERT INTO kv_store (key, value_json, version) VALUES (?, ?, 1)",
                        (self.key, value_json),
                    )
                except sqlite3.IntegrityError as e:
                    conn.rollback()
                    raise AlreadyInitializedError(
                        f"Configuration already stored under {self.key!r}"
                    ) from e
                if info is not None:
                    try:
                        conn.execute(
                            _UPSERT_CONTRACT_INFO,
                            (CONTRACT_INFO_KEY, json.dumps(info.to_dict())),
                        )
                    except sqlite3.Error:
                        conn.rollback()
                        raise
                conn.commit()

        self._run(do_insert)
        return 1

    def replace(self, config: Configuration, expected_version: int) -> int:
        value_json = json.dumps(config.to_dict())

        def do_replace() -> int:
            with self._connect_write() as conn:
                cursor = conn.execute(
                    """
                    UPDATE kv_store
                    SET value_json = ?, version = version + 1, updated_at = CURRENT_TIMESTAMP
                    WHERE key = ? AND version = ?
                    """,
                    (value_json, self.key, expected_version),
                )
                if cursor.rowcount == 1:
                    conn.commit()
                    return expected_version + 1
                conn.rollback()
                row = conn.execute(
                    "SELECT version FROM kv_store WHERE key = ?", (self.key,)
                ).fetchone()
            if row is None:
                raise NotInitializedError(f"No configuration stored under {self.key!r}")
            raise ConcurrentModificationError(expected_version, int(row[0]))

        return self._run(do_replace)

    def get_contract_info(self) -> ContractInfo | None:
        row = self._read_row(CONTRACT_INFO_KEY)
        if row is None:
            return None
        return ContractInfo.from_dict(json.loads(row[0]))

    def set_contract_info(self, info: ContractInfo) -> None:
        value_json = json.dumps(info.to_dict())

        def do_upsert() -> None:
            with self._connect_write() as conn:
                conn.execute(_UPSERT_CONTRACT_INFO, (CONTRACT_INFO_KEY, value_json))
                conn.commit()

        self._run(do_upsert)


def create_store(storage: StorageConfig) -> ConfigStore:
    """Build the store named by the ``storage`` config section."""
    if storage.backend == "sqlite":
        return SqliteConfigStore(
            storage.path,
            key=storage.key,
            lock_timeout=storage.lock_timeout,
            retry_max=storage.retry_max,
            retry_base=storage.retry_base,
            retry_max_delay=storage.retry_max_delay,
        )
    return MemoryConfigStore(key=storage.key)
