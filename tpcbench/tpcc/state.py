"""TPC-C configuration and per-thread state with transaction support."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Iterator, Optional, Sequence

from tpcbench.loader import CSVBatchLoader
from tpcbench.measurement import DEFAULT_MAX_LATENCY
from tpcbench.workload import TpcState


@dataclass
class Config:
    """Settings of the TPC-C workload."""

    db_name: str = "test"
    threads: int = 1
    parts: int = 1
    warehouses: int = 10
    use_fk: bool = False
    isolation: int = 0
    check_all: bool = False
    no_check: bool = False
    # include keying and thinking time
    wait: bool = False
    max_measure_latency: float = DEFAULT_MAX_LATENCY
    # used by the prepare command only
    output_type: str = ""
    output_dir: str = ""
    specified_tables: str = ""


class TransactionError(Exception):
    """A transaction could not be started or used."""


_ISOLATION_LEVELS = {
    1: "READ UNCOMMITTED",
    2: "READ COMMITTED",
    4: "REPEATABLE READ",
    6: "SERIALIZABLE",
}


def _pyformat(query: str) -> str:
    return query.replace("%", "%%").replace("?", "%s")


class _Transaction:
    """An open transaction; queries use ``?`` placeholders."""

    def __init__(self, conn: Any) -> None:
        self._conn = conn
        self.finished = False

    def _check(self) -> None:
        if self.finished:
            raise TransactionError("transaction has already been committed or rolled back")

    def execute(self, query: str, args: Sequence[Any] = ()) -> int:
        """Run a statement and return the number of affected rows."""
        self._check()
        with self._conn.cursor() as cursor:
            cursor.execute(_pyformat(query), tuple(args))
            return cursor.rowcount

    def fetch_all(self, query: str, args: Sequence[Any] = ()) -> list:
        """Run a query and return all rows."""
        self._check()
        with self._conn.cursor() as cursor:
            cursor.execute(_pyformat(query), tuple(args))
            return list(cursor.fetchall())

    def fetch_one(self, query: str, args: Sequence[Any] = ()) -> Optional[tuple]:
        """Run a query and return its first row, or None when there is none."""
        self._check()
        with self._conn.cursor() as cursor:
            cursor.execute(_pyformat(query), tuple(args))
            return cursor.fetchone()

    def commit(self) -> None:
        self._check()
        self.finished = True
        self._conn.commit()

    def rollback(self) -> None:
        self._check()
        self.finished = True
        self._conn.rollback()


@dataclass
class TpccState(TpcState):
    """State of one TPC-C worker thread."""

    index: int = 0
    decks: list = field(default_factory=list)
    loaders: dict = field(default_factory=dict)

    def add_loader(self, table: str, loader: CSVBatchLoader) -> None:
        self.loaders[table] = loader

    @contextmanager
    def transaction(self, isolation: int = 0) -> Iterator[_Transaction]:
        """Open a transaction; it is rolled back unless committed inside the block."""
        if self.conn is None:
            raise TransactionError("no database connection")
        if isolation != 0 and isolation not in _ISOLATION_LEVELS:
            raise TransactionError(f"unsupported isolation level: {isolation}")
        level = _ISOLATION_LEVELS.get(isolation)
        if level is not None:
            with self.conn.cursor() as cursor:
                cursor.execute(f"SET TRANSACTION ISOLATION LEVEL {level}")
        self.conn.begin()
        tx = _Transaction(self.conn)
        try:
            yield tx
        finally:
            if not tx.finished:
                tx.rollback()