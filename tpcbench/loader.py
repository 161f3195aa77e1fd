"""Batched row writers for SQL connections and CSV files."""

from __future__ import annotations

import csv
from typing import Any, Sequence, TextIO

MAX_BATCH_COUNT = 1024


class SQLBatchLoader:
    """Accumulates value tuples into one multi-row INSERT statement."""

    def __init__(self, conn: Any, hint: str) -> None:
        self.conn = conn
        self.insert_hint = hint
        self._parts: list[str] = []
        self._count = 0

    def insert_value(self, values: Sequence[str]) -> None:
        """Add ``values[0]``; flushes when the batch is full."""
        sep = ", "
        if self._count == 0:
            self._parts.append(self.insert_hint)
            sep = " "
        self._parts.append(sep)
        self._parts.append(values[0])
        self._count += 1
        if self._count >= MAX_BATCH_COUNT:
            self.flush()

    def flush(self) -> None:
        """Execute all pending values."""
        if not self._parts:
            return
        statement = "".join(self._parts)
        try:
            with self.conn.cursor() as cursor:
                cursor.execute(statement)
        finally:
            self._count = 0
            self._parts = []


class CSVBatchLoader:
    """Writes rows to a CSV file."""

    def __init__(self, f: TextIO) -> None:
        self.file = f
        self._writer = csv.writer(f, lineterminator="\n")

    def insert_value(self, values: Sequence[str]) -> None:
        self._writer.writerow(values)

    def flush(self) -> None:
        self.file.flush()

    def close(self) -> None:
        self.file.close()