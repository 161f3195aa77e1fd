"""Per-thread state and the workload interface."""

from __future__ import annotations

import random
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Optional


@dataclass
class TpcState:
    """State owned by one worker thread."""

    conn: Optional[Any] = None
    r: random.Random = field(default_factory=random.Random)

    @classmethod
    def create(cls, connect: Optional[Callable[[], Any]]) -> "TpcState":
        """Open a connection with ``connect`` (if given) and seed a fresh RNG."""
        conn = connect() if connect is not None else None
        return cls(conn=conn, r=random.Random(time.time_ns()))

    def close(self) -> None:
        if self.conn is not None:
            self.conn.close()
            self.conn = None


class Workloader(ABC):
    """A benchmark workload driven by worker threads."""

    @abstractmethod
    def name(self) -> str: ...

    @abstractmethod
    def init_thread(self, thread_id: int) -> Any: ...

    @abstractmethod
    def cleanup_thread(self, state: Any, thread_id: int) -> None: ...

    @abstractmethod
    def prepare(self, state: Any, thread_id: int) -> None: ...

    @abstractmethod
    def check_prepare(self, state: Any, thread_id: int) -> None: ...

    @abstractmethod
    def run(self, state: Any, thread_id: int) -> None: ...

    @abstractmethod
    def cleanup(self, state: Any, thread_id: int) -> None: ...

    @abstractmethod
    def check(self, state: Any, thread_id: int) -> None: ...

    @abstractmethod
    def output_stats(self, summary_report: bool) -> None: ...

    @abstractmethod
    def db_name(self) -> str: ...