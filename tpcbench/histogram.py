"""Latency histogram with bounded relative precision."""

from __future__ import annotations

import math
import threading
import time
from dataclasses import dataclass

_NS = 1_000_000_000


@dataclass
class HistInfo:
    """Summary statistics of a histogram; times in milliseconds."""

    elapsed: float
    sum: float
    count: int
    ops: float
    avg: float
    p50: float
    p90: float
    p95: float
    p99: float
    p999: float
    max: float


class Histogram:
    """Records latencies (in seconds) into buckets of ``sig_figs`` precision."""

    def __init__(self, min_latency: float, max_latency: float, sig_figs: int) -> None:
        self.lowest = max(1, int(min_latency * _NS))
        self.highest = int(max_latency * _NS)
        self._unit_shift = int(math.floor(math.log2(self.lowest)))
        self._sub_bits = int(math.ceil(math.log2(2 * 10 ** sig_figs)))
        self._counts: dict[int, int] = {}
        self._total = 0
        self._sum_ns = 0
        self._lock = threading.Lock()
        self._start = time.monotonic()

    def _shift(self, value: int) -> int:
        return max(self._unit_shift, value.bit_length() - self._sub_bits)

    def _key(self, value: int) -> int:
        shift = self._shift(value)
        return (value >> shift) << shift

    def _highest_equivalent(self, key: int) -> int:
        return key + (1 << self._shift(key)) - 1

    def _median_equivalent(self, key: int) -> int:
        return key + ((1 << self._shift(key)) >> 1)

    def measure(self, latency: float) -> None:
        """Record one latency given in seconds."""
        raw = int(latency * _NS)
        value = min(max(raw, self.lowest), self.highest)
        key = self._key(value)
        with self._lock:
            self._counts[key] = self._counts.get(key, 0) + 1
            self._total += 1
            self._sum_ns += raw

    def empty(self) -> bool:
        with self._lock:
            return self._total == 0

    def _value_at_quantile(self, quantile: float) -> int:
        if self._total == 0:
            return 0
        target = max(1, int(min(quantile, 100.0) / 100.0 * self._total + 0.5))
        seen = 0
        for key in sorted(self._counts):
            seen += self._counts[key]
            if seen >= target:
                return self._highest_equivalent(key)
        return 0

    def _mean(self) -> float:
        if self._total == 0:
            return 0.0
        total = sum(self._median_equivalent(k) * c for k, c in self._counts.items())
        return total / self._total

    def info(self) -> HistInfo:
        with self._lock:
            elapsed = time.monotonic() - self._start
            count = self._total
            to_ms = 1000.0 / _NS
            return HistInfo(
                elapsed=elapsed,
                sum=self._sum_ns * to_ms,
                count=count,
                ops=count / elapsed if elapsed > 0 else 0.0,
                avg=self._mean() * to_ms,
                p50=self._value_at_quantile(50) * to_ms,
                p90=self._value_at_quantile(90) * to_ms,
                p95=self._value_at_quantile(95) * to_ms,
                p99=self._value_at_quantile(99) * to_ms,
                p999=self._value_at_quantile(99.9) * to_ms,
                max=self._value_at_quantile(100) * to_ms,
            )

    def summary(self) -> str:
        res = self.info()
        return (
            f"Takes(s): {res.elapsed:.1f}, Count: {res.count}, TPM: {res.ops * 60:.1f}, "
            f"Sum(ms): {res.sum:.1f}, Avg(ms): {res.avg:.1f}, 50th(ms): {res.p50:.1f}, "
            f"90th(ms): {res.p90:.1f}, 95th(ms): {res.p95:.1f}, 99th(ms): {res.p99:.1f}, "
            f"99.9th(ms): {res.p999:.1f}, Max(ms): {res.max:.1f}"
        )