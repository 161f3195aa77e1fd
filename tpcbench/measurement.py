"""Per-operation latency measurement."""

from __future__ import annotations

import threading
from typing import Callable, Dict, Optional

from tpcbench.histogram import Histogram

SIG_FIGS = 1
DEFAULT_MIN_LATENCY = 0.001
DEFAULT_MAX_LATENCY = 16.0

OutputFunc = Callable[[str, Dict[str, Histogram]], None]


class Measurement:
    """Keeps current-interval and cumulative histograms for each operation."""

    def __init__(
        self,
        min_latency: float = DEFAULT_MIN_LATENCY,
        max_latency: float = DEFAULT_MAX_LATENCY,
        sig_figs: int = SIG_FIGS,
    ) -> None:
        self.min_latency = min_latency
        self.max_latency = max_latency
        self.sig_figs = sig_figs
        self.op_cur_measurement: dict[str, Histogram] = {}
        self.op_sum_measurement: dict[str, Histogram] = {}
        self._warm_up = False
        self._lock = threading.RLock()

    def _new_hist(self) -> Histogram:
        return Histogram(self.min_latency, self.max_latency, self.sig_figs)

    def _get_hist(self, op: str, error: Optional[BaseException], current: bool) -> Histogram:
        paired = f"{op}_ERR"
        if error is not None:
            op, paired = paired, op
        with self._lock:
            hists = self.op_cur_measurement if current else self.op_sum_measurement
            hist = hists.get(op)
            if hist is None:
                # both keys are created together so that rates stay comparable
                hist = hists[op] = self._new_hist()
                hists.setdefault(paired, self._new_hist())
            return hist

    def measure(self, op: str, latency: float, error: Optional[BaseException]) -> None:
        """Record ``latency`` seconds for ``op`` unless warm-up is running."""
        if not self.is_warm_up_finished():
            return
        self._get_hist(op, error, True).measure(latency)
        self._get_hist(op, error, False).measure(latency)

    def output(self, summary_report: bool, output_func: OutputFunc) -> None:
        """Pass the cumulative or (and then reset) current histograms to ``output_func``."""
        with self._lock:
            if summary_report:
                output_func("[Summary] ", self.op_sum_measurement)
                return
            current, self.op_cur_measurement = self.op_cur_measurement, {}
            output_func("[Current] ", current)

    def enable_warm_up(self, enabled: bool) -> None:
        self._warm_up = bool(enabled)

    def is_warm_up_finished(self) -> bool:
        return not self._warm_up