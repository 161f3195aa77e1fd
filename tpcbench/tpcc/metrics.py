"""Gauges exported in the Prometheus text format."""

from __future__ import annotations

import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer


class GaugeVec:
    """A gauge family keyed by the ``op`` label."""

    def __init__(self, namespace: str, subsystem: str, name: str, help_text: str) -> None:
        self.full_name = f"{namespace}_{subsystem}_{name}"
        self.help = help_text
        self._values: dict[str, float] = {}
        self._lock = threading.Lock()

    def set(self, label: str, value: float) -> None:
        with self._lock:
            self._values[label] = float(value)

    def get(self, label: str) -> float:
        with self._lock:
            return self._values.get(label, 0.0)

    def render(self) -> str:
        lines = [f"# HELP {self.full_name} {self.help}", f"# TYPE {self.full_name} gauge"]
        with self._lock:
            for label in sorted(self._values):
                escaped = label.replace("\\", "\\\\").replace('"', '\\"')
                lines.append(f'{self.full_name}{{op="{escaped}"}} {self._values[label]!r}')
        return "\n".join(lines) + "\n"


def _gauge(name: str, help_text: str) -> GaugeVec:
    return GaugeVec("tpc", "tpcc", name, help_text)


elapsed_vec = _gauge("elapsed", "The real elapsed time per interval")
sum_vec = _gauge("sum", "The total latency per interval")
count_vec = _gauge("count", "The total count of transactions")
ops_vec = _gauge("ops", "The number of op per second")
avg_vec = _gauge("avg", "The avarge latency")
p50_vec = _gauge("p50", "P50 latency")
p90_vec = _gauge("p90", "P90 latency")
p95_vec = _gauge("p95", "P95 latency")
p99_vec = _gauge("p99", "P99 latency")
p999_vec = _gauge("p999", "p999 latency")
max_vec = _gauge("max", "Max latency")

REGISTRY = (elapsed_vec, sum_vec, count_vec, ops_vec, avg_vec,
            p50_vec, p90_vec, p95_vec, p99_vec, p999_vec, max_vec)


def render_metrics() -> str:
    """Render every registered gauge."""
    return "".join(g.render() for g in REGISTRY)


class _Handler(BaseHTTPRequestHandler):
    def do_GET(self) -> None:  # noqa: N802
        body = render_metrics().encode()
        self.send_response(200)
        self.send_header("Content-Type", "text/plain; version=0.0.4")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format: str, *args: object) -> None:
        pass


def serve_metrics(address: str) -> ThreadingHTTPServer:
    """Serve metrics on ``host:port`` from a daemon thread; returns the server."""
    host, _, port = address.rpartition(":")
    server = ThreadingHTTPServer((host or "0.0.0.0", int(port)), _Handler)
    threading.Thread(target=server.serve_forever, daemon=True).start()
    return server