import threading

import pytest

from tpcbench.runner import RunOptions, check_prepare, execute, execute_workload
from tpcbench.workload import Workloader


class Fake(Workloader):
    def __init__(self, fail_run=False, name="fake"):
        self.calls = []
        self.fail_run = fail_run
        self._name = name
        self.lock = threading.Lock()

    def _log(self, what, tid):
        with self.lock:
            self.calls.append((what, tid))

    def name(self):
        return self._name

    def init_thread(self, thread_id):
        self._log("init", thread_id)
        return {"id": thread_id}

    def cleanup_thread(self, state, thread_id):
        self._log("cleanup_thread", thread_id)

    def prepare(self, state, thread_id):
        self._log("prepare", thread_id)

    def check_prepare(self, state, thread_id):
        self._log("check_prepare", thread_id)

    def run(self, state, thread_id):
        self._log("run", thread_id)
        if self.fail_run:
            raise RuntimeError("boom")

    def cleanup(self, state, thread_id):
        self._log("cleanup", thread_id)

    def check(self, state, thread_id):
        self._log("check", thread_id)

    def output_stats(self, summary_report):
        self._log("stats", summary_report)

    def db_name(self):
        return "test"


def names(w):
    return [c[0] for c in w.calls]


def test_run_count():
    w = Fake()
    execute(w, "run", 2, 0, RunOptions(total_count=6), threading.Event())
    assert names(w).count("run") == 3
    assert names(w)[-1] == "cleanup_thread"


def test_prepare_with_drop():
    w = Fake()
    execute(w, "prepare", 1, 0, RunOptions(drop_data=True), threading.Event())
    assert names(w) == ["init", "cleanup", "prepare", "cleanup_thread"]


def test_error_raised_unless_ignored():
    w = Fake(fail_run=True)
    with pytest.raises(RuntimeError):
        execute(w, "run", 1, 0, RunOptions(total_count=5, silence=True), threading.Event())
    assert names(w).count("run") == 1
    w2 = Fake(fail_run=True)
    execute(w2, "run", 1, 0, RunOptions(total_count=3, silence=True, ignore_error=True),
            threading.Event())
    assert names(w2).count("run") == 3


def test_stop_event_ends_infinite_run():
    w = Fake()
    stop = threading.Event()
    stop.set()
    execute(w, "run", 1, 0, RunOptions(), stop)
    assert names(w).count("run") == 1


def test_execute_workload_prepare_checks():
    w = Fake()
    execute_workload(w, 3, "prepare", RunOptions(output_interval=0.01), threading.Event())
    assert names(w).count("prepare") == 3
    assert names(w).count("check_prepare") == 3


def test_check_prepare_skipped_for_csv():
    w = Fake(name="tpcc-csv")
    check_prepare(w, 2, RunOptions(), threading.Event())
    assert "check_prepare" not in names(w)
    w2 = Fake(name="tpcc")
    check_prepare(w2, 2, RunOptions(no_check=True), threading.Event())
    assert "check_prepare" not in names(w2)