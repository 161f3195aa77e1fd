"""Drives a workload over worker threads."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Optional

from tpcbench.workload import Workloader


@dataclass
class RunOptions:
    """Settings shared by every worker."""

    total_count: int = 0
    drop_data: bool = False
    ignore_error: bool = False
    silence: bool = False
    output_interval: float = 10.0
    no_check: bool = False


def execute(
    workloader: Workloader,
    action: str,
    threads: int,
    index: int,
    options: RunOptions,
    stop: threading.Event,
) -> None:
    """Run ``action`` for one worker; raises the workload's error."""
    count = options.total_count // threads
    state = workloader.init_thread(index)
    try:
        if action == "prepare":
            if options.drop_data:
                workloader.cleanup(state, index)
            workloader.prepare(state, index)
            return
        if action == "cleanup":
            workloader.cleanup(state, index)
            return
        if action == "check":
            workloader.check(state, index)
            return

        done = 0
        while count <= 0 or done < count:
            done += 1
            error: Optional[Exception] = None
            try:
                workloader.run(state, index)
            except Exception as exc:  # noqa: BLE001
                error = exc
            if stop.is_set():
                return
            if error is not None:
                if not options.silence:
                    stamp = time.strftime("%Y-%m-%d %H:%M:%S")
                    print(f"[{stamp}] execute {action} failed, err {error}")
                if not options.ignore_error:
                    raise error
    finally:
        workloader.cleanup_thread(state, index)


def check_prepare(
    workloader: Workloader, threads: int, options: RunOptions, stop: threading.Event
) -> None:
    """Verify prepared data from ``threads`` workers."""
    if workloader.name() == "tpcc-csv":
        print("Skip preparing checking. Please load CSV data into database and check later.")
        return
    if workloader.name() == "tpcc" and options.no_check:
        return

    def worker(index: int) -> None:
        state = workloader.init_thread(index)
        try:
            workloader.check_prepare(state, index)
        except Exception as exc:  # noqa: BLE001
            print(f"check prepare failed, err {exc}")
        finally:
            workloader.cleanup_thread(state, index)

    _run_all(worker, threads)


def _run_all(target, threads: int) -> None:
    workers = [threading.Thread(target=target, args=(i,)) for i in range(threads)]
    for t in workers:
        t.start()
    for t in workers:
        t.join()


def execute_workload(
    workloader: Workloader,
    threads: int,
    action: str,
    options: RunOptions,
    stop: threading.Event,
) -> None:
    """Run ``action`` on ``threads`` workers, printing stats periodically."""
    output_done = threading.Event()

    def reporter() -> None:
        while not output_done.wait(options.output_interval):
            if stop.is_set():
                return
            workloader.output_stats(False)

    reporter_thread = threading.Thread(target=reporter, daemon=True)
    reporter_thread.start()

    def worker(index: int) -> None:
        try:
            execute(workloader, action, threads, index, options, stop)
        except Exception as exc:  # noqa: BLE001
            print(f"execute {action} failed, err {exc}")

    _run_all(worker, threads)

    if action == "prepare":
        check_prepare(workloader, threads, options, stop)
    output_done.set()
    reporter_thread.join()