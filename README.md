# tpcbench

A library of building blocks for running TPC-C style benchmarks against
MySQL-compatible databases: latency histograms and per-operation
measurement, batched row loaders, a multi-threaded workload driver, the
TPC-C random data generators, the initial data load, the five TPC-C
transactions and the consistency checks of the specification.

The package has no third-party dependencies. It talks to the database
through a DB-API connection that you supply; the connection must offer
`cursor()`, `begin()`, `commit()`, `rollback()` and `close()` and use the
`%s` parameter style (PyMySQL connections do, for example; install a driver
yourself).

## Installation

```
pip install .
```

For the tests:

```
pip install ".[test]"
pytest
```

## Modules

### Measurement

- `tpcbench.histogram.Histogram(min_latency, max_latency, sig_figs)` records
  latencies given in seconds, clamped to the range. `measure(latency)`,
  `empty()`, `info()` returning a `HistInfo` (elapsed seconds, count, ops per
  second, and sum, average, p50/p90/p95/p99/p99.9 and max in milliseconds),
  and `summary()` returning a one-line text report.
- `tpcbench.measurement.Measurement` keeps a current-interval and a
  cumulative histogram per operation. `measure(op, latency, error)` records
  into `op`, or into `op_ERR` when `error` is not `None`; both keys are
  created together. `output(summary_report, output_func)` calls
  `output_func("[Summary] ", ...)` with the cumulative histograms, or
  `output_func("[Current] ", ...)` with the current ones and starts a new
  interval. `enable_warm_up(True)` suspends recording until it is turned off
  again; `is_warm_up_finished()` reports the state.

### Loading

- `tpcbench.loader.SQLBatchLoader(conn, hint)` joins values into one
  multi-row `INSERT` after `hint` and executes it every 1024 values and on
  `flush()`.
- `tpcbench.loader.CSVBatchLoader(file)` writes each value list as a CSV row;
  `flush()` and `close()` act on the file.
- `tpcbench.util.BufAllocator` hands out consecutive chunks of a shared byte
  buffer (`alloc(n)`, `reset()`); `tpcbench.util.create_file(path)` opens a
  file for writing and exits the process when that fails.

### Driving a workload

- `tpcbench.workload.Workloader` is the abstract interface a workload
  implements: `name`, `init_thread`, `cleanup_thread`, `prepare`,
  `check_prepare`, `run`, `cleanup`, `check`, `output_stats`, `db_name`.
- `tpcbench.workload.TpcState.create(connect)` builds per-thread state with a
  connection from `connect()` (or none) and a freshly seeded `random.Random`.
- `tpcbench.runner.execute_workload(workloader, threads, action, options, stop)`
  runs `action` (`"prepare"`, `"cleanup"`, `"check"`, anything else runs
  `run` in a loop) on `threads` worker threads, calls `output_stats(False)`
  every `options.output_interval` seconds, and after `"prepare"` runs
  `check_prepare`. `RunOptions` holds `total_count` (0 for no limit),
  `drop_data`, `ignore_error`, `silence`, `output_interval` and `no_check`;
  setting the `stop` event ends the run loops.

### TPC-C

- `tpcbench.tpcc.rand`: the generators of the specification (`rand_int`,
  `rand_chars`, `rand_letters`, `rand_numbers`, `rand_zip`, `rand_state`,
  `rand_tax`, `rand_original_string`, `rand_c_last_syllables`, `rand_c_last`,
  `rand_customer_id`, `rand_item_id`).
- `tpcbench.tpcc.state`: `Config` (warehouses, threads, isolation, ...) and
  `TpccState`, whose `transaction(isolation)` context manager yields a
  transaction with `execute`, `fetch_one`, `fetch_all`, `commit` and
  `rollback`, taking `?` placeholders; it rolls back unless committed and
  raises `TransactionError` without a connection or for an unknown level.
- `tpcbench.tpcc.load.SQLTableLoader` generates and inserts every table's
  initial rows; `tpcbench.tpcc.prepare.prepare_workload(loader, state,
  threads, warehouses, thread_id)` deals the load out round-robin to threads.
- Transactions, each taking `(state, config)`:
  `new_order.run_new_order` (returns `False` for the deliberate rollback),
  `payment.run_payment` (returns the customer id),
  `order_status.run_order_status` (returns customer id, order id and lines),
  `delivery.run_delivery` (returns district to delivered order id),
  `stock_level.run_stock_level` (returns the low-stock count).
- `tpcbench.tpcc.check`: `check_warehouse(state, warehouse, check_all)` and
  `run_checks(state, config, thread_id, check_all)` evaluate the consistency
  conditions of clause 3.3.2 and raise `CheckError` when one fails.
- `tpcbench.tpcc.metrics`: `GaugeVec` gauges, `render_metrics()` in the
  Prometheus text format and `serve_metrics("host:port")`, which serves them
  over HTTP from a daemon thread.

## Example

```python
import time
import pymysql

from tpcbench.measurement import Measurement
from tpcbench.tpcc.new_order import run_new_order
from tpcbench.tpcc.state import Config, TpccState

config = Config(warehouses=4)
state = TpccState.create(
    lambda: pymysql.connect(host="127.0.0.1", port=4000, user="root", database="test")
)
m = Measurement()
start = time.monotonic()
try:
    run_new_order(state, config)
    m.measure("new_order", time.monotonic() - start, None)
except Exception as exc:
    m.measure("new_order", time.monotonic() - start, exc)
m.output(True, lambda prefix, hists: [print(prefix, op, h.summary())
                                      for op, h in sorted(hists.items()) if not h.empty()])
state.close()
```

## What the package does not do

- There is no command-line program; everything is used from Python.
- It does not create or drop the TPC-C tables; the schema must already exist
  before loading data or running transactions.
- There is no ready-made TPC-C `Workloader` that mixes the five transactions
  by weight, applies keying and thinking times or reports tpmC, and no
  workload that writes the initial data as CSV files. To drive a benchmark,
  implement `Workloader` on top of the transaction functions and hand it to
  `execute_workload`.