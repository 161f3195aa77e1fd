import random

import pytest

from tpcbench.tpcc.check import CheckError, check_warehouse, run_checks
from tpcbench.tpcc.state import Config, TpccState


class FakeCursor:
    def __init__(self, conn):
        self.conn = conn
        self._rows = []

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def execute(self, query, args=()):
        self.conn.executed.append((query, tuple(args)))
        self._rows = list(self.conn.handler(query, tuple(args)))

    def fetchall(self):
        return list(self._rows)

    def fetchone(self):
        return self._rows[0] if self._rows else None


class FakeConn:
    def __init__(self, handler):
        self.handler = handler
        self.executed = []

    def cursor(self):
        return FakeCursor(self)


def _state(handler):
    return TpccState(conn=FakeConn(handler), r=random.Random(1))


def _all_zero(query, args):
    return [(0,)]


def test_consistent_warehouse_runs_every_condition():
    state = _state(_all_zero)
    check_warehouse(state, 3, check_all=True)
    assert len(state.conn.executed) == 12
    assert all(set(args) == {3} for _, args in state.conn.executed)


def test_condition_11_only_with_check_all():
    state = _state(_all_zero)
    check_warehouse(state, 1, check_all=False)
    assert len(state.conn.executed) == 11
    assert not any("order_count - 2100" in q for q, _ in state.conn.executed)


def test_argument_counts_follow_placeholders():
    state = _state(_all_zero)
    check_warehouse(state, 2, check_all=True)
    for query, args in state.conn.executed:
        assert query.count("%s") == len(args)


def test_nonzero_difference_is_reported():
    def handler(query, args):
        if "sum(d_ytd) - max(w_ytd)" in query:
            return [(0,), (2.5,)]
        return [(0,)]

    state = _state(handler)
    with pytest.raises(CheckError) as info:
        check_warehouse(state, 4, check_all=False)
    message = str(info.value)
    assert "check warehouse 4 at condition 3.3.2.1 failed" in message
    assert "should be 0 in warehouse 4" in message


def test_condition_11_violation_mentions_2100():
    def handler(query, args):
        if "order_count - 2100" in query:
            return [(1,)]
        return [(0,)]

    state = _state(handler)
    check_warehouse(state, 1, check_all=False)
    with pytest.raises(CheckError, match="should be 2100 in warehouse 1"):
        check_warehouse(state, 1, check_all=True)


def test_query_error_is_wrapped():
    def handler(query, args):
        raise OSError("connection lost")

    state = _state(handler)
    with pytest.raises(CheckError, match="connection lost") as info:
        check_warehouse(state, 1, check_all=False)
    assert "exec " in str(info.value)


def test_null_value_is_an_error():
    state = _state(lambda q, a: [(None,)])
    with pytest.raises(CheckError, match="NULL"):
        check_warehouse(state, 1, check_all=False)


def test_run_checks_splits_warehouses_between_threads():
    state = _state(_all_zero)
    run_checks(state, Config(threads=2, warehouses=5), thread_id=1, check_all=False)
    checked = {args[0] for _, args in state.conn.executed}
    assert checked == {2, 4}


def test_run_checks_thread_zero_covers_rest():
    state = _state(_all_zero)
    run_checks(state, Config(threads=2, warehouses=5), thread_id=0, check_all=True)
    checked = sorted({args[0] for _, args in state.conn.executed})
    assert checked == [1, 3, 5]
    assert len(state.conn.executed) == 3 * 12