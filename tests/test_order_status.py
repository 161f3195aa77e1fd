import random

import pytest

from tpcbench.tpcc.order_status import run_order_status
from tpcbench.tpcc.state import Config, TpccState


class FakeCursor:
    def __init__(self, conn):
        self.conn = conn
        self.rows = []
        self.rowcount = 0

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def execute(self, query, args=()):
        args = tuple(args)
        self.conn.executed.append((query, args))
        self.rows = list(self.conn.responder(query, args))
        self.rowcount = len(self.rows)

    def fetchone(self):
        return self.rows[0] if self.rows else None

    def fetchall(self):
        return self.rows


class FakeConn:
    def __init__(self, responder):
        self.responder = responder
        self.executed = []
        self.commits = 0
        self.rollbacks = 0

    def cursor(self):
        return FakeCursor(self)

    def begin(self):
        pass

    def commit(self):
        self.commits += 1

    def rollback(self):
        self.rollbacks += 1

    def find(self, prefix):
        return [args for q, args in self.executed if q.startswith(prefix)]


class ZeroRandom(random.Random):
    """Always picks the lowest value: lookup by last name."""

    def randrange(self, start, stop=None, step=1):
        return 0 if stop is None else start


class MaxRandom(random.Random):
    """Always picks the highest value: lookup by customer id."""

    def randrange(self, start, stop=None, step=1):
        return start - 1 if stop is None else stop - 1


LINES = [(11, 1, 5, 0.0, "2020-01-01 00:00:00"), (12, 1, 5, 0.0, None)]


def make_responder(name_cnt=3, customers=(11, 12, 13), order=True):
    def responder(query, args):
        if query.startswith("SELECT count(c_id)"):
            return [(name_cnt,)]
        if query.startswith("SELECT c_balance, c_first, c_middle, c_id"):
            return [(-10.0, "first", "OE", c) for c in customers]
        if query.startswith("SELECT c_balance, c_first, c_middle, c_last"):
            return [(-10.0, "first", "OE", "last")]
        if query.startswith("SELECT o_id"):
            return [(42, None, "2020-01-01 00:00:00")] if order else []
        if query.startswith("SELECT ol_i_id"):
            return list(LINES)
        return []

    return responder


def make_state(responder, r):
    conn = FakeConn(responder)
    return TpccState(conn=conn, r=r), conn


def test_order_status_by_last_name_odd_count():
    state, conn = make_state(make_responder(), ZeroRandom())
    c_id, o_id, lines = run_order_status(state, Config(warehouses=1))
    assert c_id == 12
    assert o_id == 42
    assert lines == LINES
    assert conn.commits == 1
    (order_args,) = conn.find("SELECT o_id")
    assert order_args == (1, 1, 12)
    (line_args,) = conn.find("SELECT ol_i_id")
    assert line_args == (1, 1, 42)


def test_order_status_by_last_name_even_count():
    state, _conn = make_state(make_responder(name_cnt=4, customers=(21, 22, 23, 24)),
                              ZeroRandom())
    c_id, _o_id, _lines = run_order_status(state, Config(warehouses=1))
    assert c_id == 22


def test_order_status_by_id():
    state, conn = make_state(make_responder(), MaxRandom())
    c_id, o_id, lines = run_order_status(state, Config(warehouses=1))
    assert 1 <= c_id <= 3000
    assert o_id == 42
    assert conn.find("SELECT count(c_id)") == []
    (customer_args,) = conn.find("SELECT c_balance, c_first, c_middle, c_last")
    assert customer_args == (1, 10, c_id)
    assert lines == LINES


def test_order_status_no_order():
    state, conn = make_state(make_responder(order=False), MaxRandom())
    with pytest.raises(LookupError):
        run_order_status(state, Config(warehouses=1))
    assert conn.rollbacks == 1
    assert conn.commits == 0


def test_order_status_no_matching_name():
    state, conn = make_state(make_responder(name_cnt=0, customers=(), order=False),
                             ZeroRandom())
    with pytest.raises(LookupError):
        run_order_status(state, Config(warehouses=1))
    (order_args,) = conn.find("SELECT o_id")
    assert order_args[2] == 0