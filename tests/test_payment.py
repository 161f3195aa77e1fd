import random

import pytest

from tpcbench.tpcc.payment import run_payment
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
    """Always picks the lowest value: payment by last name."""

    def randrange(self, start, stop=None, step=1):
        return 0 if stop is None else start


class MaxRandom(random.Random):
    """Always picks the highest value: payment by customer id."""

    def randrange(self, start, stop=None, step=1):
        return start - 1 if stop is None else stop - 1


def make_responder(ids=((7,), (8,), (9,)), credit="GC", c_data="x" * 300):
    def responder(query, args):
        if query.startswith("SELECT d_street_1"):
            return [("s1", "s2", "city", "st", "zip", "dname")]
        if query.startswith("SELECT w_street_1"):
            return [("s1", "s2", "city", "st", "zip", "wname")]
        if query.startswith("SELECT c_id FROM customer"):
            return list(ids)
        if query.startswith("SELECT c_first"):
            return [("first", "OE", "last", "s1", "s2", "city", "st", "zip", "phone",
                     credit, 50000.0, 0.1, -10.0, "2020-01-01 00:00:00")]
        if query.startswith("SELECT c_data"):
            return [(c_data,)]
        return []

    return responder


def make_state(responder, r):
    conn = FakeConn(responder)
    return TpccState(conn=conn, r=r), conn


def test_payment_by_last_name_picks_middle():
    state, conn = make_state(make_responder(), ZeroRandom())
    assert run_payment(state, Config(warehouses=1)) == 8
    assert conn.commits == 1
    (customer_args,) = conn.find("SELECT c_first")
    assert customer_args[2] == 8


def test_payment_by_last_name_even_count():
    ids = ((1,), (2,), (3,), (4,))
    state, _conn = make_state(make_responder(ids=ids), ZeroRandom())
    assert run_payment(state, Config(warehouses=1)) == 2


def test_payment_by_id():
    state, conn = make_state(make_responder(), MaxRandom())
    c_id = run_payment(state, Config(warehouses=1))
    assert 1 <= c_id <= 3000
    assert conn.find("SELECT c_id FROM customer") == []
    (customer_args,) = conn.find("SELECT c_first")
    assert customer_args == (1, 10, c_id)


def test_payment_updates_balances_and_history():
    state, conn = make_state(make_responder(), ZeroRandom())
    c_id = run_payment(state, Config(warehouses=1))
    (district_update,) = conn.find("UPDATE district")
    (warehouse_update,) = conn.find("UPDATE warehouse")
    amount = district_update[0]
    assert warehouse_update == (amount, 1)
    (customer_update,) = conn.find("UPDATE customer")
    assert customer_update == (amount, amount, 1, 1, c_id)
    (history,) = conn.find("INSERT INTO history")
    assert history[:5] == (1, 1, c_id, 1, 1)
    assert history[6] == amount
    assert history[7] == "     wname         dname"


def test_payment_bad_credit_short_data():
    state, conn = make_state(make_responder(credit="BC", c_data="Z" * 30), ZeroRandom())
    c_id = run_payment(state, Config(warehouses=1))
    (update,) = conn.find("UPDATE customer")
    new_data = update[2]
    assert update[3:] == (1, 1, c_id)
    assert new_data.startswith("| ")
    assert new_data.endswith("Z" * 30)
    assert len(new_data) < 500


def test_payment_bad_credit_truncates():
    state, conn = make_state(make_responder(credit="BC", c_data="Y" * 500), MaxRandom())
    run_payment(state, Config(warehouses=1))
    (update,) = conn.find("UPDATE customer")
    assert len(update[2]) == 500
    assert update[2].startswith("| ")


def test_payment_customer_not_found():
    state, conn = make_state(make_responder(ids=()), ZeroRandom())
    with pytest.raises(LookupError, match="not found"):
        run_payment(state, Config(warehouses=1))
    assert conn.rollbacks == 1
    assert conn.commits == 0