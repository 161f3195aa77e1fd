"""The Payment transaction."""

from __future__ import annotations

import time
from typing import Any, Sequence

from tpcbench.tpcc.load import DISTRICT_PER_WAREHOUSE, TIME_FORMAT
from tpcbench.tpcc.new_order import other_warehouse
from tpcbench.tpcc.rand import rand_c_last, rand_customer_id, rand_int
from tpcbench.tpcc.state import Config, TpccState

PAYMENT_UPDATE_DISTRICT = "UPDATE district SET d_ytd = d_ytd + ? WHERE d_w_id = ? AND d_id = ?"
PAYMENT_SELECT_DISTRICT = (
    "SELECT d_street_1, d_street_2, d_city, d_state, d_zip, d_name FROM district "
    "WHERE d_w_id = ? AND d_id = ?"
)
PAYMENT_UPDATE_WAREHOUSE = "UPDATE warehouse SET w_ytd = w_ytd + ? WHERE w_id = ?"
PAYMENT_SELECT_WAREHOUSE = (
    "SELECT w_street_1, w_street_2, w_city, w_state, w_zip, w_name FROM warehouse WHERE w_id = ?"
)
PAYMENT_SELECT_CUSTOMER_LIST_BY_LAST = (
    "SELECT c_id FROM customer WHERE c_w_id = ? AND c_d_id = ? AND c_last = ? ORDER BY c_first"
)
PAYMENT_SELECT_CUSTOMER_FOR_UPDATE = """SELECT c_first, c_middle, c_last, c_street_1, c_street_2, c_city, c_state, c_zip, c_phone,
c_credit, c_credit_lim, c_discount, c_balance, c_since FROM customer WHERE c_w_id = ? AND c_d_id = ? 
AND c_id = ? FOR UPDATE"""
PAYMENT_UPDATE_CUSTOMER = """UPDATE customer SET c_balance = c_balance - ?, c_ytd_payment = c_ytd_payment + ?, 
c_payment_cnt = c_payment_cnt + 1 WHERE c_w_id = ? AND c_d_id = ? AND c_id = ?"""
PAYMENT_SELECT_CUSTOMER_DATA = (
    "SELECT c_data FROM customer WHERE c_w_id = ? AND c_d_id = ? AND c_id = ?"
)
PAYMENT_UPDATE_CUSTOMER_WITH_DATA = """UPDATE customer SET c_balance = c_balance - ?, c_ytd_payment = c_ytd_payment + ?, 
c_payment_cnt = c_payment_cnt + 1, c_data = ? WHERE c_w_id = ? AND c_d_id = ? AND c_id = ?"""
PAYMENT_INSERT_HISTORY = """INSERT INTO history (h_c_d_id, h_c_w_id, h_c_id, h_d_id, h_w_id, h_date, h_amount, h_data)
VALUES (?, ?, ?, ?, ?, ?, ?, ?)"""

_MAX_C_DATA = 500


def _fetch_one(tx: Any, query: str, args: Sequence[Any]) -> tuple:
    row = tx.fetch_one(query, args)
    if row is None:
        raise LookupError(f"exec {query} failed: no rows")
    return row


def run_payment(state: TpccState, config: Config) -> int:
    """Record a customer payment; returns the id of the customer who paid."""
    r = state.r
    w_id = rand_int(r, 1, config.warehouses)
    d_id = rand_int(r, 1, DISTRICT_PER_WAREHOUSE)
    h_amount = rand_int(r, 100, 500000) / 100.0

    # 60% by last name, 40% by customer id
    c_id = 0
    c_last = ""
    if r.randrange(100) < 60:
        c_last = rand_c_last(r)
    else:
        c_id = rand_customer_id(r)

    # 85% local, 15% remote
    if config.warehouses == 1 or r.randrange(100) < 85:
        c_w_id, c_d_id = w_id, d_id
    else:
        c_w_id = other_warehouse(state, config.warehouses, w_id)
        c_d_id = rand_int(r, 1, DISTRICT_PER_WAREHOUSE)

    with state.transaction(config.isolation) as tx:
        tx.execute(PAYMENT_UPDATE_DISTRICT, (h_amount, w_id, d_id))
        d_name = _fetch_one(tx, PAYMENT_SELECT_DISTRICT, (w_id, d_id))[5]

        tx.execute(PAYMENT_UPDATE_WAREHOUSE, (h_amount, w_id))
        w_name = _fetch_one(tx, PAYMENT_SELECT_WAREHOUSE, (w_id,))[5]

        if c_id == 0:
            ids = [row[0] for row in
                   tx.fetch_all(PAYMENT_SELECT_CUSTOMER_LIST_BY_LAST, (c_w_id, c_d_id, c_last))]
            if not ids:
                raise LookupError(f"customer for ({c_w_id}, {c_d_id}, {c_last}) not found")
            c_id = ids[(len(ids) + 1) // 2 - 1]

        customer = _fetch_one(tx, PAYMENT_SELECT_CUSTOMER_FOR_UPDATE, (c_w_id, c_d_id, c_id))
        c_credit = customer[9]
        if isinstance(c_credit, (bytes, bytearray)):
            c_credit = c_credit.decode()

        if c_credit == "BC":
            c_data = _fetch_one(tx, PAYMENT_SELECT_CUSTOMER_DATA, (c_w_id, c_d_id, c_id))[0]
            new_data = "| %4d %2d %4d %2d %4d $%7.2f %12s %24s" % (
                c_id, c_d_id, c_w_id, d_id, w_id, h_amount, time.strftime(TIME_FORMAT), c_data,
            )
            if len(new_data) >= _MAX_C_DATA:
                new_data = new_data[:_MAX_C_DATA]
            else:
                new_data += c_data[:_MAX_C_DATA - len(new_data)]
            tx.execute(
                PAYMENT_UPDATE_CUSTOMER_WITH_DATA,
                (h_amount, h_amount, new_data, c_w_id, c_d_id, c_id),
            )
        else:
            tx.execute(PAYMENT_UPDATE_CUSTOMER, (h_amount, h_amount, c_w_id, c_d_id, c_id))

        h_data = "%10s    %10s" % (w_name, d_name)
        tx.execute(
            PAYMENT_INSERT_HISTORY,
            (c_d_id, c_w_id, c_id, d_id, w_id, time.strftime(TIME_FORMAT), h_amount, h_data),
        )
        tx.commit()
    return c_id