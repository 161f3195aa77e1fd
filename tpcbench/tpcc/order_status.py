"""The Order-Status transaction."""

from __future__ import annotations

from typing import Any, List, Sequence, Tuple

from tpcbench.tpcc.load import DISTRICT_PER_WAREHOUSE
from tpcbench.tpcc.rand import rand_c_last, rand_customer_id, rand_int
from tpcbench.tpcc.state import Config, TpccState

ORDER_STATUS_SELECT_CUSTOMER_CNT_BY_LAST = (
    "SELECT count(c_id) namecnt FROM customer WHERE c_w_id = ? AND c_d_id = ? AND c_last = ?"
)
ORDER_STATUS_SELECT_CUSTOMER_BY_LAST = (
    "SELECT c_balance, c_first, c_middle, c_id FROM customer "
    "WHERE c_w_id = ? AND c_d_id = ? AND c_last = ? ORDER BY c_first"
)
ORDER_STATUS_SELECT_CUSTOMER_BY_ID = (
    "SELECT c_balance, c_first, c_middle, c_last FROM customer "
    "WHERE c_w_id = ? AND c_d_id = ? AND c_id = ?"
)
ORDER_STATUS_SELECT_LATEST_ORDER = (
    "SELECT o_id, o_carrier_id, o_entry_d FROM orders "
    "WHERE o_w_id = ? AND o_d_id = ? AND o_c_id = ? ORDER BY o_id DESC LIMIT 1"
)
ORDER_STATUS_SELECT_ORDER_LINE = (
    "SELECT ol_i_id, ol_supply_w_id, ol_quantity, ol_amount, ol_delivery_d FROM order_line "
    "WHERE ol_w_id = ? AND ol_d_id = ? AND ol_o_id = ?"
)


def _fetch_one(tx: Any, query: str, args: Sequence[Any]) -> tuple:
    row = tx.fetch_one(query, args)
    if row is None:
        raise LookupError(f"exec {query} failed: no rows")
    return row


def run_order_status(state: TpccState, config: Config) -> Tuple[int, int, List[tuple]]:
    """Look up a customer's latest order; returns (customer id, order id, order lines)."""
    r = state.r
    w_id = rand_int(r, 1, config.warehouses)
    d_id = rand_int(r, 1, DISTRICT_PER_WAREHOUSE)

    c_id = 0
    c_last = ""
    if r.randrange(100) < 60:
        c_last = rand_c_last(r)
    else:
        c_id = rand_customer_id(r)

    with state.transaction(config.isolation) as tx:
        if c_id == 0:
            name_cnt = int(_fetch_one(
                tx, ORDER_STATUS_SELECT_CUSTOMER_CNT_BY_LAST, (w_id, d_id, c_last))[0])
            if name_cnt % 2 == 1:
                name_cnt += 1
            rows = tx.fetch_all(ORDER_STATUS_SELECT_CUSTOMER_BY_LAST, (w_id, d_id, c_last))
            # the customer in the middle of the list ordered by first name
            for row in rows[:name_cnt // 2]:
                c_id = row[3]
        else:
            _fetch_one(tx, ORDER_STATUS_SELECT_CUSTOMER_BY_ID, (w_id, d_id, c_id))

        order = _fetch_one(tx, ORDER_STATUS_SELECT_LATEST_ORDER, (w_id, d_id, c_id))
        o_id = order[0]

        lines = list(tx.fetch_all(ORDER_STATUS_SELECT_ORDER_LINE, (w_id, d_id, o_id)))
        tx.commit()
    return c_id, o_id, lines