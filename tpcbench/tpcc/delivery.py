"""The Delivery transaction."""

from __future__ import annotations

import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List

from tpcbench.tpcc.load import DISTRICT_PER_WAREHOUSE, TIME_FORMAT
from tpcbench.tpcc.rand import rand_int
from tpcbench.tpcc.state import Config, TpccState

_KEYS = ",".join(["(?,?,?)"] * DISTRICT_PER_WAREHOUSE)

DELIVERY_SELECT_NEW_ORDER = (
    "SELECT no_o_id FROM new_order WHERE no_w_id = ? AND no_d_id = ? "
    "ORDER BY no_o_id ASC LIMIT 1 FOR UPDATE"
)
DELIVERY_DELETE_NEW_ORDER = (
    f"DELETE FROM new_order WHERE (no_w_id, no_d_id, no_o_id) IN (\n\t{_KEYS}\n)"
)
DELIVERY_UPDATE_ORDER = (
    f"UPDATE orders SET o_carrier_id = ? WHERE (o_w_id, o_d_id, o_id) IN (\n\t{_KEYS}\n)"
)
DELIVERY_SELECT_ORDERS = (
    f"SELECT o_d_id, o_c_id FROM orders WHERE (o_w_id, o_d_id, o_id) IN (\n\t{_KEYS}\n)"
)
DELIVERY_UPDATE_ORDER_LINE = (
    "UPDATE order_line SET ol_delivery_d = ? WHERE (ol_w_id, ol_d_id, ol_o_id) IN "
    f"(\n\t{_KEYS}\n)"
)
DELIVERY_SELECT_SUM_AMOUNT = (
    "SELECT ol_d_id, SUM(ol_amount) FROM order_line WHERE (ol_w_id, ol_d_id, ol_o_id) IN "
    f"(\n\t{_KEYS}\n) GROUP BY ol_d_id"
)
DELIVERY_UPDATE_CUSTOMER = (
    "UPDATE customer SET c_balance = c_balance + ?, c_delivery_cnt = c_delivery_cnt + 1 "
    "WHERE c_w_id = ? AND c_d_id = ? AND c_id = ?"
)


@dataclass
class _DeliveryOrder:
    o_id: int = 0
    c_id: int = 0
    amount: float = 0.0


@contextmanager
def _statement(query: str) -> Iterator[None]:
    try:
        yield
    except Exception as exc:
        raise RuntimeError(f"exec {query} failed {exc}") from exc


def _keys(w_id: int, orders: List[_DeliveryOrder]) -> List[int]:
    args: List[int] = []
    for district, order in enumerate(orders, start=1):
        args.extend((w_id, district, order.o_id))
    return args


def run_delivery(state: TpccState, config: Config) -> Dict[int, int]:
    """Deliver the oldest new order of every district of a random warehouse.

    Returns a mapping from district to the delivered order id; districts
    without an outstanding order are left out.
    """
    r = state.r
    w_id = rand_int(r, 1, config.warehouses)
    carrier_id = rand_int(r, 1, 10)
    orders = [_DeliveryOrder() for _ in range(DISTRICT_PER_WAREHOUSE)]

    with state.transaction(config.isolation) as tx:
        for district, order in enumerate(orders, start=1):
            with _statement(DELIVERY_SELECT_NEW_ORDER):
                row = tx.fetch_one(DELIVERY_SELECT_NEW_ORDER, (w_id, district))
            if row is not None:
                order.o_id = int(row[0])

        keys = _keys(w_id, orders)

        with _statement(DELIVERY_DELETE_NEW_ORDER):
            tx.execute(DELIVERY_DELETE_NEW_ORDER, keys)

        with _statement(DELIVERY_UPDATE_ORDER):
            tx.execute(DELIVERY_UPDATE_ORDER, [carrier_id, *keys])

        with _statement(DELIVERY_SELECT_ORDERS):
            for d_id, c_id in tx.fetch_all(DELIVERY_SELECT_ORDERS, keys):
                orders[int(d_id) - 1].c_id = int(c_id)

        with _statement(DELIVERY_UPDATE_ORDER_LINE):
            tx.execute(DELIVERY_UPDATE_ORDER_LINE, [time.strftime(TIME_FORMAT), *keys])

        with _statement(DELIVERY_SELECT_SUM_AMOUNT):
            for d_id, amount in tx.fetch_all(DELIVERY_SELECT_SUM_AMOUNT, keys):
                orders[int(d_id) - 1].amount = float(amount)

        for district, order in enumerate(orders, start=1):
            if order.o_id == 0:
                continue
            with _statement(DELIVERY_UPDATE_CUSTOMER):
                tx.execute(DELIVERY_UPDATE_CUSTOMER, (order.amount, w_id, district, order.c_id))

        tx.commit()

    return {
        district: order.o_id
        for district, order in enumerate(orders, start=1)
        if order.o_id != 0
    }