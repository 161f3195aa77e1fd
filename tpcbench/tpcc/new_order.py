"""The New-Order transaction."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence

from tpcbench.tpcc.load import DISTRICT_PER_WAREHOUSE, TIME_FORMAT
from tpcbench.tpcc.rand import rand_customer_id, rand_int, rand_item_id
from tpcbench.tpcc.state import Config, TpccState

NEW_ORDER_SELECT_CUSTOMER = (
    "SELECT c_discount, c_last, c_credit, w_tax FROM customer, warehouse "
    "WHERE w_id = ? AND c_w_id = w_id AND c_d_id = ? AND c_id = ?"
)
NEW_ORDER_SELECT_DISTRICT = (
    "SELECT d_next_o_id, d_tax FROM district WHERE d_id = ? AND d_w_id = ? FOR UPDATE"
)
NEW_ORDER_UPDATE_DISTRICT = "UPDATE district SET d_next_o_id = ? + 1 WHERE d_id = ? AND d_w_id = ?"
NEW_ORDER_INSERT_ORDER = (
    "INSERT INTO orders (o_id, o_d_id, o_w_id, o_c_id, o_entry_d, o_ol_cnt, o_all_local) "
    "VALUES (?, ?, ?, ?, ?, ?, ?)"
)
NEW_ORDER_INSERT_NEW_ORDER = "INSERT INTO new_order (no_o_id, no_d_id, no_w_id) VALUES (?, ?, ?)"
NEW_ORDER_UPDATE_STOCK = (
    "UPDATE stock SET s_quantity = ?, s_ytd = s_ytd + ?, s_order_cnt = s_order_cnt + 1, "
    "s_remote_cnt = s_remote_cnt + ? WHERE s_i_id = ? AND s_w_id = ?"
)


def select_items_sql(count: int) -> str:
    """Batch item lookup for ``count`` ids."""
    marks = ",".join("?" * count)
    return f"SELECT i_price, i_name, i_data, i_id FROM item WHERE i_id IN ({marks})"


def select_stock_sql(count: int) -> str:
    """Batch stock lookup, locked for update, for ``count`` (warehouse, item) pairs."""
    pairs = ",".join(["(?,?)"] * count)
    return (
        "SELECT s_i_id, s_quantity, s_data, s_dist_01, s_dist_02, s_dist_03, s_dist_04, "
        "s_dist_05, s_dist_06, s_dist_07, s_dist_08, s_dist_09, s_dist_10 FROM stock "
        f"WHERE (s_w_id, s_i_id) IN ({pairs}) FOR UPDATE"
    )


def insert_order_line_sql(count: int) -> str:
    """Multi-row order-line insert for ``count`` lines."""
    rows = ",".join(["(?,?,?,?,?,?,?,?,?)"] * count)
    return (
        "INSERT into order_line (ol_o_id, ol_d_id, ol_w_id, ol_number, ol_i_id, "
        f"ol_supply_w_id, ol_quantity, ol_amount, ol_dist_info) VALUES {rows}"
    )


SELECT_ITEM_SQLS = {n: select_items_sql(n) for n in range(5, 16)}
SELECT_STOCK_SQLS = {n: select_stock_sql(n) for n in range(5, 16)}
INSERT_ORDER_LINE_SQLS = {n: insert_order_line_sql(n) for n in range(5, 16)}


def other_warehouse(state: TpccState, warehouses: int, warehouse: int) -> int:
    """A random warehouse different from ``warehouse`` (itself if there is only one)."""
    if warehouses == 1:
        return warehouse
    while True:
        other = rand_int(state.r, 1, warehouses)
        if other != warehouse:
            return other


@dataclass
class _OrderItem:
    ol_number: int
    ol_i_id: int = 0
    ol_supply_w_id: int = 0
    ol_quantity: int = 0
    ol_amount: float = 0.0
    i_price: float = 0.0
    i_name: str = ""
    i_data: str = ""
    found_in_items: bool = False
    found_in_stock: bool = False
    s_quantity: int = 0
    s_dist: str = ""
    remote_warehouse: int = 0


def _fetch_one(tx: Any, query: str, args: Sequence[Any]) -> tuple:
    row = tx.fetch_one(query, args)
    if row is None:
        raise LookupError(f"exec {query} failed: no rows")
    return row


def run_new_order(state: TpccState, config: Config) -> bool:
    """Enter a new order; returns False when the order was deliberately rolled back."""
    r = state.r
    w_id = rand_int(r, 1, config.warehouses)
    d_id = rand_int(r, 1, DISTRICT_PER_WAREHOUSE)
    c_id = rand_customer_id(r)
    ol_cnt = rand_int(r, 5, 15)

    rbk = rand_int(r, 1, 100)
    all_local = 1
    items: List[_OrderItem] = []
    by_id: Dict[int, _OrderItem] = {}

    for i in range(ol_cnt):
        item = _OrderItem(ol_number=i + 1)
        if i == ol_cnt - 1 and rbk == 1:
            item.ol_i_id = -1
        else:
            while True:
                i_id = rand_item_id(r)
                if i_id not in by_id:
                    break
            by_id[i_id] = item
            item.ol_i_id = i_id

        if config.warehouses == 1 or rand_int(r, 1, 100) != 1:
            item.ol_supply_w_id = w_id
        else:
            item.ol_supply_w_id = other_warehouse(state, config.warehouses, w_id)
            item.remote_warehouse = 1
            all_local = 0

        item.ol_quantity = rand_int(r, 1, 10)
        items.append(item)

    with state.transaction(config.isolation) as tx:
        print(NEW_ORDER_SELECT_CUSTOMER)
        row = _fetch_one(tx, NEW_ORDER_SELECT_CUSTOMER, (w_id, d_id, c_id))
        c_discount = float(row[0])
        w_tax = float(row[3])

        print(NEW_ORDER_SELECT_DISTRICT)
        row = _fetch_one(tx, NEW_ORDER_SELECT_DISTRICT, (d_id, w_id))
        d_next_o_id = int(row[0])
        d_tax = float(row[1])

        print(NEW_ORDER_UPDATE_DISTRICT)
        tx.execute(NEW_ORDER_UPDATE_DISTRICT, (d_next_o_id, d_id, w_id))

        o_id = d_next_o_id

        print(NEW_ORDER_INSERT_ORDER)
        tx.execute(
            NEW_ORDER_INSERT_ORDER,
            (o_id, d_id, w_id, c_id, time.strftime(TIME_FORMAT), ol_cnt, all_local),
        )

        print(NEW_ORDER_INSERT_NEW_ORDER)
        tx.execute(NEW_ORDER_INSERT_NEW_ORDER, (o_id, d_id, w_id))

        item_sql = SELECT_ITEM_SQLS.get(len(items)) or select_items_sql(len(items))
        for price, name, data, i_id in tx.fetch_all(item_sql, [it.ol_i_id for it in items]):
            item = by_id[int(i_id)]
            item.i_price = float(price)
            item.i_name = name
            item.i_data = data
            item.found_in_items = True
        for item in items:
            if not item.found_in_items:
                if item.ol_i_id == -1:
                    return False
                raise LookupError(f"item {item.ol_i_id} not found")

        stock_sql = SELECT_STOCK_SQLS.get(len(items)) or select_stock_sql(len(items))
        stock_args: List[Any] = []
        for item in items:
            stock_args.extend((w_id, item.ol_i_id))
        print(stock_sql)
        for row in tx.fetch_all(stock_sql, stock_args):
            item = by_id[int(row[0])]
            quantity = int(row[1]) - item.ol_quantity
            if quantity < 10:
                quantity += 91
            item.found_in_stock = True
            item.s_quantity = quantity
            item.s_dist = row[3 + d_id - 1]
            item.ol_amount = (
                item.ol_quantity * item.i_price * (1 + w_tax + d_tax) * (1 - c_discount)
            )

        for item in items:
            if not item.found_in_stock:
                raise LookupError(f"item ({w_id}, {item.ol_i_id}) not found in stock")
            if item.ol_i_id < 0:
                return False
            print(NEW_ORDER_UPDATE_STOCK)
            tx.execute(
                NEW_ORDER_UPDATE_STOCK,
                (item.s_quantity, item.ol_quantity, item.remote_warehouse, item.ol_i_id, w_id),
            )

        line_sql = INSERT_ORDER_LINE_SQLS.get(len(items)) or insert_order_line_sql(len(items))
        line_args: List[Any] = []
        for item in items:
            line_args.extend((
                o_id, d_id, w_id, item.ol_number, item.ol_i_id, item.ol_supply_w_id,
                item.ol_quantity, item.ol_amount, item.s_dist,
            ))
        print(line_sql)
        tx.execute(line_sql, line_args)
        tx.commit()
    return True