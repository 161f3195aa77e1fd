"""The Stock-Level transaction."""

from __future__ import annotations

from tpcbench.tpcc.rand import rand_int
from tpcbench.tpcc.state import Config, TpccState

STOCK_LEVEL_COUNT = """SELECT /*+ TIDB_INLJ(order_line,stock) */ COUNT(DISTINCT (s_i_id)) stock_count FROM order_line, stock 
WHERE ol_w_id = ? AND ol_d_id = ? AND ol_o_id < ? AND ol_o_id >= ? - 20 AND s_w_id = ? AND s_i_id = ol_i_id AND s_quantity < ?"""
STOCK_LEVEL_SELECT_DISTRICT = "SELECT d_next_o_id FROM district WHERE d_w_id = ? AND d_id = ?"


def run_stock_level(state: TpccState, config: Config) -> int:
    """Count recently ordered items below a random stock threshold."""
    r = state.r
    with state.transaction(config.isolation) as tx:
        w_id = rand_int(r, 1, config.warehouses)
        d_id = rand_int(r, 1, 10)
        threshold = rand_int(r, 10, 20)

        row = tx.fetch_one(STOCK_LEVEL_SELECT_DISTRICT, (w_id, d_id))
        if row is None:
            raise LookupError(f"exec {STOCK_LEVEL_SELECT_DISTRICT} failed: no rows")
        o_id = row[0]

        row = tx.fetch_one(STOCK_LEVEL_COUNT, (w_id, d_id, o_id, o_id, w_id, threshold))
        if row is None:
            raise LookupError(f"exec {STOCK_LEVEL_COUNT} failed: no rows")
        stock_count = int(row[0])

        tx.commit()
    return stock_count