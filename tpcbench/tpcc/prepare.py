"""Distribution of the initial TPC-C data load across worker threads."""

from __future__ import annotations

from typing import Any, List, Protocol

from tpcbench.tpcc.load import DISTRICT_PER_WAREHOUSE


class TableLoader(Protocol):
    """Something that can generate every TPC-C table for a given scope."""

    def load_item(self, state: Any) -> None: ...

    def load_warehouse(self, state: Any, warehouse: int) -> None: ...

    def load_stock(self, state: Any, warehouse: int) -> None: ...

    def load_district(self, state: Any, warehouse: int) -> None: ...

    def load_customer(self, state: Any, warehouse: int, district: int) -> None: ...

    def load_history(self, state: Any, warehouse: int, district: int) -> None: ...

    def load_order(self, state: Any, warehouse: int, district: int) -> List[int]: ...

    def load_new_order(self, state: Any, warehouse: int, district: int) -> None: ...

    def load_order_line(
        self, state: Any, warehouse: int, district: int, ol_cnts: List[int]
    ) -> None: ...


def prepare_workload(
    loader: TableLoader, state: Any, threads: int, warehouses: int, thread_id: int
) -> None:
    """Load this thread's share of the data.

    Thread 0 loads the item table. Warehouses (with their stock and
    districts) and then districts (with customers, history, orders,
    new orders and order lines) are dealt out round-robin to the threads.
    """
    if thread_id == 0:
        try:
            loader.load_item(state)
        except Exception as exc:
            raise RuntimeError(f"load item faield {exc}") from exc

    for i in range(thread_id % threads, warehouses, threads):
        warehouse = i % warehouses + 1
        steps = (
            (loader.load_warehouse, f"load warehouse in {warehouse} failed"),
            (loader.load_stock, f"load stock at warehouse {warehouse} failed"),
            (loader.load_district, f"load district at wareshouse {warehouse} failed"),
        )
        for step, message in steps:
            try:
                step(state, warehouse)
            except Exception as exc:
                raise RuntimeError(f"{message} {exc}") from exc

    districts = warehouses * DISTRICT_PER_WAREHOUSE
    for i in range(thread_id % threads, districts, threads):
        warehouse = (i // DISTRICT_PER_WAREHOUSE) % warehouses + 1
        district = i % DISTRICT_PER_WAREHOUSE + 1
        where = f"at warehouse {warehouse} district {district} failed"

        try:
            loader.load_customer(state, warehouse, district)
        except Exception as exc:
            raise RuntimeError(f"load customer {where} {exc}") from exc
        try:
            loader.load_history(state, warehouse, district)
        except Exception as exc:
            raise RuntimeError(f"load history {where} {exc}") from exc
        try:
            ol_cnts = loader.load_order(state, warehouse, district)
        except Exception as exc:
            raise RuntimeError(f"load orders {where} {exc}") from exc
        try:
            loader.load_new_order(state, warehouse, district)
        except Exception as exc:
            raise RuntimeError(f"load new_order {where} {exc}") from exc
        try:
            loader.load_order_line(state, warehouse, district, ol_cnts)
        except Exception as exc:
            raise RuntimeError(f"load order_line {where} {exc}") from exc