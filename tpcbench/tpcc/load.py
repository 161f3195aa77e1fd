"""Initial TPC-C data loaded through multi-row INSERT statements."""

from __future__ import annotations

import time
from typing import Any, List, Optional

from tpcbench.loader import SQLBatchLoader
from tpcbench.tpcc.rand import (
    rand_c_last,
    rand_c_last_syllables,
    rand_chars,
    rand_int,
    rand_letters,
    rand_numbers,
    rand_original_string,
    rand_state,
    rand_tax,
    rand_zip,
)

MAX_ITEMS = 100000
STOCK_PER_WAREHOUSE = 100000
DISTRICT_PER_WAREHOUSE = 10
CUSTOMER_PER_DISTRICT = 3000
ORDER_PER_DISTRICT = 3000
NEW_ORDER_PER_DISTRICT = 900

TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def now_string() -> str:
    """The current local time in the benchmark's datetime format."""
    return time.strftime(TIME_FORMAT)


class SQLTableLoader:
    """Generates each table's rows and inserts them in batches."""

    def __init__(self, init_load_time: Optional[str] = None) -> None:
        self.init_load_time = init_load_time or now_string()

    def load_item(self, state: Any) -> None:
        print("load to item")
        hint = "INSERT INTO item (i_id, i_im_id, i_name, i_price, i_data) VALUES "
        loader = SQLBatchLoader(state.conn, hint)
        r = state.r
        for i in range(MAX_ITEMS):
            im_id = rand_int(r, 1, 10000)
            price = rand_int(r, 100, 10000) / 100.0
            name = rand_chars(r, 14, 24)
            data = rand_original_string(r)
            loader.insert_value([f"({i + 1}, {im_id}, '{name}', {price:f}, '{data}')"])
        loader.flush()

    def load_warehouse(self, state: Any, warehouse: int) -> None:
        print(f"load to warehouse in warehouse {warehouse}")
        hint = ("INSERT INTO warehouse (w_id, w_name, w_street_1, w_street_2, w_city, "
                "w_state, w_zip, w_tax, w_ytd) VALUES ")
        loader = SQLBatchLoader(state.conn, hint)
        r = state.r
        name = rand_chars(r, 6, 10)
        street1 = rand_chars(r, 10, 20)
        street2 = rand_chars(r, 10, 20)
        city = rand_chars(r, 10, 20)
        st = rand_state(r)
        zip_code = rand_zip(r)
        tax = rand_tax(r)
        ytd = 300000.00
        loader.insert_value([
            f"({warehouse}, '{name}', '{street1}', '{street2}', '{city}', '{st}', "
            f"'{zip_code}', {tax:f}, {ytd:f})"
        ])
        loader.flush()

    def load_stock(self, state: Any, warehouse: int) -> None:
        print(f"load to stock in warehouse {warehouse}")
        hint = """INSERT INTO stock (s_i_id, s_w_id, s_quantity, 
s_dist_01, s_dist_02, s_dist_03, s_dist_04, s_dist_05, s_dist_06, 
s_dist_07, s_dist_08, s_dist_09, s_dist_10, s_ytd, s_order_cnt, s_remote_cnt, s_data) VALUES """
        loader = SQLBatchLoader(state.conn, hint)
        r = state.r
        for i in range(STOCK_PER_WAREHOUSE):
            quantity = rand_int(r, 10, 100)
            dists = ", ".join(f"'{rand_letters(r, 24, 24)}'" for _ in range(10))
            data = rand_original_string(r)
            loader.insert_value([
                f"({i + 1}, {warehouse}, {quantity}, {dists}, 0, 0, 0, '{data}')"
            ])
        loader.flush()

    def load_district(self, state: Any, warehouse: int) -> None:
        print(f"load to district in warehouse {warehouse}")
        hint = """INSERT INTO district (d_id, d_w_id, d_name, d_street_1, d_street_2, 
d_city, d_state, d_zip, d_tax, d_ytd, d_next_o_id) VALUES """
        loader = SQLBatchLoader(state.conn, hint)
        r = state.r
        for i in range(DISTRICT_PER_WAREHOUSE):
            name = rand_chars(r, 6, 10)
            street1 = rand_chars(r, 10, 20)
            street2 = rand_chars(r, 10, 20)
            city = rand_chars(r, 10, 20)
            st = rand_state(r)
            zip_code = rand_zip(r)
            tax = rand_tax(r)
            ytd = 30000.00
            next_o_id = 3001
            loader.insert_value([
                f"({i + 1}, {warehouse}, '{name}', '{street1}', '{street2}', '{city}', "
                f"'{st}', '{zip_code}', {tax:f}, {ytd:f}, {next_o_id})"
            ])
        loader.flush()

    def load_customer(self, state: Any, warehouse: int, district: int) -> None:
        print(f"load to customer in warehouse {warehouse} district {district}")
        hint = """INSERT INTO customer (c_id, c_d_id, c_w_id, c_first, c_middle, c_last, 
c_street_1, c_street_2, c_city, c_state, c_zip, c_phone, c_since, c_credit, c_credit_lim,
c_discount, c_balance, c_ytd_payment, c_payment_cnt, c_delivery_cnt, c_data) VALUES """
        loader = SQLBatchLoader(state.conn, hint)
        r = state.r
        for i in range(CUSTOMER_PER_DISTRICT):
            last = rand_c_last_syllables(i) if i < 1000 else rand_c_last(r)
            middle = "OE"
            first = rand_chars(r, 8, 16)
            street1 = rand_chars(r, 10, 20)
            street2 = rand_chars(r, 10, 20)
            city = rand_chars(r, 10, 20)
            st = rand_state(r)
            zip_code = rand_zip(r)
            phone = rand_numbers(r, 16, 16)
            since = self.init_load_time
            credit = "BC" if r.randrange(10) == 0 else "GC"
            credit_lim = 50000.00
            discount = rand_int(r, 0, 5000) / 10000.0
            balance = -10.00
            ytd_payment = 10.00
            payment_cnt = 1
            delivery_cnt = 0
            data = rand_chars(r, 300, 500)
            loader.insert_value([
                f"({i + 1}, {district}, {warehouse}, '{first}', '{middle}', '{last}', "
                f"'{street1}', '{street2}', '{city}', '{st}', '{zip_code}', '{phone}', "
                f"'{since}', '{credit}', {credit_lim:f}, {discount:f}, {balance:f}, "
                f"{ytd_payment:f}, {payment_cnt}, {delivery_cnt}, '{data}')"
            ])
        loader.flush()

    def load_history(self, state: Any, warehouse: int, district: int) -> None:
        print(f"load to history in warehouse {warehouse} district {district}")
        hint = ("INSERT INTO history (h_c_id, h_c_d_id, h_c_w_id, h_d_id, h_w_id, "
                "h_date, h_amount, h_data) VALUES ")
        loader = SQLBatchLoader(state.conn, hint)
        r = state.r
        # one row per customer
        for i in range(CUSTOMER_PER_DISTRICT):
            amount = 10.00
            data = rand_chars(r, 12, 24)
            loader.insert_value([
                f"({i + 1}, {district}, {warehouse}, {district}, {warehouse}, "
                f"'{self.init_load_time}', {amount:f}, '{data}')"
            ])
        loader.flush()

    def load_order(self, state: Any, warehouse: int, district: int) -> List[int]:
        """Insert the orders of a district and return each order's line count."""
        print(f"load to orders in warehouse {warehouse} district {district}")
        hint = """INSERT INTO orders (o_id, o_d_id, o_w_id, o_c_id, o_entry_d, 
o_carrier_id, o_ol_cnt, o_all_local) VALUES """
        loader = SQLBatchLoader(state.conn, hint)
        r = state.r
        cids = list(range(ORDER_PER_DISTRICT))
        r.shuffle(cids)
        ol_cnts: List[int] = []
        for i, cid in enumerate(cids):
            o_id = i + 1
            carrier = str(rand_int(r, 1, 10)) if o_id < 2101 else "NULL"
            ol_cnt = rand_int(r, 5, 15)
            ol_cnts.append(ol_cnt)
            loader.insert_value([
                f"({o_id}, {district}, {warehouse}, {cid + 1}, '{self.init_load_time}', "
                f"{carrier}, {ol_cnt}, 1)"
            ])
        loader.flush()
        return ol_cnts

    def load_new_order(self, state: Any, warehouse: int, district: int) -> None:
        print(f"load to new_order in warehouse {warehouse} district {district}")
        hint = "INSERT INTO new_order (no_o_id, no_d_id, no_w_id) VALUES "
        loader = SQLBatchLoader(state.conn, hint)
        for i in range(NEW_ORDER_PER_DISTRICT):
            loader.insert_value([f"({2101 + i}, {district}, {warehouse})"])
        loader.flush()

    def load_order_line(
        self, state: Any, warehouse: int, district: int, ol_cnts: List[int]
    ) -> None:
        print(f"load to order_line in warehouse {warehouse} district {district}")
        hint = """INSERT INTO order_line (ol_o_id, ol_d_id, ol_w_id, ol_number,
ol_i_id, ol_supply_w_id, ol_delivery_d, ol_quantity, ol_amount, ol_dist_info) VALUES """
        loader = SQLBatchLoader(state.conn, hint)
        r = state.r
        for i in range(ORDER_PER_DISTRICT):
            o_id = i + 1
            for j in range(ol_cnts[i]):
                i_id = rand_int(r, 1, 100000)
                quantity = 5
                if o_id < 2101:
                    delivery = f"'{self.init_load_time}'"
                    amount = 0.00
                else:
                    delivery = "NULL"
                    amount = rand_int(r, 1, 999999) / 100.0
                dist_info = rand_chars(r, 24, 24)
                loader.insert_value([
                    f"({o_id}, {district}, {warehouse}, {j + 1}, {i_id}, {warehouse}, "
                    f"{delivery}, {quantity}, {amount:f}, '{dist_info}')"
                ])
        loader.flush()