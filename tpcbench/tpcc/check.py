"""Consistency conditions of the TPC-C database (clause 3.3.2)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Tuple

from tpcbench.tpcc.state import Config


class CheckError(Exception):
    """A consistency condition does not hold or could not be evaluated."""


@dataclass(frozen=True)
class _Condition:
    name: str
    query: str
    arg_count: int
    message: str
    check_all_only: bool = False


_CONDITIONS: Tuple[_Condition, ...] = (
    _Condition(
        "3.3.2.1",
        "SELECT sum(d_ytd) - max(w_ytd) diff FROM district, warehouse "
        "WHERE d_w_id = w_id AND w_id = ? group by d_w_id",
        1,
        "sum(d_ytd) - max(w_ytd) should be 0 in warehouse {warehouse}, but got {value:f}",
    ),
    _Condition(
        "3.3.2.2",
        "SELECT POWER((d_next_o_id -1 - mo), 2) + POWER((d_next_o_id -1 - mno), 2) diff "
        "FROM district dis, (SELECT o_d_id,max(o_id) mo FROM orders WHERE o_w_id= ? "
        "GROUP BY o_d_id) q, (select no_d_id,max(no_o_id) mno from new_order "
        "where no_w_id= ? group by no_d_id) no where d_w_id = ? and q.o_d_id=dis.d_id "
        "and no.no_d_id=dis.d_id",
        3,
        "POWER((d_next_o_id -1 - mo), 2) + POWER((d_next_o_id -1 - mno),2) != 0 "
        "in warehouse {warehouse}, but got {value:f}",
    ),
    _Condition(
        "3.3.2.3",
        "SELECT max(no_o_id)-min(no_o_id)+1 - count(*) diff from new_order "
        "where no_w_id = ? group by no_d_id",
        1,
        "max(no_o_id)-min(no_o_id)+1 - count(*) in warehouse {warehouse}, but got {value:f}",
    ),
    _Condition(
        "3.3.2.4",
        "SELECT count(*) FROM (SELECT o_d_id, SUM(o_ol_cnt) sm1, MAX(cn) as cn FROM orders,"
        "(SELECT ol_d_id, COUNT(*) cn FROM order_line WHERE ol_w_id = ? GROUP BY ol_d_id) ol "
        "WHERE o_w_id = ? AND ol_d_id=o_d_id GROUP BY o_d_id) t1 WHERE sm1<>cn",
        2,
        "count(*) in warehouse {warehouse}, but got {value:f}",
    ),
    _Condition(
        "3.3.2.5",
        "SELECT count(*)  FROM orders LEFT JOIN new_order ON (no_w_id=o_w_id AND "
        "o_d_id=no_d_id AND o_id=no_o_id) where o_w_id = ? and ((o_carrier_id IS NULL and "
        "no_o_id IS  NULL) OR (o_carrier_id IS NOT NULL and no_o_id IS NOT NULL  )) ",
        1,
        "count(*) in warehouse {warehouse}, but got {value:f}",
    ),
    _Condition(
        "3.3.2.6",
        """
SELECT COUNT(*) FROM
(SELECT o_ol_cnt, order_line_count FROM orders
	LEFT JOIN (SELECT ol_w_id, ol_d_id, ol_o_id, count(*) order_line_count FROM order_line GROUP BY ol_w_id, ol_d_id, ol_o_id ORDER by ol_w_id, ol_d_id, ol_o_id) AS order_line
	ON orders.o_w_id = order_line.ol_w_id AND orders.o_d_id = order_line.ol_d_id AND orders.o_id = order_line.ol_o_id
	WHERE orders.o_w_id = ?) AS T
WHERE T.o_ol_cnt != T.order_line_count""",
        1,
        "all of O_OL_CNT - count(order_line) for the corresponding order defined by "
        "(O_W_ID, O_D_ID, O_ID) = (OL_W_ID, OL_D_ID, OL_O_ID) should be 0 "
        "in warehouse {warehouse}",
    ),
    _Condition(
        "3.3.2.7",
        "SELECT count(*) FROM orders, order_line WHERE o_id=ol_o_id AND o_d_id=ol_d_id AND "
        "ol_w_id=o_w_id AND o_w_id = ? AND ((ol_delivery_d IS NULL and o_carrier_id IS NOT "
        "NULL) or (o_carrier_id IS NULL and ol_delivery_d IS NOT NULL ))",
        1,
        "count(*) in warehouse {warehouse}, but got {value:f}",
    ),
    _Condition(
        "3.3.2.8",
        "SELECT count(*) cn FROM (SELECT w_id,w_ytd,SUM(h_amount) sm FROM history,warehouse "
        "WHERE h_w_id=w_id and w_id = ? GROUP BY w_id) t1 WHERE w_ytd<>sm",
        1,
        "count(*) in warehouse {warehouse}, but got {value:f}",
    ),
    _Condition(
        "3.3.2.9",
        "SELECT COUNT(*) FROM (select d_id,d_w_id,sum(d_ytd) s1 from district group by "
        "d_id,d_w_id) d,(select h_d_id,h_w_id,sum(h_amount) s2 from history WHERE  h_w_id = ? "
        "group by h_d_id, h_w_id) h WHERE h_d_id=d_id AND d_w_id=h_w_id and d_w_id= ? "
        "and s1<>s2",
        2,
        "count(*) in warehouse {warehouse}, but got {value:f}",
    ),
    _Condition(
        "3.3.2.10",
        """SELECT count(*) 
	FROM (  SELECT  c.c_id, c.c_d_id, c.c_w_id, c.c_balance c1, 
				   (SELECT sum(ol_amount) FROM orders STRAIGHT_JOIN order_line 
					 WHERE OL_W_ID=O_W_ID 
					   AND OL_D_ID = O_D_ID 
					   AND OL_O_ID = O_ID 
					   AND OL_DELIVERY_D IS NOT NULL 
					   AND O_W_ID=? 
					   AND O_D_ID=c.C_D_ID 
					   AND O_C_ID=c.C_ID) sm, (SELECT  sum(h_amount)  from  history 
												WHERE H_C_W_ID=? 
												  AND H_C_D_ID=c.C_D_ID 
												  AND H_C_ID=c.C_ID) smh 
			 FROM customer c 
			WHERE  c.c_w_id = ? ) t
   WHERE c1<>sm-smh""",
        3,
        "count(*) in warehouse {warehouse}, but got {value:f}",
    ),
    _Condition(
        "3.3.2.11",
        """
SELECT count(*) FROM
	(SELECT * FROM
		(SELECT o_w_id, o_d_id, count(*) order_count FROM orders GROUP BY o_w_id, o_d_id) orders
        JOIN (SELECT no_w_id, no_d_id, count(*) new_order_count FROM new_order GROUP BY no_w_id, no_d_id) new_order
        ON orders.o_w_id = new_order.no_w_id AND orders.o_d_id = new_order.no_d_id
	) order_new_order
JOIN (SELECT c_w_id, c_d_id, count(*) customer_count FROM customer GROUP BY c_w_id, c_d_id) customer
ON order_new_order.no_w_id = customer.c_w_id AND order_new_order.no_d_id = customer.c_d_id
WHERE c_w_id = ? AND order_count - 2100 != new_order_count""",
        1,
        "all of (count(*) from ORDER) - (count(*) from NEW-ORDER) for each district defined "
        "by (O_W_ID, O_D_ID) = (NO_W_ID, NO_D_ID) = (C_W_ID, C_D_ID) should be 2100 "
        "in warehouse {warehouse}",
        check_all_only=True,
    ),
    _Condition(
        "3.3.2.12",
        """SELECT count(*) FROM (SELECT  c.c_id, c.c_d_id, c.c_balance c1, c_ytd_payment, 
		(SELECT sum(ol_amount) FROM orders STRAIGHT_JOIN order_line 
		WHERE OL_W_ID=O_W_ID AND OL_D_ID = O_D_ID AND OL_O_ID = O_ID AND OL_DELIVERY_D IS NOT NULL AND 
		O_W_ID=? AND O_D_ID=c.C_D_ID AND O_C_ID=c.C_ID) sm FROM customer c WHERE  c.c_w_id = ?) t1 
		WHERE c1+c_ytd_payment <> sm""",
        2,
        "count(*) in warehouse {warehouse}, but got {value:f}",
    ),
)


def _pyformat(query: str) -> str:
    return query.replace("%", "%%").replace("?", "%s")


def _evaluate(conn: Any, condition: _Condition, warehouse: int) -> None:
    args = (warehouse,) * condition.arg_count
    try:
        with conn.cursor() as cursor:
            cursor.execute(_pyformat(condition.query), args)
            rows = list(cursor.fetchall())
    except Exception as exc:
        raise CheckError(f"exec {condition.query} failed {exc}") from exc

    for row in rows:
        if row[0] is None:
            raise CheckError("converting NULL to float64 is unsupported")
        value = float(row[0])
        if value != 0:
            raise CheckError(condition.message.format(warehouse=warehouse, value=value))


def check_warehouse(state: Any, warehouse: int, check_all: bool) -> None:
    """Evaluate the consistency conditions for one warehouse.

    Condition 3.3.2.11 only holds right after loading, so it is evaluated
    only when ``check_all`` is set.
    """
    for condition in _CONDITIONS:
        if condition.check_all_only and not check_all:
            continue
        print(f"begin to check warehouse {warehouse} at condition {condition.name}")
        try:
            _evaluate(state.conn, condition, warehouse)
        except CheckError as exc:
            raise CheckError(
                f"check warehouse {warehouse} at condition {condition.name} failed {exc}"
            ) from exc


def run_checks(state: Any, config: Config, thread_id: int, check_all: bool) -> None:
    """Check this thread's round-robin share of the warehouses."""
    for i in range(thread_id % config.threads, config.warehouses, config.threads):
        check_warehouse(state, i % config.warehouses + 1, check_all)