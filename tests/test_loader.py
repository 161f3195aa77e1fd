import io

from tpcbench.loader import MAX_BATCH_COUNT, CSVBatchLoader, SQLBatchLoader


class FakeCursor:
    def __init__(self, log):
        self.log = log

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def execute(self, sql):
        self.log.append(sql)


class FakeConn:
    def __init__(self):
        self.log = []

    def cursor(self):
        return FakeCursor(self.log)


HINT = "INSERT INTO t (a) VALUES "


def test_flush_builds_statement():
    conn = FakeConn()
    loader = SQLBatchLoader(conn, HINT)
    loader.insert_value(["(1)"])
    loader.insert_value(["(2)"])
    assert conn.log == []
    loader.flush()
    assert conn.log == [HINT + " (1), (2)"]
    loader.flush()
    assert len(conn.log) == 1


def test_auto_flush_at_batch_size():
    conn = FakeConn()
    loader = SQLBatchLoader(conn, HINT)
    for i in range(MAX_BATCH_COUNT + 1):
        loader.insert_value([f"({i})"])
    assert len(conn.log) == 1
    assert conn.log[0].count("(") == MAX_BATCH_COUNT + 1  # hint has one "("
    loader.flush()
    assert conn.log[1] == HINT + f" ({MAX_BATCH_COUNT})"


def test_csv_loader():
    f = io.StringIO()
    loader = CSVBatchLoader(f)
    loader.insert_value(["1", "a,b", "x"])
    loader.flush()
    assert f.getvalue() == '1,"a,b",x\n'
    loader.close()
    assert f.closed