import urllib.request

from tpcbench.tpcc import metrics
from tpcbench.tpcc.metrics import GaugeVec


def test_set_get():
    g = GaugeVec("tpc", "tpcc", "demo", "Demo")
    assert g.get("X") == 0.0
    g.set("X", 2.5)
    assert g.get("X") == 2.5


def test_render_format():
    g = GaugeVec("tpc", "tpcc", "demo", "Demo")
    g.set("NEW_ORDER", 1.5)
    text = g.render()
    assert "# TYPE tpc_tpcc_demo gauge" in text
    assert 'tpc_tpcc_demo{op="NEW_ORDER"} 1.5' in text


def test_render_metrics_includes_all():
    text = metrics.render_metrics()
    for g in metrics.REGISTRY:
        assert f"# HELP {g.full_name}" in text


def test_serve_metrics():
    metrics.p50_vec.set("PAYMENT", 3.0)
    server = metrics.serve_metrics("127.0.0.1:0")
    try:
        port = server.server_address[1]
        with urllib.request.urlopen(f"http://127.0.0.1:{port}/metrics") as resp:
            body = resp.read().decode()
        assert 'tpc_tpcc_p50{op="PAYMENT"} 3.0' in body
    finally:
        server.shutdown()