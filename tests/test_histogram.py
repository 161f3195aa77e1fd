import random

from tpcbench.histogram import Histogram


def test_hist():
    h = Histogram(0.001, 20 * 60, 1)
    for _ in range(10000):
        h.measure(random.randrange(15020) / 1000)
    h.measure(9 * 60)
    h.measure(8 * 60)
    assert "Count: 10002" in h.summary()
    info = h.info()
    assert info.max >= 9 * 60 * 1000
    assert info.p50 <= info.p90 <= info.p99 <= info.max


def test_empty():
    h = Histogram(0.001, 16, 1)
    assert h.empty()
    h.measure(0.01)
    assert not h.empty()


def test_sum_uses_raw_values():
    h = Histogram(0.001, 1, 3)
    h.measure(5)
    h.measure(0.002)
    info = h.info()
    assert info.count == 2
    assert abs(info.sum - 5002) < 1e-6
    assert info.max <= 1000 * 1.01


def test_precision():
    h = Histogram(0.0001, 10, 3)
    for _ in range(100):
        h.measure(0.005)
    info = h.info()
    assert abs(info.p50 - 5) / 5 < 0.01
    assert abs(info.avg - 5) / 5 < 0.01