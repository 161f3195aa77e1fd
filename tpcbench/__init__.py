"""Building blocks for TPC-C benchmarking: measurement, batch loading and a threaded workload driver."""

__version__ = "0.1.0"