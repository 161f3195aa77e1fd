"""TPC-C random data, initial data load, transactions, consistency checks and metrics."""