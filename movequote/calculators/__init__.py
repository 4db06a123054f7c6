"""
Deterministic quote calculators.

Pure Python math. No I/O.
Each stage takes the previous stage's values plus the tables in
movequote.tables and returns a frozen result record.
"""
