"""A command line ledger for transactions and net worth kept in CSV files."""

__version__ = "7.0.4"