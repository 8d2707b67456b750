"""Pages, buffer pool, write-ahead log and transaction bookkeeping for a small database."""

__version__ = "0.1.0"