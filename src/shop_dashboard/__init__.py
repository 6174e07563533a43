"""Shop Dashboard - store sales, reporting and purchase list toolkit."""

__version__ = "0.1.0"
