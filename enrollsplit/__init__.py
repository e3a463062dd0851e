"""Split a master enrollment file into one deduplicated CSV per insurance company."""

__version__ = "0.1.0"
