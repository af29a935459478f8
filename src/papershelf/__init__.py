"""papershelf: a personal bibliography kept as one JSON file per paper."""

__version__ = "0.1.0"
