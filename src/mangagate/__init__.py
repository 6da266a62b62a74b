"""MangaDex aggregator: reshaped JSON feeds and a thumbnail proxy."""

__version__ = "0.1.0"
