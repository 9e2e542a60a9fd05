"""
Club performance analytics.

Normalizes raw club, division and district performance exports into
canonical snapshots and computes club health, recognition, aggregation and
target analytics over snapshot series.
"""

__version__ = "0.1.0"
