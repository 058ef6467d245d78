"""GapLog: task duration estimation and day-by-day allocation."""

__version__ = "0.1.0"
