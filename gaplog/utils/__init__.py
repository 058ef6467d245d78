"""Utility functions."""

from .config import load_config, get_default_config
from .datetime_utils import get_days_between, iter_days, parse_date, parse_datetime
from .records import DataSet, load_dataset

__all__ = [
    'load_config',
    'get_default_config',
    'get_days_between',
    'iter_days',
    'parse_date',
    'parse_datetime',
    'DataSet',
    'load_dataset',
]
