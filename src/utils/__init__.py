"""Utility modules for the configuration recovery pipeline."""

from .run_log import RunLogger, get_time

__all__ = [
    'RunLogger',
    'get_time',
]
