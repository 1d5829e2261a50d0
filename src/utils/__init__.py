"""Utility functions for Square Dash."""
from .seeding import set_seed
from .logger import Logger, MetricsTracker
from .config import load_config, DEFAULT_CONFIG

__all__ = [
    "set_seed",
    "Logger",
    "MetricsTracker",
    "load_config",
    "DEFAULT_CONFIG",
]
