"""
Utility functions for the RGB relay
"""

from .logger import (
    get_logger,
    configure_logger,
)

__all__ = [
    'get_logger',
    'configure_logger',
]
