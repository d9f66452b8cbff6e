"""
Utility functions for the GPIO resource-action engine
"""

from .coerce import to_number, clamp_unit, positive_int
from .matching import deep_match

__all__ = [
    'to_number',
    'clamp_unit',
    'positive_int',
    'deep_match',
]
