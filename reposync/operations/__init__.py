"""Clone and pull operations and their output classification."""

from .base import Operation
from .clone import CloneOperation
from .pull import PullOperation

__all__ = [
    'Operation',
    'CloneOperation',
    'PullOperation',
]
