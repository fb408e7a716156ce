"""
Infrastructure layer - Adapters and tooling.

This layer contains the reference catalog adapter and testing helpers.
It depends on both Application and Domain layers.
"""

from . import testing
from .catalog import InMemoryTypeCatalog

__all__ = [
    "InMemoryTypeCatalog",
    "testing",
]
