"""
Testing utilities module.

Provides builders and sinks for testing code that uses wireplan.
"""

from .utilities import CatalogBuilder, ComponentBuilder, RecordingSink

__all__ = [
    "CatalogBuilder",
    "ComponentBuilder",
    "RecordingSink",
]
