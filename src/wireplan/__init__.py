"""
wireplan: Static dependency-injection analysis with inheritance-aware constructor
synthesis and registration planning.

Public API exports for the wireplan package.
"""

# Application exports
from wireplan.application.engine import AnalysisEngine

# Configuration exports
from wireplan.config import AnalysisSettings, get_settings
from wireplan.logging import configure_logging, get_logger

# Domain exports
from wireplan.domain.enums import (
    ExposureMode,
    FindingCode,
    FindingKind,
    InstanceSharing,
    Lifetime,
    Severity,
)
from wireplan.domain.exceptions import CatalogError, TypeRefSyntaxError, WireplanException
from wireplan.domain.models import AnalysisResult, Component, Finding, RegistrationEntry, TypeRef

# Infrastructure exports
from wireplan.infrastructure.catalog import InMemoryTypeCatalog

__version__ = "0.1.0"

__all__ = [
    # Engine
    "AnalysisEngine",
    "AnalysisResult",
    # Configuration
    "AnalysisSettings",
    "get_settings",
    # Logging
    "configure_logging",
    "get_logger",
    # Models
    "Component",
    "Finding",
    "RegistrationEntry",
    "TypeRef",
    # Catalog
    "InMemoryTypeCatalog",
    # Enums
    "ExposureMode",
    "FindingCode",
    "FindingKind",
    "InstanceSharing",
    "Lifetime",
    "Severity",
    # Exceptions
    "WireplanException",
    "CatalogError",
    "TypeRefSyntaxError",
]
