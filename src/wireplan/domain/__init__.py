"""
Domain layer - Core analysis vocabulary.

This layer contains the value objects, enumerations and interfaces that the
analysis stages exchange. It has no dependencies on other layers.
"""

from .enums import (
    ConfigBindingMode,
    DependencyOrigin,
    ExposureMode,
    FindingCode,
    FindingKind,
    InstanceSharing,
    Lifetime,
    NamingConvention,
    Severity,
)
from .exceptions import CatalogError, TypeRefSyntaxError, WireplanException
from .interfaces import IDiagnosticsSink, ITypeCatalog
from .models import (
    AnalysisResult,
    Component,
    ConditionDeclaration,
    ConfigurationBinding,
    ConfigurationSource,
    ConstructorParameter,
    ConstructorPlan,
    DependencySpec,
    Finding,
    MergeResult,
    NamingOptions,
    RegistrationEntry,
    ResolvedDependency,
    TypeRef,
)
from .predicates import And, ConfigEquals, ConfigNotEquals, EnvEquals, Not, Or, PredicateNode

__all__ = [
    # Enums
    "ConfigBindingMode",
    "DependencyOrigin",
    "ExposureMode",
    "FindingCode",
    "FindingKind",
    "InstanceSharing",
    "Lifetime",
    "NamingConvention",
    "Severity",
    # Exceptions
    "WireplanException",
    "CatalogError",
    "TypeRefSyntaxError",
    # Interfaces
    "ITypeCatalog",
    "IDiagnosticsSink",
    # Models
    "TypeRef",
    "NamingOptions",
    "ConfigurationSource",
    "DependencySpec",
    "ResolvedDependency",
    "ConfigurationBinding",
    "ConditionDeclaration",
    "Component",
    "Finding",
    "MergeResult",
    "ConstructorParameter",
    "ConstructorPlan",
    "RegistrationEntry",
    "AnalysisResult",
    # Predicates
    "PredicateNode",
    "And",
    "Or",
    "Not",
    "EnvEquals",
    "ConfigEquals",
    "ConfigNotEquals",
]
