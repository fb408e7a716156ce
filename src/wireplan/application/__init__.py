"""
Application layer - Analysis stages and orchestration.

This layer contains the analysis stages and the engine that sequences them.
It depends only on the Domain layer and the package-level settings and logging.
"""

from .configuration_binding import binding_mode, infer_section_name
from .constructor_synthesizer import ConstructorSynthesizer
from .cycle_detector import DependencyCycleDetector
from .diagnostics import DiagnosticsCollector
from .engine import AnalysisEngine
from .implementation_index import ImplementationIndex, build_dependency_graph
from .lifetime_validator import LifetimeValidator
from .merge_resolver import InheritanceMergeResolver
from .naming import derive_parameter_name
from .predicate_compiler import CompilationResult, PredicateCompiler
from .registration_planner import PlanResult, RegistrationPlanner

__all__ = [
    # Orchestration
    "AnalysisEngine",
    "DiagnosticsCollector",
    # Stages
    "InheritanceMergeResolver",
    "ConstructorSynthesizer",
    "LifetimeValidator",
    "DependencyCycleDetector",
    "PredicateCompiler",
    "RegistrationPlanner",
    # Results
    "CompilationResult",
    "PlanResult",
    # Helpers
    "ImplementationIndex",
    "build_dependency_graph",
    "derive_parameter_name",
    "binding_mode",
    "infer_section_name",
]
