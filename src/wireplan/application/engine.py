"""Application layer - Analysis orchestration."""

from typing import Dict, List, Optional

from wireplan.application.constructor_synthesizer import ConstructorSynthesizer
from wireplan.application.cycle_detector import DependencyCycleDetector
from wireplan.application.diagnostics import DiagnosticsCollector
from wireplan.application.implementation_index import ImplementationIndex, build_dependency_graph
from wireplan.application.lifetime_validator import LifetimeValidator
from wireplan.application.merge_resolver import InheritanceMergeResolver
from wireplan.application.predicate_compiler import PredicateCompiler
from wireplan.application.registration_planner import RegistrationPlanner
from wireplan.config import AnalysisSettings, get_settings
from wireplan.domain import (
    AnalysisResult,
    Component,
    ConstructorPlan,
    Finding,
    FindingCode,
    IDiagnosticsSink,
    ITypeCatalog,
    MergeResult,
)
from wireplan.domain.predicates import PredicateNode
from wireplan.logging import get_logger

logger = get_logger(__name__)


class AnalysisEngine:
    """Runs one full analysis pass over a type catalog.

    Stages run in a fixed order, each over components sorted by identity:
    merge, constructor synthesis, lifetime validation, cycle detection,
    condition compilation and registration planning. A fatal finding blocks
    only its own component. Every call to :meth:`analyze` starts from an empty
    memo, so repeated passes over an unchanged catalog produce equal results.

    Attributes:
        _settings: Analysis settings.
        _sink: Optional sink receiving every finding as it is reported.
        _synthesizer: Constructor synthesis stage.
        _cycle_detector: Cycle detection stage.
        _compiler: Condition compilation stage.
        _planner: Registration planning stage.
    """

    def __init__(self, settings: Optional[AnalysisSettings] = None, sink: Optional[IDiagnosticsSink] = None) -> None:
        """Initialize the engine.

        Args:
            settings: Analysis settings. Uses cached settings if not provided.
            sink: Optional downstream diagnostics sink.
        """
        self._settings = settings or get_settings()
        self._sink = sink
        self._synthesizer = ConstructorSynthesizer()
        self._cycle_detector = DependencyCycleDetector()
        self._compiler = PredicateCompiler()
        self._planner = RegistrationPlanner()

    def analyze(self, catalog: ITypeCatalog) -> AnalysisResult:
        """Analyze every component of ``catalog``.

        Args:
            catalog: Source of component facts.

        Returns:
            Merge results, constructor plans, predicates, the registration plan
            and all findings.

        Example:
            >>> engine = AnalysisEngine(AnalysisSettings())
            >>> result = engine.analyze(catalog)
            >>> result.constructor_plans["app.Leaf"].forwarded_parameter_names
            ('_a', '_b', '_c')
        """
        collector = DiagnosticsCollector(self._settings, self._sink)
        components = self._load(catalog)
        logger.info("analysis.started", components=len(components))

        resolver = InheritanceMergeResolver(catalog, self._settings)
        merges: Dict[str, MergeResult] = {}
        for component in components:
            result = resolver.merge(component)
            merges[component.identity] = result
            if result.error is not None:
                collector.report(result.error)
            collector.extend(result.findings)

        plans: Dict[str, ConstructorPlan] = {}
        for component in components:
            result = merges[component.identity]
            if result.succeeded:
                plans[component.identity] = self._synthesizer.synthesize(component, result)

        index = ImplementationIndex(components, self._settings.collection_types)
        if self._settings.lifetime_validation_enabled:
            validator = LifetimeValidator(index)
            for component in components:
                collector.extend(validator.validate(component, merges[component.identity]))
        else:
            logger.debug("analysis.lifetime_validation_skipped")

        graph = build_dependency_graph(components, merges, index)
        for cycle in self._cycle_detector.find_cycles(graph):
            collector.report(Finding.of(FindingCode.DEPENDENCY_CYCLE, cycle[0], path=cycle))

        predicates: Dict[str, PredicateNode] = {}
        for component in components:
            compiled = self._compiler.compile(component.identity, component.conditions)
            collector.extend(compiled.findings)
            if compiled.predicate is not None:
                predicates[component.identity] = compiled.predicate

        planned = self._planner.plan_all(components, predicates, collector.blocked)
        collector.extend(planned.findings)

        result = AnalysisResult(
            merges=merges,
            constructor_plans=plans,
            predicates=predicates,
            registrations=planned.entries,
            findings=collector.findings,
            blocked=collector.blocked,
        )
        logger.info(
            "analysis.completed",
            components=len(components),
            registrations=len(result.registrations),
            findings=len(result.findings),
            blocked=len(result.blocked),
        )
        return result

    def _load(self, catalog: ITypeCatalog) -> List[Component]:
        components: List[Component] = []
        for identity in sorted(catalog.identities()):
            component = catalog.get(identity)
            if component is not None:
                components.append(component)
        return components
