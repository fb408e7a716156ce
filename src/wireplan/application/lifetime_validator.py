"""Application layer - Lifetime compatibility validation."""

from typing import Dict, Tuple

from wireplan.application.implementation_index import ImplementationIndex
from wireplan.domain import Component, Finding, FindingCode, Lifetime, MergeResult
from wireplan.logging import get_logger

logger = get_logger(__name__)


class LifetimeValidator:
    """Checks that singletons never capture shorter-lived implementations.

    Durability is ordered ``Transient < Scoped < Singleton``; host-managed and
    unresolved lifetimes are exempt on either side of an edge. A mismatch on a
    dependency the singleton declares itself is fatal. The same mismatch
    reached only through an inherited declaration is advisory.

    Attributes:
        _index: Resolves dependency types to implementations.
    """

    def __init__(self, index: ImplementationIndex) -> None:
        """Initialize the validator.

        Args:
            index: Implementation lookup shared with cycle detection.
        """
        self._index = index

    def validate(self, component: Component, merge_result: MergeResult) -> Tuple[Finding, ...]:
        """Validate every dependency edge leaving ``component``.

        Args:
            component: The component whose edges are checked.
            merge_result: Its successful merge result.

        Returns:
            At most one ``LifetimeViolation`` per (component, implementation) pair,
            in flattened-list order of first occurrence.

        Example:
            >>> findings = validator.validate(cache, resolver.merge(cache))
            >>> [(f.component, f.subject, f.fatal) for f in findings]
            [('app.Cache', 'app.RequestContext', True)]
        """
        if component.lifetime != Lifetime.SINGLETON or not component.is_registrable:
            return ()
        if not merge_result.succeeded:
            return ()

        declared_here = {spec.type_ref for spec in component.dependencies}
        # implementation identity -> whether some edge to it is direct
        violations: Dict[str, bool] = {}
        for dep in merge_result.flattened:
            if dep.external:
                continue
            direct = dep.type_ref in declared_here
            for implementation in self._index.resolve(dep.type_ref):
                if not component.lifetime.outlives(implementation.lifetime):
                    continue
                violations[implementation.identity] = violations.get(implementation.identity, False) or direct

        findings = tuple(
            Finding.of(
                FindingCode.SINGLETON_CAPTURES_SHORTER_LIVED if direct else FindingCode.INHERITED_LIFETIME_MISMATCH,
                component.identity,
                subject=implementation,
                fatal=direct,
            )
            for implementation, direct in violations.items()
        )
        if findings:
            logger.debug("lifetime.violations", component=component.identity, count=len(findings))
        return findings
