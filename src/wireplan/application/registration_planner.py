"""Application layer - Registration planning."""

from typing import Collection, Iterable, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from wireplan.domain import (
    Component,
    ExposureMode,
    Finding,
    FindingCode,
    InstanceSharing,
    RegistrationEntry,
    TypeRef,
)
from wireplan.domain.predicates import PredicateNode
from wireplan.logging import get_logger

logger = get_logger(__name__)


class PlanResult(BaseModel):
    """Registration entries and planning findings for one or more components.

    Attributes:
        entries: Registration entries, concrete entry first per component.
        findings: Planning findings (contract list problems, unnecessary exclusions).
    """

    model_config = ConfigDict(frozen=True)

    entries: Tuple[RegistrationEntry, ...] = Field(default=())
    findings: Tuple[Finding, ...] = Field(default=())


class RegistrationPlanner:
    """Expands registrable components into registration entries.

    Each component gets one concrete entry registered under its own type, plus
    one entry per exposed contract. Under ``InstanceSharing.SHARED`` the
    contract entries forward to the concrete entry so that all of them resolve
    to the same instance within a scope; under ``SEPARATE`` each is constructed
    independently.
    """

    def plan(self, component: Component, predicate: Optional[PredicateNode] = None) -> PlanResult:
        """Plan the registrations of a single component.

        Args:
            component: The component to register.
            predicate: Compiled registration condition, attached to every entry.

        Returns:
            Entries and findings. No entries are produced for components that are
            not registrable or whose contract list is invalid.

        Example:
            >>> result = RegistrationPlanner().plan(clock)
            >>> [(str(entry.service), entry.forwards_to) for entry in result.entries]
            [('app.SystemClock', None), ('app.IClock', 'app.SystemClock')]
        """
        if not component.is_registrable:
            return PlanResult()

        contracts, findings = self._exposed_contracts(component)
        if any(finding.fatal for finding in findings):
            return PlanResult(findings=tuple(findings))

        forwards_to = component.identity if component.sharing == InstanceSharing.SHARED else None
        entries = [self._entry(component, component.type_ref, None, predicate)]
        entries.extend(self._entry(component, contract, forwards_to, predicate) for contract in contracts)

        logger.debug(
            "plan.component_planned",
            component=component.identity,
            sharing=str(component.sharing),
            entries=len(entries),
        )
        return PlanResult(entries=tuple(entries), findings=tuple(findings))

    def plan_all(
        self,
        components: Iterable[Component],
        predicates: Optional[Mapping[str, PredicateNode]] = None,
        blocked: Collection[str] = (),
    ) -> PlanResult:
        """Plan every component in identity order, skipping blocked identities.

        Args:
            components: Components to plan.
            predicates: Compiled predicates keyed by identity.
            blocked: Identities carrying a fatal finding from an earlier stage.

        Returns:
            The concatenated entries and findings.
        """
        predicates = predicates or {}
        entries: List[RegistrationEntry] = []
        findings: List[Finding] = []
        for component in sorted(components, key=lambda item: item.identity):
            if component.identity in blocked:
                continue
            result = self.plan(component, predicates.get(component.identity))
            entries.extend(result.entries)
            findings.extend(result.findings)
        return PlanResult(entries=tuple(entries), findings=tuple(findings))

    def _exposed_contracts(self, component: Component) -> Tuple[List[TypeRef], List[Finding]]:
        findings: List[Finding] = []
        implemented = set(component.contracts)

        if component.exposure == ExposureMode.SELF_ONLY:
            exposed: List[TypeRef] = []
        elif component.exposure == ExposureMode.ALL_CONTRACTS:
            exposed = list(dict.fromkeys(component.contracts))
        else:
            exposed = []
            for contract in component.explicit_contracts:
                if contract in exposed:
                    findings.append(Finding.of(FindingCode.DUPLICATE_CONTRACT, component.identity, subject=contract))
                    continue
                if contract not in implemented:
                    findings.append(
                        Finding.of(FindingCode.UNIMPLEMENTED_CONTRACT, component.identity, subject=contract, fatal=True)
                    )
                    continue
                exposed.append(contract)

        # An exclusion only takes effect on a contract the exposure mode would expose.
        excluded = set()
        for contract in component.excluded_contracts:
            if contract not in exposed:
                findings.append(Finding.of(FindingCode.UNNECESSARY_EXCLUSION, component.identity, subject=contract))
                continue
            excluded.add(contract)

        return [contract for contract in exposed if contract not in excluded], findings

    def _entry(
        self,
        component: Component,
        service: TypeRef,
        forwards_to: Optional[str],
        predicate: Optional[PredicateNode],
    ) -> RegistrationEntry:
        return RegistrationEntry(
            component=component.identity,
            service=service,
            lifetime=component.lifetime,
            sharing=component.sharing,
            forwards_to=forwards_to,
            predicate=predicate,
        )
