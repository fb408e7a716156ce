"""Application layer - Diagnostics collection and severity policy."""

from typing import Iterable, List, Optional, Set, Tuple

from wireplan.config import AnalysisSettings, get_settings
from wireplan.domain import Finding, IDiagnosticsSink
from wireplan.logging import get_logger

logger = get_logger(__name__)


class DiagnosticsCollector(IDiagnosticsSink):
    """Collects findings in reporting order and tracks blocked components.

    Non-fatal findings have their severity rewritten from
    ``AnalysisSettings.severity_overrides``; fatal findings always stay errors.
    Every collected finding is also forwarded to an optional downstream sink.

    Attributes:
        _settings: Severity overrides.
        _downstream: Optional sink receiving each finding after policy is applied.
        _findings: Collected findings.
        _blocked: Identities with at least one fatal finding.
    """

    def __init__(
        self,
        settings: Optional[AnalysisSettings] = None,
        downstream: Optional[IDiagnosticsSink] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._downstream = downstream
        self._findings: List[Finding] = []
        self._blocked: Set[str] = set()

    def report(self, finding: Finding) -> None:
        """Record a finding.

        Args:
            finding: The finding to record.
        """
        if not finding.fatal:
            severity = self._settings.severity_overrides.get(finding.kind)
            if severity is not None and severity != finding.severity:
                finding = finding.model_copy(update={"severity": severity})
        else:
            self._blocked.add(finding.component)

        logger.debug(
            "diagnostics.finding",
            component=finding.component,
            code=str(finding.code),
            severity=str(finding.severity),
            fatal=finding.fatal,
        )
        self._findings.append(finding)
        if self._downstream is not None:
            self._downstream.report(finding)

    def extend(self, findings: Iterable[Finding]) -> None:
        """Record several findings in order."""
        for finding in findings:
            self.report(finding)

    def is_blocked(self, identity: str) -> bool:
        return identity in self._blocked

    @property
    def findings(self) -> Tuple[Finding, ...]:
        return tuple(self._findings)

    @property
    def blocked(self) -> frozenset:
        return frozenset(self._blocked)
