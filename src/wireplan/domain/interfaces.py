from abc import ABC, abstractmethod
from typing import Optional, Tuple

from wireplan.domain.models import Component, Finding


class ITypeCatalog(ABC):
    """Abstract interface for the source of component facts.

    Implementations adapt a concrete declaration syntax into neutral
    ``Component`` models. Identities must be stable within a pass.
    """

    @abstractmethod
    def identities(self) -> Tuple[str, ...]:
        """Return every component identity in the catalog, sorted."""

    @abstractmethod
    def get(self, identity: str) -> Optional[Component]:
        """Return the component with ``identity``, or None if the catalog does not know it.

        Args:
            identity: The component identity to look up.
        """


class IDiagnosticsSink(ABC):
    """Abstract interface for the channel that receives findings."""

    @abstractmethod
    def report(self, finding: Finding) -> None:
        """Accept a finding. Must not raise for data-shape issues.

        Args:
            finding: The finding to record.
        """
