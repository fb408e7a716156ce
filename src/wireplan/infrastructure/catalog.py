from typing import Dict, Iterable, Iterator, Optional, Tuple

from wireplan.domain import CatalogError, Component, ITypeCatalog


class InMemoryTypeCatalog(ITypeCatalog):
    """Type catalog backed by a dictionary of already-normalized components.

    Front-end adapters that parse a concrete declaration syntax can build the
    ``Component`` models themselves and hand them to this catalog.

    Attributes:
        _components: Components keyed by identity.

    Example:
        >>> catalog = InMemoryTypeCatalog([
        ...     Component(identity="app.Clock", lifetime=Lifetime.SINGLETON),
        ... ])
        >>> catalog.identities()
        ('app.Clock',)
    """

    def __init__(self, components: Iterable[Component] = ()) -> None:
        """Initialize the catalog.

        Args:
            components: Components to serve.

        Raises:
            CatalogError: If two components share an identity.
        """
        self._components: Dict[str, Component] = {}
        for component in components:
            if component.identity in self._components:
                raise CatalogError(component.identity, "duplicate component identity")
            self._components[component.identity] = component

    def identities(self) -> Tuple[str, ...]:
        return tuple(sorted(self._components))

    def get(self, identity: str) -> Optional[Component]:
        return self._components.get(identity)

    def __len__(self) -> int:
        return len(self._components)

    def __iter__(self) -> Iterator[Component]:
        return (self._components[identity] for identity in self.identities())

    def __contains__(self, identity: object) -> bool:
        return identity in self._components
