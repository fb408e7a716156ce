"""Application layer - Implementation lookup and dependency graph construction."""

from typing import Collection, Dict, Iterable, List, Mapping, Tuple

from wireplan.domain import Component, MergeResult, TypeRef


class ImplementationIndex:
    """Indexes registrable components by every type they can be resolved as.

    A component implements its own type and each implemented contract. A
    generic component's open types (``Repository[T]``, ``IRepository[T]``)
    match any closed reference with the same name and arity. A collection
    wrapper resolves to every implementation of its element type.

    Attributes:
        _exact: Closed type to implementations.
        _open: (type name, arity) to open generic implementations.
        _collection_types: Simple names of collection wrappers.
    """

    def __init__(self, components: Iterable[Component], collection_types: Collection[str] = ()) -> None:
        self._exact: Dict[TypeRef, List[Component]] = {}
        self._open: Dict[Tuple[str, int], List[Component]] = {}
        self._collection_types = frozenset(collection_types)

        for component in sorted(components, key=lambda item: item.identity):
            if not component.is_registrable:
                continue
            parameters = frozenset(component.type_parameters)
            for service in (component.type_ref,) + component.contracts:
                if service.args and any(arg.mentioned_names() & parameters for arg in service.args):
                    self._open.setdefault((service.name, len(service.args)), []).append(component)
                else:
                    self._exact.setdefault(service, []).append(component)

    def resolve(self, type_ref: TypeRef) -> Tuple[Component, ...]:
        """Return the implementations ``type_ref`` resolves to, sorted by identity.

        Args:
            type_ref: A dependency type.
        """
        while type_ref.simple_name in self._collection_types and len(type_ref.args) == 1:
            type_ref = type_ref.args[0]

        found: Dict[str, Component] = {}
        for component in self._exact.get(type_ref, ()):
            found.setdefault(component.identity, component)
        if type_ref.args:
            for component in self._open.get((type_ref.name, len(type_ref.args)), ()):
                found.setdefault(component.identity, component)
        return tuple(found[identity] for identity in sorted(found))


def build_dependency_graph(
    components: Iterable[Component],
    merges: Mapping[str, MergeResult],
    index: ImplementationIndex,
) -> Dict[str, Tuple[str, ...]]:
    """Build the edge set between registrable components.

    An edge X -> Y exists when a non-external entry of X's flattened list
    resolves to implementation Y. Components whose merge failed have no
    outgoing edges.

    Returns:
        Adjacency lists keyed by identity; both keys and targets are sorted.
    """
    graph: Dict[str, Tuple[str, ...]] = {}
    for component in sorted(components, key=lambda item: item.identity):
        if not component.is_registrable:
            continue
        merge_result = merges.get(component.identity)
        targets = set()
        if merge_result is not None and merge_result.succeeded:
            for dep in merge_result.flattened:
                if dep.external:
                    continue
                targets.update(implementation.identity for implementation in index.resolve(dep.type_ref))
        graph[component.identity] = tuple(sorted(targets))
    return graph
