"""Application layer - Dependency cycle detection."""

from typing import Dict, Iterator, List, Mapping, Sequence, Set, Tuple

_UNVISITED = 0
_ON_STACK = 1
_DONE = 2


class DependencyCycleDetector:
    """Detects dependency cycles in a component graph.

    Runs an iterative depth-first search with an explicit stack, so deep
    graphs cannot exhaust the interpreter's recursion limit. When an edge
    reaches a node still on the stack, the stack slice from that node is a cycle.

    Attributes:
        _stack: Identities on the current DFS path.
    """

    def __init__(self) -> None:
        """Initialize the detector with an empty path."""
        self._stack: List[str] = []

    def push(self, identity: str) -> None:
        """Add an identity to the current path.

        Args:
            identity: The component being entered.
        """
        self._stack.append(identity)

    def pop(self) -> None:
        """Remove the most recently entered identity from the path."""
        if self._stack:
            self._stack.pop()

    def clear(self) -> None:
        """Clear the current path."""
        self._stack.clear()

    def cycle_to(self, identity: str) -> Tuple[str, ...]:
        """Return the closed cycle from ``identity``'s position on the path back to it."""
        start = self._stack.index(identity)
        return tuple(self._stack[start:]) + (identity,)

    def find_cycles(self, graph: Mapping[str, Sequence[str]]) -> List[Tuple[str, ...]]:
        """Find cycles in ``graph``.

        Roots and neighbors are visited in sorted order. Each cycle is rotated to
        start at its smallest identity and reported once, closed on its first
        member (``("A", "B", "A")``).

        Args:
            graph: Adjacency lists keyed by identity. Targets missing from the
                keys are treated as leaves.

        Returns:
            Cycles in discovery order.

        Example:
            >>> DependencyCycleDetector().find_cycles({"A": ["B"], "B": ["A"]})
            [('A', 'B', 'A')]
        """
        state: Dict[str, int] = {}
        seen: Set[Tuple[str, ...]] = set()
        cycles: List[Tuple[str, ...]] = []

        for root in sorted(graph):
            if state.get(root, _UNVISITED) != _UNVISITED:
                continue
            self.clear()
            frames: List[Tuple[str, Iterator[str]]] = []
            self._enter(root, graph, state, frames)

            while frames:
                node, neighbors = frames[-1]
                target = next(neighbors, None)
                if target is None:
                    state[node] = _DONE
                    frames.pop()
                    self.pop()
                    continue
                target_state = state.get(target, _UNVISITED)
                if target_state == _ON_STACK:
                    cycle = _normalize(self.cycle_to(target))
                    if cycle not in seen:
                        seen.add(cycle)
                        cycles.append(cycle)
                elif target_state == _UNVISITED:
                    self._enter(target, graph, state, frames)

        self.clear()
        return cycles

    def _enter(
        self,
        node: str,
        graph: Mapping[str, Sequence[str]],
        state: Dict[str, int],
        frames: List[Tuple[str, Iterator[str]]],
    ) -> None:
        state[node] = _ON_STACK
        self.push(node)
        frames.append((node, iter(sorted(graph.get(node, ())))))


def _normalize(cycle: Tuple[str, ...]) -> Tuple[str, ...]:
    members = cycle[:-1]
    start = members.index(min(members))
    rotated = members[start:] + members[:start]
    return rotated + (rotated[0],)
