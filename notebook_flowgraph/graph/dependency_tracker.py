"""
Dependency Tracker Module
=========================

Infer data-flow edges between cells from their extraction results.

This module provides:
- AssignmentTracker: Latest assigning cell per identifier
- DependencyTracker: Ordered fold over cells emitting producer -> consumer edges

Edge construction must stay a strictly sequential fold in cell order.
Extraction itself is per-cell and may be computed in any order beforehand.
"""

from typing import Dict, Iterator, List, Optional, Sequence, Set

from notebook_flowgraph.core.data_structures import ExtractionResult, PreliminaryEdge


class AssignmentTracker:
    """
    Map each identifier to the position of the latest cell that assigned it.

    The mapping reflects the latest writer seen so far in the scan; later
    assignments overwrite earlier ones.
    """

    def __init__(self):
        self._last_assigned: Dict[str, int] = {}

    def record(self, names: Set[str], position: int) -> None:
        """Record that the cell at ``position`` assigned ``names``"""
        for name in names:
            self._last_assigned[name] = position

    def producer_of(self, name: str) -> Optional[int]:
        """Get the latest assigning position of ``name``, if any"""
        return self._last_assigned.get(name)

    def as_dict(self) -> Dict[str, int]:
        return dict(self._last_assigned)

    def __contains__(self, name: str) -> bool:
        return name in self._last_assigned

    def __len__(self) -> int:
        return len(self._last_assigned)

    def __iter__(self) -> Iterator[str]:
        return iter(self._last_assigned)


class DependencyTracker:
    """
    Build data-flow edges between cells.

    For each cell in order, its used identifiers are resolved against the
    assignments recorded so far, and only then are its own assignments
    recorded. Identifiers without a prior assigner (imports, builtins,
    names defined outside the notebook) produce no edge.

    Example:
        >>> tracker = DependencyTracker()
        >>> edges = tracker.build_edges([
        ...     ExtractionResult(assigned={'x'}),
        ...     ExtractionResult(used={'x'}),
        ... ])
        >>> edges
        [PreliminaryEdge(source='1', target='2')]
    """

    def __init__(self):
        self.tracker = AssignmentTracker()
        self.edge_variables: Dict[PreliminaryEdge, Set[str]] = {}

    def build_edges(self, results: Sequence[ExtractionResult],
                    positions: Optional[Sequence[int]] = None) -> List[PreliminaryEdge]:
        """
        Build deduplicated dependency edges.

        Args:
            results: Extraction results in cell order
            positions: Cell positions matching ``results``; defaults to 1..N

        Returns:
            Edges in the order they were first discovered
        """
        if positions is None:
            positions = range(1, len(results) + 1)
        elif len(positions) != len(results):
            raise ValueError(
                f"Got {len(positions)} positions for {len(results)} extraction results"
            )

        # Reset state
        self.tracker = AssignmentTracker()
        self.edge_variables = {}
        edges: List[PreliminaryEdge] = []

        for position, result in zip(positions, results):
            for name in sorted(result.used):
                producer = self.tracker.producer_of(name)
                if producer is None:
                    continue

                edge = PreliminaryEdge(source=str(producer), target=str(position))
                if edge not in self.edge_variables:
                    self.edge_variables[edge] = set()
                    edges.append(edge)
                self.edge_variables[edge].add(name)

            self.tracker.record(result.assigned, position)

        return edges

    def variables_for(self, edge: PreliminaryEdge) -> List[str]:
        """Get the identifiers that justify an edge from the last build"""
        return sorted(self.edge_variables.get(edge, set()))


def build_edges(results: Sequence[ExtractionResult],
                positions: Optional[Sequence[int]] = None) -> List[PreliminaryEdge]:
    """Convenience wrapper around DependencyTracker.build_edges"""
    return DependencyTracker().build_edges(results, positions)


__all__ = [
    "AssignmentTracker",
    "DependencyTracker",
    "build_edges",
]
