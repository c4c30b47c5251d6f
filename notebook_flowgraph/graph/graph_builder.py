"""
Graph Builder Module
====================

Assemble the preliminary cell graph.

This module provides the FlowGraphBuilder class which:
- Extracts assigned/used identifiers for every cell
- Folds the cells in order into dependency edges
- Adds one secondary node per classified cell output
- Colors primary nodes from their upstream classification label
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from notebook_flowgraph.core.config import Config
from notebook_flowgraph.core.data_structures import (
    Cell,
    ExtractionResult,
    PreliminaryNode,
    PreliminaryEdge,
    artifact_node_id,
)
from notebook_flowgraph.core.enums import ArtifactTag, NodeKind
from notebook_flowgraph.parsing.identifier_extractor import IdentifierExtractor
from notebook_flowgraph.graph.dependency_tracker import DependencyTracker
from notebook_flowgraph.graph.artifact_classifier import ArtifactClassifier
from notebook_flowgraph.graph.color_map import build_color_map


@dataclass
class PreliminaryGraph:
    """
    Cell graph before layout.

    Attributes:
        nodes: Primary nodes in cell order, each followed by its secondary nodes
        edges: Dependency edges between primary nodes
        edge_data: Extra data per edge (variables carried)
        extractions: Extraction result per cell position
        color_map: Label to color mapping for this build
    """
    nodes: List[PreliminaryNode] = field(default_factory=list)
    edges: List[PreliminaryEdge] = field(default_factory=list)
    edge_data: Dict[PreliminaryEdge, Dict] = field(default_factory=dict)
    extractions: Dict[int, ExtractionResult] = field(default_factory=dict)
    color_map: Dict[str, str] = field(default_factory=dict)

    @property
    def primary_nodes(self) -> List[PreliminaryNode]:
        return [n for n in self.nodes if n.kind == NodeKind.PRIMARY]

    @property
    def secondary_nodes(self) -> List[PreliminaryNode]:
        return [n for n in self.nodes if n.kind == NodeKind.SECONDARY]


class FlowGraphBuilder:
    """
    Build the preliminary node/edge graph from an ordered cell list.

    Every build starts from a fresh assignment tracker and color map, so
    repeated builds over the same cells give identical graphs.

    Example:
        >>> builder = FlowGraphBuilder()
        >>> graph = builder.build([Cell(1, "x = 1"), Cell(2, "print(x)")])
        >>> graph.edges
        [PreliminaryEdge(source='1', target='2')]
    """

    def __init__(self, config: Optional[Config] = None):
        """
        Initialize the builder.

        Args:
            config: Optional system configuration
        """
        self.config = config or Config(verbose=False)
        self.extractor = IdentifierExtractor(config=self.config.parsing)
        self.dependency_tracker = DependencyTracker()
        self.classifier = ArtifactClassifier(config=self.config.artifacts)

    def build(self, cells: Sequence[Cell]) -> PreliminaryGraph:
        """
        Build the preliminary graph.

        Args:
            cells: Cells in notebook order

        Returns:
            PreliminaryGraph

        Raises:
            ValueError: If two cells share a position
        """
        self._check_positions(cells)

        extractions = self.extractor.extract_cells(cells)
        edges = self.dependency_tracker.build_edges(
            extractions, [cell.position for cell in cells]
        )
        edge_data = {
            edge: {'variables': self.dependency_tracker.variables_for(edge)}
            for edge in edges
        }

        color_map = build_color_map(cells, self.config.visualization.palette)

        nodes: List[PreliminaryNode] = []
        for cell, extraction in zip(cells, extractions):
            nodes.append(self._primary_node(cell, extraction, color_map))
            if self.config.artifacts.enabled:
                nodes.extend(self._secondary_nodes(cell))

        return PreliminaryGraph(
            nodes=nodes,
            edges=edges,
            edge_data=edge_data,
            extractions={cell.position: result for cell, result in zip(cells, extractions)},
            color_map=color_map,
        )

    @staticmethod
    def _check_positions(cells: Sequence[Cell]) -> None:
        seen = set()
        for cell in cells:
            if cell.position in seen:
                raise ValueError(f"Duplicate cell position: {cell.position}")
            seen.add(cell.position)

    def _primary_node(self, cell: Cell, extraction: ExtractionResult,
                      color_map: Dict[str, str]) -> PreliminaryNode:
        color = color_map.get(cell.label, self.config.visualization.default_node_color)

        return PreliminaryNode(
            id=cell.node_id,
            label=str(cell.position),
            kind=NodeKind.PRIMARY,
            data={
                'label': str(cell.position),
                'color': color,
                'group': cell.label,
                'execution_count': cell.execution_count,
                'source': cell.source if isinstance(cell.source, str) else '',
                'assigned': sorted(extraction.assigned),
                'used': sorted(extraction.used),
            },
        )

    def _secondary_nodes(self, cell: Cell) -> List[PreliminaryNode]:
        colors = ArtifactTag.get_colors()
        nodes = []

        for index, tag in enumerate(self.classifier.classify(cell.outputs)):
            nodes.append(PreliminaryNode(
                id=artifact_node_id(cell.node_id, index),
                label=tag.value,
                kind=NodeKind.SECONDARY,
                data={
                    'label': tag.value,
                    'tag': tag.value,
                    'owner': cell.node_id,
                    'color': colors.get(tag.value, self.config.visualization.default_artifact_color),
                },
            ))

        return nodes


__all__ = [
    "FlowGraphBuilder",
    "PreliminaryGraph",
]
