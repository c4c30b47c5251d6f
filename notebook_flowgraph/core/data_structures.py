"""
Data Structures Module
======================

Core data structures for representing notebook cells and their flow graph.

This module defines:
- Cell: One notebook code cell with its recorded outputs
- ExtractionResult: Identifiers a cell assigns and uses
- PreliminaryNode / PreliminaryEdge: Graph elements before layout
- PositionedNode / NormalizedEdge: Graph elements after layout
- FlowGraph: The positioned graph handed to the rendering layer
- CellGroup: A labelled range of consecutive cells
"""

from dataclasses import dataclass, field
from typing import Dict, List, Set, Any, Optional
import copy
import networkx as nx

from notebook_flowgraph.core.enums import NodeKind
from notebook_flowgraph.core.exceptions import UnknownNodeReference


ARTIFACT_SEPARATOR = "-artifact-"


@dataclass(frozen=True)
class Cell:
    """
    A notebook code cell.

    Attributes:
        position: 1-based position among the notebook's code cells
        source: Source text, lines joined with newlines
        outputs: Raw output records (nbformat style dictionaries)
        execution_count: Execution counter recorded by the kernel, if any
        label: Classification label assigned by an upstream grouping step
    """
    position: int
    source: str
    outputs: List[Dict[str, Any]] = field(default_factory=list)
    execution_count: Optional[int] = None
    label: Optional[str] = None

    @property
    def node_id(self) -> str:
        """Id of the primary node representing this cell"""
        return str(self.position)

    def with_label(self, label: Optional[str]) -> 'Cell':
        """Return a copy of this cell carrying another label"""
        return Cell(
            position=self.position,
            source=self.source,
            outputs=self.outputs,
            execution_count=self.execution_count,
            label=label,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation"""
        return {
            'position': self.position,
            'source': self.source,
            'outputs': copy.deepcopy(self.outputs),
            'execution_count': self.execution_count,
            'label': self.label,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Cell':
        """Create cell from dictionary"""
        return cls(
            position=int(data['position']),
            source=data.get('source', ''),
            outputs=list(data.get('outputs', [])),
            execution_count=data.get('execution_count'),
            label=data.get('label'),
        )

    def __hash__(self):
        return hash(self.position)

    def __eq__(self, other):
        if not isinstance(other, Cell):
            return False
        return self.position == other.position


@dataclass
class ExtractionResult:
    """
    Identifiers found in one cell.

    Attributes:
        assigned: Names the cell writes or binds
        used: Names the cell reads, excluding names it assigns itself
    """
    assigned: Set[str] = field(default_factory=set)
    used: Set[str] = field(default_factory=set)

    @property
    def is_empty(self) -> bool:
        return not self.assigned and not self.used

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation"""
        return {
            'assigned': sorted(self.assigned),
            'used': sorted(self.used),
        }


@dataclass
class PreliminaryNode:
    """
    A graph node before layout.

    Attributes:
        id: Cell position for primary nodes, "<position>-artifact-<k>" for
            secondary nodes
        label: Display label
        kind: Structural kind of the node
        data: Display metadata (color, tag, owner, ...)
    """
    id: str
    label: str
    kind: NodeKind = NodeKind.PRIMARY
    data: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if isinstance(self.kind, str):
            self.kind = NodeKind(self.kind)

    @property
    def owner_id(self) -> Optional[str]:
        """Id of the primary node a secondary node belongs to"""
        if ARTIFACT_SEPARATOR not in self.id:
            return None
        return self.id.split(ARTIFACT_SEPARATOR, 1)[0]

    @property
    def artifact_index(self) -> Optional[int]:
        """Index of a secondary node among its owner's artifacts"""
        if ARTIFACT_SEPARATOR not in self.id:
            return None
        return int(self.id.rsplit(ARTIFACT_SEPARATOR, 1)[1])


def artifact_node_id(owner_id: str, index: int) -> str:
    """Build the id of the index-th secondary node of a primary node"""
    return f"{owner_id}{ARTIFACT_SEPARATOR}{index}"


@dataclass(frozen=True)
class PreliminaryEdge:
    """
    A data-flow dependency between two cells.

    Attributes:
        source: Id of the producing cell's node
        target: Id of the consuming cell's node
    """
    source: str
    target: str

    def to_dict(self) -> Dict[str, str]:
        return {'source': self.source, 'target': self.target}


@dataclass
class PositionedNode:
    """
    A graph node with layout coordinates (node centre).

    Attributes:
        id: Node id
        kind: Structural kind (primary, secondary, group)
        x: Horizontal coordinate
        y: Vertical coordinate
        data: Display data (label, color, ...)
    """
    id: str
    kind: NodeKind
    x: float
    y: float
    data: Dict[str, Any] = field(default_factory=dict)

    @property
    def position(self) -> Dict[str, float]:
        return {'x': self.x, 'y': self.y}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the rendering-layer node representation"""
        return {
            'id': self.id,
            'type': self.kind.value,
            'position': self.position,
            'data': copy.deepcopy(self.data),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PositionedNode':
        """Create node from dictionary"""
        return cls(
            id=data['id'],
            kind=NodeKind(data['type']),
            x=float(data['position']['x']),
            y=float(data['position']['y']),
            data=dict(data.get('data', {})),
        )


@dataclass
class NormalizedEdge:
    """
    An edge as handed to the rendering layer.

    Attributes:
        id: Sequential integer id in edge order
        source: Source node id
        target: Target node id
        data: Additional edge data (e.g. variables carried)
    """
    id: int
    source: str
    target: str
    data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'source': self.source,
            'target': self.target,
            'data': copy.deepcopy(self.data),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'NormalizedEdge':
        return cls(
            id=int(data['id']),
            source=data['source'],
            target=data['target'],
            data=dict(data.get('data', {})),
        )


@dataclass
class FlowGraph:
    """
    Positioned cell graph.

    Attributes:
        nodes: Positioned nodes, primary nodes first in cell order
        edges: Normalized edges
        color_map: Label to color mapping used for primary nodes
        metadata: Additional graph-level metadata
    """
    nodes: List[PositionedNode] = field(default_factory=list)
    edges: List[NormalizedEdge] = field(default_factory=list)
    color_map: Dict[str, str] = field(default_factory=dict)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def get_node(self, node_id: str) -> Optional[PositionedNode]:
        """Get a node by ID"""
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def nodes_of_kind(self, kind: NodeKind) -> List[PositionedNode]:
        return [n for n in self.nodes if n.kind == kind]

    @property
    def primary_nodes(self) -> List[PositionedNode]:
        return self.nodes_of_kind(NodeKind.PRIMARY)

    @property
    def secondary_nodes(self) -> List[PositionedNode]:
        return self.nodes_of_kind(NodeKind.SECONDARY)

    def edge_pairs(self) -> Set[tuple]:
        """Get the (source, target) pairs of all edges"""
        return {(e.source, e.target) for e in self.edges}

    def to_networkx(self) -> nx.DiGraph:
        """Convert to NetworkX directed graph"""
        G = nx.DiGraph()

        for node in self.nodes:
            G.add_node(node.id, kind=node.kind.value, x=node.x, y=node.y,
                       **node.data)

        for edge in self.edges:
            for endpoint in (edge.source, edge.target):
                if endpoint not in G:
                    raise UnknownNodeReference(endpoint, {'edge_id': edge.id})
            G.add_edge(edge.source, edge.target, id=edge.id, **edge.data)

        return G

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation"""
        return {
            'nodes': [node.to_dict() for node in self.nodes],
            'edges': [edge.to_dict() for edge in self.edges],
            'color_map': dict(self.color_map),
            'metadata': copy.deepcopy(self.metadata),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FlowGraph':
        """Create FlowGraph from dictionary"""
        return cls(
            nodes=[PositionedNode.from_dict(n) for n in data.get('nodes', [])],
            edges=[NormalizedEdge.from_dict(e) for e in data.get('edges', [])],
            color_map=dict(data.get('color_map', {})),
            metadata=dict(data.get('metadata', {})),
        )

    def __len__(self) -> int:
        """Return number of nodes"""
        return len(self.nodes)

    def __contains__(self, node_id: str) -> bool:
        return self.get_node(node_id) is not None


@dataclass
class CellGroup:
    """
    A labelled range of consecutive cells, as produced by a grouping step.

    Attributes:
        label: Group label (e.g. "Environment Setup")
        cell_start: First cell position in the group (inclusive, 1-based)
        cell_end: Last cell position in the group (inclusive)
    """
    label: str
    cell_start: int
    cell_end: int

    def __post_init__(self):
        if self.cell_end < self.cell_start:
            raise ValueError(
                f"Group {self.label!r} ends ({self.cell_end}) "
                f"before it starts ({self.cell_start})"
            )

    def __contains__(self, position: int) -> bool:
        return self.cell_start <= position <= self.cell_end

    @property
    def size(self) -> int:
        return self.cell_end - self.cell_start + 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            'label': self.label,
            'cell_start': self.cell_start,
            'cell_end': self.cell_end,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CellGroup':
        return cls(
            label=str(data['label']),
            cell_start=int(data['cell_start']),
            cell_end=int(data['cell_end']),
        )


# Export all data structures
__all__ = [
    "ARTIFACT_SEPARATOR",
    "Cell",
    "ExtractionResult",
    "PreliminaryNode",
    "PreliminaryEdge",
    "PositionedNode",
    "NormalizedEdge",
    "FlowGraph",
    "CellGroup",
    "artifact_node_id",
]
