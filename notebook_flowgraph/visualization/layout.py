"""
Layout Module
=============

Assign 2D coordinates to a preliminary cell graph.

This module provides:
- RankLayout: Layered (rank-based) layout of primary and group nodes
- RadialArtifactPlacer: Ring placement of secondary nodes around their owner
- GraphLayoutEngine: Composition of both, producing positioned nodes and
  normalized edges

The two placement algorithms are independent: the artifact placer only
reads the coordinates produced by the rank layout, so either can be
replaced without touching the other. Neither uses randomness; identical
input and configuration give identical coordinates.
"""

import copy
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

import networkx as nx
import numpy as np

from notebook_flowgraph.core.config import LayoutConfig
from notebook_flowgraph.core.data_structures import (
    NormalizedEdge,
    PositionedNode,
    PreliminaryEdge,
    PreliminaryNode,
)
from notebook_flowgraph.core.enums import NodeKind
from notebook_flowgraph.core.exceptions import UnknownNodeReference


Point = Tuple[float, float]


class RankLayout:
    """
    Layered layout in the style of Sugiyama/dagre.

    Steps:
    1. Cycle breaking: back edges found by a depth-first search in node
       order are reversed
    2. Ranking: longest path from the sources (topological generations)
    3. Ordering: barycenter sweeps reduce crossings between ranks
    4. Coordinates: ranks stacked along the rank direction, nodes packed
       from the upper-left corner with fixed spacing

    Coordinates are node centres.
    """

    def __init__(self, config: Optional[LayoutConfig] = None):
        self.config = config or LayoutConfig()

    def compute(self, nodes: Sequence[PreliminaryNode],
                edges: Sequence[PreliminaryEdge]) -> Dict[str, Point]:
        """
        Compute centre coordinates for ranked nodes.

        Args:
            nodes: Nodes to lay out (primary and group nodes)
            edges: Edges between those nodes; others are ignored

        Returns:
            Mapping from node id to (x, y)
        """
        if not nodes:
            return {}

        order = [node.id for node in nodes]
        sizes = {node.id: self._footprint(node) for node in nodes}

        G = nx.DiGraph()
        G.add_nodes_from(order)
        for edge in edges:
            if edge.source == edge.target:
                continue
            if edge.source in G and edge.target in G:
                G.add_edge(edge.source, edge.target)

        acyclic = self._break_cycles(G, order)
        ranks = self._assign_ranks(acyclic)
        layers = self._order_layers(acyclic, ranks, order)
        return self._assign_coordinates(layers, sizes)

    def _footprint(self, node: PreliminaryNode) -> Tuple[float, float]:
        if node.kind == NodeKind.GROUP:
            return (
                float(node.data.get('width', self.config.node_width)),
                float(node.data.get('height', self.config.node_height)),
            )
        return float(self.config.node_width), float(self.config.node_height)

    @staticmethod
    def _break_cycles(G: nx.DiGraph, order: List[str]) -> nx.DiGraph:
        """Reverse the back edges of an iterative DFS visiting roots in order"""
        state: Dict[str, int] = {}
        back_edges = []

        for root in order:
            if root in state:
                continue
            state[root] = 1
            stack = [(root, iter(G.successors(root)))]
            while stack:
                node, children = stack[-1]
                for child in children:
                    if child not in state:
                        state[child] = 1
                        stack.append((child, iter(G.successors(child))))
                        break
                    if state[child] == 1:
                        back_edges.append((node, child))
                else:
                    state[node] = 2
                    stack.pop()

        H = G.copy()
        for source, target in back_edges:
            H.remove_edge(source, target)
            H.add_edge(target, source)
        return H

    @staticmethod
    def _assign_ranks(G: nx.DiGraph) -> Dict[str, int]:
        ranks = {}
        for rank, generation in enumerate(nx.topological_generations(G)):
            for node_id in generation:
                ranks[node_id] = rank
        return ranks

    def _order_layers(self, G: nx.DiGraph, ranks: Dict[str, int],
                      order: List[str]) -> List[List[str]]:
        """Order nodes within ranks by alternating barycenter sweeps"""
        index = {node_id: i for i, node_id in enumerate(order)}
        layers: List[List[str]] = [[] for _ in range(max(ranks.values()) + 1)]
        for node_id in order:
            layers[ranks[node_id]].append(node_id)

        for sweep in range(self.config.crossing_sweeps):
            downward = sweep % 2 == 0
            rank_sequence = range(1, len(layers)) if downward else range(len(layers) - 2, -1, -1)
            slot = self._slots(layers)

            for rank in rank_sequence:
                neighbours = G.predecessors if downward else G.successors
                keyed = []
                for current, node_id in enumerate(layers[rank]):
                    positions = [slot[n] for n in neighbours(node_id)]
                    barycenter = float(np.mean(positions)) if positions else float(current)
                    keyed.append((barycenter, current, index[node_id], node_id))
                keyed.sort()
                layers[rank] = [node_id for _, _, _, node_id in keyed]
                for current, node_id in enumerate(layers[rank]):
                    slot[node_id] = current

        return layers

    @staticmethod
    def _slots(layers: List[List[str]]) -> Dict[str, int]:
        return {node_id: i for layer in layers for i, node_id in enumerate(layer)}

    def _assign_coordinates(self, layers: List[List[str]],
                            sizes: Dict[str, Tuple[float, float]]) -> Dict[str, Point]:
        cfg = self.config
        direction = cfg.direction
        horizontal = direction.is_horizontal

        def main_extent(node_id):
            width, height = sizes[node_id]
            return width if horizontal else height

        def cross_extent(node_id):
            width, height = sizes[node_id]
            return height if horizontal else width

        main_margin = cfg.margin_x if horizontal else cfg.margin_y
        cross_margin = cfg.margin_y if horizontal else cfg.margin_x

        main_centres: Dict[str, float] = {}
        cross_centres: Dict[str, float] = {}

        cursor_main = main_margin
        for layer in layers:
            thickness = max(main_extent(n) for n in layer)
            cursor_cross = cross_margin
            for node_id in layer:
                main_centres[node_id] = cursor_main + thickness / 2
                cross_centres[node_id] = cursor_cross + cross_extent(node_id) / 2
                cursor_cross += cross_extent(node_id) + cfg.node_sep
            cursor_main += thickness + cfg.rank_sep

        if direction.is_reversed:
            total = cursor_main - cfg.rank_sep + main_margin
            main_centres = {n: total - c for n, c in main_centres.items()}

        positions = {}
        for node_id in main_centres:
            if horizontal:
                positions[node_id] = (float(main_centres[node_id]), float(cross_centres[node_id]))
            else:
                positions[node_id] = (float(cross_centres[node_id]), float(main_centres[node_id]))
        return positions


class RadialArtifactPlacer:
    """
    Place secondary nodes on a ring around their owning node.

    The k-th artifact of an owner at P goes to
    ``P + radius * (cos θ, sin θ)`` with ``θ = k / slots * 2π``.
    """

    def __init__(self, config: Optional[LayoutConfig] = None):
        self.config = config or LayoutConfig()

    def place(self, nodes: Sequence[PreliminaryNode],
              anchors: Mapping[str, Point]) -> Dict[str, Point]:
        """
        Compute positions for secondary nodes.

        Args:
            nodes: Secondary nodes, in artifact order per owner
            anchors: Positions of owning nodes (read only)

        Returns:
            Mapping from secondary node id to (x, y)

        Raises:
            UnknownNodeReference: If an owner has no position
        """
        positions = {}
        counts: Dict[str, int] = {}

        for node in nodes:
            owner = node.data.get('owner') or node.owner_id
            if owner not in anchors:
                raise UnknownNodeReference(str(owner), {'artifact': node.id})

            k = counts.get(owner, 0)
            counts[owner] = k + 1
            positions[node.id] = self.offset(anchors[owner], k)

        return positions

    def offset(self, anchor: Point, k: int) -> Point:
        """Position of the k-th artifact around ``anchor``"""
        theta = k / self.config.artifact_slots * 2 * np.pi
        radius = self.config.artifact_radius
        return (
            float(anchor[0] + radius * np.cos(theta)),
            float(anchor[1] + radius * np.sin(theta)),
        )


class GraphLayoutEngine:
    """
    Lay out a preliminary graph.

    Example:
        >>> engine = GraphLayoutEngine()
        >>> nodes, edges = engine.layout(graph.nodes, graph.edges)
    """

    def __init__(self, config: Optional[LayoutConfig] = None,
                 rank_layout: Optional[RankLayout] = None,
                 artifact_placer: Optional[RadialArtifactPlacer] = None):
        """
        Initialize the engine.

        Args:
            config: Optional layout configuration
            rank_layout: Primary layout algorithm (defaults to RankLayout)
            artifact_placer: Secondary placement (defaults to RadialArtifactPlacer)
        """
        self.config = config or LayoutConfig()
        self.rank_layout = rank_layout or RankLayout(self.config)
        self.artifact_placer = artifact_placer or RadialArtifactPlacer(self.config)

    def layout(self, nodes: Sequence[PreliminaryNode],
               edges: Sequence[PreliminaryEdge],
               edge_data: Optional[Mapping[PreliminaryEdge, Dict]] = None
               ) -> Tuple[List[PositionedNode], List[NormalizedEdge]]:
        """
        Position nodes and normalize edges.

        Inputs are not modified; returned nodes and edges are new objects.

        Args:
            nodes: Preliminary nodes (primary, secondary and group)
            edges: Preliminary edges
            edge_data: Optional extra data per edge

        Returns:
            Tuple of (positioned nodes in input order, edges numbered 0..n-1)

        Raises:
            UnknownNodeReference: If an edge or artifact refers to a missing node
            ValueError: If node ids are not unique
        """
        edge_data = edge_data or {}
        node_ids = set()
        for node in nodes:
            if node.id in node_ids:
                raise ValueError(f"Duplicate node id: {node.id}")
            node_ids.add(node.id)

        for i, edge in enumerate(edges):
            for endpoint in (edge.source, edge.target):
                if endpoint not in node_ids:
                    raise UnknownNodeReference(endpoint, {'edge_index': i})

        ranked = [n for n in nodes if n.kind.takes_part_in_ranking]
        secondary = [n for n in nodes if not n.kind.takes_part_in_ranking]

        positions = dict(self.rank_layout.compute(ranked, edges))
        positions.update(self.artifact_placer.place(secondary, positions))

        positioned = []
        for node in nodes:
            x, y = positions[node.id]
            data = copy.deepcopy(node.data)
            data.setdefault('label', node.label)
            positioned.append(PositionedNode(id=node.id, kind=node.kind, x=x, y=y, data=data))

        normalized = [
            NormalizedEdge(
                id=i,
                source=edge.source,
                target=edge.target,
                data=copy.deepcopy(edge_data.get(edge, {})),
            )
            for i, edge in enumerate(edges)
        ]

        return positioned, normalized


def layout_graph(nodes: Sequence[PreliminaryNode],
                 edges: Sequence[PreliminaryEdge],
                 config: Optional[LayoutConfig] = None
                 ) -> Tuple[List[PositionedNode], List[NormalizedEdge]]:
    """Convenience wrapper around GraphLayoutEngine.layout"""
    return GraphLayoutEngine(config=config).layout(nodes, edges)


__all__ = [
    "RankLayout",
    "RadialArtifactPlacer",
    "GraphLayoutEngine",
    "layout_graph",
]
