"""
Graph Module
============

Cell graph construction.

This module provides:
- DependencyTracker: Infer producer -> consumer edges between cells
- ArtifactClassifier: Tag cell outputs that spawn secondary nodes
- FlowGraphBuilder: Assemble the preliminary node/edge graph
- build_color_map: Color cells by their upstream label
- Grouping helpers: Label cells from groups and collapse them
"""

from notebook_flowgraph.graph.dependency_tracker import AssignmentTracker, DependencyTracker
from notebook_flowgraph.graph.artifact_classifier import ArtifactClassifier
from notebook_flowgraph.graph.color_map import build_color_map
from notebook_flowgraph.graph.graph_builder import FlowGraphBuilder, PreliminaryGraph
from notebook_flowgraph.graph.grouping import (
    parse_groups,
    label_cells,
    build_group_graph,
)

__all__ = [
    "AssignmentTracker",
    "DependencyTracker",
    "ArtifactClassifier",
    "build_color_map",
    "FlowGraphBuilder",
    "PreliminaryGraph",
    "parse_groups",
    "label_cells",
    "build_group_graph",
]
