"""
Visualization Module
====================

Layout and rendering of the cell graph.

This module provides:
- GraphLayoutEngine: Rank layout plus radial artifact placement
- FlowVisualizer: Static matplotlib rendering
- InteractiveVisualizer: Interactive HTML rendering
"""

from notebook_flowgraph.visualization.layout import (
    RankLayout,
    RadialArtifactPlacer,
    GraphLayoutEngine,
    layout_graph,
)
from notebook_flowgraph.visualization.flow_viz import FlowVisualizer
from notebook_flowgraph.visualization.interactive import InteractiveVisualizer

__all__ = [
    "RankLayout",
    "RadialArtifactPlacer",
    "GraphLayoutEngine",
    "layout_graph",
    "FlowVisualizer",
    "InteractiveVisualizer",
]
