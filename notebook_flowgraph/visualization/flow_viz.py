"""
Flow Visualizer Module
======================

Static rendering of a laid-out cell graph.

This module provides the FlowVisualizer class which:
- Draws primary and group nodes as rounded boxes at their layout position
- Draws secondary nodes as circles around their owning cell
- Draws dependency edges as arrows
- Adds a legend built from the label color map
"""

from typing import Dict, Optional, Tuple

import matplotlib.pyplot as plt
import matplotlib.patches as mpatches
from matplotlib.patches import Circle, FancyArrowPatch, FancyBboxPatch

from notebook_flowgraph.core.config import LayoutConfig, VisualizationConfig
from notebook_flowgraph.core.data_structures import FlowGraph, PositionedNode
from notebook_flowgraph.core.enums import ArtifactTag, NodeKind


class FlowVisualizer:
    """
    Render a FlowGraph with matplotlib.

    Node positions are used as-is; no layout is computed here. The y axis
    is inverted so that the first rank sits at the top of the figure.

    Example:
        >>> visualizer = FlowVisualizer()
        >>> fig = visualizer.visualize(graph)
        >>> fig.savefig('graph.png', dpi=150, bbox_inches='tight')
    """

    def __init__(self, config: Optional[VisualizationConfig] = None,
                 layout_config: Optional[LayoutConfig] = None):
        """
        Initialize visualizer.

        Args:
            config: Optional visualization configuration
            layout_config: Layout configuration for node footprints
        """
        self.config = config or VisualizationConfig()
        self.layout_config = layout_config or LayoutConfig()

    def _footprint(self, node: PositionedNode) -> Tuple[float, float]:
        if node.kind == NodeKind.GROUP:
            return (
                float(node.data.get('width', self.layout_config.node_width)),
                float(node.data.get('height', self.layout_config.node_height)),
            )
        if node.kind == NodeKind.SECONDARY:
            diameter = self.layout_config.node_height
            return float(diameter), float(diameter)
        return float(self.layout_config.node_width), float(self.layout_config.node_height)

    def _draw_node(self, ax, node: PositionedNode) -> None:
        width, height = self._footprint(node)
        color = node.data.get('color', self.config.default_node_color)
        label = str(node.data.get('label', node.id))

        if node.kind == NodeKind.SECONDARY:
            patch = Circle(
                (node.x, node.y), width / 2,
                facecolor=color,
                edgecolor='#555',
                linewidth=1.5,
                zorder=8,
            )
            fontsize = 8
        else:
            patch = FancyBboxPatch(
                (node.x - width / 2, node.y - height / 2), width, height,
                boxstyle="round,pad=2,rounding_size=6",
                facecolor=color,
                edgecolor='#333',
                linewidth=2 if node.kind == NodeKind.GROUP else 1.5,
                alpha=0.95,
                zorder=10,
            )
            fontsize = 10
            if node.kind == NodeKind.GROUP and len(label) > 18:
                label = label[:15] + '...'

        ax.add_patch(patch)
        ax.text(node.x, node.y, label,
                ha='center', va='center',
                fontsize=fontsize, fontweight='bold',
                zorder=11)

    def _draw_edge(self, ax, source: PositionedNode, target: PositionedNode) -> None:
        _, source_height = self._footprint(source)
        _, target_height = self._footprint(target)

        arrow = FancyArrowPatch(
            (source.x, source.y), (target.x, target.y),
            arrowstyle='-|>',
            mutation_scale=15,
            linewidth=1.5,
            color='#777',
            alpha=0.8,
            shrinkA=source_height / 2,
            shrinkB=target_height / 2,
            connectionstyle="arc3,rad=0.05",
            zorder=5,
        )
        ax.add_patch(arrow)

    def _draw_tethers(self, ax, graph: FlowGraph, nodes: Dict[str, PositionedNode]) -> None:
        for node in graph.secondary_nodes:
            owner = nodes.get(node.data.get('owner'))
            if owner is None:
                continue
            ax.plot([owner.x, node.x], [owner.y, node.y],
                    linestyle=':', color='#aaa', linewidth=1, zorder=4)

    def _legend_handles(self, graph: FlowGraph):
        handles = [
            mpatches.Patch(facecolor=color, label=label, edgecolor='#333')
            for label, color in graph.color_map.items()
        ]
        tags = {node.data.get('tag') for node in graph.secondary_nodes}
        for tag, color in ArtifactTag.get_colors().items():
            if tag in tags:
                handles.append(mpatches.Patch(facecolor=color, label=f"output: {tag}", edgecolor='#555'))
        return handles

    def visualize(self, graph: FlowGraph, figsize: Optional[Tuple] = None,
                  title: str = "Cell Dependency Graph") -> plt.Figure:
        """
        Draw the graph.

        Args:
            graph: Laid-out flow graph
            figsize: Optional figure size
            title: Figure title

        Returns:
            Matplotlib figure
        """
        if figsize is None:
            figsize = self.config.figsize

        fig, ax = plt.subplots(figsize=figsize)

        if not graph.nodes:
            ax.text(0.5, 0.5, "No cells to display",
                    ha='center', va='center', fontsize=14, transform=ax.transAxes)
            ax.axis('off')
            return fig

        nodes = {node.id: node for node in graph.nodes}

        self._draw_tethers(ax, graph, nodes)
        for edge in graph.edges:
            if edge.source in nodes and edge.target in nodes:
                self._draw_edge(ax, nodes[edge.source], nodes[edge.target])
        for node in graph.nodes:
            self._draw_node(ax, node)

        pad = max(self.layout_config.node_width, self.layout_config.node_height)
        xs = [n.x for n in graph.nodes]
        ys = [n.y for n in graph.nodes]
        ax.set_xlim(min(xs) - pad, max(xs) + pad)
        ax.set_ylim(max(ys) + pad, min(ys) - pad)
        ax.set_aspect('equal')
        ax.axis('off')
        ax.set_title(title, fontsize=16, fontweight='bold', pad=20)

        handles = self._legend_handles(graph)
        if handles:
            ax.legend(handles=handles, loc='upper right', fontsize=9)

        plt.tight_layout()
        return fig

    def save(self, graph: FlowGraph, output_file: str, title: str = "Cell Dependency Graph") -> None:
        """
        Render and write the figure to a file.

        Args:
            graph: Laid-out flow graph
            output_file: Output image path
            title: Figure title
        """
        fig = self.visualize(graph, title=title)
        try:
            fig.savefig(output_file, dpi=self.config.dpi, bbox_inches='tight')
        finally:
            plt.close(fig)


__all__ = [
    "FlowVisualizer",
]
