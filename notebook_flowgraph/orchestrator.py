"""
Orchestrator Module
===================

Main entry point tying loading, graph construction, layout and output
together.
"""

from typing import Any, Dict, Iterable, List, Optional, Sequence, Union
from pathlib import Path
import time

from notebook_flowgraph.core.config import Config
from notebook_flowgraph.core.data_structures import Cell, CellGroup, FlowGraph
from notebook_flowgraph.parsing.notebook_loader import NotebookLoader
from notebook_flowgraph.graph.graph_builder import FlowGraphBuilder
from notebook_flowgraph.graph.grouping import build_group_graph, label_cells, parse_groups
from notebook_flowgraph.visualization.layout import GraphLayoutEngine
from notebook_flowgraph.visualization.flow_viz import FlowVisualizer
from notebook_flowgraph.visualization.interactive import InteractiveVisualizer
from notebook_flowgraph.export.json_export import JSONExporter


OUTPUT_FORMATS = ('json', 'png', 'html')


class NotebookFlowGraphSystem:
    """
    Build dependency graphs for notebooks.

    Example:
        >>> system = NotebookFlowGraphSystem()
        >>> result = system.build_graph([Cell(1, "x = 1"), Cell(2, "print(x)")])
        >>> result['graph'].edge_pairs()
        {('1', '2')}
    """

    def __init__(self, config: Optional[Config] = None):
        """
        Initialize the system.

        Args:
            config: Optional configuration object
        """
        self.config = config or Config()
        self._init_components()

    def _init_components(self):
        """Initialize all system components."""
        self.builder = FlowGraphBuilder(config=self.config)
        self.layout_engine = GraphLayoutEngine(config=self.config.layout)

        self.visualizer = FlowVisualizer(
            config=self.config.visualization,
            layout_config=self.config.layout,
        )
        self.interactive_visualizer = InteractiveVisualizer()
        self.json_exporter = JSONExporter(verbose=self.config.verbose)

    def build_graph(self, cells: Sequence[Cell],
                    groups: Optional[Iterable[Union[CellGroup, Dict]]] = None,
                    collapse_groups: bool = False) -> Dict[str, Any]:
        """
        Build and lay out the graph for a list of cells.

        Args:
            cells: Cells in notebook order
            groups: Optional cell groups used to label (and collapse) cells
            collapse_groups: Replace grouped cells by one node per group

        Returns:
            Dictionary containing the cells, extraction results,
            preliminary graph, laid-out FlowGraph and statistics
        """
        verbose = self.config.verbose
        group_list: List[CellGroup] = parse_groups(groups) if groups else []

        if verbose:
            print("=" * 60)
            print("NOTEBOOK FLOW GRAPH")
            print("=" * 60)

        if group_list:
            cells = label_cells(cells, group_list)
            if verbose:
                print(f"  ✓ Applied {len(group_list)} cell groups")

        start_time = time.time()
        preliminary = self.builder.build(cells)
        build_time = time.time() - start_time

        if verbose:
            print(f"  ✓ {len(preliminary.primary_nodes)} cells, "
                  f"{len(preliminary.edges)} dependencies, "
                  f"{len(preliminary.secondary_nodes)} outputs ({build_time:.2f}s)")

        ranked = preliminary
        if collapse_groups:
            if group_list:
                ranked = build_group_graph(
                    preliminary, cells, group_list,
                    default_color=self.config.visualization.default_node_color,
                )
                if verbose:
                    print(f"  ✓ Collapsed into {len(ranked.nodes)} nodes, {len(ranked.edges)} edges")
            elif verbose:
                print("  ⚠ No groups given, nothing to collapse")

        start_time = time.time()
        nodes, edges = self.layout_engine.layout(ranked.nodes, ranked.edges, ranked.edge_data)
        layout_time = time.time() - start_time

        graph = FlowGraph(
            nodes=nodes,
            edges=edges,
            color_map=dict(ranked.color_map),
            metadata={
                'rank_direction': self.config.layout.rank_direction,
                'collapsed': ranked is not preliminary,
            },
        )

        if verbose:
            print(f"  ✓ Layout: {len(nodes)} positioned nodes ({layout_time:.2f}s)")

        return {
            'cells': list(cells),
            'groups': group_list,
            'extractions': preliminary.extractions,
            'preliminary': preliminary,
            'graph': graph,
            'color_map': graph.color_map,
            'statistics': {
                'cells': len(preliminary.primary_nodes),
                'edges': len(preliminary.edges),
                'artifacts': len(preliminary.secondary_nodes),
                'groups': len(group_list),
                'nodes': len(nodes),
            },
            'timing': {
                'build_time': build_time,
                'layout_time': layout_time,
            },
        }

    def save_all(self, result: Dict, prefix: str = "flowgraph",
                 formats: Optional[Iterable[str]] = None) -> List[Path]:
        """
        Save outputs to files under the configured output directory.

        Args:
            result: Result dictionary from build_graph
            prefix: Output file prefix
            formats: Subset of 'json', 'png', 'html' (defaults to all enabled)

        Returns:
            Paths of the files written
        """
        formats = set(formats or OUTPUT_FORMATS)
        graph: FlowGraph = result['graph']
        statistics = result.get('statistics', {})
        verbose = self.config.verbose

        output_dir = Path(self.config.output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        base = output_dir / prefix
        written = []

        if verbose:
            print("\nSaving outputs...")

        if 'json' in formats:
            path = Path(f"{base}_graph.json")
            self.json_exporter.export_graph(graph, str(path), statistics=statistics)
            written.append(path)

        if 'png' in formats and self.config.visualization.enabled:
            path = Path(f"{base}_graph.png")
            try:
                self.visualizer.save(graph, str(path))
                written.append(path)
                if verbose:
                    print(f"✓ Saved {path}")
            except (OSError, ValueError) as e:
                print(f"⚠ Failed to save {path}: {e}")

        if 'html' in formats and self.config.visualization.interactive_html:
            path = Path(f"{base}_interactive.html")
            try:
                self.interactive_visualizer.create_interactive_html(
                    graph, str(path), statistics=statistics, verbose=verbose
                )
                written.append(path)
            except OSError as e:
                print(f"⚠ Failed to create interactive HTML: {e}")

        if verbose:
            print(f"\n✅ {len(written)} outputs saved to {output_dir}")

        return written

    def analyze_file(self, file_path: Union[str, Path],
                     output_prefix: Optional[str] = None,
                     save_outputs: bool = True,
                     groups: Optional[Iterable[Union[CellGroup, Dict]]] = None,
                     collapse_groups: bool = False,
                     formats: Optional[Iterable[str]] = None) -> Dict[str, Any]:
        """
        Convenience method to build the graph of a notebook file.

        Args:
            file_path: Path to .ipynb, .py or trace .csv file
            output_prefix: Optional output prefix (defaults to the file stem)
            save_outputs: Whether to save outputs
            groups: Optional cell groups
            collapse_groups: Replace grouped cells by one node per group
            formats: Output formats to write

        Returns:
            Result dictionary

        Raises:
            SourceRetrievalFailure: If the file cannot be loaded
        """
        cells = NotebookLoader.load_notebook(file_path, verbose=self.config.verbose)

        result = self.build_graph(cells, groups=groups, collapse_groups=collapse_groups)
        result['source_path'] = str(file_path)

        if save_outputs:
            if output_prefix is None:
                output_prefix = Path(file_path).stem
            result['outputs'] = self.save_all(result, prefix=output_prefix, formats=formats)

        return result


def build_notebook_graph(notebook_path: Union[str, Path],
                         output_prefix: Optional[str] = None,
                         groups: Optional[Iterable[Union[CellGroup, Dict]]] = None,
                         save_outputs: bool = True,
                         config: Optional[Config] = None) -> Dict[str, Any]:
    """
    Convenience function to build the graph of a notebook file.

    Args:
        notebook_path: Path to .ipynb, .py or trace .csv file
        output_prefix: Prefix for output files (optional)
        groups: Optional cell groups
        save_outputs: Whether to save outputs (default: True)
        config: Optional configuration

    Returns:
        Result dictionary
    """
    system = NotebookFlowGraphSystem(config=config)
    return system.analyze_file(
        notebook_path,
        output_prefix=output_prefix,
        save_outputs=save_outputs,
        groups=groups,
    )


__all__ = [
    "NotebookFlowGraphSystem",
    "build_notebook_graph",
    "OUTPUT_FORMATS",
]
