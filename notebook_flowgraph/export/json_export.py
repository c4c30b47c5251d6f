"""
JSON Exporter Module
====================

Export a laid-out cell graph to JSON.

This module provides the JSONExporter class which:
- Writes the rendering-layer payload ``{nodes, edges}``
- Optionally includes the color map and build metadata
- Reads a previously exported graph back
"""

import json
from datetime import datetime
from typing import Any, Dict, List, Optional

from notebook_flowgraph.core.data_structures import ExtractionResult, FlowGraph


class JSONExporter:
    """
    Export flow graphs to JSON format.

    Example:
        >>> exporter = JSONExporter()
        >>> exporter.export_graph(graph, "graph.json")
        >>> exporter.export_rendering_payload(graph, "payload.json")
    """

    def __init__(self, indent: int = 2, sort_keys: bool = False, verbose: bool = True):
        """
        Initialize JSON exporter.

        Args:
            indent: Indentation level for JSON
            sort_keys: Whether to sort dictionary keys
            verbose: Print a confirmation line per file written
        """
        self.indent = indent
        self.sort_keys = sort_keys
        self.verbose = verbose

    def _write(self, data: Dict, output_file: str) -> None:
        with open(output_file, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=self.indent, sort_keys=self.sort_keys)

    def export_graph(self, graph: FlowGraph, output_file: str,
                     statistics: Optional[Dict[str, Any]] = None) -> Dict:
        """
        Export the complete graph with color map and metadata.

        Args:
            graph: Laid-out flow graph
            output_file: Output file path
            statistics: Optional build statistics stored in metadata

        Returns:
            Dictionary of exported data
        """
        export_data = graph.to_dict()
        export_data['metadata'] = self._build_metadata(graph, statistics)

        self._write(export_data, output_file)

        if self.verbose:
            print(f"✓ Graph exported to {output_file}")
        return export_data

    def export_rendering_payload(self, graph: FlowGraph, output_file: str) -> Dict:
        """
        Export only ``{nodes, edges}`` as consumed by a rendering layer.

        Args:
            graph: Laid-out flow graph
            output_file: Output file path

        Returns:
            Dictionary of exported data
        """
        export_data = {
            'nodes': [node.to_dict() for node in graph.nodes],
            'edges': [edge.to_dict() for edge in graph.edges],
        }

        self._write(export_data, output_file)

        if self.verbose:
            print(f"✓ Rendering payload exported to {output_file}")
        return export_data

    def export_extractions(self, extractions: Dict[int, ExtractionResult],
                           output_file: str) -> Dict:
        """
        Export per-cell assigned/used identifier sets.

        Args:
            extractions: Extraction result per cell position
            output_file: Output file path

        Returns:
            Dictionary of exported data
        """
        export_data = {
            'timestamp': datetime.now().isoformat(),
            'cells': self._export_extractions(extractions),
        }

        self._write(export_data, output_file)

        if self.verbose:
            print(f"✓ Identifier sets exported to {output_file}")
        return export_data

    @staticmethod
    def _export_extractions(extractions: Dict[int, ExtractionResult]) -> List[Dict]:
        return [
            {'position': position, **result.to_dict()}
            for position, result in sorted(extractions.items())
        ]

    @staticmethod
    def _build_metadata(graph: FlowGraph, statistics: Optional[Dict[str, Any]]) -> Dict:
        """Build metadata section."""
        from notebook_flowgraph import __version__

        metadata = dict(graph.metadata)
        metadata.update({
            'timestamp': datetime.now().isoformat(),
            'version': __version__,
            'nodes': len(graph.nodes),
            'edges': len(graph.edges),
        })
        if statistics:
            metadata['statistics'] = dict(statistics)
        return metadata

    @staticmethod
    def load_graph(input_file: str) -> FlowGraph:
        """
        Load a graph written by export_graph.

        Args:
            input_file: Path to JSON file

        Returns:
            FlowGraph
        """
        with open(input_file, 'r', encoding='utf-8') as f:
            data = json.load(f)
        return FlowGraph.from_dict(data)


__all__ = [
    "JSONExporter",
]
