"""
Integration tests for JSON export and the NotebookFlowGraphSystem.

Tests cover:
- Exported graph structure and reload
- Rendering payload shape
- End-to-end builds with groups
- Output files
"""

import json

import pytest

from notebook_flowgraph.core.config import Config
from notebook_flowgraph.core.data_structures import Cell, FlowGraph
from notebook_flowgraph.core.enums import NodeKind
from notebook_flowgraph.core.exceptions import SourceRetrievalFailure, UnknownNodeReference
from notebook_flowgraph.export.json_export import JSONExporter
from notebook_flowgraph.orchestrator import NotebookFlowGraphSystem


@pytest.fixture
def system(tmp_path):
    return NotebookFlowGraphSystem(config=Config(output_dir=tmp_path / "out", verbose=False))


class TestJSONExporter:
    """Test JSON export."""

    def test_export_and_reload(self, system, sample_cells, tmp_path):
        """Test an exported graph loads back unchanged."""
        graph = system.build_graph(sample_cells)['graph']
        path = tmp_path / "graph.json"

        exported = JSONExporter(verbose=False).export_graph(graph, str(path), statistics={'cells': 5})
        loaded = JSONExporter.load_graph(str(path))

        assert exported['metadata']['nodes'] == len(graph.nodes)
        assert exported['metadata']['statistics'] == {'cells': 5}
        assert [n.to_dict() for n in loaded.nodes] == [n.to_dict() for n in graph.nodes]
        assert [e.to_dict() for e in loaded.edges] == [e.to_dict() for e in graph.edges]

    def test_rendering_payload(self, system, sample_cells, tmp_path):
        """Test the payload carries only nodes and edges."""
        graph = system.build_graph(sample_cells)['graph']
        path = tmp_path / "payload.json"

        JSONExporter(verbose=False).export_rendering_payload(graph, str(path))
        with open(path, encoding='utf-8') as f:
            payload = json.load(f)

        assert set(payload) == {'nodes', 'edges'}
        node = payload['nodes'][0]
        assert set(node) == {'id', 'type', 'position', 'data'}
        assert set(node['position']) == {'x', 'y'}
        assert [e['id'] for e in payload['edges']] == list(range(len(payload['edges'])))

    def test_export_extractions(self, system, sample_cells, tmp_path):
        """Test per-cell identifier sets are written sorted by position."""
        extractions = system.build_graph(sample_cells)['extractions']
        path = tmp_path / "cells.json"

        exported = JSONExporter(verbose=False).export_extractions(extractions, str(path))

        assert [c['position'] for c in exported['cells']] == [1, 2, 3, 4, 5]
        assert exported['cells'][1]['assigned'] == ['df']


class TestFlowGraph:
    """Test FlowGraph helpers."""

    def test_to_networkx(self, system, sample_cells):
        """Test conversion keeps nodes and edges."""
        graph = system.build_graph(sample_cells)['graph']

        G = graph.to_networkx()

        assert G.number_of_nodes() == len(graph.nodes)
        assert set(G.edges()) == graph.edge_pairs()

    def test_to_networkx_unknown_reference(self):
        """Test an edge citing a missing node."""
        graph = FlowGraph.from_dict({
            'nodes': [{'id': '1', 'type': 'primary', 'position': {'x': 0, 'y': 0}}],
            'edges': [{'id': 0, 'source': '1', 'target': '2'}],
        })

        with pytest.raises(UnknownNodeReference):
            graph.to_networkx()


class TestNotebookFlowGraphSystem:
    """Test end-to-end builds."""

    def test_build_graph(self, system, sample_cells):
        """Test the result dictionary."""
        result = system.build_graph(sample_cells)
        graph = result['graph']

        assert result['statistics']['cells'] == 5
        assert result['statistics']['edges'] == 3
        assert result['statistics']['artifacts'] == 2
        assert len(graph) == 7
        assert graph.edge_pairs() == {('2', '3'), ('2', '4'), ('4', '5')}
        assert '3-artifact-0' in graph

    def test_idempotent(self, system, sample_cells):
        """Test two full runs give identical positions and edges."""
        first = system.build_graph(sample_cells)['graph']
        second = system.build_graph(sample_cells)['graph']

        assert first.to_dict() == second.to_dict()

    def test_groups_color_cells(self, system):
        """Test groups label and color their cells."""
        cells = [Cell(1, "a = 1"), Cell(2, "b = a"), Cell(3, "print(b)")]
        groups = [{"label": "Setup", "cell_start": 1, "cell_end": 2}]

        result = system.build_graph(cells, groups=groups)
        graph = result['graph']

        assert list(graph.color_map) == ["Setup"]
        assert graph.get_node('1').data['color'] == graph.color_map["Setup"]
        assert graph.get_node('3').data['color'] == system.config.visualization.default_node_color

    def test_collapse_groups(self, system):
        """Test collapsing replaces grouped cells by a group node."""
        cells = [Cell(1, "a = 1"), Cell(2, "b = a"), Cell(3, "print(b)")]
        groups = [{"label": "Setup", "cell_start": 1, "cell_end": 2}]

        result = system.build_graph(cells, groups=groups, collapse_groups=True)
        graph = result['graph']

        assert [n.id for n in graph.nodes] == ['group-1', '3']
        assert graph.nodes[0].kind == NodeKind.GROUP
        assert graph.edge_pairs() == {('group-1', '3')}
        assert graph.metadata['collapsed'] is True

    def test_save_all(self, system, sample_cells, tmp_path):
        """Test every output format is written into the output directory."""
        result = system.build_graph(sample_cells)

        written = system.save_all(result, prefix="sample")

        out = tmp_path / "out"
        assert sorted(p.name for p in written) == [
            "sample_graph.json",
            "sample_graph.png",
            "sample_interactive.html",
        ]
        assert all((out / p.name).exists() for p in written)
        html = (out / "sample_interactive.html").read_text(encoding='utf-8')
        assert '"fixed": true' in html

    def test_save_json_only(self, system, sample_cells, tmp_path):
        """Test a format subset."""
        result = system.build_graph(sample_cells)

        written = system.save_all(result, prefix="sample", formats=['json'])

        assert [p.name for p in written] == ["sample_graph.json"]

    def test_analyze_file(self, system, notebook_path):
        """Test building from a notebook on disk."""
        result = system.analyze_file(notebook_path, formats=['json'])

        assert result['graph'].edge_pairs() == {('1', '2'), ('2', '3')}
        assert [p.name for p in result['outputs']] == ["analysis_graph.json"]

    def test_analyze_missing_file(self, system, tmp_path):
        """Test load failures surface without partial output."""
        with pytest.raises(SourceRetrievalFailure):
            system.analyze_file(tmp_path / "missing.ipynb")

        assert not (tmp_path / "out").exists()
