"""
Unit tests for the Graph Layout Engine.

Tests cover:
- Rank assignment and coordinates for each rank direction
- Crossing reduction within ranks
- Radial placement of secondary nodes
- Edge normalization, purity and determinism
- Unknown references
"""

import math

import pytest

from notebook_flowgraph.core.config import LayoutConfig
from notebook_flowgraph.core.data_structures import (
    Cell,
    PreliminaryEdge,
    PreliminaryNode,
)
from notebook_flowgraph.core.enums import NodeKind
from notebook_flowgraph.core.exceptions import UnknownNodeReference
from notebook_flowgraph.graph.graph_builder import FlowGraphBuilder
from notebook_flowgraph.visualization.layout import (
    GraphLayoutEngine,
    RadialArtifactPlacer,
    RankLayout,
    layout_graph,
)

from tests.conftest import DISPLAY_OUTPUT, TABLE_OUTPUT


def primary(node_id):
    return PreliminaryNode(id=node_id, label=node_id, kind=NodeKind.PRIMARY, data={'label': node_id})


def secondary(owner, index, tag='vis'):
    return PreliminaryNode(
        id=f"{owner}-artifact-{index}",
        label=tag,
        kind=NodeKind.SECONDARY,
        data={'label': tag, 'tag': tag, 'owner': owner},
    )


def edge(source, target):
    return PreliminaryEdge(source=source, target=target)


def positions(nodes):
    return {n.id: (n.x, n.y) for n in nodes}


class TestRankLayout:
    """Test the layered layout of primary nodes."""

    def test_chain_top_to_bottom(self):
        """Test a chain stacks one node per rank."""
        nodes, _ = layout_graph(
            [primary('1'), primary('2'), primary('3')],
            [edge('1', '2'), edge('2', '3')],
        )

        assert positions(nodes) == {
            '1': (70.0, 40.0),
            '2': (70.0, 130.0),
            '3': (70.0, 220.0),
        }

    def test_chain_left_to_right(self):
        """Test LR swaps the rank axis."""
        config = LayoutConfig(rank_direction="LR")

        nodes, _ = layout_graph([primary('1'), primary('2')], [edge('1', '2')], config)

        assert positions(nodes) == {'1': (70.0, 40.0), '2': (220.0, 40.0)}

    def test_chain_bottom_to_top(self):
        """Test BT mirrors the rank axis."""
        config = LayoutConfig(rank_direction="BT")

        nodes, _ = layout_graph(
            [primary('1'), primary('2'), primary('3')],
            [edge('1', '2'), edge('2', '3')],
            config,
        )
        pos = positions(nodes)

        assert pos['1'][1] > pos['2'][1] > pos['3'][1]
        assert pos['3'] == (70.0, 40.0)

    def test_independent_nodes_share_a_rank(self):
        """Test nodes without edges are packed from the left."""
        nodes, _ = layout_graph([primary('1'), primary('2')], [])

        assert positions(nodes) == {'1': (70.0, 40.0), '2': (220.0, 40.0)}

    def test_longest_path_ranking(self):
        """Test a node is ranked below its deepest predecessor."""
        nodes, _ = layout_graph(
            [primary('1'), primary('2'), primary('3')],
            [edge('1', '2'), edge('2', '3'), edge('1', '3')],
        )
        pos = positions(nodes)

        assert pos['1'][1] < pos['2'][1] < pos['3'][1]

    def test_barycenter_ordering(self):
        """Test children are reordered to follow their parents."""
        nodes, _ = layout_graph(
            [primary('1'), primary('2'), primary('3'), primary('4')],
            [edge('2', '3'), edge('1', '4')],
        )
        pos = positions(nodes)

        assert pos['1'][0] < pos['2'][0]
        assert pos['4'][0] < pos['3'][0]

    def test_cycle_is_broken(self):
        """Test a cycle still yields distinct ranks."""
        nodes, edges = layout_graph([primary('1'), primary('2')], [edge('1', '2'), edge('2', '1')])
        pos = positions(nodes)

        assert pos['1'][1] < pos['2'][1]
        assert [(e.source, e.target) for e in edges] == [('1', '2'), ('2', '1')]

    def test_self_loop_ignored(self):
        """Test self loops do not affect ranking."""
        nodes, _ = layout_graph([primary('1')], [edge('1', '1')])

        assert positions(nodes) == {'1': (70.0, 40.0)}

    def test_group_footprint(self):
        """Test group nodes use their own size."""
        group = PreliminaryNode(
            id='group-1', label='Setup', kind=NodeKind.GROUP,
            data={'label': 'Setup', 'width': 80, 'height': 80},
        )

        coords = RankLayout().compute([group], [])

        assert coords == {'group-1': (60.0, 60.0)}

    def test_empty(self):
        """Test no nodes."""
        assert RankLayout().compute([], []) == {}
        assert layout_graph([], []) == ([], [])


class TestRadialArtifactPlacer:
    """Test placement of secondary nodes."""

    def test_angles_follow_artifact_index(self):
        """Test the k-th artifact sits at angle k * 360 / slots."""
        placer = RadialArtifactPlacer(LayoutConfig(artifact_radius=90, artifact_slots=8))

        coords = placer.place([secondary('1', 0), secondary('1', 1, 'df')], {'1': (100.0, 100.0)})

        assert coords['1-artifact-0'] == pytest.approx((190.0, 100.0))
        step = math.radians(360 / 8)
        assert coords['1-artifact-1'] == pytest.approx(
            (100.0 + 90 * math.cos(step), 100.0 + 90 * math.sin(step))
        )

    def test_counters_per_owner(self):
        """Test each owner starts at angle zero."""
        placer = RadialArtifactPlacer()

        coords = placer.place(
            [secondary('1', 0), secondary('2', 0)],
            {'1': (0.0, 0.0), '2': (0.0, 200.0)},
        )

        assert coords['1-artifact-0'] == pytest.approx((90.0, 0.0))
        assert coords['2-artifact-0'] == pytest.approx((90.0, 200.0))

    def test_missing_owner(self):
        """Test an artifact whose owner has no position."""
        with pytest.raises(UnknownNodeReference) as exc_info:
            RadialArtifactPlacer().place([secondary('7', 0)], {'1': (0.0, 0.0)})

        assert exc_info.value.node_id == '7'

    def test_coordinates_are_floats(self):
        """Test numpy scalars do not leak out."""
        coords = RadialArtifactPlacer().place([secondary('1', 3)], {'1': (0.0, 0.0)})

        x, y = coords['1-artifact-3']
        assert type(x) is float and type(y) is float


class TestGraphLayoutEngine:
    """Test the composed layout pass."""

    def test_display_and_table_outputs(self):
        """Test two outputs land at angle 0 and one slot further."""
        cells = [Cell(1, "plot(a)\nframe", outputs=[DISPLAY_OUTPUT, TABLE_OUTPUT])]
        graph = FlowGraphBuilder().build(cells)
        config = LayoutConfig()

        nodes, _ = GraphLayoutEngine(config).layout(graph.nodes, graph.edges)
        pos = positions(nodes)
        px, py = pos['1']

        theta = 2 * math.pi / config.artifact_slots
        assert nodes[1].data['tag'] == 'vis'
        assert pos['1-artifact-0'] == pytest.approx((px + config.artifact_radius, py))
        assert nodes[2].data['tag'] == 'df'
        assert pos['1-artifact-1'] == pytest.approx(
            (px + config.artifact_radius * math.cos(theta), py + config.artifact_radius * math.sin(theta))
        )

    def test_edges_renumbered(self):
        """Test edges get sequential ids in input order."""
        _, edges = layout_graph(
            [primary('1'), primary('2'), primary('3')],
            [edge('2', '3'), edge('1', '3')],
        )

        assert [e.id for e in edges] == [0, 1]
        assert [(e.source, e.target) for e in edges] == [('2', '3'), ('1', '3')]

    def test_edge_data_carried(self):
        """Test edge data is copied onto normalized edges."""
        e = edge('1', '2')

        _, edges = GraphLayoutEngine().layout(
            [primary('1'), primary('2')], [e], {e: {'variables': ['x']}}
        )

        assert edges[0].data == {'variables': ['x']}

    def test_node_order_and_kind_preserved(self):
        """Test output nodes follow input order."""
        nodes_in = [primary('1'), secondary('1', 0), primary('2')]

        nodes, _ = layout_graph(nodes_in, [edge('1', '2')])

        assert [n.id for n in nodes] == ['1', '1-artifact-0', '2']
        assert [n.kind for n in nodes] == [NodeKind.PRIMARY, NodeKind.SECONDARY, NodeKind.PRIMARY]

    def test_inputs_not_mutated(self):
        """Test the layout pass is pure."""
        nodes_in = [primary('1'), secondary('1', 0)]
        before = [(n.id, dict(n.data)) for n in nodes_in]

        nodes, _ = layout_graph(nodes_in, [])
        nodes[0].data['color'] = '#000000'

        assert [(n.id, n.data) for n in nodes_in] == before

    def test_deterministic(self, sample_cells):
        """Test two runs give identical coordinates."""
        graph = FlowGraphBuilder().build(sample_cells)
        engine = GraphLayoutEngine()

        first = engine.layout(graph.nodes, graph.edges)
        second = GraphLayoutEngine().layout(graph.nodes, graph.edges)

        assert [n.to_dict() for n in first[0]] == [n.to_dict() for n in second[0]]
        assert [e.to_dict() for e in first[1]] == [e.to_dict() for e in second[1]]

    def test_unknown_edge_endpoint(self):
        """Test an edge citing a missing node."""
        with pytest.raises(UnknownNodeReference) as exc_info:
            layout_graph([primary('1')], [edge('1', '99')])

        assert exc_info.value.node_id == '99'

    def test_duplicate_node_ids(self):
        """Test repeated node ids."""
        with pytest.raises(ValueError):
            layout_graph([primary('1'), primary('1')], [])

    def test_invalid_config(self):
        """Test layout constants are validated."""
        with pytest.raises(ValueError):
            LayoutConfig(rank_direction="diagonal")
        with pytest.raises(ValueError):
            LayoutConfig(artifact_slots=0)
