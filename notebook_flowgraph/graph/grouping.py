"""
Grouping Module
===============

Apply upstream cell groups to a notebook.

Groups are labelled ranges of consecutive cells (for example
"Environment Setup" covering cells 1-4). They are produced outside this
package; here they are used to label cells for coloring and to collapse
the cell graph into one node per group.
"""

from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from notebook_flowgraph.core.data_structures import (
    Cell,
    CellGroup,
    PreliminaryEdge,
    PreliminaryNode,
)
from notebook_flowgraph.core.enums import NodeKind
from notebook_flowgraph.core.exceptions import FlowGraphError, UnknownNodeReference
from notebook_flowgraph.graph.graph_builder import PreliminaryGraph


GROUP_ID_PREFIX = "group-"

# Footprint of a collapsed group grows with the number of cells it holds.
GROUP_BASE_SIZE = 60
GROUP_SIZE_STEP = 10


def parse_groups(records: Iterable[Union[CellGroup, Dict[str, Any]]]) -> List[CellGroup]:
    """
    Parse group records such as ``{"label": ..., "cell_start": 1, "cell_end": 4}``.

    Args:
        records: Group dictionaries or CellGroup objects

    Returns:
        List of CellGroup in input order

    Raises:
        FlowGraphError: If a record lacks a field or has a non-integer bound
    """
    groups = []
    for record in records:
        if isinstance(record, CellGroup):
            groups.append(record)
            continue
        try:
            groups.append(CellGroup.from_dict(record))
        except (KeyError, TypeError, ValueError) as e:
            raise FlowGraphError(
                f"Invalid group record {record!r}: {e}",
                context={'record': record},
            ) from e
    return groups


def group_for(position: int, groups: Sequence[CellGroup]) -> Optional[CellGroup]:
    """Get the first group containing a cell position"""
    for group in groups:
        if position in group:
            return group
    return None


def label_cells(cells: Sequence[Cell], groups: Sequence[CellGroup]) -> List[Cell]:
    """
    Label each cell with the first group containing its position.

    Cells outside every group keep their current label.

    Args:
        cells: Cells in notebook order
        groups: Cell groups

    Returns:
        New list of cells
    """
    labelled = []
    for cell in cells:
        group = group_for(cell.position, groups)
        labelled.append(cell.with_label(group.label) if group else cell)
    return labelled


def build_group_graph(graph: PreliminaryGraph, cells: Sequence[Cell],
                      groups: Sequence[CellGroup],
                      default_color: str = "#f9f6ed") -> PreliminaryGraph:
    """
    Collapse a cell graph into one node per group.

    Cells outside every group stay as primary nodes. Edges are projected
    onto the collapsed nodes; edges inside one group are dropped and
    parallel edges merged. Secondary nodes are not carried over.

    Args:
        graph: Preliminary cell graph
        cells: Cells the graph was built from
        groups: Cell groups
        default_color: Color for groups missing from the color map

    Returns:
        Collapsed preliminary graph

    Raises:
        UnknownNodeReference: If an edge refers to a cell not in ``cells``
    """
    node_for_cell: Dict[str, str] = {}
    members: Dict[str, List[str]] = {}
    group_index: Dict[str, int] = {}

    for cell in cells:
        group = group_for(cell.position, groups)
        if group is None:
            node_for_cell[cell.node_id] = cell.node_id
            continue
        index = groups.index(group)
        group_id = f"{GROUP_ID_PREFIX}{index + 1}"
        node_for_cell[cell.node_id] = group_id
        members.setdefault(group_id, []).append(cell.node_id)
        group_index[group_id] = index

    nodes: List[PreliminaryNode] = []
    primary_by_id = {node.id: node for node in graph.primary_nodes}
    emitted = set()

    for cell in cells:
        node_id = node_for_cell[cell.node_id]
        if node_id in emitted:
            continue
        emitted.add(node_id)

        if node_id not in members:
            nodes.append(primary_by_id[node_id])
            continue

        group = groups[group_index[node_id]]
        size = len(members[node_id])
        footprint = GROUP_BASE_SIZE + size * GROUP_SIZE_STEP
        nodes.append(PreliminaryNode(
            id=node_id,
            label=group.label,
            kind=NodeKind.GROUP,
            data={
                'label': group.label,
                'size': size,
                'cells': members[node_id],
                'color': graph.color_map.get(group.label, default_color),
                'width': footprint,
                'height': footprint,
            },
        ))

    edges: List[PreliminaryEdge] = []
    edge_data: Dict[PreliminaryEdge, Dict] = {}

    for edge in graph.edges:
        for endpoint in (edge.source, edge.target):
            if endpoint not in node_for_cell:
                raise UnknownNodeReference(endpoint, {'edge': edge.to_dict()})

        source = node_for_cell[edge.source]
        target = node_for_cell[edge.target]
        if source == target:
            continue

        projected = PreliminaryEdge(source=source, target=target)
        variables = graph.edge_data.get(edge, {}).get('variables', [])
        if projected not in edge_data:
            edges.append(projected)
            edge_data[projected] = {'variables': []}
        merged = set(edge_data[projected]['variables']) | set(variables)
        edge_data[projected]['variables'] = sorted(merged)

    return PreliminaryGraph(
        nodes=nodes,
        edges=edges,
        edge_data=edge_data,
        extractions=dict(graph.extractions),
        color_map=dict(graph.color_map),
    )


__all__ = [
    "parse_groups",
    "group_for",
    "label_cells",
    "build_group_graph",
]
