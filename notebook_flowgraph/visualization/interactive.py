"""
Interactive Visualizer Module
==============================

Create interactive HTML views of a laid-out cell graph using vis.js.

This module provides the InteractiveVisualizer class which:
- Places nodes at their computed layout coordinates (physics disabled)
- Adds search and node-kind filter controls
- Shows cell source and carried variables in tooltips
"""

from typing import Dict, List, Any
import html
import json

from notebook_flowgraph.core.data_structures import FlowGraph, PositionedNode
from notebook_flowgraph.core.enums import ArtifactTag, NodeKind


class InteractiveVisualizer:
    """
    Create interactive HTML visualizations.

    Example:
        >>> visualizer = InteractiveVisualizer()
        >>> visualizer.create_interactive_html(graph, "graph.html")
    """

    node_shapes = {
        NodeKind.PRIMARY: 'box',
        NodeKind.SECONDARY: 'dot',
        NodeKind.GROUP: 'box',
    }

    def create_interactive_html(self, graph: FlowGraph,
                                output_file: str = "flowgraph_interactive.html",
                                statistics: Dict[str, Any] = None,
                                verbose: bool = True):
        """
        Write the interactive HTML file.

        Args:
            graph: Laid-out flow graph
            output_file: Output file path
            statistics: Optional summary numbers shown in the header
            verbose: Print a confirmation line
        """
        nodes_data, edges_data = self._build_vis_data(graph)

        html_content = self._build_html_template(
            nodes_data, edges_data, graph.color_map, statistics or {}
        )

        with open(output_file, 'w', encoding='utf-8') as f:
            f.write(html_content)

        if verbose:
            print(f"✓ Interactive HTML saved to {output_file}")

    def _build_vis_data(self, graph: FlowGraph) -> tuple:
        """
        Build nodes and edges data for vis.js.

        Args:
            graph: Laid-out flow graph

        Returns:
            Tuple of (nodes_data, edges_data)
        """
        nodes_data = []
        edges_data = []

        for node in graph.nodes:
            nodes_data.append({
                'id': node.id,
                'label': str(node.data.get('label', node.id))[:20],
                'title': self._build_node_tooltip(node),
                'color': node.data.get('color', '#f9f6ed'),
                'shape': self.node_shapes.get(node.kind, 'box'),
                'size': self._get_node_size(node),
                'group': node.kind.value,
                'x': node.x,
                'y': node.y,
                'fixed': True,
            })

        for edge in graph.edges:
            variables = edge.data.get('variables', [])
            edges_data.append({
                'id': edge.id,
                'from': edge.source,
                'to': edge.target,
                'arrows': 'to',
                'color': {'color': '#666', 'opacity': 0.6},
                'title': ', '.join(variables) if variables else '',
            })

        return nodes_data, edges_data

    def _build_node_tooltip(self, node: PositionedNode) -> str:
        """Build HTML tooltip for node."""
        if node.kind == NodeKind.SECONDARY:
            return f"<b>output: {html.escape(str(node.data.get('tag', '')))}</b>"

        if node.kind == NodeKind.GROUP:
            cells = ', '.join(node.data.get('cells', []))
            return f"<b>{html.escape(str(node.data.get('label', '')))}</b><br>cells: {cells}"

        tooltip = f"<b>Cell {html.escape(str(node.data.get('label', node.id)))}</b><br>"
        if node.data.get('group'):
            tooltip += f"{html.escape(str(node.data['group']))}<br>"
        if node.data.get('assigned'):
            tooltip += f"assigns: {html.escape(', '.join(node.data['assigned']))}<br>"
        source = node.data.get('source')
        if source:
            tooltip += f"<br><code>{html.escape(source[:200])}</code>"
        return tooltip

    def _get_node_size(self, node: PositionedNode) -> int:
        """Get node size based on kind."""
        if node.kind == NodeKind.GROUP:
            return int(node.data.get('size', 1)) * 5 + 20
        if node.kind == NodeKind.SECONDARY:
            return 12
        return 20

    @staticmethod
    def _legend_items(color_map: Dict[str, str]) -> str:
        items = []
        entries = list(color_map.items()) + [
            (f"output: {tag}", color) for tag, color in ArtifactTag.get_colors().items()
        ]
        for label, color in entries:
            items.append(
                '            <div class="legend-item">\n'
                f'                <div class="legend-color" style="background: {color};"></div>\n'
                f'                <span>{html.escape(label)}</span>\n'
                '            </div>'
            )
        return '\n'.join(items)

    def _build_html_template(self, nodes_data: List, edges_data: List,
                             color_map: Dict[str, str], statistics: Dict) -> str:
        """Build complete HTML template."""

        html_page = f"""<!DOCTYPE html>
<html>
<head>
    <title>Notebook Flow Graph - Interactive</title>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <script src="https://unpkg.com/vis-network@9.1.2/dist/vis-network.min.js"></script>
    <style>
        * {{ box-sizing: border-box; margin: 0; padding: 0; }}
        body {{
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Arial, sans-serif;
            background: #f5f5f5;
            color: #333;
        }}
        .header {{ background: white; padding: 20px; box-shadow: 0 2px 4px rgba(0,0,0,0.1); }}
        h1 {{ margin-bottom: 10px; }}
        .stats {{
            background: white;
            padding: 15px 20px;
            margin-top: 2px;
            display: grid;
            grid-template-columns: repeat(auto-fit, minmax(180px, 1fr));
            gap: 20px;
        }}
        .stat {{ display: flex; flex-direction: column; }}
        .stat-label {{ color: #666; font-size: 14px; margin-bottom: 5px; }}
        .stat-value {{ font-size: 24px; font-weight: bold; }}
        .controls {{
            background: white;
            padding: 15px 20px;
            margin-top: 2px;
            display: flex;
            gap: 15px;
            align-items: center;
            flex-wrap: wrap;
        }}
        .control-group {{ display: flex; align-items: center; gap: 8px; }}
        label {{ font-weight: 500; color: #666; }}
        select, input[type="text"], button {{
            padding: 8px 12px;
            border: 1px solid #ddd;
            border-radius: 4px;
            font-size: 14px;
        }}
        button {{ background: #3498DB; color: white; border: none; cursor: pointer; }}
        button:hover {{ background: #2980B9; }}
        #mynetwork {{
            width: 100%;
            height: calc(100vh - 280px);
            border: 1px solid #ddd;
            background: white;
            margin-top: 2px;
        }}
        .legend {{ background: white; padding: 15px 20px; margin-top: 2px; }}
        .legend-items {{ display: flex; gap: 20px; flex-wrap: wrap; }}
        .legend-item {{ display: flex; align-items: center; gap: 8px; }}
        .legend-color {{ width: 20px; height: 20px; border-radius: 4px; border: 2px solid #333; }}
    </style>
</head>
<body>
    <div class="header">
        <h1>Notebook Flow Graph</h1>
        <p>Cells, their variable dependencies and rendered outputs</p>
    </div>

    <div class="stats">
        <div class="stat">
            <span class="stat-label">Cells</span>
            <span class="stat-value">{statistics.get('cells', 0)}</span>
        </div>
        <div class="stat">
            <span class="stat-label">Dependencies</span>
            <span class="stat-value">{len(edges_data)}</span>
        </div>
        <div class="stat">
            <span class="stat-label">Outputs</span>
            <span class="stat-value">{statistics.get('artifacts', 0)}</span>
        </div>
        <div class="stat">
            <span class="stat-label">Graph Nodes</span>
            <span class="stat-value">{len(nodes_data)}</span>
        </div>
    </div>

    <div class="controls">
        <div class="control-group">
            <label for="filterKind">Show:</label>
            <select id="filterKind">
                <option value="all">All Nodes</option>
                <option value="{NodeKind.PRIMARY.value}">Cells Only</option>
                <option value="{NodeKind.GROUP.value}">Groups Only</option>
            </select>
        </div>
        <div class="control-group">
            <label for="searchNode">Search:</label>
            <input type="text" id="searchNode" placeholder="Cell number..." />
        </div>
        <button onclick="network.fit()">Reset View</button>
        <button onclick="exportGraph()">Export as PNG</button>
    </div>

    <div id="mynetwork"></div>

    <div class="legend">
        <h3 style="margin-bottom: 10px;">Legend</h3>
        <div class="legend-items">
{self._legend_items(color_map)}
        </div>
    </div>

    <script type="text/javascript">
        const allNodes = {json.dumps(nodes_data)};
        const allEdges = {json.dumps(edges_data)};

        const nodes = new vis.DataSet(allNodes);
        const edges = new vis.DataSet(allEdges);

        const container = document.getElementById('mynetwork');
        const data = {{ nodes: nodes, edges: edges }};

        const options = {{
            physics: {{ enabled: false }},
            layout: {{ hierarchical: false }},
            interaction: {{
                hover: true,
                tooltipDelay: 100,
                navigationButtons: true,
                keyboard: true
            }},
            nodes: {{
                font: {{ size: 14, face: 'Arial' }},
                borderWidth: 2
            }},
            edges: {{
                width: 2,
                smooth: {{ type: 'cubicBezier', forceDirection: 'vertical' }}
            }}
        }};

        const network = new vis.Network(container, data, options);

        document.getElementById('filterKind').addEventListener('change', function(e) {{
            const filterValue = e.target.value;
            nodes.clear();
            edges.clear();
            if (filterValue === 'all') {{
                nodes.add(allNodes);
                edges.add(allEdges);
            }} else {{
                const filtered = allNodes.filter(n => n.group === filterValue);
                const ids = new Set(filtered.map(n => n.id));
                nodes.add(filtered);
                edges.add(allEdges.filter(e => ids.has(e.from) && ids.has(e.to)));
            }}
            network.fit();
        }});

        document.getElementById('searchNode').addEventListener('input', function(e) {{
            const searchTerm = e.target.value.toLowerCase();
            if (!searchTerm) {{
                allNodes.forEach(n => nodes.update({{ id: n.id, color: n.color, borderWidth: 2 }}));
                return;
            }}
            allNodes.forEach(n => {{
                const match = n.label.toLowerCase() === searchTerm;
                nodes.update({{
                    id: n.id,
                    color: match ? '#FFD700' : n.color,
                    borderWidth: match ? 4 : 2
                }});
            }});
            const m = allNodes.find(n => n.label.toLowerCase() === searchTerm);
            if (m) network.focus(m.id, {{ scale: 1.5, animation: true }});
        }});

        function exportGraph() {{
            const canvas = document.querySelector('#mynetwork canvas');
            const link = document.createElement('a');
            link.download = 'flowgraph.png';
            link.href = canvas.toDataURL();
            link.click();
        }}
    </script>
</body>
</html>
"""
        return html_page


__all__ = [
    "InteractiveVisualizer",
]
