"""
Notebook Flow Graph
===================

Turn the code cells of a computational notebook into a laid-out dependency
graph: one node per cell, an edge wherever a later cell reads a variable an
earlier cell last assigned, and satellite nodes for rendered outputs.

Main Components:
- Core: Data structures, enums, errors and configuration
- Parsing: Identifier extraction and notebook loading
- Graph: Dependency tracking, output classification and grouping
- Visualization: Rank layout with radial output placement, rendering
- Export: JSON export

Usage:
    >>> from notebook_flowgraph import NotebookFlowGraphSystem, Cell
    >>> system = NotebookFlowGraphSystem()
    >>> result = system.build_graph([Cell(1, "x = 1"), Cell(2, "print(x)")])
    >>> system.save_all(result, prefix="output")

    # Or use convenience function
    >>> from notebook_flowgraph import build_notebook_graph
    >>> result = build_notebook_graph("notebook.ipynb")
"""

__version__ = "0.1.0"
__license__ = "MIT"

from notebook_flowgraph.core.data_structures import (
    Cell,
    CellGroup,
    ExtractionResult,
    PreliminaryNode,
    PreliminaryEdge,
    PositionedNode,
    NormalizedEdge,
    FlowGraph,
)

from notebook_flowgraph.core.enums import (
    NodeKind,
    ArtifactTag,
    RankDirection,
)

from notebook_flowgraph.core.exceptions import (
    FlowGraphError,
    MalformedSource,
    UnknownNodeReference,
    SourceRetrievalFailure,
)

from notebook_flowgraph.core.config import (
    Config,
    get_default_config,
)

from notebook_flowgraph.parsing.identifier_extractor import IdentifierExtractor
from notebook_flowgraph.parsing.notebook_loader import NotebookLoader
from notebook_flowgraph.graph.dependency_tracker import DependencyTracker
from notebook_flowgraph.graph.artifact_classifier import ArtifactClassifier
from notebook_flowgraph.graph.color_map import build_color_map
from notebook_flowgraph.visualization.layout import GraphLayoutEngine

# Main orchestrator
from notebook_flowgraph.orchestrator import (
    NotebookFlowGraphSystem,
    build_notebook_graph,
)

__all__ = [
    # Version info
    "__version__",
    "__license__",

    # Main system
    "NotebookFlowGraphSystem",
    "build_notebook_graph",

    # Components
    "IdentifierExtractor",
    "DependencyTracker",
    "ArtifactClassifier",
    "GraphLayoutEngine",
    "build_color_map",
    "NotebookLoader",

    # Core data structures
    "Cell",
    "CellGroup",
    "ExtractionResult",
    "PreliminaryNode",
    "PreliminaryEdge",
    "PositionedNode",
    "NormalizedEdge",
    "FlowGraph",

    # Enums
    "NodeKind",
    "ArtifactTag",
    "RankDirection",

    # Errors
    "FlowGraphError",
    "MalformedSource",
    "UnknownNodeReference",
    "SourceRetrievalFailure",

    # Configuration
    "Config",
    "get_default_config",
]
