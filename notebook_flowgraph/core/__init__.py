"""
Core Module
===========

Fundamental data structures, enums, errors and configuration for the flow
graph system.

This module provides:
- Data structures for cells, extraction results and graph elements
- Enumerations for node kinds, artifact tags and rank directions
- The error taxonomy raised by the pipeline
- Configuration management for system-wide settings
"""

from notebook_flowgraph.core.data_structures import (
    ARTIFACT_SEPARATOR,
    Cell,
    ExtractionResult,
    PreliminaryNode,
    PreliminaryEdge,
    PositionedNode,
    NormalizedEdge,
    FlowGraph,
    CellGroup,
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
    ParsingConfig,
    ArtifactConfig,
    LayoutConfig,
    VisualizationConfig,
    get_default_config,
)

__all__ = [
    # Data structures
    "ARTIFACT_SEPARATOR",
    "Cell",
    "ExtractionResult",
    "PreliminaryNode",
    "PreliminaryEdge",
    "PositionedNode",
    "NormalizedEdge",
    "FlowGraph",
    "CellGroup",

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
    "ParsingConfig",
    "ArtifactConfig",
    "LayoutConfig",
    "VisualizationConfig",
    "get_default_config",
]
