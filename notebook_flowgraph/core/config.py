"""
Configuration Module
====================

Configuration management for the flow graph system.

This module provides:
- Config: Main configuration class
- ParsingConfig: Identifier extraction settings
- ArtifactConfig: Output classification settings
- LayoutConfig: Rank layout and radial placement constants
- VisualizationConfig: Rendering settings
"""

from dataclasses import dataclass, field, asdict
from typing import Dict, List, Optional, Any
from pathlib import Path
import json
import os

from notebook_flowgraph.core.enums import RankDirection


DEFAULT_PALETTE = [
    '#8dd3c7',
    '#fdb462',
    '#bebada',
    '#fb8072',
    '#80b1d3',
    '#b3de69',
    '#fccde5',
    '#bc80bd',
    '#ccebc5',
    '#ffed6f',
]


@dataclass
class ParsingConfig:
    """
    Configuration for identifier extraction.

    Attributes:
        skip_magics: Ignore IPython magic (%) and shell escape (!) lines
        extra_excluded_names: Names never reported as assigned-elsewhere uses,
            in addition to the built-in keyword list
    """
    skip_magics: bool = True
    extra_excluded_names: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return asdict(self)


@dataclass
class ArtifactConfig:
    """
    Configuration for artifact classification of cell outputs.

    Attributes:
        enabled: Whether to spawn secondary nodes for outputs
        display_output_types: Output types tagged as visualizations
        result_output_types: Output types inspected for rendered tables
        html_mime_type: Payload key holding inline HTML
        table_marker: Substring marking a rendered table
    """
    enabled: bool = True
    display_output_types: List[str] = field(default_factory=lambda: ['display_data'])
    result_output_types: List[str] = field(default_factory=lambda: ['execute_result'])
    html_mime_type: str = "text/html"
    table_marker: str = "<table"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return asdict(self)


@dataclass
class LayoutConfig:
    """
    Configuration for graph layout.

    Attributes:
        rank_direction: Direction ranks are stacked in (TB, BT, LR, RL)
        align: Alignment of nodes within a rank (only UL is supported)
        node_sep: Pixels between nodes in the same rank
        rank_sep: Pixels between ranks
        margin_x: Horizontal margin around the graph
        margin_y: Vertical margin around the graph
        node_width: Layout footprint width of a primary node
        node_height: Layout footprint height of a primary node
        artifact_radius: Distance of artifact nodes from their primary node
        artifact_slots: Number of angular slots around a primary node
        crossing_sweeps: Barycenter passes used to order nodes within ranks
    """
    rank_direction: str = "TB"
    align: str = "UL"
    node_sep: float = 50
    rank_sep: float = 50
    margin_x: float = 20
    margin_y: float = 20
    node_width: float = 100
    node_height: float = 40
    artifact_radius: float = 90
    artifact_slots: int = 8
    crossing_sweeps: int = 4

    def __post_init__(self):
        """Validate layout constants"""
        RankDirection(self.rank_direction)
        if self.align != "UL":
            raise ValueError(f"Unsupported alignment: {self.align}")
        if self.artifact_slots <= 0:
            raise ValueError("artifact_slots must be positive")
        if self.crossing_sweeps < 0:
            raise ValueError("crossing_sweeps must not be negative")

    @property
    def direction(self) -> RankDirection:
        return RankDirection(self.rank_direction)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return asdict(self)


@dataclass
class VisualizationConfig:
    """
    Configuration for rendering.

    Attributes:
        enabled: Whether to render a static figure
        interactive_html: Whether to generate interactive HTML
        dpi: Resolution for output images
        figsize: Figure size for the static figure
        palette: Colors cycled through for cell labels
        default_node_color: Fill of primary nodes without a label
        default_artifact_color: Fill of secondary nodes with an unknown tag
    """
    enabled: bool = True
    interactive_html: bool = True
    dpi: int = 150
    figsize: tuple = (12, 14)
    palette: List[str] = field(default_factory=lambda: list(DEFAULT_PALETTE))
    default_node_color: str = "#f9f6ed"
    default_artifact_color: str = "#ecf0f1"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = asdict(self)
        data['figsize'] = list(self.figsize)
        return data


@dataclass
class Config:
    """
    Main configuration for the flow graph system.

    Attributes:
        parsing: Identifier extraction configuration
        artifacts: Artifact classification configuration
        layout: Layout configuration
        visualization: Rendering configuration
        output_dir: Output directory for results
        verbose: Whether to print progress
    """
    parsing: ParsingConfig = field(default_factory=ParsingConfig)
    artifacts: ArtifactConfig = field(default_factory=ArtifactConfig)
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    visualization: VisualizationConfig = field(default_factory=VisualizationConfig)
    output_dir: Path = Path("flowgraph_output")
    verbose: bool = True

    def __post_init__(self):
        self.output_dir = Path(self.output_dir)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            'parsing': self.parsing.to_dict(),
            'artifacts': self.artifacts.to_dict(),
            'layout': self.layout.to_dict(),
            'visualization': self.visualization.to_dict(),
            'output_dir': str(self.output_dir),
            'verbose': self.verbose,
        }

    def save(self, path: Path) -> None:
        """Save configuration to JSON file"""
        path = Path(path)
        with open(path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, path: Path) -> 'Config':
        """Load configuration from JSON file"""
        path = Path(path)
        with open(path, 'r') as f:
            data = json.load(f)

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Config':
        """Create configuration from dictionary"""
        visualization = dict(data.get('visualization', {}))
        if 'figsize' in visualization:
            visualization['figsize'] = tuple(visualization['figsize'])

        return cls(
            parsing=ParsingConfig(**data.get('parsing', {})),
            artifacts=ArtifactConfig(**data.get('artifacts', {})),
            layout=LayoutConfig(**data.get('layout', {})),
            visualization=VisualizationConfig(**visualization),
            output_dir=Path(data.get('output_dir', 'flowgraph_output')),
            verbose=data.get('verbose', True),
        )


def get_default_config() -> Config:
    """Get default configuration"""
    return Config()


def get_config_from_env() -> Config:
    """
    Create configuration from environment variables.

    Environment variables:
        FLOWGRAPH_OUTPUT_DIR: Output directory
        FLOWGRAPH_VERBOSE: Verbosity (true/false)
        FLOWGRAPH_RANK_DIRECTION: Rank direction (TB, BT, LR, RL)
        FLOWGRAPH_NODE_SEP: Pixels between nodes in a rank
        FLOWGRAPH_RANK_SEP: Pixels between ranks
        FLOWGRAPH_DPI: DPI for rendered figures
    """
    config = Config()

    if os.getenv('FLOWGRAPH_OUTPUT_DIR'):
        config.output_dir = Path(os.getenv('FLOWGRAPH_OUTPUT_DIR'))

    if os.getenv('FLOWGRAPH_VERBOSE'):
        config.verbose = os.getenv('FLOWGRAPH_VERBOSE').lower() == 'true'

    if os.getenv('FLOWGRAPH_RANK_DIRECTION'):
        direction = os.getenv('FLOWGRAPH_RANK_DIRECTION').upper()
        RankDirection(direction)
        config.layout.rank_direction = direction

    if os.getenv('FLOWGRAPH_NODE_SEP'):
        config.layout.node_sep = float(os.getenv('FLOWGRAPH_NODE_SEP'))

    if os.getenv('FLOWGRAPH_RANK_SEP'):
        config.layout.rank_sep = float(os.getenv('FLOWGRAPH_RANK_SEP'))

    if os.getenv('FLOWGRAPH_DPI'):
        config.visualization.dpi = int(os.getenv('FLOWGRAPH_DPI'))

    return config


# Export configuration classes
__all__ = [
    "DEFAULT_PALETTE",
    "Config",
    "ParsingConfig",
    "ArtifactConfig",
    "LayoutConfig",
    "VisualizationConfig",
    "get_default_config",
    "get_config_from_env",
]
