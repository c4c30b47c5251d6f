"""
Enumerations Module
===================

Defines the enumeration types used throughout the flow graph system.

This module contains:
- NodeKind: Structural kind of a node in the cell graph
- ArtifactTag: Classification of a cell output that spawns a secondary node
- RankDirection: Direction in which layout ranks are stacked
"""

from enum import Enum
from typing import Dict


class NodeKind(Enum):
    """
    Structural kinds of nodes in the cell graph.

    - PRIMARY: One notebook cell
    - SECONDARY: One classified output (artifact) of a cell
    - GROUP: A collapsed group of consecutive cells
    """
    PRIMARY = "primary"
    SECONDARY = "secondary"
    GROUP = "group"

    def __str__(self) -> str:
        return self.value

    @property
    def takes_part_in_ranking(self) -> bool:
        """Check if nodes of this kind are laid out by the rank solver"""
        return self in {NodeKind.PRIMARY, NodeKind.GROUP}


class ArtifactTag(Enum):
    """
    Tags attached to cell outputs.

    - VIS: A rendered display object (plot, image, widget)
    - DF: An execution result rendered as an HTML table
    """
    VIS = "vis"
    DF = "df"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def get_colors(cls) -> Dict[str, str]:
        """Get the fill color used for each tag"""
        return {
            cls.DF.value: '#c5d0d3',
            cls.VIS.value: '#efe095',
        }


class RankDirection(Enum):
    """
    Direction in which ranks are stacked.

    - TB: Top to bottom
    - BT: Bottom to top
    - LR: Left to right
    - RL: Right to left
    """
    TB = "TB"
    BT = "BT"
    LR = "LR"
    RL = "RL"

    def __str__(self) -> str:
        return self.value

    @property
    def is_horizontal(self) -> bool:
        """Check if ranks advance along the x axis"""
        return self in {RankDirection.LR, RankDirection.RL}

    @property
    def is_reversed(self) -> bool:
        """Check if ranks advance towards negative coordinates"""
        return self in {RankDirection.BT, RankDirection.RL}


# Export all enums
__all__ = [
    "NodeKind",
    "ArtifactTag",
    "RankDirection",
]
