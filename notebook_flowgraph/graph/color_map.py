"""
Color Map Module
================

Assign colors to cell classification labels.
"""

from typing import Dict, Iterable, List, Optional

from notebook_flowgraph.core.config import DEFAULT_PALETTE
from notebook_flowgraph.core.data_structures import Cell


def build_color_map(cells: Iterable[Cell],
                    palette: Optional[List[str]] = None) -> Dict[str, str]:
    """
    Build a label -> color mapping.

    Distinct labels are walked in first-seen order and assigned palette
    colors in turn, wrapping around when the palette runs out. Cells
    without a label are skipped.

    Args:
        cells: Cells carrying upstream classification labels
        palette: Colors to cycle through (defaults to DEFAULT_PALETTE)

    Returns:
        Insertion-ordered mapping from label to color
    """
    palette = palette or DEFAULT_PALETTE
    color_map: Dict[str, str] = {}

    for cell in cells:
        if cell.label is None or cell.label in color_map:
            continue
        color_map[cell.label] = palette[len(color_map) % len(palette)]

    return color_map


__all__ = [
    "build_color_map",
]
