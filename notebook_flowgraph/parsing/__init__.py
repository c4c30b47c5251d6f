"""
Parsing Module
==============

Source analysis and notebook loading.

This module provides:
- IdentifierExtractor: Line-oriented extraction of assigned/used identifiers
- NotebookLoader: Loading cells from .ipynb, .py and trace .csv files
"""

from notebook_flowgraph.parsing.identifier_extractor import (
    IdentifierExtractor,
    extract_identifiers,
)
from notebook_flowgraph.parsing.notebook_loader import NotebookLoader

__all__ = [
    "IdentifierExtractor",
    "extract_identifiers",
    "NotebookLoader",
]
