"""
Exceptions Module
=================

Error types raised by the flow graph system.

Hierarchy:
- FlowGraphError (base)
  - MalformedSource: cell source cannot be line-split (recovered locally)
  - UnknownNodeReference: an edge cites a node id that does not exist
  - SourceRetrievalFailure: a notebook could not be loaded
"""

from typing import Any, Dict, Optional


class FlowGraphError(Exception):
    """Base exception for the flow graph system."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}


class MalformedSource(FlowGraphError):
    """A cell's source is neither text nor a sequence of text lines."""

    pass


class UnknownNodeReference(FlowGraphError):
    """An edge or artifact refers to a node id missing from the node set."""

    def __init__(self, node_id: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(f"Unknown node reference: {node_id!r}", context)
        self.node_id = node_id


class SourceRetrievalFailure(FlowGraphError):
    """Loading a notebook from disk failed."""

    def __init__(self, path: str, reason: str,
                 context: Optional[Dict[str, Any]] = None):
        super().__init__(f"Could not load notebook {path}: {reason}", context)
        self.path = path
        self.reason = reason


__all__ = [
    "FlowGraphError",
    "MalformedSource",
    "UnknownNodeReference",
    "SourceRetrievalFailure",
]
