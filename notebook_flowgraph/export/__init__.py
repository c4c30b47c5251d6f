"""
Export Module
=============

Export flow graphs to files.

This module provides:
- JSONExporter: Export to JSON format
"""

from notebook_flowgraph.export.json_export import JSONExporter

__all__ = [
    "JSONExporter",
]
