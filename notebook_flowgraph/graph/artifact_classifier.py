"""
Artifact Classifier Module
==========================

Classify recorded cell outputs into artifact tags.

Each qualifying output becomes one secondary node around its cell:
- display outputs (plots, images, widgets) are tagged "vis"
- execution results rendering an HTML table (e.g. a DataFrame) are tagged "df"
"""

from typing import Any, Dict, Iterable, List, Optional

from notebook_flowgraph.core.config import ArtifactConfig
from notebook_flowgraph.core.enums import ArtifactTag


class ArtifactClassifier:
    """
    Classify a cell's outputs.

    Example:
        >>> classifier = ArtifactClassifier()
        >>> classifier.classify([{'output_type': 'display_data', 'data': {}}])
        [<ArtifactTag.VIS: 'vis'>]
    """

    def __init__(self, config: Optional[ArtifactConfig] = None):
        """
        Initialize classifier.

        Args:
            config: Optional artifact configuration
        """
        self.config = config or ArtifactConfig()

    def classify(self, outputs: Optional[Iterable[Dict[str, Any]]]) -> List[ArtifactTag]:
        """
        Classify outputs in their original order.

        Args:
            outputs: Raw output records of one cell

        Returns:
            One tag per qualifying output; outputs without a tag are skipped
        """
        tags = []

        for output in outputs or []:
            tag = self.classify_output(output)
            if tag is not None:
                tags.append(tag)

        return tags

    def classify_output(self, output: Dict[str, Any]) -> Optional[ArtifactTag]:
        """Classify a single output record"""
        if not isinstance(output, dict):
            return None

        output_type = output.get('output_type')

        if output_type in self.config.display_output_types:
            return ArtifactTag.VIS

        if output_type in self.config.result_output_types:
            html = self._html_payload(output)
            if self.config.table_marker in html:
                return ArtifactTag.DF

        return None

    def _html_payload(self, output: Dict[str, Any]) -> str:
        data = output.get('data') or {}
        html = data.get(self.config.html_mime_type, '')

        # Raw notebook JSON may store multiline strings as lists of lines
        if isinstance(html, list):
            return ''.join(str(part) for part in html)
        return html if isinstance(html, str) else ''


__all__ = [
    "ArtifactClassifier",
]
