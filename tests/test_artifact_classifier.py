"""
Unit tests for the Artifact Classifier and color map.

Tests cover:
- Display outputs tagged "vis"
- HTML table results tagged "df"
- Outputs that produce no tag
- Label color assignment
"""

from notebook_flowgraph.core.config import ArtifactConfig, DEFAULT_PALETTE
from notebook_flowgraph.core.data_structures import Cell
from notebook_flowgraph.core.enums import ArtifactTag
from notebook_flowgraph.graph.artifact_classifier import ArtifactClassifier
from notebook_flowgraph.graph.color_map import build_color_map

from tests.conftest import DISPLAY_OUTPUT, PLAIN_RESULT_OUTPUT, STREAM_OUTPUT, TABLE_OUTPUT


class TestArtifactClassifier:
    """Test output classification."""

    def test_display_output_is_vis(self):
        """Test display outputs are visualizations."""
        assert ArtifactClassifier().classify([DISPLAY_OUTPUT]) == [ArtifactTag.VIS]

    def test_html_table_result_is_df(self):
        """Test execution results rendering a table."""
        assert ArtifactClassifier().classify([TABLE_OUTPUT]) == [ArtifactTag.DF]

    def test_order_preserved(self):
        """Test tags follow output order."""
        tags = ArtifactClassifier().classify([DISPLAY_OUTPUT, TABLE_OUTPUT])

        assert tags == [ArtifactTag.VIS, ArtifactTag.DF]

    def test_untagged_outputs_skipped(self):
        """Test streams and plain results produce no artifact."""
        tags = ArtifactClassifier().classify([STREAM_OUTPUT, PLAIN_RESULT_OUTPUT])

        assert tags == []

    def test_html_without_table(self):
        """Test HTML results without a table marker."""
        output = {
            'output_type': 'execute_result',
            'data': {'text/html': '<b>bold</b>'},
        }

        assert ArtifactClassifier().classify_output(output) is None

    def test_html_payload_as_list_of_lines(self):
        """Test raw notebook JSON with multiline HTML."""
        output = {
            'output_type': 'execute_result',
            'data': {'text/html': ['<div>\n', '<table>\n', '</table>\n', '</div>']},
        }

        assert ArtifactClassifier().classify_output(output) == ArtifactTag.DF

    def test_missing_outputs(self):
        """Test None and empty output lists."""
        classifier = ArtifactClassifier()

        assert classifier.classify(None) == []
        assert classifier.classify([]) == []
        assert classifier.classify(["not a dict"]) == []

    def test_configurable_output_types(self):
        """Test extra display types."""
        config = ArtifactConfig(display_output_types=['display_data', 'update_display_data'])
        output = {'output_type': 'update_display_data', 'data': {}}

        assert ArtifactClassifier(config).classify([output]) == [ArtifactTag.VIS]


class TestColorMap:
    """Test label color assignment."""

    def test_first_seen_order(self):
        """Test labels get palette colors in first-seen order."""
        cells = [
            Cell(1, "", label="Setup"),
            Cell(2, "", label="Load"),
            Cell(3, "", label="Setup"),
        ]

        color_map = build_color_map(cells)

        assert list(color_map) == ["Setup", "Load"]
        assert color_map["Setup"] == DEFAULT_PALETTE[0]
        assert color_map["Load"] == DEFAULT_PALETTE[1]

    def test_unlabelled_cells_skipped(self):
        """Test cells without a label do not take a color."""
        assert build_color_map([Cell(1, ""), Cell(2, "")]) == {}

    def test_palette_wraps(self):
        """Test colors cycle when labels outnumber the palette."""
        cells = [Cell(i, "", label=f"stage-{i}") for i in range(1, 4)]

        color_map = build_color_map(cells, palette=['#111111', '#222222'])

        assert color_map == {
            'stage-1': '#111111',
            'stage-2': '#222222',
            'stage-3': '#111111',
        }

    def test_fresh_map_per_call(self):
        """Test maps do not accumulate between calls."""
        build_color_map([Cell(1, "", label="A")])

        color_map = build_color_map([Cell(1, "", label="B")])

        assert color_map == {"B": DEFAULT_PALETTE[0]}
