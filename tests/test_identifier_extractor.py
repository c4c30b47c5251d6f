"""
Unit tests for the Identifier Extractor.

Tests cover:
- Assignment shapes (plain, multiple, augmented, function definitions)
- Use collection and self-reference exclusion
- Comment and string stripping
- Malformed sources and magics
"""

import pytest

from notebook_flowgraph.core.config import ParsingConfig
from notebook_flowgraph.parsing.identifier_extractor import (
    IdentifierExtractor,
    extract_identifiers,
)


@pytest.fixture
def extractor():
    return IdentifierExtractor()


class TestAssignmentShapes:
    """Test detection of assigned identifiers."""

    def test_plain_assignment(self, extractor):
        """Test a simple assignment to a literal."""
        result = extractor.extract("x = 1")

        assert result.assigned == {'x'}
        assert result.used == set()

    def test_assignment_reading_other_names(self, extractor):
        """Test the right-hand side contributes uses."""
        result = extractor.extract("y = x + offset")

        assert result.assigned == {'y'}
        assert result.used == {'x', 'offset'}

    def test_multiple_assignment(self, extractor):
        """Test tuple-style targets."""
        result = extractor.extract("a, b = split(data)")

        assert result.assigned == {'a', 'b'}
        assert result.used == {'split', 'data'}

    def test_augmented_assignment(self, extractor):
        """Test augmented operators bind their target."""
        result = extractor.extract("total += step")

        assert result.assigned == {'total'}
        assert result.used == {'step'}

    @pytest.mark.parametrize("operator", ["-=", "*=", "/=", "%=", "**=", "//=", "|=", "<<="])
    def test_augmented_operators(self, extractor, operator):
        """Test the full augmented operator family."""
        result = extractor.extract(f"acc {operator} value")

        assert result.assigned == {'acc'}
        assert result.used == {'value'}

    def test_function_definition(self, extractor):
        """Test a def binds the function name and parameters count as uses."""
        result = extractor.extract("def scale(values, factor):\n    return values * factor")

        assert result.assigned == {'scale'}
        assert result.used == {'values', 'factor'}

    def test_async_function_definition(self, extractor):
        """Test async defs are recognized."""
        result = extractor.extract("async def fetch(url):\n    pass")

        assert 'fetch' in result.assigned

    def test_comparison_is_not_assignment(self, extractor):
        """Test '==' does not count as assignment."""
        result = extractor.extract("x == y")

        assert result.assigned == set()
        assert result.used == {'x', 'y'}

    def test_keyword_argument_line_not_assignment(self, extractor):
        """Test an indented keyword-argument line inside a call."""
        result = extractor.extract("model = fit(\n    data,\n)")

        assert result.assigned == {'model'}
        assert result.used == {'fit', 'data'}


class TestUses:
    """Test detection of used identifiers."""

    def test_empty_source(self, extractor):
        """Test a cell with nothing in it."""
        result = extractor.extract("")

        assert result.assigned == set()
        assert result.used == set()
        assert result.is_empty

    def test_no_assignments_no_uses(self, extractor):
        """Test a cell of keywords and literals only."""
        result = extractor.extract("pass\n42\n")

        assert result.is_empty

    def test_keywords_and_builtins_excluded(self, extractor):
        """Test keywords and the builtin list are never uses."""
        result = extractor.extract("for i in range(len(items)):\n    print(i)")

        assert result.used == {'i', 'items'}

    def test_self_reference_excluded(self, extractor):
        """Test a name assigned in the cell is never reported as used."""
        result = extractor.extract("x = x + 1")

        assert result.assigned == {'x'}
        assert result.used == set()

    def test_intra_cell_use(self, extractor):
        """Test a name assigned then read in the same cell."""
        result = extractor.extract("x = 1\nprint(x)")

        assert result.assigned == {'x'}
        assert result.used == set()

    def test_attribute_names_reported(self, extractor):
        """Test attribute tokens are reported like other names."""
        result = extractor.extract("df.head()")

        assert result.used == {'df', 'head'}

    def test_numeric_literal_exponent_not_identifier(self, extractor):
        """Test digits followed by letters do not yield a token."""
        result = extractor.extract("limit = 1e5")

        assert result.used == set()


class TestSourceCleaning:
    """Test comment and string stripping."""

    def test_comments_removed(self, extractor):
        """Test names inside comments are ignored."""
        result = extractor.extract("y = 2  # depends on hidden_name")

        assert result.used == set()

    def test_string_contents_removed(self, extractor):
        """Test names inside string literals are ignored."""
        result = extractor.extract("label = 'some words' + \"more words\"")

        assert result.assigned == {'label'}
        assert result.used == set()

    def test_triple_quoted_strings_removed(self, extractor):
        """Test multi-line strings are dropped entirely."""
        result = extractor.extract('doc = """\nalpha = beta\n"""')

        assert result.assigned == {'doc'}
        assert result.used == set()

    def test_list_of_lines_source(self, extractor):
        """Test sources given as a list of lines."""
        result = extractor.extract(["a = 1", "b = a + c"])

        assert result.assigned == {'a', 'b'}
        assert result.used == {'c'}


class TestMalformedAndMagics:
    """Test best-effort behavior on odd inputs."""

    @pytest.mark.parametrize("source", [None, 42, {"code": "x = 1"}, ["x = 1", 3]])
    def test_malformed_source_yields_empty_result(self, extractor, source):
        """Test sources that cannot be split into lines."""
        result = extractor.extract(source)

        assert result.assigned == set()
        assert result.used == set()

    def test_magic_lines_skipped(self, extractor):
        """Test IPython magics and shell escapes are ignored."""
        result = extractor.extract("%matplotlib inline\n!pip install something\nz = 3")

        assert result.assigned == {'z'}
        assert result.used == set()

    def test_operator_continuation_lines_scanned(self, extractor):
        """Test continuation lines starting with % or != are not magics."""
        modulo = extractor.extract("y = (a\n     % b)")
        compare = extractor.extract("ok = (a\n      != b)")

        assert modulo.used == {'a', 'b'}
        assert compare.used == {'a', 'b'}

    def test_cell_magic_skipped(self, extractor):
        """Test %%cell magics and spaced shell escapes are ignored."""
        result = extractor.extract("%%time\n! ls data\ntotal = values")

        assert result.assigned == {'total'}
        assert result.used == {'values'}

    def test_magic_lines_scanned_when_enabled(self):
        """Test magics are scanned when skipping is turned off."""
        extractor = IdentifierExtractor(config=ParsingConfig(skip_magics=False))

        result = extractor.extract("%timeit compute(data)")

        assert {'timeit', 'compute', 'data'} <= result.used

    def test_extra_excluded_names(self):
        """Test configurable exclusions."""
        config = ParsingConfig(extra_excluded_names=['display'])

        result = extract_identifiers("display(frame)", config=config)

        assert result.used == {'frame'}

    def test_extract_cells_keeps_order(self, extractor, sample_cells):
        """Test batch extraction returns one result per cell in order."""
        results = extractor.extract_cells(sample_cells)

        assert len(results) == len(sample_cells)
        assert results[1].assigned == {'df'}
        assert results[3].assigned == {'summary'}
