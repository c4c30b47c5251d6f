"""
Identifier Extractor Module
===========================

Line-oriented extraction of assigned and used identifiers.

This module provides the IdentifierExtractor class which:
- Strips comments and string contents from a cell's source
- Detects assignment shapes line by line with regular expressions
- Collects identifier tokens read by the cell

It deliberately does not build an AST: cells that do not parse (partial
edits, IPython syntax) still yield a best-effort result. Known limits:
statements spanning several lines are not joined, nested function bodies
are not scoped, attribute names are reported like any other token and
function parameters count as uses.
"""

import re
from typing import Iterable, List, Optional, Set, Tuple

from notebook_flowgraph.core.config import ParsingConfig
from notebook_flowgraph.core.data_structures import Cell, ExtractionResult
from notebook_flowgraph.core.exceptions import MalformedSource


IDENTIFIER = r'[a-zA-Z_][a-zA-Z0-9_]*'

LINE_COMMENT_RE = re.compile(r'#.*$', re.MULTILINE)
TRIPLE_SINGLE_QUOTED_RE = re.compile(r"'''[\s\S]*?'''")
TRIPLE_DOUBLE_QUOTED_RE = re.compile(r'"""[\s\S]*?"""')
SINGLE_QUOTED_RE = re.compile(r"'[^']*'")
DOUBLE_QUOTED_RE = re.compile(r'"[^"]*"')

# Order matters: the first pattern matching a line decides its targets.
PLAIN_ASSIGNMENT_RE = re.compile(rf'^\s*({IDENTIFIER})\s*=(?!=)')
MULTI_ASSIGNMENT_RE = re.compile(
    rf'^\s*({IDENTIFIER}(?:\s*,\s*{IDENTIFIER})*)\s*=(?!=)'
)
AUGMENTED_ASSIGNMENT_RE = re.compile(
    rf'^\s*({IDENTIFIER})\s*(?:\*\*|//|>>|<<|[+\-*/%&|^@])='
)
FUNCTION_DEF_RE = re.compile(rf'^\s*(?:async\s+)?def\s+({IDENTIFIER})\s*\(')

ASSIGNMENT_PATTERNS: List[Tuple[str, re.Pattern]] = [
    ('plain', PLAIN_ASSIGNMENT_RE),
    ('multiple', MULTI_ASSIGNMENT_RE),
    ('augmented', AUGMENTED_ASSIGNMENT_RE),
    ('function', FUNCTION_DEF_RE),
]

TOKEN_RE = re.compile(rf'\b{IDENTIFIER}')
MAGIC_LINE_RE = re.compile(r'^\s*(?:%{1,2}[A-Za-z_]|!(?!=))')
FULL_IDENTIFIER_RE = re.compile(rf'^{IDENTIFIER}$')

EXCLUDED_NAMES = frozenset([
    # keywords
    'False', 'None', 'True', 'and', 'as', 'assert', 'async', 'await',
    'break', 'class', 'continue', 'def', 'del', 'elif', 'else', 'except',
    'finally', 'for', 'from', 'global', 'if', 'import', 'in', 'is',
    'lambda', 'nonlocal', 'not', 'or', 'pass', 'raise', 'return', 'try',
    'while', 'with', 'yield',
    # builtins
    'print', 'len', 'range', 'str', 'int', 'float', 'list', 'dict', 'set',
])


class IdentifierExtractor:
    """
    Extract the identifiers a cell assigns and uses.

    Example:
        >>> extractor = IdentifierExtractor()
        >>> result = extractor.extract("y = x + 1")
        >>> result.assigned, result.used
        ({'y'}, {'x'})
    """

    def __init__(self, config: Optional[ParsingConfig] = None):
        """
        Initialize the extractor.

        Args:
            config: Optional parsing configuration
        """
        self.config = config or ParsingConfig()
        self.excluded_names = EXCLUDED_NAMES | set(self.config.extra_excluded_names)

    def extract(self, source) -> ExtractionResult:
        """
        Extract assigned and used identifiers from one cell's source.

        Args:
            source: Source text, or a sequence of source lines

        Returns:
            ExtractionResult; empty when the source cannot be split into lines
        """
        try:
            text = self._normalize_source(source)
        except MalformedSource:
            return ExtractionResult()

        lines = self._clean_source(text).split('\n')
        if self.config.skip_magics:
            lines = [line for line in lines if not self._is_magic(line)]

        assigned: Set[str] = set()
        remainders: List[str] = []

        for line in lines:
            targets, remainder = self._match_assignment(line)
            assigned.update(targets)
            remainders.append(remainder)

        used: Set[str] = set()
        for remainder in remainders:
            for token in TOKEN_RE.findall(remainder):
                if token in self.excluded_names or token in assigned:
                    continue
                used.add(token)

        return ExtractionResult(assigned=assigned, used=used)

    def extract_cells(self, cells: Iterable[Cell]) -> List[ExtractionResult]:
        """Extract identifiers from each cell, keeping cell order"""
        return [self.extract(cell.source) for cell in cells]

    @staticmethod
    def _normalize_source(source) -> str:
        if isinstance(source, str):
            return source
        if isinstance(source, (list, tuple)) and all(isinstance(line, str) for line in source):
            return '\n'.join(source)
        raise MalformedSource(
            f"Cannot split {type(source).__name__} source into lines"
        )

    @staticmethod
    def _clean_source(text: str) -> str:
        """Remove comments and blank out string literal contents"""
        text = LINE_COMMENT_RE.sub('', text)
        text = TRIPLE_SINGLE_QUOTED_RE.sub('', text)
        text = TRIPLE_DOUBLE_QUOTED_RE.sub('', text)
        text = SINGLE_QUOTED_RE.sub("''", text)
        return DOUBLE_QUOTED_RE.sub('""', text)

    @staticmethod
    def _is_magic(line: str) -> bool:
        """Match %line and %%cell magics and !shell escapes, not operators"""
        return MAGIC_LINE_RE.match(line) is not None

    @staticmethod
    def _match_assignment(line: str) -> Tuple[Set[str], str]:
        """
        Match a line against the assignment shapes.

        Returns:
            Tuple of (assigned names, text left to scan for uses)
        """
        for shape, pattern in ASSIGNMENT_PATTERNS:
            match = pattern.match(line)
            if not match:
                continue

            if shape == 'function':
                # Parameters are local bindings; only the name is assigned.
                return {match.group(1)}, line

            names = {
                name.strip() for name in match.group(1).split(',')
                if FULL_IDENTIFIER_RE.match(name.strip())
            }
            return names, line[match.end():]

        return set(), line


def extract_identifiers(source, config: Optional[ParsingConfig] = None) -> ExtractionResult:
    """
    Convenience function extracting identifiers from a single source.

    Args:
        source: Source text, or a sequence of source lines
        config: Optional parsing configuration

    Returns:
        ExtractionResult
    """
    return IdentifierExtractor(config=config).extract(source)


__all__ = [
    "IdentifierExtractor",
    "extract_identifiers",
    "EXCLUDED_NAMES",
]
