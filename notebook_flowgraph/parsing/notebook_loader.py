"""
Notebook Loader Module
======================

Load notebook cells from various sources.

This module provides:
- NotebookLoader: Load cells from .ipynb, .py and execution trace .csv files
- Automatic format detection
- Conversion of in-memory notebook documents into Cell lists

Every load returns a fresh list of Cell values; nothing is cached between
loads.
"""

import csv
import json
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import nbformat

from notebook_flowgraph.core.data_structures import Cell
from notebook_flowgraph.core.exceptions import SourceRetrievalFailure


CELL_MARKER_RE = re.compile(r'^#\s*%%(?:\s*\[(.*?)\])?.*$', re.MULTILINE)

TRACE_EXECUTION_COLUMN = "execution_number"
TRACE_SOURCE_COLUMN = "cell_content"


class NotebookLoader:
    """
    Load notebook cells from various formats.

    Supports:
    - Jupyter notebooks (.ipynb), including recorded outputs
    - Python files (.py) split on "# %%" cell markers
    - Execution traces (.csv) with one executed cell per row

    Example:
        >>> cells = NotebookLoader.load_notebook("analysis.ipynb")
        >>> print(f"Loaded {len(cells)} cells")
    """

    SUPPORTED_FORMATS = ('.ipynb', '.py', '.csv')

    @staticmethod
    def load_notebook(file_path: Union[str, Path], verbose: bool = False) -> List[Cell]:
        """
        Auto-detect format and load cells.

        Args:
            file_path: Path to notebook file
            verbose: Whether to print a summary line

        Returns:
            List of cells in notebook order

        Raises:
            SourceRetrievalFailure: If the file is missing, unsupported or unreadable
        """
        path = Path(file_path)

        if not path.exists():
            raise SourceRetrievalFailure(str(path), "file not found")

        suffix = path.suffix.lower()

        if suffix == '.ipynb':
            cells = NotebookLoader.load_ipynb(path)
        elif suffix == '.py':
            cells = NotebookLoader.load_py(path)
        elif suffix == '.csv':
            cells = NotebookLoader.load_trace_csv(path)
        else:
            raise SourceRetrievalFailure(
                str(path),
                f"unsupported file format {suffix or '(none)'}; "
                f"supported formats: {', '.join(NotebookLoader.SUPPORTED_FORMATS)}"
            )

        if verbose:
            print(f"✓ Loaded {len(cells)} code cells from {path}")
        return cells

    @staticmethod
    def load_ipynb(file_path: Union[str, Path]) -> List[Cell]:
        """
        Load a Jupyter notebook and extract its code cells with outputs.

        Args:
            file_path: Path to .ipynb file

        Returns:
            List of cells

        Raises:
            SourceRetrievalFailure: If reading or validating the notebook fails
        """
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                nb = nbformat.read(f, as_version=4)
        except (OSError, ValueError, KeyError, AttributeError, nbformat.ValidationError) as e:
            raise SourceRetrievalFailure(str(file_path), str(e)) from e

        return NotebookLoader.cells_from_notebook(nb)

    @staticmethod
    def load_notebook_dict(data: Dict[str, Any]) -> List[Cell]:
        """
        Convert an in-memory notebook document (parsed JSON) into cells.

        Args:
            data: Notebook document as a dictionary

        Returns:
            List of cells

        Raises:
            SourceRetrievalFailure: If the document is not a valid notebook
        """
        try:
            nb = nbformat.reads(json.dumps(data), as_version=4)
        except (TypeError, ValueError, KeyError, AttributeError, nbformat.ValidationError) as e:
            raise SourceRetrievalFailure("<notebook document>", str(e)) from e

        return NotebookLoader.cells_from_notebook(nb)

    @staticmethod
    def cells_from_notebook(nb: nbformat.NotebookNode) -> List[Cell]:
        """
        Build cells from the code cells of a notebook node.

        Args:
            nb: Notebook read with nbformat (version 4)

        Returns:
            List of cells, positions numbered from 1 in notebook order
        """
        cells = []
        code_cells = [cell for cell in nb.cells if cell.cell_type == 'code']

        for position, nb_cell in enumerate(code_cells, 1):
            outputs = [
                json.loads(json.dumps(output))
                for output in nb_cell.get('outputs', [])
            ]
            cells.append(Cell(
                position=position,
                source=nb_cell.source,
                outputs=outputs,
                execution_count=nb_cell.get('execution_count'),
            ))

        return cells

    @staticmethod
    def load_py(file_path: Union[str, Path]) -> List[Cell]:
        """
        Load a Python file and split it into cells on "# %%" markers.

        Markdown cells ("# %% [markdown]") are skipped. A file without
        markers becomes a single cell.

        Args:
            file_path: Path to .py file

        Returns:
            List of cells
        """
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                content = f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise SourceRetrievalFailure(str(file_path), str(e)) from e

        return NotebookLoader.split_by_cell_markers(content)

    @staticmethod
    def split_by_cell_markers(content: str) -> List[Cell]:
        """
        Split script content by cell markers (VS Code/PyCharm style).

        Recognizes patterns like:
        - # %%
        - #%%
        - # %% [markdown]
        - # %% cell title

        Args:
            content: File content

        Returns:
            List of non-empty code cells
        """
        matches = list(CELL_MARKER_RE.finditer(content))

        if not matches:
            stripped = content.strip()
            return [Cell(position=1, source=stripped)] if stripped else []

        sources = []

        preamble = content[:matches[0].start()].strip()
        if preamble:
            sources.append(preamble)

        for i, match in enumerate(matches):
            if (match.group(1) or '').strip().lower() == 'markdown':
                continue

            start = match.end()
            end = matches[i + 1].start() if i + 1 < len(matches) else len(content)
            cell_content = content[start:end].strip()

            if cell_content:
                sources.append(cell_content)

        return [Cell(position=i, source=src) for i, src in enumerate(sources, 1)]

    @staticmethod
    def load_trace_csv(file_path: Union[str, Path]) -> List[Cell]:
        """
        Load an execution trace exported as CSV.

        Each row is one executed cell with columns ``execution_number`` and
        ``cell_content``. Rows keep their file order; traces carry no outputs.

        Args:
            file_path: Path to .csv file

        Returns:
            List of cells

        Raises:
            SourceRetrievalFailure: If the file is unreadable or lacks the columns
        """
        try:
            with open(file_path, 'r', encoding='utf-8', newline='') as f:
                reader = csv.DictReader(f)
                fieldnames = reader.fieldnames or []
                missing = [
                    column for column in (TRACE_EXECUTION_COLUMN, TRACE_SOURCE_COLUMN)
                    if column not in fieldnames
                ]
                if missing:
                    raise SourceRetrievalFailure(
                        str(file_path), f"missing trace columns: {', '.join(missing)}"
                    )
                rows = list(reader)
        except (OSError, UnicodeDecodeError, csv.Error) as e:
            raise SourceRetrievalFailure(str(file_path), str(e)) from e

        cells = []
        for row in rows:
            source = row.get(TRACE_SOURCE_COLUMN)
            if source is None:
                continue
            cells.append(Cell(
                position=len(cells) + 1,
                source=source,
                execution_count=NotebookLoader._parse_execution_number(
                    row.get(TRACE_EXECUTION_COLUMN)
                ),
            ))

        return cells

    @staticmethod
    def _parse_execution_number(value: Optional[str]) -> Optional[int]:
        if value is None or not value.strip():
            return None
        try:
            return int(float(value))
        except ValueError:
            return None

    @staticmethod
    def detect_format(file_path: Union[str, Path]) -> str:
        """
        Detect notebook format from file extension.

        Args:
            file_path: Path to file

        Returns:
            Format string: 'ipynb', 'py', 'csv' or 'unknown'
        """
        suffix = Path(file_path).suffix.lower()

        if suffix in NotebookLoader.SUPPORTED_FORMATS:
            return suffix[1:]
        return 'unknown'


__all__ = [
    "NotebookLoader",
]
