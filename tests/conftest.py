"""
Shared fixtures for the notebook_flowgraph test suite.
"""

import matplotlib

matplotlib.use("Agg")

import nbformat
import pytest
from nbformat.v4 import new_code_cell, new_markdown_cell, new_notebook, new_output

from notebook_flowgraph.core.config import Config
from notebook_flowgraph.core.data_structures import Cell


DISPLAY_OUTPUT = {
    'output_type': 'display_data',
    'data': {'image/png': 'iVBORw0KGgo=', 'text/plain': '<Figure>'},
    'metadata': {},
}

TABLE_OUTPUT = {
    'output_type': 'execute_result',
    'execution_count': 3,
    'data': {
        'text/html': '<div><table class="dataframe"><tr><td>1</td></tr></table></div>',
        'text/plain': '   a\n0  1',
    },
    'metadata': {},
}

PLAIN_RESULT_OUTPUT = {
    'output_type': 'execute_result',
    'execution_count': 4,
    'data': {'text/plain': '42'},
    'metadata': {},
}

STREAM_OUTPUT = {
    'output_type': 'stream',
    'name': 'stdout',
    'text': 'hello\n',
}


@pytest.fixture
def quiet_config():
    """Configuration with progress output disabled."""
    return Config(verbose=False)


@pytest.fixture
def sample_cells():
    """A small analysis notebook as cells."""
    return [
        Cell(1, "import pandas as pd"),
        Cell(2, "df = pd.read_csv('data.csv')"),
        Cell(3, "df.head()", outputs=[TABLE_OUTPUT]),
        Cell(4, "summary = df.describe()\nplot(summary)", outputs=[DISPLAY_OUTPUT]),
        Cell(5, "print(summary)", outputs=[STREAM_OUTPUT]),
    ]


@pytest.fixture
def notebook_path(tmp_path):
    """A Jupyter notebook on disk with markdown, code cells and outputs."""
    nb = new_notebook()
    nb.cells = [
        new_markdown_cell("# Analysis"),
        new_code_cell("x = 1", execution_count=1),
        new_code_cell(
            "y = x + 2\ny",
            execution_count=2,
            outputs=[new_output('execute_result', data={'text/plain': '3'}, execution_count=2)],
        ),
        new_code_cell(
            "show(y)",
            execution_count=3,
            outputs=[new_output('display_data', data={'image/png': 'iVBORw0KGgo='})],
        ),
    ]

    path = tmp_path / "analysis.ipynb"
    with open(path, 'w', encoding='utf-8') as f:
        nbformat.write(nb, f)
    return path


@pytest.fixture
def script_path(tmp_path):
    """A percent-format Python script."""
    path = tmp_path / "pipeline.py"
    path.write_text(
        "import numpy as np\n"
        "\n"
        "# %%\n"
        "a = np.arange(10)\n"
        "\n"
        "# %% [markdown]\n"
        "# Some notes\n"
        "\n"
        "# %% totals\n"
        "total = a.sum()\n",
        encoding='utf-8',
    )
    return path


@pytest.fixture
def trace_path(tmp_path):
    """An execution trace CSV."""
    path = tmp_path / "trace.csv"
    path.write_text(
        "execution_number,cell_content\n"
        "1,\"x = 10\"\n"
        "2,\"y = x * 2\"\n"
        "3,\"print(x, y)\"\n",
        encoding='utf-8',
    )
    return path
