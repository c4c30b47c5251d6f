"""
CLI Module
==========

Command-line interface for building notebook flow graphs.

This module provides:
- Main CLI entry point
- Argument parsing
- Command handlers for the graph and info commands
"""

import argparse
import json
from pathlib import Path
from typing import List, Optional

from notebook_flowgraph import __version__
from notebook_flowgraph.core.config import Config, get_config_from_env
from notebook_flowgraph.core.enums import RankDirection
from notebook_flowgraph.core.exceptions import FlowGraphError


def create_parser() -> argparse.ArgumentParser:
    """
    Create the argument parser with all commands and options.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        prog="notebook-flowgraph",
        description="Notebook Flow Graph - Build and lay out the cell dependency graph of a notebook.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Build the graph of a Jupyter notebook
  notebook-flowgraph graph notebook.ipynb

  # Color and collapse cells by externally produced groups
  notebook-flowgraph graph notebook.ipynb --groups groups.json --collapse-groups

  # Left-to-right layout, JSON only
  notebook-flowgraph graph notebook.ipynb --rank-direction LR --format json

  # Show what each cell assigns and uses
  notebook-flowgraph info notebook.ipynb
        """
    )

    parser.add_argument(
        '--version', '-V',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # ========== GRAPH COMMAND ==========
    graph_parser = subparsers.add_parser(
        'graph',
        help='Build, lay out and save the cell graph',
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    graph_parser.add_argument(
        'notebook',
        type=str,
        help='Path to notebook file (.ipynb, .py or trace .csv)'
    )
    graph_parser.add_argument(
        '--groups',
        type=str,
        default=None,
        help='JSON file with cell groups [{"label", "cell_start", "cell_end"}, ...]'
    )
    graph_parser.add_argument(
        '--collapse-groups',
        action='store_true',
        help='Draw one node per group instead of one per cell'
    )
    graph_parser.add_argument(
        '--config',
        type=str,
        default=None,
        help='JSON configuration file (default: environment / built-in defaults)'
    )

    output_group = graph_parser.add_argument_group('Output Configuration')
    output_group.add_argument(
        '--output', '-o',
        type=str,
        default=None,
        help='Output file prefix (default: notebook file name)'
    )
    output_group.add_argument(
        '--output-dir',
        type=str,
        default=None,
        help='Output directory (default: flowgraph_output)'
    )
    output_group.add_argument(
        '--format',
        choices=['all', 'json', 'png', 'html'],
        default='all',
        help='Output format (default: all)'
    )

    layout_group = graph_parser.add_argument_group('Layout Options')
    layout_group.add_argument(
        '--rank-direction',
        choices=[d.value for d in RankDirection],
        default=None,
        help='Direction ranks are stacked in (default: TB)'
    )
    layout_group.add_argument(
        '--dpi',
        type=int,
        default=None,
        help='DPI for the PNG output'
    )

    graph_parser.add_argument(
        '--quiet', '-q',
        action='store_true',
        help='Reduce output verbosity'
    )

    # ========== INFO COMMAND ==========
    info_parser = subparsers.add_parser(
        'info',
        help='Show identifiers, outputs and dependencies per cell'
    )
    info_parser.add_argument(
        'notebook',
        type=str,
        help='Path to notebook file'
    )
    info_parser.add_argument(
        '--config',
        type=str,
        default=None,
        help='JSON configuration file (default: environment / built-in defaults)'
    )

    return parser


def build_config(args: argparse.Namespace) -> Config:
    """
    Build configuration from a config file or the environment plus CLI flags.

    Args:
        args: Parsed arguments

    Returns:
        Config
    """
    if args.config:
        try:
            config = Config.load(Path(args.config))
        except (OSError, ValueError, TypeError, AttributeError) as e:
            raise FlowGraphError(f"Could not load config file {args.config}: {e}") from e
    else:
        config = get_config_from_env()

    # info only accepts --config
    if getattr(args, 'output_dir', None):
        config.output_dir = Path(args.output_dir)
    if getattr(args, 'rank_direction', None):
        config.layout.rank_direction = args.rank_direction
    if getattr(args, 'dpi', None):
        config.visualization.dpi = args.dpi
    if getattr(args, 'quiet', False):
        config.verbose = False

    return config


def load_groups(path: str) -> list:
    """Read a JSON list of group records"""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            records = json.load(f)
    except (OSError, ValueError) as e:
        raise FlowGraphError(f"Could not read groups file {path}: {e}") from e

    if isinstance(records, dict):
        records = records.get('groups', [])
    return records


def cmd_graph(args: argparse.Namespace) -> int:
    """
    Handle the graph command.

    Args:
        args: Parsed arguments

    Returns:
        Exit code
    """
    from notebook_flowgraph.orchestrator import NotebookFlowGraphSystem, OUTPUT_FORMATS

    config = build_config(args)

    if config.verbose:
        print_header()
        print(f"Loading notebook: {args.notebook}")

    groups = load_groups(args.groups) if args.groups else None
    formats = OUTPUT_FORMATS if args.format == 'all' else (args.format,)
    output_prefix = args.output or Path(args.notebook).stem

    system = NotebookFlowGraphSystem(config=config)
    result = system.analyze_file(
        args.notebook,
        output_prefix=output_prefix,
        groups=groups,
        collapse_groups=args.collapse_groups,
        formats=formats,
    )

    if config.verbose:
        print_graph_summary(result)

    return 0


def cmd_info(args: argparse.Namespace) -> int:
    """
    Handle the info command.

    Args:
        args: Parsed arguments

    Returns:
        Exit code
    """
    from notebook_flowgraph.parsing.notebook_loader import NotebookLoader
    from notebook_flowgraph.graph.graph_builder import FlowGraphBuilder

    config = build_config(args)
    cells = NotebookLoader.load_notebook(args.notebook)
    graph = FlowGraphBuilder(config).build(cells)

    print(f"\n{args.notebook}: {len(cells)} code cells\n")

    tags_by_owner = {}
    for node in graph.secondary_nodes:
        tags_by_owner.setdefault(node.data['owner'], []).append(node.data['tag'])

    for cell in cells:
        extraction = graph.extractions[cell.position]
        print(f"[{cell.position}]")
        print(f"  assigns: {', '.join(sorted(extraction.assigned)) or '-'}")
        print(f"  uses:    {', '.join(sorted(extraction.used)) or '-'}")
        tags = tags_by_owner.get(cell.node_id)
        if tags:
            print(f"  outputs: {', '.join(tags)}")

    print("\nDependencies:")
    if not graph.edges:
        print("  (none)")
    for edge in graph.edges:
        variables = graph.edge_data.get(edge, {}).get('variables', [])
        print(f"  {edge.source} -> {edge.target}  ({', '.join(variables)})")

    return 0


def print_header():
    """Print CLI header."""
    print("\n" + "=" * 60)
    print(" " * 18 + "NOTEBOOK FLOW GRAPH")
    print(" " * 21 + f"Version {__version__}")
    print("=" * 60 + "\n")


def print_graph_summary(result: dict):
    """Print graph summary."""
    stats = result.get('statistics', {})

    print("\n" + "=" * 60)
    print("SUMMARY")
    print("=" * 60)
    print(f"  • Cells: {stats.get('cells', 0)}")
    print(f"  • Dependencies: {stats.get('edges', 0)}")
    print(f"  • Rendered outputs: {stats.get('artifacts', 0)}")
    if stats.get('groups'):
        print(f"  • Groups: {stats['groups']}")

    outputs = result.get('outputs', [])
    if outputs:
        print("\nOutput files:")
        for path in outputs:
            print(f"  • {path}")
    print()


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point.

    Args:
        argv: Argument list (defaults to sys.argv)

    Returns:
        Exit code
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    try:
        if args.command == 'graph':
            return cmd_graph(args)
        elif args.command == 'info':
            return cmd_info(args)
        else:
            parser.print_help()
            return 0

    except KeyboardInterrupt:
        print("\n\n⚠ Operation cancelled by user")
        return 130
    except (FlowGraphError, ValueError) as e:
        print(f"\n✗ Error: {e}")
        return 1
    except Exception as e:
        print(f"\n✗ Unexpected error: {type(e).__name__}: {e}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
