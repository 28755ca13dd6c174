"""
flowscore CLI: command-line interface for workflow health scoring.
"""

import argparse
import json
import sys
from pathlib import Path

from flowscore.graph import build_workflow_graph, load_workflow_export, workflow_graph_fingerprint
from flowscore.ingestion import run_pipeline_on_directory
from flowscore.logs import configure_logging


def main(argv: list[str] | None = None) -> int:
    """
    Main CLI entry point.

    Returns:
        Exit code: 0 on success, 1 on errors/warnings
    """
    parser = argparse.ArgumentParser(
        description="flowscore: Structural health scoring for marketing-automation workflows"
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # analyze command
    analyze_parser = subparsers.add_parser("analyze", help="Score workflow health")
    analyze_parser.add_argument("path", help="Path to a workflow export or a directory of exports")
    analyze_parser.add_argument(
        "--config",
        help="Engine config YAML file path (default: built-in weights and grades)",
    )
    analyze_parser.add_argument(
        "--output",
        help="Output JSON file path (default: print to stdout)",
    )
    analyze_parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Log level for stderr diagnostics (default: WARNING)",
    )
    analyze_parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit diagnostics as JSON lines",
    )

    # fingerprint command
    fingerprint_parser = subparsers.add_parser(
        "fingerprint", help="Print the normalized graph hash of a workflow export"
    )
    fingerprint_parser.add_argument("path", help="Path to a workflow export")

    args = parser.parse_args(argv)

    if args.command == "analyze":
        try:
            configure_logging(json_output=args.json_logs, level=args.log_level)
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        return _run_analyze(args.path, args.config, args.output)
    elif args.command == "fingerprint":
        configure_logging()
        return _run_fingerprint(args.path)
    else:
        parser.print_help()
        return 1


def _run_analyze(path: str, config: str | None, output: str | None) -> int:
    """
    Run the analyze command.

    A single file prints one result object; a directory prints a list.

    Args:
        path: Path to file or directory
        config: Optional engine config file path
        output: Optional output file path (None = stdout)

    Returns:
        Exit code: 0 on success, 1 on errors/warnings
    """
    try:
        path_obj = Path(path)
        if not path_obj.exists():
            print(f"Error: Path does not exist: {path}", file=sys.stderr)
            return 1
        if path_obj.is_file() and path_obj.suffix != ".json":
            print(f"Error: {path} is not a .json workflow export", file=sys.stderr)
            return 1

        results, warnings = run_pipeline_on_directory(path, config=config)

        if path_obj.is_file():
            if not results:
                for warning in warnings:
                    print(f"Error: {warning}", file=sys.stderr)
                return 1
            payload: object = results[0]
        else:
            payload = results

        output_json = json.dumps(payload, indent=2, sort_keys=True)

        if output:
            Path(output).write_text(output_json, encoding="utf-8")
        else:
            print(output_json)

        if warnings:
            for warning in warnings:
                print(f"Warning: {warning}", file=sys.stderr)
            return 1

        return 0

    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 130
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def _run_fingerprint(path: str) -> int:
    """Print the fingerprint of one workflow export."""
    try:
        graph = build_workflow_graph(load_workflow_export(path))
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 130
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    print(workflow_graph_fingerprint(graph))
    return 0


if __name__ == "__main__":
    sys.exit(main())
