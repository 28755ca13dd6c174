"""
Safe batch runner: discover export files, load, analyze, serialize.
Never raises for invalid or unreadable files; collects warnings.
"""

from __future__ import annotations

from pathlib import Path

from flowscore.analysis import HealthAnalyzer
from flowscore.config import EngineConfig
from flowscore.graph import (
    GraphValidationError,
    build_workflow_graph,
    health_result_to_dict,
    load_workflow_export,
    workflow_graph_fingerprint,
)
from flowscore.ingestion.repo_scanner import discover_workflow_files
from flowscore.logs import get_logger

logger = get_logger(__name__)


def run_pipeline_on_directory(
    root_path: Path | str,
    *,
    config: EngineConfig | str | Path | dict | None = None,
) -> tuple[list[dict], list[str]]:
    """
    Analyze every workflow export under root_path. Files that cannot be read,
    parsed or validated are skipped with a warning.

    Each result dict is health_result_to_dict() output plus:
    - "source": path relative to root_path (the file name for a single file)
    - "fingerprint": hash of the normalized graph, usable as a cache key

    Args:
        root_path: Directory or single .json file to process
        config: Engine configuration (EngineConfig, YAML path, dict or None)

    Returns:
        (list of result dicts, list of warning strings). An unusable config is
        reported as a warning and the defaults are used instead.
    """
    root = Path(root_path).resolve()
    paths = discover_workflow_files(root)
    base = root.parent if root.is_file() else root
    results: list[dict] = []
    warnings: list[str] = []

    try:
        analyzer = HealthAnalyzer(config)
    except (OSError, TypeError, ValueError) as e:
        warnings.append(f"Failed to load engine config: {e}. Using default config.")
        analyzer = HealthAnalyzer(None)

    for path in paths:
        rel = str(path.relative_to(base))
        try:
            raw = load_workflow_export(path)
        except (OSError, UnicodeDecodeError, ValueError) as e:
            warnings.append(f"{rel}: could not read ({e})")
            continue

        try:
            graph = build_workflow_graph(raw, vocabulary=analyzer.vocabulary)
        except GraphValidationError as e:
            warnings.append(f"{rel}: invalid workflow ({e})")
            continue

        result_dict = health_result_to_dict(analyzer.analyze(graph))
        result_dict["source"] = rel
        result_dict["fingerprint"] = workflow_graph_fingerprint(graph)
        results.append(result_dict)

    logger.info(
        "batch_scan_finished",
        root=str(root),
        files=len(paths),
        analyzed=len(results),
        warnings=len(warnings),
    )
    return (results, warnings)
