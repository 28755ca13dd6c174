"""Workflow export discovery and batch analysis."""

from flowscore.ingestion.pipeline import run_pipeline_on_directory
from flowscore.ingestion.repo_scanner import (
    DEFAULT_IGNORE_DIRS,
    discover_workflow_files,
)

__all__ = [
    "DEFAULT_IGNORE_DIRS",
    "discover_workflow_files",
    "run_pipeline_on_directory",
]
