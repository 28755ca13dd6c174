"""
HealthAnalyzer: orchestrate graph building, loop/conflict/performance detection,
dead-branch detection, scoring and suggestions -> HealthScoreResult.
"""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Any, Mapping

from flowscore.config.data_model import EngineConfig
from flowscore.config.loader import load_engine_config
from flowscore.graph.builder import build_workflow_graph
from flowscore.graph.graph import WorkflowGraph
from flowscore.graph.health_model import HealthScoreResult
from flowscore.graph.vocabulary import SubtypeVocabulary
from flowscore.logs import get_logger
from flowscore.scoring.engine import score
from flowscore.scoring.suggestions import suggest

from flowscore.analysis.conflicts import find_conflicts
from flowscore.analysis.cycles import find_loops
from flowscore.analysis.performance import find_performance_issues
from flowscore.analysis.reachability import find_dead_branches

logger = get_logger(__name__)


class HealthAnalyzer:
    """
    Score workflow health. Holds only its configuration; every call builds a
    fresh graph and returns an independent result, so one instance can serve
    many threads or worker tasks.
    """

    def __init__(
        self,
        config: EngineConfig | str | Path | dict | None = None,
        *,
        vocabulary: SubtypeVocabulary | None = None,
    ) -> None:
        self.config = load_engine_config(config)
        self.vocabulary = vocabulary

    def analyze(self, workflow: Mapping[str, Any] | WorkflowGraph) -> HealthScoreResult:
        """
        Build a HealthScoreResult from a raw workflow export or an already built graph.

        Raises:
            GraphValidationError: if the export is structurally invalid.
        """
        if isinstance(workflow, WorkflowGraph):
            graph = workflow
        else:
            graph = build_workflow_graph(workflow, vocabulary=self.vocabulary)

        # Detectors only read the frozen graph; their order does not matter.
        loops = find_loops(graph, self.config)
        conflicts = find_conflicts(graph, self.config)
        performance = find_performance_issues(graph, self.config)
        dead_branches = find_dead_branches(graph, self.config)

        result = score(
            loops,
            conflicts,
            performance,
            graph=graph,
            config=self.config,
            dead_branches=dead_branches,
        )
        result = replace(result, suggestions=suggest(result, self.config))

        logger.info(
            "workflow_analyzed",
            score=result.score,
            grade=result.grade,
            confidence=result.confidence,
            loops=len(result.loops),
            conflicts=len(result.conflicts),
            dead_branches=len(result.dead_branches),
            performance_issues=len(result.performance),
        )
        return result


def analyze(
    workflow: Mapping[str, Any] | WorkflowGraph,
    config: EngineConfig | str | Path | dict | None = None,
) -> HealthScoreResult:
    """Convenience: run HealthAnalyzer(config).analyze(workflow)."""
    return HealthAnalyzer(config).analyze(workflow)
