"""
SuggestionGenerator: map issue categories to ranked, human-actionable recommendations.
At most one suggestion per template per run.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from flowscore.config.data_model import EngineConfig
from flowscore.graph.health_model import HealthScoreResult, Suggestion

LEVEL_RANK = {"low": 0, "medium": 1, "high": 2}


def _perf_count(result: HealthScoreResult, issue_type: str) -> int:
    return sum(1 for i in result.performance if i.issue_type == issue_type)


def _email_action_count(result: HealthScoreResult, config: EngineConfig) -> int:
    return sum(result.metadata.subtype_count(s) for s in sorted(config.email_action_subtypes))


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


@dataclass(frozen=True)
class SuggestionTemplate:
    key: str
    title: str
    impact: str
    effort: str
    quick_tip: str
    applies: Callable[[HealthScoreResult, EngineConfig], bool]
    describe: Callable[[HealthScoreResult, EngineConfig], str]


TEMPLATES: tuple[SuggestionTemplate, ...] = (
    SuggestionTemplate(
        key="break_infinite_loops",
        title="Add exit conditions to loops",
        impact="high",
        effort="low",
        quick_tip="Add a counter condition or exit criteria after 3 iterations",
        applies=lambda r, c: any(l.guard_status == "missing" for l in r.loops),
        describe=lambda r, c: (
            "Loops with no condition step to end them: "
            f"{sum(1 for l in r.loops if l.guard_status == 'missing')}. They can run forever."
        ),
    ),
    SuggestionTemplate(
        key="verify_loop_guards",
        title="Make loop limits explicit",
        impact="medium",
        effort="low",
        quick_tip="Set a maximum iteration count on the condition that controls the loop",
        applies=lambda r, c: any(l.guard_status == "unverified" for l in r.loops),
        describe=lambda r, c: (
            "Loops whose condition step declares no counter or exit rule: "
            f"{sum(1 for l in r.loops if l.guard_status == 'unverified')}."
        ),
    ),
    SuggestionTemplate(
        key="remove_dead_branches",
        title="Connect or remove unreachable steps",
        impact="medium",
        effort="low",
        quick_tip="Connect this node to the workflow or remove it",
        applies=lambda r, c: bool(r.dead_branches),
        describe=lambda r, c: (
            f"{_plural(len(r.dead_branches), 'step')} cannot be reached from any trigger "
            "and will never run."
        ),
    ),
    SuggestionTemplate(
        key="separate_conflicting_triggers",
        title="Prevent simultaneous triggers",
        impact="high",
        effort="medium",
        quick_tip="Add a delay or mutex condition between triggers",
        applies=lambda r, c: bool(r.conflicts),
        describe=lambda r, c: (
            f"{_plural(len(r.conflicts), 'trigger pair')} can fire for the same contact "
            "and run the workflow twice."
        ),
    ),
    SuggestionTemplate(
        key="consolidate_email_actions",
        title="Consolidate email actions",
        impact="high",
        effort="medium",
        quick_tip="Use custom fields in one email template instead of multiple separate emails",
        applies=lambda r, c: _email_action_count(r, c) >= 2,
        describe=lambda r, c: (
            f"You have {_email_action_count(r, c)} email send actions. "
            "Consider using a single template with conditional content."
        ),
    ),
    SuggestionTemplate(
        key="batch_slow_actions",
        title="Speed up slow actions",
        impact="medium",
        effort="medium",
        quick_tip="Batch multiple actions together or use webhooks for async processing",
        applies=lambda r, c: _perf_count(r, "slow_action") > 0,
        describe=lambda r, c: (
            f"Slow steps found: {_perf_count(r, 'slow_action')} over the "
            f"{c.slow_action_seconds:g}s execution time threshold."
        ),
    ),
    SuggestionTemplate(
        key="add_error_handling",
        title="Add error handling",
        impact="medium",
        effort="low",
        quick_tip='Add "If/Else" condition after critical actions to check success/failure',
        applies=lambda r, c: _perf_count(r, "missing_error_handling") > 0,
        describe=lambda r, c: (
            f"No error handling detected on {_plural(_perf_count(r, 'missing_error_handling'), 'external action')}. "
            "Add fallback actions for failed steps."
        ),
    ),
    SuggestionTemplate(
        key="optimize_delay_sequence",
        title="Optimize delay sequence",
        impact="low",
        effort="low",
        quick_tip="Combine consecutive delays into a single delay action",
        applies=lambda r, c: _perf_count(r, "redundant_delay") > 0,
        describe=lambda r, c: "Multiple consecutive delays can be combined for better performance.",
    ),
    SuggestionTemplate(
        key="map_custom_steps",
        title="Review custom steps",
        impact="low",
        effort="low",
        quick_tip="Use standard step types where possible so every step can be checked",
        applies=lambda r, c: bool(r.metadata.unrecognized_nodes),
        describe=lambda r, c: (
            f"Steps with a type the analyzer does not know: {len(r.metadata.unrecognized_nodes)}. "
            "Their checks were skipped."
        ),
    ),
)


def suggest(
    result: HealthScoreResult,
    config: EngineConfig,
    templates: tuple[SuggestionTemplate, ...] = TEMPLATES,
) -> tuple[Suggestion, ...]:
    """
    One suggestion per applicable template, ranked by impact (high first),
    then effort (low first), then template order.
    """
    matched = [t for t in templates if t.applies(result, config)]
    ranked = sorted(
        enumerate(matched),
        key=lambda pair: (-LEVEL_RANK[pair[1].impact], LEVEL_RANK[pair[1].effort], pair[0]),
    )
    return tuple(
        Suggestion(
            id=f"sugg-{index}",
            template=t.key,
            title=t.title,
            description=t.describe(result, config),
            impact=t.impact,
            effort=t.effort,
            quick_tip=t.quick_tip,
        )
        for index, (_, t) in enumerate(ranked, start=1)
    )
