"""
End-to-end analyzer tests: score bounds, loop paths, conflicts, determinism and the sample workflow.
"""

import json
from pathlib import Path

import pytest

from flowscore import GraphValidationError, HealthAnalyzer, analyze, health_result_to_dict
from flowscore.graph import build_workflow_graph, load_workflow_export

EXAMPLES = Path(__file__).resolve().parent.parent / "examples"


def _node(node_id, kind, subtype, **attributes):
    return {"id": node_id, "kind": kind, "subtype": subtype, "attributes": attributes}


def _export(nodes, edges=()):
    return {"nodes": list(nodes), "edges": [{"from": s, "to": t} for s, t in edges]}


def test_single_trigger_scores_100_with_low_confidence():
    """One trigger, no edges -> 100, low confidence."""
    result = analyze(_export([_node("t", "trigger", "contact_created")]))
    assert result.score == 100
    assert result.confidence == "low"
    assert result.grade == "Excellent"
    assert result.all_issues() == ()


def test_unguarded_cycle():
    """A(trigger) -> B -> C -> B: one critical loop over [B, C], score 85."""
    result = analyze(
        _export(
            [
                _node("A", "trigger", "contact_created"),
                _node("B", "action", "add_tag"),
                _node("C", "action", "update_contact"),
            ],
            [("A", "B"), ("B", "C"), ("C", "B")],
        )
    )
    assert len(result.loops) == 1
    assert result.loops[0].nodes == ("B", "C")
    assert result.loops[0].severity == "critical"
    assert result.loops[0].points_deducted == 15
    assert result.score == 85
    assert result.metadata.has_loops


def test_bounded_counter_cycle_is_not_reported():
    """A retry loop with max_iterations is intentional."""
    result = analyze(
        _export(
            [
                _node("A", "trigger", "contact_created"),
                _node("B", "action", "add_tag"),
                _node("G", "condition", "loop_limit", max_iterations=3),
            ],
            [("A", "B"), ("B", "G"), ("G", "B")],
        )
    )
    assert result.loops == ()
    assert result.score == 100


def test_conflict_and_guard():
    """Conflicting root triggers cost 8 points; a mutex condition removes the issue."""
    nodes = [
        _node("t1", "trigger", "contact_created"),
        _node("t2", "trigger", "contact_tag_added"),
        _node("a", "action", "add_tag"),
    ]
    edges = [("t1", "a"), ("t2", "a")]
    result = analyze(_export(nodes, edges))
    assert len(result.conflicts) == 1
    assert result.conflicts[0].points_deducted == 8
    assert result.score == 92
    assert result.metadata.has_trigger_conflicts

    guarded = analyze(
        _export(
            [*nodes, _node("g", "condition", "trigger_check", checks_trigger="contact_created")],
            [*edges, ("a", "g")],
        )
    )
    assert guarded.conflicts == ()
    assert guarded.score == 100


def test_external_action_without_failure_branch():
    """Exactly one high missing_error_handling issue."""
    result = analyze(
        _export(
            [
                _node("t", "trigger", "form_submitted"),
                _node("w", "action", "webhook"),
                _node("a", "action", "add_tag"),
            ],
            [("t", "w"), ("w", "a")],
        )
    )
    missing = [i for i in result.performance if i.issue_type == "missing_error_handling"]
    assert len(missing) == 1
    assert missing[0].severity == "high"
    assert result.score == 90


@pytest.mark.parametrize(
    "export",
    [
        _export([_node("t", "trigger", "manual")]),
        _export([_node(f"w{i}", "action", "webhook", execution_time=9) for i in range(10)]),
        _export(
            [_node("a", "action", "add_tag"), _node("b", "delay", "wait"), _node("c", "delay", "wait")],
            [("a", "b"), ("b", "c"), ("c", "a")],
        ),
    ],
)
def test_score_bounds_and_issue_equivalence(export):
    """0 <= score <= 100, and score is 100 exactly when no issue was found."""
    result = analyze(export)
    assert 0 <= result.score <= 100
    assert (result.score == 100) == (len(result.all_issues()) == 0)


def test_grade_boundary_via_config():
    """Score 70 is Good and 69 is Needs Attention."""
    export = _export([_node("t", "trigger", "manual"), _node("w", "action", "webhook")], [("t", "w")])
    at_70 = analyze(export, {"weights": {"missing_error_handling": 30}})
    at_69 = analyze(export, {"weights": {"missing_error_handling": 31}})
    assert (at_70.score, at_70.grade) == (70, "Good")
    assert (at_69.score, at_69.grade) == (69, "Needs Attention")


def test_analyze_is_deterministic():
    """Running twice on the same export gives identical output."""
    export = load_workflow_export(EXAMPLES / "lead_nurture.json")
    analyzer = HealthAnalyzer()
    first = health_result_to_dict(analyzer.analyze(export))
    second = health_result_to_dict(analyzer.analyze(export))
    assert json.dumps(first, sort_keys=True) == json.dumps(second, sort_keys=True)


def test_analyzer_accepts_built_graph():
    """A prebuilt WorkflowGraph is analyzed without rebuilding."""
    export = _export([_node("t", "trigger", "manual"), _node("w", "action", "webhook")], [("t", "w")])
    graph = build_workflow_graph(export)
    assert HealthAnalyzer().analyze(graph) == HealthAnalyzer().analyze(export)


def test_invalid_export_raises():
    """Structural problems surface as GraphValidationError."""
    with pytest.raises(GraphValidationError):
        analyze({"nodes": []})


def test_invalid_config_raises():
    """Bad configuration is rejected before analysis."""
    with pytest.raises(ValueError):
        HealthAnalyzer({"weights": {"conflict": -5}})


def test_sample_lead_nurture_workflow():
    """The shipped sample: unverified loop, trigger conflict, slow SMS, unhandled email, delay chain."""
    result = analyze(load_workflow_export(EXAMPLES / "lead_nurture.json"))

    assert [l.nodes for l in result.loops] == [("4", "5", "6", "7", "12")]
    assert result.loops[0].guard_status == "unverified"
    assert result.loops[0].points_deducted == 8

    assert [c.triggers for c in result.conflicts] == [("1", "2")]

    assert [(i.id, i.node_id, i.issue_type, i.points_deducted) for i in result.performance] == [
        ("perf-1", "4", "missing_error_handling", 0),
        ("perf-2", "7", "slow_action", 5),
        ("perf-3", "7", "missing_error_handling", 0),
        ("perf-4", "8", "missing_error_handling", 10),
        ("perf-5", "9", "redundant_delay", 3),
    ]

    assert result.score == 66
    assert result.grade == "Needs Attention"
    assert result.confidence == "high"
    assert [s.template for s in result.suggestions] == [
        "separate_conflicting_triggers",
        "consolidate_email_actions",
        "verify_loop_guards",
        "add_error_handling",
        "batch_slow_actions",
        "optimize_delay_sequence",
    ]
