"""Tests for the health result model and its JSON serialization."""

import json

import pytest

from flowscore import analyze, health_result_to_dict
from flowscore.graph import (
    AnalysisMetadata,
    HealthScoreResult,
    LoopIssue,
    PerformanceIssue,
    Suggestion,
)


def _metadata(**overrides):
    values = dict(
        node_count=3,
        edge_count=2,
        trigger_count=1,
        unrecognized_nodes=(),
        subtype_counts=(("manual", 1),),
        has_loops=False,
        has_trigger_conflicts=False,
    )
    values.update(overrides)
    return AnalysisMetadata(**values)


def test_result_to_dict_structure():
    """Serialized dict uses the dashboard key names."""
    result = HealthScoreResult(
        score=75,
        grade="Good",
        confidence="high",
        loops=(
            LoopIssue(
                id="loop-1",
                severity="critical",
                description="Infinite loop",
                suggestion="Add exit",
                points_deducted=15,
                nodes=("b", "c"),
                guard_status="missing",
            ),
        ),
        conflicts=(),
        performance=(
            PerformanceIssue(
                id="perf-1",
                severity="high",
                description="No error handling",
                suggestion="Add branch",
                points_deducted=0,
                node_id="b",
                subtype="webhook",
                issue_type="missing_error_handling",
                already_counted=True,
            ),
        ),
        metadata=_metadata(has_loops=True),
        suggestions=(
            Suggestion(
                id="sugg-1",
                template="break_infinite_loops",
                title="Add exit conditions to loops",
                description="...",
                impact="high",
                effort="low",
                quick_tip="Add a counter",
            ),
        ),
    )
    d = health_result_to_dict(result)
    assert d["schemaVersion"] == "1.0"
    assert d["score"] == 75
    assert d["grade"] == "Good"
    assert d["loops"] == [
        {
            "id": "loop-1",
            "nodes": ["b", "c"],
            "severity": "critical",
            "guardStatus": "missing",
            "description": "Infinite loop",
            "suggestion": "Add exit",
            "pointsDeducted": 15,
        }
    ]
    assert d["conflicts"] == []
    perf = d["performance"]
    assert perf["score"] == 75
    assert perf["confidence"] == "high"
    assert perf["issues"][0]["nodeId"] == "b"
    assert perf["issues"][0]["type"] == "missing_error_handling"
    assert perf["issues"][0]["alreadyCounted"] is True
    assert d["suggestions"][0]["quickTip"] == "Add a counter"
    assert d["summary"] == {"critical": 1, "high": 1, "medium": 0, "low": 0, "total": 2}
    assert d["metadata"]["hasLoops"] is True
    assert d["metadata"]["subtypeCounts"] == {"manual": 1}
    json.dumps(d)


def test_result_to_dict_is_deterministic():
    """Two analyses of the same export serialize to identical JSON."""
    export = {
        "nodes": [
            {"id": "t1", "kind": "trigger", "subtype": "contact_created"},
            {"id": "t2", "kind": "trigger", "subtype": "link_clicked"},
            {"id": "w", "kind": "action", "subtype": "webhook"},
        ],
        "edges": [{"from": "t1", "to": "w"}, {"from": "t2", "to": "w"}, {"from": "w", "to": "t2"}],
    }
    first = json.dumps(health_result_to_dict(analyze(export)), sort_keys=True)
    second = json.dumps(health_result_to_dict(analyze(export)), sort_keys=True)
    assert first == second


def test_result_is_frozen():
    """Results cannot be mutated after construction."""
    result = HealthScoreResult(
        score=100,
        grade="Excellent",
        confidence="low",
        loops=(),
        conflicts=(),
        performance=(),
        metadata=_metadata(),
    )
    with pytest.raises(AttributeError):  # dataclass.FrozenInstanceError
        result.score = 0
