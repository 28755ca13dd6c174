"""Tests for trigger conflict detection and mutual-exclusion guards."""

from flowscore.analysis import find_conflicts, has_mutex_guard
from flowscore.config import EngineConfig
from flowscore.graph import build_workflow_graph


def _node(node_id, kind, subtype, **attributes):
    return {"id": node_id, "kind": kind, "subtype": subtype, "attributes": attributes}


def _graph(nodes, edges):
    return build_workflow_graph(
        {"nodes": list(nodes), "edges": [{"from": s, "to": t} for s, t in edges]}
    )


def _two_triggers(first="contact_created", second="link_clicked", extra_nodes=(), extra_edges=()):
    return _graph(
        [
            _node("t1", "trigger", first),
            _node("t2", "trigger", second),
            _node("a", "action", "add_tag"),
            *extra_nodes,
        ],
        [("t1", "a"), ("t2", "a"), *extra_edges],
    )


def test_co_occurring_triggers_conflict():
    """Configured co-occurring pair without a guard -> one medium, 8-point conflict."""
    conflicts = find_conflicts(_two_triggers(), EngineConfig())
    assert len(conflicts) == 1
    c = conflicts[0]
    assert c.id == "conflict-1"
    assert c.triggers == ("t1", "t2")
    assert c.trigger_subtypes == ("contact_created", "link_clicked")
    assert c.severity == "medium"
    assert c.points_deducted == 8


def test_unrelated_triggers_do_not_conflict():
    """Pairs outside the co-occurrence table are fine."""
    g = _two_triggers(first="birthday_reminder", second="invoice_paid")
    assert find_conflicts(g, EngineConfig()) == ()


def test_same_subtype_triggers_conflict_by_default():
    """Two identical trigger subtypes conflict unless disabled in config."""
    g = _two_triggers(first="form_submitted", second="form_submitted")
    assert len(find_conflicts(g, EngineConfig())) == 1
    assert find_conflicts(g, EngineConfig(same_subtype_conflicts=False)) == ()


def test_mutex_guard_by_trigger_id_removes_conflict():
    """A downstream condition checking the other trigger's id is a guard."""
    g = _two_triggers(
        extra_nodes=[_node("g", "condition", "trigger_check", checks_trigger="t2")],
        extra_edges=[("a", "g")],
    )
    assert find_conflicts(g, EngineConfig()) == ()


def test_mutex_guard_by_subtype_list_removes_conflict():
    """A guard may name the other trigger's subtype inside a list."""
    g = _graph(
        [
            _node("t1", "trigger", "contact_created"),
            _node("t2", "trigger", "form_submitted"),
            _node("g", "condition", "if_else", exclusive_with=["Form Submitted"]),
            _node("a", "action", "send_email"),
        ],
        [("t1", "g"), ("g", "a"), ("t2", "a")],
    )
    assert find_conflicts(g, EngineConfig()) == ()


def test_guard_must_reference_the_other_trigger():
    """A condition naming an unrelated trigger does not count."""
    g = _two_triggers(
        extra_nodes=[_node("g", "condition", "trigger_check", checks_trigger="invoice_paid")],
        extra_edges=[("a", "g")],
    )
    assert len(find_conflicts(g, EngineConfig())) == 1


def test_has_mutex_guard_direction():
    """Guard is searched downstream of the first trigger only."""
    g = _graph(
        [
            _node("t1", "trigger", "contact_created"),
            _node("t2", "trigger", "link_clicked"),
            _node("g", "condition", "trigger_check", mutex_with="t2"),
        ],
        [("t1", "g")],
    )
    t1, t2 = g.nodes["t1"], g.nodes["t2"]
    assert has_mutex_guard(g, t1, t2, EngineConfig())
    assert not has_mutex_guard(g, t2, t1, EngineConfig())


def test_non_root_triggers_are_ignored():
    """Only in-degree zero triggers are entry points."""
    g = _graph(
        [
            _node("t1", "trigger", "contact_created"),
            _node("a", "action", "add_tag"),
            _node("t2", "trigger", "link_clicked"),
        ],
        [("t1", "a"), ("a", "t2")],
    )
    assert find_conflicts(g, EngineConfig()) == ()


def test_unrecognized_trigger_is_ignored():
    """Unknown trigger subtypes cannot be judged."""
    g = _two_triggers(first="mystery_event", second="mystery_event")
    assert find_conflicts(g, EngineConfig()) == ()


def test_conflict_table_from_config():
    """Co-occurrence pairs come from configuration."""
    g = _two_triggers(first="birthday_reminder", second="manual")
    config = EngineConfig(co_occurring_triggers=(frozenset({"birthday_reminder", "manual"}),))
    assert len(find_conflicts(g, config)) == 1
    assert find_conflicts(_two_triggers(), config) == ()


def test_three_triggers_yield_each_pair_once():
    """Three mutually conflicting triggers -> three pairs, numbered in order."""
    g = _graph(
        [
            _node("t1", "trigger", "form_submitted"),
            _node("t2", "trigger", "form_submitted"),
            _node("t3", "trigger", "form_submitted"),
        ],
        [],
    )
    conflicts = find_conflicts(g, EngineConfig())
    assert [c.triggers for c in conflicts] == [("t1", "t2"), ("t1", "t3"), ("t2", "t3")]
    assert [c.id for c in conflicts] == ["conflict-1", "conflict-2", "conflict-3"]
