"""
Engine configuration: point weights, grade bands, thresholds and detector tables.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ScoringWeights:
    """Points deducted per issue type. All values are non-negative integers."""

    loop_missing_guard: int = 15
    loop_unverified_guard: int = 8
    conflict: int = 8
    slow_action: int = 5
    missing_error_handling: int = 10
    redundant_delay: int = 3
    dead_branch: int = 10


@dataclass(frozen=True)
class GradeBand:
    """Scores >= min_score (and below the previous band) get this grade."""

    min_score: int
    grade: str


DEFAULT_GRADE_BANDS: tuple[GradeBand, ...] = (
    GradeBand(90, "Excellent"),
    GradeBand(70, "Good"),
    GradeBand(50, "Needs Attention"),
    GradeBand(30, "High Risk"),
)

DEFAULT_CO_OCCURRING_TRIGGERS: tuple[frozenset[str], ...] = (
    frozenset({"contact_created", "link_clicked"}),
    frozenset({"contact_created", "contact_tag_added"}),
    frozenset({"contact_created", "form_submitted"}),
    frozenset({"contact_tag_added", "contact_updated"}),
    frozenset({"form_submitted", "inbound_webhook"}),
    frozenset({"appointment_booked", "appointment_status_changed"}),
    frozenset({"invoice_paid", "payment_received"}),
)

DEFAULT_EXTERNAL_ACTION_SUBTYPES: frozenset[str] = frozenset(
    {
        "api",
        "bulk_email",
        "bulk_sms",
        "charge",
        "custom_api",
        "http_request",
        "integration",
        "make",
        "payment",
        "send_email",
        "send_sms",
        "stripe_payment",
        "voicemail_drop",
        "webhook",
        "zapier",
    }
)


@dataclass(frozen=True)
class EngineConfig:
    """
    Everything the detectors and the scoring engine may be tuned with.
    Passed explicitly into every stage; never stored at module level.
    """

    weights: ScoringWeights = field(default_factory=ScoringWeights)
    grade_bands: tuple[GradeBand, ...] = DEFAULT_GRADE_BANDS
    floor_grade: str = "Critical"
    confidence_min_nodes: int = 3
    slow_action_seconds: float = 2.0
    co_occurring_triggers: tuple[frozenset[str], ...] = DEFAULT_CO_OCCURRING_TRIGGERS
    same_subtype_conflicts: bool = True
    mutex_keys: tuple[str, ...] = ("checks_trigger", "exclusive_with", "mutex_with")
    loop_counter_keys: tuple[str, ...] = (
        "max_iterations",
        "max_loops",
        "max_attempts",
        "counter_limit",
    )
    loop_break_keys: tuple[str, ...] = ("exit_condition", "break_condition", "break_when")
    external_action_subtypes: frozenset[str] = DEFAULT_EXTERNAL_ACTION_SUBTYPES
    failure_labels: frozenset[str] = frozenset(
        {"error", "fail", "failed", "failure", "on_error", "on_failure"}
    )
    failure_check_subtypes: frozenset[str] = frozenset({"error_check", "success_check"})
    email_action_subtypes: frozenset[str] = frozenset({"bulk_email", "send_email"})

    def triggers_co_occur(self, subtype_a: str, subtype_b: str) -> bool:
        """True when two trigger subtypes can fire on the same underlying event."""
        if subtype_a == subtype_b and self.same_subtype_conflicts:
            return True
        return frozenset({subtype_a, subtype_b}) in self.co_occurring_triggers
