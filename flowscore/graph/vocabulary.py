"""
Closed subtype vocabulary per node kind, plus aliases seen in platform exports.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

TRIGGER_SUBTYPES: frozenset[str] = frozenset(
    {
        "appointment_booked",
        "appointment_status_changed",
        "birthday_reminder",
        "contact_created",
        "contact_tag_added",
        "contact_tag_removed",
        "contact_updated",
        "customer_replied",
        "email_opened",
        "form_submitted",
        "inbound_webhook",
        "invoice_paid",
        "link_clicked",
        "manual",
        "opportunity_created",
        "opportunity_status_changed",
        "payment_received",
        "survey_submitted",
    }
)

ACTION_SUBTYPES: frozenset[str] = frozenset(
    {
        "add_note",
        "add_tag",
        "api",
        "assign_user",
        "bulk_email",
        "bulk_sms",
        "charge",
        "create_opportunity",
        "create_task",
        "custom_api",
        "http_request",
        "integration",
        "make",
        "notify_user",
        "payment",
        "remove_tag",
        "send_email",
        "send_sms",
        "stripe_payment",
        "update_contact",
        "voicemail_drop",
        "webhook",
        "zapier",
    }
)

CONDITION_SUBTYPES: frozenset[str] = frozenset(
    {
        "ab_split",
        "counter",
        "email_opened",
        "error_check",
        "field_check",
        "if_else",
        "link_clicked",
        "loop_limit",
        "success_check",
        "tag_check",
        "trigger_check",
        "wait_for_event",
    }
)

DELAY_SUBTYPES: frozenset[str] = frozenset(
    {
        "business_hours",
        "delay",
        "wait",
        "wait_until",
    }
)

# Alias tables are keyed by kind because "webhook" is an action but an inbound trigger.
TRIGGER_ALIASES: Mapping[str, str] = MappingProxyType(
    {
        "form_submit": "form_submitted",
        "tag_added": "contact_tag_added",
        "tag_removed": "contact_tag_removed",
        "webhook": "inbound_webhook",
        "new_contact": "contact_created",
    }
)

ACTION_ALIASES: Mapping[str, str] = MappingProxyType(
    {
        "email": "send_email",
        "sms": "send_sms",
        "webhook_call": "webhook",
        "task": "create_task",
    }
)

CONDITION_ALIASES: Mapping[str, str] = MappingProxyType(
    {
        "if/else": "if_else",
        "ifelse": "if_else",
        "condition": "if_else",
    }
)

DELAY_ALIASES: Mapping[str, str] = MappingProxyType({"wait_step": "wait"})

KNOWN_SUBTYPES: Mapping[str, frozenset[str]] = MappingProxyType(
    {
        "trigger": TRIGGER_SUBTYPES,
        "action": ACTION_SUBTYPES,
        "condition": CONDITION_SUBTYPES,
        "delay": DELAY_SUBTYPES,
    }
)

SUBTYPE_ALIASES: Mapping[str, Mapping[str, str]] = MappingProxyType(
    {
        "trigger": TRIGGER_ALIASES,
        "action": ACTION_ALIASES,
        "condition": CONDITION_ALIASES,
        "delay": DELAY_ALIASES,
    }
)


@dataclass(frozen=True)
class SubtypeVocabulary:
    """Known subtypes and aliases for each node kind."""

    known: Mapping[str, frozenset[str]] = field(default_factory=lambda: KNOWN_SUBTYPES)
    aliases: Mapping[str, Mapping[str, str]] = field(default_factory=lambda: SUBTYPE_ALIASES)

    def normalize(self, kind: str, raw_subtype: object) -> tuple[str, bool]:
        """
        Return (normalized subtype, recognized).
        Non-string or blank subtypes normalize to "" and are never recognized.
        """
        if not isinstance(raw_subtype, str):
            return ("", False)
        cleaned = raw_subtype.strip().lower()
        cleaned = cleaned.replace("-", "_").replace(" ", "_")
        cleaned = self.aliases.get(kind, {}).get(cleaned, cleaned)
        if not cleaned:
            return ("", False)
        return (cleaned, cleaned in self.known.get(kind, frozenset()))


DEFAULT_VOCABULARY = SubtypeVocabulary()
