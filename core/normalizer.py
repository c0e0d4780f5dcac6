# =============================================================================
# core/normalizer.py  —  Raw Unipile Records → Fixed-shape Output
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Turns loosely-typed Unipile dicts into Account / Message objects with
#   every field present.
#
# HOW:
#   Each entity has a table of FieldRules:
#
#       FieldRule("name", sources=("name", "label", "email", "type"), default="Unknown")
#
#   reads "take the first of name → label → email → type that is set,
#   otherwise 'Unknown'".  One generic routine (normalize_record) walks any
#   table, so the accounts tool and the messages tool share the same code.
#
# EMPTY RESULTS:
#   An empty list is replaced by a single {"message": "No <things> found."}
#   object.  Consumers must read that as "zero results", not as a record.
# =============================================================================

from dataclasses import dataclass
from typing import Any

from core.models import Account, Message


@dataclass(frozen=True)
class FieldRule:
    """How one output field is derived from a raw record."""

    name: str
    sources: tuple[str, ...]
    default: Any = None
    blank_is_missing: bool = False   # Also fall back on "" (not just None)

    def pick(self, raw: dict[str, Any]) -> Any:
        for source in self.sources:
            value = raw.get(source)
            if value is None:
                continue
            if self.blank_is_missing and value == "":
                continue
            return value
        return self.default


ACCOUNT_FIELDS: tuple[FieldRule, ...] = (
    FieldRule("id", ("id",), "Unknown"),
    FieldRule("name", ("name", "label", "email", "type"), "Unknown"),
    FieldRule("email", ("email",), "N/A"),
    FieldRule("type", ("type",), "Unknown"),
    FieldRule("provider", ("provider",), "Unknown"),
    FieldRule("status", ("status",), "Unknown"),
)

MESSAGE_FIELDS: tuple[FieldRule, ...] = (
    FieldRule("id", ("id",)),
    FieldRule("subject", ("subject",), "(no subject)", blank_is_missing=True),
    FieldRule("from_", ("from",)),
    FieldRule("snippet", ("snippet",)),
    FieldRule("date", ("date",)),
)


def normalize_record(raw: dict[str, Any], rules: tuple[FieldRule, ...]) -> dict[str, Any]:
    """Apply a FieldRule table to one raw record."""
    return {rule.name: rule.pick(raw) for rule in rules}


def normalize_accounts(records: list[dict[str, Any]]) -> list[Account]:
    return [Account(**normalize_record(raw, ACCOUNT_FIELDS)) for raw in records]


def normalize_messages(records: list[dict[str, Any]]) -> list[Message]:
    return [
        Message(index=position, **normalize_record(raw, MESSAGE_FIELDS))
        for position, raw in enumerate(records, start=1)
    ]


def as_payload(items: list[Account] | list[Message], noun: str) -> list[dict[str, Any]] | dict[str, str]:
    """Serialize items, or return the empty-result sentinel.

    Args:
        items: Normalized Account or Message objects.
        noun: Plural used in the sentinel text ("accounts", "emails").
    """
    if not items:
        return {"message": f"No {noun} found."}
    return [item.to_dict() for item in items]
