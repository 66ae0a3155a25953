"""
Presence rules and the merge routine behind partial updates.

A partial update only overwrites the stored fields whose incoming value is
"present". What counts as present depends on the field's rule:

- ``TEXT``: None or blank after stripping is absent; otherwise the
  stripped text is applied.
- ``COLLECTION``: None or empty is absent; otherwise applied as-is.
- ``SCALAR``: anything but None is present.

Each document type declares its rules in a ``merge_rules`` table.
"""

from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Tuple

from pydantic import BaseModel

EXCLUDED_FIELDS = frozenset({"id", "version", "created_at"})

_ABSENT = object()


class PresenceRule(Enum):
    """How to decide whether an incoming value should overwrite a field."""

    TEXT = "text"
    COLLECTION = "collection"
    SCALAR = "scalar"


def present_value(value: Any, rule: PresenceRule) -> Tuple[bool, Any]:
    """Return ``(is_present, value_to_apply)`` for an incoming value."""
    if value is None:
        return False, None
    if rule is PresenceRule.TEXT and isinstance(value, str):
        stripped = value.strip()
        return (bool(stripped), stripped)
    if rule is PresenceRule.COLLECTION and len(value) == 0:
        return False, None
    return True, value


def missing_rules(
    field_names: Iterable[str],
    rules: Mapping[str, PresenceRule],
    excluded: Iterable[str] = EXCLUDED_FIELDS,
) -> List[str]:
    """Mergeable fields that have no presence rule."""
    skip = set(excluded)
    return [name for name in field_names if name not in skip and name not in rules]


def merge_present_fields(
    source: BaseModel,
    target: BaseModel,
    rules: Mapping[str, PresenceRule],
    excluded: Iterable[str] = EXCLUDED_FIELDS,
) -> Dict[str, Any]:
    """Copy present values from ``source`` onto ``target`` in place.

    Returns the fields that were applied with their new values.
    """
    skip = set(excluded)
    applied: Dict[str, Any] = {}
    for name, rule in rules.items():
        if name in skip:
            continue
        incoming = getattr(source, name, _ABSENT)
        if incoming is _ABSENT:
            continue
        present, value = present_value(incoming, rule)
        if present:
            setattr(target, name, value)
            applied[name] = value
    return applied
