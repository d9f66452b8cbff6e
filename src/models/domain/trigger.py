"""Trigger domain model"""

from dataclasses import dataclass
from typing import Any, Optional, Tuple

from models.domain.action import Action

# Sentinel for "no predicate"; None is a legitimate payload to match on
ANY = object()


@dataclass(frozen=True)
class Trigger:
    """Fires its actions when every present predicate deep-matches an incoming notification"""
    actions: Tuple[Action, ...]
    notification: Any = ANY
    sender: Any = ANY
    payload: Any = ANY

    def describe(self) -> str:
        parts = []
        for label in ("notification", "sender", "payload"):
            value = getattr(self, label)
            if value is not ANY:
                parts.append(f"{label}={value!r}")
        return ", ".join(parts) or "<any>"
