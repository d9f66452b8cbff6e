"""
Trigger Engine

Evaluates inbound host notifications against the configured triggers. A
trigger fires when each predicate it defines (notification, sender,
payload) deep-matches the incoming value; undefined predicates match
anything.
"""

from typing import Any, Callable, Sequence

from managers.resource_registry import ResourceRegistry
from models.domain import Action, Trigger
from models.domain.trigger import ANY
from utils.logger import get_logger, LogCategory
from utils.matching import deep_match

log = get_logger().for_category(LogCategory.TRIGGER)


def trigger_matches(trigger: Trigger, notification: Any, sender: Any, payload: Any) -> bool:
    checks = (
        (trigger.notification, notification),
        (trigger.sender, sender),
        (trigger.payload, payload),
    )
    for pattern, candidate in checks:
        if pattern is not ANY and not deep_match(pattern, candidate):
            return False
    return True


class TriggerEngine:

    def __init__(self, registry: ResourceRegistry, dispatch: Callable[[Sequence[Action]], bool]):
        self.registry = registry
        self.dispatch = dispatch

    def handle_notification(self, notification: str, sender: Any = None, payload: Any = None) -> int:
        """
        Fire every matching trigger.

        Returns:
            Number of triggers that fired
        """
        fired = 0
        for trigger in self.registry.triggers():
            if not trigger_matches(trigger, notification, sender, payload):
                continue
            log.info("Trigger matched", notification=notification, trigger=trigger.describe())
            self.dispatch(trigger.actions)
            fired += 1

        if not fired:
            log.debug("No trigger matched", notification=notification, sender=sender)
        return fired
