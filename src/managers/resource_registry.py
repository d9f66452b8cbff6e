"""
Resource Registry

Owns the canonical name -> record maps for resources, scenes and
animations, plus the trigger list. Populated once at startup; afterwards
only the runtime fields inside each record change.

Invariants:
- resource names are unique and non-empty
- resource pins are unique
- scene names and animation names are unique within their own kind
- a rejected registration leaves the registry untouched
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Union

from models.domain import Resource, LedResource, OutputResource, ButtonResource, Scene, Animation, Trigger
from models.enums import ResourceKind
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.CONFIG)

Registrable = Union[Resource, Scene, Animation]


@dataclass(frozen=True)
class RegistrationResult:
    ok: bool
    reason: Optional[str] = None

    def __bool__(self) -> bool:
        return self.ok


class ResourceRegistry:

    def __init__(self):
        self._resources: Dict[str, Resource] = {}
        self._pins: Dict[int, str] = {}  # pin -> resource name
        self._scenes: Dict[str, Scene] = {}
        self._animations: Dict[str, Animation] = {}
        self._triggers: List[Trigger] = []

    # -------------------------------
    # Registration
    # -------------------------------

    def register(self, kind: Optional[ResourceKind], candidate: Registrable) -> RegistrationResult:
        """
        Register a validated record.

        Args:
            kind: ResourceKind for resources, None for scenes and animations
            candidate: Record produced by the config validator

        Returns:
            RegistrationResult; falsy with a reason when rejected
        """
        if isinstance(candidate, Scene):
            return self._register_named(self._scenes, candidate, "scene")
        if isinstance(candidate, Animation):
            return self._register_named(self._animations, candidate, "animation")

        if not isinstance(candidate, Resource) or candidate.kind != kind:
            return self._reject(f"Record {candidate!r} is not a {kind.name if kind else 'resource'}")

        if not candidate.name:
            return self._reject("Resource name must not be empty")

        if candidate.name in self._resources:
            return self._reject(
                f"The name \"{candidate.name}\" is already assigned. "
                f"The {kind.name} on pin {candidate.pin} cannot be initialized."
            )

        if candidate.pin in self._pins:
            return self._reject(
                f"The pin number provided ({candidate.pin}) is already in use by "
                f"\"{self._pins[candidate.pin]}\". The {kind.name} \"{candidate.name}\" cannot be initialized."
            )

        self._resources[candidate.name] = candidate
        self._pins[candidate.pin] = candidate.name
        log.debug(f"{kind.name} registered", name=candidate.name, pin=candidate.pin)
        return RegistrationResult(True)

    def add_trigger(self, trigger: Trigger) -> None:
        self._triggers.append(trigger)

    def _register_named(self, table: Dict, candidate, label: str) -> RegistrationResult:
        if not candidate.name:
            return self._reject(f"A {label} name must not be empty")
        if candidate.name in table:
            return self._reject(f"The {label} name \"{candidate.name}\" is already assigned.")
        table[candidate.name] = candidate
        log.debug(f"{label.capitalize()} registered", name=candidate.name)
        return RegistrationResult(True)

    @staticmethod
    def _reject(reason: str) -> RegistrationResult:
        log.warn(reason)
        return RegistrationResult(False, reason)

    # -------------------------------
    # Read access
    # -------------------------------

    def get_resource(self, name: Optional[str]) -> Optional[Resource]:
        return self._resources.get(name) if name else None

    def get_scene(self, name: Optional[str]) -> Optional[Scene]:
        return self._scenes.get(name) if name else None

    def get_animation(self, name: Optional[str]) -> Optional[Animation]:
        return self._animations.get(name) if name else None

    def lookup(self, name: Optional[str]) -> Optional[Registrable]:
        """Resource first, then scene, then animation"""
        return self.get_resource(name) or self.get_scene(name) or self.get_animation(name)

    def snapshot_all(self) -> Dict[str, List[dict]]:
        return {
            "resources": [r.snapshot() for r in self._resources.values()],
            "scenes": [s.snapshot() for s in self._scenes.values()],
            "animations": [a.snapshot() for a in self._animations.values()],
        }

    def get_button_by_pin(self, pin: int) -> Optional[ButtonResource]:
        resource = self._resources.get(self._pins.get(pin, ""))
        return resource if isinstance(resource, ButtonResource) else None

    def resources(self) -> List[Resource]:
        return list(self._resources.values())

    def leds(self) -> List[LedResource]:
        return [r for r in self._resources.values() if isinstance(r, LedResource)]

    def outputs(self) -> List[OutputResource]:
        return [r for r in self._resources.values() if isinstance(r, OutputResource)]

    def buttons(self) -> List[ButtonResource]:
        return [r for r in self._resources.values() if isinstance(r, ButtonResource)]

    def scenes(self) -> List[Scene]:
        return list(self._scenes.values())

    def animations(self) -> List[Animation]:
        return list(self._animations.values())

    def triggers(self) -> List[Trigger]:
        return list(self._triggers)

    def __len__(self) -> int:
        return len(self._resources)

    def __contains__(self, name: str) -> bool:
        return name in self._resources
