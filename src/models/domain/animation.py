"""Animation domain models"""

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

from models.domain.action import Action


@dataclass(frozen=True)
class Frame:
    """One animation step: actions fired together, then a pause"""
    actions: Tuple[Action, ...]
    duration_ms: int


@dataclass
class Animation:
    name: str
    frames: Tuple[Frame, ...]
    repeat: bool = False
    pre_start_actions: Tuple[Action, ...] = ()
    on_stop_actions: Tuple[Action, ...] = ()

    # Runtime state, owned by the animation engine
    running: bool = field(default=False, repr=False)
    frame_index: int = field(default=0, repr=False)

    def snapshot(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "kind": "ANIMATION",
            "repeat": self.repeat,
            "running": self.running,
            "frames": len(self.frames),
        }
