"""Scene domain model"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from models.domain.action import Action


@dataclass
class Scene:
    """Named aggregate of member actions scaled by one master value"""
    name: str
    actions: Tuple[Action, ...]
    default: float = 1.0
    value: float = 0.0
    toggle_value: Optional[float] = None

    def snapshot(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "kind": "SCENE",
            "default": self.default,
            "value": self.value,
            "actions": [a.to_dict() for a in self.actions],
        }
