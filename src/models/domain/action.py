"""Action domain model - one tagged command for the dispatcher"""

from dataclasses import dataclass, replace, asdict
from typing import Any, Dict, Optional

from models.enums import ActionVerb


@dataclass(frozen=True)
class Action:
    """
    A validated command.

    `verb` is the discriminant; the remaining fields are optional and only
    meaningful for some verbs:

    - name:          target resource / scene / animation / button
                     (absent for NOTIFY and STOP_ALL)
    - value:         SET target, TOGGLE/BLINK "on" value, INCREASE/DECREASE delta
    - time:          fade duration (SET/INCREASE/DECREASE/scene verbs) or
                     blink on-time in milliseconds
    - off_time:      blink off-time in milliseconds (defaults to time)
    - master_value:  scene master dial injected into member actions
    - delay:         milliseconds to wait before executing
    - notification:  NOTIFY notification name
    - payload:       NOTIFY payload
    """
    verb: ActionVerb
    name: Optional[str] = None
    value: Optional[float] = None
    time: Optional[float] = None
    off_time: Optional[float] = None
    master_value: Optional[float] = None
    delay: Optional[float] = None
    notification: Optional[str] = None
    payload: Any = None

    @property
    def is_delayed(self) -> bool:
        return self.delay is not None and self.delay > 0

    def with_overrides(self, **changes) -> "Action":
        return replace(self, **changes)

    def without_delay(self) -> "Action":
        return replace(self, delay=None)

    def to_dict(self) -> Dict[str, Any]:
        data = {k: v for k, v in asdict(self).items() if v is not None}
        data["verb"] = self.verb.name
        return data
