from typing import Callable, Dict, Protocol
from models.enums import GPIOInitialState

# (canonical pin, logical level 0/1) - active-low already applied
EdgeCallback = Callable[[int, int], None]


class IGPIOManager(Protocol):

    # -------------------------------
    # Registration
    # -------------------------------

    def register_input(
        self,
        pin: int,
        component: str,
        on_edge: EdgeCallback,
        debounce_ms: int = 10,
        active_low: bool = False
    ) -> None:
        """Watch a pin on both edges; on_edge runs on the event loop thread"""
        ...

    def register_output(
        self,
        pin: int,
        component: str,
        initial: GPIOInitialState = GPIOInitialState.LOW
    ) -> None:
        ...


    # -------------------------------
    # IO
    # -------------------------------

    def read(self, pin: int) -> int:
        """Read raw GPIO pin value (0 or 1)"""
        ...

    def write(self, pin: int, value: int) -> None:
        """Write raw value to GPIO pin (0 or 1); raises on driver failure"""
        ...


    # -------------------------------
    # Lifecycle / Debug
    # -------------------------------

    def release(self, pin: int) -> None:
        """Stop watching / unexport a single pin"""
        ...

    def cleanup(self) -> None:
        ...

    def get_registry(self) -> Dict[int, str]:
        ...
