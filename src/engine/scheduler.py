"""
Scheduler - cancellable timers keyed by owner

Every timed effect in the engine (fade ticks, blink halves, button windows,
animation frames, delayed actions) goes through this abstraction instead of
holding raw timer handles. Keys are (owner_name, TimerSlot) tuples, plus
(owner_name, TimerSlot.DELAYED, n) for delayed actions run on behalf of an
owner, so cancel_owner() reaches them too. Each key holds at most one
pending timer: arming a key cancels whatever was pending under it.

Cancelling a timer that already fired is a no-op.
"""

import asyncio
import itertools
from typing import Any, Callable, Dict, Hashable, Optional, Protocol, Tuple

from models.enums import TimerSlot
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SYSTEM)

TimerKey = Tuple[str, TimerSlot]


def deferred_key(owner: Optional[str], n: int) -> Hashable:
    if owner is None:
        return ("__deferred__", n)
    return (owner, TimerSlot.DELAYED, n)


def owned_by(key: Hashable, owner: str, slot: Optional[TimerSlot] = None) -> bool:
    if not isinstance(key, tuple) or not key or key[0] != owner:
        return False
    return slot is None or (len(key) > 1 and key[1] == slot)


class IScheduler(Protocol):

    def arm(self, key: Hashable, delay_ms: float, callback: Callable[..., Any], *args: Any) -> None:
        """Run callback(*args) after delay_ms, replacing any timer pending under key"""
        ...

    def defer(self, delay_ms: float, callback: Callable[..., Any], *args: Any, owner: Optional[str] = None) -> Hashable:
        """One-shot timer under a fresh key; returns the key. With an owner the key is (owner, DELAYED, n)"""
        ...

    def cancel(self, key: Hashable) -> bool:
        """Cancel the timer pending under key; False if nothing was pending"""
        ...

    def cancel_owner(self, owner: str, slot: Optional[TimerSlot] = None) -> int:
        """Cancel every slot held by one owner, or only the timers under one slot"""
        ...

    def is_armed(self, key: Hashable) -> bool:
        ...

    def cancel_all(self) -> int:
        ...


class AsyncioScheduler:
    """IScheduler on top of loop.call_later"""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop
        self._handles: Dict[Hashable, asyncio.TimerHandle] = {}
        self._deferred_ids = itertools.count(1)

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def arm(self, key: Hashable, delay_ms: float, callback: Callable[..., Any], *args: Any) -> None:
        self.cancel(key)
        self._handles[key] = self.loop.call_later(
            max(0.0, delay_ms) / 1000.0, self._fire, key, callback, args
        )

    def defer(self, delay_ms: float, callback: Callable[..., Any], *args: Any, owner: Optional[str] = None) -> Hashable:
        key = deferred_key(owner, next(self._deferred_ids))
        self.arm(key, delay_ms, callback, *args)
        return key

    def cancel(self, key: Hashable) -> bool:
        handle = self._handles.pop(key, None)
        if handle is None:
            return False
        handle.cancel()
        return True

    def cancel_owner(self, owner: str, slot: Optional[TimerSlot] = None) -> int:
        keys = [k for k in self._handles if owned_by(k, owner, slot)]
        for key in keys:
            self.cancel(key)
        return len(keys)

    def is_armed(self, key: Hashable) -> bool:
        return key in self._handles

    def cancel_all(self) -> int:
        count = len(self._handles)
        for handle in self._handles.values():
            handle.cancel()
        self._handles.clear()
        return count

    def _fire(self, key: Hashable, callback: Callable[..., Any], args: Tuple[Any, ...]) -> None:
        self._handles.pop(key, None)
        try:
            callback(*args)
        except Exception as e:
            # A failing timer callback must not take the event loop down with it
            log.error(f"Timer callback failed: {e}", key=str(key))
