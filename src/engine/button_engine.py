"""
Button Gesture Engine

Turns clean (already debounced, already active-low corrected) 0/1 edges
into the eight discrete gestures:

    PRESS / DOUBLE_PRESS / TRIPLE_PRESS / LONG_PRESS
    RELEASE / DOUBLE_RELEASE / TRIPLE_RELEASE / LONG_RELEASE

Per button:
- press_count   press stage still waiting to be resolved (0 = idle)
- release_count release gesture the next falling edge resolves to:
                1-3 short, 4 long, 0 nothing pending (idle, or consumed
                by a long-press alert)

Timers are held in the scheduler under (button name, TimerSlot.PRESS /
RELEASE / LONG_PRESS / ALERT).

Firing a gesture dispatches the button's bound action list and publishes a
ButtonGestureEvent.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Optional, Sequence

from engine.scheduler import IScheduler
from models.domain import Action, ButtonResource
from models.enums import ActionVerb, Gesture, TimerSlot, SHORT_PRESS_GESTURES
from models.events import ButtonGestureEvent
from utils.logger import get_logger, LogCategory

if TYPE_CHECKING:
    from services.event_bus import EventBus

log = get_logger().for_category(LogCategory.BUTTON)

SHOW_ALERT = "SHOW_ALERT"
HIDE_ALERT = "HIDE_ALERT"

LONG_RELEASE_STAGE = 4


class ButtonEngine:

    def __init__(
        self,
        scheduler: IScheduler,
        dispatch: Callable[[Sequence[Action]], bool],
        event_bus: Optional[EventBus] = None
    ):
        """
        Args:
            scheduler: Timer owner
            dispatch: Action dispatcher entry point (action lists)
            event_bus: Optional bus for ButtonGestureEvent
        """
        self.scheduler = scheduler
        self.dispatch = dispatch
        self.event_bus = event_bus

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def on_edge(self, button: ButtonResource, level: int) -> None:
        """Entry point for the GPIO layer; repeated levels are ignored"""
        pressed = bool(level)
        if pressed == button.is_pressed:
            log.debug("Repeated edge ignored", name=button.name, level=int(pressed))
            return

        button.is_pressed = pressed
        if pressed:
            self._on_rising(button)
        else:
            self._on_falling(button)

    def _on_rising(self, button: ButtonResource) -> None:
        nsp = button.num_short_press

        if button.press_count == 0:
            button.press_count = 1
            button.release_count = 1

            if nsp == 1:
                self._fire_press(button, Gesture.PRESS)
            elif nsp > 1:
                self._arm(button, TimerSlot.PRESS, button.multi_press_timeout,
                          self._fire_press, button, Gesture.PRESS)
            else:
                button.reset_runtime()

            if button.enable_long_press:
                self._arm(button, TimerSlot.LONG_PRESS,
                          button.long_press_time + button.multi_press_timeout,
                          self._on_long_press, button)
                if button.long_press_alert is not None:
                    self._arm(button, TimerSlot.ALERT, button.multi_press_timeout,
                              self._on_alert, button)

        elif button.press_count == 1:
            self._cancel(button, TimerSlot.PRESS, TimerSlot.RELEASE)
            button.press_count = 2
            button.release_count = 2

            if nsp == 2:
                self._fire_press(button, Gesture.DOUBLE_PRESS)
            elif nsp > 2:
                self._arm(button, TimerSlot.PRESS, button.multi_press_timeout,
                          self._fire_press, button, Gesture.DOUBLE_PRESS)

        else:
            self._cancel(button, TimerSlot.PRESS, TimerSlot.RELEASE)
            button.release_count = 3
            self._fire_press(button, Gesture.TRIPLE_PRESS)

    def _on_falling(self, button: ButtonResource) -> None:
        self._cancel(button, TimerSlot.LONG_PRESS, TimerSlot.ALERT)

        stage = button.release_count
        button.release_count = 0

        if stage in (1, 2):
            gesture = SHORT_PRESS_GESTURES[stage][1]
            if button.num_short_press == stage or button.press_count == 0:
                self.fire(button, gesture)
            else:
                self._arm(button, TimerSlot.RELEASE, button.multi_press_timeout,
                          self.fire, button, gesture)
        elif stage == 3:
            self.fire(button, Gesture.TRIPLE_RELEASE)
        elif stage == LONG_RELEASE_STAGE:
            self.fire(button, Gesture.LONG_RELEASE)
            if button.clear_alert_on_release:
                self._hide_alert(button)
        else:
            # The alert consumed this release
            self._hide_alert(button)

    # ------------------------------------------------------------------
    # Timer callbacks
    # ------------------------------------------------------------------

    def _fire_press(self, button: ButtonResource, gesture: Gesture) -> None:
        button.press_count = 0
        self.fire(button, gesture)

    def _on_long_press(self, button: ButtonResource) -> None:
        self._cancel(button, TimerSlot.PRESS)
        button.press_count = 0
        button.release_count = LONG_RELEASE_STAGE
        self.fire(button, Gesture.LONG_PRESS)
        if not button.clear_alert_on_release:
            self._hide_alert(button)

    def _on_alert(self, button: ButtonResource) -> None:
        alert = button.long_press_alert
        if alert is None:
            return
        button.release_count = 0
        button.alert_active = True
        log.debug("Long press alert shown", name=button.name)
        self.dispatch([Action(
            verb=ActionVerb.NOTIFY,
            notification=SHOW_ALERT,
            payload=alert.to_payload(button.long_press_time),
        )])

    def _hide_alert(self, button: ButtonResource) -> None:
        if not button.alert_active:
            return
        button.alert_active = False
        log.debug("Long press alert cleared", name=button.name)
        self.dispatch([Action(verb=ActionVerb.NOTIFY, notification=HIDE_ALERT, payload={})])

    # ------------------------------------------------------------------
    # Gestures
    # ------------------------------------------------------------------

    def fire(self, button: ButtonResource, gesture: Gesture) -> bool:
        """
        Run the action list bound to a gesture.

        Also used by the dispatcher when an action names a gesture verb.

        Returns:
            True when every bound action was handled, False when none is bound
        """
        actions = button.actions_for(gesture)
        log.info(f"{gesture.name} on button \"{button.name}\"", actions=len(actions))

        handled = self.dispatch(actions) if actions else False

        if self.event_bus is not None:
            self.event_bus.publish_nowait(ButtonGestureEvent(button.name, gesture, handled))
        return handled

    def reset(self, button: ButtonResource) -> None:
        """Back to idle: cancel every button timer and zero the counters"""
        self._cancel(button, TimerSlot.PRESS, TimerSlot.RELEASE, TimerSlot.LONG_PRESS, TimerSlot.ALERT)
        button.reset_runtime()
        button.is_pressed = False
        button.alert_active = False

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _arm(self, button: ButtonResource, slot: TimerSlot, delay_ms: float, callback, *args) -> None:
        self.scheduler.arm((button.name, slot), delay_ms, callback, *args)

    def _cancel(self, button: ButtonResource, *slots: TimerSlot) -> None:
        for slot in slots:
            self.scheduler.cancel((button.name, slot))
