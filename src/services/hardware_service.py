"""
Hardware Service

Brings the registered resources onto the physical pins and takes them off
again.

Startup:
1. Start the PWM driver on the LED pins (skipped without LEDs). A failure is
   logged and the system continues without LED capability.
2. Drive every LED to its configured value.
3. Claim every OUTPUT pin with its configured value, then watch every BUTTON
   pin on both edges, wired to the button engine.
4. Acknowledge to the host (hardware ready).

start_async() runs the same sequence but launches the PWM driver in the
default executor, so a slow daemon launch does not stall the event loop.

Shutdown (split into steps for the shutdown handlers):
stop animations and timers -> LEDs to exit values (LEDs without one are
released) -> release outputs -> stop PWM and clean up GPIO.
"""

import asyncio
from functools import partial
from typing import List

from engine.effect_engine import EffectEngine
from engine.scheduler import IScheduler
from hardware.gpio import IGPIOManager
from hardware.pwm import IPWMDriver
from managers.resource_registry import ResourceRegistry
from models.domain import ButtonResource
from models.enums import GPIOInitialState
from services.action_dispatcher import ActionDispatcher
from services.notifier import Notifier
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.HARDWARE)


class HardwareService:

    def __init__(
        self,
        registry: ResourceRegistry,
        gpio: IGPIOManager,
        pwm: IPWMDriver,
        scheduler: IScheduler,
        effects: EffectEngine,
        dispatcher: ActionDispatcher,
        notifier: Notifier
    ):
        self.registry = registry
        self.gpio = gpio
        self.pwm = pwm
        self.scheduler = scheduler
        self.effects = effects
        self.dispatcher = dispatcher
        self.notifier = notifier

        self._claimed_outputs: List[int] = []
        self._watched_buttons: List[int] = []

    # ------------------------------------------------------------------
    # Startup
    # ------------------------------------------------------------------

    def start(self) -> None:
        self._apply_led_start(self._launch_pwm())
        self._finish_start()

    async def start_async(self) -> None:
        loop = asyncio.get_running_loop()
        started = await loop.run_in_executor(None, self._launch_pwm)
        self._apply_led_start(started)
        self._finish_start()

    def _finish_start(self) -> None:
        self._start_outputs()
        self._start_buttons()

        self.notifier.hardware_ready(
            leds_enabled=self.effects.leds_enabled,
            outputs_enabled=self.effects.outputs_enabled,
            resources=[r.name for r in self.registry.resources()],
        )

    def _launch_pwm(self) -> bool:
        """Start the PWM driver on the LED pins; False without LEDs or on failure"""
        pins = [led.pin for led in self.registry.leds()]
        if not pins:
            return False
        if not self.pwm.start(pins):
            log.error("Unable to start the PWM driver, LEDs are disabled", pins=",".join(map(str, pins)))
            return False
        return True

    def _apply_led_start(self, started: bool) -> None:
        if not started:
            return

        leds = self.registry.leds()
        pins = [led.pin for led in leds]
        self.effects.leds_enabled = True
        for led in leds:
            self.effects.write_led(led, led.value)
        log.info(f"{len(leds)} LED(s) initialized", pins=",".join(map(str, pins)))

    def _start_outputs(self) -> None:
        for output in self.registry.outputs():
            physical_high = bool(output.value) != output.active_low
            try:
                self.gpio.register_output(
                    output.pin,
                    output.name,
                    GPIOInitialState.HIGH if physical_high else GPIOInitialState.LOW
                )
            except Exception as e:
                log.error(f"Unable to initialize output \"{output.name}\"", pin=output.pin, error=str(e))
                continue
            self._claimed_outputs.append(output.pin)

        self.effects.outputs_enabled = True
        if self._claimed_outputs:
            log.info(f"{len(self._claimed_outputs)} output(s) initialized")

    def _start_buttons(self) -> None:
        for button in self.registry.buttons():
            try:
                self.gpio.register_input(
                    button.pin,
                    button.name,
                    on_edge=partial(self._on_button_edge, button),
                    debounce_ms=button.debounce_timeout,
                    active_low=button.active_low
                )
            except Exception as e:
                log.error(f"Unable to initialize button \"{button.name}\"", pin=button.pin, error=str(e))
                continue
            self._watched_buttons.append(button.pin)

        if self._watched_buttons:
            log.info(f"{len(self._watched_buttons)} button(s) initialized")

    def _on_button_edge(self, button: ButtonResource, pin: int, level: int) -> None:
        self.dispatcher.buttons.on_edge(button, level)

    # ------------------------------------------------------------------
    # Shutdown
    # ------------------------------------------------------------------

    def stop_effects(self) -> None:
        """Stop animations and cancel every pending timer"""
        self.dispatcher.animations.stop_all()
        cancelled = self.scheduler.cancel_all()
        for button in self.registry.buttons():
            button.reset_runtime()
        log.debug("Timers cancelled", count=cancelled)

    def apply_exit_values(self) -> None:
        """Drive LEDs to their exit values and hand the other LED pins back"""
        for led in self.registry.leds():
            if self.effects.apply_exit_value(led) is not None or not self.effects.leds_enabled:
                continue
            try:
                self.pwm.release(led.pin)
            except Exception as e:
                log.error(f"Error releasing PWM pin {led.pin}: {e}")
        self.effects.leds_enabled = False

    def release_outputs(self) -> None:
        self.effects.outputs_enabled = False
        for pin in self._claimed_outputs + self._watched_buttons:
            try:
                self.gpio.release(pin)
            except Exception as e:
                log.error(f"Error releasing GPIO {pin}: {e}")
        self._claimed_outputs.clear()
        self._watched_buttons.clear()

    def stop_hardware(self) -> None:
        self.pwm.stop()
        self.gpio.cleanup()

    def shutdown(self) -> None:
        """Whole shutdown sequence in one call"""
        self.stop_effects()
        self.apply_exit_values()
        self.release_outputs()
        self.stop_hardware()
