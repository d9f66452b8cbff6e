"""
pi-blaster PWM driver

pi-blaster is a DMA-based soft PWM daemon. It is started once with the list
of pins it may drive (`-g 17,18,...`) and then controlled by writing
"<pin>=<duty>" lines into its FIFO.
"""

import subprocess
from pathlib import Path
from typing import Optional, Sequence, TextIO
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.HARDWARE)

START_TIMEOUT_S = 1.5


class PiBlasterDriver:

    def __init__(
        self,
        script_path: str = "pi-blaster",
        device: str = "/dev/pi-blaster",
        external: bool = False,
        use_sudo: bool = True
    ):
        """
        Args:
            script_path: pi-blaster executable
            device: FIFO the daemon reads commands from
            external: daemon is managed elsewhere (systemd); skip launching it
            use_sudo: prefix the launch command with sudo
        """
        self.script_path = script_path
        self.device = Path(device)
        self.external = external
        self.use_sudo = use_sudo
        self._fifo: Optional[TextIO] = None

    def build_command(self, pins: Sequence[int]) -> list:
        command = [self.script_path, "-g", ",".join(str(p) for p in pins)]
        if self.use_sudo:
            command.insert(0, "sudo")
        return command

    def start(self, pins: Sequence[int]) -> bool:
        pin_list = ",".join(str(p) for p in pins)

        if self.external:
            log.info("Using externally managed pi-blaster", pins=pin_list)
        else:
            command = self.build_command(pins)
            log.debug(f"Running command: {' '.join(command)}")
            try:
                subprocess.run(
                    command,
                    capture_output=True,
                    text=True,
                    timeout=START_TIMEOUT_S,
                    check=True
                )
            except (subprocess.CalledProcessError, subprocess.TimeoutExpired, OSError) as e:
                log.error("Starting PiBlaster failed", pins=pin_list, error=str(e))
                return False
            log.info(f"Successfully started PiBlaster on GPIO pin(s) {pin_list}")

        try:
            self._fifo = open(self.device, "w", buffering=1, encoding="ascii")
        except OSError as e:
            log.error("Cannot open pi-blaster device", device=str(self.device), error=str(e))
            return False
        return True

    def set_duty(self, pin: int, value: float) -> None:
        if self._fifo is None:
            raise RuntimeError("pi-blaster is not running")
        self._fifo.write(f"{pin}={value:.4f}\n")
        self._fifo.flush()

    def release(self, pin: int) -> None:
        if self._fifo is None:
            return
        self._fifo.write(f"release {pin}\n")
        self._fifo.flush()

    def stop(self) -> None:
        if self._fifo is not None:
            self._fifo.close()
            self._fifo = None
