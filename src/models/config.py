"""
Application configuration models

Top-level settings parsed from config.yaml. Resource, scene, animation and
trigger entries are not stored here; they go through the validator into the
resource registry.
"""

from dataclasses import dataclass, field
from typing import Any, Dict

from models.enums import PinScheme
from utils.coerce import positive_int, to_bool

DEFAULT_DEBOUNCE_TIMEOUT_MS = 10
DEFAULT_MULTI_PRESS_TIMEOUT_MS = 300
DEFAULT_LONG_PRESS_TIME_MS = 1000

PWM_DRIVERS = ("pi-blaster", "pigpio", "mock")


@dataclass(frozen=True)
class ButtonDefaults:
    """Global button timings; each button may override them"""
    debounce_timeout: int = DEFAULT_DEBOUNCE_TIMEOUT_MS
    multi_press_timeout: int = DEFAULT_MULTI_PRESS_TIMEOUT_MS
    long_press_time: int = DEFAULT_LONG_PRESS_TIME_MS


@dataclass(frozen=True)
class PWMConfig:
    driver: str = "pi-blaster"
    script_path: str = "pi-blaster"
    device: str = "/dev/pi-blaster"
    external: bool = False
    host: str = "localhost"
    port: int = 8888

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PWMConfig":
        driver = data.get("driver", cls.driver)
        if driver not in PWM_DRIVERS:
            driver = cls.driver
        script_path = data.get("script_path")
        device = data.get("device")
        host = data.get("host")
        return cls(
            driver=driver,
            script_path=script_path if isinstance(script_path, str) and script_path else cls.script_path,
            device=device if isinstance(device, str) and device else cls.device,
            external=to_bool(data.get("external"), cls.external),
            host=host if isinstance(host, str) and host else cls.host,
            port=positive_int(data.get("port"), cls.port),
        )


@dataclass(frozen=True)
class APIConfig:
    enabled: bool = True
    host: str = "0.0.0.0"
    port: int = 8000

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "APIConfig":
        host = data.get("host")
        return cls(
            enabled=to_bool(data.get("enabled"), cls.enabled),
            host=host if isinstance(host, str) and host else cls.host,
            port=positive_int(data.get("port"), cls.port),
        )


@dataclass(frozen=True)
class AppConfig:
    developer_mode: bool = False
    pin_scheme: PinScheme = PinScheme.BCMv2
    buttons: ButtonDefaults = field(default_factory=ButtonDefaults)
    pwm: PWMConfig = field(default_factory=PWMConfig)
    api: APIConfig = field(default_factory=APIConfig)
