"""
Config Manager

Loads the YAML configuration (with include: support), falls back to the
factory defaults when the main file is missing or broken, and turns the
result into:

- AppConfig (global settings: developer mode, pin scheme, button timing
  defaults, PWM driver, API server)
- a populated ResourceRegistry (leds, outputs, buttons, scenes,
  animations, triggers), every entry passed through the config validator
"""

import yaml
from pathlib import Path
from typing import Any, Dict, List, Optional

from hardware.pin_mapping import parse_scheme, DEFAULT_SCHEME
from managers.config_validator import (
    validate_led, validate_output, validate_button,
    validate_scene, validate_animation, validate_trigger,
)
from managers.resource_registry import ResourceRegistry
from models.config import AppConfig, ButtonDefaults, PWMConfig, APIConfig
from models.enums import ResourceKind
from utils.coerce import positive_int, to_bool
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.CONFIG)


class ConfigManager:
    """
    Main configuration manager with include system support

    Example:
        config = ConfigManager()
        config.load()

        app_config = config.app_config
        registry = config.build_registry()
    """

    def __init__(
        self,
        config_path: str = "config/config.yaml",
        defaults_path: str = "config/factory_defaults.yaml",
        base_dir: Optional[Path] = None
    ):
        """
        Args:
            config_path: Path to main config.yaml (relative to base_dir)
            defaults_path: Path to factory defaults fallback
            base_dir: Directory the paths are relative to (defaults to src/)
        """
        self.base_dir = Path(base_dir) if base_dir is not None else Path(__file__).parent.parent
        self.config_path = Path(config_path)
        self.factory_defaults_path = Path(defaults_path)
        self.data: Dict[str, Any] = {}
        self.app_config = AppConfig()

    def load(self) -> Dict[str, Any]:
        """
        Load YAML configuration

        Process:
        1. Load main config.yaml
        2. If it has an 'include:' list, load and merge those files
        3. Otherwise treat it as a monolithic config
        4. Fall back to factory_defaults.yaml on failure
        5. Parse the global settings into AppConfig

        Returns:
            Merged config data dict
        """
        try:
            full_path = self.base_dir / self.config_path
            main_config = self._read_yaml(full_path)

            if 'include' in main_config:
                log.info("Using include-based configuration")
                includes = main_config.pop('include') or []
                self.data = self._load_with_includes(includes, full_path.parent)
                # Keys in the main file win over included ones
                self.data.update(main_config)
            else:
                log.info("Using monolithic configuration")
                self.data = main_config

        except Exception as ex:
            log.error("Failed to load config.yaml", error=str(ex), error_type=type(ex).__name__)
            log.warn("Falling back to factory defaults")
            self.data = self._read_yaml(self.base_dir / self.factory_defaults_path)

        return self.load_dict(self.data)

    def load_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Use an already parsed configuration mapping"""
        self.data = data if isinstance(data, dict) else {}
        self.app_config = self._parse_app_config(self.data)
        return self.data

    @staticmethod
    def _read_yaml(path: Path) -> Dict[str, Any]:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError(f"{path.name} must contain a mapping at the top level")
        return data

    def _load_with_includes(self, include_list: List[str], config_dir: Path) -> Dict[str, Any]:
        """
        Load and merge multiple YAML files from include list

        Args:
            include_list: Filenames to load (e.g., ["resources.yaml", "scenes.yaml"])
            config_dir: Directory containing config files
        """
        merged: Dict[str, Any] = {}

        for filename in include_list:
            filepath = config_dir / filename
            try:
                file_data = self._read_yaml(filepath)
            except FileNotFoundError:
                log.error(f"File not found: {filename}")
                raise
            if file_data:
                merged.update(file_data)
                log.info(f"Loaded {filename}", keys=str(list(file_data.keys())))

        log.info("Config merge complete", total_keys=len(merged), keys=str(list(merged.keys())[:10]))
        return merged

    # ------------------------------------------------------------------
    # Global settings
    # ------------------------------------------------------------------

    @staticmethod
    def _parse_app_config(data: Dict[str, Any]) -> AppConfig:
        scheme = parse_scheme(data.get("pin_scheme"))
        if scheme is None:
            if data.get("pin_scheme") is not None:
                log.warn(f"Unknown pin scheme \"{data.get('pin_scheme')}\", using {DEFAULT_SCHEME.value}")
            scheme = DEFAULT_SCHEME

        defaults = ButtonDefaults()
        buttons = ButtonDefaults(
            debounce_timeout=positive_int(data.get("debounce_timeout"), defaults.debounce_timeout),
            multi_press_timeout=positive_int(data.get("multi_press_timeout"), defaults.multi_press_timeout),
            long_press_time=positive_int(data.get("long_press_time"), defaults.long_press_time),
        )

        pwm_raw = data.get("pwm")
        api_raw = data.get("api")

        return AppConfig(
            developer_mode=to_bool(data.get("developer_mode")),
            pin_scheme=scheme,
            buttons=buttons,
            pwm=PWMConfig.from_dict(pwm_raw if isinstance(pwm_raw, dict) else {}),
            api=APIConfig.from_dict(api_raw if isinstance(api_raw, dict) else {}),
        )

    # ------------------------------------------------------------------
    # Registry
    # ------------------------------------------------------------------

    def build_registry(self, registry: Optional[ResourceRegistry] = None) -> ResourceRegistry:
        """
        Validate every configured entry and register the valid ones.

        Invalid entries are logged and skipped; the rest keep loading.
        """
        registry = registry if registry is not None else ResourceRegistry()
        scheme = self.app_config.pin_scheme

        for raw in self._entries("leds"):
            led = validate_led(raw, scheme)
            if led is not None:
                registry.register(ResourceKind.LED, led)

        for raw in self._entries("outputs"):
            output = validate_output(raw, scheme)
            if output is not None:
                registry.register(ResourceKind.OUTPUT, output)

        for raw in self._entries("buttons"):
            button = validate_button(raw, scheme, self.app_config.buttons)
            if button is not None:
                registry.register(ResourceKind.BUTTON, button)

        for raw in self._entries("scenes"):
            scene = validate_scene(raw)
            if scene is not None:
                registry.register(None, scene)

        for raw in self._entries("animations"):
            animation = validate_animation(raw)
            if animation is not None:
                registry.register(None, animation)

        for raw in self._entries("triggers"):
            trigger = validate_trigger(raw)
            if trigger is not None:
                registry.add_trigger(trigger)

        log.info(
            "Configuration loaded",
            leds=len(registry.leds()),
            outputs=len(registry.outputs()),
            buttons=len(registry.buttons()),
            scenes=len(registry.scenes()),
            animations=len(registry.animations()),
            triggers=len(registry.triggers()),
        )
        return registry

    def _entries(self, key: str) -> List[Any]:
        raw = self.data.get(key)
        if raw is None:
            return []
        if not isinstance(raw, list):
            log.warn(f"\"{key}\" must be a list and was ignored")
            return []
        return raw
