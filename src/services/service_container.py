"""Service Container - Dependency injection container for all core services"""

from dataclasses import dataclass

from engine.effect_engine import EffectEngine
from engine.scheduler import AsyncioScheduler, IScheduler
from hardware.gpio import IGPIOManager
from hardware.pwm import IPWMDriver
from managers.config_manager import ConfigManager
from managers.resource_registry import ResourceRegistry
from models.config import AppConfig
from services.action_dispatcher import ActionDispatcher
from services.event_bus import EventBus
from services.hardware_service import HardwareService
from services.notifier import Notifier


@dataclass
class ServiceContainer:
    """
    Centralized dependency injection container for all core services.

    Built once at startup (see build()). The registry is owned here and
    passed by reference to every engine; there is no process-wide resource
    map.

    Usage:
        services = ServiceContainer.build(config_manager, gpio, pwm)
        services.hardware.start()

        # API endpoints reach the dispatcher through the container
        services.dispatcher.dispatch(action)
    """

    config: AppConfig
    registry: ResourceRegistry
    scheduler: IScheduler
    event_bus: EventBus
    notifier: Notifier
    effects: EffectEngine
    dispatcher: ActionDispatcher
    hardware: HardwareService
    config_manager: ConfigManager

    @classmethod
    def build(
        cls,
        config_manager: ConfigManager,
        gpio: IGPIOManager,
        pwm: IPWMDriver,
        scheduler: IScheduler = None,
        event_bus: EventBus = None
    ) -> "ServiceContainer":
        """Wire every service from a loaded ConfigManager"""
        scheduler = scheduler if scheduler is not None else AsyncioScheduler()
        event_bus = event_bus if event_bus is not None else EventBus()

        registry = config_manager.build_registry()
        notifier = Notifier(event_bus)
        effects = EffectEngine(scheduler, pwm, gpio)
        dispatcher = ActionDispatcher(registry, scheduler, effects, notifier, event_bus)
        hardware = HardwareService(registry, gpio, pwm, scheduler, effects, dispatcher, notifier)

        return cls(
            config=config_manager.app_config,
            registry=registry,
            scheduler=scheduler,
            event_bus=event_bus,
            notifier=notifier,
            effects=effects,
            dispatcher=dispatcher,
            hardware=hardware,
            config_manager=config_manager,
        )
