"""Services layer"""

from .event_bus import EventBus
from .notifier import Notifier
from .action_dispatcher import ActionDispatcher
from .hardware_service import HardwareService
from .service_container import ServiceContainer

__all__ = [
    "EventBus",
    "Notifier",
    "ActionDispatcher",
    "HardwareService",
    "ServiceContainer",
]
