from models.enums import LogCategory
from models.events import EventType
from services.event_bus import EventBus
from services.notifier import Notifier
from utils.logger import Logger, LogLevel


def test_log_lines_are_kept_and_published():
    bus = EventBus()
    notifier = Notifier(bus, history_size=2)

    for i in range(3):
        notifier.log(timestamp=f"t{i}", level="INFO", category="ACTION", message=f"line {i}")

    assert [line.message for line in notifier.recent_logs()] == ["line 1", "line 2"]
    assert bus.get_event_history()[-1].type == EventType.LOG_LINE


def test_event_category_lines_are_not_mirrored():
    bus = EventBus()
    notifier = Notifier(bus)
    notifier.log(timestamp="t", level="DEBUG", category=LogCategory.EVENT.name, message="Event handler subscribed")
    assert notifier.recent_logs() == []
    assert bus.get_event_history() == []


def test_logger_broadcasts_to_notifier():
    notifier = Notifier(EventBus())
    logger = Logger(min_level=LogLevel.INFO, use_colors=False)
    logger.set_broadcaster(notifier)

    logger.info(LogCategory.ACTION, "Action dispatched", verb="SET")
    logger.debug(LogCategory.ACTION, "hidden")

    lines = notifier.recent_logs()
    assert len(lines) == 1
    assert lines[0].category == "ACTION"
    assert lines[0].message == "Action dispatched (verb: SET)"


def test_notify_and_hardware_ready():
    bus = EventBus()
    notifier = Notifier(bus)
    assert notifier.notify("SHOW_ALERT", {"message": "hi"}) is True
    notifier.hardware_ready(True, False, ["lamp"])

    notification, ready = bus.get_event_history()[-2:]
    assert notification.notification == "SHOW_ALERT"
    assert ready.type == EventType.HARDWARE_READY
    assert ready.to_data() == {"leds_enabled": True, "outputs_enabled": False, "resources": ["lamp"]}
