# gateway_addon/main.py

import asyncio
import logging
import uuid

from gateway_addon.core.config import settings
from gateway_addon.core.logging_config import configure_logging
from gateway_addon.domain.device.device import Device
from gateway_addon.domain.events.device_events import BaseEvent
from gateway_addon.domain.property.errors import PropertyValidationError

logger = logging.getLogger(__name__)


def build_demo_light() -> Device:
    device = Device(
        f"{settings.ADDON_ID}-light-1",
        "Demo light",
        type_=["Light", "OnOffSwitch"],
        description="Dimmable light backed by the in-memory cache",
    )

    device.add_property("on", {"title": "On/Off", "type": "boolean", "@type": "OnOffProperty"})
    device.add_property(
        "level",
        {
            "title": "Brightness",
            "type": "integer",
            "@type": "BrightnessProperty",
            "unit": "percent",
            "minimum": 0,
            "maximum": 100,
            "multipleOf": 5,
        },
    )
    device.add_property("mode", {"label": "Mode", "type": "string", "enum": ["day", "night"]})
    device.add_action("fade", {"title": "Fade", "input": {"type": "object"}})

    return device


def log_event(event: BaseEvent) -> None:
    logger.info(f"📣 {event.event_type.value}: {event.model_dump(mode='json')}")


async def main():

    configure_logging()

    device = build_demo_light()
    device.subscribe(log_event)

    logger.info(f"🚀 {settings.ADDON_ID} started with device {device.id}")

    await device.set_property("on", 1)
    await device.set_property("on", True)
    await device.set_property("level", 45)

    try:
        await device.set_property("level", 42)
    except PropertyValidationError as e:
        logger.warning(f"Write rejected: {e}")

    await device.set_property("mode", "night")

    action = await device.request_action(uuid.uuid4().hex, "fade", {"level": 10, "duration": 5})
    logger.info(f"Action finished: {action.describe()}")

    logger.info(f"Device description: {device.describe()}")


if __name__ == "__main__":
    asyncio.run(main())
