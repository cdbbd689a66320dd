from typing import Any, Optional

from pydantic import BaseModel

from gateway_addon.domain.events.enums import EventType


class BaseEvent(BaseModel):
    event_type: EventType
    device_id: str


class PropertyChangedPayload(BaseModel):
    name: str
    value: Any = None


class PropertyChangedEvent(BaseEvent):
    event_type: EventType = EventType.PROPERTY_CHANGED
    payload: PropertyChangedPayload


class ActionStatusPayload(BaseModel):
    id: str
    name: str
    status: str
    timeRequested: str
    input: Any = None
    timeCompleted: Optional[str] = None


class ActionStatusEvent(BaseEvent):
    event_type: EventType = EventType.ACTION_STATUS
    payload: ActionStatusPayload


class ActionRemovedPayload(BaseModel):
    id: str
    name: str


class ActionRemovedEvent(BaseEvent):
    event_type: EventType = EventType.ACTION_REMOVED
    payload: ActionRemovedPayload

