from enum import Enum


class EventType(str, Enum):
    PROPERTY_CHANGED = "PROPERTY_CHANGED"
    ACTION_STATUS = "ACTION_STATUS"
    ACTION_REMOVED = "ACTION_REMOVED"
