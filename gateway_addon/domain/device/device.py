# gateway_addon/domain/device/device.py
import logging
from collections import OrderedDict
from typing import Any, Callable, Dict, List, Optional, Type

from gateway_addon.core.config import settings
from gateway_addon.domain.action.action import Action
from gateway_addon.domain.action.enums import ActionStatus
from gateway_addon.domain.device.errors import (
    ActionNotFoundError,
    DuplicatePropertyError,
    PropertyNotFoundError,
    UnknownActionError,
)
from gateway_addon.domain.events.device_events import (
    ActionRemovedEvent,
    ActionRemovedPayload,
    ActionStatusEvent,
    ActionStatusPayload,
    BaseEvent,
    PropertyChangedEvent,
    PropertyChangedPayload,
)
from gateway_addon.domain.property.property import Property

logger = logging.getLogger(__name__)

EventListener = Callable[[BaseEvent], None]


class Device:
    """Owner of a set of properties and actions.

    Receives the upcalls from its properties and actions, turns them into
    events and hands them to every subscribed listener.
    """

    def __init__(
        self,
        device_id: str,
        title: Optional[str] = None,
        *,
        type_: Optional[List[str]] = None,
        description: str = "",
        history_limit: Optional[int] = None,
    ):
        self.id = device_id
        self.title = title or device_id
        self.type: List[str] = list(type_ or [])
        self.description = description

        self.properties: Dict[str, Property] = {}
        self.action_metadata: Dict[str, Dict[str, Any]] = {}
        self.actions: "OrderedDict[str, Action]" = OrderedDict()

        if history_limit is None:
            history_limit = settings.ACTION_HISTORY_LIMIT
        if history_limit < 1:
            raise ValueError("history_limit must be >= 1")
        self.history_limit = history_limit
        self._listeners: List[EventListener] = []

    def __repr__(self) -> str:
        return f"<Device id={self.id!r} properties={len(self.properties)} actions={len(self.actions)}>"

    # -----------------------------------------------------
    # Listeners
    # -----------------------------------------------------
    def subscribe(self, listener: EventListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, event: BaseEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception(
                    f"Device {self.id}: listener failed for {event.event_type.value}"
                )

    # -----------------------------------------------------
    # Properties
    # -----------------------------------------------------
    def add_property(
        self,
        name: str,
        description: Any,
        property_class: Type[Property] = Property,
    ) -> Property:
        if name in self.properties:
            raise DuplicatePropertyError(self.id, name)

        prop = property_class(self, name, description)
        self.properties[name] = prop

        logger.info(f"Device {self.id}: registered property {name} (type={prop.type})")
        return prop

    def find_property(self, name: str) -> Optional[Property]:
        return self.properties.get(name)

    def has_property(self, name: str) -> bool:
        return name in self.properties

    def _require_property(self, name: str) -> Property:
        prop = self.find_property(name)
        if prop is None:
            raise PropertyNotFoundError(self.id, name)
        return prop

    async def get_property(self, name: str) -> Any:
        return await self._require_property(name).read_cached_value()

    async def set_property(self, name: str, value: Any) -> Any:
        return await self._require_property(name).request_value_change(value)

    def notify_property_changed(self, prop: Property) -> None:
        logger.info(f"Device {self.id}: property {prop.name} changed to {prop.value!r}")

        self._emit(
            PropertyChangedEvent(
                device_id=self.id,
                payload=PropertyChangedPayload(name=prop.name, value=prop.value),
            )
        )

    # -----------------------------------------------------
    # Actions
    # -----------------------------------------------------
    def add_action(self, name: str, metadata: Optional[Dict[str, Any]] = None) -> None:
        self.action_metadata[name] = dict(metadata or {})
        logger.info(f"Device {self.id}: registered action {name}")

    async def request_action(self, action_id: str, name: str, input: Any = None) -> Action:
        if name not in self.action_metadata:
            raise UnknownActionError(self.id, name)

        action = Action(action_id, self, name, input)
        self.actions[action_id] = action

        logger.info(f"Device {self.id}: action {name} requested (id={action_id})")

        await self.perform_action(action)
        return action

    async def perform_action(self, action: Action) -> None:
        """Carry out ``action``. Device integrations override this."""
        action.start()
        action.finish()

    def get_action(self, action_id: str) -> Action:
        action = self.actions.get(action_id)
        if action is None:
            raise ActionNotFoundError(self.id, action_id)
        return action

    def remove_action(self, action_id: str) -> Action:
        action = self.actions.pop(action_id, None)
        if action is None:
            raise ActionNotFoundError(self.id, action_id)

        logger.info(f"Device {self.id}: action {action.name} removed (id={action_id})")

        self._emit(
            ActionRemovedEvent(
                device_id=self.id,
                payload=ActionRemovedPayload(id=action.id, name=action.name),
            )
        )
        return action

    def action_notify(self, action: Action) -> None:
        self._emit(
            ActionStatusEvent(
                device_id=self.id,
                payload=ActionStatusPayload(id=action.id, **action.describe()),
            )
        )

        if action.status == ActionStatus.COMPLETED:
            self._evict_completed_actions()

    def _evict_completed_actions(self) -> None:
        completed = [
            action_id
            for action_id, action in self.actions.items()
            if action.status == ActionStatus.COMPLETED
        ]
        overflow = len(completed) - self.history_limit
        for action_id in completed[:max(overflow, 0)]:
            del self.actions[action_id]
            logger.debug(f"Device {self.id}: evicted completed action {action_id}")

    # -----------------------------------------------------
    # Views
    # -----------------------------------------------------
    def describe(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "@type": self.type,
            "description": self.description,
            "properties": {
                name: prop.describe()
                for name, prop in self.properties.items()
                if prop.is_visible()
            },
            "actions": {name: dict(meta) for name, meta in self.action_metadata.items()},
        }

    def as_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "@type": self.type,
            "description": self.description,
            "properties": {name: prop.as_record() for name, prop in self.properties.items()},
            "actions": {action_id: action.to_record() for action_id, action in self.actions.items()},
        }
