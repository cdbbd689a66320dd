"""Capabilities a property or action needs from its owning device.

Properties and actions only ever call *up* into the device; they never read
its state. Keeping the dependency this narrow lets either side be exercised
with a stub in place of a real :class:`~gateway_addon.domain.device.device.Device`.
"""

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from gateway_addon.domain.action.action import Action
    from gateway_addon.domain.property.property import Property


@runtime_checkable
class PropertyChangeNotifier(Protocol):

    def notify_property_changed(self, prop: "Property") -> None:
        ...


@runtime_checkable
class ActionNotifier(Protocol):

    def action_notify(self, action: "Action") -> None:
        ...


@runtime_checkable
class DeviceNotifier(PropertyChangeNotifier, ActionNotifier, Protocol):
    pass
