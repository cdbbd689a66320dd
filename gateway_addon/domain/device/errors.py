from gateway_addon.domain.property.errors import GatewayAddonError


class DuplicatePropertyError(GatewayAddonError):
    def __init__(self, device_id: str, name: str):
        self.device_id = device_id
        self.name = name
        super().__init__(f"Device {device_id} already has a property named {name!r}")


class PropertyNotFoundError(GatewayAddonError):
    def __init__(self, device_id: str, name: str):
        self.device_id = device_id
        self.name = name
        super().__init__(f"Property {name!r} not found on device {device_id}")


class UnknownActionError(GatewayAddonError):
    def __init__(self, device_id: str, name: str):
        self.device_id = device_id
        self.name = name
        super().__init__(f"Device {device_id} has no action named {name!r}")


class ActionNotFoundError(GatewayAddonError):
    def __init__(self, device_id: str, action_id: str):
        self.device_id = device_id
        self.action_id = action_id
        super().__init__(f"Action {action_id} not found on device {device_id}")
