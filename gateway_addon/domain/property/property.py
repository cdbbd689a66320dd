# gateway_addon/domain/property/property.py
import logging
import math
from typing import Any, Dict, Generic, List, Optional, TypeVar, Union

from gateway_addon.domain.device.notifier import PropertyChangeNotifier
from gateway_addon.domain.property.description import Link, PropertyDescription
from gateway_addon.domain.property.enums import PropertyType
from gateway_addon.domain.property.errors import (
    AboveMaximum,
    BelowMinimum,
    InvalidEnumValue,
    NotAMultiple,
    PropertyValidationError,
    ReadOnlyViolation,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

Number = Union[int, float]

# Fields published in the property description, in output order.
DESCRIPTION_FIELDS = (
    ("title", "title"),
    ("type", "type"),
    ("@type", "at_type"),
    ("unit", "unit"),
    ("description", "description"),
    ("minimum", "minimum"),
    ("maximum", "maximum"),
    ("enum", "enum"),
    ("readOnly", "read_only"),
    ("multipleOf", "multiple_of"),
    ("links", "links"),
)


def as_number(value: Any) -> Optional[float]:
    """Numeric interpretation of a written value, or None when there is none."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


def is_multiple_of(value: Number, multiple_of: Number) -> bool:
    if multiple_of == 0:
        return False
    if isinstance(value, int) and isinstance(multiple_of, int):
        return value % multiple_of == 0
    # Division instead of % so that e.g. 0.3 / 0.1 is accepted.
    try:
        quotient = value / multiple_of
    except OverflowError:
        return False
    if math.isnan(quotient) or math.isinf(quotient):
        return False
    # A few ulps of slack absorbs binary rounding without accepting real remainders.
    return abs(quotient - round(quotient)) <= 4 * math.ulp(quotient)


def render_enum_value(value: Any) -> str:
    """String form used for enum membership: JSON-style scalars."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def values_differ(old: Any, new: Any) -> bool:
    if isinstance(old, bool) != isinstance(new, bool):
        return True
    return old != new


class Property(Generic[T]):
    """A named, typed value exposed by a device.

    Description fields are plain metadata: assigning them never validates or
    notifies. Value writes go through :meth:`request_value_change`, which
    validates against the description before updating the cache.

    Subclasses backed by real hardware override :meth:`read_cached_value` /
    :meth:`request_value_change` and call :meth:`set_cached_value` or
    :meth:`set_cached_value_and_notify` once the backend has answered.
    """

    def __init__(self, device: PropertyChangeNotifier, name: str, description: Any):
        self._device = device
        self._name = name
        self._description = PropertyDescription.parse(description)

        self.fire_and_forget: bool = False
        self.value: Optional[T] = None
        self.prev_get_value: Optional[T] = None

    def __repr__(self) -> str:
        return f"<Property name={self._name!r} type={self.type!r} value={self.value!r}>"

    # -----------------------------------------------------
    # Outward views
    # -----------------------------------------------------
    def describe(self) -> Dict[str, Any]:
        """Property description for schema publication; undefined fields are omitted."""
        description: Dict[str, Any] = {}
        for key, attr in DESCRIPTION_FIELDS:
            field_value = getattr(self, attr)
            if field_value is None:
                continue
            if key == "links":
                field_value = [link.model_dump() for link in field_value]
            description[key] = field_value
        return description

    def as_record(self) -> Dict[str, Any]:
        """Every field, defined or not. Primarily used for debugging."""
        record: Dict[str, Any] = {
            "name": self._name,
            "value": self.value,
            "visible": self.visible,
        }
        for key, attr in DESCRIPTION_FIELDS:
            record[key] = getattr(self, attr)
        record["links"] = [link.model_dump() for link in self.links]
        return record

    def is_visible(self) -> bool:
        return self.visible

    def is_fire_and_forget(self) -> bool:
        return self.fire_and_forget

    # -----------------------------------------------------
    # Cache primitives
    # -----------------------------------------------------
    def set_cached_value(self, value: Any) -> Optional[T]:
        """Store ``value`` after type coercion. Never notifies."""
        if self.type == PropertyType.BOOLEAN.value:
            self.value = bool(value)
        else:
            self.value = value
        return self.value

    def set_cached_value_and_notify(self, value: Any) -> bool:
        """Store ``value`` and notify the device if the cached value changed.

        The comparison uses the coerced value, so writing ``1`` to a boolean
        property that already holds ``True`` is not a change.
        """
        old_value = self.value
        self.set_cached_value(value)

        has_changed = values_differ(old_value, self.value)
        if has_changed:
            logger.debug(
                f"Property {self._name}: {old_value!r} → {self.value!r}"
            )
            self._device.notify_property_changed(self)

        return has_changed

    # -----------------------------------------------------
    # Read / write protocol
    # -----------------------------------------------------
    async def read_cached_value(self) -> Optional[T]:
        if self.value != self.prev_get_value:
            self.prev_get_value = self.value
        return self.value

    async def request_value_change(self, value: Any) -> Optional[T]:
        """Validate ``value`` and write it to the cache.

        Returns the cached value, which may differ from ``value`` after
        coercion. Raises a :class:`PropertyValidationError` subclass and
        leaves the cache untouched when a constraint fails.
        """
        try:
            self.validate(value)
        except PropertyValidationError as e:
            logger.warning(f"Property {self._name}: rejected {value!r} ({e})")
            raise

        self.set_cached_value_and_notify(value)
        return self.value

    def validate(self, value: Any) -> None:
        if self.read_only:
            raise ReadOnlyViolation(value)

        number = as_number(value)

        if self.minimum is not None and number is not None and number < self.minimum:
            raise BelowMinimum(value, self.minimum)

        if self.maximum is not None and number is not None and number > self.maximum:
            raise AboveMaximum(value, self.maximum)

        if self.multiple_of is not None and (
            number is None or not is_multiple_of(number, self.multiple_of)
        ):
            raise NotAMultiple(value, self.multiple_of)

        if self.enum:
            allowed = [render_enum_value(member) for member in self.enum]
            if render_enum_value(value) not in allowed:
                raise InvalidEnumValue(value, allowed)

    # -----------------------------------------------------
    # Accessors
    # -----------------------------------------------------
    @property
    def device(self) -> PropertyChangeNotifier:
        return self._device

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, value: str) -> None:
        self._name = value

    @property
    def title(self) -> Optional[str]:
        return self._description.title

    @title.setter
    def title(self, value: Optional[str]) -> None:
        self._description.title = value

    @property
    def type(self) -> str:
        return self._description.type

    @type.setter
    def type(self, value: str) -> None:
        self._description.type = value

    @property
    def at_type(self) -> Optional[str]:
        return self._description.at_type

    @at_type.setter
    def at_type(self, value: Optional[str]) -> None:
        self._description.at_type = value

    @property
    def unit(self) -> Optional[str]:
        return self._description.unit

    @unit.setter
    def unit(self, value: Optional[str]) -> None:
        self._description.unit = value

    @property
    def description(self) -> Optional[str]:
        return self._description.description

    @description.setter
    def description(self, value: Optional[str]) -> None:
        self._description.description = value

    @property
    def minimum(self) -> Optional[Number]:
        return self._description.minimum

    @minimum.setter
    def minimum(self, value: Optional[Number]) -> None:
        self._description.minimum = value

    @property
    def maximum(self) -> Optional[Number]:
        return self._description.maximum

    @maximum.setter
    def maximum(self, value: Optional[Number]) -> None:
        self._description.maximum = value

    @property
    def multiple_of(self) -> Optional[Number]:
        return self._description.multiple_of

    @multiple_of.setter
    def multiple_of(self, value: Optional[Number]) -> None:
        self._description.multiple_of = value

    @property
    def enum(self) -> Optional[List[Any]]:
        return self._description.enum

    @enum.setter
    def enum(self, value: Optional[List[Any]]) -> None:
        self._description.enum = value

    @property
    def read_only(self) -> Optional[bool]:
        return self._description.read_only

    @read_only.setter
    def read_only(self, value: Optional[bool]) -> None:
        self._description.read_only = value

    @property
    def links(self) -> List[Link]:
        return self._description.links

    @links.setter
    def links(self, value: List[Any]) -> None:
        self._description.links = [
            link if isinstance(link, Link) else Link(**link) for link in value
        ]

    @property
    def visible(self) -> bool:
        return self._description.visible

    @visible.setter
    def visible(self, value: bool) -> None:
        self._description.visible = value
