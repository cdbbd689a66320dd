# gateway_addon/domain/property/description.py
from collections.abc import Mapping
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from gateway_addon.domain.property.errors import PropertyConfigurationError

# Legacy field -> canonical field, applied only when the canonical one is absent.
LEGACY_FIELDS = {
    "label": "title",
    "min": "minimum",
    "max": "maximum",
}


class Link(BaseModel):

    model_config = ConfigDict(extra="allow")

    rel: str
    href: str


class PropertyDescription(BaseModel):

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    type: str
    title: Optional[str] = None
    at_type: Optional[str] = Field(None, alias="@type")
    unit: Optional[str] = None
    description: Optional[str] = None
    minimum: Optional[Union[int, float]] = None
    maximum: Optional[Union[int, float]] = None
    enum: Optional[List[Any]] = None
    read_only: Optional[bool] = Field(None, alias="readOnly")
    multiple_of: Optional[Union[int, float]] = Field(None, alias="multipleOf")
    links: List[Link] = Field(default_factory=list)
    visible: bool = True

    @model_validator(mode="before")
    @classmethod
    def apply_legacy_fields(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data

        normalized = dict(data)
        for legacy, canonical in LEGACY_FIELDS.items():
            if normalized.get(canonical) is None and normalized.get(legacy) is not None:
                normalized[canonical] = normalized[legacy]
            normalized.pop(legacy, None)

        if normalized.get("visible") is None:
            normalized.pop("visible", None)
        if normalized.get("links") is None:
            normalized.pop("links", None)

        return normalized

    @classmethod
    def parse(cls, raw: Any) -> "PropertyDescription":
        """Build a description from a raw plugin-supplied object.

        Older plugins passed the bare type (``"boolean"``, or a numeric type
        code) instead of a description object; those are refused outright.
        """
        if isinstance(raw, PropertyDescription):
            return raw.model_copy(deep=True)

        if not isinstance(raw, Mapping):
            raise PropertyConfigurationError(
                "Please update plugin to use property description "
                f"(got {type(raw).__name__}: {raw!r})"
            )

        try:
            return cls.model_validate(raw)
        except ValidationError as e:
            raise PropertyConfigurationError(f"Invalid property description: {e}") from e
