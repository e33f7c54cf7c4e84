"""Field-level models shared by the decoder, reducer and router.

A form client wraps every submitted field in a small JSON envelope
(``{"name", "type", "value", "custom"}``). These models hold one decoded
envelope and the routed result for a whole submission.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, SerializeAsAny, field_validator
from pydantic.alias_generators import to_camel

# Packs multiple values into a single string field.
DELIMITER = "---"


def _coerce_scalar(value: Any) -> Any:
    if isinstance(value, bool):
        return "1" if value else ""
    if isinstance(value, (int, float)):
        return str(value)
    return value


class FieldEnvelope(BaseModel):
    """One client-submitted field instance.

    ``value`` may be an empty string; emptiness is meaningful when choosing
    between alternatives of a repeated field. Unknown client keys are kept.
    """

    name: str = ""
    type: str = ""
    value: str | None = None
    custom: Any = None

    model_config = ConfigDict(extra="allow")

    @field_validator("name", "type", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        if value is None:
            return ""
        return _coerce_scalar(value)

    @field_validator("value", mode="before")
    @classmethod
    def _coerce_value(cls, value: Any) -> Any:
        return _coerce_scalar(value)

    @property
    def is_empty(self) -> bool:
        """True when the envelope carries no value."""
        return self.value is None or self.value == ""


class FileField(FieldEnvelope):
    """A file-type envelope whose value is the list of resolved file paths."""

    value: list[str] = Field(default_factory=list)

    @field_validator("value", mode="before")
    @classmethod
    def _coerce_value(cls, value: Any) -> Any:
        if value is None or value == "":
            return []
        return value


class DecodedField(FieldEnvelope):
    """An envelope whose JSON-encoded value has been decoded to an object."""

    value: dict[str, Any] = Field(default_factory=dict)

    @field_validator("value", mode="before")
    @classmethod
    def _coerce_value(cls, value: Any) -> Any:
        return value or {}


class RoutedParams(BaseModel):
    """Control slots and generic bags extracted from one submission."""

    direct_import: bool | None = None
    item_id: str | None = None
    inner_id: str | None = None
    form_id: str | None = None
    post_id: str | None = None
    type: str | None = None
    action: str | None = None
    action_external: str | None = None
    captcha: str | None = None
    settings_type: str | None = None
    storage: str | None = None
    additional_param: dict[str, Any] | None = None
    api_steps: dict[str, Any] | None = None
    params: dict[str, SerializeAsAny[FieldEnvelope]] = Field(default_factory=dict)
    params_raw: dict[str, str | list[str]] = Field(default_factory=dict)
    files: dict[str, FileField] = Field(default_factory=dict)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a camelCase dict, leaving out slots never routed."""
        return self.model_dump(by_alias=True, exclude_none=True)
