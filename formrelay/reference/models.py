"""Normalized submission records.

A FormDataReference is built fresh for every request and discarded after
the response is produced. Each construction branch has its own model so
fields of one branch can never leak into another.
"""

from typing import Any, ClassVar, Literal

from pydantic import BaseModel, ConfigDict, Field, SerializeAsAny
from pydantic.alias_generators import to_camel

from formrelay.core.models import FieldEnvelope, FileField


class ReferenceModel(BaseModel):
    """Base for all reference shapes; serializes with camelCase keys."""

    kind: ClassVar[str] = ""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the camelCase dict handed to integration code."""
        return self.model_dump(by_alias=True)


class DirectImportReference(ReferenceModel):
    """Submission that carries every identifier inline; no lookups happen."""

    kind: ClassVar[str] = "direct_import"

    direct_import: Literal[True] = True
    item_id: str = ""
    inner_id: str = ""
    type: str = ""
    form_id: str = ""
    post_id: str = ""
    params: dict[str, SerializeAsAny[FieldEnvelope]] = Field(default_factory=dict)
    files: dict[str, FileField] = Field(default_factory=dict)


class SubmissionReference(ReferenceModel):
    """Fields shared by the settings and regular form branches."""

    params: dict[str, SerializeAsAny[FieldEnvelope]] = Field(default_factory=dict)
    params_raw: dict[str, str | list[str]] = Field(default_factory=dict)
    files: dict[str, FileField] = Field(default_factory=dict)
    files_upload: dict[str, Any] = Field(default_factory=dict)
    action: str = ""
    action_external: str = ""
    api_steps: dict[str, Any] = Field(default_factory=dict)
    captcha: str = ""
    post_id: str = ""
    storage: dict[str, Any] = Field(default_factory=dict)
    addon_data: dict[str, Any] = Field(default_factory=dict)


class SettingsReference(SubmissionReference):
    """Admin settings submission; fields come from a settings filter."""

    kind: ClassVar[str] = "settings"

    form_id: str = ""
    type: str = ""
    item_id: str = ""
    inner_id: str = ""
    fields_only: Any = Field(default_factory=list)


class FormReference(SubmissionReference):
    """Regular form submission built on top of the stored form details."""

    kind: ClassVar[str] = "form"

    form_details: dict[str, Any] = Field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Flatten the form details under the submission fields."""
        output = dict(self.form_details)
        output.update(self.model_dump(by_alias=True, exclude={"form_details"}))
        return output


FormDataReference = DirectImportReference | SettingsReference | FormReference
