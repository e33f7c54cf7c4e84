"""Data models for normalization diagnostics.

Records what the normalization layer absorbed silently (undecodable
envelopes, nameless fields, unknown collaborators) so callers can surface
it without changing the shape of the normalized reference.
"""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field

Stage = Literal["decoding", "reducing", "routing", "building"]


class NormalizationStatus(str, Enum):
    """Status of a normalized submission."""

    CLEAN = "clean"  # Every field decoded and routed
    PARTIAL = "partial"  # Some fields were absorbed as empty or dropped


class DiagnosticWarning(BaseModel):
    """A recoverable problem found while normalizing a submission."""

    stage: Stage
    code: str  # Warning code like "DECODE_FAILED"
    message: str
    field_key: str | None = None
    details: dict | None = None


class NormalizationDiagnostic(BaseModel):
    """Diagnostics for a complete submission."""

    form_id: str
    branch: str
    status: NormalizationStatus
    warnings: list[DiagnosticWarning] = Field(default_factory=list)
    dropped_fields: list[str] = Field(default_factory=list)
