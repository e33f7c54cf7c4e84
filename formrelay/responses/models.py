"""Response envelope returned to the form client."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator


class ResponseStatus(str, Enum):
    """Status of an API response."""

    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"


# Codes are fixed per status.
STATUS_CODES: dict[ResponseStatus, int] = {
    ResponseStatus.SUCCESS: 200,
    ResponseStatus.WARNING: 200,
    ResponseStatus.ERROR: 400,
}


class ApiResponse(BaseModel):
    """Uniform response envelope.

    ``data`` and ``debug`` are only present when the builder decided to
    attach them; see ApiResponseBuilder.
    """

    status: ResponseStatus
    code: int
    message: str
    data: Any = None
    debug: Any = None

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def validate_code_matches_status(self) -> "ApiResponse":
        """Ensure the code is the fixed code of the status."""
        expected = STATUS_CODES[self.status]
        if self.code != expected:
            raise ValueError(f"Status {self.status.value!r} requires code {expected}, got {self.code}")
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary, leaving out data and debug when unset."""
        result: dict[str, Any] = {
            "status": self.status.value,
            "code": self.code,
            "message": self.message,
        }
        if self.data is not None:
            result["data"] = self.data
        if self.debug is not None:
            result["debug"] = self.debug
        return result
