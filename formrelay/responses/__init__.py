"""API response envelopes and integration response helpers."""

from formrelay.responses.builder import ApiResponseBuilder
from formrelay.responses.integration import (
    integration_error_output,
    integration_response_details,
    integration_success_output,
    kebab_to_camel,
)
from formrelay.responses.models import STATUS_CODES, ApiResponse, ResponseStatus

__all__ = [
    "STATUS_CODES",
    "ApiResponse",
    "ApiResponseBuilder",
    "ResponseStatus",
    "integration_error_output",
    "integration_response_details",
    "integration_success_output",
    "kebab_to_camel",
]
