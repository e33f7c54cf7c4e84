"""Builder for client-facing API responses."""

from collections.abc import Iterable, Mapping
from typing import Any

from formrelay.config import DEFAULT_PERMISSION_MESSAGE, AppConfig
from formrelay.responses.models import STATUS_CODES, ApiResponse, ResponseStatus
from formrelay.routing.params import DEFAULT_OUTPUT_KEYS


class ApiResponseBuilder:
    """Builds success, warning and error responses with one shared shape.

    Debug payloads are attached only when ``developer_mode`` is on, so
    internal diagnostic detail never reaches end users by default.
    """

    def __init__(
        self,
        developer_mode: bool = False,
        permission_message: str = DEFAULT_PERMISSION_MESSAGE,
        output_keys: Iterable[str] | None = None,
    ) -> None:
        """Initialize the builder.

        Args:
            developer_mode: Whether debug payloads may be included.
            permission_message: Message used by permission_error().
            output_keys: Integration response keys public_output() may surface.
        """
        self.developer_mode = developer_mode
        self.permission_message = permission_message
        self.output_keys = tuple(DEFAULT_OUTPUT_KEYS if output_keys is None else output_keys)

    @classmethod
    def from_config(cls, config: AppConfig) -> "ApiResponseBuilder":
        return cls(
            developer_mode=config.developer_mode,
            permission_message=config.permission_message,
            output_keys=config.output_keys,
        )

    def success(self, message: str, additional: Any = None, debug: Any = None) -> ApiResponse:
        """Build a success response (code 200)."""
        return self._build(ResponseStatus.SUCCESS, message, additional, debug)

    def warning(self, message: str, additional: Any = None, debug: Any = None) -> ApiResponse:
        """Build a warning response (code 200)."""
        return self._build(ResponseStatus.WARNING, message, additional, debug)

    def error(self, message: str, additional: Any = None, debug: Any = None) -> ApiResponse:
        """Build an error response (code 400)."""
        return self._build(ResponseStatus.ERROR, message, additional, debug)

    def permission_error(self) -> ApiResponse:
        """Build the fixed error response for missing permissions."""
        return self.error(self.permission_message)

    def public_output(
        self,
        details: Mapping[str, Any],
        message: str,
        allowed_keys: Iterable[str] | None = None,
    ) -> ApiResponse:
        """Turn a full integration result into a client-safe response.

        Only whitelisted keys of the inner integration response are surfaced
        as data; the whole inner response is passed along as debug.

        Args:
            details: Integration details holding the inner ``response``.
            message: Message for the user.
            allowed_keys: Keys that may be surfaced (default: output_keys).

        Returns:
            A success response if the inner status is "success", otherwise
            an error response.
        """
        response = details.get("response") or {}
        status = response.get("status", ResponseStatus.ERROR.value)
        keys = self.output_keys if allowed_keys is None else tuple(allowed_keys)

        additional = {key: response[key] for key in keys if response.get(key) is not None}

        if status == ResponseStatus.SUCCESS.value:
            return self.success(message, additional, dict(response))
        return self.error(message, additional, dict(response))

    def _build(
        self,
        status: ResponseStatus,
        message: str,
        additional: Any,
        debug: Any,
    ) -> ApiResponse:
        return ApiResponse(
            status=status,
            code=STATUS_CODES[status],
            message=message,
            data=additional if additional else None,
            debug=debug if self.developer_mode and debug else None,
        )
