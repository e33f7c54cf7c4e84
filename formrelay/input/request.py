"""Raw request shape handed over by the transport layer.

The transport (HTTP framework, route registration) is not part of this
package. It is expected to hand over the already-parsed parts of a request
in a RawRequest.
"""

from typing import Any, Literal

from pydantic import BaseModel, Field

from formrelay.input.decoder import sanitize_text

RequestKind = Literal["creatable", "readable"]

CREATABLE: RequestKind = "creatable"
READABLE: RequestKind = "readable"


class RawRequest(BaseModel):
    """Parsed parts of one incoming form request."""

    method: str = "POST"
    body_params: dict[str, Any] = Field(default_factory=dict)
    query_params: dict[str, Any] = Field(default_factory=dict)
    json_params: dict[str, Any] | None = None
    file_params: dict[str, Any] = Field(default_factory=dict)


def get_request_params(request: RawRequest, kind: str = CREATABLE) -> dict[str, Any]:
    """Extract the params of a request.

    Creatable (POST) requests read the body; readable (GET) requests read the
    query string with body params taking precedence. JSON params, usually sent
    by the block editor, are merged on top of either.
    """
    if kind == CREATABLE:
        params = dict(request.body_params)
    elif kind == READABLE:
        params = {**request.query_params, **request.body_params}
    else:
        params = {}

    if request.json_params:
        params.update(request.json_params)

    return params


def prepare_simple_params(request: RawRequest, kind: str = CREATABLE) -> dict[str, Any]:
    """Return request params as plain sanitized values, without envelope decoding."""
    return {key: _sanitize_value(value) for key, value in get_request_params(request, kind).items()}


def _sanitize_value(value: Any) -> Any:
    if isinstance(value, str):
        return sanitize_text(value)
    if isinstance(value, (list, tuple)):
        return [_sanitize_value(item) for item in value]
    return value
