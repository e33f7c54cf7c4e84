"""Helpers for normalizing third-party integration responses.

These outputs are internal: they carry the full request/response detail of
an integration call and are never sent to the client as-is. Use
ApiResponseBuilder.public_output() to produce the client-facing response.
"""

from collections.abc import Mapping
from typing import Any

from formrelay.input.decoder import decode_json
from formrelay.responses.models import ResponseStatus

# Integration details keys.
DETAIL_TYPE = "type"
DETAIL_PARAMS = "params"
DETAIL_FILES = "files"
DETAIL_RESPONSE = "response"
DETAIL_CODE = "code"
DETAIL_BODY = "body"
DETAIL_URL = "url"
DETAIL_ITEM_ID = "itemId"
DETAIL_FORM_ID = "formId"
DETAIL_IS_DISABLED = "isDisabled"
DETAIL_STATUS = "status"
DETAIL_MESSAGE = "message"


def kebab_to_camel(value: str) -> str:
    """Convert "active-campaign" to "activeCampaign"."""
    head, *rest = value.split("-")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def integration_response_details(
    integration: str,
    response: Mapping[str, Any] | BaseException,
    url: str,
    params: dict[str, Any] | None = None,
    files: dict[str, Any] | None = None,
    item_id: str = "",
    form_id: str = "",
    is_disabled: bool = False,
    is_curl: bool = False,
) -> dict[str, Any]:
    """Collect the details of one integration API call.

    Args:
        integration: Integration name in kebab-case (e.g., "hubspot").
        response: The HTTP client response mapping, or the exception the
            call raised. Regular responses look like
            ``{"response": {"code": 200}, "body": "..."}``; raw cURL-style
            responses carry ``status`` and the body at the top level.
        url: Requested URL.
        params: Params sent to the integration.
        files: Files sent to the integration.
        item_id: Integration item id (list, form or question id).
        form_id: Internal form id.
        is_disabled: Whether the integration is disabled.
        is_curl: Whether response is a raw cURL-style response.

    Returns:
        Details dict keyed by the DETAIL_* keys.
    """
    if isinstance(response, BaseException):
        code = 404
        body: Any = {"error": str(response)}
        response = {}
    elif is_curl:
        code = response.get("status", 200)
        body = dict(response)
    else:
        code = (response.get("response") or {}).get("code", 200)
        body = response.get("body", "")
        if isinstance(body, str):
            decoded = decode_json(body)
            if decoded is not None:
                body = decoded

    return {
        DETAIL_TYPE: kebab_to_camel(integration),
        DETAIL_PARAMS: params or {},
        DETAIL_FILES: files or {},
        DETAIL_RESPONSE: response.get("response") or {},
        DETAIL_CODE: code,
        DETAIL_BODY: body if not isinstance(body, str) else {},
        DETAIL_URL: url,
        DETAIL_ITEM_ID: item_id,
        DETAIL_FORM_ID: form_id,
        DETAIL_IS_DISABLED: is_disabled,
    }


def _without_status(details: Mapping[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in details.items() if key not in (DETAIL_STATUS, DETAIL_MESSAGE)}


def integration_error_output(
    details: Mapping[str, Any],
    message: str,
    additional: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Internal error output for an integration call."""
    return {
        DETAIL_STATUS: ResponseStatus.ERROR.value,
        DETAIL_MESSAGE: message,
        **_without_status(details),
        **(additional or {}),
    }


def integration_success_output(
    details: Mapping[str, Any],
    additional: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Internal success output for an integration call; message is "<type>Success"."""
    integration_type = details.get(DETAIL_TYPE, "")
    return {
        DETAIL_STATUS: ResponseStatus.SUCCESS.value,
        DETAIL_MESSAGE: f"{integration_type}Success",
        **_without_status(details),
        **(additional or {}),
    }
