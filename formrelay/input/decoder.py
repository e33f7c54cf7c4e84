"""Decoder for client field envelopes.

Every submitted field arrives as a JSON-encoded envelope string, or as a
list of such strings when the client repeats a field (checkbox groups,
radio groups). Decoding never raises: anything that cannot be turned into
an envelope comes back as ``None`` and is treated as absent.
"""

import html
import json
import logging
import re
from typing import Any

import nh3
from pydantic import ValidationError

from formrelay.core.models import FieldEnvelope
from formrelay.diagnostics import DiagnosticsCollector

LOGGER = logging.getLogger(__name__)

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
_WHITESPACE = re.compile(r"[\r\n\t ]+")
_TEXT_KEYS = ("name", "type", "value")


def sanitize_text(raw: str) -> str:
    """Strip markup and control characters from a submitted string.

    Tags are removed (script/style content included) and the entity escaping
    of the HTML serializer is undone, so "&" and ">" survive as typed. Line
    breaks and tabs collapse to single spaces and the result is trimmed.
    """
    cleaned = html.unescape(nh3.clean(raw, tags=set()))
    cleaned = _CONTROL_CHARS.sub("", cleaned)
    return _WHITESPACE.sub(" ", cleaned).strip()


def decode_json(text: str | None) -> Any | None:
    """Decode JSON text, returning None for empty or malformed input."""
    if not text:
        return None
    try:
        return json.loads(text)
    except (json.JSONDecodeError, TypeError):
        return None


def decode_json_object(text: str | None) -> dict[str, Any]:
    """Decode a JSON object string; anything else becomes an empty dict."""
    data = decode_json(text)
    if not isinstance(data, dict):
        return {}
    return data


def decode_envelope(
    raw: Any,
    diagnostics: DiagnosticsCollector | None = None,
    field_key: str | None = None,
) -> FieldEnvelope | None:
    """Decode one raw submitted value into a FieldEnvelope.

    Args:
        raw: A JSON-encoded envelope string. A dict is accepted as an
            already-decoded envelope (JSON request bodies); its name, type
            and value strings are sanitized the same way.
        diagnostics: Optional collector that records decode failures.
        field_key: Submitted key, used for diagnostics only.

    Returns:
        The decoded envelope, or None if raw is not a valid envelope.
    """
    if isinstance(raw, FieldEnvelope):
        return raw

    if isinstance(raw, dict):
        data = _sanitize_envelope(raw)
    elif isinstance(raw, str):
        data = decode_json(sanitize_text(raw))
    else:
        data = None

    if not isinstance(data, dict):
        _absorb(diagnostics, field_key, "not a JSON object")
        return None

    try:
        return FieldEnvelope.model_validate(data)
    except ValidationError as e:
        _absorb(diagnostics, field_key, f"invalid envelope ({e.error_count()} errors)")
        return None


def decode_field(
    raw: Any,
    diagnostics: DiagnosticsCollector | None = None,
    field_key: str | None = None,
) -> list[FieldEnvelope | None]:
    """Decode a raw field value into an ordered list of envelopes.

    A list or tuple is decoded element by element, keeping submission order;
    any other value is decoded once.
    """
    if isinstance(raw, (list, tuple)):
        return [decode_envelope(item, diagnostics, field_key) for item in raw]
    return [decode_envelope(raw, diagnostics, field_key)]


def _absorb(diagnostics: DiagnosticsCollector | None, field_key: str | None, reason: str) -> None:
    LOGGER.debug("Ignoring undecodable field %r: %s", field_key, reason)
    if diagnostics is not None:
        diagnostics.add_warning(
            stage="decoding",
            code="DECODE_FAILED",
            message=f"Field value could not be decoded: {reason}",
            field_key=field_key,
        )


def _sanitize_envelope(data: dict[str, Any]) -> dict[str, Any]:
    return {
        key: sanitize_text(value) if key in _TEXT_KEYS and isinstance(value, str) else value
        for key, value in data.items()
    }
