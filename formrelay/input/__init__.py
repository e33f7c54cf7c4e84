"""Input handling for formrelay.

Provides the raw request model, the field envelope decoder and the
multi-value reducer.
"""

from formrelay.input.decoder import (
    decode_envelope,
    decode_field,
    decode_json,
    decode_json_object,
    sanitize_text,
)
from formrelay.input.reducer import normalize_params, reduce_envelopes
from formrelay.input.request import (
    CREATABLE,
    READABLE,
    RawRequest,
    get_request_params,
    prepare_simple_params,
)

__all__ = [
    "CREATABLE",
    "READABLE",
    "RawRequest",
    "decode_envelope",
    "decode_field",
    "decode_json",
    "decode_json_object",
    "get_request_params",
    "normalize_params",
    "prepare_simple_params",
    "reduce_envelopes",
    "sanitize_text",
]
