"""Reducer collapsing repeated field envelopes into one.

Downstream code treats every field as single-valued, so a repeated field
is reduced to one envelope:

- nothing filled in: the first decoded entry, unchanged
- one entry filled in (radio group): that entry, unchanged
- several filled in (checkboxes, multi-select): the first filled entry with
  all filled values joined by the delimiter, in submission order
"""

from collections.abc import Mapping, Sequence
from typing import Any

from formrelay.core.models import DELIMITER, FieldEnvelope
from formrelay.diagnostics import DiagnosticsCollector
from formrelay.input.decoder import decode_field


def reduce_envelopes(envelopes: Sequence[FieldEnvelope | None]) -> FieldEnvelope | None:
    """Reduce the decoded envelopes of one field name to a single envelope.

    Args:
        envelopes: Decoded envelopes in submission order. None entries are
            undecodable submissions.

    Returns:
        The surviving envelope, or None if nothing was submitted or the
        first submission could not be decoded.
    """
    if not envelopes:
        return None

    filled = [envelope for envelope in envelopes if envelope is not None and not envelope.is_empty]

    if not filled:
        return envelopes[0]

    if len(filled) == 1:
        return filled[0]

    joined = DELIMITER.join(envelope.value or "" for envelope in filled)
    return filled[0].model_copy(update={"value": joined})


def normalize_params(
    params: Mapping[str, Any],
    diagnostics: DiagnosticsCollector | None = None,
) -> dict[str, FieldEnvelope | None]:
    """Decode and reduce every raw param of a request.

    Returns:
        Mapping of submitted key to its normalized envelope (or None).
    """
    return {
        key: reduce_envelopes(decode_field(raw, diagnostics, key))
        for key, raw in params.items()
    }
