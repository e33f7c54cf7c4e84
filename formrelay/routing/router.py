"""Control-field router.

Sends each normalized field either to a named control slot (form id, post
id, steps ...) or into the generic params bags. Which submitted keys are
control fields is decided by the ParamRegistry, never hardcoded here.
"""

import logging
from collections.abc import Mapping

from formrelay.core.collaborators import FilePathResolver
from formrelay.core.models import DELIMITER, DecodedField, FieldEnvelope, FileField, RoutedParams
from formrelay.diagnostics import DiagnosticsCollector
from formrelay.input.decoder import decode_json_object
from formrelay.routing.params import ParamRegistry

LOGGER = logging.getLogger(__name__)

# Control fields copied into a slot and kept in the params bag.
PARAM_SLOTS: dict[str, str] = {
    "formId": "form_id",
    "postId": "post_id",
    "type": "type",
    "action": "action",
    "captcha": "captcha",
    "actionExternal": "action_external",
    "settingsType": "settings_type",
}

# Control fields that only fill a slot.
SLOT_ONLY: dict[str, str] = {
    "itemId": "item_id",
    "innerId": "inner_id",
}

_FALSE_VALUES = {"", "0", "false"}


def is_truthy(value: str | None) -> bool:
    """Interpret a submitted flag value."""
    if value is None:
        return False
    return value.strip().lower() not in _FALSE_VALUES


class ControlFieldRouter:
    """Routes normalized fields into a RoutedParams record.

    Normal fields get type-specific handling:

    - ``file``: the value is split on the delimiter and every token is
      resolved to a path; stored under ``files`` only.
    - ``rating``: ``"0"`` means "not answered" and becomes ``""``.
    - ``checkbox``: the raw value is split into a list.
    """

    def __init__(self, registry: ParamRegistry, resolver: FilePathResolver) -> None:
        self.registry = registry
        self.resolver = resolver

    def route(
        self,
        fields: Mapping[str, FieldEnvelope | None],
        diagnostics: DiagnosticsCollector | None = None,
    ) -> RoutedParams:
        """Route every normalized field of a submission.

        Args:
            fields: Submitted key -> normalized envelope, in submission order.
            diagnostics: Optional collector recording dropped fields.

        Returns:
            The routed control slots and params bags.
        """
        routed = RoutedParams()

        for key, envelope in fields.items():
            if envelope is None:
                self._drop(key, "no decodable envelope", diagnostics)
                continue

            symbol = self.registry.symbol_for(key)

            if symbol == "direct":
                routed.direct_import = is_truthy(envelope.value)
            elif symbol in SLOT_ONLY:
                setattr(routed, SLOT_ONLY[symbol], envelope.value or "")
            elif symbol in PARAM_SLOTS:
                setattr(routed, PARAM_SLOTS[symbol], envelope.value or "")
                routed.params[key] = envelope
            elif symbol == "storage":
                routed.storage = envelope.value or ""
                routed.params[key] = self._decoded(envelope)
            elif symbol == "additionalParam":
                decoded = self._decoded(envelope)
                routed.additional_param = decoded.value
                routed.params[key] = decoded
            elif symbol == "steps":
                routed.api_steps = {"fields": envelope.value, "current": envelope.custom}
            else:
                self._route_field(routed, key, envelope, diagnostics)

        return routed

    def _route_field(
        self,
        routed: RoutedParams,
        key: str,
        envelope: FieldEnvelope,
        diagnostics: DiagnosticsCollector | None,
    ) -> None:
        name = envelope.name
        if not name:
            self._drop(key, "envelope has no name", diagnostics)
            return

        value = envelope.value or ""

        if envelope.type == "file":
            tokens = [token for token in value.split(DELIMITER) if token] if value else []
            routed.files[key] = FileField(
                **envelope.model_dump(exclude={"value"}),
                value=[self.resolver.resolve(token) for token in tokens],
            )
            return

        if envelope.type == "rating" and value == "0":
            envelope = envelope.model_copy(update={"value": ""})
            value = ""

        if envelope.type == "checkbox":
            routed.params_raw[name] = value.split(DELIMITER) if value else []
        else:
            routed.params_raw[name] = value

        routed.params[key] = envelope

    @staticmethod
    def _decoded(envelope: FieldEnvelope) -> DecodedField:
        return DecodedField(
            **envelope.model_dump(exclude={"value"}),
            value=decode_json_object(envelope.value),
        )

    @staticmethod
    def _drop(key: str, reason: str, diagnostics: DiagnosticsCollector | None) -> None:
        LOGGER.debug("Dropping field %r: %s", key, reason)
        if diagnostics is not None:
            diagnostics.record_dropped(key, reason)
