"""Param registry for reserved form control fields.

Maps the symbolic control names used by the router (``formId``, ``steps``,
``direct`` ...) to the keys a form client actually submits, and holds the
whitelist of response keys that may be surfaced to the client.

Loads from a mapping or from a JSON manifest of the shape::

    {
        "enums": {
            "params": {"formId": "form-id", ...},
            "responseOutputKeys": ["validation", ...]
        }
    }
"""

import json
from collections.abc import Iterable, Mapping
from pathlib import Path

import jsonschema

# Symbols the control-field router understands.
PARAM_SYMBOLS: tuple[str, ...] = (
    "direct",
    "itemId",
    "innerId",
    "formId",
    "postId",
    "type",
    "action",
    "captcha",
    "actionExternal",
    "settingsType",
    "storage",
    "additionalParam",
    "steps",
    "fileId",
    "name",
)

DEFAULT_PARAM_NAMES: dict[str, str] = {
    "direct": "form-direct-import",
    "itemId": "form-item-id",
    "innerId": "form-inner-id",
    "formId": "form-id",
    "postId": "form-post-id",
    "type": "form-type",
    "action": "form-action",
    "captcha": "form-captcha",
    "actionExternal": "form-action-external",
    "settingsType": "form-settings-type",
    "storage": "form-storage",
    "additionalParam": "form-additional-param",
    "steps": "form-steps",
    "fileId": "form-file-id",
    "name": "form-field-name",
}

DEFAULT_OUTPUT_KEYS: tuple[str, ...] = (
    "validation",
    "variation",
    "processExternally",
    "hideGlobalMsgOnSuccess",
    "hideFormOnSuccess",
    "redirectUrl",
    "fileId",
    "apiSteps",
)


class UnknownParamError(Exception):
    """Raised when a param symbol is not part of the router's vocabulary."""

    pass


class ManifestValidationError(Exception):
    """Raised when a param manifest fails schema validation."""

    pass


class ParamRegistry:
    """Lookup table from control symbols to submitted field keys.

    Symbols missing from the table resolve to an empty string, so a form
    that never submits a given control field simply never matches it.
    """

    def __init__(
        self,
        params: Mapping[str, str] | None = None,
        output_keys: Iterable[str] | None = None,
    ) -> None:
        """Initialize the registry.

        Args:
            params: Mapping of symbol to submitted key. Defaults to
                DEFAULT_PARAM_NAMES.
            output_keys: Response keys allowed in public output. Defaults to
                DEFAULT_OUTPUT_KEYS.

        Raises:
            UnknownParamError: If params contains a symbol the router does not
                understand.
        """
        names = dict(DEFAULT_PARAM_NAMES if params is None else params)
        unknown = sorted(set(names) - set(PARAM_SYMBOLS))
        if unknown:
            raise UnknownParamError(f"Unknown param symbols: {unknown}")

        self._names = names
        self._symbols_by_key = {key: symbol for symbol, key in names.items() if key}
        self._output_keys = tuple(DEFAULT_OUTPUT_KEYS if output_keys is None else output_keys)

    @classmethod
    def from_manifest(
        cls,
        manifest_path: Path | str,
        schema_path: Path | str | None = None,
    ) -> "ParamRegistry":
        """Load a registry from a JSON manifest file.

        Args:
            manifest_path: Path to the manifest JSON.
            schema_path: Optional JSON schema to validate the manifest against.

        Returns:
            A ParamRegistry built from the manifest's ``enums`` section.

        Raises:
            ManifestValidationError: If the manifest fails schema validation.
        """
        with open(manifest_path) as f:
            data = json.load(f)

        if schema_path:
            with open(schema_path) as f:
                schema = json.load(f)
            try:
                jsonschema.validate(data, schema)
            except jsonschema.ValidationError as e:
                raise ManifestValidationError(
                    f"Param manifest validation failed for {manifest_path}: {e.message}"
                ) from e

        enums = data.get("enums", {})
        return cls(
            params=enums.get("params", {}),
            output_keys=enums.get("responseOutputKeys"),
        )

    def get(self, symbol: str) -> str:
        """Return the submitted key for a symbol, or "" if not configured."""
        return self._names.get(symbol, "")

    def symbol_for(self, key: str) -> str | None:
        """Return the symbol a submitted key stands for, if any."""
        if not key:
            return None
        return self._symbols_by_key.get(key)

    @property
    def params(self) -> dict[str, str]:
        """All configured symbol -> key pairs."""
        return dict(self._names)

    @property
    def output_keys(self) -> tuple[str, ...]:
        """Response keys that may be surfaced to the client."""
        return self._output_keys
