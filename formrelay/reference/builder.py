"""Builder for normalized submission records.

Runs a raw request through the decoder, reducer and control-field router,
then picks one of three construction branches:

- direct import: every identifier is inline, no lookups
- settings: admin settings forms, fields come from a settings filter
- regular form (default): based on the stored form details
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from formrelay.config import AppConfig, SettingsTypeNames
from formrelay.core.collaborators import (
    FilePathResolver,
    FormDetailsProvider,
    InMemoryFormDetailsProvider,
    InMemorySettingsRegistry,
    SettingsRegistry,
    UploadDirResolver,
)
from formrelay.core.models import FieldEnvelope, RoutedParams
from formrelay.diagnostics import DiagnosticsCollector
from formrelay.input.decoder import decode_json_object
from formrelay.input.reducer import normalize_params
from formrelay.input.request import CREATABLE, RawRequest, get_request_params
from formrelay.reference.models import (
    DirectImportReference,
    FormDataReference,
    FormReference,
    SettingsReference,
)
from formrelay.routing.params import ParamRegistry
from formrelay.routing.router import ControlFieldRouter

LOGGER = logging.getLogger(__name__)


def prepare_file(
    file_params: Mapping[str, Any],
    params: Mapping[str, FieldEnvelope],
    registry: ParamRegistry,
) -> dict[str, Any]:
    """Attach the submitting field's id and name to freshly uploaded file metadata.

    Args:
        file_params: Upload metadata from the request, keyed by ``file``.
        params: Routed params bag; the fileId and name control fields are
            read from it.
        registry: Param registry naming those control fields.

    Returns:
        The upload metadata with ``id`` and ``fieldName`` added, or an empty
        dict if the request carried no upload.
    """
    upload = file_params.get("file") or {}
    if not upload:
        return {}

    file_id = params.get(registry.get("fileId"))
    field_name = params.get(registry.get("name"))

    return {
        **upload,
        "id": (file_id.value or "") if file_id is not None else "",
        "fieldName": (field_name.value or "") if field_name is not None else "",
    }


class FormDataReferenceBuilder:
    """Builds a FormDataReference for each incoming request."""

    def __init__(
        self,
        registry: ParamRegistry,
        resolver: FilePathResolver,
        form_details: FormDetailsProvider,
        settings_registry: SettingsRegistry,
        settings_types: Iterable[str] | None = None,
    ) -> None:
        """Initialize the builder.

        Args:
            registry: Param registry naming the control fields.
            resolver: Resolves uploaded-file tokens to paths.
            form_details: Provides stored form details for the regular branch.
            settings_registry: Settings filters for the settings branch.
            settings_types: Type tags selecting the settings branch
                (default: the SettingsTypeNames defaults).
        """
        self.registry = registry
        self.form_details = form_details
        self.settings_registry = settings_registry
        self.settings_types = tuple(
            settings_types if settings_types is not None else SettingsTypeNames().all()
        )
        self.router = ControlFieldRouter(registry, resolver)

    @classmethod
    def from_config(
        cls,
        config: AppConfig,
        form_details: FormDetailsProvider | None = None,
        settings_registry: SettingsRegistry | None = None,
    ) -> "FormDataReferenceBuilder":
        """Create a builder from the application config.

        Missing collaborators default to empty in-memory implementations.
        """
        return cls(
            registry=config.param_registry(),
            resolver=UploadDirResolver(config.upload_dir),
            form_details=form_details or InMemoryFormDetailsProvider(),
            settings_registry=settings_registry or InMemorySettingsRegistry(),
            settings_types=config.settings_types.all(),
        )

    def build(
        self,
        request: RawRequest,
        kind: str = CREATABLE,
        diagnostics: DiagnosticsCollector | None = None,
    ) -> FormDataReference:
        """Build the normalized reference for a request.

        Args:
            request: The parsed request.
            kind: Request kind, "creatable" or "readable".
            diagnostics: Optional collector for absorbed decode failures and
                dropped fields.

        Returns:
            A DirectImportReference, SettingsReference or FormReference.
        """
        params = get_request_params(request, kind)
        fields = normalize_params(params, diagnostics)
        routed = self.router.route(fields, diagnostics)
        return self.build_from_routed(routed, request.file_params, diagnostics)

    def build_from_routed(
        self,
        routed: RoutedParams,
        file_params: Mapping[str, Any] | None = None,
        diagnostics: DiagnosticsCollector | None = None,
    ) -> FormDataReference:
        """Build the reference from already routed params."""
        if routed.direct_import:
            reference: FormDataReference = self._direct_import(routed)
        elif (routed.type or "") in self.settings_types:
            reference = self._settings(routed, file_params or {})
        else:
            reference = self._form(routed, file_params or {})

        LOGGER.debug("Built %s reference for form %r", reference.kind, routed.form_id)
        if diagnostics is not None:
            diagnostics.branch = reference.kind
            diagnostics.form_id = routed.form_id or ""
        return reference

    def _direct_import(self, routed: RoutedParams) -> DirectImportReference:
        return DirectImportReference(
            item_id=routed.item_id or "",
            inner_id=routed.inner_id or "",
            type=routed.type or "",
            form_id=routed.form_id or "",
            post_id=routed.post_id or "",
            params=routed.params,
            files=routed.files,
        )

    def _settings(self, routed: RoutedParams, file_params: Mapping[str, Any]) -> SettingsReference:
        form_id = routed.form_id or ""
        type_ = routed.type or ""
        filter_name = self.settings_registry.get_filter_name(routed.settings_type or "", type_)

        if filter_name:
            fields_only = self.settings_registry.invoke(filter_name, form_id)
        else:
            LOGGER.info(
                "No settings filter for settings type %r and type %r",
                routed.settings_type,
                type_,
            )
            fields_only = []

        return SettingsReference(
            form_id=form_id,
            type=type_,
            item_id="",
            inner_id="",
            fields_only=fields_only if fields_only is not None else [],
            **self._shared(routed, file_params),
        )

    def _form(self, routed: RoutedParams, file_params: Mapping[str, Any]) -> FormReference:
        form_id = routed.form_id or ""
        details = self.form_details.get_form_details(form_id) if form_id else {}
        return FormReference(
            form_details=details or {},
            **self._shared(routed, file_params),
        )

    def _shared(self, routed: RoutedParams, file_params: Mapping[str, Any]) -> dict[str, Any]:
        return {
            "params": routed.params,
            "params_raw": routed.params_raw,
            "files": routed.files,
            "files_upload": prepare_file(file_params, routed.params, self.registry),
            "action": routed.action or "",
            "action_external": routed.action_external or "",
            "api_steps": routed.api_steps or {},
            "captcha": routed.captcha or "",
            "post_id": routed.post_id or "",
            "storage": decode_json_object(routed.storage),
            "addon_data": {},
        }
