"""Tests for the FormDataReference builder."""

import json

import pytest

from formrelay.config import AppConfig
from formrelay.core import FieldEnvelope, InMemoryFormDetailsProvider
from formrelay.diagnostics import DiagnosticsCollector, NormalizationStatus
from formrelay.input import READABLE, RawRequest
from formrelay.reference import (
    DirectImportReference,
    FormDataReferenceBuilder,
    FormReference,
    SettingsReference,
    prepare_file,
)
from formrelay.routing import ParamRegistry

SHARED_KEYS = {
    "params",
    "paramsRaw",
    "files",
    "filesUpload",
    "action",
    "actionExternal",
    "apiSteps",
    "captcha",
    "postId",
    "storage",
    "addonData",
}


def _control(value: str, custom=None) -> str:
    return json.dumps({"name": "", "type": "hidden", "value": value, "custom": custom})


class TestDirectImportBranch:
    """Tests for direct-import submissions."""

    def test_direct_import_field_set(self, builder: FormDataReferenceBuilder) -> None:
        request = RawRequest(
            body_params={
                "form-direct-import": _control("true"),
                "form-item-id": _control("5"),
                "form-id": _control("9"),
            }
        )

        reference = builder.build(request)

        assert isinstance(reference, DirectImportReference)
        data = reference.to_dict()
        assert set(data) == {
            "directImport",
            "itemId",
            "innerId",
            "type",
            "formId",
            "postId",
            "params",
            "files",
        }
        assert data["directImport"] is True
        assert data["itemId"] == "5"
        assert data["formId"] == "9"
        assert data["innerId"] == ""
        assert list(data["params"]) == ["form-id"]

    def test_direct_import_skips_lookups(self, registry: ParamRegistry, resolver) -> None:
        class FailingProvider:
            def get_form_details(self, form_id: str) -> dict:
                raise AssertionError("form details must not be looked up")

        class FailingSettings:
            def get_filter_name(self, settings_type: str, type_: str) -> str:
                raise AssertionError("settings must not be looked up")

            def invoke(self, name: str, form_id: str):
                raise AssertionError("settings must not be invoked")

        builder = FormDataReferenceBuilder(registry, resolver, FailingProvider(), FailingSettings())
        request = RawRequest(
            body_params={
                "form-direct-import": _control("1"),
                "form-type": _control("settings"),
                "form-id": _control("9"),
            }
        )

        reference = builder.build(request)

        assert isinstance(reference, DirectImportReference)
        assert reference.type == "settings"

    def test_direct_import_carries_files(self, builder: FormDataReferenceBuilder, make_field) -> None:
        request = RawRequest(
            body_params={
                "form-direct-import": _control("true"),
                "q-cv": make_field("cv", "cv.pdf", "file"),
            }
        )

        reference = builder.build(request)

        assert reference.to_dict()["files"]["q-cv"]["value"] == ["/uploads/cv.pdf"]

    def test_falsy_direct_flag_uses_regular_branch(self, builder: FormDataReferenceBuilder) -> None:
        request = RawRequest(body_params={"form-direct-import": _control("0")})

        assert isinstance(builder.build(request), FormReference)


class TestSettingsBranch:
    """Tests for admin settings submissions."""

    def test_settings_fields_from_filter(self, builder: FormDataReferenceBuilder) -> None:
        request = RawRequest(
            body_params={
                "form-type": _control("settings"),
                "form-settings-type": _control("general"),
                "form-id": _control("9"),
            }
        )

        reference = builder.build(request)

        assert isinstance(reference, SettingsReference)
        data = reference.to_dict()
        assert data["formId"] == "9"
        assert data["type"] == "settings"
        assert data["itemId"] == ""
        assert data["innerId"] == ""
        assert data["fieldsOnly"] == [{"name": "sender-email", "formId": "9"}]
        assert SHARED_KEYS <= set(data)
        assert "directImport" not in data

    def test_unknown_filter_gives_empty_fields(self, builder: FormDataReferenceBuilder) -> None:
        request = RawRequest(
            body_params={
                "form-type": _control("settings-global"),
                "form-settings-type": _control("unknown"),
            }
        )

        reference = builder.build(request)

        assert isinstance(reference, SettingsReference)
        assert reference.fields_only == []

    def test_file_upload_admin_type(self, builder: FormDataReferenceBuilder) -> None:
        request = RawRequest(body_params={"form-type": _control("file-upload-admin")})

        assert isinstance(builder.build(request), SettingsReference)

    def test_custom_settings_types(self, registry, resolver, form_details, settings_registry) -> None:
        builder = FormDataReferenceBuilder(
            registry,
            resolver,
            form_details,
            settings_registry,
            settings_types=["admin-page"],
        )

        settings = builder.build(RawRequest(body_params={"form-type": _control("admin-page")}))
        regular = builder.build(RawRequest(body_params={"form-type": _control("settings")}))

        assert isinstance(settings, SettingsReference)
        assert isinstance(regular, FormReference)


class TestRegularFormBranch:
    """Tests for regular form submissions."""

    @pytest.fixture
    def submission(self, make_field) -> RawRequest:
        return RawRequest(
            body_params={
                "form-id": _control("9"),
                "form-post-id": _control("120"),
                "form-action": _control("https://example.com/thanks"),
                "form-action-external": _control("https://crm.example.com"),
                "form-captcha": _control("captcha-token"),
                "form-storage": _control('{"utm_source": "newsletter"}'),
                "form-steps": _control("step-1---step-2", custom="step-1"),
                "q-email": make_field("email", "jane@example.com", "email"),
                "q-topics": [
                    make_field("topics", "pricing", "checkbox"),
                    make_field("topics", "", "checkbox"),
                    make_field("topics", "support", "checkbox"),
                ],
                "q-stars": make_field("stars", "0", "rating"),
                "q-docs": make_field("docs", "a.png---b.png", "file"),
            }
        )

    def test_form_details_merged(self, builder: FormDataReferenceBuilder, submission: RawRequest) -> None:
        reference = builder.build(submission)

        assert isinstance(reference, FormReference)
        data = reference.to_dict()
        assert data["type"] == "hubspot"
        assert data["itemId"] == "hs-list-1"
        assert data["label"] == "Newsletter"
        assert SHARED_KEYS <= set(data)

    def test_shared_fields(self, builder: FormDataReferenceBuilder, submission: RawRequest) -> None:
        data = builder.build(submission).to_dict()

        assert data["postId"] == "120"
        assert data["action"] == "https://example.com/thanks"
        assert data["actionExternal"] == "https://crm.example.com"
        assert data["captcha"] == "captcha-token"
        assert data["storage"] == {"utm_source": "newsletter"}
        assert data["apiSteps"] == {"fields": "step-1---step-2", "current": "step-1"}
        assert data["addonData"] == {}
        assert data["filesUpload"] == {}

    def test_params_raw(self, builder: FormDataReferenceBuilder, submission: RawRequest) -> None:
        data = builder.build(submission).to_dict()

        assert data["paramsRaw"] == {
            "email": "jane@example.com",
            "topics": ["pricing", "support"],
            "stars": "",
        }

    def test_files(self, builder: FormDataReferenceBuilder, submission: RawRequest) -> None:
        data = builder.build(submission).to_dict()

        assert data["files"]["q-docs"]["value"] == ["/uploads/a.png", "/uploads/b.png"]
        assert "q-docs" not in data["params"]

    def test_ampersand_survives_normalization(self, builder: FormDataReferenceBuilder, make_field) -> None:
        request = RawRequest(
            body_params={
                "q-company": make_field("company", "Tom & Jerry"),
                "q-report": make_field("report", "R&D.pdf", "file"),
            }
        )

        data = builder.build(request).to_dict()

        assert data["paramsRaw"] == {"company": "Tom & Jerry"}
        assert data["params"]["q-company"]["value"] == "Tom & Jerry"
        assert data["files"]["q-report"]["value"] == ["/uploads/R&D.pdf"]

    def test_storage_param_copy_decoded(self, builder: FormDataReferenceBuilder, submission: RawRequest) -> None:
        data = builder.build(submission).to_dict()

        assert data["params"]["form-storage"]["value"] == {"utm_source": "newsletter"}

    def test_unknown_form_gives_empty_details(self, builder: FormDataReferenceBuilder) -> None:
        reference = builder.build(RawRequest(body_params={"form-id": _control("404")}))

        assert isinstance(reference, FormReference)
        assert reference.form_details == {}
        assert set(reference.to_dict()) == SHARED_KEYS

    def test_empty_request(self, builder: FormDataReferenceBuilder) -> None:
        reference = builder.build(RawRequest())

        assert isinstance(reference, FormReference)
        data = reference.to_dict()
        assert data["params"] == {}
        assert data["storage"] == {}
        assert data["captcha"] == ""

    def test_invalid_storage_gives_empty(self, builder: FormDataReferenceBuilder) -> None:
        reference = builder.build(RawRequest(body_params={"form-storage": _control("{bad")}))

        assert reference.storage == {}

    def test_file_upload_merged(self, builder: FormDataReferenceBuilder, make_field) -> None:
        request = RawRequest(
            body_params={
                "form-id": _control("9"),
                "form-file-id": make_field("form-file-id", "upload-1", "hidden"),
                "form-field-name": make_field("form-field-name", "cv", "hidden"),
            },
            file_params={"file": {"name": "cv.pdf", "type": "application/pdf", "size": 1024}},
        )

        data = builder.build(request).to_dict()

        assert data["filesUpload"] == {
            "name": "cv.pdf",
            "type": "application/pdf",
            "size": 1024,
            "id": "upload-1",
            "fieldName": "cv",
        }

    def test_json_params_accepted(self, builder: FormDataReferenceBuilder) -> None:
        request = RawRequest(
            json_params={
                "form-id": {"name": "", "type": "hidden", "value": "9"},
                "q-city": {"name": "city", "type": "text", "value": "Zagreb"},
            }
        )

        data = builder.build(request).to_dict()

        assert data["label"] == "Newsletter"
        assert data["paramsRaw"] == {"city": "Zagreb"}

    def test_readable_request_uses_query(self, builder: FormDataReferenceBuilder) -> None:
        request = RawRequest(method="GET", query_params={"form-id": _control("9")})

        reference = builder.build(request, kind=READABLE)

        assert reference.to_dict()["label"] == "Newsletter"


class TestBuilderDiagnostics:
    """Tests for diagnostics collected during a build."""

    def test_clean_build(self, builder: FormDataReferenceBuilder, make_field) -> None:
        collector = DiagnosticsCollector()
        request = RawRequest(body_params={"form-id": _control("9"), "q-name": make_field("name", "Jane")})

        builder.build(request, diagnostics=collector)
        report = collector.finalize()

        assert report.status == NormalizationStatus.CLEAN
        assert report.branch == "form"
        assert report.form_id == "9"

    def test_absorbed_decode_failure(self, builder: FormDataReferenceBuilder, make_field) -> None:
        collector = DiagnosticsCollector()
        request = RawRequest(
            body_params={
                "form-id": _control("9"),
                "q-name": make_field("name", "Jane"),
                "q-broken": "{not json",
            }
        )

        reference = builder.build(request, diagnostics=collector)
        report = collector.finalize()

        assert "q-broken" not in reference.params
        assert report.status == NormalizationStatus.PARTIAL
        assert [w.code for w in report.warnings] == ["DECODE_FAILED", "FIELD_DROPPED"]
        assert report.dropped_fields == ["q-broken"]

    def test_direct_branch_reported(self, builder: FormDataReferenceBuilder) -> None:
        collector = DiagnosticsCollector()

        builder.build(
            RawRequest(body_params={"form-direct-import": _control("true")}),
            diagnostics=collector,
        )

        assert collector.finalize().branch == "direct_import"


class TestPrepareFile:
    """Tests for prepare_file."""

    def test_no_upload(self, registry: ParamRegistry) -> None:
        assert prepare_file({}, {}, registry) == {}
        assert prepare_file({"file": {}}, {}, registry) == {}

    def test_missing_id_and_name(self, registry: ParamRegistry) -> None:
        result = prepare_file({"file": {"name": "a.png"}}, {}, registry)

        assert result == {"name": "a.png", "id": "", "fieldName": ""}

    def test_id_and_name_from_params(self, registry: ParamRegistry) -> None:
        params = {
            "form-file-id": FieldEnvelope(name="form-file-id", value="f-1"),
            "form-field-name": FieldEnvelope(name="form-field-name", value="avatar"),
        }

        result = prepare_file({"file": {"name": "a.png"}}, params, registry)

        assert result["id"] == "f-1"
        assert result["fieldName"] == "avatar"


class TestFromConfig:
    """Tests for FormDataReferenceBuilder.from_config."""

    def test_uses_config_names_and_upload_dir(self, tmp_path) -> None:
        config = AppConfig(
            upload_dir=tmp_path,
            param_names={"formId": "es-form-id"},
        )
        builder = FormDataReferenceBuilder.from_config(
            config,
            form_details=InMemoryFormDetailsProvider({"3": {"label": "Contact"}}),
        )
        request = RawRequest(
            body_params={
                "es-form-id": _control("3"),
                "q-cv": json.dumps({"name": "cv", "type": "file", "value": "cv.pdf"}),
            }
        )

        data = builder.build(request).to_dict()

        assert data["label"] == "Contact"
        assert data["files"]["q-cv"]["value"] == [str(tmp_path / "cv.pdf")]
