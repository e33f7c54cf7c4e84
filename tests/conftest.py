"""Pytest configuration and shared fixtures."""

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from formrelay.core import InMemoryFormDetailsProvider, InMemorySettingsRegistry, UploadDirResolver
from formrelay.reference import FormDataReferenceBuilder
from formrelay.routing import ParamRegistry


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def schemas_dir(project_root: Path) -> Path:
    """Return the schemas directory."""
    return project_root / "schemas"


@pytest.fixture
def manifest_schema_path(schemas_dir: Path) -> Path:
    """Return the param manifest schema path."""
    return schemas_dir / "manifest.schema.json"


@pytest.fixture
def make_field() -> Callable[..., str]:
    """Return a helper that JSON-encodes a client field envelope."""

    def _make(name: str, value: Any, type_: str = "text", **extra: Any) -> str:
        return json.dumps({"name": name, "type": type_, "value": value, **extra})

    return _make


@pytest.fixture
def registry() -> ParamRegistry:
    """Param registry with the default control field names."""
    return ParamRegistry()


@pytest.fixture
def resolver() -> UploadDirResolver:
    """Upload resolver rooted at /uploads."""
    return UploadDirResolver("/uploads")


@pytest.fixture
def form_details() -> InMemoryFormDetailsProvider:
    """Form details provider knowing a single HubSpot form."""
    return InMemoryFormDetailsProvider(
        {
            "9": {
                "formId": "9",
                "type": "hubspot",
                "itemId": "hs-list-1",
                "label": "Newsletter",
            }
        }
    )


@pytest.fixture
def settings_registry() -> InMemorySettingsRegistry:
    """Settings registry with one filter for the general settings page."""
    settings = InMemorySettingsRegistry()
    settings.register(
        "general",
        "settings",
        "general_settings_fields",
        lambda form_id: [{"name": "sender-email", "formId": form_id}],
    )
    return settings


@pytest.fixture
def builder(
    registry: ParamRegistry,
    resolver: UploadDirResolver,
    form_details: InMemoryFormDetailsProvider,
    settings_registry: InMemorySettingsRegistry,
) -> FormDataReferenceBuilder:
    """Reference builder wired to the in-memory collaborators."""
    return FormDataReferenceBuilder(
        registry=registry,
        resolver=resolver,
        form_details=form_details,
        settings_registry=settings_registry,
    )
