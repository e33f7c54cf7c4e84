"""Collaborator protocols.

The normalization layer consumes a few platform services it does not own:
upload path resolution, the form details registry and the settings filter
registry. Each is a protocol here, with a small in-memory implementation
suitable for scripts, the CLI and tests.
"""

import logging
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

LOGGER = logging.getLogger(__name__)


@runtime_checkable
class FilePathResolver(Protocol):
    """Maps an uploaded-file token to a usable path or identifier."""

    def resolve(self, token: str) -> str:
        ...


@runtime_checkable
class FormDetailsProvider(Protocol):
    """Looks up the stored details of a form by its id."""

    def get_form_details(self, form_id: str) -> dict[str, Any]:
        """Return the form's details, or an empty dict if unknown."""
        ...


@runtime_checkable
class SettingsRegistry(Protocol):
    """Settings filter registry used for admin settings submissions."""

    def get_filter_name(self, settings_type: str, type_: str) -> str:
        """Return the filter name registered for (settings_type, type_), or ""."""
        ...

    def invoke(self, name: str, form_id: str) -> Any:
        """Run the named settings filter for a form and return its fields."""
        ...


class UploadDirResolver:
    """Resolves upload tokens to files inside a temporary upload directory.

    Only the final path component of a token is used, so tokens cannot
    point outside the upload directory.
    """

    def __init__(self, upload_dir: Path | str) -> None:
        self.upload_dir = Path(upload_dir)

    def resolve(self, token: str) -> str:
        name = Path(token.strip()).name
        if not name:
            return ""
        return str(self.upload_dir / name)


class InMemoryFormDetailsProvider:
    """Form details provider backed by a dict of form_id -> details."""

    def __init__(self, forms: Mapping[str, dict[str, Any]] | None = None) -> None:
        self._forms = dict(forms or {})

    def add(self, form_id: str, details: dict[str, Any]) -> None:
        self._forms[form_id] = details

    def get_form_details(self, form_id: str) -> dict[str, Any]:
        details = self._forms.get(form_id)
        if details is None:
            LOGGER.info("No form details found for form %r", form_id)
            return {}
        return dict(details)


class InMemorySettingsRegistry:
    """Settings registry backed by plain dicts.

    ``filters`` maps settings_type -> {type -> filter name}; ``hooks`` maps a
    filter name to a callable taking the form id.
    """

    def __init__(
        self,
        filters: Mapping[str, Mapping[str, str]] | None = None,
        hooks: Mapping[str, Callable[[str], Any]] | None = None,
    ) -> None:
        self._filters = {key: dict(value) for key, value in (filters or {}).items()}
        self._hooks = dict(hooks or {})

    def register(
        self,
        settings_type: str,
        type_: str,
        name: str,
        hook: Callable[[str], Any],
    ) -> None:
        """Register a settings filter and the hook that produces its fields."""
        self._filters.setdefault(settings_type, {})[type_] = name
        self._hooks[name] = hook

    def get_filter_name(self, settings_type: str, type_: str) -> str:
        return self._filters.get(settings_type, {}).get(type_, "")

    def invoke(self, name: str, form_id: str) -> Any:
        hook = self._hooks.get(name)
        if hook is None:
            LOGGER.info("Settings filter %r has no registered hook", name)
            return []
        return hook(form_id)
