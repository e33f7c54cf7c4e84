"""Core shared infrastructure for formrelay.

Contains the field-level models and the protocols of the platform
services the normalization layer depends on.
"""

from formrelay.core.collaborators import (
    FilePathResolver,
    FormDetailsProvider,
    InMemoryFormDetailsProvider,
    InMemorySettingsRegistry,
    SettingsRegistry,
    UploadDirResolver,
)
from formrelay.core.models import (
    DELIMITER,
    DecodedField,
    FieldEnvelope,
    FileField,
    RoutedParams,
)

__all__ = [
    "DELIMITER",
    # Models
    "DecodedField",
    "FieldEnvelope",
    "FileField",
    "RoutedParams",
    # Collaborators
    "FilePathResolver",
    "FormDetailsProvider",
    "InMemoryFormDetailsProvider",
    "InMemorySettingsRegistry",
    "SettingsRegistry",
    "UploadDirResolver",
]
