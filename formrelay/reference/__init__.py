"""Normalized submission records and the builder that produces them."""

from formrelay.reference.builder import FormDataReferenceBuilder, prepare_file
from formrelay.reference.models import (
    DirectImportReference,
    FormDataReference,
    FormReference,
    SettingsReference,
    SubmissionReference,
)

__all__ = [
    "DirectImportReference",
    "FormDataReference",
    "FormDataReferenceBuilder",
    "FormReference",
    "SettingsReference",
    "SubmissionReference",
    "prepare_file",
]
