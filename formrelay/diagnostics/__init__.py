"""Diagnostics collection for submission normalization.

Tracks decode failures and dropped fields that the normalization layer
absorbs without raising.
"""

from formrelay.diagnostics.collector import DiagnosticsCollector
from formrelay.diagnostics.models import (
    DiagnosticWarning,
    NormalizationDiagnostic,
    NormalizationStatus,
)

__all__ = [
    "DiagnosticsCollector",
    "DiagnosticWarning",
    "NormalizationDiagnostic",
    "NormalizationStatus",
]
