"""Collector for normalization diagnostics."""

from formrelay.diagnostics.models import (
    DiagnosticWarning,
    NormalizationDiagnostic,
    NormalizationStatus,
    Stage,
)


class DiagnosticsCollector:
    """Collects warnings while a single submission is normalized.

    Passed optionally through the decoder, router and reference builder.
    Nothing in the normalization layer raises on these conditions; the
    collector is the only place they become visible.
    """

    def __init__(self) -> None:
        self.form_id = ""
        self.branch = ""
        self._warnings: list[DiagnosticWarning] = []
        self._dropped: list[str] = []

    def add_warning(
        self,
        stage: Stage,
        code: str,
        message: str,
        field_key: str | None = None,
        details: dict | None = None,
    ) -> None:
        """Add a warning to the diagnostics.

        Args:
            stage: Normalization stage where the warning occurred.
            code: Warning code (e.g., "DECODE_FAILED").
            message: Human-readable warning message.
            field_key: Optional submitted key the warning relates to.
            details: Optional additional details.
        """
        self._warnings.append(
            DiagnosticWarning(
                stage=stage,
                code=code,
                message=message,
                field_key=field_key,
                details=details,
            )
        )

    def record_dropped(self, field_key: str, reason: str) -> None:
        """Record a field the router dropped."""
        self._dropped.append(field_key)
        self.add_warning(
            stage="routing",
            code="FIELD_DROPPED",
            message=f"Field dropped: {reason}",
            field_key=field_key,
        )

    @property
    def warnings(self) -> list[DiagnosticWarning]:
        return list(self._warnings)

    def finalize(self) -> NormalizationDiagnostic:
        """Finalize and return the diagnostic report."""
        status = NormalizationStatus.PARTIAL if self._warnings else NormalizationStatus.CLEAN
        return NormalizationDiagnostic(
            form_id=self.form_id,
            branch=self.branch,
            status=status,
            warnings=self._warnings,
            dropped_fields=self._dropped,
        )
