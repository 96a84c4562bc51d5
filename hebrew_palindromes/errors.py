"""Domain exceptions for palindrome scanning and CLI diagnostics."""

from __future__ import annotations


class ScanConfigurationError(ValueError):
    """Raised when palindrome scan length bounds are misconfigured."""

    def __init__(self, detail: str, *, field_name: str | None = None) -> None:
        """Initialize a configuration error with the offending field name."""

        super().__init__(detail)
        self.detail = detail
        self.field_name = field_name


class CommandStageError(RuntimeError):
    """Raised when a specific command stage fails."""

    def __init__(
        self,
        *,
        stage: str,
        detail: str,
        hint: str | None = None,
    ) -> None:
        """Initialize a stage-scoped command error."""

        super().__init__(detail)
        self.stage = stage
        self.detail = detail
        self.hint = hint
