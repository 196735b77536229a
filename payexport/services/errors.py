"""Shared exception hierarchy for payment export services."""


class PaymentExportError(Exception):
    """Base exception for export errors."""


# ── Validation ────────────────────────────────────────────────────────────────


class ValidationError(PaymentExportError):
    """A flag is malformed or contradicts another flag."""

    def __init__(self, flag: str, value: object, message: str) -> None:
        super().__init__(f"{flag}: {message}")
        self.flag = flag
        self.value = value
        self.message = message


# ── Record store ──────────────────────────────────────────────────────────────


class StoreError(PaymentExportError):
    """Record store unavailable or query rejected."""


# ── Output ────────────────────────────────────────────────────────────────────


class FileSystemError(PaymentExportError):
    """No writable ancestor directory, or the write itself failed."""


class ExportAborted(PaymentExportError):
    """Operator declined a create-directory or overwrite confirmation."""
