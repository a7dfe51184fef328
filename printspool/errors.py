"""Spooler exceptions."""


class SpoolerError(RuntimeError):
    """Base error for spooler operations."""


class ArgumentError(SpoolerError, TypeError):
    """Raised synchronously when a call is malformed."""


class NotFoundError(SpoolerError):
    """Raised when a named printer or the default printer does not exist."""


class SpoolerOpenError(SpoolerError):
    """Raised when the spooler refuses a printer handle."""


class SpoolStartError(SpoolerError):
    """Raised when the spooler refuses to start a document."""


class SpoolWriteError(SpoolerError):
    """Raised when writing or closing out a started document fails."""


class EnumerationError(SpoolerError):
    """Raised when the printer listing itself fails."""


class BackendUnavailableError(SpoolerError):
    """Raised when the platform library for a backend is not installed."""
