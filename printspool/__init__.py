"""Async access to the operating system print spooler."""

from .errors import (
    ArgumentError,
    BackendUnavailableError,
    EnumerationError,
    NotFoundError,
    SpoolerError,
    SpoolerOpenError,
    SpoolStartError,
    SpoolWriteError,
)
from .facade import PrintSpooler
from .printers import CUPSSpooler, JobRequest, MockSpooler, PrinterRecord, SpoolerBackend, Win32Spooler
from .status import decode_status

__all__ = [
    "ArgumentError",
    "BackendUnavailableError",
    "EnumerationError",
    "NotFoundError",
    "SpoolerError",
    "SpoolerOpenError",
    "SpoolStartError",
    "SpoolWriteError",
    "PrintSpooler",
    "CUPSSpooler",
    "JobRequest",
    "MockSpooler",
    "PrinterRecord",
    "SpoolerBackend",
    "Win32Spooler",
    "decode_status",
]
