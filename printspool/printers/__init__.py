from .base import JobRequest, PrinterRecord, SpoolerBackend
from .cups_adapter import CUPSSpooler
from .mock import MockSpooler
from .win32_adapter import Win32Spooler

__all__ = ["JobRequest", "PrinterRecord", "SpoolerBackend", "CUPSSpooler", "MockSpooler", "Win32Spooler"]
