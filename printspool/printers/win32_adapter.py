"""
Windows spooler backend.

Requires: pywin32 package
Talks to WinSpool through win32print. The size-then-fetch buffer protocol
of GetPrinter/EnumPrinters is handled inside win32print, so every call
here receives fully decoded structures.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from printspool.errors import (
    BackendUnavailableError,
    EnumerationError,
    SpoolerOpenError,
    SpoolStartError,
    SpoolWriteError,
)
from printspool.status import decode_status

from .base import JOB_CREATED_MESSAGE, JobRequest, PrinterRecord, SpoolerBackend, collect_options

logger = logging.getLogger(__name__)

try:
    import pywintypes
    import win32print
    WIN32_AVAILABLE = True
except ImportError:
    WIN32_AVAILABLE = False
    logger.debug("pywin32 not available - Win32Spooler will not function")

# PRINTER_ENUM_LOCAL | PRINTER_ENUM_CONNECTIONS
ENUM_FLAGS = 0x00000002 | 0x00000004
INFO_LEVEL = 2


class Win32Spooler(SpoolerBackend):
    """
    Backend for the Windows print spooler.

    Config options:
        document_name: Display name of spooled documents
    """

    name = "win32"

    @property
    def is_available(self) -> bool:
        return WIN32_AVAILABLE

    def _require(self) -> None:
        if not WIN32_AVAILABLE:
            raise BackendUnavailableError("pywin32 package not installed")

    @contextmanager
    def _open(self, printer_name: str) -> Iterator[object]:
        """Open a printer handle that is closed on every exit path."""
        try:
            handle = win32print.OpenPrinter(printer_name)
        except pywintypes.error as e:
            raise SpoolerOpenError("Failed to open printer") from e
        try:
            yield handle
        finally:
            win32print.ClosePrinter(handle)

    def list_printer_names(self) -> list[str]:
        self._require()
        try:
            printers = win32print.EnumPrinters(ENUM_FLAGS, None, INFO_LEVEL)
        except pywintypes.error as e:
            logger.error(f"EnumPrinters failed: {e}")
            raise EnumerationError("Failed to enumerate printers") from e
        return [info["pPrinterName"] for info in printers]

    def default_printer_name(self) -> Optional[str]:
        self._require()
        try:
            return win32print.GetDefaultPrinter() or None
        except pywintypes.error as e:
            logger.debug(f"No default printer: {e}")
            return None

    def fetch_details(self, printer_name: str, is_default: bool = False) -> PrinterRecord:
        self._require()
        try:
            with self._open(printer_name) as handle:
                try:
                    info = win32print.GetPrinter(handle, INFO_LEVEL)
                except pywintypes.error as e:
                    logger.warning(f"GetPrinter({printer_name!r}) failed: {e}")
                    return PrinterRecord(name=printer_name, is_default=is_default)
        except SpoolerOpenError as e:
            logger.debug(f"OpenPrinter({printer_name!r}) failed: {e.__cause__}")
            return PrinterRecord.absent()

        return PrinterRecord(
            name=printer_name,
            is_default=is_default,
            status=decode_status(info.get("Status", 0)),
            options=collect_options(
                location=info.get("pLocation"),
                comment=info.get("pComment"),
                driver=info.get("pDriverName"),
                port=info.get("pPortName"),
            ),
        )

    def submit(self, job: JobRequest) -> str:
        self._require()
        with self._open(job.printer_name) as handle:
            try:
                win32print.StartDocPrinter(handle, 1, (self.document_name, None, job.data_type))
            except pywintypes.error as e:
                logger.error(f"StartDocPrinter on {job.printer_name!r} failed: {e}")
                raise SpoolStartError("Failed to start document printing") from e

            try:
                win32print.StartPagePrinter(handle)
                written = win32print.WritePrinter(handle, job.data)
                win32print.EndPagePrinter(handle)
            except pywintypes.error as e:
                logger.error(f"Writing to {job.printer_name!r} failed: {e}")
                self._end_document(handle, job.printer_name)
                raise SpoolWriteError("Failed to write print data") from e

            if written is not None and written < len(job.data):
                logger.warning(
                    f"Short write to {job.printer_name!r}: {written} of {len(job.data)} bytes"
                )

            try:
                win32print.EndDocPrinter(handle)
            except pywintypes.error as e:
                logger.error(f"EndDocPrinter on {job.printer_name!r} failed: {e}")
                raise SpoolWriteError("Failed to write print data") from e

        logger.info(f"Spooled {len(job.data)} bytes ({job.data_type}) to {job.printer_name!r}")
        return JOB_CREATED_MESSAGE

    def _end_document(self, handle: object, printer_name: str) -> None:
        """Close out a document after a failed write."""
        try:
            win32print.EndDocPrinter(handle)
        except pywintypes.error as e:
            logger.warning(f"EndDocPrinter on {printer_name!r} after failed write: {e}")
