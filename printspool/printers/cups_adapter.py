"""
CUPS spooler backend.

Requires: pycups package
Works with any CUPS-configured printer (network or local). CUPS printer
state is translated into the WinSpool status bitmask so both backends
report the same labels in the same priority order.
"""

import logging
import os
import tempfile
from typing import Optional

from printspool import status as st
from printspool.errors import (
    BackendUnavailableError,
    EnumerationError,
    SpoolerOpenError,
    SpoolStartError,
)

from .base import JOB_CREATED_MESSAGE, JobRequest, PrinterRecord, SpoolerBackend, collect_options

logger = logging.getLogger(__name__)

try:
    import cups
    CUPS_AVAILABLE = True
except ImportError:
    CUPS_AVAILABLE = False
    logger.debug("pycups package not available - CUPSSpooler will not function")

# CUPS printer-state values: 3=idle, 4=processing, 5=stopped
STATE_PROCESSING = 4
STATE_STOPPED = 5

# printer-state-reasons keywords, with -report/-warning/-error stripped
REASON_FLAGS = {
    "offline": st.PRINTER_STATUS_OFFLINE,
    "media-jam": st.PRINTER_STATUS_PAPER_JAM,
    "media-empty": st.PRINTER_STATUS_PAPER_OUT,
    "media-needed": st.PRINTER_STATUS_PAPER_OUT,
    "input-tray-missing": st.PRINTER_STATUS_PAPER_PROBLEM,
    "output-area-full": st.PRINTER_STATUS_OUTPUT_BIN_FULL,
    "toner-low": st.PRINTER_STATUS_TONER_LOW,
    "marker-supply-low": st.PRINTER_STATUS_TONER_LOW,
    "toner-empty": st.PRINTER_STATUS_NO_TONER,
    "marker-supply-empty": st.PRINTER_STATUS_NO_TONER,
    "door-open": st.PRINTER_STATUS_DOOR_OPEN,
    "cover-open": st.PRINTER_STATUS_DOOR_OPEN,
    "connecting-to-device": st.PRINTER_STATUS_INITIALIZING,
    "spool-area-full": st.PRINTER_STATUS_OUT_OF_MEMORY,
}

REASON_SUFFIXES = ("-report", "-warning", "-error")

FORMAT_TEXT = "text/plain"


def cups_status_mask(state: int, reasons: list[str]) -> int:
    """Translate printer-state and printer-state-reasons into a status bitmask."""
    mask = 0
    if state == STATE_PROCESSING:
        mask |= st.PRINTER_STATUS_PRINTING
    elif state == STATE_STOPPED:
        mask |= st.PRINTER_STATUS_NOT_AVAILABLE

    for reason in reasons or ():
        keyword = reason
        for suffix in REASON_SUFFIXES:
            if keyword.endswith(suffix):
                keyword = keyword[: -len(suffix)]
                break
        if keyword in REASON_FLAGS:
            mask |= REASON_FLAGS[keyword]
        elif reason.endswith("-error"):
            mask |= st.PRINTER_STATUS_ERROR
    return mask


def job_options(data_type: str) -> dict[str, str]:
    """Map a spooler data type onto CUPS job options."""
    if data_type.upper() == "RAW":
        return {"raw": "true"}
    if data_type.upper() == "TEXT":
        return {"document-format": FORMAT_TEXT}
    if "/" in data_type:
        return {"document-format": data_type}
    return {}


class CUPSSpooler(SpoolerBackend):
    """
    Backend for CUPS-managed printers.

    Config options:
        cups_server: CUPS server address (default: localhost)
        document_name: Title of submitted jobs
    """

    name = "cups"

    def __init__(self, config: Optional[dict] = None):
        super().__init__(config)
        self.cups_server = self.config.get("cups_server", "localhost")

    @property
    def is_available(self) -> bool:
        return CUPS_AVAILABLE

    def _require(self) -> None:
        if not CUPS_AVAILABLE:
            raise BackendUnavailableError("pycups package not installed")

    @staticmethod
    def _cups_errors() -> tuple:
        """Exceptions pycups raises for connection, IPP and HTTP failures."""
        return (RuntimeError, cups.IPPError, cups.HTTPError)

    def _connect(self):
        """Open a CUPS connection scoped to a single operation."""
        if self.cups_server != "localhost":
            cups.setServer(self.cups_server)
        return cups.Connection()

    def _printers(self) -> dict[str, dict]:
        self._require()
        try:
            conn = self._connect()
            return conn.getPrinters()
        except self._cups_errors() as e:
            logger.error(f"Failed to list CUPS printers: {e}")
            raise EnumerationError("Failed to enumerate printers") from e

    def list_printer_names(self) -> list[str]:
        return list(self._printers())

    def default_printer_name(self) -> Optional[str]:
        self._require()
        try:
            conn = self._connect()
            return conn.getDefault() or None
        except self._cups_errors() as e:
            logger.debug(f"No default CUPS printer: {e}")
            return None

    def enumerate_all(self) -> list[PrinterRecord]:
        # getPrinters() already carries every attribute, so list once
        printers = self._printers()
        if not printers:
            return []

        default_name = self.default_printer_name()
        return [
            self._record(printer_name, attrs, printer_name == default_name)
            for printer_name, attrs in printers.items()
        ]

    def fetch_details(self, printer_name: str, is_default: bool = False) -> PrinterRecord:
        try:
            printers = self._printers()
        except EnumerationError:
            return PrinterRecord.absent()

        attrs = printers.get(printer_name)
        if attrs is None:
            logger.debug(f"CUPS printer {printer_name!r} not found")
            return PrinterRecord.absent()

        return self._record(printer_name, attrs, is_default)

    def _record(self, printer_name: str, attrs: dict, is_default: bool) -> PrinterRecord:
        mask = cups_status_mask(
            attrs.get("printer-state", 0),
            attrs.get("printer-state-reasons", []),
        )
        return PrinterRecord(
            name=printer_name,
            is_default=is_default,
            status=st.decode_status(mask),
            options=collect_options(
                location=attrs.get("printer-location"),
                comment=attrs.get("printer-info"),
                driver=attrs.get("printer-make-and-model"),
                port=attrs.get("device-uri"),
            ),
        )

    def submit(self, job: JobRequest) -> str:
        self._require()
        try:
            conn = self._connect()
            printers = conn.getPrinters()
        except self._cups_errors() as e:
            logger.error(f"Failed to connect to CUPS: {e}")
            raise SpoolerOpenError("Failed to open printer") from e

        if job.printer_name not in printers:
            raise SpoolerOpenError("Failed to open printer")

        # CUPS requires a file path, so we write to temp file
        with tempfile.NamedTemporaryFile(suffix=".prn", delete=False) as f:
            f.write(job.data)
            temp_path = f.name

        try:
            cups_job_id = conn.printFile(
                job.printer_name,
                temp_path,
                self.document_name,
                job_options(job.data_type),
            )
        except (cups.IPPError, cups.HTTPError) as e:
            logger.error(f"CUPS refused job for {job.printer_name!r}: {e}")
            raise SpoolStartError("Failed to start document printing") from e
        finally:
            os.unlink(temp_path)

        logger.info(
            f"Spooled {len(job.data)} bytes ({job.data_type}) to {job.printer_name!r} as CUPS job {cups_job_id}"
        )
        return JOB_CREATED_MESSAGE
