import logging
from dataclasses import dataclass, field
from typing import Optional

from printspool.errors import EnumerationError, SpoolerOpenError, SpoolStartError
from printspool.status import decode_status

from .base import JOB_CREATED_MESSAGE, JobRequest, PrinterRecord, SpoolerBackend, OPTION_KEYS

logger = logging.getLogger(__name__)


@dataclass
class MockPrinter:
    name: str
    status: int = 0
    options: dict = field(default_factory=dict)
    reachable: bool = True
    accepts_jobs: bool = True


class MockSpooler(SpoolerBackend):
    """In-memory spooler for testing without a print system."""

    name = "mock"

    def __init__(self, config: Optional[dict] = None):
        super().__init__(config)
        self.printers: dict[str, MockPrinter] = {}
        self.default_name: Optional[str] = self.config.get("mock_default")
        self.jobs: list[JobRequest] = []
        self.fail_enumeration = False

        for printer_conf in self.config.get("mock_printers") or []:
            self.add_printer(
                printer_conf["name"],
                status=printer_conf.get("status", 0),
                options=printer_conf.get("options", {}),
            )

    def add_printer(self, name: str, status: int = 0, options: Optional[dict] = None, **kwargs) -> MockPrinter:
        """Allow tests to register a printer."""
        printer = MockPrinter(name=name, status=status, options=dict(options or {}), **kwargs)
        self.printers[name] = printer
        return printer

    def list_printer_names(self) -> list[str]:
        if self.fail_enumeration:
            raise EnumerationError("Failed to enumerate printers")
        return list(self.printers)

    def default_printer_name(self) -> Optional[str]:
        return self.default_name

    def fetch_details(self, printer_name: str, is_default: bool = False) -> PrinterRecord:
        printer = self.printers.get(printer_name)
        if printer is None or not printer.reachable:
            return PrinterRecord.absent()

        return PrinterRecord(
            name=printer.name,
            is_default=is_default,
            status=decode_status(printer.status),
            options={k: v for k, v in printer.options.items() if k in OPTION_KEYS and v is not None},
        )

    def submit(self, job: JobRequest) -> str:
        printer = self.printers.get(job.printer_name)
        if printer is None or not printer.reachable:
            raise SpoolerOpenError("Failed to open printer")
        if not printer.accepts_jobs:
            raise SpoolStartError("Failed to start document printing")

        self.jobs.append(job)
        logger.info(f"[MOCK] Spooled {len(job.data)} bytes ({job.data_type}) to {job.printer_name!r}")
        return JOB_CREATED_MESSAGE
