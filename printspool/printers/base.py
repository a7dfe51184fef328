import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional

from printspool.errors import NotFoundError

logger = logging.getLogger(__name__)

DEFAULT_DATA_TYPE = "RAW"
DEFAULT_DOCUMENT_NAME = "printspool job"
JOB_CREATED_MESSAGE = "Print job created successfully"

# Descriptive fields copied into PrinterRecord.options when reported
OPTION_KEYS = ("location", "comment", "driver", "port")


@dataclass(frozen=True)
class PrinterRecord:
    name: str
    is_default: bool = False
    status: str = ""
    options: dict[str, str] = field(default_factory=dict)

    @classmethod
    def absent(cls) -> "PrinterRecord":
        """Record returned when a printer handle could not be opened."""
        return cls(name="")

    @property
    def found(self) -> bool:
        return bool(self.name)

    def to_dict(self) -> dict:
        """Return printer info as dict for API responses."""
        return {
            "name": self.name,
            "isDefault": self.is_default,
            "status": self.status,
            "options": dict(self.options),
        }


@dataclass
class JobRequest:
    printer_name: str
    data: bytes = b""
    data_type: str = DEFAULT_DATA_TYPE


def collect_options(**fields: Optional[str]) -> dict[str, str]:
    """Keep only the fields the spooler actually reported."""
    return {key: value for key, value in fields.items() if value is not None}


class SpoolerBackend(ABC):
    """
    Abstract base class for OS spooler backends.

    Subclasses provide the platform primitives (listing names, reading the
    default name, fetching details, submitting a job). The lookup policy
    shared by every platform lives here.
    """

    name = "base"

    def __init__(self, config: Optional[dict] = None):
        self.config = config or {}
        self.document_name = self.config.get("document_name", DEFAULT_DOCUMENT_NAME)

    @property
    def is_available(self) -> bool:
        """Check if the platform library for this backend is usable."""
        return True

    @abstractmethod
    def list_printer_names(self) -> list[str]:
        """List local and connected printer names. Raises EnumerationError."""
        pass

    @abstractmethod
    def default_printer_name(self) -> Optional[str]:
        """Ask the spooler for the default printer name, None if there is none."""
        pass

    @abstractmethod
    def fetch_details(self, printer_name: str, is_default: bool = False) -> PrinterRecord:
        """Fetch a normalized record, PrinterRecord.absent() if it can't be opened."""
        pass

    @abstractmethod
    def submit(self, job: JobRequest) -> str:
        """Spool a raw job. Returns the success message."""
        pass

    def enumerate_all(self) -> list[PrinterRecord]:
        names = self.list_printer_names()
        if not names:
            return []

        # Snapshot once so every record is compared against the same name
        default_name = self.default_printer_name()

        records = []
        for printer_name in names:
            is_default = printer_name == default_name
            record = self.fetch_details(printer_name, is_default)
            if not record.found:
                logger.warning(f"Printer {printer_name!r} could not be opened, listing without details")
                record = PrinterRecord(name=printer_name, is_default=is_default)
            records.append(record)
        return records

    def get_default(self) -> PrinterRecord:
        default_name = self.default_printer_name()
        if not default_name:
            raise NotFoundError("Failed to get default printer")
        return self.fetch_details(default_name, is_default=True)

    def get_status(self, printer_name: str) -> PrinterRecord:
        record = self.fetch_details(printer_name)
        if not record.found:
            raise NotFoundError("Printer not found")
        return record
