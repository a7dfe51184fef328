"""Tests for the lookup policy shared by all spooler backends."""

import pytest

from printspool.errors import EnumerationError, NotFoundError, SpoolerOpenError, SpoolStartError
from printspool.printers.base import JobRequest, PrinterRecord
from printspool.printers.mock import MockSpooler
from printspool.status import PRINTER_STATUS_OFFLINE, PRINTER_STATUS_PAPER_OUT


@pytest.fixture
def spooler():
    """Mock spooler with three printers, the second one default."""
    backend = MockSpooler()
    backend.add_printer("Front Desk", options={"location": "Lobby", "port": "USB001"})
    backend.add_printer("Labels", status=PRINTER_STATUS_PAPER_OUT, options={"driver": "ZDesigner"})
    backend.add_printer("Archive", status=PRINTER_STATUS_OFFLINE)
    backend.default_name = "Labels"
    return backend


class TestPrinterRecord:
    def test_to_dict_shape(self):
        """Records serialize with camelCase isDefault."""
        record = PrinterRecord("P1", True, "ready", {"port": "LPT1:"})
        assert record.to_dict() == {
            "name": "P1",
            "isDefault": True,
            "status": "ready",
            "options": {"port": "LPT1:"},
        }

    def test_absent_record(self):
        """Absent records have no name and are not found."""
        record = PrinterRecord.absent()
        assert record.name == ""
        assert not record.found
        assert record.options == {}


class TestEnumerateAll:
    def test_empty_host_returns_empty_list(self):
        """No printers configured yields an empty list, not an error."""
        assert MockSpooler().enumerate_all() == []

    def test_exactly_default_is_marked(self, spooler):
        """Only the printer named like the OS default has is_default."""
        records = spooler.enumerate_all()
        assert [r.name for r in records] == ["Front Desk", "Labels", "Archive"]
        assert [r.is_default for r in records] == [False, True, False]

    def test_no_default_marks_none(self, spooler):
        """Without a default every record is non-default."""
        spooler.default_name = None
        assert not any(r.is_default for r in spooler.enumerate_all())

    def test_statuses_are_decoded(self, spooler):
        """Each record carries its decoded status label."""
        statuses = {r.name: r.status for r in spooler.enumerate_all()}
        assert statuses == {"Front Desk": "ready", "Labels": "paper-out", "Archive": "offline"}

    def test_unreachable_printer_degrades(self, spooler):
        """A printer that can't be opened is listed without details."""
        spooler.printers["Labels"].reachable = False
        records = spooler.enumerate_all()
        labels = records[1]
        assert labels.name == "Labels"
        assert labels.is_default is True
        assert labels.status == ""
        assert labels.options == {}
        assert records[0].options == {"location": "Lobby", "port": "USB001"}

    def test_listing_failure_propagates(self, spooler):
        """If the listing call itself fails the whole call fails."""
        spooler.fail_enumeration = True
        with pytest.raises(EnumerationError):
            spooler.enumerate_all()

    def test_default_is_read_once(self, spooler):
        """The default name is snapshotted once per enumeration."""
        calls = []
        original = spooler.default_printer_name

        def counting():
            calls.append(1)
            return original()

        spooler.default_printer_name = counting
        spooler.enumerate_all()
        assert len(calls) == 1


class TestGetDefault:
    def test_returns_default_record(self, spooler):
        """The default printer is fetched and flagged."""
        record = spooler.get_default()
        assert record.name == "Labels"
        assert record.is_default is True
        assert record.options == {"driver": "ZDesigner"}

    def test_no_default_raises(self, spooler):
        """No OS default raises NotFoundError."""
        spooler.default_name = None
        with pytest.raises(NotFoundError, match="Failed to get default printer"):
            spooler.get_default()


class TestGetStatus:
    def test_known_printer(self, spooler):
        """Status query returns the fetched record."""
        record = spooler.get_status("Archive")
        assert record.name == "Archive"
        assert record.status == "offline"
        assert record.is_default is False

    def test_unknown_printer_raises(self, spooler):
        """Unknown printers raise NotFoundError."""
        with pytest.raises(NotFoundError, match="Printer not found"):
            spooler.get_status("nonexistent-printer-xyz")


class TestOptions:
    def test_unset_fields_have_no_keys(self):
        """Options never hold placeholders for fields the spooler didn't report."""
        backend = MockSpooler()
        backend.add_printer("P", options={"location": None, "comment": "2nd floor"})
        record = backend.get_status("P")
        assert record.options == {"comment": "2nd floor"}
        assert "location" not in record.options


class TestSubmit:
    def test_submit_records_job(self, spooler):
        """Accepted jobs return the success message."""
        job = JobRequest("Front Desk", b"hello", "TEXT")
        assert spooler.submit(job) == "Print job created successfully"
        assert spooler.jobs == [job]

    def test_submit_unknown_printer(self, spooler):
        """Unknown printers fail to open."""
        with pytest.raises(SpoolerOpenError, match="Failed to open printer"):
            spooler.submit(JobRequest("", b"data"))

    def test_submit_refused_document(self, spooler):
        """A printer refusing the document raises SpoolStartError."""
        spooler.printers["Front Desk"].accepts_jobs = False
        with pytest.raises(SpoolStartError, match="Failed to start document printing"):
            spooler.submit(JobRequest("Front Desk", b"data"))
        assert spooler.jobs == []


class TestMockConfig:
    def test_printers_from_config(self):
        """Mock printers and default can be loaded from config."""
        backend = MockSpooler({
            "mock_printers": [{"name": "A", "status": PRINTER_STATUS_OFFLINE}, {"name": "B"}],
            "mock_default": "B",
        })
        assert backend.get_default().name == "B"
        assert backend.get_status("A").status == "offline"

    def test_empty_printer_list_in_config(self):
        """An empty mock_printers key loads no printers."""
        backend = MockSpooler({"mock_printers": None})
        assert backend.enumerate_all() == []
