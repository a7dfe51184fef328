"""
Asyncio facade over a spooler backend.

Every operation runs on a bounded worker pool and is handed back to the
caller as an awaitable future. Arguments are validated on the caller's
thread, so malformed calls raise ArgumentError before a worker is used.
"""

import asyncio
import logging
from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Optional

from printspool.errors import ArgumentError, NotFoundError
from printspool.printers.base import DEFAULT_DATA_TYPE, JobRequest, SpoolerBackend

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 4

BYTES_TYPES = (bytes, bytearray, memoryview)

PRINT_USAGE = (
    "Expected either an options mapping {printerName, data, [dataType]} or at least two "
    "arguments: printer_name (str), data (str or bytes), [data_type (str)]"
)


def _lookup(options: Mapping, *keys: str) -> Any:
    """Return the first of keys present in options (snake_case or camelCase)."""
    for key in keys:
        if key in options:
            return options[key]
    return None


def _has_any(options: Mapping, *keys: str) -> bool:
    return any(key in options for key in keys)


def _to_bytes(data: Any) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    if isinstance(data, BYTES_TYPES):
        return bytes(data)
    raise ArgumentError("data must be string or bytes")


def parse_status_args(options: Optional[Mapping] = None, printer_name: Any = None) -> str:
    """Extract the printer name for a status query."""
    if options is not None:
        if not isinstance(options, Mapping):
            raise ArgumentError("Expected a mapping with printerName property")
        printer_name = _lookup(options, "printer_name", "printerName")

    if not isinstance(printer_name, str):
        raise ArgumentError("Object must contain printerName as string")
    return printer_name


def parse_print_args(args: tuple, kwargs: dict) -> JobRequest:
    """
    Build a JobRequest from print_direct() arguments.

    Accepted shapes:
        print_direct({"printerName": ..., "data": ..., "dataType": ...})
        print_direct(printer_name=..., data=..., data_type=...)
        print_direct(printer_name, data, [data_type])

    Raises:
        ArgumentError: If the call matches none of the shapes
    """
    if (len(args) == 1 and isinstance(args[0], Mapping) and not kwargs) or (not args and kwargs):
        options = args[0] if args else kwargs
        if not _has_any(options, "printer_name", "printerName") or "data" not in options:
            raise ArgumentError("Object must contain printerName and data properties")

        printer_name = _lookup(options, "printer_name", "printerName")
        if not isinstance(printer_name, str):
            raise ArgumentError("printerName must be a string")

        # Non-string data types fall back to RAW
        data_type = _lookup(options, "data_type", "dataType")
        if not isinstance(data_type, str):
            data_type = DEFAULT_DATA_TYPE

        return JobRequest(printer_name, _to_bytes(options["data"]), data_type)

    if len(args) >= 2 and isinstance(args[0], str) and isinstance(args[1], (str,) + BYTES_TYPES):
        unexpected = set(kwargs) - {"data_type", "dataType"}
        if unexpected or len(args) > 3:
            raise ArgumentError(PRINT_USAGE)

        data_type = args[2] if len(args) == 3 else _lookup(kwargs, "data_type", "dataType")
        if not isinstance(data_type, str):
            data_type = DEFAULT_DATA_TYPE

        return JobRequest(args[0], _to_bytes(args[1]), data_type)

    raise ArgumentError(PRINT_USAGE)


class PrintSpooler:
    """
    Async entry point to the OS print spooler.

    Usage:
        async with PrintSpooler(Win32Spooler()) as spooler:
            printers = await spooler.get_printers()
            await spooler.print_direct("Zebra", b"^XA^FDHello^FS^XZ")

    Operations are not cancellable and carry no timeout; once queued, the
    spooler call runs to completion on its worker.
    """

    def __init__(self, backend: SpoolerBackend, max_workers: int = DEFAULT_MAX_WORKERS):
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.backend = backend
        self.max_workers = max_workers
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="printspool")

    async def __aenter__(self) -> "PrintSpooler":
        return self

    async def __aexit__(self, *exc_info) -> None:
        self.close(wait=False)

    def close(self, wait: bool = True) -> None:
        """Shut down the worker pool. Already queued operations still finish."""
        self._executor.shutdown(wait=wait)

    def _dispatch(self, func: Callable, *args: Any) -> asyncio.Future:
        loop = asyncio.get_running_loop()
        future = loop.run_in_executor(self._executor, func, *args)
        future.add_done_callback(self._log_failure)
        return future

    @staticmethod
    def _log_failure(future: asyncio.Future) -> None:
        if future.cancelled():
            return
        error = future.exception()
        if isinstance(error, NotFoundError):
            logger.info(f"Spooler lookup found nothing: {error}")
        elif error is not None:
            logger.error(f"Spooler operation failed: {error}")

    def get_printers(self) -> asyncio.Future:
        """List every local and connected printer."""
        return self._dispatch(self.backend.enumerate_all)

    def get_system_default_printer(self) -> asyncio.Future:
        """Resolve the OS default printer. Rejects with NotFoundError if unset."""
        return self._dispatch(self.backend.get_default)

    def get_status_printer(self, options: Optional[Mapping] = None, *, printer_name: Any = None) -> asyncio.Future:
        """Query one printer by name. Rejects with NotFoundError if it can't be opened."""
        name = parse_status_args(options, printer_name)
        return self._dispatch(self.backend.get_status, name)

    def print_direct(self, *args: Any, **kwargs: Any) -> asyncio.Future:
        """
        Submit a raw job. See parse_print_args() for accepted arguments.

        Rejects with SpoolerOpenError or SpoolStartError when the job can't
        be started, and with SpoolWriteError when writing or closing the
        document fails after it was started.
        """
        job = parse_print_args(args, kwargs)
        logger.debug(f"Queuing {len(job.data)} byte job for {job.printer_name!r}")
        return self._dispatch(self.backend.submit, job)
