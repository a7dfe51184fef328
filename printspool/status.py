"""
Printer status decoding.

WinSpool reports printer status as a bitmask where several flags can be
set at once. Only one label is surfaced, picked by walking a fixed
priority list and returning the first flag that is set.
"""

# WinSpool PRINTER_STATUS_* values (winspool.h). Declared here so decoding
# works without pywin32 installed.
PRINTER_STATUS_PAUSED = 0x00000001
PRINTER_STATUS_ERROR = 0x00000002
PRINTER_STATUS_PENDING_DELETION = 0x00000004
PRINTER_STATUS_PAPER_JAM = 0x00000008
PRINTER_STATUS_PAPER_OUT = 0x00000010
PRINTER_STATUS_MANUAL_FEED = 0x00000020
PRINTER_STATUS_PAPER_PROBLEM = 0x00000040
PRINTER_STATUS_OFFLINE = 0x00000080
PRINTER_STATUS_IO_ACTIVE = 0x00000100
PRINTER_STATUS_BUSY = 0x00000200
PRINTER_STATUS_PRINTING = 0x00000400
PRINTER_STATUS_OUTPUT_BIN_FULL = 0x00000800
PRINTER_STATUS_NOT_AVAILABLE = 0x00001000
PRINTER_STATUS_WAITING = 0x00002000
PRINTER_STATUS_PROCESSING = 0x00004000
PRINTER_STATUS_INITIALIZING = 0x00008000
PRINTER_STATUS_WARMING_UP = 0x00010000
PRINTER_STATUS_TONER_LOW = 0x00020000
PRINTER_STATUS_NO_TONER = 0x00040000
PRINTER_STATUS_PAGE_PUNT = 0x00080000
PRINTER_STATUS_USER_INTERVENTION = 0x00100000
PRINTER_STATUS_OUT_OF_MEMORY = 0x00200000
PRINTER_STATUS_DOOR_OPEN = 0x00400000

STATUS_READY = "ready"

# Order matters: the first set flag wins.
STATUS_PRIORITY: tuple[tuple[int, str], ...] = (
    (PRINTER_STATUS_OFFLINE, "offline"),
    (PRINTER_STATUS_ERROR, "error"),
    (PRINTER_STATUS_PAPER_JAM, "paper-jam"),
    (PRINTER_STATUS_PAPER_OUT, "paper-out"),
    (PRINTER_STATUS_MANUAL_FEED, "manual-feed"),
    (PRINTER_STATUS_PAPER_PROBLEM, "paper-problem"),
    (PRINTER_STATUS_BUSY, "busy"),
    (PRINTER_STATUS_PRINTING, "printing"),
    (PRINTER_STATUS_OUTPUT_BIN_FULL, "output-bin-full"),
    (PRINTER_STATUS_NOT_AVAILABLE, "not-available"),
    (PRINTER_STATUS_WAITING, "waiting"),
    (PRINTER_STATUS_PROCESSING, "processing"),
    (PRINTER_STATUS_INITIALIZING, "initializing"),
    (PRINTER_STATUS_WARMING_UP, "warming-up"),
    (PRINTER_STATUS_TONER_LOW, "toner-low"),
    (PRINTER_STATUS_NO_TONER, "no-toner"),
    (PRINTER_STATUS_PAGE_PUNT, "page-punt"),
    (PRINTER_STATUS_USER_INTERVENTION, "user-intervention"),
    (PRINTER_STATUS_OUT_OF_MEMORY, "out-of-memory"),
    (PRINTER_STATUS_DOOR_OPEN, "door-open"),
)

STATUS_LABELS = tuple(label for _, label in STATUS_PRIORITY) + (STATUS_READY,)


def decode_status(mask: int) -> str:
    """
    Map a status bitmask to a single category label.

    Args:
        mask: PRINTER_STATUS_* bitmask as reported by the spooler

    Returns:
        Label of the highest priority flag set, or "ready" if none is
    """
    for flag, label in STATUS_PRIORITY:
        if mask & flag:
            return label
    return STATUS_READY
