"""
Startup checks and validation.

Run before starting the server to catch configuration issues early.
"""

import logging
import socket
import sys
from typing import Optional

from printspool.config import BACKEND_TYPES

logger = logging.getLogger(__name__)


def check_port_available(host: str, port: int) -> tuple[bool, Optional[str]]:
    """
    Check if a port is available for binding.

    Returns:
        (True, None) if available
        (False, error_message) if not
    """
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    try:
        sock.bind((host, port))
        return True, None
    except socket.error as e:
        if e.errno == 10048 or e.errno == 98:  # Windows / Linux "address in use"
            return False, f"Port {port} is already in use. Another service may be running on this port."
        elif e.errno == 10049 or e.errno == 99:  # Can't assign address
            return False, f"Cannot bind to {host}:{port}. Check if the host address is valid."
        elif e.errno == 10013 or e.errno == 13:  # Permission denied
            return False, f"Permission denied for port {port}. Ports below 1024 require admin/root privileges."
        else:
            return False, f"Cannot bind to {host}:{port}: {e}"
    finally:
        sock.close()


def validate_config(config: dict) -> list[str]:
    """
    Validate configuration and return list of warnings/errors.

    Returns:
        List of warning/error messages (empty if all good)
    """
    issues = []

    server = config.get("server", {})
    port = server.get("port", 5002)

    if not isinstance(port, int) or port < 1 or port > 65535:
        issues.append(f"Invalid port: {port}. Must be between 1 and 65535.")
    elif port < 1024:
        issues.append(f"Port {port} is a privileged port. Consider using a port >= 1024.")

    spooler = config.get("spooler", {}) or {}
    backend = spooler.get("backend", "auto")
    if backend != "auto" and backend not in BACKEND_TYPES:
        issues.append(f"Unknown spooler backend: '{backend}'. Use one of: auto, {', '.join(BACKEND_TYPES)}.")

    max_workers = spooler.get("max_workers", 4)
    if not isinstance(max_workers, int) or max_workers < 1:
        issues.append(f"Invalid max_workers: {max_workers}. Must be a positive integer.")

    if backend == "mock":
        names = [p.get("name") for p in spooler.get("mock_printers") or []]
        if any(not name for name in names):
            issues.append("Mock printer entry has no 'name' field.")
        default = spooler.get("mock_default")
        if default and default not in names:
            issues.append(f"Mock default '{default}' is not one of the mock printers.")

    return issues


def check_dependencies() -> dict[str, bool]:
    """
    Check which optional dependencies are available.

    Returns:
        Dict of dependency name -> is_available
    """
    deps = {}

    # pywin32 for the Windows spooler
    try:
        import win32print
        deps["pywin32"] = True
    except ImportError:
        deps["pywin32"] = False

    # pycups for CUPS printing
    try:
        import cups
        deps["pycups"] = True
    except ImportError:
        deps["pycups"] = False

    return deps


def run_startup_checks(config: dict) -> None:
    """
    Run all startup checks. Exits with error if critical issues found.

    Args:
        config: Loaded configuration dict
    """
    logger.info("Running startup checks...")

    errors = []
    warnings = []

    server = config.get("server", {})
    host = server.get("host", "0.0.0.0")
    port = server.get("port", 5002)

    available, port_error = check_port_available(host, port)
    if not available:
        errors.append(port_error)

    for issue in validate_config(config):
        if issue.startswith(("Invalid", "Unknown")):
            errors.append(issue)
        else:
            warnings.append(issue)

    deps = check_dependencies()
    if not any(deps.values()):
        warnings.append("Neither pywin32 nor pycups is installed. Only the mock backend will work.")

    for warning in warnings:
        logger.warning(f"  ⚠ {warning}")

    if errors:
        logger.error("Startup checks failed:")
        for error in errors:
            logger.error(f"  ✗ {error}")
        logger.error("")
        logger.error("Fix these issues and try again.")
        sys.exit(1)

    if warnings:
        logger.info(f"Startup checks passed with {len(warnings)} warning(s)")
    else:
        logger.info("Startup checks passed ✓")


def print_startup_banner(config: dict, backend_name: str) -> None:
    """Print a startup banner with useful info."""
    server = config.get("server", {})
    port = server.get("port", 5002)

    print("")
    print("=" * 50)
    print("  printspool")
    print("=" * 50)
    print("")
    print(f"  Local URL:    http://localhost:{port}")
    print(f"  API Docs:     http://localhost:{port}/docs")
    print(f"  Backend:      {backend_name}")
    print("")
    print("  Endpoints:")
    print("    GET  /v1/printers               - List printers")
    print("    GET  /v1/printers/default       - Default printer")
    print("    GET  /v1/printers/{name}        - Printer status")
    print("    POST /v1/print                  - Print text/base64 data")
    print("    POST /v1/print/raw              - Print uploaded file")
    print("")
    print("=" * 50)
    print("")
