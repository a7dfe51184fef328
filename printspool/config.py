"""
Configuration loading and spooler setup.
"""

import os
import logging
import sys
from pathlib import Path
from typing import Optional

import yaml

from printspool.facade import DEFAULT_MAX_WORKERS, PrintSpooler
from printspool.printers import CUPSSpooler, MockSpooler, SpoolerBackend, Win32Spooler
from printspool.printers.cups_adapter import CUPS_AVAILABLE
from printspool.printers.win32_adapter import WIN32_AVAILABLE

logger = logging.getLogger(__name__)

# Map backend names to classes
BACKEND_TYPES = {
    "win32": Win32Spooler,
    "cups": CUPSSpooler,
    "mock": MockSpooler,
}


def load_config(config_path: Optional[str] = None) -> dict:
    """
    Load configuration from YAML file.

    Looks for config in order:
    1. Explicit path if provided
    2. CONFIG_FILE environment variable
    3. ./config/local.yaml
    4. ./config/default.yaml
    """
    search_paths = []

    if config_path:
        search_paths.append(Path(config_path))

    if env_path := os.environ.get("CONFIG_FILE"):
        search_paths.append(Path(env_path))

    # Default paths relative to project root
    project_root = Path(__file__).parent.parent
    search_paths.extend([
        project_root / "config" / "local.yaml",
        project_root / "config" / "default.yaml",
    ])

    for path in search_paths:
        if path.exists():
            logger.info(f"Loading config from {path}")
            with open(path) as f:
                return yaml.safe_load(f) or {}

    logger.warning("No config file found, using defaults")
    return {}


def resolve_backend_name(requested: str = "auto") -> str:
    """
    Pick a backend name. "auto" prefers the native spooler of the platform
    and falls back to the mock spooler when no print library is installed.
    """
    if requested != "auto":
        return requested
    if sys.platform == "win32" and WIN32_AVAILABLE:
        return "win32"
    if CUPS_AVAILABLE:
        return "cups"
    logger.warning("No spooler library available, using mock spooler")
    return "mock"


def create_backend(spooler_config: dict) -> SpoolerBackend:
    """
    Build the spooler backend from the `spooler` config section.

    Config format:
        spooler:
          backend: auto        # auto | win32 | cups | mock
          document_name: printspool job
          cups_server: localhost
    """
    backend_name = resolve_backend_name(spooler_config.get("backend", "auto"))

    if backend_name not in BACKEND_TYPES:
        raise ValueError(f"Unknown spooler backend '{backend_name}'")

    backend = BACKEND_TYPES[backend_name](spooler_config)
    if not backend.is_available:
        logger.warning(f"Backend '{backend_name}' selected but its library is not installed")
    logger.info(f"Using {backend_name} spooler backend")
    return backend


def setup_spooler(config: dict) -> PrintSpooler:
    """Create the async facade from configuration."""
    spooler_config = config.get("spooler", {}) or {}
    backend = create_backend(spooler_config)
    return PrintSpooler(backend, max_workers=spooler_config.get("max_workers", DEFAULT_MAX_WORKERS))


def get_server_config(config: dict) -> dict:
    """Extract server configuration."""
    server = config.get("server", {})
    return {
        "host": server.get("host", "0.0.0.0"),
        "port": server.get("port", 5002),
        "debug": server.get("debug", False),
        "cors_origins": server.get("cors_origins", None),
    }
