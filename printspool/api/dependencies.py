"""
Dependency injection for API routes.

These are set up during app initialization.
"""

from typing import Optional

from printspool.facade import PrintSpooler

# Global instance (set during app init)
_spooler: Optional[PrintSpooler] = None


def init_dependencies(spooler: PrintSpooler):
    """Initialize global dependencies."""
    global _spooler
    _spooler = spooler


def get_spooler() -> PrintSpooler:
    """Get spooler facade instance."""
    if _spooler is None:
        raise RuntimeError("Spooler not initialized")
    return _spooler
