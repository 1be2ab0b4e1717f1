"""
Cross-cutting helpers for the record store (currently logging only).
"""

from recordstore.utils.logging import configure_logging, get_logger

__all__ = [
    "configure_logging",
    "get_logger",
]
