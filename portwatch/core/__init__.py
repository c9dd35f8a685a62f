"""Shared primitives: reader/writer lock and logging setup."""

from portwatch.core.logging_utils import setup_logging
from portwatch.core.rwlock import ReadWriteLock

__all__ = ["ReadWriteLock", "setup_logging"]
