"""Caller location lookup used to stamp error nodes with their origin."""

from __future__ import annotations

import inspect
import logging
import os
from typing import Final

from aumai_errors.models import SourceLocation

logger = logging.getLogger(__name__)


def _derive_prefix() -> str:
    """Return the directory holding the ``aumai_errors`` package, with a trailing separator."""
    package_dir = os.path.dirname(os.path.abspath(__file__))
    return os.path.dirname(package_dir) + os.sep


# Computed once at import; read-only afterwards.
PATH_PREFIX: Final[str] = _derive_prefix()


def trim_source_path(filename: str) -> str:
    """Strip :data:`PATH_PREFIX` from *filename* when it starts with it."""
    if filename.startswith(PATH_PREFIX):
        return filename[len(PATH_PREFIX):]
    return filename


def caller_location(depth: int = 0) -> SourceLocation:
    """Return the location *depth* frames above the caller of this function.

    ``caller_location(0)`` is the line that called ``caller_location``.
    Introspection is best effort: when frames are unavailable or the stack
    is shallower than *depth*, an empty :class:`SourceLocation` is returned.
    """
    frame = inspect.currentframe()
    if frame is None:
        logger.debug("Frame introspection unavailable; location left empty.")
        return SourceLocation()
    try:
        frame = frame.f_back
        for _ in range(depth):
            if frame is None:
                break
            frame = frame.f_back
        if frame is None:
            logger.debug("Stack shallower than depth %d; location left empty.", depth)
            return SourceLocation()
        code = frame.f_code
        return SourceLocation(
            file=trim_source_path(code.co_filename),
            line=frame.f_lineno or 0,
            function=getattr(code, "co_qualname", code.co_name),
        )
    finally:
        del frame


__all__ = [
    "PATH_PREFIX",
    "caller_location",
    "trim_source_path",
]
