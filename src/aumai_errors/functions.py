"""Functions that create and annotate error chains.

Every function that takes an error returns ``None`` when given ``None``, so
an error can be annotated unconditionally on the way out of a function::

    def load(path: str) -> Config:
        try:
            return read_config(path)
        except OSError as exc:
            raise annotatef(exc, "loading %s", path) from exc

Causes follow two rules.  :func:`trace` and :func:`annotate` keep the cause
of the error they are given; :func:`new`, :func:`mask` and :func:`wrap`
replace it (the new node, or the substituted error, becomes the cause).
"""

from __future__ import annotations

from types import TracebackType

from aumai_errors.errors import Err, _sprintf, cause


def new(message: str) -> Err:
    """Return a new error whose cause is itself."""
    err = Err(message)
    err.set_location(1)
    return err


def errorf(format: str, *args: object) -> Err:
    """Return a new error with a printf-style formatted message."""
    err = Err(_sprintf(format, args))
    err.set_location(1)
    return err


def trace(other: BaseException | None) -> Err | None:
    """Record the caller's location on *other* without changing message or cause."""
    if other is None:
        return None
    err = Err(previous=other, cause=cause(other))
    err.set_location(1)
    return err


def annotate(other: BaseException | None, message: str) -> Err | None:
    """Prefix *other* with *message*, keeping its cause."""
    if other is None:
        return None
    err = Err(message, previous=other, cause=cause(other))
    err.set_location(1)
    return err


def annotatef(other: BaseException | None, format: str, *args: object) -> Err | None:
    """Formatted variant of :func:`annotate`."""
    if other is None:
        return None
    err = Err(_sprintf(format, args), previous=other, cause=cause(other))
    err.set_location(1)
    return err


def wrap(other: BaseException | None, new_descriptive: BaseException | None) -> Err | None:
    """Replace *other* with *new_descriptive*, which becomes the cause.

    The message of the result is the message of *new_descriptive*; *other*
    is still kept for the stack trace.
    """
    if other is None and new_descriptive is None:
        return None
    err = Err(previous=other, cause=new_descriptive)
    err.set_location(1)
    return err


def wrapf(
    other: BaseException | None,
    new_descriptive: BaseException | None,
    format: str,
    *args: object,
) -> Err | None:
    """Like :func:`wrap`, prefixing the message with a formatted annotation."""
    if other is None and new_descriptive is None:
        return None
    err = Err(_sprintf(format, args), previous=other, cause=new_descriptive)
    err.set_location(1)
    return err


def mask(other: BaseException | None) -> Err | None:
    """Hide the cause of *other*; the result becomes its own cause."""
    if other is None:
        return None
    err = Err(previous=other)
    err.set_location(1)
    return err


def maskf(other: BaseException | None, format: str, *args: object) -> Err | None:
    """Like :func:`mask`, adding a formatted annotation."""
    if other is None:
        return None
    err = Err(_sprintf(format, args), previous=other)
    err.set_location(1)
    return err


class DeferredAnnotation:
    """Context manager returned by :func:`deferred_annotatef`."""

    def __init__(self, format: str, args: tuple[object, ...]) -> None:
        self.format = format
        self.args = args

    def __enter__(self) -> DeferredAnnotation:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool:
        if exc is None or not isinstance(exc, Exception):
            return False
        err = Err(_sprintf(self.format, self.args), previous=exc, cause=cause(exc))
        err.set_location(1)
        raise err from exc


def deferred_annotatef(format: str, *args: object) -> DeferredAnnotation:
    """Annotate any exception that leaves the ``with`` block, then re-raise it.

    A block that finishes cleanly is left alone.  Only :class:`Exception`
    subclasses are annotated; ``KeyboardInterrupt`` and friends pass
    through unchanged::

        def fetch(user_id: str) -> User:
            with deferred_annotatef("fetching user %s", user_id):
                return backend.get(user_id)
    """
    return DeferredAnnotation(format, args)


__all__ = [
    "DeferredAnnotation",
    "annotate",
    "annotatef",
    "deferred_annotatef",
    "errorf",
    "mask",
    "maskf",
    "new",
    "trace",
    "wrap",
    "wrapf",
]
