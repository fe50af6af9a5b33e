"""Core annotated error value for aumai-errors.

An :class:`Err` is one node of an annotation chain.  Besides its own
message and source location it remembers the *previous* node (any
exception, used only to rebuild stack traces) and the *cause*: the most
significant underlying error that :func:`cause` reports to callers.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Final, Protocol, runtime_checkable

from aumai_errors.location import caller_location
from aumai_errors.models import SourceLocation

TEXT_PLAIN: Final[str] = "text/plain; charset=utf-8"
APPLICATION_JSON: Final[str] = "application/json; charset=utf-8"

# Upper bound on chain nodes visited by a single walk.
MAX_STACK_DEPTH: Final[int] = 10_000

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Capabilities
# ---------------------------------------------------------------------------


@runtime_checkable
class Causer(Protocol):
    """An error that knows its own cause."""

    def cause(self) -> BaseException | None: ...


@runtime_checkable
class Wrapper(Protocol):
    """An error that is a link in an annotation chain."""

    @property
    def message(self) -> str: ...

    def underlying(self) -> BaseException | None: ...


@runtime_checkable
class Locationer(Protocol):
    """An error that records where it was created."""

    def location(self) -> tuple[str, str, int]: ...


def _method(err: object, name: str) -> Callable[[], Any] | None:
    """Return the bound method *name* of *err*, or ``None`` if it is not callable.

    A plain data attribute of that name does not count as a capability.
    """
    attr = getattr(err, name, None)
    return attr if callable(attr) else None


def _is_link(err: object) -> bool:
    """Report whether *err* is a link in an annotation chain."""
    return _method(err, "underlying") is not None and isinstance(
        getattr(err, "message", None), str
    )


def cause(err: BaseException | None) -> BaseException | None:
    """Return the cause of *err*.

    The cause is the value reported by ``err.cause()`` when *err* has one,
    otherwise *err* itself.  ``None`` yields ``None``.
    """
    if err is None:
        return None
    method = _method(err, "cause")
    if method is not None:
        diag = method()
        if isinstance(diag, BaseException):
            return diag
    return err


def same_error(first: BaseException | None, second: BaseException | None) -> bool:
    """Report whether both arguments are the same error object."""
    return first is second


def _sprintf(format: str, args: tuple[object, ...]) -> str:
    """Apply printf-style *args* to *format*, leaving it untouched without args."""
    if args:
        return format % args
    return format


# ---------------------------------------------------------------------------
# Err
# ---------------------------------------------------------------------------


class Err(Exception):
    """An error annotated with a message, a cause and a source location.

    Richer error types reuse this behaviour by holding an ``Err`` (see
    :class:`EmbeddedErr`) rather than rebuilding it.
    """

    def __init__(
        self,
        message: str = "",
        *,
        cause: BaseException | None = None,
        previous: BaseException | None = None,
        code: int = 0,
        content_type: str = TEXT_PLAIN,
    ) -> None:
        super().__init__(message)
        self._message = message
        self._cause = cause
        self._previous = previous
        self._code = code
        self._content_type = content_type
        self._location = SourceLocation()
        self.set_location(1)

    @property
    def message(self) -> str:
        """Annotation recorded at this node; empty for a pure trace."""
        return self._message

    @property
    def code(self) -> int:
        """HTTP-style status code, 0 for plain errors."""
        return self._code

    @property
    def content_type(self) -> str:
        """HTTP content type used when this error is sent as a response."""
        return self._content_type

    @property
    def source_location(self) -> SourceLocation:
        return self._location

    def set_code(self, code: int) -> None:
        """Set the status code; only meant for use right after construction."""
        self._code = code

    def cause(self) -> BaseException | None:
        """Return the stored cause, or ``None`` when this error is its own cause.

        Use the module-level :func:`cause` instead of calling this directly.
        """
        return self._cause

    def underlying(self) -> BaseException | None:
        """Return the previous error in the chain.

        Only used to build stack traces; callers should rely on
        :func:`cause` instead.
        """
        return self._previous

    def location(self) -> tuple[str, str, int]:
        """Return ``(file, function, line)`` of where this node was created."""
        loc = self._location
        return loc.file, loc.function, loc.line

    def set_location(self, call_depth: int) -> None:
        """Record the source location *call_depth* frames above the caller."""
        self._location = caller_location(call_depth + 1)

    def stack_trace(self) -> list[str]:
        """Return one line per chain node, the originating error first."""
        from aumai_errors.stack import stack_lines

        return stack_lines(self)

    def stack(self) -> str:
        """Return :meth:`stack_trace` joined with newlines."""
        return "\n".join(self.stack_trace())

    def __str__(self) -> str:
        # Keep showing annotations while the cause stays the same; a node
        # that changed the cause shows the new cause instead.
        prefixes: list[str] = []
        node: BaseException = self
        visited = 0
        while True:
            if isinstance(node, EmbeddedErr) and _renders_as_chain(node):
                node = node.err
            if node is not self and not _renders_as_chain(node):
                tail = str(node)
                break
            if visited >= MAX_STACK_DEPTH:
                logger.warning(
                    "Error chain exceeds %d nodes; message truncated.", MAX_STACK_DEPTH
                )
                tail = "..."
                break
            visited += 1
            link: Err = node  # type: ignore[assignment]
            node_cause = link.cause()
            following = link.underlying()
            if node_cause is not None and not same_error(cause(following), node_cause):
                following = node_cause
            if following is None:
                tail = link.message
                break
            if link.message:
                prefixes.append(link.message)
            node = following
        return "".join(f"{prefix}: " for prefix in prefixes) + tail

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self)!r})"


def _renders_as_chain(err: BaseException) -> bool:
    """Report whether *err* renders with the chain composition of :class:`Err`."""
    if isinstance(err, Err):
        return type(err).__str__ is Err.__str__
    if isinstance(err, EmbeddedErr):
        return type(err).__str__ is EmbeddedErr.__str__
    return False


def new_err(code: int, format: str, *args: object) -> Err:
    """Return an :class:`Err` with a formatted message and no cause.

    Intended for error types that hold an ``Err``; they should call
    ``set_location(1)`` themselves so the recorded location is their
    caller's rather than their constructor's.
    """
    err = Err(_sprintf(format, args), code=code)
    err.set_location(1)
    return err


def new_err_with_cause(
    other: BaseException | None, code: int, format: str, *args: object
) -> Err:
    """Return an :class:`Err` that annotates *other* and keeps its cause."""
    err = Err(_sprintf(format, args), cause=cause(other), previous=other, code=code)
    err.set_location(1)
    return err


def new_json_err_with_cause(
    other: BaseException | None, code: int, message: str
) -> Err:
    """Same as :func:`new_err_with_cause` with a JSON content type and a literal message."""
    err = Err(
        message,
        cause=cause(other),
        previous=other,
        code=code,
        content_type=APPLICATION_JSON,
    )
    err.set_location(1)
    return err


# ---------------------------------------------------------------------------
# Composition-based reuse
# ---------------------------------------------------------------------------


class EmbeddedErr(Exception):
    """Base class for error types that carry an :class:`Err`.

    Every chain capability is forwarded to :attr:`err`, so subclasses are
    understood by :func:`cause`, the stack helpers and the taxonomy
    predicates.  Example::

        class QuotaError(EmbeddedErr):
            def __init__(self, limit: int) -> None:
                super().__init__(new_err(429, "quota of %d exceeded", limit))
                self.limit = limit
                self.set_location(1)
    """

    def __init__(self, err: Err) -> None:
        super().__init__(err.message)
        self.err = err

    @property
    def message(self) -> str:
        return self.err.message

    @property
    def code(self) -> int:
        return self.err.code

    @property
    def content_type(self) -> str:
        return self.err.content_type

    @property
    def source_location(self) -> SourceLocation:
        return self.err.source_location

    def set_code(self, code: int) -> None:
        self.err.set_code(code)

    def cause(self) -> BaseException | None:
        return self.err.cause()

    def underlying(self) -> BaseException | None:
        return self.err.underlying()

    def location(self) -> tuple[str, str, int]:
        return self.err.location()

    def set_location(self, call_depth: int) -> None:
        self.err.set_location(call_depth + 1)

    def stack_trace(self) -> list[str]:
        from aumai_errors.stack import stack_lines

        return stack_lines(self)

    def __str__(self) -> str:
        return str(self.err)


__all__ = [
    "APPLICATION_JSON",
    "MAX_STACK_DEPTH",
    "TEXT_PLAIN",
    "Causer",
    "EmbeddedErr",
    "Err",
    "Locationer",
    "Wrapper",
    "cause",
    "new_err",
    "new_err_with_cause",
    "new_json_err_with_cause",
    "same_error",
]
