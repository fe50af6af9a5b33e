"""Stack trace reconstruction for error chains."""

from __future__ import annotations

import logging

from aumai_errors.errors import MAX_STACK_DEPTH, _is_link, _method, cause, same_error

logger = logging.getLogger(__name__)


def _location_prefix(err: BaseException) -> str:
    """Return ``"file:line[ function]: "`` for *err*, or ``""`` if it has no location."""
    location = _method(err, "location")
    if location is None:
        return ""
    file, function, line = location()
    if not file:
        return ""
    prefix = f"{file}:{line}"
    if function:
        prefix = f"{prefix} {function}"
    return prefix + ": "


def _stack_line(err: BaseException) -> tuple[str, BaseException | None]:
    """Render one node and return it together with the next node to visit."""
    text = _location_prefix(err)
    if not _is_link(err):
        return text + str(err), None

    message = err.message  # type: ignore[attr-defined]
    text += message
    cause_method = _method(err, "cause")
    node_cause = cause_method() if cause_method is not None else None
    previous = err.underlying()  # type: ignore[attr-defined]
    # A node that substituted a new cause shows it, since the chain below
    # never mentions it.
    if node_cause is not None and not same_error(cause(previous), node_cause):
        if message:
            text += ": "
        text += str(node_cause)
    return text, previous


def stack_lines(err: BaseException | None) -> list[str]:
    """Return one line per node in the chain of *err*, the originating error first.

    Foreign errors (anything that is not a chain link) are rendered with
    ``str()`` and end the walk.
    """
    lines: list[str] = []
    current = err
    while current is not None:
        if len(lines) >= MAX_STACK_DEPTH:
            logger.warning(
                "Error chain exceeds %d nodes; stack trace truncated.", MAX_STACK_DEPTH
            )
            break
        line, current = _stack_line(current)
        lines.append(line)
    lines.reverse()
    return lines


def error_stack(err: BaseException | None) -> str:
    """Return the stack trace of *err* as newline-separated lines.

    For example::

        first = new("first error")
        err = annotate(first, "loading config")
        print(error_stack(err))
        # app/config.py:12 load: first error
        # app/config.py:13 load: loading config

    ``None`` yields an empty string.
    """
    return "\n".join(stack_lines(err))


def details(err: BaseException | None) -> str:
    """Return a one-line debug rendering of the chain of *err*, newest node first.

    Each node appears in braces with its location and own message, e.g.
    ``[{app/api.py:40 get: fetching} {app/db.py:9 query: no rows}]``.
    """
    if err is None:
        return "[]"
    parts: list[str] = []
    current: BaseException | None = err
    while current is not None:
        if len(parts) >= MAX_STACK_DEPTH:
            logger.warning(
                "Error chain exceeds %d nodes; details truncated.", MAX_STACK_DEPTH
            )
            break
        text = _location_prefix(current)
        if _is_link(current):
            text += current.message  # type: ignore[attr-defined]
            current = current.underlying()  # type: ignore[attr-defined]
        else:
            text += str(current)
            current = None
        parts.append("{" + text + "}")
    return "[" + " ".join(parts) + "]"


__all__ = [
    "MAX_STACK_DEPTH",
    "details",
    "error_stack",
    "stack_lines",
]
