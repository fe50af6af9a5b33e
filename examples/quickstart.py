"""Quickstart examples for aumai-errors.

Demonstrates the five main use cases:
  1. Creating and annotating errors
  2. Masking and wrapping causes
  3. Reading the reconstructed stack trace
  4. Classifying errors and testing them with predicates
  5. Annotating errors on the way out of a function

Run this file directly to see all demos:

    python examples/quickstart.py
"""

from __future__ import annotations

import json

from aumai_errors import (
    annotate,
    cause,
    classify_exception,
    deferred_annotatef,
    error_response,
    error_stack,
    is_not_found,
    mask,
    new,
    not_foundf,
    trace,
    wrap,
)


def demo_annotate() -> None:
    """Demo 1: Annotations prefix the message and keep the cause."""
    print("=" * 60)
    print("DEMO 1 — Annotation")
    print("=" * 60)

    first = new("connection refused")
    err = annotate(trace(first), "dialing database")
    err = annotate(err, "loading settings")
    print(f"Message : {err}")
    print(f"Cause   : {cause(err)!s} (same object: {cause(err) is first})")
    print()


def demo_mask_and_wrap() -> None:
    """Demo 2: mask hides the cause, wrap substitutes a new one."""
    print("=" * 60)
    print("DEMO 2 — Mask and wrap")
    print("=" * 60)

    first = new("row 17: constraint violated")
    masked = mask(first)
    print(f"Masked message     : {masked}")
    print(f"Masked is own cause: {cause(masked) is masked}")

    public = new("could not save record")
    wrapped = wrap(first, public)
    print(f"Wrapped message    : {wrapped}")
    print(f"Wrapped cause      : {cause(wrapped)}")
    print()


def demo_stack() -> None:
    """Demo 3: One stack line per annotation step, oldest first."""
    print("=" * 60)
    print("DEMO 3 — Error stack")
    print("=" * 60)

    err = new("first error")
    err = trace(err)
    err = annotate(err, "some context")
    err = trace(err)
    err = annotate(err, "more context")
    print(error_stack(err))
    print()


def demo_classified() -> None:
    """Demo 4: Classified kinds survive annotation."""
    print("=" * 60)
    print("DEMO 4 — Classified errors")
    print("=" * 60)

    err = annotate(not_foundf("user %s", "bob"), "loading profile")
    print(f"Message      : {err}")
    print(f"is_not_found : {is_not_found(err)}")
    print(json.dumps(error_response(err), indent=2))

    builtin = classify_exception(FileNotFoundError("settings.toml"))
    print(f"FileNotFoundError classified as not-found: {is_not_found(builtin)}")
    print()


def _read_settings(path: str) -> None:
    with deferred_annotatef("reading settings from %s", path):
        raise FileNotFoundError(path)


def demo_deferred() -> None:
    """Demo 5: Annotate whatever escapes a block."""
    print("=" * 60)
    print("DEMO 5 — Deferred annotation")
    print("=" * 60)

    try:
        _read_settings("/etc/app/settings.toml")
    except Exception as exc:
        print(f"Message : {exc}")
        print(f"Cause   : {type(cause(exc)).__name__}")
    print()


if __name__ == "__main__":
    demo_annotate()
    demo_mask_and_wrap()
    demo_stack()
    demo_classified()
    demo_deferred()
