"""CLI entry point for aumai-errors."""

from __future__ import annotations

import json
import sys

import click

from aumai_errors import __version__
from aumai_errors.functions import annotate
from aumai_errors.models import ErrorKind, KindSpec
from aumai_errors.stack import stack_lines
from aumai_errors.taxonomy import (
    KIND_REGISTRY,
    UnknownErrorKind,
    classifiedf,
    error_response,
    exception_kind,
    kinds_by_status,
    lookup_kind,
)

_STATUS_COLOURS: dict[int, str] = {
    4: "yellow",
    5: "red",
}


def _status_label(status_code: int) -> str:
    """Return a coloured status label, ``-`` for kinds without a fixed code."""
    if not status_code:
        return click.style(f"{'-':>6}", fg="white")
    colour = _STATUS_COLOURS.get(status_code // 100, "white")
    return click.style(f"{status_code:>6}", fg=colour)


def _format_kind_row(spec: KindSpec) -> str:
    """Return a one-line summary for *spec*."""
    suffix = repr(spec.suffix) if spec.suffix else "-"
    return (
        click.style(f"{spec.kind.value:<20}", bold=True)
        + _status_label(spec.status_code)
        + f"  {suffix:<20}"
        + f"{spec.description}"
    )


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """AumAI Errors CLI — browse classified error kinds and render error chains."""


@main.command("kinds")
@click.option("--json", "output_json", is_flag=True, default=False, help="Output as JSON.")
def kinds_command(output_json: bool) -> None:
    """List all classified error kinds."""
    specs = list(KIND_REGISTRY.values())

    if output_json:
        data = [spec.model_dump(mode="json") for spec in specs]
        click.echo(json.dumps(data, indent=2))
        return

    click.echo(
        click.style(f"{'KIND':<20}{'STATUS':>6}  {'SUFFIX':<20}DESCRIPTION", bold=True)
    )
    click.echo("-" * 90)
    for spec in specs:
        click.echo(_format_kind_row(spec))


@main.command("lookup")
@click.argument("kind")
@click.option("--json", "output_json", is_flag=True, default=False, help="Output as JSON.")
def lookup_command(kind: str, output_json: bool) -> None:
    """Look up a classified error kind by name."""
    try:
        spec = lookup_kind(kind.lower())
    except UnknownErrorKind:
        click.echo(f"Error: no error kind registered as {kind!r}", err=True)
        sys.exit(1)

    if output_json:
        click.echo(json.dumps(spec.model_dump(mode="json"), indent=2))
        return

    click.echo(click.style(f"Kind {spec.kind.value}", bold=True))
    click.echo(f"  Status    : {spec.status_code or 'none'}")
    click.echo(f"  Suffix    : {spec.suffix!r}")
    click.echo(f"  Predicate : is_{spec.kind.value}")
    click.echo(f"  Description:\n    {spec.description}")


@main.command("status")
@click.argument("code", type=int)
@click.option("--json", "output_json", is_flag=True, default=False, help="Output as JSON.")
def status_command(code: int, output_json: bool) -> None:
    """List the kinds that map to an HTTP status code."""
    specs = kinds_by_status(code)
    if not specs:
        click.echo(f"Error: no error kind maps to status {code}", err=True)
        sys.exit(1)

    if output_json:
        click.echo(json.dumps([spec.model_dump(mode="json") for spec in specs], indent=2))
        return

    for spec in specs:
        click.echo(_format_kind_row(spec))


@main.command("classify")
@click.argument("exception_name", metavar="EXCEPTION_NAME")
@click.option("--json", "output_json", is_flag=True, default=False, help="Output as JSON.")
def classify_command(exception_name: str, output_json: bool) -> None:
    """Show which kind a built-in exception type is classified as.

    Example: aumai-errors classify FileNotFoundError
    """
    exc_class = _resolve_exception(exception_name)
    if exc_class is None:
        click.echo(
            f"Warning: could not resolve '{exception_name}' to a built-in exception; "
            "using generic Exception.",
            err=True,
        )
        exc_class = Exception

    spec = lookup_kind(exception_kind(exc_class))

    if output_json:
        click.echo(
            json.dumps(
                {"exception": exception_name, **spec.model_dump(mode="json")}, indent=2
            )
        )
        return

    click.echo(
        f"'{exception_name}' maps to "
        + click.style(spec.kind.value, bold=True)
        + f" (status {spec.status_code or 'none'})"
    )
    click.echo(f"  {spec.description}")


@main.command("render")
@click.argument("kind", type=click.Choice([k.value for k in ErrorKind], case_sensitive=False))
@click.argument("message")
@click.option(
    "--annotate",
    "-a",
    "annotations",
    multiple=True,
    help="Annotation to add on top of the error; repeatable, applied in order.",
)
@click.option("--json", "output_json", is_flag=True, default=False, help="Output as JSON.")
def render_command(
    kind: str, message: str, annotations: tuple[str, ...], output_json: bool
) -> None:
    """Build a classified error, annotate it and print how it renders."""
    err: BaseException | None = classifiedf(kind.lower(), message)
    for text in annotations:
        err = annotate(err, text)
    assert err is not None  # noqa: S101  (mypy narrowing)

    if output_json:
        click.echo(json.dumps(error_response(err), indent=2))
        return

    response = error_response(err)
    click.echo(click.style("Message:", bold=True) + f" {err}")
    click.echo(click.style("Status :", bold=True) + f" {response['status_code']}")
    click.echo(click.style("Stack:", bold=True))
    for line in stack_lines(err):
        click.echo(f"  {line}")


def _resolve_exception(name: str) -> type[BaseException] | None:
    """Try to resolve an exception type name from Python builtins."""
    candidate = __builtins__  # type: ignore[assignment]
    if isinstance(candidate, dict):
        obj = candidate.get(name)
    else:
        obj = getattr(candidate, name, None)
    if obj is not None and isinstance(obj, type) and issubclass(obj, BaseException):
        return obj
    return None


if __name__ == "__main__":
    main()
