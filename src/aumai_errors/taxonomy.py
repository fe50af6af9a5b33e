"""Classified errors: kinds, constructors, predicates and HTTP payloads.

Each kind X comes with three functions::

    Xf(format, *args)   # new error of kind X, message gets the kind suffix
    new_X(err, message) # classify an existing error (or None) as X
    is_X(err)           # does the cause of err have kind X?

A classified error is its own cause, so later annotations keep it
visible to the predicates::

    err = annotate(not_foundf("user %s", name), "loading profile")
    is_not_found(err)  # True
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Final

from aumai_errors.errors import TEXT_PLAIN, EmbeddedErr, Err, _sprintf, cause
from aumai_errors.models import ErrorKind, ErrorResponse, KindSpec
from aumai_errors.stack import stack_lines

# ---------------------------------------------------------------------------
# Kind registry
# ---------------------------------------------------------------------------

_RAW_KINDS: Final[list[dict[str, object]]] = [
    {"kind": ErrorKind.not_found, "status_code": 404, "suffix": " not found",
     "description": "Something that was looked up does not exist."},
    {"kind": ErrorKind.user_not_found, "status_code": 0, "suffix": " user not found",
     "description": "The referenced user does not exist."},
    {"kind": ErrorKind.unauthorized, "status_code": 401, "suffix": "",
     "description": "The caller is not allowed to perform the operation."},
    {"kind": ErrorKind.not_implemented, "status_code": 501, "suffix": " not implemented",
     "description": "The requested functionality is not implemented."},
    {"kind": ErrorKind.already_exists, "status_code": 0, "suffix": " already exists",
     "description": "The object being created already exists."},
    {"kind": ErrorKind.not_supported, "status_code": 0, "suffix": " not supported",
     "description": "The operation or value is not supported."},
    {"kind": ErrorKind.not_valid, "status_code": 0, "suffix": " not valid",
     "description": "A value failed validation."},
    {"kind": ErrorKind.not_provisioned, "status_code": 0, "suffix": " not provisioned",
     "description": "A resource has not been provisioned yet."},
    {"kind": ErrorKind.not_assigned, "status_code": 0, "suffix": " not assigned",
     "description": "A resource has not been assigned."},
    {"kind": ErrorKind.method_not_allowed, "status_code": 405, "suffix": "",
     "description": "The request method is not allowed for the target."},
    {"kind": ErrorKind.bad_request, "status_code": 400, "suffix": "",
     "description": "The request has missing or malformed parameters."},
    {"kind": ErrorKind.internal_server, "status_code": 500, "suffix": "",
     "description": "Something unexpected went wrong on the server."},
]


def _build_registry() -> dict[ErrorKind, KindSpec]:
    """Build the kind registry from the raw kind definitions."""
    registry: dict[ErrorKind, KindSpec] = {}
    for raw in _RAW_KINDS:
        spec = KindSpec.model_validate(raw)
        registry[spec.kind] = spec
    return registry


KIND_REGISTRY: Final[dict[ErrorKind, KindSpec]] = _build_registry()


class UnknownErrorKind(KeyError):
    """Raised when a kind name is not present in the registry."""


def lookup_kind(kind: ErrorKind | str) -> KindSpec:
    """Return the :class:`KindSpec` for *kind*.

    Accepts an :class:`ErrorKind` or its string value.  Raises
    :class:`UnknownErrorKind` for anything else.
    """
    try:
        return KIND_REGISTRY[ErrorKind(kind)]
    except ValueError:
        raise UnknownErrorKind(f"No error kind registered as {kind!r}") from None


def kinds_by_status(status_code: int) -> list[KindSpec]:
    """Return every kind that maps to *status_code*, in registry order."""
    return [spec for spec in KIND_REGISTRY.values() if spec.status_code == status_code]


# ---------------------------------------------------------------------------
# Classified error type
# ---------------------------------------------------------------------------


class ClassifiedErr(Err):
    """An :class:`Err` tagged with an :class:`ErrorKind`.

    Kinds are compared by tag, never by status code, so two kinds sharing a
    status stay distinguishable.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str = "",
        *,
        previous: BaseException | None = None,
    ) -> None:
        super().__init__(message, previous=previous)
        self._kind = kind

    @property
    def kind(self) -> ErrorKind:
        return self._kind


def _classify(
    kind: ErrorKind | str,
    previous: BaseException | None,
    format: str,
    args: tuple[object, ...] = (),
    with_suffix: bool = False,
) -> ClassifiedErr:
    # Must be called directly by a public constructor: the location is
    # recorded two frames up.
    spec = lookup_kind(kind)
    if with_suffix:
        format += spec.suffix
    err = ClassifiedErr(spec.kind, _sprintf(format, args), previous=previous)
    err.set_location(2)
    err.set_code(spec.status_code)
    return err


def classifiedf(kind: ErrorKind | str, format: str, *args: object) -> ClassifiedErr:
    """Return a new error of *kind* with a formatted message plus the kind suffix."""
    return _classify(kind, None, format, args, with_suffix=True)


def new_classified(
    kind: ErrorKind | str, err: BaseException | None, message: str
) -> ClassifiedErr:
    """Classify *err* as *kind*, prefixing it with *message*.

    The result hides the cause of *err*: it is its own cause.
    """
    return _classify(kind, err, message)


def kind_of(err: BaseException | None) -> ErrorKind | None:
    """Return the kind of the cause of *err*, or ``None`` if it is unclassified."""
    diag = cause(err)
    if isinstance(diag, EmbeddedErr):
        diag = diag.err
    if isinstance(diag, ClassifiedErr):
        return diag.kind
    return None


def is_kind(err: BaseException | None, kind: ErrorKind | str) -> bool:
    """Report whether the cause of *err* was classified as *kind*."""
    return kind_of(err) is lookup_kind(kind).kind


# ---------------------------------------------------------------------------
# Per-kind constructors and predicates
# ---------------------------------------------------------------------------


def _kind_functions(
    kind: ErrorKind,
) -> tuple[
    Callable[..., ClassifiedErr],
    Callable[[BaseException | None, str], ClassifiedErr],
    Callable[[BaseException | None], bool],
]:
    """Build the ``Xf``, ``new_X`` and ``is_X`` functions for *kind*."""
    name = kind.value

    def formatted(format: str, *args: object) -> ClassifiedErr:
        return _classify(kind, None, format, args, with_suffix=True)

    def wrapping(err: BaseException | None, message: str) -> ClassifiedErr:
        return _classify(kind, err, message)

    def predicate(err: BaseException | None) -> bool:
        return kind_of(err) is kind

    formatted.__name__ = formatted.__qualname__ = f"{name}f"
    formatted.__doc__ = f"Return an error which satisfies :func:`is_{name}`."
    wrapping.__name__ = wrapping.__qualname__ = f"new_{name}"
    wrapping.__doc__ = f"Return an error which wraps *err* and satisfies :func:`is_{name}`."
    predicate.__name__ = predicate.__qualname__ = f"is_{name}"
    predicate.__doc__ = (
        f"Report whether *err* was created with :func:`{name}f` or :func:`new_{name}`."
    )
    return formatted, wrapping, predicate


not_foundf, new_not_found, is_not_found = _kind_functions(ErrorKind.not_found)
user_not_foundf, new_user_not_found, is_user_not_found = _kind_functions(
    ErrorKind.user_not_found
)
unauthorizedf, new_unauthorized, is_unauthorized = _kind_functions(ErrorKind.unauthorized)
not_implementedf, new_not_implemented, is_not_implemented = _kind_functions(
    ErrorKind.not_implemented
)
already_existsf, new_already_exists, is_already_exists = _kind_functions(
    ErrorKind.already_exists
)
not_supportedf, new_not_supported, is_not_supported = _kind_functions(
    ErrorKind.not_supported
)
not_validf, new_not_valid, is_not_valid = _kind_functions(ErrorKind.not_valid)
not_provisionedf, new_not_provisioned, is_not_provisioned = _kind_functions(
    ErrorKind.not_provisioned
)
not_assignedf, new_not_assigned, is_not_assigned = _kind_functions(
    ErrorKind.not_assigned
)
method_not_allowedf, new_method_not_allowed, is_method_not_allowed = _kind_functions(
    ErrorKind.method_not_allowed
)
bad_requestf, new_bad_request, is_bad_request = _kind_functions(ErrorKind.bad_request)
internal_serverf, new_internal_server, is_internal_server = _kind_functions(
    ErrorKind.internal_server
)


# ---------------------------------------------------------------------------
# Built-in exception classification
# ---------------------------------------------------------------------------

# Checked in order; the first matching type wins.
_EXCEPTION_KIND_MAP: Final[list[tuple[type[BaseException], ErrorKind]]] = [
    (FileNotFoundError, ErrorKind.not_found),
    (FileExistsError, ErrorKind.already_exists),
    (PermissionError, ErrorKind.unauthorized),
    (NotImplementedError, ErrorKind.not_implemented),
    (LookupError, ErrorKind.not_found),
    (ValueError, ErrorKind.not_valid),
    (TypeError, ErrorKind.bad_request),
]


def exception_kind(exc: BaseException | type[BaseException]) -> ErrorKind:
    """Return the kind an exception (or exception type) maps to, internal_server if none does."""
    exc_class = exc if isinstance(exc, type) else type(exc)
    for exc_type, kind in _EXCEPTION_KIND_MAP:
        if issubclass(exc_class, exc_type):
            return kind
    return ErrorKind.internal_server


def classify_exception(exc: BaseException) -> BaseException:
    """Classify an arbitrary exception by its Python type.

    Errors whose cause is already classified are returned unchanged;
    anything else is wrapped in a :class:`ClassifiedErr` whose message is
    the text of *exc*.
    """
    if kind_of(exc) is not None:
        return exc
    return _classify(exception_kind(exc), exc, "")


# ---------------------------------------------------------------------------
# HTTP payloads
# ---------------------------------------------------------------------------


def _status_source(err: BaseException) -> Err | EmbeddedErr | None:
    """Return the first of *err* and its cause that carries a status code."""
    for candidate in (err, cause(err)):
        if isinstance(candidate, (Err, EmbeddedErr)) and candidate.code:
            return candidate
    return None


def error_response(err: BaseException) -> dict[str, object]:
    """Return a JSON-serialisable payload describing *err* for an HTTP layer.

    The status code and content type come from *err* when it carries a code,
    otherwise from its cause, otherwise 500 with plain text.
    """
    source = _status_source(err)
    response = ErrorResponse(
        status_code=source.code if source is not None else 500,
        content_type=source.content_type if source is not None else TEXT_PLAIN,
        kind=kind_of(err),
        message=str(err),
        stack=stack_lines(err),
    )
    return response.model_dump(mode="json")


__all__ = [
    "KIND_REGISTRY",
    "ClassifiedErr",
    "UnknownErrorKind",
    "classifiedf",
    "classify_exception",
    "error_response",
    "exception_kind",
    "is_kind",
    "kind_of",
    "kinds_by_status",
    "lookup_kind",
    "new_classified",
    "already_existsf",
    "bad_requestf",
    "internal_serverf",
    "is_already_exists",
    "is_bad_request",
    "is_internal_server",
    "is_method_not_allowed",
    "is_not_assigned",
    "is_not_found",
    "is_not_implemented",
    "is_not_provisioned",
    "is_not_supported",
    "is_not_valid",
    "is_unauthorized",
    "is_user_not_found",
    "method_not_allowedf",
    "new_already_exists",
    "new_bad_request",
    "new_internal_server",
    "new_method_not_allowed",
    "new_not_assigned",
    "new_not_found",
    "new_not_implemented",
    "new_not_provisioned",
    "new_not_supported",
    "new_unauthorized",
    "new_user_not_found",
    "not_assignedf",
    "not_foundf",
    "not_implementedf",
    "not_provisionedf",
    "not_supportedf",
    "not_validf",
    "new_not_valid",
    "unauthorizedf",
    "user_not_foundf",
]
