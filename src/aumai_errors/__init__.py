"""AumAI Errors — annotated errors with cause tracking, call-site traces and classified kinds."""

from aumai_errors.errors import (
    APPLICATION_JSON,
    TEXT_PLAIN,
    EmbeddedErr,
    Err,
    cause,
    new_err,
    new_err_with_cause,
    new_json_err_with_cause,
)
from aumai_errors.functions import (
    DeferredAnnotation,
    annotate,
    annotatef,
    deferred_annotatef,
    errorf,
    mask,
    maskf,
    new,
    trace,
    wrap,
    wrapf,
)
from aumai_errors.models import ErrorKind, ErrorResponse, KindSpec, SourceLocation
from aumai_errors.stack import details, error_stack
from aumai_errors.taxonomy import (
    KIND_REGISTRY,
    ClassifiedErr,
    UnknownErrorKind,
    already_existsf,
    bad_requestf,
    classifiedf,
    classify_exception,
    error_response,
    internal_serverf,
    is_already_exists,
    is_bad_request,
    is_internal_server,
    is_kind,
    is_method_not_allowed,
    is_not_assigned,
    is_not_found,
    is_not_implemented,
    is_not_provisioned,
    is_not_supported,
    is_not_valid,
    is_unauthorized,
    is_user_not_found,
    kind_of,
    kinds_by_status,
    lookup_kind,
    method_not_allowedf,
    new_already_exists,
    new_bad_request,
    new_classified,
    new_internal_server,
    new_method_not_allowed,
    new_not_assigned,
    new_not_found,
    new_not_implemented,
    new_not_provisioned,
    new_not_supported,
    new_not_valid,
    new_unauthorized,
    new_user_not_found,
    not_assignedf,
    not_foundf,
    not_implementedf,
    not_provisionedf,
    not_supportedf,
    not_validf,
    unauthorizedf,
    user_not_foundf,
)

__version__ = "0.1.0"

__all__ = [
    # Core error value
    "APPLICATION_JSON",
    "TEXT_PLAIN",
    "EmbeddedErr",
    "Err",
    "cause",
    "new_err",
    "new_err_with_cause",
    "new_json_err_with_cause",
    # Composition
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
    # Stack traces
    "details",
    "error_stack",
    # Models
    "ErrorKind",
    "ErrorResponse",
    "KindSpec",
    "SourceLocation",
    # Taxonomy
    "KIND_REGISTRY",
    "ClassifiedErr",
    "UnknownErrorKind",
    "classifiedf",
    "classify_exception",
    "error_response",
    "is_kind",
    "kind_of",
    "kinds_by_status",
    "lookup_kind",
    "new_classified",
    "already_existsf",
    "bad_requestf",
    "internal_serverf",
    "method_not_allowedf",
    "not_assignedf",
    "not_foundf",
    "not_implementedf",
    "not_provisionedf",
    "not_supportedf",
    "not_validf",
    "unauthorizedf",
    "user_not_foundf",
    "new_already_exists",
    "new_bad_request",
    "new_internal_server",
    "new_method_not_allowed",
    "new_not_assigned",
    "new_not_found",
    "new_not_implemented",
    "new_not_provisioned",
    "new_not_supported",
    "new_not_valid",
    "new_unauthorized",
    "new_user_not_found",
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
]
