"""Pydantic models for aumai-errors."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ErrorKind(str, Enum):
    """Closed set of classified error kinds."""

    not_found = "not_found"
    user_not_found = "user_not_found"
    unauthorized = "unauthorized"
    not_implemented = "not_implemented"
    already_exists = "already_exists"
    not_supported = "not_supported"
    not_valid = "not_valid"
    not_provisioned = "not_provisioned"
    not_assigned = "not_assigned"
    method_not_allowed = "method_not_allowed"
    bad_request = "bad_request"
    internal_server = "internal_server"


class KindSpec(BaseModel):
    """Definition of a single classified error kind."""

    model_config = ConfigDict(frozen=True)

    kind: ErrorKind = Field(description="Kind tag used by the predicates")
    status_code: int = Field(
        description="HTTP-style status code, 0 when the kind has no fixed code"
    )
    suffix: str = Field(
        default="", description="Text appended to messages built by the formatting constructor"
    )
    description: str = Field(description="Human-readable explanation of the kind")

    @field_validator("status_code")
    @classmethod
    def status_code_must_be_valid(cls, value: int) -> int:
        """Allow 0 or a three-digit HTTP status."""
        if value != 0 and not 100 <= value <= 599:
            raise ValueError(f"status_code must be 0 or an HTTP status, got {value}")
        return value


class SourceLocation(BaseModel):
    """Source position recorded when an error node is created."""

    model_config = ConfigDict(frozen=True)

    file: str = ""
    line: int = Field(default=0, ge=0)
    function: str = ""

    def __str__(self) -> str:
        if not self.file:
            return ""
        text = f"{self.file}:{self.line}"
        if self.function:
            text = f"{text} {self.function}"
        return text


class ErrorResponse(BaseModel):
    """Payload handed to an HTTP layer for a failed request."""

    status_code: int
    content_type: str
    kind: ErrorKind | None = None
    message: str
    stack: list[str] = Field(default_factory=list)


__all__ = [
    "ErrorKind",
    "KindSpec",
    "SourceLocation",
    "ErrorResponse",
]
