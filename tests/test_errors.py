"""Tests for the core Err value, cause resolution and embedding."""

from __future__ import annotations

import inspect
import logging

import pytest

from aumai_errors import errors
from aumai_errors.errors import (
    APPLICATION_JSON,
    MAX_STACK_DEPTH,
    TEXT_PLAIN,
    Causer,
    EmbeddedErr,
    Err,
    Locationer,
    Wrapper,
    cause,
    new_err,
    new_err_with_cause,
    new_json_err_with_cause,
    same_error,
)
from aumai_errors.functions import annotate, errorf, mask, new, trace
from aumai_errors.location import trim_source_path

_THIS_FILE = trim_source_path(__file__)


def _here() -> int:
    """Return the line number of the caller."""
    frame = inspect.currentframe()
    assert frame is not None and frame.f_back is not None
    return frame.f_back.f_lineno


class _Embed(EmbeddedErr):
    """Error type that carries an Err by composition."""


def _new_embed(format: str, *args: object) -> _Embed:
    err = _Embed(new_err(0, format, *args))
    err.set_location(1)
    return err


def _new_embed_with_cause(other: BaseException | None, format: str, *args: object) -> _Embed:
    err = _Embed(new_err_with_cause(other, 0, format, *args))
    err.set_location(1)
    return err


class _NonComparable(Exception):
    """Foreign error type with mutable state."""

    def __init__(self, info: str) -> None:
        super().__init__(info)
        self.info = info
        self.slice: list[str] = []

    def __str__(self) -> str:
        return self.info


class _WithCauseAttr(Exception):
    """Foreign error that stores its cause as a plain attribute."""

    def __init__(self, info: str, cause: BaseException | None = None) -> None:
        super().__init__(info)
        self.cause = cause


class _WithLocationAttr(Exception):
    """Foreign error that stores a location tuple as a plain attribute."""

    def __init__(self, info: str) -> None:
        super().__init__(info)
        self.location = ("config.yaml", "parse", 3)
        self.message = info
        self.underlying = None


class _SelfLoop(Err):
    """A chain node whose previous node is itself."""

    def underlying(self) -> BaseException | None:
        return self


# ---------------------------------------------------------------------------
# Err construction
# ---------------------------------------------------------------------------


class TestErr:
    def test_is_exception(self) -> None:
        assert isinstance(Err("boom"), Exception)

    def test_can_be_raised_and_caught(self) -> None:
        with pytest.raises(Err) as exc_info:
            raise new("boom")
        assert str(exc_info.value) == "boom"

    def test_defaults(self) -> None:
        err = Err("plain")
        assert err.message == "plain"
        assert err.code == 0
        assert err.content_type == TEXT_PLAIN
        assert err.cause() is None
        assert err.underlying() is None

    def test_direct_construction_records_caller(self) -> None:
        err, line = Err("here"), _here()
        file, function, recorded = err.location()
        assert file == _THIS_FILE
        assert recorded == line
        assert function.endswith("test_direct_construction_records_caller")

    def test_set_code(self) -> None:
        err = Err("x")
        err.set_code(418)
        assert err.code == 418

    def test_repr_shows_rendered_message(self) -> None:
        err = annotate(new("first"), "ctx")
        assert repr(err) == "Err('ctx: first')"

    def test_stack_joins_stack_trace(self) -> None:
        err = annotate(new("first"), "ctx")
        assert err is not None
        assert err.stack() == "\n".join(err.stack_trace())

    def test_satisfies_capabilities(self) -> None:
        err = new("x")
        assert isinstance(err, Causer)
        assert isinstance(err, Wrapper)
        assert isinstance(err, Locationer)

    def test_foreign_error_has_no_capabilities(self) -> None:
        err = ValueError("x")
        assert not isinstance(err, Causer)
        assert not isinstance(err, Wrapper)
        assert not isinstance(err, Locationer)


# ---------------------------------------------------------------------------
# Message composition
# ---------------------------------------------------------------------------


class TestErrorString:
    def test_uncomparable_errors(self) -> None:
        err = annotate(_NonComparable("uncomparable"), "annotation")
        err = annotate(err, "another")
        assert str(err) == "another: annotation: uncomparable"

    def test_errorf(self) -> None:
        assert str(errorf("first error")) == "first error"

    def test_annotated_error(self) -> None:
        err = annotate(errorf("first error"), "annotation")
        assert str(err) == "annotation: first error"

    def test_annotation_format(self) -> None:
        err = errorf("first %s", "error")
        assert str(annotate(err, "annotation")) == "annotation: first error"

    def test_traced_and_annotated(self) -> None:
        err: BaseException | None = new("first error")
        err = trace(err)
        err = annotate(err, "some context")
        err = trace(err)
        err = annotate(err, "more context")
        err = trace(err)
        assert str(err) == "more context: some context: first error"

    def test_traced_annotated_masked_and_annotated(self) -> None:
        err: BaseException | None = new("first error")
        err = trace(err)
        err = annotate(err, "some context")
        err = mask(err)
        err = annotate(err, "more context")
        err = trace(err)
        assert str(err) == "more context: some context: first error"

    def test_empty_message_without_previous(self) -> None:
        assert str(Err()) == ""

    def test_cause_shown_when_it_differs_from_previous(self) -> None:
        detailed = ValueError("detailed")
        err = Err("prefix", previous=ValueError("hidden"), cause=detailed)
        assert str(err) == "prefix: detailed"


# ---------------------------------------------------------------------------
# cause()
# ---------------------------------------------------------------------------


class TestCause:
    def test_none(self) -> None:
        assert cause(None) is None

    def test_foreign_error_is_its_own_cause(self) -> None:
        err = RuntimeError("simple")
        assert cause(err) is err

    def test_err_without_cause_is_its_own_cause(self) -> None:
        err = new("x")
        assert cause(err) is err

    def test_stored_cause_is_returned(self) -> None:
        inner = KeyError("k")
        assert cause(Err("x", cause=inner)) is inner

    def test_annotation_exposes_original_foreign_cause(self) -> None:
        missing = FileNotFoundError("not-there")
        err = annotate(missing, "wrap it")
        assert not isinstance(err, FileNotFoundError)
        assert isinstance(cause(err), FileNotFoundError)

    def test_same_error_is_identity(self) -> None:
        first = ValueError("x")
        second = ValueError("x")
        assert same_error(first, first)
        assert not same_error(first, second)
        assert same_error(None, None)


# ---------------------------------------------------------------------------
# new_err / new_err_with_cause / new_json_err_with_cause
# ---------------------------------------------------------------------------


class TestNewErr:
    def test_formats_message(self) -> None:
        err = new_err(0, "testing %d", 42)
        assert str(err) == "testing 42"

    def test_keeps_percent_without_args(self) -> None:
        assert str(new_err(0, "100%")) == "100%"

    def test_sets_code(self) -> None:
        assert new_err(409, "conflict").code == 409

    def test_records_caller(self) -> None:
        err, line = new_err(0, "x"), _here()
        assert err.location()[0] == _THIS_FILE
        assert err.location()[2] == line

    def test_with_cause(self) -> None:
        external = RuntimeError("external error")
        err = new_err_with_cause(external, 500, "testing %d", 43)
        assert str(err) == "testing 43: external error"
        assert cause(err) is external
        assert err.underlying() is external
        assert err.code == 500

    def test_with_cause_keeps_existing_cause(self) -> None:
        first = new("first")
        err = new_err_with_cause(annotate(first, "ctx"), 0, "outer")
        assert cause(err) is first
        assert str(err) == "outer: ctx: first"

    def test_json_variant(self) -> None:
        external = ValueError("bad")
        err = new_json_err_with_cause(external, 422, '{"field": "name"}')
        assert err.content_type == APPLICATION_JSON
        assert err.code == 422
        assert err.message == '{"field": "name"}'
        assert cause(err) is external


# ---------------------------------------------------------------------------
# EmbeddedErr
# ---------------------------------------------------------------------------


class TestEmbeddedErr:
    def test_new_embed(self) -> None:
        err, line = _new_embed("testing %d", 42), _here()
        assert str(err) == "testing 42"
        assert cause(err) is err
        file, function, recorded = err.location()
        assert file == _THIS_FILE
        assert recorded == line
        assert function.endswith("test_new_embed")

    def test_new_embed_with_cause(self) -> None:
        cause_err = RuntimeError("external error")
        err = _new_embed_with_cause(cause_err, "testing %d", 43)
        assert str(err) == "testing 43: external error"
        assert cause(err) is cause_err

    def test_forwards_capabilities(self) -> None:
        err = _new_embed("x")
        assert isinstance(err, Causer)
        assert isinstance(err, Wrapper)
        assert isinstance(err, Locationer)
        assert err.message == "x"
        assert err.underlying() is None
        assert err.source_location == err.err.source_location

    def test_forwards_code(self) -> None:
        err = _Embed(new_err(429, "slow down"))
        assert err.code == 429
        err.set_code(503)
        assert err.err.code == 503
        assert err.content_type == TEXT_PLAIN

    def test_annotating_embed_keeps_it_as_cause(self) -> None:
        err = _new_embed("foo")
        annotated = annotate(err, "bar")
        assert str(annotated) == "bar: foo"
        assert cause(annotated) is err

    def test_stack_trace_starts_at_embed(self) -> None:
        err = _new_embed("foo")
        assert err.stack_trace() == [f"{err.source_location}: foo"]


# ---------------------------------------------------------------------------
# Foreign errors with look-alike attributes
# ---------------------------------------------------------------------------


class TestForeignAttributes:
    def test_cause_data_attribute_is_ignored(self) -> None:
        err = _WithCauseAttr("db down", cause=OSError("x"))
        assert cause(err) is err

    def test_annotate_foreign_with_cause_attribute(self) -> None:
        first = _WithCauseAttr("db down", cause=OSError("x"))
        err = annotate(first, "ctx")
        assert str(err) == "ctx: db down"
        assert cause(err) is first

    def test_trace_foreign_with_location_attribute(self) -> None:
        first = _WithLocationAttr("bad yaml")
        err = trace(first)
        assert str(err) == "bad yaml"
        assert err is not None
        assert err.stack_trace()[0] == "bad yaml"

    def test_data_attributes_are_not_capabilities(self) -> None:
        err = _WithLocationAttr("bad yaml")
        assert errors._method(err, "location") is None
        assert not errors._is_link(err)


# ---------------------------------------------------------------------------
# Long and cyclic chains
# ---------------------------------------------------------------------------


class TestLongChains:
    def test_deep_trace_chain_renders(self) -> None:
        err: BaseException | None = new("root")
        for _ in range(1_000):
            err = trace(err)
        assert str(err) == "root"
        assert repr(err) == "Err('root')"

    def test_deep_annotation_chain_renders(self) -> None:
        err: BaseException | None = new("root")
        for _ in range(1_000):
            err = annotate(err, "a")
        assert str(err) == "a: " * 1_000 + "root"

    def test_cyclic_link_is_truncated(
        self, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
    ) -> None:
        monkeypatch.setattr(errors, "MAX_STACK_DEPTH", 3)
        with caplog.at_level(logging.WARNING, logger="aumai_errors.errors"):
            text = str(_SelfLoop("loop"))
        assert text == "loop: loop: loop: ..."
        assert "truncated" in caplog.text
