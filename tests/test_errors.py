"""Tests for the error hierarchy."""

from doc_assembly.errors import (
    ConfigError,
    DocAssemblyError,
    EmitError,
    ErrorCategory,
    ErrorContext,
    ExtractionError,
    FetchError,
    SourceReadError,
)


class TestErrorCategories:
    """Each subclass carries its own category."""

    def test_defaults(self):
        assert ConfigError("x").category is ErrorCategory.CONFIG
        assert SourceReadError("x").category is ErrorCategory.SOURCE
        assert ExtractionError("x").category is ErrorCategory.EXTRACTION
        assert EmitError("x").category is ErrorCategory.EMIT
        assert FetchError("x").category is ErrorCategory.NETWORK
        assert DocAssemblyError("x").category is ErrorCategory.INTERNAL

    def test_all_are_doc_assembly_errors(self):
        for cls in (ConfigError, SourceReadError, ExtractionError, EmitError, FetchError):
            assert issubclass(cls, DocAssemblyError)


class TestErrorContext:
    """Tests for context handling."""

    def test_with_context_sets_fields_and_metadata(self):
        error = ExtractionError("failed").with_context(module="Appium", stage="extract", stderr="boom")

        assert error.module == "Appium"
        assert error.context.stage == "extract"
        assert error.context.metadata == {"stderr": "boom"}

    def test_str_names_module(self):
        assert str(ExtractionError("failed").with_context(module="Appium")) == "[Appium] failed"
        assert str(ExtractionError("failed")) == "failed"

    def test_repr(self):
        assert repr(EmitError("disk full")) == "EmitError('disk full', category=EMIT)"

    def test_to_dict(self):
        cause = OSError("denied")
        error = SourceReadError("cannot read", cause=cause, context=ErrorContext(module="Foo", path="lib/Foo.js"))

        assert error.to_dict() == {
            "error_type": "SourceReadError",
            "message": "cannot read",
            "category": "SOURCE",
            "context": {"module": "Foo", "path": "lib/Foo.js"},
            "cause": "denied",
        }
        assert error.__cause__ is cause

    def test_empty_context_omitted(self):
        assert "context" not in ConfigError("bad").to_dict()
