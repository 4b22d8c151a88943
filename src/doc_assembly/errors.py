"""
Structured error types for the documentation pipeline.

Every failure that stops a build is a ``DocAssemblyError``. Errors carry a
category for routing, an ``ErrorContext`` naming the module and pipeline
stage that failed, and the chained underlying exception.

Manifesto:
    - **Fail fast, say where:** An error always names the module it came from
    - **Typed hierarchy:** Extraction, source, config, emit and fetch failures
    - **Error chaining:** The original exception is kept as ``cause``

Architecture:
    ::

        DocAssemblyError (category, context, cause)
            ├── ConfigError        (CONFIG)
            ├── SourceReadError    (SOURCE)
            ├── ExtractionError    (EXTRACTION)
            ├── EmitError          (EMIT)
            └── FetchError         (NETWORK)

Guardrails:
    ❌ DON'T: Raise for an unresolved placeholder or an absent ``## config``
    ✅ DO: Leave the text untouched, those are well-defined no-ops

    ❌ DON'T: Swallow the extractor's stderr
    ✅ DO: Keep it in ``context.metadata["stderr"]``

Tags:
    error-handling, exception-hierarchy, error-context

Doc-Types:
    - API_REFERENCE (section: "Errors", priority: 6)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories."""

    CONFIG = "CONFIG"
    SOURCE = "SOURCE"
    EXTRACTION = "EXTRACTION"
    EMIT = "EMIT"
    NETWORK = "NETWORK"
    INTERNAL = "INTERNAL"


@dataclass
class ErrorContext:
    """
    Structured metadata attached to an error.

    Attributes:
        module: Module identifier being processed
        stage: Pipeline stage (substitute, extract, normalize, merge, emit)
        path: File involved in the failure
        url: URL for remote fetches
        metadata: Additional key-value pairs
    """

    module: str | None = None
    stage: str | None = None
    path: str | None = None
    url: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["module", "stage", "path", "url"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class DocAssemblyError(Exception):
    """
    Base exception for all pipeline errors.

    Subclasses set ``default_category``.

    Examples:
        >>> error = ExtractionError("documentation.js exited with 1")
        >>> error.with_context(module="Playwright", stage="extract")
        ExtractionError('documentation.js exited with 1', category=EXTRACTION)
        >>> error.context.module
        'Playwright'
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    @property
    def module(self) -> str | None:
        return self.context.module

    def with_context(self, **kwargs: Any) -> DocAssemblyError:
        """
        Add context to this error (fluent API).

        Usage:
            raise SourceReadError("Cannot read").with_context(module="Appium")
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __str__(self) -> str:
        if self.context.module:
            return f"[{self.context.module}] {self.message}"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


class ConfigError(DocAssemblyError):
    """Invalid or inconsistent configuration."""

    default_category = ErrorCategory.CONFIG


class SourceReadError(DocAssemblyError):
    """A required input file could not be read."""

    default_category = ErrorCategory.SOURCE


class ExtractionError(DocAssemblyError):
    """The external extractor could not document a module."""

    default_category = ErrorCategory.EXTRACTION


class EmitError(DocAssemblyError):
    """A page or intermediate copy could not be written."""

    default_category = ErrorCategory.EMIT


class FetchError(DocAssemblyError):
    """Remote content could not be retrieved."""

    default_category = ErrorCategory.NETWORK
