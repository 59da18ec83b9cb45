"""
Structured error types for sqlschema.

Every failure raised by the migration engine belongs to one of three kinds.
Callers decide what to do next by looking at the kind, not by parsing the
message text.

Manifesto:
    - **Closed set of kinds:** ``INVALID_UPDATE_FILES``, ``UPDATE_SCHEMA``, ``OTHER``
    - **Cause preserved:** The driver or I/O exception is chained, never lost
    - **Rich context:** Errors carry the sequence and filename they refer to
    - **No hidden retries:** ``retryable`` is advice for the caller only

Architecture:
    ::

        ┌──────────────────────────────────────────────────────────────┐
        │                        SchemaError                           │
        │            (kind, retryable, context, cause)                 │
        ├──────────────────────────────────────────────────────────────┤
        │                                                              │
        │  InvalidUpdateFilesError   UpdateSchemaError                 │
        │  (INVALID_UPDATE_FILES)    (UPDATE_SCHEMA)                   │
        │                                                              │
        │  UpdateSourceError         DatabaseError                     │
        │  (OTHER)                   (OTHER)                           │
        │                                 │                            │
        │                            DatabaseOpenError                 │
        │                            (OTHER, retryable)                │
        └──────────────────────────────────────────────────────────────┘

Examples:
    >>> err = UpdateSchemaError("apply update 2 (2.sql)").with_context(sequence=2)
    >>> err.kind
    <ErrorKind.UPDATE_SCHEMA: 'UPDATE_SCHEMA'>
    >>> err.context.sequence
    2

    >>> error_kind(ValueError("boom"))
    <ErrorKind.OTHER: 'OTHER'>

Guardrails:
    ❌ DON'T: Raise a bare Exception from engine code
    ✅ DO: Pick the SchemaError subclass matching the failure kind

    ❌ DON'T: Drop the driver exception when wrapping
    ✅ DO: Pass it as cause= (or use ``raise ... from exc``)

Tags:
    error-handling, exception-hierarchy, error-kind, sqlschema
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """
    Closed classification of engine failures.

    Attributes:
        INVALID_UPDATE_FILES: The update file collection itself is malformed.
            Always detected before the database is touched.
        UPDATE_SCHEMA: Files and applied log disagree, or a statement failed.
            Always surfaced after the transaction was rolled back.
        OTHER: Anything else (source I/O, opening a connection, starting a
            transaction).
    """

    INVALID_UPDATE_FILES = "INVALID_UPDATE_FILES"
    UPDATE_SCHEMA = "UPDATE_SCHEMA"
    OTHER = "OTHER"


@dataclass
class ErrorContext:
    """
    Structured metadata attached to a SchemaError.

    Only fields that were set are emitted by ``to_dict()``, so log lines stay
    compact.

    Attributes:
        sequence: Sequence number of the update involved
        filename: File name of the update involved
        source: Description of the update source (directory, package, ...)
        url: Database URL being opened
        metadata: Any additional key-value pairs
    """

    sequence: int | None = None
    filename: str | None = None
    source: str | None = None
    url: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["sequence", "filename", "source", "url"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class SchemaError(Exception):
    """
    Base exception for all sqlschema errors.

    Subclasses set ``default_kind`` and ``default_retryable``; instances may
    override ``retryable`` but never ``kind``, which keeps the set of kinds
    closed.

    Examples:
        >>> try:
        ...     raise OSError("disk gone")
        ... except OSError as e:
        ...     error = UpdateSourceError("reading 1.sql", cause=e)
        >>> error.cause
        OSError('disk gone')
        >>> error.to_dict()["kind"]
        'OTHER'
    """

    default_kind: ErrorKind = ErrorKind.OTHER
    default_retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        retryable: bool | None = None,
        context: ErrorContext | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.retryable = retryable if retryable is not None else self.default_retryable
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    @property
    def kind(self) -> ErrorKind:
        return self.default_kind

    def with_context(self, **kwargs: Any) -> SchemaError:
        """
        Add context to this error (fluent API).

        Usage:
            raise UpdateSchemaError("apply failed").with_context(
                sequence=3, filename="3.sql"
            )
        """
        for key, value in kwargs.items():
            if key != "metadata" and hasattr(self.context, key):
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "kind": self.kind.value,
            "retryable": self.retryable,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message}: {self.cause}"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, kind={self.kind.value})"


class InvalidUpdateFilesError(SchemaError):
    """
    The update file collection is malformed.

    Raised for an empty collection, a subdirectory, a badly named file, a
    sequence that does not start at 1, or a gap in the sequence.
    """

    default_kind = ErrorKind.INVALID_UPDATE_FILES


class UpdateSchemaError(SchemaError):
    """
    The update files cannot be applied.

    Either a SQL statement failed, or the files conflict with updates that
    were previously applied. The enclosing transaction has been rolled back.
    """

    default_kind = ErrorKind.UPDATE_SCHEMA


class UpdateSourceError(SchemaError):
    """The update source could not be listed or read."""

    default_kind = ErrorKind.OTHER


class DatabaseError(SchemaError):
    """A transaction could not be started on the database handle."""

    default_kind = ErrorKind.OTHER


class DatabaseOpenError(DatabaseError):
    """A database connection could not be opened. Safe to retry."""

    default_retryable = True


def error_kind(error: BaseException) -> ErrorKind:
    """Return the ErrorKind for any exception (``OTHER`` for foreign ones)."""
    if isinstance(error, SchemaError):
        return error.kind
    return ErrorKind.OTHER


def is_retryable(error: BaseException) -> bool:
    """Check whether the caller may reasonably retry the failed call."""
    if isinstance(error, SchemaError):
        return error.retryable
    return False


__all__ = [
    "ErrorKind",
    "ErrorContext",
    "SchemaError",
    "InvalidUpdateFilesError",
    "UpdateSchemaError",
    "UpdateSourceError",
    "DatabaseError",
    "DatabaseOpenError",
    "error_kind",
    "is_retryable",
]
