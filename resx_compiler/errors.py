"""Error taxonomy for the chunk store and the distribution compiler.

WHY: The orchestrator (CLI or interactive wizard) must tell a duplicate
chunk apart from a malformed source file or a disk failure, so each
failure mode gets its own exception type under one common base.

HOW: ResxError is the base. Subclasses map one-to-one onto failure
modes; StorageError always chains the underlying OSError with
``raise ... from``.

RULES:
- The core raises these and never retries, prompts, or swallows them
- Validation errors are raised before any write happens
- ConfigError is also a ValueError so generic config handling still works
"""

from __future__ import annotations


class ResxError(Exception):
    """Base class for every error raised by resx_compiler."""


class AlreadyExistsError(ResxError):
    """Raised when creating a chunk whose name is already taken."""

    def __init__(self, chunk_name: str) -> None:
        self.chunk_name = chunk_name
        super().__init__(f"Resource file already exists: {chunk_name}")


class NotFoundError(ResxError):
    """Raised when an operation targets a chunk that does not exist."""

    def __init__(self, chunk_name: str) -> None:
        self.chunk_name = chunk_name
        super().__init__(f"Resource not found: {chunk_name}")


class ValidationError(ResxError):
    """Raised when a chunk name, key name, or value map fails a precondition.

    RULES:
    - Covers duplicate keys, missing default-language values, empty values,
      and names that cannot become script identifiers
    """


class InvalidSourceDataError(ResxError):
    """Raised when a persisted chunk violates the language-value invariants.

    WHY: Source files can be hand-edited. A file that lost its default
    language value must not produce artifacts with missing strings.

    RULES:
    - chunk_name identifies the offending chunk
    - No artifact of that chunk is written when this is raised
    """

    def __init__(self, chunk_name: str, message: str) -> None:
        self.chunk_name = chunk_name
        super().__init__(f"Invalid source data in '{chunk_name}': {message}")


class StorageError(ResxError):
    """Raised when reading or writing chunk or artifact storage fails.

    The original OSError is available as ``__cause__``.
    """

    def __init__(self, path: object, message: str) -> None:
        self.path = path
        super().__init__(f"Storage failure for {path}: {message}")


class ConfigError(ResxError, ValueError):
    """Raised when the configuration file is missing or invalid."""
