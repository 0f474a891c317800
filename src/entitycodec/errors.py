"""Entity serialization errors.

Every failure raised by a serializer is an ``EntitySerializationError``.
Stream I/O failures are not wrapped: ``OSError`` reaches the caller as-is.
"""

from __future__ import annotations


class EntitySerializationError(ValueError):
    """Base class for all entity serialization failures."""


class EncodingError(EntitySerializationError):
    """An entity cannot be represented as a canonical document."""


class DecodingError(EntitySerializationError):
    """Input is not a well-formed entity document."""


class PathDerivationError(EntitySerializationError):
    """Entity content lacks a usable ``name`` / ``package`` to build its path."""
