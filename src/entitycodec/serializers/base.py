"""Base interface for entity text serializers."""

from __future__ import annotations

import codecs
import io
from abc import ABC, abstractmethod
from typing import IO, Union

from entitycodec.errors import DecodingError, EncodingError
from entitycodec.model import Entity

Stream = Union[IO[str], IO[bytes]]


def _is_text_stream(stream: Stream) -> bool:
    """True when *stream* takes ``str``.

    ``io`` text streams and ``codecs`` writers are text; ``io`` binary streams
    are bytes. Any other file-like object is text if it reports an
    ``encoding``, bytes otherwise.
    """
    if isinstance(stream, (io.TextIOBase, codecs.StreamWriter, codecs.StreamReaderWriter)):
        return True
    if isinstance(stream, (io.RawIOBase, io.BufferedIOBase)):
        return False
    return getattr(stream, "encoding", None) is not None


class EntityTextSerializer(ABC):
    """Abstract base for all entity serializers.

    Subclasses implement ``serialize_to_string()`` and
    ``deserialize_from_string()``; the bytes and stream variants are built
    on top of them with UTF-8 as the fixed byte encoding.

    Streams are owned by the caller: they are read from or written to, never
    closed. A document is fully encoded before anything is written, so a
    failed encode leaves the stream untouched.
    """

    encoding = "utf-8"

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique serializer name, used for lookup in a registry."""

    @property
    @abstractmethod
    def default_file_extension(self) -> str:
        """File extension (without the dot) of files this serializer handles."""

    def can_serialize(self, entity: Entity) -> bool:
        return True

    # -- Serialization ------------------------------------------------------

    @abstractmethod
    def serialize_to_string(self, entity: Entity) -> str:
        """Encode *entity* as a document.

        Raises:
            EncodingError: if the entity cannot be represented.
        """

    def serialize_to_bytes(self, entity: Entity) -> bytes:
        try:
            return self.serialize_to_string(entity).encode(self.encoding)
        except UnicodeEncodeError as exc:
            raise EncodingError(f"Entity document is not valid {self.encoding}: {exc}") from exc

    def serialize(self, entity: Entity, stream: Stream) -> None:
        """Write the encoded *entity* to a binary or text *stream*.

        See ``_is_text_stream`` for how the stream kind is decided.
        """
        if _is_text_stream(stream):
            stream.write(self.serialize_to_string(entity))
        else:
            stream.write(self.serialize_to_bytes(entity))

    # -- Deserialization ----------------------------------------------------

    @abstractmethod
    def deserialize_from_string(self, text: str) -> Entity:
        """Decode a document into an Entity.

        Raises:
            DecodingError: if *text* is not a well-formed document.
            PathDerivationError: if the entity path cannot be computed.
        """

    def deserialize_from_bytes(self, data: bytes) -> Entity:
        try:
            text = bytes(data).decode(self.encoding)
        except UnicodeDecodeError as exc:
            raise DecodingError(f"Entity document is not valid {self.encoding}: {exc}") from exc
        return self.deserialize_from_string(text)

    def deserialize(self, stream: Stream) -> Entity:
        """Read a whole document from a binary or text *stream*."""
        data = stream.read()
        if isinstance(data, (bytes, bytearray)):
            return self.deserialize_from_bytes(data)
        return self.deserialize_from_string(data)
