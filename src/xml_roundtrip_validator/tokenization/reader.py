"""Buffered byte reader with position tracking.

The reader pulls bytes from an in-memory buffer or any object with a
``read()`` method, one byte at a time. Streams are held one chunk at a time;
consumed chunks are dropped, so memory stays bounded by the read size while
a single byte can still be pushed back.
"""

from typing import BinaryIO, Optional, TextIO, Union

from xml_roundtrip_validator.shared.config import DEFAULT_BUFFER_SIZE

InputType = Union[bytes, bytearray, memoryview, str, BinaryIO, TextIO]

NEWLINE = 0x0A


class ByteReader:
    """Sequential byte source tracking offset, line and line start."""

    def __init__(self, source: InputType, buffer_size: int = DEFAULT_BUFFER_SIZE) -> None:
        """Initialize the reader.

        Args:
            source: Bytes, text (encoded as UTF-8) or a readable object
            buffer_size: Number of bytes requested per ``read()`` call

        Raises:
            TypeError: If ``source`` is neither a buffer nor readable
        """
        if buffer_size <= 0:
            raise ValueError("buffer_size must be > 0")

        self._stream: Optional[Union[BinaryIO, TextIO]] = None
        if isinstance(source, str):
            self._data = source.encode("utf-8")
        elif isinstance(source, (bytes, bytearray, memoryview)):
            self._data = bytes(source)
        elif hasattr(source, "read"):
            self._data = b""
            self._stream = source
        else:
            raise TypeError(
                f"Unsupported input type {type(source).__name__}; "
                "expected bytes, str or a readable object"
            )

        self._buffer_size = buffer_size
        self._pos = 0
        self._offset = 0
        self._line = 1
        self._line_start = 0
        self._prev_line_start = 0
        self._can_unread = False

    @property
    def offset(self) -> int:
        """Number of bytes consumed so far."""
        return self._offset

    @property
    def line(self) -> int:
        """1-based line of the next unread byte."""
        return self._line

    @property
    def column(self) -> int:
        """1-based byte column of the next unread byte."""
        return self._offset - self._line_start + 1

    @property
    def buffered(self) -> int:
        """Number of bytes currently held in memory."""
        return len(self._data)

    def _fill(self) -> bool:
        if self._stream is None:
            return False
        chunk = self._stream.read(self._buffer_size)
        if not chunk:
            self._stream = None
            return False
        if isinstance(chunk, str):
            chunk = chunk.encode("utf-8")
        # Consumed windows are dropped; pushback only reaches into the current one.
        self._data = bytes(chunk)
        self._pos = 0
        return True

    def getc(self) -> Optional[int]:
        """Read the next byte, or return None at end of input."""
        if self._pos >= len(self._data) and not self._fill():
            self._can_unread = False
            return None
        b = self._data[self._pos]
        self._pos += 1
        self._offset += 1
        self._can_unread = True
        if b == NEWLINE:
            self._line += 1
            self._prev_line_start = self._line_start
            self._line_start = self._offset
        return b

    def ungetc(self) -> None:
        """Push back the byte most recently returned by getc().

        Only a single byte can be pushed back between two reads.
        """
        if not self._can_unread:
            raise ValueError("nothing to unread")
        self._can_unread = False
        self._pos -= 1
        self._offset -= 1
        if self._data[self._pos] == NEWLINE:
            self._line -= 1
            self._line_start = self._prev_line_start
