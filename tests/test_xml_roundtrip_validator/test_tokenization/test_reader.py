"""Tests for the buffered byte reader."""

import io

import pytest

from xml_roundtrip_validator.tokenization.reader import ByteReader


class TestByteReaderSources:
    """Test accepted input types."""

    @pytest.mark.parametrize("source", [
        b"<a/>",
        bytearray(b"<a/>"),
        memoryview(b"<a/>"),
        "<a/>",
        io.BytesIO(b"<a/>"),
        io.StringIO("<a/>"),
    ])
    def test_reads_all_bytes(self, source):
        reader = ByteReader(source)

        data = []
        while True:
            b = reader.getc()
            if b is None:
                break
            data.append(b)

        assert bytes(data) == b"<a/>"
        assert reader.offset == 4

    def test_text_is_utf8_encoded(self):
        reader = ByteReader("é")

        assert reader.getc() == 0xC3
        assert reader.getc() == 0xA9
        assert reader.getc() is None

    def test_unsupported_source(self):
        with pytest.raises(TypeError, match="Unsupported input type int"):
            ByteReader(42)

    def test_invalid_buffer_size(self):
        with pytest.raises(ValueError, match="buffer_size must be > 0"):
            ByteReader(b"", buffer_size=0)

    def test_stream_read_in_chunks(self):
        stream = io.BytesIO(b"abcdefgh")
        reader = ByteReader(stream, buffer_size=3)

        assert reader.getc() == ord("a")
        assert stream.tell() == 3

        for _ in range(7):
            reader.getc()
        assert reader.getc() is None
        assert reader.offset == 8


class TestByteReaderPositions:
    """Test offset, line and column tracking."""

    def setup_method(self):
        self.reader = ByteReader(b"ab\ncd\n\nx")

    def test_initial_position(self):
        assert (self.reader.offset, self.reader.line, self.reader.column) == (0, 1, 1)

    def test_newline_advances_line(self):
        for _ in range(3):
            self.reader.getc()

        assert self.reader.line == 2
        assert self.reader.column == 1
        assert self.reader.offset == 3

    def test_column_counts_bytes(self):
        for _ in range(5):
            self.reader.getc()

        assert (self.reader.line, self.reader.column) == (2, 3)

    def test_ungetc_restores_position_across_newline(self):
        for _ in range(6):
            self.reader.getc()
        assert (self.reader.line, self.reader.column) == (3, 1)

        self.reader.ungetc()

        assert (self.reader.line, self.reader.column, self.reader.offset) == (2, 3, 5)
        assert self.reader.getc() == ord("\n")
        assert self.reader.line == 3

    def test_ungetc_at_start_fails(self):
        with pytest.raises(ValueError, match="nothing to unread"):
            self.reader.ungetc()

    def test_only_one_byte_can_be_pushed_back(self):
        self.reader.getc()
        self.reader.getc()
        self.reader.ungetc()

        with pytest.raises(ValueError, match="nothing to unread"):
            self.reader.ungetc()

    def test_ungetc_after_end_of_input_fails(self):
        reader = ByteReader(b"a")
        reader.getc()
        assert reader.getc() is None

        with pytest.raises(ValueError, match="nothing to unread"):
            reader.ungetc()


class TestByteReaderStreaming:
    """Test that stream sources are held one chunk at a time."""

    def test_consumed_chunks_are_released(self):
        document = b"<Root>" + b"<item>value</item>\n" * 8000 + b"</Root>"
        reader = ByteReader(io.BytesIO(document), buffer_size=64)

        retained = 0
        while reader.getc() is not None:
            retained = max(retained, reader.buffered)

        assert reader.offset == len(document)
        assert retained <= 64
        assert reader.buffered <= 64

    def test_ungetc_newline_at_chunk_start(self):
        reader = ByteReader(io.BytesIO(b"ab\ncd"), buffer_size=2)
        for _ in range(3):
            reader.getc()
        assert (reader.line, reader.column) == (2, 1)

        reader.ungetc()

        assert (reader.line, reader.column, reader.offset) == (1, 3, 2)
        assert reader.getc() == ord("\n")
        assert reader.getc() == ord("c")
        assert (reader.line, reader.column) == (2, 2)

    def test_ungetc_last_byte_of_chunk(self):
        reader = ByteReader(io.BytesIO(b"abcd"), buffer_size=2)
        reader.getc()
        reader.getc()

        reader.ungetc()

        assert reader.getc() == ord("b")
        assert reader.getc() == ord("c")
