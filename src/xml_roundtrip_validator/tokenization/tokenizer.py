"""Raw XML tokenizer with byte-accurate position tracking.

This module implements a pull tokenizer that decodes one raw token at a time
from a byte source. It does not match start and end tags, resolve namespace
prefixes or expand entities beyond the predefined ones and character
references. Names are split at their first colon, comments embedded in
directives are dropped from the directive body, and self-closing tags produce
an implicit end element. These behaviors are exactly what round-trip
validation probes, so they must not be normalized here.
"""

import logging
import re
import unicodedata
from dataclasses import dataclass
from typing import Iterator, List, Optional

from xml_roundtrip_validator.shared.config import DEFAULT_BUFFER_SIZE
from xml_roundtrip_validator.shared.errors import XMLSyntaxError

from .reader import ByteReader, InputType
from .tokens import (
    Attr,
    CharData,
    Comment,
    Directive,
    EndElement,
    Name,
    ProcInst,
    StartElement,
    Token,
)

logger = logging.getLogger(__name__)

# Byte values used by the state machine
LT = ord("<")
GT = ord(">")
SLASH = ord("/")
BANG = ord("!")
QUESTION = ord("?")
DASH = ord("-")
EQUALS = ord("=")
AMP = ord("&")
HASH = ord("#")
SEMICOLON = ord(";")
LBRACKET = ord("[")
RBRACKET = ord("]")
SQUOTE = ord("'")
DQUOTE = ord('"')
CR = ord("\r")
LF = ord("\n")
LOWER_X = ord("x")
ASCII_LIMIT = 0x80

CDATA_MARKER = b"CDATA["
COMMENT_MARKER = b"!--"
WHITESPACE = frozenset(b" \r\n\t")
DIGITS = frozenset(b"0123456789")
HEX_LETTERS = frozenset(b"abcdefABCDEF")
ASCII_LETTERS = frozenset(b"abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ")
NAME_BYTES = ASCII_LETTERS | DIGITS | frozenset(b"_:.-")
UNQUOTED_VALUE_BYTES = ASCII_LETTERS | DIGITS | frozenset(b"_:-")

PREDEFINED_ENTITIES = {
    "lt": b"<",
    "gt": b">",
    "amp": b"&",
    "apos": b"'",
    "quot": b'"',
}
MAX_UNICODE = 0x10FFFF
REPLACEMENT_CHARACTER = "\ufffd".encode("utf-8")

NAME_START_CATEGORIES = frozenset({"Lu", "Ll", "Lt", "Lo", "Nl"})
NAME_CATEGORIES = NAME_START_CATEGORIES | frozenset({"Lm", "Mn", "Mc", "Nd"})

ILLEGAL_CHARACTER = re.compile(
    "[^\t\n\r\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]"
)


@dataclass(frozen=True)
class TokenPosition:
    """Position of a token's first byte in the input."""

    line: int
    column: int
    offset: int

    def __post_init__(self) -> None:
        """Validate position values."""
        if self.line < 1:
            raise ValueError("Line number must be >= 1")
        if self.column < 1:
            raise ValueError("Column number must be >= 1")
        if self.offset < 0:
            raise ValueError("Offset must be >= 0")


def is_xml_name(name: str) -> bool:
    """Check whether ``name`` is a syntactically valid XML name."""
    if not name:
        return False
    first = name[0]
    if first not in "_:" and unicodedata.category(first) not in NAME_START_CATEGORIES:
        return False
    for ch in name[1:]:
        if ch in "_:.-\u00b7":
            continue
        if unicodedata.category(ch) not in NAME_CATEGORIES:
            return False
    return True


def _decode_name(raw: bytes) -> Optional[str]:
    try:
        name = raw.decode("utf-8")
    except UnicodeDecodeError:
        return None
    return name if is_xml_name(name) else None


def _encode_code_point(code: int) -> bytes:
    # Surrogates cannot be encoded; they decode to U+FFFD.
    if 0xD800 <= code <= 0xDFFF:
        return REPLACEMENT_CHARACTER
    return chr(code).encode("utf-8")


def _proc_inst_param(param: str, content: str) -> str:
    """Extract a quoted pseudo-attribute such as ``version`` from an XML declaration."""
    marker = param + "="
    idx = content.find(marker)
    if idx == -1:
        return ""
    value = content[idx + len(marker):]
    if not value or value[0] not in "'\"":
        return ""
    end = value.find(value[0], 1)
    if end == -1:
        return ""
    return value[1:end]


class RawTokenizer:
    """Pull tokenizer producing raw XML tokens.

    Each call to next_token() decodes exactly one token. ``position`` always
    reports where the next token starts. After a syntax error the tokenizer is
    exhausted and keeps raising the same error.
    """

    def __init__(
        self,
        source: InputType,
        strict: bool = True,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize the tokenizer.

        Args:
            source: Bytes, text or a readable object holding the document
            strict: Reject unquoted attribute values, attributes without a
                value and unknown entity references. Pass False to accept
                them the way lenient consumers do.
            buffer_size: Read chunk size for stream sources
            correlation_id: Optional correlation ID for log records
        """
        self._reader = ByteReader(source, buffer_size)
        self.strict = strict
        self.correlation_id = correlation_id
        self._error: Optional[XMLSyntaxError] = None
        self._pending_end: Optional[Name] = None

    @property
    def position(self) -> TokenPosition:
        """Position at which the next token starts."""
        return TokenPosition(self._reader.line, self._reader.column, self._reader.offset)

    @property
    def input_offset(self) -> int:
        """Number of input bytes consumed so far."""
        return self._reader.offset

    def __iter__(self) -> Iterator[Token]:
        while True:
            token = self.next_token()
            if token is None:
                return
            yield token

    def next_token(self) -> Optional[Token]:
        """Decode the next raw token.

        Returns:
            The next token, or None at end of input

        Raises:
            XMLSyntaxError: If the input is malformed at this point
        """
        if self._error is not None:
            raise self._error

        if self._pending_end is not None:
            name, self._pending_end = self._pending_end, None
            return EndElement(name)

        try:
            return self._read_token()
        except XMLSyntaxError as e:
            self._error = e
            logger.debug(
                "Raw tokenization failed",
                extra={
                    "component": "raw_tokenizer",
                    "correlation_id": self.correlation_id,
                    "offset": self._reader.offset,
                    "error": str(e)
                }
            )
            raise

    def _syntax_error(self, msg: str) -> XMLSyntaxError:
        return XMLSyntaxError(msg, self._reader.line)

    def _mustgetc(self) -> int:
        b = self._reader.getc()
        if b is None:
            raise self._syntax_error("unexpected EOF")
        return b

    def _space(self) -> None:
        while True:
            b = self._reader.getc()
            if b is None:
                return
            if b not in WHITESPACE:
                self._reader.ungetc()
                return

    def _read_token(self) -> Optional[Token]:
        b = self._reader.getc()
        if b is None:
            return None

        if b != LT:
            self._reader.ungetc()
            return CharData(self._text(quote=None, cdata=False))

        b = self._mustgetc()
        if b == SLASH:
            return self._read_end_element()
        if b == QUESTION:
            return self._read_proc_inst()
        if b == BANG:
            return self._read_markup_declaration()

        self._reader.ungetc()
        return self._read_start_element()

    def _read_end_element(self) -> EndElement:
        name = self._nsname()
        if name is None:
            raise self._syntax_error("expected element name after </")
        self._space()
        if self._mustgetc() != GT:
            raise self._syntax_error(f"invalid characters between </{name.local} and >")
        return EndElement(name)

    def _read_proc_inst(self) -> ProcInst:
        target = self._name()
        if target is None:
            raise self._syntax_error("expected target name after <?")
        self._space()

        buf = bytearray()
        b0 = 0
        while True:
            b = self._mustgetc()
            buf.append(b)
            if b0 == QUESTION and b == GT:
                break
            b0 = b
        inst = bytes(buf[:-2])

        if target == "xml":
            content = inst.decode("utf-8", errors="replace")
            version = _proc_inst_param("version", content)
            if version and version != "1.0":
                raise self._syntax_error(
                    f"unsupported version {version!r}; only version 1.0 is supported"
                )
            encoding = _proc_inst_param("encoding", content)
            if encoding and encoding.lower() != "utf-8":
                # Bytes are validated as-is regardless of the declared charset.
                logger.debug(
                    "Passing through declared encoding",
                    extra={
                        "component": "raw_tokenizer",
                        "correlation_id": self.correlation_id,
                        "encoding": encoding
                    }
                )
        return ProcInst(target, inst)

    def _read_markup_declaration(self) -> Token:
        b = self._mustgetc()
        if b == DASH:
            return self._read_comment()
        if b == LBRACKET:
            for expected in CDATA_MARKER:
                if self._mustgetc() != expected:
                    raise self._syntax_error("invalid <![ sequence")
            return CharData(self._text(quote=None, cdata=True))
        return self._read_directive(b)

    def _read_comment(self) -> Comment:
        if self._mustgetc() != DASH:
            raise self._syntax_error("invalid sequence <!- not part of <!--")

        buf = bytearray()
        b0 = b1 = 0
        while True:
            b = self._mustgetc()
            buf.append(b)
            if b0 == DASH and b1 == DASH:
                if b != GT:
                    raise self._syntax_error('invalid sequence "--" not allowed in comments')
                break
            b0, b1 = b1, b
        return Comment(bytes(buf[:-3]))

    def _read_directive(self, first: int) -> Directive:
        """Read a directive body.

        Angle brackets nest outside quoted strings. An embedded ``<!--``
        comment is skipped up to its ``-->`` and contributes nothing to the
        body.
        """
        buf = bytearray([first])
        quote = 0
        depth = 0
        while True:
            b = self._mustgetc()
            if quote == 0 and b == GT and depth == 0:
                break

            while True:
                buf.append(b)
                if b == quote:
                    quote = 0
                elif quote != 0:
                    pass
                elif b in (SQUOTE, DQUOTE):
                    quote = b
                elif b == GT:
                    depth -= 1
                elif b == LT:
                    mismatch = None
                    for i, expected in enumerate(COMMENT_MARKER):
                        b = self._mustgetc()
                        if b != expected:
                            mismatch = i
                            break
                    if mismatch is not None:
                        # Not a comment: keep what was read and handle b afresh.
                        buf.extend(COMMENT_MARKER[:mismatch])
                        depth += 1
                        continue

                    del buf[-1]
                    b0 = b1 = 0
                    while True:
                        b = self._mustgetc()
                        if b0 == DASH and b1 == DASH and b == GT:
                            break
                        b0, b1 = b1, b
                break

        return Directive(bytes(buf))

    def _read_start_element(self) -> StartElement:
        name = self._nsname()
        if name is None:
            raise self._syntax_error("expected element name after <")

        attrs: List[Attr] = []
        empty = False
        while True:
            self._space()
            b = self._mustgetc()
            if b == SLASH:
                if self._mustgetc() != GT:
                    raise self._syntax_error("expected /> in element")
                empty = True
                break
            if b == GT:
                break
            self._reader.ungetc()

            attr_name = self._nsname()
            if attr_name is None:
                raise self._syntax_error("expected attribute name in element")
            self._space()
            if self._mustgetc() != EQUALS:
                if self.strict:
                    raise self._syntax_error("attribute name without = in element")
                self._reader.ungetc()
                value = attr_name.local
            else:
                self._space()
                value = self._attr_value().decode("utf-8")
            attrs.append(Attr(attr_name, value))

        if empty:
            self._pending_end = name
        return StartElement(name, tuple(attrs))

    def _attr_value(self) -> bytes:
        b = self._mustgetc()
        if b in (DQUOTE, SQUOTE):
            return self._text(quote=b, cdata=False)
        if self.strict:
            raise self._syntax_error("unquoted or missing attribute value in element")

        self._reader.ungetc()
        buf = bytearray()
        while True:
            b = self._mustgetc()
            if b not in UNQUOTED_VALUE_BYTES:
                self._reader.ungetc()
                break
            buf.append(b)
        return bytes(buf)

    def _read_name(self) -> Optional[bytearray]:
        b = self._mustgetc()
        if b < ASCII_LIMIT and b not in NAME_BYTES:
            self._reader.ungetc()
            return None

        buf = bytearray([b])
        while True:
            b = self._mustgetc()
            if b < ASCII_LIMIT and b not in NAME_BYTES:
                self._reader.ungetc()
                break
            buf.append(b)
        return buf

    def _name(self) -> Optional[str]:
        raw = self._read_name()
        if raw is None:
            return None
        name = _decode_name(bytes(raw))
        if name is None:
            raise self._syntax_error("invalid XML name: " + raw.decode("utf-8", errors="replace"))
        return name

    def _nsname(self) -> Optional[Name]:
        name = self._name()
        if name is None:
            return None
        space, sep, local = name.partition(":")
        if not sep:
            return Name(local=name)
        return Name(space, local)

    def _text(self, quote: Optional[int], cdata: bool) -> bytes:
        """Read character data up to ``<``, the closing quote or ``]]>``."""
        buf = bytearray()
        b0 = b1 = 0
        trunc = 0
        while True:
            b = self._reader.getc()
            if b is None:
                if cdata:
                    raise self._syntax_error("unexpected EOF in CDATA section")
                break

            if b0 == RBRACKET and b1 == RBRACKET and b == GT:
                if cdata:
                    trunc = 2
                    break
                raise self._syntax_error("unescaped ]]> not in CDATA section")

            if b == LT and not cdata:
                if quote is not None:
                    raise self._syntax_error("unescaped < inside quoted string")
                self._reader.ungetc()
                break
            if quote is not None and b == quote:
                break

            if b == AMP and not cdata:
                before = len(buf)
                buf.append(AMP)
                replacement = self._entity(buf)
                if replacement is not None:
                    del buf[before:]
                    buf.extend(replacement)
                    b0 = b1 = 0
                    continue
                if not self.strict:
                    b0 = b1 = 0
                    continue
                entity = bytes(buf[before:]).decode("utf-8", errors="replace")
                if not entity.endswith(";"):
                    entity += " (no semicolon)"
                raise self._syntax_error("invalid character entity " + entity)

            # Unescaped \r and \r\n become \n.
            if b == CR:
                buf.append(LF)
            elif b1 == CR and b == LF:
                pass
            else:
                buf.append(b)
            b0, b1 = b1, b

        data = bytes(buf[:len(buf) - trunc])
        self._check_characters(data)
        return data

    def _entity(self, buf: bytearray) -> Optional[bytes]:
        """Consume an entity reference following ``&``.

        The raw reference text is appended to ``buf``.

        Returns:
            Replacement bytes, or None if the reference is not recognized
        """
        b = self._mustgetc()
        if b == HASH:
            buf.append(b)
            b = self._mustgetc()
            base = 10
            if b == LOWER_X:
                base = 16
                buf.append(b)
                b = self._mustgetc()
            start = len(buf)
            while b in DIGITS or (base == 16 and b in HEX_LETTERS):
                buf.append(b)
                b = self._mustgetc()
            if b != SEMICOLON:
                self._reader.ungetc()
                return None
            digits = bytes(buf[start:])
            buf.append(b)
            if not digits:
                return None
            code = int(digits, base)
            if code > MAX_UNICODE:
                return None
            return _encode_code_point(code)

        self._reader.ungetc()
        start = len(buf)
        raw = self._read_name()
        if raw is not None:
            buf.extend(raw)
        b = self._mustgetc()
        if b != SEMICOLON:
            self._reader.ungetc()
            return None
        name = _decode_name(bytes(buf[start:]))
        buf.append(b)
        if name is None:
            return None
        return PREDEFINED_ENTITIES.get(name)

    def _check_characters(self, data: bytes) -> None:
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError:
            raise self._syntax_error("invalid UTF-8") from None
        match = ILLEGAL_CHARACTER.search(text)
        if match:
            raise self._syntax_error(f"illegal character code U+{ord(match.group()):04X}")
