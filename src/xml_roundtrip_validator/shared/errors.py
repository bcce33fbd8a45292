"""Error types raised and collected by the round-trip validator.

All findings derive from ValidatorError. XMLSyntaxError from the outer scan
is terminal; RoundtripError and EncodeError describe a single unstable token
and never stop an exhaustive scan.
"""

from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from xml_roundtrip_validator.tokenization.tokens import Token


class ValidatorError(Exception):
    """Base exception for every validator finding."""

    def _key(self) -> tuple:
        return (str(self),)

    def __eq__(self, other: Any) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash((type(self).__name__,) + self._key())


class XMLSyntaxError(ValidatorError):
    """Raw decoding failed; the input is not well-formed markup."""

    def __init__(self, msg: str, line: int) -> None:
        super().__init__(msg, line)
        self.msg = msg
        self.line = line

    def __str__(self) -> str:
        return f"XML syntax error on line {self.line}: {self.msg}"

    def _key(self) -> tuple:
        return (self.msg, self.line)


class EncodeError(ValidatorError):
    """The canonical serializer cannot represent a token."""

    def __init__(self, msg: str) -> None:
        super().__init__(msg)
        self.msg = msg

    def __str__(self) -> str:
        return self.msg

    def _key(self) -> tuple:
        return (self.msg,)


class RoundtripError(ValidatorError):
    """A token changed after being encoded and decoded again.

    Attributes:
        expected: Token decoded from the original document
        observed: First token decoded from the canonical re-encoding, or None
            when the re-encoding decoded to nothing
        overflow: Bytes left over after decoding ``observed``, if any
    """

    def __init__(
        self,
        expected: "Token",
        observed: Optional["Token"],
        overflow: Optional[bytes] = None
    ) -> None:
        super().__init__(expected, observed, overflow)
        self.expected = expected
        self.observed = observed
        self.overflow = overflow

    def __str__(self) -> str:
        if not self.overflow:
            return f"roundtrip error: expected {self.expected!r}, observed {self.observed!r}"
        overflow = self.overflow.decode("utf-8", errors="replace")
        return f"roundtrip error: unexpected overflow after token: {overflow}"

    def _key(self) -> tuple:
        return (self.expected, self.observed, self.overflow or None)


class XMLValidationError(ValidatorError):
    """A non-terminal finding with the position of the offending token.

    ``document[start:end]`` is the exact source text of the token.
    """

    def __init__(
        self,
        start: int,
        end: int,
        line: int,
        column: int,
        cause: ValidatorError
    ) -> None:
        super().__init__(start, end, line, column, cause)
        self.start = start
        self.end = end
        self.line = line
        self.column = column
        self.cause = cause
        self.__cause__ = cause

    def __str__(self) -> str:
        return f"validator: in token starting at {self.line}:{self.column}: {self.cause}"

    def _key(self) -> tuple:
        return (self.start, self.end, self.line, self.column, self.cause)
