"""Raw XML token model.

Tokens are immutable value objects produced by the raw tokenizer. Names are
not namespace-resolved: ``Name.space`` holds whatever preceded the first
colon of the source name.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, ClassVar, Tuple, Union


class TokenType(Enum):
    """Raw XML token variants."""

    START_ELEMENT = auto()   # <name attr="value">
    END_ELEMENT = auto()     # </name>
    CHAR_DATA = auto()       # Text and CDATA sections
    COMMENT = auto()         # <!-- ... -->
    PROC_INST = auto()       # <?target inst?>
    DIRECTIVE = auto()       # <!DOCTYPE ...> and other <!...> declarations


@dataclass(frozen=True)
class Name:
    """Qualified name split at its first colon."""

    space: str = ""
    local: str = ""


@dataclass(frozen=True)
class Attr:
    """Single attribute of a start element."""

    name: Name
    value: str


@dataclass(frozen=True)
class StartElement:
    """Start tag with its attributes in source order."""

    type: ClassVar[TokenType] = TokenType.START_ELEMENT

    name: Name
    attrs: Tuple[Attr, ...] = ()


@dataclass(frozen=True)
class EndElement:
    """End tag."""

    type: ClassVar[TokenType] = TokenType.END_ELEMENT

    name: Name


@dataclass(frozen=True)
class CharData:
    """Character data with entities and line endings decoded."""

    type: ClassVar[TokenType] = TokenType.CHAR_DATA

    data: bytes


@dataclass(frozen=True)
class Comment:
    """Comment body without the delimiters."""

    type: ClassVar[TokenType] = TokenType.COMMENT

    data: bytes


@dataclass(frozen=True)
class ProcInst:
    """Processing instruction."""

    type: ClassVar[TokenType] = TokenType.PROC_INST

    target: str
    inst: bytes = b""


@dataclass(frozen=True)
class Directive:
    """Markup declaration body between ``<!`` and ``>``."""

    type: ClassVar[TokenType] = TokenType.DIRECTIVE

    data: bytes


Token = Union[StartElement, EndElement, CharData, Comment, ProcInst, Directive]

TOKEN_CLASSES = (StartElement, EndElement, CharData, Comment, ProcInst, Directive)


def token_equals(before: Any, after: Any) -> bool:
    """Compare two tokens for exact structural equality.

    Tokens of different variants never compare equal, and neither do objects
    that are not tokens at all. Attribute order is significant.

    Args:
        before: Token decoded from the original document
        after: Token decoded from the re-encoded form

    Returns:
        True if both tokens carry identical names, attributes and payloads
    """
    if isinstance(before, StartElement):
        if not isinstance(after, StartElement):
            return False
        if before.name != after.name or len(before.attrs) != len(after.attrs):
            return False
        return all(
            a.name == b.name and a.value == b.value
            for a, b in zip(before.attrs, after.attrs)
        )

    if isinstance(before, EndElement):
        return isinstance(after, EndElement) and before.name == after.name

    if isinstance(before, CharData):
        return isinstance(after, CharData) and before.data == after.data

    if isinstance(before, Comment):
        return isinstance(after, Comment) and before.data == after.data

    if isinstance(before, ProcInst):
        return (
            isinstance(after, ProcInst)
            and before.target == after.target
            and before.inst == after.inst
        )

    if isinstance(before, Directive):
        return isinstance(after, Directive) and before.data == after.data

    return False
