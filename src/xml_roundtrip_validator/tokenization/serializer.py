"""Canonical serialization of raw XML tokens.

encode_token() renders a single token as the markup a conventional encoder
would write for it. Names are written as ``space:local`` with empty colon
segments collapsed, so a name that was split unusually by the tokenizer comes
back in a different shape when the output is decoded again.
"""

import re
from typing import Dict

from xml_roundtrip_validator.shared.errors import EncodeError

from .tokenizer import GT, LT, is_xml_name
from .tokens import (
    CharData,
    Comment,
    Directive,
    EndElement,
    Name,
    ProcInst,
    StartElement,
    Token,
)

TEXT_ESCAPES: Dict[str, str] = {
    '"': "&#34;",
    "'": "&#39;",
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    "\t": "&#x9;",
    "\r": "&#xD;",
}

ATTR_ESCAPES: Dict[str, str] = dict(TEXT_ESCAPES, **{"\n": "&#xA;"})

_TEXT_SPECIALS = re.compile("[\"'&<>\t\r]")
_ATTR_SPECIALS = re.compile("[\"'&<>\t\r\n]")
_ILLEGAL = re.compile("[^\t\n\r\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")

BEGIN_COMMENT = b"<!--"
END_COMMENT = b"-->"
END_PROC_INST = b"?>"
QUOTES = frozenset(b"'\"")


def escape_text(text: str) -> str:
    """Escape character data for use between tags."""
    text = _ILLEGAL.sub("\ufffd", text)
    return _TEXT_SPECIALS.sub(lambda m: TEXT_ESCAPES[m.group()], text)


def escape_attr(value: str) -> str:
    """Escape an attribute value for use inside double quotes."""
    value = _ILLEGAL.sub("\ufffd", value)
    return _ATTR_SPECIALS.sub(lambda m: ATTR_ESCAPES[m.group()], value)


def qualified_name(name: Name) -> str:
    """Render a name, dropping empty colon-separated segments."""
    return ":".join(seg for seg in f"{name.space}:{name.local}".split(":") if seg)


def is_valid_directive(data: bytes) -> bool:
    """Check that angle brackets in a directive body balance.

    Brackets inside quoted strings and inside ``<!-- -->`` comments are
    ignored.
    """
    depth = 0
    quote = 0
    in_comment = False
    for i, c in enumerate(data):
        if in_comment:
            if c == GT:
                start = i + 1 - len(END_COMMENT)
                if start >= 0 and data[start:i + 1] == END_COMMENT:
                    in_comment = False
        elif quote:
            if c == quote:
                quote = 0
        elif c in QUOTES:
            quote = c
        elif c == LT:
            if i + len(BEGIN_COMMENT) < len(data) and data.startswith(BEGIN_COMMENT, i):
                in_comment = True
            else:
                depth += 1
        elif c == GT:
            if depth == 0:
                return False
            depth -= 1
    return depth == 0 and not quote and not in_comment


def encode_token(token: Token) -> bytes:
    """Serialize a single token.

    Args:
        token: Token to serialize

    Returns:
        UTF-8 encoded markup for the token

    Raises:
        EncodeError: If the token cannot be expressed as markup
    """
    if isinstance(token, StartElement):
        if not token.name.local:
            raise EncodeError("xml: start tag with no name")
        parts = ["<", qualified_name(token.name)]
        for attr in token.attrs:
            if not attr.name.local:
                continue
            parts.append(f' {qualified_name(attr.name)}="{escape_attr(attr.value)}"')
        parts.append(">")
        return "".join(parts).encode("utf-8")

    if isinstance(token, EndElement):
        if not token.name.local:
            raise EncodeError("xml: end tag with no name")
        return f"</{qualified_name(token.name)}>".encode("utf-8")

    if isinstance(token, CharData):
        return escape_text(token.data.decode("utf-8", errors="replace")).encode("utf-8")

    if isinstance(token, Comment):
        if END_COMMENT in token.data:
            raise EncodeError("xml: EncodeToken of Comment containing --> marker")
        return BEGIN_COMMENT + token.data + END_COMMENT

    if isinstance(token, ProcInst):
        if not is_xml_name(token.target):
            raise EncodeError("xml: EncodeToken of ProcInst with invalid Target")
        if END_PROC_INST in token.inst:
            raise EncodeError("xml: EncodeToken of ProcInst containing ?> marker")
        out = b"<?" + token.target.encode("utf-8")
        if token.inst:
            out += b" " + token.inst
        return out + END_PROC_INST

    if isinstance(token, Directive):
        if not is_valid_directive(token.data):
            raise EncodeError("xml: EncodeToken of Directive containing wrong < or > markers")
        return b"<!" + token.data + b">"

    raise EncodeError(f"xml: invalid token type {type(token).__name__}")
