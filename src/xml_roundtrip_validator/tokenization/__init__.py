"""Raw XML codec used for round-trip validation.

This module provides the decode/encode pair whose disagreements the validator
detects: a pull tokenizer producing raw tokens with byte-accurate positions,
and a serializer rendering a single token as canonical markup.

Key Components:
    RawTokenizer: Pull tokenizer decoding one raw token at a time
    TokenPosition: Line, column and byte offset of a token's first byte
    encode_token: Canonical serialization of a single token
    token_equals: Exact structural comparison of two tokens
"""

from .reader import ByteReader, InputType
from .serializer import encode_token, escape_attr, escape_text, is_valid_directive
from .tokenizer import RawTokenizer, TokenPosition, is_xml_name
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
    TokenType,
    token_equals,
)

__all__ = [
    "Attr",
    "ByteReader",
    "CharData",
    "Comment",
    "Directive",
    "EndElement",
    "InputType",
    "Name",
    "ProcInst",
    "RawTokenizer",
    "StartElement",
    "Token",
    "TokenPosition",
    "TokenType",
    "encode_token",
    "escape_attr",
    "escape_text",
    "is_valid_directive",
    "is_xml_name",
    "token_equals",
]
