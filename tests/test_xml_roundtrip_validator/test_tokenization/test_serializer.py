"""Tests for canonical token serialization."""

import pytest

from xml_roundtrip_validator.shared.errors import EncodeError
from xml_roundtrip_validator.tokenization.serializer import (
    encode_token,
    escape_attr,
    escape_text,
    is_valid_directive,
    qualified_name,
)
from xml_roundtrip_validator.tokenization.tokens import (
    Attr,
    CharData,
    Comment,
    Directive,
    EndElement,
    Name,
    ProcInst,
    StartElement,
)


class TestQualifiedName:
    """Test rendering of split names."""

    @pytest.mark.parametrize("name,rendered", [
        (Name("", "Root"), "Root"),
        (Name("x", "Root"), "x:Root"),
        (Name("x", ":Root"), "x:Root"),
        (Name("", ":attr"), "attr"),
        (Name("x", "a:b"), "x:a:b"),
        (Name("x", ""), "x"),
        (Name("", ""), ""),
    ])
    def test_empty_segments_collapse(self, name, rendered):
        assert qualified_name(name) == rendered


class TestEscaping:
    """Test text and attribute escaping."""

    def test_text_escapes(self):
        assert escape_text("a&b<c>d\"e'f\rg\th\n") == (
            "a&amp;b&lt;c&gt;d&#34;e&#39;f&#xD;g&#x9;h\n"
        )

    def test_attribute_escapes_newline(self):
        assert escape_attr("a\nb\tc\rd") == "a&#xA;b&#x9;c&#xD;d"

    def test_illegal_characters_replaced(self):
        assert escape_text("a\x00b") == "a\ufffdb"

    def test_plain_text_unchanged(self):
        assert escape_text("plain text é") == "plain text é"


class TestEncodeToken:
    """Test serialization of each token variant."""

    def test_start_element_with_attributes(self):
        token = StartElement(
            Name("x", "Root"),
            (Attr(Name("xmlns", "x"), "urn:x"), Attr(Name("", "a"), 'say "hi" & <go>')),
        )

        assert encode_token(token) == (
            b'<x:Root xmlns:x="urn:x" a="say &#34;hi&#34; &amp; &lt;go&gt;">'
        )

    def test_start_element_collapses_colons(self):
        assert encode_token(StartElement(Name("x", ":Root"))) == b"<x:Root>"

    def test_attributes_without_local_name_dropped(self):
        token = StartElement(
            Name("", "Root"),
            (Attr(Name("", ""), "value"), Attr(Name("x", ""), "value"), Attr(Name("", "b"), "1")),
        )

        assert encode_token(token) == b'<Root b="1">'

    def test_start_element_without_name(self):
        with pytest.raises(EncodeError, match="xml: start tag with no name"):
            encode_token(StartElement(Name("x", "")))

    def test_end_element(self):
        assert encode_token(EndElement(Name("x", "Root"))) == b"</x:Root>"

    def test_end_element_without_name(self):
        with pytest.raises(EncodeError, match="xml: end tag with no name"):
            encode_token(EndElement(Name("x", "")))

    def test_char_data(self):
        assert encode_token(CharData(b"1 < 2\n")) == b"1 &lt; 2\n"

    def test_empty_char_data(self):
        assert encode_token(CharData(b"")) == b""

    def test_comment(self):
        assert encode_token(Comment(b" note ")) == b"<!-- note -->"

    def test_comment_containing_end_marker(self):
        with pytest.raises(EncodeError, match="-->"):
            encode_token(Comment(b"a --> b"))

    def test_proc_inst(self):
        assert encode_token(ProcInst("xml", b'version="1.0"')) == b'<?xml version="1.0"?>'

    def test_proc_inst_without_data(self):
        assert encode_token(ProcInst("target")) == b"<?target?>"

    @pytest.mark.parametrize("token", [
        ProcInst("1bad", b""),
        ProcInst("", b""),
        ProcInst("pi", b"a ?> b"),
    ])
    def test_invalid_proc_inst(self, token):
        with pytest.raises(EncodeError):
            encode_token(token)

    def test_directive(self):
        assert encode_token(Directive(b"DOCTYPE root")) == b"<!DOCTYPE root>"

    def test_unbalanced_directive(self):
        with pytest.raises(EncodeError, match="wrong < or > markers"):
            encode_token(Directive(b"a > b"))

    def test_not_a_token(self):
        with pytest.raises(EncodeError, match="invalid token type"):
            encode_token("<Root>")


class TestIsValidDirective:
    """Test directive bracket balancing."""

    @pytest.mark.parametrize("data", [
        b"DOCTYPE root",
        b'DOCTYPE root [<!ELEMENT root ANY>]',
        b' ">" <X/>',
        b"name <!-- comment --><nesting <more nesting>>",
        b" <!-- x --> y",
        b" <!-->\"--> \" ",
        b"a '<' b",
    ])
    def test_valid(self, data):
        assert is_valid_directive(data)

    @pytest.mark.parametrize("data", [
        b"a > b",
        b"a < b",
        b"a 'unterminated",
        b"a <!-- open comment",
        b"<!--",
    ])
    def test_invalid(self, data):
        assert not is_valid_directive(data)
