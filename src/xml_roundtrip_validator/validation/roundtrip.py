"""Single-token round-trip check.

A token is stable when encoding it and decoding the result strictly yields an
identical token and consumes the whole encoding.
"""

import logging

from xml_roundtrip_validator.shared.errors import RoundtripError
from xml_roundtrip_validator.tokenization.serializer import encode_token
from xml_roundtrip_validator.tokenization.tokenizer import RawTokenizer
from xml_roundtrip_validator.tokenization.tokens import CharData, Token, token_equals

logger = logging.getLogger(__name__)


def check_token(token: Token) -> None:
    """Verify that ``token`` survives an encode/decode cycle unchanged.

    Args:
        token: Token decoded from the document under validation

    Raises:
        EncodeError: If the token cannot be serialized
        XMLSyntaxError: If the serialized form does not decode
        RoundtripError: If the decoded token differs or input is left over
    """
    encoded = encode_token(token)

    decoder = RawTokenizer(encoded, strict=True)
    observed = decoder.next_token()

    if observed is None:
        # Empty text encodes to nothing and decodes to nothing.
        if isinstance(token, CharData) and not token.data:
            return
        raise RoundtripError(token, None)

    if not token_equals(token, observed):
        logger.debug(
            "Token changed across round trip",
            extra={"component": "roundtrip", "expected": repr(token), "observed": repr(observed)}
        )
        raise RoundtripError(token, observed)

    # encode_token never emits bytes past its token's terminator.
    if decoder.input_offset != len(encoded):
        raise RoundtripError(token, observed, overflow=encoded[decoder.input_offset:])
