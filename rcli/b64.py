import base64
import binascii
import logging

from .errors import EncodingError, InvalidFormat

logger = logging.getLogger(__name__)

FORMATS = ('standard', 'urlsafe')


def parse_base64_format(s: str) -> str:
    fmt = s.strip().lower()
    if fmt not in FORMATS:
        raise InvalidFormat(f"Invalid base64 format: {s}")
    return fmt


def process_encode(data: bytes, fmt: str = 'standard') -> str:
    if parse_base64_format(fmt) == 'urlsafe':
        return base64.urlsafe_b64encode(data).rstrip(b'=').decode('ascii')
    return base64.b64encode(data).decode('ascii')


def process_decode(data: bytes, fmt: str = 'standard') -> bytes:
    fmt = parse_base64_format(fmt)
    s = b''.join(data.split())
    if fmt == 'urlsafe' and (b'+' in s or b'/' in s):
        raise EncodingError("invalid urlsafe base64: '+' and '/' are not in the URL-safe alphabet")
    # tolerate stripped padding in either alphabet
    s += b'=' * (-len(s) % 4)
    try:
        if fmt == 'urlsafe':
            return base64.b64decode(s, altchars=b'-_', validate=True)
        return base64.b64decode(s, validate=True)
    except binascii.Error as e:
        raise EncodingError(f"invalid {fmt} base64: {e}") from e
