"""Exception types raised by rcli operations.

The CLI catches :class:`RcliError` and reports it on stderr; anything else is a bug.
"""


class RcliError(Exception):
    """Base class for every reportable rcli failure."""


class IoError(RcliError):
    """A source or destination could not be read or written."""


class InvalidKeyLength(RcliError, ValueError):
    def __init__(self, scheme: str, expected: int, actual: int):
        super().__init__(f"{scheme} key must be {expected} bytes, got {actual}")
        self.scheme = scheme
        self.expected = expected
        self.actual = actual


class InvalidFormat(RcliError, ValueError):
    """Unrecognized format selector."""


class EncodingError(RcliError, ValueError):
    """Malformed text at a text/binary boundary (base64, CSV)."""


class CryptoError(RcliError):
    """Library-level cipher or token failure, e.g. a bad AEAD tag."""
