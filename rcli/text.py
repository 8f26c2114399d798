"""Text signing, verification, key generation and encryption.

Two signing schemes sit behind one interface:

* ``blake3``: keyed BLAKE3 hash used as a MAC, 32-byte shared key, 32-byte tag.
* ``ed25519``: signature from a 32-byte seed, verified with the 32-byte public key.

Encryption is ChaCha20-Poly1305 under a 32-byte key. Ciphertexts are laid out
as ``nonce (12) || ciphertext || tag (16)``.

Binary results cross the text boundary as URL-safe base64 without padding.
"""
import base64
import enum
import hmac
import logging
import re
import secrets
from typing import List, Tuple

import blake3
from cryptography.exceptions import InvalidSignature, InvalidTag
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ed25519
from cryptography.hazmat.primitives.ciphers.aead import ChaCha20Poly1305

from .errors import CryptoError, EncodingError, InvalidFormat, InvalidKeyLength
from .utils import ByteSource

logger = logging.getLogger(__name__)

KEY_SIZE = 32
BLAKE3_SIG_SIZE = 32
ED25519_SIG_SIZE = 64
NONCE_SIZE = 12
TAG_SIZE = 16
MIN_CIPHERTEXT_SIZE = NONCE_SIZE + TAG_SIZE

KeySet = List[Tuple[str, bytes]]

_B64_BAD = re.compile(r"[=+/]")


class TextSignFormat(enum.Enum):
    BLAKE3 = "blake3"
    ED25519 = "ed25519"

    @classmethod
    def parse(cls, s: str) -> "TextSignFormat":
        try:
            return cls(s.strip().lower())
        except ValueError:
            raise InvalidFormat(f"Invalid text sign format: {s}") from None

    def __str__(self):
        return self.value


# ---------- Encoding ----------
def b64_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b'=').decode('ascii')


def b64_decode(text) -> bytes:
    if isinstance(text, bytes):
        try:
            text = text.decode('ascii')
        except UnicodeDecodeError:
            raise EncodingError("base64 text must be ASCII") from None
    s = text.strip()
    if _B64_BAD.search(s):
        raise EncodingError("invalid character in URL-safe base64 (padding or +/)")
    if len(s) % 4 == 1:
        raise EncodingError(f"invalid base64 length: {len(s)}")
    try:
        data = base64.b64decode(s + '=' * (-len(s) % 4), altchars=b'-_', validate=True)
    except ValueError as e:
        raise EncodingError(f"invalid base64: {e}") from e
    # unused trailing bits must be zero
    if b64_encode(data) != s:
        raise EncodingError("non-canonical base64: trailing bits are not zero")
    return data


def _check_key(scheme: str, key: bytes, size: int = KEY_SIZE) -> bytes:
    key = bytes(key)
    if len(key) != size:
        raise InvalidKeyLength(scheme, size, len(key))
    return key


# ---------- Signers / verifiers ----------
class TextSigner:
    def sign(self, content: bytes) -> bytes:
        raise NotImplementedError


class TextVerifier:
    def verify(self, content: bytes, sig: bytes) -> bool:
        raise NotImplementedError


class Blake3Mac(TextSigner, TextVerifier):
    """Keyed BLAKE3; the same key signs and verifies."""

    def __init__(self, key: bytes):
        self.key = _check_key("blake3", key)

    def sign(self, content: bytes) -> bytes:
        return blake3.blake3(content, key=self.key).digest()

    def verify(self, content: bytes, sig: bytes) -> bool:
        if len(sig) != BLAKE3_SIG_SIZE:
            return False
        return hmac.compare_digest(self.sign(content), sig)

    @staticmethod
    def generate() -> KeySet:
        return [("blake3.txt", secrets.token_bytes(KEY_SIZE))]


class Ed25519Signer(TextSigner):
    def __init__(self, seed: bytes):
        seed = _check_key("ed25519 signing", seed)
        self.key = ed25519.Ed25519PrivateKey.from_private_bytes(seed)

    def sign(self, content: bytes) -> bytes:
        return self.key.sign(content)

    def public_bytes(self) -> bytes:
        return _raw_public(self.key.public_key())

    @staticmethod
    def generate() -> KeySet:
        sk = ed25519.Ed25519PrivateKey.generate()
        seed = sk.private_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PrivateFormat.Raw,
            encryption_algorithm=serialization.NoEncryption()
        )
        return [("ed25519.sk", seed), ("ed25519.pk", _raw_public(sk.public_key()))]


class Ed25519Verifier(TextVerifier):
    def __init__(self, public_key: bytes):
        public_key = _check_key("ed25519 public", public_key)
        try:
            self.key = ed25519.Ed25519PublicKey.from_public_bytes(public_key)
        except ValueError:
            # not a curve point; nothing can verify under it
            logger.warning("ed25519 public key does not decode to a valid point")
            self.key = None

    def verify(self, content: bytes, sig: bytes) -> bool:
        if self.key is None or len(sig) != ED25519_SIG_SIZE:
            return False
        try:
            self.key.verify(sig, content)
        except InvalidSignature:
            return False
        return True


def _raw_public(pk) -> bytes:
    return pk.public_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PublicFormat.Raw
    )


def load_signer(key: bytes, fmt: TextSignFormat) -> TextSigner:
    if fmt is TextSignFormat.BLAKE3:
        return Blake3Mac(key)
    if fmt is TextSignFormat.ED25519:
        return Ed25519Signer(key)
    raise InvalidFormat(f"Invalid text sign format: {fmt}")


def load_verifier(key: bytes, fmt: TextSignFormat) -> TextVerifier:
    if fmt is TextSignFormat.BLAKE3:
        return Blake3Mac(key)
    if fmt is TextSignFormat.ED25519:
        return Ed25519Verifier(key)
    raise InvalidFormat(f"Invalid text sign format: {fmt}")


# ---------- Cipher ----------
class TextCipher:
    """ChaCha20-Poly1305 with a random nonce prepended to each ciphertext."""

    def __init__(self, key: bytes):
        self.key = _check_key("chacha20poly1305", key)
        self._aead = ChaCha20Poly1305(self.key)

    def encrypt(self, content: bytes) -> bytes:
        nonce = secrets.token_bytes(NONCE_SIZE)
        return nonce + self._aead.encrypt(nonce, content, None)

    def decrypt(self, data: bytes) -> bytes:
        if len(data) < MIN_CIPHERTEXT_SIZE:
            raise CryptoError(
                f"ciphertext too short: {len(data)} bytes, need at least {MIN_CIPHERTEXT_SIZE}")
        nonce, body = data[:NONCE_SIZE], data[NONCE_SIZE:]
        try:
            return self._aead.decrypt(nonce, body, None)
        except InvalidTag:
            raise CryptoError("decryption failed: wrong key or corrupted ciphertext") from None


# ---------- Facade ----------
def process_text_sign(reader: ByteSource, key: bytes, fmt: TextSignFormat) -> str:
    signer = load_signer(key, fmt)
    content = reader.read()
    sig = signer.sign(content)
    logger.info("signed %d bytes from %s with %s", len(content), reader.name, fmt)
    return b64_encode(sig)


def process_text_verify(reader: ByteSource, key: bytes, sig: str, fmt: TextSignFormat) -> bool:
    decoded = b64_decode(sig)
    verifier = load_verifier(key, fmt)
    content = reader.read()
    ok = verifier.verify(content, decoded)
    logger.info("%s signature over %d bytes from %s: %s",
                fmt, len(content), reader.name, "ok" if ok else "mismatch")
    return ok


def process_text_key_generate(fmt: TextSignFormat) -> KeySet:
    if fmt is TextSignFormat.BLAKE3:
        return Blake3Mac.generate()
    if fmt is TextSignFormat.ED25519:
        return Ed25519Signer.generate()
    raise InvalidFormat(f"Invalid text sign format: {fmt}")


def process_text_encrypt(reader: ByteSource, key: bytes) -> str:
    cipher = TextCipher(key)
    content = reader.read()
    logger.info("encrypting %d bytes from %s", len(content), reader.name)
    return b64_encode(cipher.encrypt(content))


def process_text_decrypt(text, key: bytes) -> bytes:
    cipher = TextCipher(key)
    data = b64_decode(text)
    return cipher.decrypt(data)
