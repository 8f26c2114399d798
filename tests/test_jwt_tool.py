import time

import pytest

from rcli.errors import CryptoError, InvalidFormat
from rcli.jwt_tool import parse_duration, process_jwt_sign, process_jwt_verify

KEY = b"k" * 64


@pytest.mark.parametrize("s,expected", [
    ("90", 90), ("30s", 30), ("15m", 900), ("2h", 7200), ("1d", 86400),
])
def test_parse_duration(s, expected):
    assert parse_duration(s) == expected


@pytest.mark.parametrize("s", ["", "1w", "m", "-5s", "1.5h"])
def test_parse_duration_invalid(s):
    with pytest.raises(ValueError):
        parse_duration(s)


def test_sign_verify():
    token = process_jwt_sign("alice", 3600, "rcli", "HS256", KEY)
    claims = process_jwt_verify(token, "rcli", "HS256", KEY)
    assert claims["sub"] == "alice"
    assert claims["aud"] == "rcli"
    assert claims["exp"] - claims["iat"] == 3600


def test_verify_wrong_audience():
    token = process_jwt_sign("alice", 3600, "rcli", "HS256", KEY)
    with pytest.raises(CryptoError):
        process_jwt_verify(token, "other", "HS256", KEY)


def test_verify_wrong_key():
    token = process_jwt_sign("alice", 3600, "rcli", "HS512", KEY)
    with pytest.raises(CryptoError):
        process_jwt_verify(token, "rcli", "HS512", b"x" * 64)


def test_verify_expired():
    token = process_jwt_sign("alice", 10, "rcli", "HS256", KEY, now=int(time.time()) - 3600)
    with pytest.raises(CryptoError, match="expired"):
        process_jwt_verify(token, "rcli", "HS256", KEY)


def test_verify_algorithm_mismatch():
    token = process_jwt_sign("alice", 60, "rcli", "HS384", KEY)
    with pytest.raises(CryptoError):
        process_jwt_verify(token, "rcli", "HS256", KEY)


def test_unsupported_algorithm():
    with pytest.raises(InvalidFormat):
        process_jwt_sign("alice", 60, "rcli", "none", KEY)
