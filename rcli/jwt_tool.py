import logging
import re
import time
from typing import Any, Dict, Optional

import jwt

from .errors import CryptoError, InvalidFormat

logger = logging.getLogger(__name__)

ALGORITHMS = ('HS256', 'HS384', 'HS512')
DEFAULT_AUDIENCE = 'rcli'

_UNITS = {'s': 1, 'm': 60, 'h': 3600, 'd': 86400}
_DURATION = re.compile(r'^(\d+)([smhd]?)$')


def parse_duration(s: str) -> int:
    """'90' -> 90, '15m' -> 900, '1d' -> 86400."""
    m = _DURATION.match(s.strip())
    if not m:
        raise ValueError(f"Invalid duration: {s}")
    num, unit = m.groups()
    return int(num) * _UNITS[unit or 's']


def parse_algorithm(s: str) -> str:
    alg = s.strip().upper()
    if alg not in ALGORITHMS:
        raise InvalidFormat(f"Unsupported JWT algorithm: {s}")
    return alg


def process_jwt_sign(sub: str, exp: int, aud: str, alg: str, key: bytes, now: Optional[int] = None) -> str:
    now = int(time.time()) if now is None else now
    claims = {"sub": sub, "aud": aud, "iat": now, "exp": now + exp}
    token = jwt.encode(claims, key, algorithm=parse_algorithm(alg))
    logger.info("issued %s token for sub=%s aud=%s, expires in %ds", alg, sub, aud, exp)
    return token


def process_jwt_verify(token: str, aud: str, alg: str, key: bytes) -> Dict[str, Any]:
    try:
        claims = jwt.decode(
            token.strip(),
            key,
            algorithms=[parse_algorithm(alg)],
            audience=aud,
            options={"require": ["exp", "aud", "sub"]},
        )
    except jwt.PyJWTError as e:
        raise CryptoError(str(e) or e.__class__.__name__) from e
    logger.debug("verified token claims: %s", claims)
    return claims
