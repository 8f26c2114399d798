import logging
import math
import secrets

logger = logging.getLogger(__name__)

# ambiguous characters (0 O 1 l I) left out
UPPER = "ABCDEFGHJKLMNPQRSTUVWXYZ"
LOWER = "abcdefghijkmnopqrstuvwxyz"
NUMBER = "23456789"
SYMBOL = "!@#$%^&*_"


def process_genpass(length: int = 16, upper: bool = True, lower: bool = True,
                    number: bool = True, symbol: bool = True) -> str:
    classes = [chars for chars, on in ((UPPER, upper), (LOWER, lower), (NUMBER, number), (SYMBOL, symbol)) if on]
    if not classes:
        raise ValueError("at least one character class must be enabled")
    if length < len(classes):
        raise ValueError(f"length {length} is too short for {len(classes)} character classes")

    rng = secrets.SystemRandom()
    pool = ''.join(classes)
    # one of each enabled class first, the rest from the whole pool
    password = [rng.choice(chars) for chars in classes]
    password += [rng.choice(pool) for _ in range(length - len(classes))]
    rng.shuffle(password)

    logger.info("generated %d-char password, ~%.1f bits of entropy", length, length * math.log2(len(pool)))
    return ''.join(password)
