"""
Entity identifier generation.

Ids are a base36 millisecond timestamp followed by a random base36
suffix, so they are unique for the process lifetime in practice.
InMemoryEntityStore still draws again if an id is already taken.
"""

import secrets
import time

_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_ALPHABET[remainder])
    return "".join(reversed(digits))


def generate_id() -> str:
    """Return a new time+random composite identifier."""
    millis = time.time_ns() // 1_000_000
    suffix = "".join(secrets.choice(_ALPHABET) for _ in range(11))
    return _to_base36(millis) + suffix
