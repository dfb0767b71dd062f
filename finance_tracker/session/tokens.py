"""
Mock JWT Tokens

Tokens have the three dot-separated segments of a JWT:
base64(header).base64(payload).base64("mock-signature")

CRITICAL: There is no signature. These tokens prove nothing and
must never be accepted by a real backend.
"""

import base64
import json
import time
from typing import Any, Optional

MOCK_SIGNATURE = "mock-signature"

_HEADER = {"alg": "HS256", "typ": "JWT"}


def _b64(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def generate_mock_token(subject: str = "1234567890", name: str = "User") -> str:
    payload = {
        "sub": subject,
        "name": name,
        "iat": int(time.time() * 1000),
    }
    return ".".join((
        _b64(json.dumps(_HEADER, separators=(",", ":"))),
        _b64(json.dumps(payload, separators=(",", ":"))),
        _b64(MOCK_SIGNATURE),
    ))


def decode_mock_token(token: str) -> Optional[dict[str, Any]]:
    """
    Return the payload of a mock token.

    None if the token does not have the mock shape.
    """
    parts = token.split(".")
    if len(parts) != 3:
        return None
    try:
        header = json.loads(base64.b64decode(parts[0], validate=True))
        payload = json.loads(base64.b64decode(parts[1], validate=True))
        signature = base64.b64decode(parts[2], validate=True).decode("utf-8")
    except (ValueError, UnicodeDecodeError):
        # binascii.Error and JSONDecodeError are both ValueErrors
        return None
    if header != _HEADER or signature != MOCK_SIGNATURE or not isinstance(payload, dict):
        return None
    return payload
