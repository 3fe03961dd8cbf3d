"""
Steam Guard one-time codes.

The scheme is RFC 6238 TOTP (HMAC-SHA1, 30 second step, dynamic truncation)
with one twist: the truncated 31-bit value is rendered as five characters of a
26-symbol alphabet instead of decimal digits.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import struct
from typing import Optional, Union

from steamguard.core.errors import CryptoUnavailableError, InvalidSecretError

TIME_STEP_SECONDS = 30
CODE_LENGTH = 5
CODE_ALPHABET = "23456789BCDFGHJKMNPQRTVWXY"
SHARED_SECRET_BYTES = 20


def decode_secret(secret: Optional[Union[str, bytes]]) -> bytes:
    """
    Return the raw HMAC key. Text is base64 as Steam hands it out; bytes are used as-is.
    """
    if secret is None or len(secret) == 0:
        raise InvalidSecretError("Shared secret is missing.")
    if isinstance(secret, str):
        try:
            key = base64.b64decode(secret.strip(), validate=True)
        except (binascii.Error, ValueError) as e:
            raise InvalidSecretError("Shared secret is not valid base64.") from e
    else:
        key = bytes(secret)
    if len(key) != SHARED_SECRET_BYTES:
        raise InvalidSecretError("Shared secret has the wrong length.", length=len(key), expected=SHARED_SECRET_BYTES)
    return key


def time_counter(aligned_time: int) -> int:
    if aligned_time < 0:
        raise ValueError("aligned_time must be non-negative")
    return int(aligned_time) // TIME_STEP_SECONDS


def dynamic_truncate(digest: bytes) -> int:
    offset = digest[-1] & 0x0F
    return struct.unpack(">I", digest[offset : offset + 4])[0] & 0x7FFFFFFF


def encode_code(value: int, length: int = CODE_LENGTH) -> str:
    chars = []
    for _ in range(length):
        value, idx = divmod(value, len(CODE_ALPHABET))
        chars.append(CODE_ALPHABET[idx])
    return "".join(chars)


def generate_code(secret: Optional[Union[str, bytes]], aligned_time: int) -> str:
    """
    Code valid during the 30 second window containing `aligned_time`.

    :param secret: shared secret (base64 text or 20 raw bytes)
    :param aligned_time: unix seconds on the remote clock
    :raises InvalidSecretError: secret absent, undecodable or of the wrong length
    """
    key = decode_secret(secret)
    msg = struct.pack(">Q", time_counter(aligned_time))
    try:
        digest = hmac.new(key, msg, hashlib.sha1).digest()
    except (ValueError, AttributeError) as e:
        raise CryptoUnavailableError("HMAC-SHA1 is not available.") from e
    return encode_code(dynamic_truncate(digest))
