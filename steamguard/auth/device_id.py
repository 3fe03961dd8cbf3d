from __future__ import annotations

import hashlib
import re
import secrets
from typing import Sequence

from steamguard.core.errors import CryptoUnavailableError

DEFAULT_PREFIX = "android"
GROUP_LENGTHS = (8, 4, 4, 4, 12)

_DEVICE_ID_RE = re.compile(r"^[^:]+:[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$")


def split_on_ratios(value: str, lengths: Sequence[int], sep: str = "-") -> str:
    # slices clamp, so a short input only yields what is there
    parts = []
    pos = 0
    for n in lengths:
        parts.append(value[pos : pos + n])
        pos += n
    return sep.join(parts)


def generate_device_id(prefix: str = DEFAULT_PREFIX) -> str:
    """
    New random device identifier, e.g. ``android:1b2c3d4e-...``.

    Raises CryptoUnavailableError when the secure RNG or SHA-1 is missing.
    """
    try:
        raw = secrets.token_bytes(8)
    except NotImplementedError as e:
        raise CryptoUnavailableError("No secure random source available.") from e
    try:
        digest = hashlib.sha1(raw).hexdigest()
    except (ValueError, AttributeError) as e:
        raise CryptoUnavailableError("SHA-1 is not available.") from e
    random32 = digest.replace("-", "")[:32].lower()
    return f"{prefix}:{split_on_ratios(random32, GROUP_LENGTHS)}"


def is_device_id(value: str) -> bool:
    return bool(_DEVICE_ID_RE.match(str(value or "")))
