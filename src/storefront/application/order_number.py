"""Human-readable order numbers, e.g. ``FUS-1718000000000-K3J9X2QLM-7TQA``."""

from __future__ import annotations

import secrets
import string
import time

_ALPHABET = string.ascii_uppercase + string.digits


def _random_block(length: int) -> str:
    return "".join(secrets.choice(_ALPHABET) for _ in range(length))


def generate_order_number(prefix: str = "FUS") -> str:
    millis = int(time.time() * 1000)
    return f"{prefix}-{millis}-{_random_block(9)}-{_random_block(4)}"
