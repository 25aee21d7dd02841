import time
from typing import Optional

VOWELS = frozenset("aiueo")


def generate_payment_code(vehicle_name: str, timestamp_ms: Optional[int] = None) -> str:
    """
    Build a payment code from the first word of the vehicle name with its
    lowercase vowels removed, followed by the epoch time in milliseconds.

    >>> generate_payment_code("Honda Vario", timestamp_ms=1700000000000)
    'Hnd1700000000000'
    """
    if timestamp_ms is None:
        timestamp_ms = time.time_ns() // 1_000_000

    words = vehicle_name.split()
    first_word = words[0] if words else ""
    prefix = "".join(ch for ch in first_word if ch not in VOWELS)
    return f"{prefix}{timestamp_ms}"
