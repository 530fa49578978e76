"""
Utility functions for the Storeroom back office
"""
import random
import time
from decimal import Decimal, ROUND_HALF_UP

CENT = Decimal('0.01')
ZERO = Decimal('0.00')


def to_money(value) -> Decimal:
    """
    Coerce a number to a Decimal rounded to cents (half up).
    Floats go through ``str`` so 0.1 stays 0.10.
    """
    if value is None:
        return ZERO
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def generate_order_number() -> str:
    """
    Order number: '#' + last 8 digits of the millisecond clock + 3 random digits.
    """
    timestamp = str(int(time.time() * 1000))[-8:]
    suffix = str(random.randint(0, 999)).zfill(3)
    return f"#{timestamp}{suffix}"


def full_name(address: dict) -> str:
    parts = [address.get('first_name', ''), address.get('last_name', '')]
    return ' '.join(part for part in parts if part).strip()
