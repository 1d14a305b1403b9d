"""
General helper utilities
"""
import time
import uuid

_BASE36 = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"


def to_base36(value: int) -> str:
    """Encode a non-negative integer in uppercase base 36"""
    if value < 0:
        raise ValueError("value must be non-negative")
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def generate_tracking_id() -> str:
    """Public tracking id: CIV-<base36 ms timestamp>-<4 random chars>"""
    stamp = to_base36(int(time.time() * 1000))
    suffix = uuid.uuid4().hex[:4].upper()
    return f"CIV-{stamp}-{suffix}"


def format_points(points: int) -> str:
    """Signed point delta as shown in evaluation notes"""
    return f"+{points}" if points > 0 else str(points)
