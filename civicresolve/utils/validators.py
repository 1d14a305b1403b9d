"""
Input validation utilities
"""
from typing import Optional


def validate_latitude(value: float) -> float:
    """Latitude must lie within [-90, 90]"""
    if not -90 <= value <= 90:
        raise ValueError("Latitude must be between -90 and 90")
    return value


def validate_longitude(value: float) -> float:
    """Longitude must lie within [-180, 180]"""
    if not -180 <= value <= 180:
        raise ValueError("Longitude must be between -180 and 180")
    return value


def validate_user_id(user_id: Optional[str]) -> str:
    """Wallet operations need a non-blank user id"""
    if not user_id or not user_id.strip():
        raise ValueError("Missing userId")
    return user_id.strip()


def is_filter_active(value: Optional[str]) -> bool:
    """Query filters treat a missing value and the 'all' sentinel as no filter"""
    return bool(value) and value != "all"
