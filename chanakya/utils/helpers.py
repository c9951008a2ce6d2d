"""
General helper utilities
"""
import math
from datetime import datetime, timezone
from typing import Any, Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def format_score(score: Optional[float]) -> str:
    """One decimal place, blank-safe"""
    return f"{(score or 0):.1f}"


def parse_float(value: Any) -> Optional[float]:
    """Parse a numeric cell; None when the text is not a number"""
    if value is None:
        return None
    if isinstance(value, (int, float)):
        return float(value)
    text = str(value).strip()
    if not text:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number
