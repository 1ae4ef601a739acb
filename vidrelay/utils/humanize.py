from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

def _one_decimal(value: float) -> str:
    # Half-up on the exact binary value
    return str(Decimal(value).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))

def format_views(views: Optional[float]) -> str:
    if not views:
        return "0"
    if views >= 1_000_000:
        return f"{_one_decimal(views / 1_000_000)}M"
    if views >= 1_000:
        return f"{_one_decimal(views / 1_000)}K"
    return str(int(views))

def format_duration(seconds: Optional[float]) -> str:
    if not seconds:
        return "0:00"
    m, s = divmod(int(seconds), 60)
    h, m = divmod(m, 60)
    if h > 0:
        return f"{h}:{m:02d}:{s:02d}"
    return f"{m}:{s:02d}"

def truncate_description(description: Optional[str], limit: int = 200) -> str:
    """First ``limit`` characters followed by an ellipsis, or "" when absent."""
    if not description:
        return ""
    return description[:limit] + "..."
