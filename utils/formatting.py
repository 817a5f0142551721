from datetime import date, datetime, timezone
from typing import Optional


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def round1(value: float) -> float:
    return round(value, 1)


def percent_text(value: float, has_data: bool = True) -> str:
    """90 → "90.0%", 기록이 없으면 "0%" """
    if not has_data:
        return "0%"
    return f"{value:.1f}%"


def iso_date(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value is not None else None
