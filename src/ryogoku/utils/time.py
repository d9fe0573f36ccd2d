import re
from datetime import datetime, timedelta, timezone
from typing import Optional


def parse_duration(duration_str: str) -> timedelta:
    """Parses a duration string like '1h30m' into a timedelta object."""
    if not duration_str:
        return timedelta()

    parts = re.findall(r"(\d+)([hms])", duration_str)
    if not parts or "".join([p[0] + p[1] for p in parts]) != duration_str:
        raise ValueError(f"Invalid duration format: {duration_str}")

    duration_dict = {}
    for value, unit in parts:
        value = int(value)
        if unit == "h":
            duration_dict["hours"] = duration_dict.get("hours", 0) + value
        elif unit == "m":
            duration_dict["minutes"] = duration_dict.get("minutes", 0) + value
        elif unit == "s":
            duration_dict["seconds"] = duration_dict.get("seconds", 0) + value

    return timedelta(**duration_dict)


def format_age(created: Optional[datetime], now: Optional[datetime] = None) -> str:
    """Renders the time elapsed since `created` using its largest unit, e.g. '3d' or '12m'."""
    if created is None:
        return ""
    now = now or datetime.now(timezone.utc)
    elapsed = now - created

    days = elapsed.days
    seconds = int(elapsed.total_seconds())
    if days > 0:
        return f"{days}d"
    if seconds >= 3600:
        return f"{seconds // 3600}h"
    if seconds >= 60:
        return f"{seconds // 60}m"
    return f"{max(seconds, 0)}s"
