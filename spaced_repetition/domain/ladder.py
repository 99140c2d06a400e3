from ..config import INTERVAL_DAYS, MAX_LEVEL, MIN_LEVEL, RETENTION_PERCENT


def clamp_level(level: int) -> int:
    return max(MIN_LEVEL, min(MAX_LEVEL, int(level)))


def interval_days(level: int) -> int:
    """Days until the next review for an item sitting at ``level``.

    Out-of-range levels saturate to the nearest end of the ladder.
    """
    return INTERVAL_DAYS[clamp_level(level)]


def retention_estimate(level: int) -> int:
    # Presentation only, never feeds scheduling
    return RETENTION_PERCENT[clamp_level(level)]


def strength_label(level: int) -> str:
    level = clamp_level(level)
    if level == 0:
        return "New"
    if level == 1:
        return "Fragile"
    if level <= 3:
        return "Building"
    if level <= 5:
        return "Strong"
    return "Mastered"


def ladder():
    return [
        {
            "level": level,
            "interval_days": interval_days(level),
            "retention_percent": retention_estimate(level),
            "strength": strength_label(level),
        }
        for level in range(MIN_LEVEL, MAX_LEVEL + 1)
    ]
