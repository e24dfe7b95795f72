"""Date helpers for receipt parsing."""

from datetime import date

# Receipt dates outside this window are treated as OCR noise.
DEFAULT_YEAR_WINDOW: tuple[int, int] = (2020, 2030)


def resolve_today(today: date | None = None) -> date:
    """Return the reference date used for relative words and fallbacks."""
    return today if today is not None else date.today()


def is_within_year_window(value: date, year_window: tuple[int, int] = DEFAULT_YEAR_WINDOW) -> bool:
    year_min, year_max = year_window
    return year_min <= value.year <= year_max


def expand_two_digit_year(year: int) -> int:
    """Map 2-digit years to 2000s/1900s (00-49 -> 20xx, 50-99 -> 19xx)."""
    if year >= 100:
        return year
    return 2000 + year if year < 50 else 1900 + year


def safe_date(year: int, month: int, day: int) -> date | None:
    """Build a date, returning None for impossible calendar values."""
    try:
        return date(year, month, day)
    except ValueError:
        return None
