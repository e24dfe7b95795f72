"""Merchant/date/total extraction helpers."""

import re
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal

from spendscan.runtime.logging import get_logger

from ..date_utils import (
    DEFAULT_YEAR_WINDOW,
    expand_two_digit_year,
    is_within_year_window,
    resolve_today,
    safe_date,
)
from .common import (
    CONTACT_INFO_RE,
    CURRENCY_AMOUNT_RE,
    DECIMAL_AMOUNT,
    UNKNOWN_MERCHANT,
    ZERO,
    looks_like_date,
    parse_amount,
)

logger = get_logger(__name__)

MONTHS = {
    "jan": 1,
    "feb": 2,
    "mar": 3,
    "apr": 4,
    "may": 5,
    "jun": 6,
    "jul": 7,
    "aug": 8,
    "sep": 9,
    "oct": 10,
    "nov": 11,
    "dec": 12,
}

MONTH_NAME = (
    r"(?P<month_name>january|february|march|april|may|june|july|august|september|october|november|december"
    r"|jan|feb|mar|apr|jun|jul|aug|sept|sep|oct|nov|dec)\.?"
)
DAY_SUFFIX = r"(?:st|nd|rd|th)?"

DateResolver = Callable[[re.Match[str], date], "date | None"]


@dataclass(frozen=True)
class DateMatcher:
    """One date shape: a pattern plus how to turn its match into a date."""

    name: str
    pattern: re.Pattern[str]
    resolve: DateResolver


def _resolve_ymd(match: re.Match[str], _today: date) -> date | None:
    return safe_date(int(match.group("year")), int(match.group("month")), int(match.group("day")))


def _resolve_numeric(match: re.Match[str], _today: date) -> date | None:
    """Resolve NN/NN/YYYY.

    Dotted dates are day-first (European). Otherwise month-first, unless the
    first number cannot be a month.
    """
    first = int(match.group("first"))
    second = int(match.group("second"))
    year = expand_two_digit_year(int(match.group("year")))
    separator = match.groupdict().get("sep") or "/"
    if separator == "." or first > 12:
        day, month = first, second
    else:
        month, day = first, second
    return safe_date(year, month, day)


def _resolve_written_month(match: re.Match[str], _today: date) -> date | None:
    month = MONTHS.get(match.group("month_name")[:3].lower())
    if month is None:
        return None
    year = expand_two_digit_year(int(match.group("year")))
    return safe_date(year, month, int(match.group("day")))


def _resolve_relative_word(match: re.Match[str], today: date) -> date | None:
    if match.group("word").lower() == "yesterday":
        return today - timedelta(days=1)
    return today


ISO_MATCHER = DateMatcher(
    "iso",
    re.compile(r"\b(?P<year>\d{4})[-/.](?P<month>\d{1,2})[-/.](?P<day>\d{1,2})\b"),
    _resolve_ymd,
)
NUMERIC_MATCHER = DateMatcher(
    "numeric",
    # A trailing time ("01/15/2024 10:30") is part of the same match
    re.compile(
        r"\b(?P<first>\d{1,2})(?P<sep>[-/.])(?P<second>\d{1,2})(?P=sep)(?P<year>\d{4}|\d{2})\b"
        r"(?:\s+(?P<time>\d{1,2}:\d{2}(?::\d{2})?(?:\s?[AaPp][Mm])?))?"
    ),
    _resolve_numeric,
)
MONTH_DAY_YEAR_MATCHER = DateMatcher(
    "month_day_year",
    re.compile(
        rf"\b{MONTH_NAME}\s+(?P<day>\d{{1,2}}){DAY_SUFFIX},?\s+(?P<year>\d{{4}}|\d{{2}})\b",
        re.IGNORECASE,
    ),
    _resolve_written_month,
)
DAY_MONTH_YEAR_MATCHER = DateMatcher(
    "day_month_year",
    re.compile(
        rf"\b(?P<day>\d{{1,2}}){DAY_SUFFIX}\s+{MONTH_NAME},?\s+(?P<year>\d{{4}}|\d{{2}})\b",
        re.IGNORECASE,
    ),
    _resolve_written_month,
)

# Extra shapes only trusted after an explicit "Date:" label
LABELED_VALUE_MATCHERS: tuple[DateMatcher, ...] = (
    ISO_MATCHER,
    NUMERIC_MATCHER,
    MONTH_DAY_YEAR_MATCHER,
    DAY_MONTH_YEAR_MATCHER,
    DateMatcher(
        "hyphenated_month",
        re.compile(rf"\b(?P<day>\d{{1,2}})[-/ ]{MONTH_NAME}[-/ ](?P<year>\d{{4}}|\d{{2}})\b", re.IGNORECASE),
        _resolve_written_month,
    ),
    DateMatcher(
        "compact",
        re.compile(r"\b(?P<year>\d{4})(?P<month>\d{2})(?P<day>\d{2})\b"),
        _resolve_ymd,
    ),
)


def _resolve_labeled(match: re.Match[str], today: date) -> date | None:
    value = match.group("value")
    for matcher in LABELED_VALUE_MATCHERS:
        value_match = matcher.pattern.search(value)
        if value_match:
            return matcher.resolve(value_match, today)
    return None


DATE_MATCHERS: tuple[DateMatcher, ...] = (
    ISO_MATCHER,
    NUMERIC_MATCHER,
    MONTH_DAY_YEAR_MATCHER,
    DAY_MONTH_YEAR_MATCHER,
    DateMatcher(
        "labeled",
        re.compile(r"\b(?:transaction\s+|purchase\s+)?date\s*:\s*(?P<value>[^\n]+)", re.IGNORECASE),
        _resolve_labeled,
    ),
    DateMatcher(
        "relative_word",
        re.compile(r"\b(?P<word>today|yesterday)\b", re.IGNORECASE),
        _resolve_relative_word,
    ),
)


def _extract_date(
    full_text: str,
    today: date | None = None,
    year_window: tuple[int, int] = DEFAULT_YEAR_WINDOW,
) -> date:
    """
    Extract the transaction date from receipt text.

    Matchers are tried in order and the first one that matches wins. A match
    that is not a real calendar date, or whose year falls outside the sanity
    window, resolves to today instead.
    """
    today = resolve_today(today)

    for matcher in DATE_MATCHERS:
        match = matcher.pattern.search(full_text)
        if not match:
            continue

        resolved = matcher.resolve(match, today)
        if resolved is None:
            logger.debug("Date matcher %s matched %r but it is not a valid date", matcher.name, match.group(0))
            return today
        if not is_within_year_window(resolved, year_window):
            logger.debug("Date %s outside year window %s, using today", resolved, year_window)
            return today
        return resolved

    return today


MERCHANT_BOILERPLATE_RE = re.compile(r"receipt|invoice|thank", re.IGNORECASE)
MAX_MERCHANT_LINES = 5


def _is_merchant_boilerplate(line: str) -> bool:
    return bool(
        CONTACT_INFO_RE.search(line)
        or MERCHANT_BOILERPLATE_RE.search(line)
        or CURRENCY_AMOUNT_RE.search(line)
        or looks_like_date(line)
    )


def _extract_merchant(lines: list[str]) -> str:
    """
    Extract the merchant name from the top of the receipt.

    Takes the first of the leading lines that is not boilerplate (contact
    info, receipt/invoice/thank-you wording, amounts, dates) and has a
    plausible name length. Falls back to the raw first line.
    """
    if not lines:
        return UNKNOWN_MERCHANT

    for line in lines[:MAX_MERCHANT_LINES]:
        if _is_merchant_boilerplate(line):
            continue
        if 2 < len(line) < 40:
            return line

    return lines[0]


TOTAL_PATTERNS = tuple(
    re.compile(rf"\b{label}[\s:]*\$?\s*(?P<amount>{DECIMAL_AMOUNT})", re.IGNORECASE)
    for label in ("total", "amount", "balance", r"grand\s+total", "final")
)


def _extract_fallback_total(full_text: str) -> Decimal:
    """Find an explicit total/amount/balance value; zero when none is usable."""
    for pattern in TOTAL_PATTERNS:
        match = pattern.search(full_text)
        if not match:
            continue
        amount = parse_amount(match.group("amount"))
        if amount is not None and amount > 0:
            return amount
    return ZERO
