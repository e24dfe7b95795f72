"""Receipt item name cleanup."""

import re

# Applied in order; each entry is (pattern, replacement).
_CLEANUP_STEPS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\s{2,}"), " "),
    # "2 x Milk", "3@Bread", "12 Eggs"
    (re.compile(r"^\d+\s*[xX*@]\s*(?=\S)|^\d+\s+"), ""),
    (re.compile(r"\s*\(\d+\s*[xX*]\)$"), ""),
    (re.compile(r"[.,;:]+$"), ""),
    (re.compile(r"[$₹€£]+"), ""),
    (re.compile(r"^[\W_]+"), ""),
    (re.compile(r"\bItem\s*#?\s*\d+\s*", re.IGNORECASE), ""),
    (re.compile(r"\bSKU\s*:?\s*\d+", re.IGNORECASE), ""),
    (re.compile(r"\bUPC\s*:?\s*\d+", re.IGNORECASE), ""),
    (re.compile(r"^(?:qty|quantity|sku|item|product|dept)\b\s*:?\s*", re.IGNORECASE), ""),
    (re.compile(r"\s+(?:each|ea|pcs|pc|pieces|piece)$", re.IGNORECASE), ""),
)

_WORD_START_RE = re.compile(r"\b\w")


def _title_case(text: str) -> str:
    """Capitalize the first letter of every word, lowercase the rest."""
    return _WORD_START_RE.sub(lambda m: m.group(0).upper(), text.lower())


def normalize_item_name(name: str) -> str:
    """
    Clean an item name pulled from a receipt line.

    Strips quantity prefixes, "(2x)" markers, SKU/UPC/item-number tokens,
    role words ("qty", "dept", ...), unit words ("each", "pcs", ...),
    currency symbols and stray punctuation, then title-cases the result.

    >>> normalize_item_name("2 x  WHOLE MILK.")
    'Whole Milk'
    """
    cleaned = name.strip()
    for pattern, replacement in _CLEANUP_STEPS:
        cleaned = pattern.sub(replacement, cleaned)

    cleaned = re.sub(r"\s+", " ", cleaned).strip()
    # Stripping tokens can expose new trailing punctuation
    cleaned = re.sub(r"[\s.,;:\-]+$", "", cleaned)
    return _title_case(cleaned)
