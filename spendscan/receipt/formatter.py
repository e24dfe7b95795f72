"""Format parsed receipts as human-readable text."""

from spendscan.domain.receipt import Confidence, ReceiptParseResult


def _format_rows_aligned(rows: list[tuple[str, str, str]], indent: str = "  ") -> list[str]:
    """
    Format (name, amount, category) rows with aligned columns.

    Names are left-aligned, amounts right-aligned, category trails.
    """
    if not rows:
        return []

    max_name_len = max(len(name) for name, _, _ in rows)
    max_amount_len = max(len(amount) for _, amount, _ in rows)

    return [
        f"{indent}{name.ljust(max_name_len)}  {amount.rjust(max_amount_len)}  [{category}]"
        for name, amount, category in rows
    ]


def format_parsed_receipt(result: ReceiptParseResult) -> str:
    """
    Render a ReceiptParseResult for terminal review.

    Low-confidence results carry a note telling the user to enter the
    expense manually.
    """
    lines = [
        f"Merchant:   {result.merchant}",
        f"Date:       {result.date.isoformat()}",
        f"Confidence: {result.confidence.value}",
        "",
    ]

    if result.real_items:
        lines.append("Items:")
        rows = [(item.name, f"{item.amount:.2f}", item.category.value) for item in result.real_items]
        lines.extend(_format_rows_aligned(rows))
    else:
        lines.append("Items: none recognized")

    lines.append("")
    lines.append(f"Total:      {result.total:.2f}")

    if result.confidence is Confidence.LOW:
        lines.append("")
        lines.append("NOTE: nothing usable was recognized; please enter this expense manually.")
    elif result.confidence is Confidence.MEDIUM:
        lines.append("")
        lines.append("NOTE: only the total was recognized; item details need review.")

    return "\n".join(lines) + "\n"
