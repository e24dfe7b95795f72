"""Plain-text rendering of wastage alerts."""

from collections.abc import Sequence

from spendscan.domain.expense import WastageAlert

from .wastage import DEFAULT_CURRENCY_SYMBOL, format_currency


def format_wastage_report(alerts: Sequence[WastageAlert], currency_symbol: str = DEFAULT_CURRENCY_SYMBOL) -> str:
    """Render alerts as a human-readable report, most expensive first."""
    if not alerts:
        return "No recurring wastage detected."

    total_yearly = sum(alert.yearly_impact for alert in alerts)
    lines = [
        f"{len(alerts)} wastage alert(s), about {format_currency(total_yearly, currency_symbol)} per year",
        "",
    ]
    for alert in alerts:
        lines.append(f"[{alert.severity.value.upper()}] {alert.title}")
        lines.append(f"  {alert.description}")
        lines.append(
            f"  Spent {format_currency(alert.total_amount, currency_symbol)}"
            f" -> {format_currency(alert.monthly_impact, currency_symbol)}/month,"
            f" {format_currency(alert.yearly_impact, currency_symbol)}/year"
        )
        lines.append(f"  {alert.suggestion}")
        lines.append("")
    return "\n".join(lines).rstrip() + "\n"
