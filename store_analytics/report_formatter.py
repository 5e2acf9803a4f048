"""
Plain-text executive report over a list of store summaries.

The layout is meant for reading or pasting into another tool for further analysis, so
every missing block prints an explicit N/A line instead of being left out.
"""
import datetime
from typing import Optional

from dateutil import tz

from store_analytics.constants import DEFAULT_TIMEZONE

SEPARATOR = "-" * 60


def dollars(cents: int) -> str:
    return f"${cents / 100:.2f}"


def hours(value: float) -> str:
    return f"{value:.1f}"


def _number(value) -> str:
    return f"{value:g}" if isinstance(value, float) else str(value)


def _observation(label: Optional[str], temp_f: Optional[float]) -> Optional[str]:
    if label is None:
        return None
    return f"{label} ({_number(temp_f)}°F)" if temp_f is not None else label


def _velocity_line(title: str, entry) -> str:
    transactions = f", {_number(entry.avg_transactions)} transactions" if entry.avg_transactions is not None else ""
    return f"  {title}: {entry.label} ({dollars(entry.avg_sales_cents)} avg sales{transactions})"


def _top_line(summary) -> list:
    transactions = str(summary.total_transactions) if summary.total_transactions is not None else "N/A"
    basket = dollars(summary.avg_basket_size_cents) if summary.avg_basket_size_cents is not None else "N/A"
    rplh = dollars(summary.rplh_cents) if summary.rplh_cents is not None else "N/A"
    return [
        "Top-Line Health:",
        f"  Gross Sales: {dollars(summary.gross_sales_cents) if summary.gross_sales_cents is not None else 'N/A'}",
        f"  Total Transactions: {transactions} | Avg Basket Size: {basket}",
        f"  Total Labor Hours: {hours(summary.total_labor_hours)} | RPLH: {rplh}",
    ]


def _cash_flow(summary) -> list:
    cash_mix = summary.cash_mix
    lines = ["Risk & Cash Flow:"]
    if cash_mix.cash_pct is not None and cash_mix.card_pct is not None:
        closeout_note = f" ({cash_mix.safe_closeout_day_count} days with safe closeout)" \
            if cash_mix.safe_closeout_day_count > 0 else ""
        lines.append(f"  Payment Split: {cash_mix.cash_pct}% Cash / {cash_mix.card_pct}% Card{closeout_note}")
    else:
        lines.append("  Payment Split: N/A - no safe closeout data for this period")
    if cash_mix.deposit_variance_cents is not None:
        variance = cash_mix.deposit_variance_cents
        sign = "+" if variance >= 0 else "-"
        lines.append(f"  Deposit Variance (Shrink): {sign}{dollars(abs(variance))} ({variance} cents)")
    else:
        lines.append("  Deposit Variance: N/A - no safe closeout data for this period")
    return lines


def _environment(summary) -> list:
    weather = summary.weather_summary
    lines = ["Environmental Context:"]
    if weather.trend is None:
        lines.append("  Weather data: N/A - no shifts with weather captured in this period")
        return lines

    lines.append(f"  General Trend: {weather.trend}")
    if weather.dominant_condition:
        lines.append(f"  Dominant Condition: {weather.dominant_condition}")
    if summary.weather_days:
        lines.append("  Weather Variance:")
        for day in summary.weather_days:
            start = _observation(day.start_desc or day.start_condition, day.start_temp_f) or "Unknown"
            end = _observation(day.end_desc or day.end_condition, day.end_temp_f)
            lines.append(f"    - {day.date.isoformat()}: {start}{f' -> {end}' if end else ''}")
    for flag in weather.outlier_flags:
        lines.append(f"  Flag: {flag}")
    if weather.weather_impact_hint:
        lines.append(f"  Impact: {weather.weather_impact_hint}")
    return lines


def _velocity(summary) -> list:
    lines = ["Velocity Map (Averages):"]
    if summary.best_day is not None:
        lines.append(_velocity_line("Best Day", summary.best_day))
    same_as_best = summary.best_day is not None and summary.worst_day is not None \
        and summary.worst_day.label == summary.best_day.label
    if summary.worst_day is not None and not same_as_best:
        lines.append(_velocity_line("Worst Day", summary.worst_day))
    if summary.best_shift_type is not None:
        lines.append(_velocity_line("Best Shift Type", summary.best_shift_type))
    if summary.best_day is None and summary.worst_day is None and summary.best_shift_type is None:
        lines.append("  Velocity data: N/A - no complete sales records in this period")
    return lines


def format_store_report(summaries, period_from: datetime.date, period_to: datetime.date,
                        generated_at: Optional[datetime.datetime] = None,
                        timezone: str = DEFAULT_TIMEZONE) -> str:
    """
    Render store summaries as a plain-text executive report.

    Args:
        summaries (list[StorePeriodSummary]): Summaries to render, in order.
        period_from (datetime.date): First date of the window.
        period_to (datetime.date): Last date of the window.
        generated_at (datetime.datetime, optional): Footer timestamp; defaults to now.
        timezone (str): Timezone of the footer timestamp.

    Returns:
        str: The report, lines joined with newlines.
    """
    lines = [
        "=== EXECUTIVE STORE REPORT: CROSS-STORE VARIANCE ===",
        f"Period: {period_from.isoformat()} to {period_to.isoformat()}",
    ]
    for summary in summaries:
        lines += ["", SEPARATOR, f"STORE: {summary.store_name}", ""]
        lines += _top_line(summary)
        lines.append("")
        lines += _cash_flow(summary)
        lines.append("")
        lines += _environment(summary)
        lines.append("")
        lines += _velocity(summary)

    generated_at = generated_at or datetime.datetime.now(tz.gettz(timezone))
    lines += ["", SEPARATOR, f"Generated: {generated_at.strftime('%Y-%m-%d %H:%M:%S %Z')}"]
    return "\n".join(lines)
