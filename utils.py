"""Utility functions for ledger summaries, dates, and list filtering."""
import datetime as dt
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Iterable, Optional, TypeVar

T = TypeVar("T")


def _round_money(dec: Decimal) -> float:
    """Round a Decimal to 2 decimal places with HALF_UP (normal money rounding)."""
    return float(dec.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def compute_summary(transactions: Iterable[Any]) -> dict[str, float]:
    """
    Total up a ledger.

    Accepts Transaction rows or plain dicts with "type" and "amount".
    Returns income, expense, and balance (income - expense), each rounded
    like money. The balance may be negative.
    """
    income_total = Decimal("0")
    expense_total = Decimal("0")

    for t in transactions:
        if isinstance(t, dict):
            t_type, t_amount = t.get("type"), t.get("amount")
        else:
            t_type, t_amount = t.type, t.amount

        if t_type == "income":
            income_total += Decimal(str(t_amount))
        elif t_type == "expense":
            expense_total += Decimal(str(t_amount))

    return {
        "income": _round_money(income_total),
        "expense": _round_money(expense_total),
        "balance": _round_money(income_total - expense_total),
    }


def normalize_iso_date(value: Any) -> dt.date:
    """Normalize a value to a date or raise a ValueError."""
    if isinstance(value, dt.datetime):
        raise ValueError("Invalid date format. Expected YYYY-MM-DD.")

    if isinstance(value, dt.date):
        return value

    if isinstance(value, str):
        try:
            return dt.date.fromisoformat(value)
        except ValueError:
            raise ValueError("Invalid date format. Expected YYYY-MM-DD.")

    raise ValueError("Invalid date format. Expected YYYY-MM-DD.")


def filter_transactions(
    transactions: Iterable[T],
    query: Optional[str] = None,
    tx_type: Optional[str] = None,
    category: Optional[str] = None,
) -> list[T]:
    """Filter transactions by text query (title or note), type, and category.

    Input order is preserved.
    """
    q = (query or "").strip().lower()
    results: list[T] = []

    for t in transactions:

        if tx_type and t.type != tx_type:
            continue

        if category and t.category != category:
            continue

        if q:
            title = (t.title or "").lower()
            note = (t.note or "").lower()
            if q not in title and q not in note:
                continue

        results.append(t)

    return results
