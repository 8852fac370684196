"""Summary aggregation over a set of expenses.

Every amount is converted to the target currency before it is added to any
bucket. Outputs:
    - total: sum of all converted amounts
    - by_category: one row per exact category string, largest total first;
      equal totals keep the order in which the category first appeared
    - monthly: one row per ``YYYY-MM`` prefix of the expense date, newest first

No rounding is applied; totals are plain float sums.
"""

from __future__ import annotations

from typing import Dict, Iterable, Mapping

from spendbook.models import CategoryTotal, Currency, Expense, MonthTotal, Summary
from spendbook.services.rates.conversion import convert


def summarize(
    expenses: Iterable[Expense],
    target_currency: Currency,
    rates: Mapping[Currency, object],
) -> Summary:
    total = 0.0
    by_category: Dict[str, float] = {}
    by_month: Dict[str, float] = {}
    for expense in expenses:
        amount = convert(expense.amount, expense.currency, target_currency, rates)
        total += amount
        by_category[expense.category] = by_category.get(expense.category, 0.0) + amount
        month = expense.date_iso[:7]
        by_month[month] = by_month.get(month, 0.0) + amount

    # sorted() is stable, so ties stay in first-appearance order
    categories = sorted(by_category.items(), key=lambda item: -item[1])
    months = sorted(by_month.items(), key=lambda item: item[0], reverse=True)
    return Summary(
        total=total,
        by_category=tuple(CategoryTotal(category=c, total=t) for c, t in categories),
        monthly=tuple(MonthTotal(month=m, total=t) for m, t in months),
    )
