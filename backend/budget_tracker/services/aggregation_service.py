"""
Dashboard aggregation.

Pure functions over a snapshot of categories and transactions: no I/O, no
side effects, and a well-defined zeroed result for empty input.

Amounts are summed as ``Decimal`` and only turned into floats on the
response schemas. They are only ever summed within a single currency, with
two documented exceptions kept for the dashboard cards: ``balance`` adds the
per-currency nets together as raw numbers, and ``total_income``/
``total_expenses`` are raw cross-currency sums. Neither converts between
currencies.
"""

import calendar
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from budget_tracker.schemas.category import Category, EntryType, as_utc
from budget_tracker.schemas.dashboard import (
    BudgetStatus,
    CategoryChartEntry,
    CategorySpending,
    CurrencyTotals,
    DashboardSummary,
    MonthTrend,
    Timeframe,
)
from budget_tracker.schemas.transaction import Transaction

RECENT_TRANSACTIONS_LIMIT = 5
DEFAULT_TREND_MONTHS = 6

ZERO = Decimal("0")

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _newest_first(transactions: Iterable[Transaction]) -> List[Transaction]:
    return sorted(transactions, key=lambda t: t.created_at or _EPOCH, reverse=True)


def _percentage(spent: Decimal, budget: Decimal) -> float:
    return float(spent / budget * 100) if budget > 0 else 0.0


def currency_sums(transactions: Iterable[Transaction]) -> Dict[str, Tuple[Decimal, Decimal]]:
    """Exact ``(income, expense)`` sums per currency code."""
    sums: Dict[str, Tuple[Decimal, Decimal]] = {}
    for t in transactions:
        income, expense = sums.get(t.currency, (ZERO, ZERO))
        if t.kind == EntryType.income:
            income += t.amount
        else:
            expense += t.amount
        sums[t.currency] = (income, expense)
    return sums


def _as_totals(sums: Dict[str, Tuple[Decimal, Decimal]]) -> Dict[str, CurrencyTotals]:
    return {
        code: CurrencyTotals(income=float(income), expense=float(expense))
        for code, (income, expense) in sums.items()
    }


def totals_by_currency(transactions: Iterable[Transaction]) -> Dict[str, CurrencyTotals]:
    """Income and expense sums per currency code."""
    return _as_totals(currency_sums(transactions))


def compute_balance(sums: Dict[str, Tuple[Decimal, Decimal]]) -> Decimal:
    """Sum of (income - expense) over currencies, without conversion."""
    return sum((income - expense for income, expense in sums.values()), ZERO)


def _spent_by_category(transactions: Iterable[Transaction]) -> Dict[str, Decimal]:
    spent: Dict[str, Decimal] = {}
    for t in transactions:
        if t.category_id:
            spent[t.category_id] = spent.get(t.category_id, ZERO) + t.amount
    return spent


def category_spending(
    categories: Sequence[Category],
    transactions: Sequence[Transaction]
) -> List[CategorySpending]:
    """
    Spend against budget for every category.

    Sums every transaction referencing the category regardless of currency;
    pre-filter ``transactions`` to one currency for a currency-correct view.
    ``percentage`` is 0 when there is no positive budget and is not capped.
    """
    spent_by_category = _spent_by_category(transactions)

    result = []
    for category in categories:
        spent = spent_by_category.get(category.id, ZERO)
        budget = category.budget_limit or ZERO
        result.append(CategorySpending(
            id=category.id,
            name=category.name,
            type=category.kind,
            spent=float(spent),
            budget=float(budget),
            percentage=_percentage(spent, budget),
        ))
    return result


def recent_transactions(
    transactions: Sequence[Transaction],
    limit: int = RECENT_TRANSACTIONS_LIMIT
) -> List[Transaction]:
    return _newest_first(transactions)[:limit]


def compute_dashboard(
    categories: Sequence[Category],
    transactions: Sequence[Transaction],
    recent_limit: int = RECENT_TRANSACTIONS_LIMIT,
) -> DashboardSummary:
    """Everything the dashboard shows, from one snapshot."""
    sums = currency_sums(transactions)

    return DashboardSummary(
        totals_by_currency=_as_totals(sums),
        total_income=float(sum((income for income, _ in sums.values()), ZERO)),
        total_expenses=float(sum((expense for _, expense in sums.values()), ZERO)),
        balance=float(compute_balance(sums)),
        category_spending=category_spending(categories, transactions),
        recent_transactions=recent_transactions(transactions, recent_limit),
    )


def monthly_trend(
    transactions: Iterable[Transaction],
    currency: str,
    month_count: int = DEFAULT_TREND_MONTHS,
    today: Optional[date] = None,
) -> List[MonthTrend]:
    """
    Income and expense per calendar month for one currency.

    Always returns ``month_count`` buckets, oldest first, ending at the
    current month. Months are taken in the local time zone.
    """
    today = today or date.today()

    months = []
    for i in range(month_count - 1, -1, -1):
        m = today.month - i
        y = today.year
        while m <= 0:
            m += 12
            y -= 1
        months.append((y, m))

    buckets = {key: [ZERO, ZERO] for key in months}
    currency = currency.upper()

    for t in transactions:
        if t.currency != currency or t.created_at is None:
            continue
        local = t.created_at.astimezone()
        bucket = buckets.get((local.year, local.month))
        if bucket is None:
            continue
        if t.kind == EntryType.income:
            bucket[0] += t.amount
        else:
            bucket[1] += t.amount

    return [
        MonthTrend(
            month=f"{y:04d}-{m:02d}",
            label=date(y, m, 1).strftime("%b"),
            income=float(buckets[(y, m)][0]),
            expense=float(buckets[(y, m)][1]),
        )
        for y, m in months
    ]


def category_chart(
    categories: Sequence[Category],
    transactions: Sequence[Transaction],
    kind: EntryType,
    currency: str,
) -> List[CategoryChartEntry]:
    """Per-category totals of one kind in one currency, largest first, zeros dropped."""
    currency = currency.upper()
    filtered = [t for t in transactions if t.kind == kind and t.currency == currency]

    spent_by_category = _spent_by_category(filtered)
    entries = [
        CategoryChartEntry(id=c.id, name=c.name, amount=float(spent_by_category[c.id]))
        for c in categories
        if spent_by_category.get(c.id, ZERO) > 0
    ]
    return sorted(entries, key=lambda e: e.amount, reverse=True)


def budget_status(
    categories: Sequence[Category],
    transactions: Sequence[Transaction]
) -> List[BudgetStatus]:
    """Limit, spend and what's left for expense categories that have a budget."""
    spent_by_category = _spent_by_category(transactions)

    result = []
    for category in categories:
        budget = category.budget_limit or ZERO
        if category.kind != EntryType.expense or budget <= 0:
            continue
        spent = spent_by_category.get(category.id, ZERO)
        result.append(BudgetStatus(
            id=category.id,
            name=category.name,
            limit=float(budget),
            spent=float(spent),
            remaining=float(budget - spent),
            percentage=_percentage(spent, budget),
        ))
    return result


def breakdown_by_category(
    categories: Sequence[Category],
    transactions: Sequence[Transaction],
    kind: EntryType,
) -> Dict[str, float]:
    """Totals by category name for categorized transactions of one kind."""
    names = {c.id: c.name for c in categories}
    breakdown: Dict[str, Decimal] = {}
    for t in transactions:
        if t.kind != kind or t.category_id not in names:
            continue
        name = names[t.category_id]
        breakdown[name] = breakdown.get(name, ZERO) + t.amount
    return {name: float(total) for name, total in breakdown.items()}


def _months_ago(moment: datetime, months: int) -> datetime:
    m = moment.month - months
    y = moment.year
    while m <= 0:
        m += 12
        y -= 1
    day = min(moment.day, calendar.monthrange(y, m)[1])
    return moment.replace(year=y, month=m, day=day)


def filter_by_timeframe(
    transactions: Iterable[Transaction],
    timeframe: Timeframe,
    now: Optional[datetime] = None,
) -> List[Transaction]:
    """Keep transactions from the last week, month or year (``all`` keeps everything)."""
    if timeframe == Timeframe.all:
        return list(transactions)

    now = as_utc(now) or datetime.now(timezone.utc)
    if timeframe == Timeframe.week:
        start = now - timedelta(days=7)
    elif timeframe == Timeframe.month:
        start = _months_ago(now, 1)
    else:
        start = _months_ago(now, 12)

    return [t for t in transactions if t.created_at is not None and t.created_at >= start]


def currencies_in_use(transactions: Iterable[Transaction]) -> List[str]:
    return sorted({t.currency for t in transactions})
