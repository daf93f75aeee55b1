"""Data analytics API for transaction analysis.

This module folds transaction records into monthly summaries, prepares the category
breakdown for the pie chart, and provides pandas-based monthly overviews and trends.

Transactions are read-only here: records may be plain dicts (as stored by
:mod:`PocketLedger.core.transactions`) or :class:`Transaction` instances.
"""
import datetime
import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence

import pandas as pd
from statsmodels.nonparametric.smoothers_lowess import lowess

from .chart import ChartItem
from .coerce import coerce_amount, get_field

TRANSACTION_DATA_COLUMNS: List[str] = ['id', 'type', 'amount', 'category', 'date']
OVERVIEW_DATA_COLUMNS: List[str] = ['month', 'income', 'expense', 'balance']
TREND_DATA_COLUMNS: List[str] = ['month', 'monthly_total', 'loess']


class TransactionType(enum.StrEnum):
    Income = 'income'
    Expense = 'expense'


@dataclass(slots=True)
class Transaction:
    """A single income or expense record."""
    id: str
    type: str
    amount: Any
    category: Optional[str] = None
    date: Any = None


@dataclass(slots=True)
class MonthlySummary:
    """Totals and per-category expenses of a set of transactions."""
    total_income: float = 0.0
    total_expense: float = 0.0
    balance: float = 0.0
    category_expenses: Dict[str, float] = field(default_factory=dict)

    def as_dict(self) -> Dict[str, Any]:
        """Return the summary using the stored-record key names."""
        return {
            'totalIncome': self.total_income,
            'totalExpense': self.total_expense,
            'balance': self.balance,
            'categoryExpenses': dict(self.category_expenses),
        }


def compute_monthly_summary(transactions: Iterable[Any]) -> MonthlySummary:
    """Fold transactions into income, expense and balance totals.

    Amounts are read with :func:`coerce_amount`, so malformed amounts count as zero.
    Expenses with a category are also accumulated per category. Records whose type is
    neither income nor expense are ignored. Totals and balance are rounded to 2 digits;
    the balance is computed from the unrounded totals.

    Args:
        transactions: Transaction records, in any order.

    Returns:
        MonthlySummary: A new summary. The input is not modified.
    """
    total_income = 0.0
    total_expense = 0.0
    category_expenses: Dict[str, float] = {}

    for transaction in transactions:
        amount = coerce_amount(get_field(transaction, 'amount'))
        _type = get_field(transaction, 'type')

        if _type == TransactionType.Income:
            total_income += amount
        elif _type == TransactionType.Expense:
            total_expense += amount

            category = get_field(transaction, 'category')
            if category:
                category_expenses[category] = category_expenses.get(category, 0.0) + amount

    balance = total_income - total_expense

    return MonthlySummary(
        total_income=round(total_income, 2),
        total_expense=round(total_expense, 2),
        balance=round(balance, 2),
        category_expenses=category_expenses,
    )


def get_chart_items(summary: MonthlySummary, categories: Sequence[Dict[str, Any]]) -> List[ChartItem]:
    """Build pie chart items from a summary's category expenses.

    Categories with no positive expense are skipped. Unknown category ids are shown
    using the fallback category.

    Args:
        summary: Summary returned by :func:`compute_monthly_summary`.
        categories: Category records available to the user.

    Returns:
        list[ChartItem]: Items in the summary's category order.
    """
    from ..core.categories import get_category_by_id

    items: List[ChartItem] = []
    for category_id, amount in summary.category_expenses.items():
        if amount <= 0:
            continue
        category = get_category_by_id(category_id, categories)
        items.append(
            ChartItem(
                name=category['name'],
                amount=amount,
                color=category['color'],
                category=category_id,
            )
        )
    return items


def _to_timestamp(value: Any) -> pd.Timestamp:
    """Convert a stored date to a naive local timestamp, or NaT."""
    if value is None or value == '':
        return pd.NaT
    try:
        ts = pd.Timestamp(value)
    except (ValueError, TypeError):
        return pd.NaT
    if ts is pd.NaT:
        return ts
    if ts.tzinfo is not None:
        ts = pd.Timestamp(ts.to_pydatetime().astimezone().replace(tzinfo=None))
    return ts


def to_frame(transactions: Iterable[Any]) -> pd.DataFrame:
    """Conform transaction records to a DataFrame.

    Amounts are coerced, dates are parsed, rows with an unparsable date are dropped and
    the result is sorted by date.

    Args:
        transactions: Transaction records.

    Returns:
        pd.DataFrame: DataFrame with :data:`TRANSACTION_DATA_COLUMNS`.
    """
    records = [
        {
            'id': get_field(t, 'id'),
            'type': get_field(t, 'type') or '',
            'amount': coerce_amount(get_field(t, 'amount')),
            'category': get_field(t, 'category') or '',
            'date': _to_timestamp(get_field(t, 'date')),
        }
        for t in transactions
    ]
    df = pd.DataFrame.from_records(records, columns=TRANSACTION_DATA_COLUMNS)
    df['amount'] = df['amount'].astype(float)
    df['date'] = pd.to_datetime(df['date'])

    clean_df = df.dropna(subset=['date'])
    if len(df) != len(clean_df):
        logging.warning(
            f'Unparsable dates encountered: Dropped {len(df) - len(clean_df)} rows with invalid date.')

    return clean_df.sort_values(by='date', ascending=True).reset_index(drop=True)


def _month_window(yearmonth: str, span: int) -> pd.PeriodIndex:
    start = pd.Period(yearmonth, freq='M')
    return pd.period_range(start=start, periods=max(int(span) if span else 1, 1), freq='M')


def get_monthly_overview(transactions: Iterable[Any], yearmonth: str, span: int = 1) -> pd.DataFrame:
    """Income, expense and balance per month.

    Args:
        transactions: Transaction records.
        yearmonth (str): First month of the window in 'YYYY-MM' format.
        span (int): Number of months in the window.

    Returns:
        pd.DataFrame: One row per month with :data:`OVERVIEW_DATA_COLUMNS`. Months without
            transactions have zero totals.
    """
    periods = _month_window(yearmonth, span)

    df = to_frame(transactions)
    df['period'] = df['date'].dt.to_period('M')
    df = df[df['period'].isin(periods)]

    def _totals(_type: str) -> pd.Series:
        sub = df[df['type'] == _type]
        return sub.groupby('period')['amount'].sum().reindex(periods, fill_value=0.0)

    income = _totals(TransactionType.Income.value)
    expense = _totals(TransactionType.Expense.value)

    return pd.DataFrame({
        'month': periods.to_timestamp(),
        'income': income.to_numpy(dtype=float).round(2),
        'expense': expense.to_numpy(dtype=float).round(2),
        'balance': (income - expense).to_numpy(dtype=float).round(2),
    })[OVERVIEW_DATA_COLUMNS]


def get_trends(
        transactions: Iterable[Any],
        yearmonth: str = '',
        negative_span: int = 6,
        category: Optional[str] = None,
        loess_fraction: float = 0.5,
) -> pd.DataFrame:
    """Compute monthly expense totals with LOESS smoothing.

    Args:
        transactions: Transaction records.
        yearmonth (str): Last month of the window in 'YYYY-MM' format; uses the latest
            month with an expense if empty.
        negative_span (int): Number of months in the window, counting backwards.
        category (Optional[str]): Restrict to a single category.
        loess_fraction (float): Fraction of data for LOESS smoothing (0 < loess_fraction <= 1).

    Returns:
        pd.DataFrame: Trend data with :data:`TREND_DATA_COLUMNS`.
    """
    df = to_frame(transactions)
    df = df[df['type'] == TransactionType.Expense.value]
    if category:
        df = df[df['category'] == category]
    if df.empty and not yearmonth:
        return pd.DataFrame(columns=TREND_DATA_COLUMNS)

    df = df.assign(period=df['date'].dt.to_period('M'))
    pivot = pd.Period(yearmonth, freq='M') if yearmonth else df['period'].max()
    periods = pd.period_range(end=pivot, periods=max(int(negative_span), 1), freq='M')

    series = df.groupby('period')['amount'].sum().reindex(periods, fill_value=0.0)
    vals = series.to_numpy(dtype=float)
    m = len(vals)

    # LOESS smoothing
    if m < 3:
        loess_vals = vals.copy()
    else:
        # the local fit needs at least three neighbours
        frac = min(max(loess_fraction, 3.0 / m), 1.0)
        x = pd.RangeIndex(stop=m)
        loess_vals = lowess(vals, x, frac=frac, return_sorted=False)

    return pd.DataFrame({
        'month': periods.to_timestamp(),
        'monthly_total': vals,
        'loess': loess_vals,
    })[TREND_DATA_COLUMNS]


def month_key(value: datetime.date) -> str:
    """Return the 'YYYY-MM' key of a date."""
    return f'{value.year:04d}-{value.month:02d}'
