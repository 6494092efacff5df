"""Chart and report shaping.

Everything here is a projection of rows the services already returned;
totals are turned into plain floats rounded to cents for JSON.
"""
from datetime import date, datetime

import pandas as pd

from .models import TransactionType


def category_chart(summaries):
    """Labels, amounts and colors for the category doughnut chart."""
    return {
        'labels': [s.category_name for s in summaries],
        'data': [float(s.amount) for s in summaries],
        'colors': [s.color_code for s in summaries],
    }


def resolve_period(rng='month', start=None, end=None, today=None):
    """Date window for a report request.

    Explicit ``start``/``end`` (YYYY-MM-DD) win; otherwise ``year`` means
    1 January to today and anything else the current month to date.
    """
    if start and end:
        return (datetime.strptime(start, '%Y-%m-%d').date(),
                datetime.strptime(end, '%Y-%m-%d').date())
    today = today or date.today()
    if rng == 'year':
        return today.replace(month=1, day=1), today
    return today.replace(day=1), today


def _frame(transactions):
    rows = [{'category': t.category.name,
             'type': t.type.value,
             'amount': float(t.amount),
             'date': t.date} for t in transactions]
    return pd.DataFrame(rows, columns=['category', 'type', 'amount', 'date'])


def summarize_expenses(transactions, start_date, end_date):
    """Expense totals per category for the report page, largest first."""
    df = _frame(t for t in transactions if t.type is TransactionType.EXPENSE)
    if df.empty:
        return {'labels': [], 'values': [], 'total': 0,
                'start': start_date.isoformat(), 'end': end_date.isoformat()}

    summary = df.groupby('category')['amount'].sum().sort_values(ascending=False)
    labels = summary.index.tolist()
    values = [round(float(v), 2) for v in summary.values.tolist()]
    total = round(float(df['amount'].sum()), 2)
    return {'labels': labels, 'values': values, 'total': total,
            'start': start_date.isoformat(), 'end': end_date.isoformat()}


def monthly_trend(transactions):
    """Income and expense totals per YYYY-MM, oldest month first."""
    df = _frame(transactions)
    if df.empty:
        return {'months': [], 'income': [], 'expenses': []}

    df['month'] = pd.to_datetime(df['date']).dt.strftime('%Y-%m')
    pivot = (df.pivot_table(index='month', columns='type', values='amount',
                            aggfunc='sum', fill_value=0)
             .reindex(columns=[TransactionType.INCOME.value, TransactionType.EXPENSE.value],
                      fill_value=0)
             .sort_index())
    return {
        'months': pivot.index.tolist(),
        'income': [round(float(v), 2) for v in pivot[TransactionType.INCOME.value]],
        'expenses': [round(float(v), 2) for v in pivot[TransactionType.EXPENSE.value]],
    }
