import logging
from datetime import datetime

from .budgets import month_bounds
from ..viewmodels import DashboardSnapshot

logger = logging.getLogger(__name__)


class DashboardService:
    """Builds the dashboard snapshot for one user.

    Every part is computed against the same ``now`` and read fresh from the
    database. A part that fails is logged and left at its zero/empty default
    so the dashboard always renders.
    """

    def __init__(self, uow, transaction_service, budget_service, recent_count=10):
        self.uow = uow
        self.transactions = transaction_service
        self.budgets = budget_service
        self.recent_count = recent_count

    def _safe(self, label, func, default):
        try:
            return func()
        except Exception:
            logger.exception('Dashboard part %r failed', label)
            self.uow.rollback()
            return default

    def get_dashboard(self, user_id, now=None):
        now = now or datetime.now()
        month_start, month_end = month_bounds(now.year, now.month)
        snapshot = DashboardSnapshot()

        snapshot.monthly_income = self._safe(
            'monthly income',
            lambda: self.transactions.get_total_income(user_id, month_start, month_end),
            snapshot.monthly_income)
        snapshot.monthly_expenses = self._safe(
            'monthly expenses',
            lambda: self.transactions.get_total_expenses(user_id, month_start, month_end),
            snapshot.monthly_expenses)
        snapshot.monthly_savings = snapshot.monthly_income - snapshot.monthly_expenses

        snapshot.total_balance = self._safe(
            'total balance',
            lambda: (self.transactions.get_total_income(user_id)
                     - self.transactions.get_total_expenses(user_id)),
            snapshot.total_balance)
        snapshot.recent_transactions = self._safe(
            'recent transactions',
            lambda: list(self.transactions.get_recent_transactions(user_id, self.recent_count)),
            [])
        snapshot.expenses_by_category = self._safe(
            'expenses by category',
            lambda: self.transactions.get_expenses_by_category(user_id, month_start, month_end),
            [])
        snapshot.budget_progress = self._safe(
            'budget progress',
            lambda: self.budgets.get_budget_progress(user_id, now.month, now.year),
            [])
        return snapshot
