import calendar
import logging
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy.exc import SQLAlchemyError

from ..models import Budget, CategoryType
from ..viewmodels import BudgetItem, BudgetList, BudgetProgress
from .transactions import percent_of

logger = logging.getLogger(__name__)

BUDGET_CATEGORY_TYPES = (CategoryType.EXPENSE, CategoryType.BOTH)


def month_bounds(year, month):
    """First and last day (inclusive) of a calendar month."""
    return date(year, month, 1), date(year, month, calendar.monthrange(year, month)[1])


class BudgetService:
    def __init__(self, uow, transaction_service):
        self.uow = uow
        self.transactions = transaction_service

    def get_by_id(self, budget_id, user_id):
        return self.uow.budgets.first_or_none(id=budget_id, user_id=user_id)

    def get_user_budgets(self, user_id, month=None, year=None):
        return self.uow.budgets.for_period(user_id, month, year)

    def _budgetable(self, category_id):
        """Only existing categories that can carry spending take a budget."""
        category = self.uow.categories.get_by_id(category_id)
        return category is not None and category.type in BUDGET_CATEGORY_TYPES

    def create_budget(self, data, user_id):
        try:
            if not self._budgetable(data.category_id):
                logger.warning('Rejected budget for category %s', data.category_id)
                return False
            if self.uow.budgets.find_duplicate(user_id, data.category_id, data.month, data.year):
                return False

            budget = Budget(
                user_id=user_id,
                category_id=data.category_id,
                limit_amount=data.limit_amount,
                month=data.month,
                year=data.year,
                created_at=datetime.now(),
            )
            self.uow.budgets.add(budget)
            self.uow.complete()
            return True
        except SQLAlchemyError:
            self.uow.rollback()
            logger.exception('Failed to create budget for user %s', user_id)
            return False

    def update_budget(self, budget_id, data, user_id):
        try:
            budget = self.get_by_id(budget_id, user_id)
            if budget is None or not self._budgetable(data.category_id):
                return False
            if self.uow.budgets.find_duplicate(user_id, data.category_id, data.month,
                                               data.year, exclude_id=budget.id):
                return False

            budget.category_id = data.category_id
            budget.limit_amount = data.limit_amount
            budget.month = data.month
            budget.year = data.year

            self.uow.budgets.update(budget)
            self.uow.complete()
            return True
        except SQLAlchemyError:
            self.uow.rollback()
            logger.exception('Failed to update budget %s', budget_id)
            return False

    def delete_budget(self, budget_id, user_id):
        try:
            budget = self.get_by_id(budget_id, user_id)
            if budget is None:
                return False

            self.uow.budgets.remove(budget)
            self.uow.complete()
            return True
        except SQLAlchemyError:
            self.uow.rollback()
            logger.exception('Failed to delete budget %s', budget_id)
            return False

    # ---------- Progress ----------
    def _measure(self, user_id, budget):
        """(limit, spent, remaining, percent used, over budget) for one budget."""
        start, end = month_bounds(budget.year, budget.month)
        spent = self.transactions.get_total_expenses(user_id, start, end, budget.category_id)
        limit = Decimal(budget.limit_amount)
        return limit, spent, limit - spent, percent_of(spent, limit), spent > limit

    def _items(self, user_id, month, year):
        items = []
        for budget in self.get_user_budgets(user_id, month, year):
            limit, spent, remaining, percent, over = self._measure(user_id, budget)
            items.append(BudgetItem(
                category_name=budget.category.name,
                budget_limit=limit,
                amount_spent=spent,
                remaining=remaining,
                percentage_used=percent,
                color_code=budget.category.color_code,
                is_over_budget=over,
                budget_id=budget.id,
                category_icon=budget.category.icon,
                month=budget.month,
                year=budget.year,
            ))
        # stable sort keeps creation order among equal percentages
        items.sort(key=lambda item: item.percentage_used, reverse=True)
        return items

    def get_budget_progress(self, user_id, month, year):
        return [
            BudgetProgress(
                category_name=item.category_name,
                budget_limit=item.budget_limit,
                amount_spent=item.amount_spent,
                remaining=item.remaining,
                percentage_used=item.percentage_used,
                color_code=item.color_code,
                is_over_budget=item.is_over_budget,
            )
            for item in self._items(user_id, month, year)
        ]

    def get_budget_list(self, user_id, month, year):
        items = self._items(user_id, month, year)
        return BudgetList(
            month=month,
            year=year,
            budgets=items,
            total_budget=sum((item.budget_limit for item in items), Decimal('0')),
            total_spent=sum((item.amount_spent for item in items), Decimal('0')),
        )
