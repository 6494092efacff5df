import logging
from datetime import datetime
from decimal import Decimal

from sqlalchemy.exc import SQLAlchemyError

from ..models import Transaction, TransactionType
from ..repository import TransactionFilter
from ..viewmodels import CategorySummary

logger = logging.getLogger(__name__)

CENTS = Decimal('0.01')


def as_money(value):
    """Normalise a SUM() result to a Decimal, treating NULL as zero."""
    if value is None:
        return Decimal('0')
    return Decimal(str(value)).quantize(CENTS)


def percent_of(part, whole):
    if not whole:
        return Decimal('0')
    return part / whole * 100


class TransactionService:
    def __init__(self, uow):
        self.uow = uow

    # ---------- Lookups ----------
    def get_by_id(self, transaction_id, user_id):
        return self.uow.transactions.first_or_none(id=transaction_id, user_id=user_id)

    def get_user_transactions(self, user_id):
        return self.uow.transactions.query(user_id)

    def get_transactions_by_date_range(self, user_id, start_date, end_date):
        return self.uow.transactions.query(
            user_id, TransactionFilter(start_date=start_date, end_date=end_date))

    def get_transactions_by_category(self, user_id, category_id):
        return self.uow.transactions.query(user_id, TransactionFilter(category_id=category_id))

    def get_recent_transactions(self, user_id, count):
        return self.uow.transactions.recent(user_id, count)

    def search(self, user_id, filters):
        return self.uow.transactions.query(user_id, filters)

    # ---------- Writes ----------
    def _category_exists(self, category_id):
        return self.uow.categories.exists(id=category_id)

    def create_transaction(self, data, user_id):
        try:
            if not self._category_exists(data.category_id):
                logger.warning('Rejected transaction with unknown category %s', data.category_id)
                return False

            transaction = Transaction(
                user_id=user_id,
                description=data.description,
                amount=data.amount,
                category_id=data.category_id,
                type=data.type,
                date=data.date,
                created_at=datetime.now(),
            )
            self.uow.transactions.add(transaction)
            self.uow.complete()
            return True
        except SQLAlchemyError:
            self.uow.rollback()
            logger.exception('Failed to create transaction for user %s', user_id)
            return False

    def update_transaction(self, transaction_id, data, user_id):
        try:
            transaction = self.get_by_id(transaction_id, user_id)
            if transaction is None or not self._category_exists(data.category_id):
                return False

            transaction.description = data.description
            transaction.amount = data.amount
            transaction.category_id = data.category_id
            transaction.type = data.type
            transaction.date = data.date

            self.uow.transactions.update(transaction)
            self.uow.complete()
            return True
        except SQLAlchemyError:
            self.uow.rollback()
            logger.exception('Failed to update transaction %s', transaction_id)
            return False

    def delete_transaction(self, transaction_id, user_id):
        try:
            transaction = self.get_by_id(transaction_id, user_id)
            if transaction is None:
                return False

            self.uow.transactions.remove(transaction)
            self.uow.complete()
            return True
        except SQLAlchemyError:
            self.uow.rollback()
            logger.exception('Failed to delete transaction %s', transaction_id)
            return False

    # ---------- Aggregates ----------
    def _total(self, user_id, type_, start_date, end_date, category_id=None):
        filters = TransactionFilter(start_date=start_date, end_date=end_date,
                                    category_id=category_id, type=type_)
        return as_money(self.uow.transactions.total(user_id, filters))

    def get_total_income(self, user_id, start_date=None, end_date=None):
        return self._total(user_id, TransactionType.INCOME, start_date, end_date)

    def get_total_expenses(self, user_id, start_date=None, end_date=None, category_id=None):
        return self._total(user_id, TransactionType.EXPENSE, start_date, end_date, category_id)

    def get_expenses_by_category(self, user_id, start_date=None, end_date=None):
        filters = TransactionFilter(start_date=start_date, end_date=end_date,
                                    type=TransactionType.EXPENSE)
        rows = [(category, as_money(amount), count)
                for category, amount, count in self.uow.transactions.totals_by_category(user_id, filters)]
        # Summing the rounded group totals keeps the percentages and the
        # overall total consistent with each other.
        total = sum((amount for _, amount, _ in rows), Decimal('0'))

        summaries = [
            CategorySummary(
                category_id=category.id,
                category_name=category.name,
                amount=amount,
                color_code=category.color_code,
                transaction_count=count,
                percentage=percent_of(amount, total),
            )
            for category, amount, count in rows
        ]
        summaries.sort(key=lambda s: (-s.amount, s.category_name))
        return summaries
