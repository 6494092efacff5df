"""Data access for the finance entities.

Repositories wrap a SQLAlchemy session and only expose equality lookups and
a fixed set of named transaction filters. Related categories are loaded
eagerly so callers always receive fully populated rows.
"""
from dataclasses import dataclass
from datetime import date
from typing import Optional

from sqlalchemy import func, or_, select
from sqlalchemy.orm import joinedload

from .models import Budget, Category, Transaction, TransactionType, User


@dataclass
class TransactionFilter:
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    category_id: Optional[int] = None
    type: Optional[TransactionType] = None


class Repository:
    model = None

    def __init__(self, session, model=None):
        self.session = session
        if model is not None:
            self.model = model

    def get_by_id(self, id):
        return self.session.get(self.model, id)

    def get_all(self):
        return self.session.scalars(select(self.model).order_by(self.model.id)).all()

    def find_by(self, **criteria):
        stmt = select(self.model).filter_by(**criteria).order_by(self.model.id)
        return self.session.scalars(stmt).all()

    def first_or_none(self, **criteria):
        stmt = select(self.model).filter_by(**criteria).limit(1)
        return self.session.scalars(stmt).first()

    def add(self, entity):
        self.session.add(entity)

    def add_all(self, entities):
        self.session.add_all(entities)

    def update(self, entity):
        # Loaded entities are tracked by the session, this only re-attaches
        # detached ones.
        self.session.add(entity)

    def remove(self, entity):
        self.session.delete(entity)

    def remove_all(self, entities):
        for entity in entities:
            self.session.delete(entity)

    def count(self, **criteria):
        stmt = select(func.count()).select_from(self.model).filter_by(**criteria)
        return self.session.scalar(stmt)

    def exists(self, **criteria):
        return self.first_or_none(**criteria) is not None


class UserRepository(Repository):
    model = User

    def find_by_username_or_email(self, username, email):
        stmt = select(User).where(or_(User.username == username, User.email == email)).limit(1)
        return self.session.scalars(stmt).first()


class TransactionRepository(Repository):
    model = Transaction

    def _filtered(self, stmt, user_id, filters):
        stmt = stmt.where(Transaction.user_id == user_id)
        if filters is None:
            return stmt
        if filters.start_date is not None:
            stmt = stmt.where(Transaction.date >= filters.start_date)
        if filters.end_date is not None:
            stmt = stmt.where(Transaction.date <= filters.end_date)
        if filters.category_id is not None:
            stmt = stmt.where(Transaction.category_id == filters.category_id)
        if filters.type is not None:
            stmt = stmt.where(Transaction.type == filters.type)
        return stmt

    def query(self, user_id, filters=None, newest_first=True, limit=None):
        stmt = self._filtered(
            select(Transaction).options(joinedload(Transaction.category)),
            user_id, filters,
        )
        if newest_first:
            stmt = stmt.order_by(Transaction.date.desc(), Transaction.id.desc())
        else:
            stmt = stmt.order_by(Transaction.date, Transaction.id)
        if limit is not None:
            stmt = stmt.limit(limit)
        return self.session.scalars(stmt).all()

    def recent(self, user_id, limit):
        return self.query(user_id, limit=limit)

    def total(self, user_id, filters=None):
        stmt = self._filtered(select(func.sum(Transaction.amount)), user_id, filters)
        return self.session.scalar(stmt)

    def totals_by_category(self, user_id, filters=None):
        """Rows of (category, summed amount, transaction count) for matching
        transactions, one per category."""
        stmt = self._filtered(
            select(Category,
                   func.sum(Transaction.amount).label('amount'),
                   func.count(Transaction.id).label('transaction_count'))
            .select_from(Transaction)
            .join(Category, Transaction.category_id == Category.id),
            user_id, filters,
        ).group_by(Category.id)
        return self.session.execute(stmt).all()


class BudgetRepository(Repository):
    model = Budget

    def for_period(self, user_id, month=None, year=None):
        stmt = (select(Budget)
                .options(joinedload(Budget.category))
                .where(Budget.user_id == user_id))
        if month is not None:
            stmt = stmt.where(Budget.month == month)
        if year is not None:
            stmt = stmt.where(Budget.year == year)
        stmt = stmt.order_by(Budget.year, Budget.month, Budget.id)
        return self.session.scalars(stmt).all()

    def find_duplicate(self, user_id, category_id, month, year, exclude_id=None):
        stmt = select(Budget).where(
            Budget.user_id == user_id,
            Budget.category_id == category_id,
            Budget.month == month,
            Budget.year == year,
        )
        if exclude_id is not None:
            stmt = stmt.where(Budget.id != exclude_id)
        return self.session.scalars(stmt.limit(1)).first()


class UnitOfWork:
    """Groups the repositories over one session and commits them together."""

    def __init__(self, session):
        self.session = session
        self.users = UserRepository(session)
        self.categories = Repository(session, Category)
        self.transactions = TransactionRepository(session)
        self.budgets = BudgetRepository(session)

    def complete(self):
        """Commit pending changes and return how many rows they touched."""
        session = self.session
        pending = (len(session.new) + len(session.deleted)
                   + sum(1 for obj in session.dirty if session.is_modified(obj)))
        session.commit()
        return pending

    def rollback(self):
        self.session.rollback()
