"""Business logic over the unit of work.

Every service method takes the acting user's id as an argument; nothing
here reads the login session.
"""
from flask import current_app, g

from ..extensions import db
from ..repository import UnitOfWork
from .auth import AuthService
from .budgets import BudgetService
from .dashboard import DashboardService
from .transactions import TransactionService


class Services:
    def __init__(self, session, password_scheme='sha256', recent_count=10):
        self.uow = UnitOfWork(session)
        self.auth = AuthService(self.uow, password_scheme)
        self.transactions = TransactionService(self.uow)
        self.budgets = BudgetService(self.uow, self.transactions)
        self.dashboard = DashboardService(self.uow, self.transactions, self.budgets,
                                          recent_count=recent_count)


def get_services():
    """Services bound to the current request's database session."""
    if 'services' not in g:
        g.services = Services(
            db.session,
            password_scheme=current_app.config['PASSWORD_HASH_SCHEME'],
            recent_count=current_app.config['RECENT_TRANSACTION_COUNT'],
        )
    return g.services


__all__ = ['AuthService', 'BudgetService', 'DashboardService', 'TransactionService',
           'Services', 'get_services']
