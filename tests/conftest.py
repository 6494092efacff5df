from datetime import date
from decimal import Decimal

import pytest

from finance_tracker import create_app
from finance_tracker.config import TestingConfig
from finance_tracker.extensions import db
from finance_tracker.models import Category, TransactionType
from finance_tracker.services import Services
from finance_tracker.viewmodels import BudgetInput, RegistrationInput, TransactionInput


@pytest.fixture
def app(tmp_path):
    app = create_app(TestingConfig,
                     SQLALCHEMY_DATABASE_URI=f"sqlite:///{tmp_path / 'finance.db'}")
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def ctx(app):
    with app.app_context():
        yield
        db.session.remove()


@pytest.fixture
def services(ctx):
    return Services(db.session)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(services):
    def _make_user(username='alice', email=None, password='secret123'):
        data = RegistrationInput(username=username, email=email or f'{username}@example.com',
                                 password=password)
        assert services.auth.register(data)
        return services.auth.get_user_by_username(username).id
    return _make_user


@pytest.fixture
def category_id(ctx):
    def _category_id(name):
        return db.session.execute(db.select(Category.id).filter_by(name=name)).scalar_one()
    return _category_id


@pytest.fixture
def add_transaction(services, category_id):
    def _add(user_id, amount, category='Food & Dining', type_=TransactionType.EXPENSE,
             on=date(2024, 2, 10), description='test'):
        data = TransactionInput(description=description, amount=Decimal(str(amount)),
                                category_id=category_id(category), type=type_, date=on)
        assert services.transactions.create_transaction(data, user_id)
    return _add


@pytest.fixture
def add_budget(services, category_id):
    def _add(user_id, limit, category='Food & Dining', month=2, year=2024):
        data = BudgetInput(category_id=category_id(category), limit_amount=Decimal(str(limit)),
                           month=month, year=year)
        return services.budgets.create_budget(data, user_id)
    return _add
