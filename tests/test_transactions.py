from datetime import date
from decimal import Decimal

from sqlalchemy.exc import SQLAlchemyError

from finance_tracker.models import TransactionType
from finance_tracker.repository import TransactionFilter
from finance_tracker.viewmodels import TransactionInput

INCOME = TransactionType.INCOME
EXPENSE = TransactionType.EXPENSE


def test_totals_are_zero_without_transactions(services, make_user):
    user = make_user()
    assert services.transactions.get_total_income(user) == Decimal('0')
    assert services.transactions.get_total_expenses(user) == Decimal('0')
    assert services.transactions.get_expenses_by_category(user) == []


def test_totals_are_zero_for_empty_window(services, make_user, add_transaction):
    user = make_user()
    add_transaction(user, 50, on=date(2024, 2, 10))
    add_transaction(user, 900, 'Salary', INCOME, on=date(2024, 2, 10))

    # end before start
    assert services.transactions.get_total_income(user, date(2024, 2, 11), date(2024, 2, 9)) == 0
    assert services.transactions.get_total_expenses(user, date(2024, 2, 11), date(2024, 2, 9)) == 0
    # window with no rows in it
    assert services.transactions.get_total_income(user, date(2024, 3, 1), date(2024, 3, 1)) == 0
    assert services.transactions.get_total_expenses(user, date(2024, 3, 1), date(2024, 3, 1)) == 0


def test_totals_respect_type_and_inclusive_bounds(services, make_user, add_transaction):
    user = make_user()
    add_transaction(user, '10.10', on=date(2024, 1, 31))
    add_transaction(user, '20.20', on=date(2024, 2, 1))
    add_transaction(user, '30.30', on=date(2024, 2, 29))
    add_transaction(user, '1000', 'Salary', INCOME, on=date(2024, 2, 15))

    feb = (date(2024, 2, 1), date(2024, 2, 29))
    assert services.transactions.get_total_expenses(user, *feb) == Decimal('50.50')
    assert services.transactions.get_total_income(user, *feb) == Decimal('1000')
    assert services.transactions.get_total_expenses(user) == Decimal('60.60')
    assert services.transactions.get_total_expenses(user, start_date=date(2024, 2, 2)) == Decimal('30.30')


def test_totals_only_count_the_requesting_user(services, make_user, add_transaction):
    alice = make_user('alice')
    bob = make_user('bob')
    add_transaction(alice, 10)
    add_transaction(bob, 99)
    assert services.transactions.get_total_expenses(alice) == Decimal('10')


def test_expenses_by_category_groups_and_ranks(services, make_user, add_transaction):
    user = make_user()
    add_transaction(user, 30, 'Food & Dining')
    add_transaction(user, 20, 'Food & Dining')
    add_transaction(user, 150, 'Rent')
    add_transaction(user, 50, 'Shopping')
    add_transaction(user, 5000, 'Salary', INCOME)

    summaries = services.transactions.get_expenses_by_category(user)

    assert [s.category_name for s in summaries] == ['Rent', 'Food & Dining', 'Shopping']
    rent, food, shopping = summaries
    assert rent.amount == Decimal('150')
    assert rent.percentage == Decimal('60')
    assert food.transaction_count == 2
    assert food.amount == Decimal('50')
    assert food.percentage == Decimal('20')
    assert shopping.color_code == '#dc3545'


def test_category_breakdown_reconstructs_total(services, make_user, add_transaction):
    user = make_user()
    for amount, category in [('0.10', 'Food & Dining'), ('0.20', 'Food & Dining'),
                             ('33.33', 'Rent'), ('19.99', 'Healthcare'), ('0.01', 'Rent')]:
        add_transaction(user, amount, category)

    summaries = services.transactions.get_expenses_by_category(user)
    total = services.transactions.get_total_expenses(user)
    assert sum(s.amount for s in summaries) == total == Decimal('53.63')


def test_breakdown_respects_date_window(services, make_user, add_transaction):
    user = make_user()
    add_transaction(user, 40, 'Rent', on=date(2024, 1, 15))
    add_transaction(user, 10, 'Shopping', on=date(2024, 2, 15))

    summaries = services.transactions.get_expenses_by_category(
        user, date(2024, 2, 1), date(2024, 2, 29))
    assert [(s.category_name, s.amount, s.percentage) for s in summaries] == [
        ('Shopping', Decimal('10'), Decimal('100'))]


def test_type_is_not_checked_against_category(services, make_user, add_transaction):
    user = make_user()
    # an income-only category used for an expense is accepted
    add_transaction(user, 25, 'Salary', EXPENSE)
    assert services.transactions.get_total_expenses(user) == Decimal('25')


def test_listing_is_newest_first(services, make_user, add_transaction):
    user = make_user()
    add_transaction(user, 1, on=date(2024, 1, 1), description='old')
    add_transaction(user, 2, on=date(2024, 3, 1), description='new')
    add_transaction(user, 3, on=date(2024, 2, 1), description='mid')

    descriptions = [t.description for t in services.transactions.get_user_transactions(user)]
    assert descriptions == ['new', 'mid', 'old']


def test_recent_transactions_are_limited(services, make_user, add_transaction):
    user = make_user()
    for day in range(1, 13):
        add_transaction(user, day, on=date(2024, 2, day))

    recent = services.transactions.get_recent_transactions(user, 10)
    assert len(recent) == 10
    assert recent[0].date == date(2024, 2, 12)
    assert recent[-1].date == date(2024, 2, 3)


def test_search_combines_filters(services, make_user, add_transaction, category_id):
    user = make_user()
    add_transaction(user, 10, 'Rent', on=date(2024, 2, 1))
    add_transaction(user, 20, 'Rent', on=date(2024, 3, 1))
    add_transaction(user, 30, 'Shopping', on=date(2024, 2, 2))
    add_transaction(user, 40, 'Salary', INCOME, on=date(2024, 2, 3))

    found = services.transactions.search(user, TransactionFilter(
        start_date=date(2024, 2, 1), end_date=date(2024, 2, 29),
        category_id=category_id('Rent'), type=EXPENSE))
    assert [t.amount for t in found] == [Decimal('10')]

    incomes = services.transactions.search(user, TransactionFilter(type=INCOME))
    assert [t.amount for t in incomes] == [Decimal('40')]

    by_category = services.transactions.get_transactions_by_category(user, category_id('Rent'))
    assert [t.date for t in by_category] == [date(2024, 3, 1), date(2024, 2, 1)]

    in_range = services.transactions.get_transactions_by_date_range(
        user, date(2024, 2, 2), date(2024, 2, 3))
    assert len(in_range) == 2


def test_other_users_transactions_are_absent(services, make_user, add_transaction, category_id):
    alice = make_user('alice')
    bob = make_user('bob')
    add_transaction(alice, 10)
    tx_id = services.transactions.get_user_transactions(alice)[0].id

    assert services.transactions.get_by_id(tx_id, bob) is None
    data = TransactionInput('hijack', Decimal('1'), category_id('Rent'), EXPENSE, date(2024, 2, 1))
    assert services.transactions.update_transaction(tx_id, data, bob) is False
    assert services.transactions.delete_transaction(tx_id, bob) is False
    assert services.transactions.get_by_id(tx_id, alice).description == 'test'


def test_update_and_delete(services, make_user, add_transaction, category_id):
    user = make_user()
    add_transaction(user, 10)
    tx_id = services.transactions.get_user_transactions(user)[0].id

    data = TransactionInput('groceries', Decimal('12.50'), category_id('Food & Dining'),
                            EXPENSE, date(2024, 2, 20))
    assert services.transactions.update_transaction(tx_id, data, user)
    updated = services.transactions.get_by_id(tx_id, user)
    assert (updated.description, updated.amount, updated.date) == (
        'groceries', Decimal('12.50'), date(2024, 2, 20))

    assert services.transactions.delete_transaction(tx_id, user)
    assert services.transactions.get_by_id(tx_id, user) is None
    assert services.transactions.delete_transaction(tx_id, user) is False


def test_store_failure_is_reported_as_false(services, make_user, category_id, monkeypatch):
    user = make_user()

    def broken_complete():
        raise SQLAlchemyError('disk full')

    monkeypatch.setattr(services.uow, 'complete', broken_complete)
    data = TransactionInput('x', Decimal('1'), category_id('Rent'), EXPENSE, date(2024, 2, 1))
    assert services.transactions.create_transaction(data, user) is False
    monkeypatch.undo()
    assert services.transactions.get_user_transactions(user) == []


def test_unknown_category_is_rejected(services, make_user, add_transaction, category_id):
    user = make_user()
    add_transaction(user, 10, 'Rent')
    tx_id = services.transactions.get_user_transactions(user)[0].id

    bogus = TransactionInput('ghost', Decimal('5'), 9999, EXPENSE, date(2024, 2, 10))
    assert services.transactions.create_transaction(bogus, user) is False
    assert services.transactions.update_transaction(tx_id, bogus, user) is False

    assert services.transactions.get_by_id(tx_id, user).category_id == category_id('Rent')
    summaries = services.transactions.get_expenses_by_category(user)
    assert sum(s.amount for s in summaries) == services.transactions.get_total_expenses(user) \
        == Decimal('10')
