"""Parsing and validation of submitted forms.

Each ``parse_*`` function returns the matching input dataclass or raises
:class:`FormError` carrying every problem found, so the view can flash them
all at once.
"""
import re
from datetime import datetime
from decimal import Decimal, InvalidOperation

from .models import TransactionType
from .viewmodels import BudgetInput, RegistrationInput, TransactionInput

MIN_AMOUNT = Decimal('0.01')
MAX_AMOUNT = Decimal('1000000')
EMAIL_RE = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')


class FormError(ValueError):
    def __init__(self, errors):
        super().__init__('; '.join(errors))
        self.errors = errors


def _text(form, name):
    value = form.get(name)
    return '' if value is None else str(value).strip()


def _amount(form, name, label, errors):
    raw = _text(form, name)
    if not raw:
        errors.append(f'{label} is required')
        return None
    try:
        value = Decimal(raw)
    except InvalidOperation:
        errors.append(f'{label} must be a number')
        return None
    if not value.is_finite() or not MIN_AMOUNT <= value <= MAX_AMOUNT:
        errors.append(f'{label} must be between 0.01 and 1,000,000')
        return None
    return value.quantize(MIN_AMOUNT)


def _int(form, name, label, errors, low=None, high=None):
    raw = _text(form, name)
    if not raw:
        errors.append(f'{label} is required')
        return None
    try:
        value = int(raw)
    except ValueError:
        errors.append(f'{label} must be a whole number')
        return None
    if (low is not None and value < low) or (high is not None and value > high):
        errors.append(f'{label} must be between {low} and {high}')
        return None
    return value


def parse_date(raw):
    return datetime.strptime(raw, '%Y-%m-%d').date()


def parse_transaction_type(raw):
    """Map 'Income'/'Expense' (any case) to TransactionType, None otherwise."""
    for member in TransactionType:
        if raw and str(raw).strip().lower() == member.value.lower():
            return member
    return None


def parse_transaction_form(form):
    errors = []
    description = _text(form, 'description')
    if not description:
        errors.append('Description is required')
    elif len(description) > 200:
        errors.append('Description cannot exceed 200 characters')

    amount = _amount(form, 'amount', 'Amount', errors)
    category_id = _int(form, 'category_id', 'Category', errors)

    type_ = parse_transaction_type(form.get('type'))
    if type_ is None:
        errors.append('Transaction type is required')

    raw_date = _text(form, 'date')
    occurred_on = None
    if not raw_date:
        errors.append('Date is required')
    else:
        try:
            occurred_on = parse_date(raw_date)
        except ValueError:
            errors.append('Date must be in YYYY-MM-DD format')

    if errors:
        raise FormError(errors)
    return TransactionInput(description=description, amount=amount, category_id=category_id,
                            type=type_, date=occurred_on)


def parse_budget_form(form):
    errors = []
    category_id = _int(form, 'category_id', 'Category', errors)
    limit_amount = _amount(form, 'limit_amount', 'Monthly limit', errors)
    month = _int(form, 'month', 'Month', errors, 1, 12)
    year = _int(form, 'year', 'Year', errors, 2000, 2100)
    if errors:
        raise FormError(errors)
    return BudgetInput(category_id=category_id, limit_amount=limit_amount, month=month, year=year)


def parse_registration_form(form):
    errors = []
    username = _text(form, 'username')
    email = _text(form, 'email')
    password = form.get('password') or ''
    confirm = form.get('confirm_password') or ''

    if not 3 <= len(username) <= 50:
        errors.append('Username must be between 3 and 50 characters')
    if not EMAIL_RE.match(email) or len(email) > 100:
        errors.append('Invalid email address')
    if len(password) < 6:
        errors.append('Password must be at least 6 characters')
    elif password != confirm:
        errors.append('Passwords do not match')

    if errors:
        raise FormError(errors)
    return RegistrationInput(username=username, email=email, password=password)
