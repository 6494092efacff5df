import logging

from sqlalchemy.exc import SQLAlchemyError

from .extensions import db
from .models import Category, CategoryType

logger = logging.getLogger(__name__)

# (name, description, type, color, icon)
DEFAULT_CATEGORIES = [
    # Income
    ('Salary', 'Monthly salary', CategoryType.INCOME, '#28a745', 'fa-money-bill-wave'),
    ('Freelance', 'Freelance work income', CategoryType.INCOME, '#17a2b8', 'fa-laptop-code'),
    ('Investments', 'Investment returns', CategoryType.INCOME, '#6f42c1', 'fa-chart-line'),
    ('Other Income', 'Miscellaneous income', CategoryType.INCOME, '#20c997', 'fa-plus-circle'),
    # Expenses
    ('Food & Dining', 'Groceries and restaurants', CategoryType.EXPENSE, '#fd7e14', 'fa-utensils'),
    ('Transportation', 'Car, gas, public transport', CategoryType.EXPENSE, '#007bff', 'fa-car'),
    ('Entertainment', 'Movies, games, hobbies', CategoryType.EXPENSE, '#e83e8c', 'fa-gamepad'),
    ('Shopping', 'Clothing and personal items', CategoryType.EXPENSE, '#dc3545', 'fa-shopping-bag'),
    ('Bills & Utilities', 'Electricity, water, internet', CategoryType.EXPENSE, '#ffc107',
     'fa-file-invoice-dollar'),
    ('Healthcare', 'Medical expenses', CategoryType.EXPENSE, '#6c757d', 'fa-heartbeat'),
    ('Education', 'Courses, books, learning', CategoryType.EXPENSE, '#17a2b8', 'fa-graduation-cap'),
    ('Rent', 'Monthly rent payment', CategoryType.EXPENSE, '#343a40', 'fa-home'),
    ('Insurance', 'Health, car, life insurance', CategoryType.EXPENSE, '#6610f2', 'fa-shield-alt'),
    ('Other Expenses', 'Miscellaneous expenses', CategoryType.EXPENSE, '#868e96', 'fa-ellipsis-h'),
]


def seed_categories():
    """Insert the default categories into an empty table.

    Returns the number of categories added. Errors are logged and swallowed
    so a broken seed never stops the app from starting.
    """
    try:
        if db.session.query(Category.id).first() is not None:
            return 0
        db.session.add_all([
            Category(name=name, description=description, type=type_, color_code=color, icon=icon)
            for name, description, type_, color, icon in DEFAULT_CATEGORIES
        ])
        db.session.commit()
        logger.info('Seeded %d default categories', len(DEFAULT_CATEGORIES))
        return len(DEFAULT_CATEGORIES)
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception('Category seed failed')
        return 0


def init_db():
    db.create_all()
    return seed_categories()
