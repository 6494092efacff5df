import enum
from datetime import date, datetime

from flask_login import UserMixin

from .extensions import db


class CategoryType(enum.Enum):
    INCOME = 'Income'
    EXPENSE = 'Expense'
    BOTH = 'Both'


class TransactionType(enum.Enum):
    INCOME = 'Income'
    EXPENSE = 'Expense'


# ==============================
# MODELS
# ==============================
class User(UserMixin, db.Model):
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(50), unique=True, nullable=False)
    email = db.Column(db.String(100), unique=True, nullable=False)
    password_hash = db.Column(db.String(200), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.now)

    transactions = db.relationship('Transaction', back_populates='user', lazy=True,
                                   cascade='all, delete-orphan')
    budgets = db.relationship('Budget', back_populates='user', lazy=True,
                              cascade='all, delete-orphan')

    def __repr__(self):
        return f'<User {self.username}>'


class Category(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(50), nullable=False)
    description = db.Column(db.String(200))
    type = db.Column(db.Enum(CategoryType), nullable=False)
    color_code = db.Column(db.String(7))  # e.g. #fd7e14, used by charts
    icon = db.Column(db.String(50))  # icon class name, e.g. fa-utensils

    def __repr__(self):
        return f'<Category {self.name}>'


class Transaction(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)
    description = db.Column(db.String(200), nullable=False)
    amount = db.Column(db.Numeric(12, 2), nullable=False)
    category_id = db.Column(db.Integer, db.ForeignKey('category.id'), nullable=False)
    type = db.Column(db.Enum(TransactionType), nullable=False)
    date = db.Column(db.Date, nullable=False, default=date.today, index=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.now)

    user = db.relationship('User', back_populates='transactions')
    category = db.relationship('Category')

    @property
    def is_income(self):
        return self.type is TransactionType.INCOME

    def __repr__(self):
        return f'<Transaction {self.id} {self.type.value} {self.amount}>'


class Budget(db.Model):
    __table_args__ = (
        db.UniqueConstraint('user_id', 'category_id', 'month', 'year',
                            name='uq_budget_user_category_period'),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)
    category_id = db.Column(db.Integer, db.ForeignKey('category.id'), nullable=False)
    limit_amount = db.Column(db.Numeric(12, 2), nullable=False)
    month = db.Column(db.Integer, nullable=False)  # 1-12
    year = db.Column(db.Integer, nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.now)

    user = db.relationship('User', back_populates='budgets')
    category = db.relationship('Category')

    def __repr__(self):
        return f'<Budget {self.category_id} {self.month}/{self.year} {self.limit_amount}>'
