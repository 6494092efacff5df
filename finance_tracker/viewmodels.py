"""Read models handed to templates and JSON endpoints, plus the validated
inputs the services accept."""
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import List, Optional

from .models import TransactionType

ZERO = Decimal('0')


# -------- Inputs --------
@dataclass
class RegistrationInput:
    username: str
    email: str
    password: str


@dataclass
class TransactionInput:
    description: str
    amount: Decimal
    category_id: int
    type: TransactionType
    date: date


@dataclass
class BudgetInput:
    category_id: int
    limit_amount: Decimal
    month: int
    year: int


# -------- Derived summaries --------
@dataclass
class CategorySummary:
    category_id: int
    category_name: str
    amount: Decimal
    color_code: Optional[str]
    transaction_count: int
    percentage: Decimal


@dataclass
class BudgetProgress:
    category_name: str
    budget_limit: Decimal
    amount_spent: Decimal
    remaining: Decimal
    percentage_used: Decimal
    color_code: Optional[str]
    is_over_budget: bool


@dataclass
class BudgetItem(BudgetProgress):
    budget_id: int = 0
    category_icon: Optional[str] = None
    month: int = 0
    year: int = 0


@dataclass
class BudgetList:
    month: int
    year: int
    budgets: List[BudgetItem] = field(default_factory=list)
    total_budget: Decimal = ZERO
    total_spent: Decimal = ZERO


@dataclass
class DashboardSnapshot:
    total_balance: Decimal = ZERO
    monthly_income: Decimal = ZERO
    monthly_expenses: Decimal = ZERO
    monthly_savings: Decimal = ZERO
    recent_transactions: list = field(default_factory=list)
    expenses_by_category: List[CategorySummary] = field(default_factory=list)
    budget_progress: List[BudgetProgress] = field(default_factory=list)


@dataclass
class TransactionHistory:
    transactions: list
    categories: list
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    category_id: Optional[int] = None
    type: Optional[TransactionType] = None
