import click

from .extensions import db
from .models import Budget, Category, Transaction, User
from .seed import init_db


def register_commands(app):
    @app.cli.command('initdb')
    def initdb():
        """Create the tables and seed the default categories."""
        added = init_db()
        click.echo(f'Database initialized! ({added} categories seeded)')

    @app.cli.command('inspect-db')
    def inspect_db():
        """Print users, categories, transactions and budgets."""
        click.echo('Users in DB:')
        for user in db.session.scalars(db.select(User).order_by(User.id)):
            click.echo(f'- {user.id} | {user.username} | {user.email}')

        click.echo('\nCategories in DB:')
        for category in db.session.scalars(db.select(Category).order_by(Category.id)):
            click.echo(f'- {category.id} | {category.name} | {category.type.value}')

        click.echo('\nTransactions in DB:')
        for tx in db.session.scalars(db.select(Transaction).order_by(Transaction.id)):
            click.echo(f'- {tx.id} | {tx.date} | {tx.type.value} | {tx.category.name} '
                       f'| {tx.amount} | User {tx.user_id}')

        click.echo('\nBudgets in DB:')
        for budget in db.session.scalars(db.select(Budget).order_by(Budget.id)):
            click.echo(f'- {budget.id} | {budget.month:02d}/{budget.year} | {budget.category.name} '
                       f'| {budget.limit_amount} | User {budget.user_id}')
