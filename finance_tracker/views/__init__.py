

from .auth import bp as auth_bp
from .budgets import bp as budgets_bp
from .dashboard import bp as dashboard_bp
from .transactions import bp as transactions_bp


def register_blueprints(app):
    app.register_blueprint(auth_bp)
    app.register_blueprint(dashboard_bp)
    app.register_blueprint(transactions_bp)
    app.register_blueprint(budgets_bp)
