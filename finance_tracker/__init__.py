"""Personal finance tracker.

Server-rendered Flask app: users record income and expense transactions,
set monthly budgets per category and follow them on a dashboard.
"""
import logging

from flask import Flask

from .config import Config
from .extensions import db, login_manager


def create_app(config_object=Config, **overrides):
    app = Flask(__name__)
    app.config.from_object(config_object)
    app.config.update(overrides)

    logging.basicConfig(level=app.config['LOG_LEVEL'],
                        format='%(asctime)s %(levelname)s %(name)s: %(message)s')
    app.logger.setLevel(app.config['LOG_LEVEL'])

    db.init_app(app)
    login_manager.init_app(app)

    from .models import User

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    from .views import register_blueprints
    register_blueprints(app)

    from .cli import register_commands
    register_commands(app)

    if app.config['INIT_DB_ON_STARTUP']:
        from .seed import init_db
        with app.app_context():
            init_db()

    return app
