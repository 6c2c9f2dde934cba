# app.py
# Flask application factory for the judging & scoring service

import logging

from flask import Flask, jsonify
from sqlalchemy.exc import OperationalError

from config import Config
from errors import JudgingError, StoreUnavailable
from extensions import db, migrate

# Models must be imported so that Flask-Migrate sees every table
from models import User, UserRole, Team, TeamMember, Competition, Criterion, Submission, Judge, Score, AuditLog, XpEvent

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level):
    logger = logging.getLogger('judging')
    logger.setLevel(level.upper())
    # Leave output to the host's handlers when it has configured logging
    if not logger.handlers and not logging.getLogger().handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt="%H:%M:%S"))
        logger.addHandler(handler)


def register_error_handlers(app):
    @app.errorhandler(JudgingError)
    def handle_judging_error(error):
        return jsonify({'error': error.to_dict()}), error.status_code

    @app.errorhandler(OperationalError)
    def handle_store_unavailable(error):
        db.session.rollback()
        app.logger.error("Data store unavailable: %s", error)
        wrapped = StoreUnavailable()
        return jsonify({'error': wrapped.to_dict()}), wrapped.status_code


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    configure_logging(app.config['LOG_LEVEL'])

    db.init_app(app)
    migrate.init_app(app, db)

    import judging
    judging.init_app(app)

    from routes.judging import judging_bp
    app.register_blueprint(judging_bp)

    register_error_handlers(app)

    from cli import register_commands
    register_commands(app)

    return app
