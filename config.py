# config.py
# Flask application configuration

import os


def _env_flag(name, default):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    BASE_DIR = os.path.abspath(os.path.dirname(__file__))
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        'DATABASE_URL',
        f'sqlite:///{os.path.join(BASE_DIR, "instance", "judging.db")}',
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SECRET_KEY = os.environ.get('SECRET_KEY', 'change-me-in-production')

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # Award XP to team members when scores and winning ranks are recorded
    REWARDS_ENABLED = _env_flag('REWARDS_ENABLED', True)


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SECRET_KEY = 'testing'
    LOG_LEVEL = 'WARNING'
