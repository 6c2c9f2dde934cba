# judging/__init__.py
# Judging & scoring engine: judge registry, score recorder, aggregation, ranking

from judging import events, rewards


def init_app(app):
    events.init_app(app)
    rewards.init_app(app)
