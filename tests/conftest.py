from datetime import datetime
from types import SimpleNamespace

import pytest

from app import create_app
from config import TestingConfig
from extensions import db
from judging import registry
from models import Competition, Criterion, Role, Submission, Team, TeamMember, User


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def make_user(name, *roles):
    user = User(name=name, handle=name.lower())
    user.grant(*roles)
    db.session.add(user)
    db.session.commit()
    return user


def make_submission(competition, team, title, status='finalized', created_at=None, **extra):
    submission = Submission(
        competition_id=competition.id,
        team_id=team.id,
        title=title,
        status=status,
        created_at=created_at or datetime(2026, 3, 1, 12, 0),
        **extra,
    )
    db.session.add(submission)
    db.session.commit()
    return submission


@pytest.fixture
def hackathon(app):
    """A competition in judging with two judges, two teams and their submissions.

    Criteria: A (max 10, weight 0.6), B (max 20, weight 0.4), C (max 5, weight 0.5).
    Jon judges and is not on any team; Jade judges and is a member of team Red.
    """
    organizer = make_user('Olga', Role.ORGANIZER)
    jon = make_user('Jon', Role.JUDGE)
    jade = make_user('Jade', Role.JUDGE)
    alice = make_user('Alice', Role.PARTICIPANT)
    bob = make_user('Bob', Role.PARTICIPANT)

    competition = Competition(name='Spring Hack', status='judging')
    crit_a = Criterion(name='Innovation', max_score=10, weight=0.6, order=1)
    crit_b = Criterion(name='Execution', max_score=20, weight=0.4, order=2)
    crit_c = Criterion(name='Design', max_score=5, weight=0.5, order=3)
    competition.criteria = [crit_a, crit_b, crit_c]

    red = Team(name='Red')
    red.members = [TeamMember(user_id=alice.id), TeamMember(user_id=jade.id)]
    blue = Team(name='Blue')
    blue.members = [TeamMember(user_id=bob.id)]
    db.session.add_all([competition, red, blue])
    db.session.commit()

    red_entry = make_submission(competition, red, 'Red Rover', created_at=datetime(2026, 3, 1, 10, 0))
    blue_entry = make_submission(competition, blue, 'Blue Sky', created_at=datetime(2026, 3, 1, 11, 0))

    registry.assign_judge(competition.id, jon.id, actor_id=organizer.id)
    registry.assign_judge(competition.id, jade.id, actor_id=organizer.id)

    return SimpleNamespace(
        competition=competition,
        a=crit_a, b=crit_b, c=crit_c,
        organizer=organizer, jon=jon, jade=jade, alice=alice, bob=bob,
        red=red, blue=blue,
        red_entry=red_entry, blue_entry=blue_entry,
    )


def login(client, user):
    with client.session_transaction() as sess:
        sess['user_id'] = user.id
