# judging/rewards.py
# XP for team members when their submission is scored or places in the top three

import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from extensions import db
from judging.events import rankings_updated, score_recorded
from models import TeamMember, XpEvent

logger = logging.getLogger(__name__)

XP_POINTS = {
    'RECEIVE_JUDGE_SCORE': 10,
    'WIN_1ST': 500,
    'WIN_2ND': 300,
    'WIN_3RD': 200,
}

WINNER_EVENTS = {1: 'WIN_1ST', 2: 'WIN_2ND', 3: 'WIN_3RD'}


def award_xp(user_id, event_type, ref_type, ref_id):
    """Record one award. Returns False if it was already granted."""
    exists = XpEvent.query.filter_by(
        user_id=user_id, event_type=event_type, ref_type=ref_type, ref_id=ref_id
    ).first()
    if exists:
        return False

    db.session.add(XpEvent(
        user_id=user_id,
        event_type=event_type,
        points=XP_POINTS[event_type],
        ref_type=ref_type,
        ref_id=ref_id,
    ))
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        return False
    except SQLAlchemyError:
        db.session.rollback()
        raise
    return True


def total_xp(user_id):
    return sum(e.points for e in XpEvent.query.filter_by(user_id=user_id))


def _team_member_ids(team_id):
    return [m.user_id for m in TeamMember.query.filter_by(team_id=team_id)]


def on_score_recorded(score_id, score=None, submission=None, **kwargs):
    for user_id in _team_member_ids(submission.team_id):
        award_xp(user_id, 'RECEIVE_JUDGE_SCORE', 'score', score_id)


def on_rankings_updated(competition_id, standings=(), **kwargs):
    for entry in standings:
        event_type = WINNER_EVENTS.get(entry.rank)
        if event_type is None:
            continue
        for user_id in _team_member_ids(entry.team_id):
            if award_xp(user_id, event_type, 'submission', entry.submission_id):
                logger.info("Awarded %s to user %s for submission %s", event_type, user_id, entry.submission_id)


def init_app(app):
    if not app.config.get('REWARDS_ENABLED', True):
        score_recorded.disconnect(on_score_recorded)
        rankings_updated.disconnect(on_rankings_updated)
        return
    score_recorded.connect(on_score_recorded)
    rankings_updated.connect(on_rankings_updated)
