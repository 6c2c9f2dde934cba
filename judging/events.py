# judging/events.py
# Post-commit side effects: audit records and blinker signals, both best-effort

import logging

from blinker import Namespace
from sqlalchemy.exc import SQLAlchemyError

from extensions import db
from models import AuditLog

logger = logging.getLogger(__name__)

_signals = Namespace()

#: sender: submission id; kwargs: submission, competition_id
submission_scored = _signals.signal('submission-scored')
#: sender: score id; kwargs: score, submission
score_recorded = _signals.signal('score-recorded')
#: sender: competition id; kwargs: standings (list of RankedSubmission)
rankings_updated = _signals.signal('rankings-updated')


def record_audit(action, entity_type, entity_id, actor_id=None, details=None):
    try:
        db.session.add(AuditLog(
            actor_id=actor_id,
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            details=details,
        ))
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Failed to write audit record %s for %s #%s", action, entity_type, entity_id)


def emit(signal, sender, **kwargs):
    for receiver in signal.receivers_for(sender):
        try:
            receiver(sender, **kwargs)
        except Exception:
            # Discard whatever the receiver left half-flushed in the shared session
            db.session.rollback()
            logger.exception("Receiver %r failed for signal %s", receiver, signal.name)


def log_submission_scored(submission_id, submission=None, competition_id=None, **kwargs):
    aggregate = submission.score_aggregate if submission is not None else None
    logger.info(
        "submission:scored competition=%s submission=%s aggregate=%s",
        competition_id, submission_id, aggregate,
    )


def log_leaderboard_update(competition_id, standings=(), **kwargs):
    logger.info("leaderboard:update competition=%s ranked=%d", competition_id, len(standings))


def init_app(app):
    submission_scored.connect(log_submission_scored)
    rankings_updated.connect(log_leaderboard_update)
