import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import joinedload

from errors import AlreadyAssigned, HasRecordedScores, InvalidRole, NotFoundError
from extensions import db
from judging.events import record_audit
from models import Competition, Judge, Score, Submission, User, is_judge_eligible

logger = logging.getLogger(__name__)


def _get_competition(competition_id):
    competition = db.session.get(Competition, competition_id)
    if competition is None:
        raise NotFoundError('Competition not found', competition_id=competition_id)
    return competition


def _has_scores(judge_id):
    return db.session.query(Score.id).filter(Score.judge_id == judge_id).first() is not None


def assign_judge(competition_id, user_id, actor_id=None):
    """Make ``user_id`` a judge of the competition."""
    _get_competition(competition_id)

    user = db.session.get(User, user_id)
    if user is None:
        raise NotFoundError('User not found', user_id=user_id)

    if not is_judge_eligible(user.roles):
        raise InvalidRole(user_id=user_id)

    existing = Judge.query.filter_by(competition_id=competition_id, user_id=user_id).first()
    if existing:
        raise AlreadyAssigned(competition_id=competition_id, user_id=user_id)

    judge = Judge(competition_id=competition_id, user_id=user_id)
    db.session.add(judge)
    try:
        db.session.commit()
    except IntegrityError:
        # A concurrent assignment won the unique constraint
        db.session.rollback()
        raise AlreadyAssigned(competition_id=competition_id, user_id=user_id)

    logger.info("Assigned user %s as judge of competition %s", user_id, competition_id)
    record_audit(
        'JUDGE_ASSIGN', 'JUDGE', judge.id,
        actor_id=actor_id,
        details={'competition_id': competition_id, 'judge_user_id': user_id},
    )
    return judge


def remove_judge(competition_id, user_id, actor_id=None):
    judge = (
        Judge.query
        .filter_by(competition_id=competition_id, user_id=user_id)
        .with_for_update()
        .first()
    )
    if judge is None:
        raise NotFoundError('Judge assignment not found', competition_id=competition_id, user_id=user_id)

    if _has_scores(judge.id):
        db.session.rollback()
        raise HasRecordedScores(competition_id=competition_id, user_id=user_id)

    judge_id = judge.id
    db.session.delete(judge)
    try:
        db.session.commit()
    except IntegrityError:
        # A score landed between the check and the delete; the FK refused the delete
        db.session.rollback()
        raise HasRecordedScores(competition_id=competition_id, user_id=user_id)

    logger.info("Removed judge %s from competition %s", user_id, competition_id)
    record_audit(
        'JUDGE_REMOVE', 'JUDGE', judge_id,
        actor_id=actor_id,
        details={'competition_id': competition_id, 'judge_user_id': user_id},
    )


def list_judges(competition_id):
    """Return ``(judge, score_count)`` pairs for a competition."""
    _get_competition(competition_id)

    score_counts = (
        db.session.query(Score.judge_id, func.count(Score.id))
        .join(Judge, Score.judge_id == Judge.id)
        .filter(Judge.competition_id == competition_id)
        .group_by(Score.judge_id)
        .all()
    )
    counts = dict(score_counts)

    judges = (
        Judge.query
        .options(joinedload(Judge.user))
        .filter_by(competition_id=competition_id)
        .order_by(Judge.assigned_at, Judge.id)
        .all()
    )
    return [(judge, counts.get(judge.id, 0)) for judge in judges]


def list_assignments(user_id, competition_id=None):
    """Competitions the user judges, with their scoreable submissions."""
    query = Judge.query.options(joinedload(Judge.competition)).filter_by(user_id=user_id)
    if competition_id is not None:
        query = query.filter_by(competition_id=competition_id)

    assignments = []
    for judge in query.order_by(Judge.competition_id).all():
        competition = judge.competition
        submissions = (
            Submission.query
            .filter_by(competition_id=competition.id, status='finalized')
            .order_by(Submission.created_at, Submission.id)
            .all()
        )
        assignments.append({
            'judge_id': judge.id,
            'competition': competition.to_dict(),
            'submissions': [s.to_dict() for s in submissions],
        })
    return assignments
