# judging/scoring.py
# Score create/update/delete: each write commits together with its recomputed aggregate

import logging
import math
import numbers

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import joinedload

from errors import (
    AlreadyScored,
    CompetitionClosed,
    ConflictOfInterest,
    InvalidPayload,
    NotAJudge,
    NotFinalized,
    NotFoundError,
    NotScoreOwner,
    OutOfRange,
    UnknownCriterion,
)
from extensions import db, utcnow
from judging import aggregation
from judging.events import emit, record_audit, score_recorded, submission_scored
from models import Competition, Criterion, Judge, Score, Submission, TeamMember

logger = logging.getLogger(__name__)


def _lock_submission(submission_id):
    # Serializes concurrent writers on the same submission where the backend supports row locks
    return (
        Submission.query
        .filter_by(id=submission_id)
        .with_for_update()
        .one_or_none()
    )


def _check_value(value, criterion):
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidPayload('Score value must be a number', value=value)
    value = float(value)
    if not math.isfinite(value):
        raise InvalidPayload('Score value must be a finite number')
    if value < 0 or value > criterion.max_score:
        raise OutOfRange(
            f'Score must be between 0 and {criterion.max_score:g} for "{criterion.name}"',
            value=value,
            max_score=criterion.max_score,
        )
    return value


def _check_open(competition):
    if competition.is_closed:
        raise CompetitionClosed(competition_id=competition.id)


def _is_team_member(user_id, team_id):
    return db.session.query(TeamMember.id).filter_by(team_id=team_id, user_id=user_id).first() is not None


def _find_existing_score(submission_id, judge_id, criterion_id):
    return Score.query.filter_by(
        submission_id=submission_id, judge_id=judge_id, criterion_id=criterion_id
    ).first()


def on_score_changed(submission_id):
    """Hook run inside every score mutation before its commit."""
    return aggregation.recompute(submission_id)


def _notify(score, submission, action, actor_id):
    record_audit(
        action, 'SCORE', score.id,
        actor_id=actor_id,
        details={
            'submission_id': submission.id,
            'criterion_id': score.criterion_id,
            'value': score.value,
        },
    )
    emit(submission_scored, submission.id, submission=submission, competition_id=submission.competition_id)


def submit_score(submission_id, user_id, criterion_id, value, feedback=None):
    try:
        submission = _lock_submission(submission_id)
        if submission is None:
            raise NotFoundError('Submission not found', submission_id=submission_id)
        if not submission.is_finalized:
            raise NotFinalized(submission_id=submission_id, status=submission.status)

        competition = db.session.get(Competition, submission.competition_id)
        _check_open(competition)

        criterion = Criterion.query.filter_by(id=criterion_id, competition_id=competition.id).first()
        if criterion is None:
            raise UnknownCriterion(criterion_id=criterion_id, competition_id=competition.id)

        value = _check_value(value, criterion)

        judge = (
            Judge.query
            .filter_by(competition_id=competition.id, user_id=user_id)
            .with_for_update()
            .first()
        )
        if judge is None:
            raise NotAJudge(competition_id=competition.id)

        if _is_team_member(user_id, submission.team_id):
            raise ConflictOfInterest(submission_id=submission_id)

        if _find_existing_score(submission_id, judge.id, criterion.id) is not None:
            raise AlreadyScored(submission_id=submission_id, criterion_id=criterion.id)

        score = Score(
            submission_id=submission_id,
            judge_id=judge.id,
            criterion_id=criterion.id,
            value=value,
            feedback=feedback,
        )
        db.session.add(score)
        try:
            db.session.flush()
        except IntegrityError:
            # Lost the race on (submission, judge, criterion)
            db.session.rollback()
            raise AlreadyScored(submission_id=submission_id, criterion_id=criterion.id)

        on_score_changed(submission_id)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    logger.info(
        "Judge %s scored submission %s on criterion %s: %s",
        judge.id, submission_id, criterion.id, value,
    )
    _notify(score, submission, 'SCORE_CREATE', user_id)
    emit(score_recorded, score.id, score=score, submission=submission)
    return score


def update_score(score_id, user_id, value=None, feedback=None):
    try:
        score = db.session.get(Score, score_id, options=[joinedload(Score.judge), joinedload(Score.criterion)])
        if score is None:
            raise NotFoundError('Score not found', score_id=score_id)
        if score.judge.user_id != user_id:
            raise NotScoreOwner(score_id=score_id)
        if value is None and feedback is None:
            raise InvalidPayload('Nothing to update: provide "value" or "feedback"', score_id=score_id)

        submission = _lock_submission(score.submission_id)
        _check_open(db.session.get(Competition, submission.competition_id))

        if value is not None:
            score.value = _check_value(value, score.criterion)
        if feedback is not None:
            score.feedback = feedback
        score.updated_at = utcnow()

        on_score_changed(submission.id)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    logger.info("Judge %s updated score %s", score.judge_id, score_id)
    _notify(score, submission, 'SCORE_UPDATE', user_id)
    return score


def delete_score(score_id, user_id):
    try:
        score = db.session.get(Score, score_id, options=[joinedload(Score.judge)])
        if score is None:
            raise NotFoundError('Score not found', score_id=score_id)
        if score.judge.user_id != user_id:
            raise NotScoreOwner(score_id=score_id)

        submission = _lock_submission(score.submission_id)
        _check_open(db.session.get(Competition, submission.competition_id))

        judge_id = score.judge_id
        db.session.delete(score)
        on_score_changed(submission.id)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    logger.info("Judge %s deleted score %s", judge_id, score_id)
    record_audit(
        'SCORE_DELETE', 'SCORE', score_id,
        actor_id=user_id,
        details={'submission_id': submission.id},
    )
    emit(submission_scored, submission.id, submission=submission, competition_id=submission.competition_id)


def list_scores(submission_id):
    if db.session.get(Submission, submission_id) is None:
        raise NotFoundError('Submission not found', submission_id=submission_id)

    return (
        Score.query
        .join(Criterion, Score.criterion_id == Criterion.id)
        .options(joinedload(Score.criterion), joinedload(Score.judge).joinedload(Judge.user))
        .filter(Score.submission_id == submission_id)
        .order_by(Criterion.order, Score.created_at, Score.id)
        .all()
    )
