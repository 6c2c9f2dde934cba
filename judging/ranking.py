# judging/ranking.py
# Dense ranking of scored, finalized submissions: 90, 90, 85 -> 1, 1, 2

import logging
from collections import namedtuple

from errors import NotFoundError
from extensions import db
from judging.events import emit, rankings_updated, record_audit
from models import Competition, Submission

logger = logging.getLogger(__name__)


RankedSubmission = namedtuple('RankedSubmission', ['submission_id', 'team_id', 'rank', 'score_aggregate'])


class RankingRun:
    def __init__(self, competition_id, standings):
        self.competition_id = competition_id
        self.standings = standings
        self.ranked_count = len(standings)

    def to_dict(self):
        return {
            'competition_id': self.competition_id,
            'ranked_count': self.ranked_count,
            'standings': [
                {
                    'submission_id': s.submission_id,
                    'team_id': s.team_id,
                    'rank': s.rank,
                    'score_aggregate': s.score_aggregate,
                }
                for s in self.standings
            ],
        }


def ranking_order(submissions):
    """Sort by aggregate descending, ties by creation time then id."""
    return sorted(submissions, key=lambda s: (-s.score_aggregate, s.created_at, s.id))


def dense_ranks(aggregates):
    """Dense ranks for aggregates already sorted in descending order."""
    ranks = []
    previous = None
    current = 0
    for value in aggregates:
        if value != previous:
            current += 1
            previous = value
        ranks.append(current)
    return ranks


def _eligible_query(competition_id):
    return Submission.query.filter(
        Submission.competition_id == competition_id,
        Submission.status == 'finalized',
        Submission.score_aggregate.isnot(None),
    )


def calculate_rankings(competition_id, actor_id=None):
    competition = db.session.get(Competition, competition_id)
    if competition is None:
        raise NotFoundError('Competition not found', competition_id=competition_id)

    try:
        ordered = ranking_order(_eligible_query(competition_id).all())
        ranks = dense_ranks([s.score_aggregate for s in ordered])

        ranked_ids = set()
        standings = []
        for submission, rank in zip(ordered, ranks):
            submission.rank = rank
            ranked_ids.add(submission.id)
            standings.append(RankedSubmission(
                submission_id=submission.id,
                team_id=submission.team_id,
                rank=rank,
                score_aggregate=submission.score_aggregate,
            ))

        # Ranks left over from an earlier run no longer apply
        stale = Submission.query.filter(
            Submission.competition_id == competition_id,
            Submission.rank.isnot(None),
        )
        for submission in stale:
            if submission.id not in ranked_ids:
                submission.rank = None

        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    run = RankingRun(competition_id, standings)
    logger.info("Ranked %d submissions in competition %s", run.ranked_count, competition_id)

    record_audit(
        'RANKINGS_CALCULATE', 'COMPETITION', competition_id,
        actor_id=actor_id,
        details={'submissions_ranked': run.ranked_count},
    )
    emit(rankings_updated, competition_id, standings=standings)
    return run


def leaderboard(competition_id):
    if db.session.get(Competition, competition_id) is None:
        raise NotFoundError('Competition not found', competition_id=competition_id)

    return (
        Submission.query
        .filter(Submission.competition_id == competition_id, Submission.rank.isnot(None))
        .order_by(Submission.rank, Submission.created_at, Submission.id)
        .all()
    )


def get_result(submission_id):
    submission = db.session.get(Submission, submission_id)
    if submission is None:
        raise NotFoundError('Submission not found', submission_id=submission_id)
    return {
        'submission_id': submission.id,
        'score_aggregate': submission.score_aggregate,
        'rank': submission.rank,
    }
