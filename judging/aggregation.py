# judging/aggregation.py
# Weighted 0-100 aggregate per submission, always rebuilt from its full score set

import logging
import math
from collections import defaultdict, namedtuple

from extensions import db
from models import Criterion, Score, Submission

logger = logging.getLogger(__name__)


# One score joined with its criterion's scale
ScoreRow = namedtuple('ScoreRow', ['criterion_id', 'value', 'max_score', 'weight'])


def compute_aggregate(rows):
    """Mean per criterion, normalized against max_score, then weighted.

    Returns None when there are no scores at all.
    """
    by_criterion = defaultdict(list)
    scales = {}
    for row in rows:
        by_criterion[row.criterion_id].append(row.value)
        scales[row.criterion_id] = (row.max_score, row.weight)

    if not by_criterion:
        return None

    weighted = []
    weights = []
    for criterion_id in sorted(by_criterion):
        values = by_criterion[criterion_id]
        max_score, weight = scales[criterion_id]
        mean = math.fsum(values) / len(values)
        normalized = mean * 100 / max_score
        weighted.append(normalized * weight)
        weights.append(weight)

    total_weight = math.fsum(weights)
    if total_weight == 0:
        # Every scored criterion carries weight 0
        return 0.0
    return math.fsum(weighted) / total_weight


def load_score_rows(submission_id):
    query = (
        db.session.query(Score.criterion_id, Score.value, Criterion.max_score, Criterion.weight)
        .join(Criterion, Score.criterion_id == Criterion.id)
        .filter(Score.submission_id == submission_id)
        .order_by(Score.id)
    )
    return [ScoreRow(*row) for row in query]


def recompute(submission_id):
    """Recompute and store the aggregate for one submission.

    Runs inside the caller's unit of work: the new value is flushed but not
    committed, so the score mutation and its aggregate commit together.
    """
    submission = db.session.get(Submission, submission_id)
    if submission is None:
        return None

    # Pending score inserts/deletes must be visible to the read below
    db.session.flush()
    aggregate = compute_aggregate(load_score_rows(submission_id))
    submission.score_aggregate = aggregate
    db.session.flush()

    logger.debug("Recomputed aggregate for submission %s: %r", submission_id, aggregate)
    return aggregate
