# models/submission.py

from extensions import db, utcnow
from sqlalchemy import CheckConstraint


class Submission(db.Model):
    __tablename__ = 'submissions'
    id = db.Column(db.Integer, primary_key=True)
    competition_id = db.Column(db.Integer, db.ForeignKey('competitions.id', ondelete='CASCADE'), nullable=False)
    team_id = db.Column(db.Integer, db.ForeignKey('teams.id', ondelete='CASCADE'), nullable=False)
    title = db.Column(db.String(200), nullable=False)
    # 'draft', 'submitted', 'finalized', 'disqualified'
    status = db.Column(db.String(20), nullable=False, default='draft')
    # Weighted 0-100 rating over the current score set, NULL while unscored
    score_aggregate = db.Column(db.Float, nullable=True)
    # Written only by a ranking run
    rank = db.Column(db.Integer, nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    team = db.relationship('Team')
    scores = db.relationship('Score', backref='submission', lazy=True, cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint(
            "status IN ('draft', 'submitted', 'finalized', 'disqualified')",
            name="check_submission_status",
        ),
        CheckConstraint("rank IS NULL OR rank >= 1", name="check_submission_rank"),
    )

    @property
    def is_finalized(self):
        return self.status == 'finalized'

    def to_dict(self):
        return {
            'id': self.id,
            'competition_id': self.competition_id,
            'team_id': self.team_id,
            'title': self.title,
            'status': self.status,
            'score_aggregate': self.score_aggregate,
            'rank': self.rank,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
