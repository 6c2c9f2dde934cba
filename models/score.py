from extensions import db, utcnow
from sqlalchemy import CheckConstraint


class Score(db.Model):
    __tablename__ = 'scores'
    id = db.Column(db.Integer, primary_key=True)
    submission_id = db.Column(db.Integer, db.ForeignKey('submissions.id', ondelete='CASCADE'), nullable=False)
    # RESTRICT keeps judges with scoring history from being deleted underneath their scores
    judge_id = db.Column(db.Integer, db.ForeignKey('judges.id', ondelete='RESTRICT'), nullable=False)
    criterion_id = db.Column(db.Integer, db.ForeignKey('criteria.id', ondelete='CASCADE'), nullable=False)
    value = db.Column(db.Float, nullable=False)
    feedback = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    criterion = db.relationship('Criterion')
    judge = db.relationship('Judge', back_populates='scores')

    __table_args__ = (
        db.UniqueConstraint('submission_id', 'judge_id', 'criterion_id', name='unique_score'),
        CheckConstraint("value >= 0", name="check_score_value"),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'submission_id': self.submission_id,
            'judge_id': self.judge_id,
            'criterion_id': self.criterion_id,
            'criterion': self.criterion.to_dict() if self.criterion else None,
            'value': self.value,
            'feedback': self.feedback,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }
