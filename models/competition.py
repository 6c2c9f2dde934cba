# models/competition.py

from extensions import db, utcnow
from sqlalchemy import CheckConstraint


class Competition(db.Model):
    __tablename__ = 'competitions'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    # 'open', 'judging', 'closed'
    status = db.Column(db.String(20), nullable=False, default='open')
    created_at = db.Column(db.DateTime, default=utcnow)

    criteria = db.relationship(
        'Criterion',
        backref='competition',
        lazy=True,
        cascade="all, delete-orphan",
        order_by='Criterion.order',
    )
    submissions = db.relationship('Submission', backref='competition', lazy=True, cascade="all, delete-orphan")
    judges = db.relationship('Judge', back_populates='competition', lazy=True, cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint("status IN ('open', 'judging', 'closed')", name="check_competition_status"),
    )

    @property
    def is_closed(self):
        return self.status == 'closed'

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'status': self.status,
            'criteria': [c.to_dict() for c in self.criteria],
        }
