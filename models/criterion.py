from extensions import db
from sqlalchemy import CheckConstraint


class Criterion(db.Model):
    __tablename__ = 'criteria'
    id = db.Column(db.Integer, primary_key=True)
    competition_id = db.Column(db.Integer, db.ForeignKey('competitions.id', ondelete='CASCADE'), nullable=False)
    name = db.Column(db.String, nullable=False)
    max_score = db.Column(db.Float, nullable=False, default=10)
    weight = db.Column(db.Float, nullable=False, default=1.0)
    order = db.Column(db.Integer, nullable=False, default=0)

    __table_args__ = (
        CheckConstraint("max_score > 0", name="check_criterion_max_score"),
        CheckConstraint("weight >= 0 AND weight <= 1", name="check_criterion_weight"),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'max_score': self.max_score,
            'weight': self.weight,
            'order': self.order,
        }
