from extensions import db, utcnow


class XpEvent(db.Model):
    __tablename__ = 'xp_events'
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    event_type = db.Column(db.String(50), nullable=False)
    points = db.Column(db.Integer, nullable=False)
    ref_type = db.Column(db.String(30), nullable=False)
    ref_id = db.Column(db.Integer, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)

    __table_args__ = (
        # A notification replayed for the same fact never awards twice
        db.UniqueConstraint('user_id', 'event_type', 'ref_type', 'ref_id', name='unique_xp_award'),
    )
