from extensions import db, utcnow


class Judge(db.Model):
    __tablename__ = 'judges'
    id = db.Column(db.Integer, primary_key=True)
    competition_id = db.Column(db.Integer, db.ForeignKey('competitions.id', ondelete='CASCADE'), nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    assigned_at = db.Column(db.DateTime, default=utcnow)

    user = db.relationship('User')
    competition = db.relationship('Competition', back_populates='judges')
    # No cascade: a judge with scores must not disappear with them
    scores = db.relationship('Score', back_populates='judge', lazy='dynamic', passive_deletes='all')

    __table_args__ = (
        db.UniqueConstraint('competition_id', 'user_id', name='unique_competition_judge'),
    )

    def to_dict(self, score_count=None):
        data = {
            'id': self.id,
            'competition_id': self.competition_id,
            'user_id': self.user_id,
            'user': self.user.to_dict() if self.user else None,
            'assigned_at': self.assigned_at.isoformat() if self.assigned_at else None,
        }
        if score_count is not None:
            data['score_count'] = score_count
        return data
