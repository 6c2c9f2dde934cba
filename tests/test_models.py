import pytest
from sqlalchemy.exc import IntegrityError

from conftest import make_user
from extensions import db
from models import Criterion, Role, Submission, is_judge_eligible, is_organizer


class TestRolePredicates:
    @pytest.mark.parametrize(
        'roles, expected',
        [
            ({Role.JUDGE}, True),
            ({Role.ADMIN}, True),
            ({Role.MENTOR, Role.JUDGE}, True),
            ({Role.ORGANIZER}, False),
            ({Role.PARTICIPANT, Role.VIEWER}, False),
            (set(), False),
        ],
    )
    def test_judge_eligible(self, roles, expected) -> None:
        assert is_judge_eligible(roles) is expected

    def test_organizer(self) -> None:
        assert is_organizer({Role.ORGANIZER})
        assert is_organizer({Role.ADMIN})
        assert not is_organizer({Role.JUDGE, Role.SPONSOR})

    def test_grant_is_idempotent(self, app) -> None:
        user = make_user('Max', Role.JUDGE, Role.JUDGE)
        user.grant(Role.JUDGE, Role.MENTOR)
        db.session.commit()

        assert user.roles == {Role.JUDGE, Role.MENTOR}


class TestConstraints:
    def test_criterion_weight_bounds(self, hackathon) -> None:
        db.session.add(Criterion(
            competition_id=hackathon.competition.id, name='Hype', max_score=10, weight=1.5, order=9,
        ))

        with pytest.raises(IntegrityError):
            db.session.commit()
        db.session.rollback()

    def test_rank_starts_at_one(self, hackathon) -> None:
        hackathon.blue_entry.rank = 0

        with pytest.raises(IntegrityError):
            db.session.commit()
        db.session.rollback()

    def test_unknown_submission_status(self, hackathon) -> None:
        h = hackathon
        db.session.add(Submission(competition_id=h.competition.id, team_id=h.blue.id, title='X', status='pending'))

        with pytest.raises(IntegrityError):
            db.session.commit()
        db.session.rollback()
