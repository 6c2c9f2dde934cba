"""Tests for judge assignment and removal."""

import pytest

from conftest import make_submission, make_user
from errors import AlreadyAssigned, HasRecordedScores, InvalidRole, NotFoundError
from judging import registry, scoring
from models import AuditLog, Judge, Role


class TestAssignJudge:
    def test_assigns_eligible_user(self, hackathon) -> None:
        h = hackathon
        carol = make_user('Carol', Role.JUDGE)

        judge = registry.assign_judge(h.competition.id, carol.id, actor_id=h.organizer.id)

        assert judge.id is not None
        assert judge.competition_id == h.competition.id
        assert judge.user_id == carol.id

    def test_admin_is_judge_capable(self, hackathon) -> None:
        admin = make_user('Ada', Role.ADMIN)

        judge = registry.assign_judge(hackathon.competition.id, admin.id)

        assert judge.user_id == admin.id

    def test_writes_audit_record(self, hackathon) -> None:
        h = hackathon
        carol = make_user('Carol', Role.JUDGE)

        judge = registry.assign_judge(h.competition.id, carol.id, actor_id=h.organizer.id)

        entry = AuditLog.query.filter_by(action='JUDGE_ASSIGN', entity_id=judge.id).one()
        assert entry.actor_id == h.organizer.id
        assert entry.details == {'competition_id': h.competition.id, 'judge_user_id': carol.id}

    def test_unknown_competition(self, hackathon) -> None:
        with pytest.raises(NotFoundError):
            registry.assign_judge(999, hackathon.jon.id)

    def test_unknown_user(self, hackathon) -> None:
        with pytest.raises(NotFoundError):
            registry.assign_judge(hackathon.competition.id, 999)

    def test_participant_is_not_eligible(self, hackathon) -> None:
        with pytest.raises(InvalidRole) as exc_info:
            registry.assign_judge(hackathon.competition.id, hackathon.alice.id)

        assert exc_info.value.code == 'INVALID_ROLE'

    def test_mentor_and_organizer_are_not_eligible(self, hackathon) -> None:
        mentor = make_user('Mia', Role.MENTOR, Role.ORGANIZER)

        with pytest.raises(InvalidRole):
            registry.assign_judge(hackathon.competition.id, mentor.id)

    def test_duplicate_assignment(self, hackathon) -> None:
        with pytest.raises(AlreadyAssigned) as exc_info:
            registry.assign_judge(hackathon.competition.id, hackathon.jon.id)

        assert exc_info.value.status_code == 409
        assert Judge.query.filter_by(user_id=hackathon.jon.id).count() == 1


class TestRemoveJudge:
    def test_removes_judge_without_scores(self, hackathon) -> None:
        h = hackathon

        registry.remove_judge(h.competition.id, h.jon.id, actor_id=h.organizer.id)

        assert Judge.query.filter_by(competition_id=h.competition.id, user_id=h.jon.id).first() is None
        assert AuditLog.query.filter_by(action='JUDGE_REMOVE').count() == 1

    def test_unknown_assignment(self, hackathon) -> None:
        with pytest.raises(NotFoundError):
            registry.remove_judge(hackathon.competition.id, hackathon.alice.id)

    def test_judge_with_scores_cannot_be_removed(self, hackathon) -> None:
        h = hackathon
        scoring.submit_score(h.blue_entry.id, h.jon.id, h.a.id, 5)

        with pytest.raises(HasRecordedScores) as exc_info:
            registry.remove_judge(h.competition.id, h.jon.id)

        assert exc_info.value.code == 'HAS_RECORDED_SCORES'
        assert Judge.query.filter_by(competition_id=h.competition.id, user_id=h.jon.id).count() == 1

    def test_foreign_key_refuses_removal_when_check_is_raced(self, hackathon, monkeypatch) -> None:
        h = hackathon
        scoring.submit_score(h.blue_entry.id, h.jon.id, h.a.id, 5)
        # Simulate a score committed after the pre-check ran
        monkeypatch.setattr(registry, '_has_scores', lambda judge_id: False)

        with pytest.raises(HasRecordedScores):
            registry.remove_judge(h.competition.id, h.jon.id)

        assert Judge.query.filter_by(competition_id=h.competition.id, user_id=h.jon.id).count() == 1

    def test_removal_after_deleting_scores(self, hackathon) -> None:
        h = hackathon
        score = scoring.submit_score(h.blue_entry.id, h.jon.id, h.a.id, 5)
        scoring.delete_score(score.id, h.jon.id)

        registry.remove_judge(h.competition.id, h.jon.id)

        assert Judge.query.filter_by(user_id=h.jon.id).count() == 0


class TestListJudges:
    def test_lists_judges_with_score_counts(self, hackathon) -> None:
        h = hackathon
        scoring.submit_score(h.blue_entry.id, h.jon.id, h.a.id, 5)
        scoring.submit_score(h.blue_entry.id, h.jon.id, h.b.id, 10)

        judges = registry.list_judges(h.competition.id)

        assert [(judge.user_id, count) for judge, count in judges] == [(h.jon.id, 2), (h.jade.id, 0)]

    def test_unknown_competition(self, app) -> None:
        with pytest.raises(NotFoundError):
            registry.list_judges(42)


class TestListAssignments:
    def test_lists_finalized_submissions_per_competition(self, hackathon) -> None:
        h = hackathon
        make_submission(h.competition, h.blue, 'Draft idea', status='draft')

        assignments = registry.list_assignments(h.jon.id)

        assert len(assignments) == 1
        titles = [s['title'] for s in assignments[0]['submissions']]
        assert titles == ['Red Rover', 'Blue Sky']
        assert assignments[0]['competition']['id'] == h.competition.id

    def test_filter_by_competition(self, hackathon) -> None:
        assert registry.list_assignments(hackathon.jon.id, competition_id=999) == []

    def test_non_judge_has_no_assignments(self, hackathon) -> None:
        assert registry.list_assignments(hackathon.alice.id) == []
