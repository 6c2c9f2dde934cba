from functools import wraps
from flask import Blueprint, jsonify, request, session, g
from extensions import db
from errors import AuthenticationRequired, InvalidPayload, OrganizerRequired
from models import User, is_organizer
from judging import registry, scoring, ranking


judging_bp = Blueprint('judging', __name__)


def login_required(f):
    @wraps(f)
    def decorated_function(*args, **kwargs):
        user_id = session.get('user_id')
        user = db.session.get(User, user_id) if user_id is not None else None
        if user is None:
            session.clear()
            raise AuthenticationRequired()
        g.user = user
        return f(*args, **kwargs)
    return decorated_function


def organizer_required(f):
    @wraps(f)
    @login_required
    def decorated_function(*args, **kwargs):
        if not is_organizer(g.user.roles):
            raise OrganizerRequired()
        return f(*args, **kwargs)
    return decorated_function


def _json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise InvalidPayload('Request body must be a JSON object')
    return data


def _required_int(data, key):
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidPayload(f'"{key}" must be an integer id')
    return value


def _optional_text(data, key):
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise InvalidPayload(f'"{key}" must be a string')
    return value


# --- Judge assignment ---

@judging_bp.route('/competitions/<int:competition_id>/judges', methods=['POST'])
@organizer_required
def assign_judge(competition_id):
    data = _json_body()
    judge = registry.assign_judge(competition_id, _required_int(data, 'user_id'), actor_id=g.user.id)
    return jsonify(judge.to_dict()), 201


@judging_bp.route('/competitions/<int:competition_id>/judges', methods=['GET'])
def list_judges(competition_id):
    judges = registry.list_judges(competition_id)
    return jsonify([judge.to_dict(score_count=count) for judge, count in judges])


@judging_bp.route('/competitions/<int:competition_id>/judges/<int:user_id>', methods=['DELETE'])
@organizer_required
def remove_judge(competition_id, user_id):
    registry.remove_judge(competition_id, user_id, actor_id=g.user.id)
    return jsonify({'success': True, 'message': 'Judge removed successfully'})


# --- Scoring ---

@judging_bp.route('/submissions/<int:submission_id>/scores', methods=['POST'])
@login_required
def submit_score(submission_id):
    data = _json_body()
    if 'value' not in data:
        raise InvalidPayload('"value" is required')
    score = scoring.submit_score(
        submission_id,
        g.user.id,
        _required_int(data, 'criterion_id'),
        data['value'],
        feedback=_optional_text(data, 'feedback'),
    )
    return jsonify(score.to_dict()), 201


@judging_bp.route('/submissions/<int:submission_id>/scores', methods=['GET'])
def list_scores(submission_id):
    return jsonify([s.to_dict() for s in scoring.list_scores(submission_id)])


@judging_bp.route('/scores/<int:score_id>', methods=['PUT'])
@login_required
def update_score(score_id):
    data = _json_body()
    score = scoring.update_score(
        score_id,
        g.user.id,
        value=data.get('value'),
        feedback=_optional_text(data, 'feedback'),
    )
    return jsonify(score.to_dict())


@judging_bp.route('/scores/<int:score_id>', methods=['DELETE'])
@login_required
def delete_score(score_id):
    scoring.delete_score(score_id, g.user.id)
    return jsonify({'success': True, 'message': 'Score deleted successfully'})


@judging_bp.route('/judge/assignments', methods=['GET'])
@login_required
def judge_assignments():
    competition_id = request.args.get('competition_id', type=int)
    return jsonify(registry.list_assignments(g.user.id, competition_id=competition_id))


# --- Results ---

@judging_bp.route('/competitions/<int:competition_id>/rankings', methods=['POST'])
@organizer_required
def calculate_rankings(competition_id):
    run = ranking.calculate_rankings(competition_id, actor_id=g.user.id)
    return jsonify(run.to_dict())


@judging_bp.route('/competitions/<int:competition_id>/leaderboard', methods=['GET'])
def leaderboard(competition_id):
    return jsonify([s.to_dict() for s in ranking.leaderboard(competition_id)])


@judging_bp.route('/submissions/<int:submission_id>/result', methods=['GET'])
def submission_result(submission_id):
    return jsonify(ranking.get_result(submission_id))
