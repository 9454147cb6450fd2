from flask import Blueprint, jsonify, request, current_app
from timer_challenge.services.challenges import build_configs, evaluate_result


challenges = Blueprint('challenges', __name__)


@challenges.route('/', methods=['GET'], strict_slashes=False)
def list_challenges():
    configs = build_configs(current_app.config.get('CHALLENGES', []))
    return jsonify([c.to_dict() for c in configs])


@challenges.route('/score', methods=['GET'])
def score():
    """Result for an arbitrary target time / remaining time pair."""
    target_time = request.args.get('target_time', type=float)
    remaining = request.args.get('remaining', type=float)
    if target_time is None or remaining is None:
        return jsonify({'error': 'target_time and remaining are required numbers'}), 400
    if target_time <= 0:
        return jsonify({'error': 'target_time must be positive'}), 400
    if not 0 <= remaining <= target_time * 1000:
        return jsonify({'error': 'remaining must be between 0 and target_time * 1000'}), 400
    return jsonify(evaluate_result(target_time, remaining))
