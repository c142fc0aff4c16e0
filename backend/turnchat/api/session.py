from flask import Blueprint, current_app, jsonify


session_api = Blueprint('session_api', __name__)


@session_api.route('/state', methods=['GET'])
def get_session_state():
    """Read-only snapshot, same shape as the gameState socket payload."""
    return jsonify(current_app.extensions['turn_session'].snapshot())


@session_api.route('/health', methods=['GET'])
def get_session_health():
    return jsonify(current_app.extensions['turn_session'].health())
