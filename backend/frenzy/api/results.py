from flask import Blueprint, jsonify, current_app
from sqlalchemy.exc import SQLAlchemyError

from frenzy.services.results import get_all_results, get_result_by_room_id

results = Blueprint('results', __name__)


@results.route('/results', methods=['GET'])
def list_results():
    try:
        rows = get_all_results()
    except SQLAlchemyError as exc:
        current_app.logger.error(f"[results] listing failed: {exc}")
        return jsonify({'message': 'Failed to fetch game results'}), 500
    return jsonify([r.to_dict() for r in rows])


@results.route('/results/<string:room_id>', methods=['GET'])
def get_result(room_id):
    try:
        result = get_result_by_room_id(room_id)
    except SQLAlchemyError as exc:
        current_app.logger.error(f"[results] lookup failed room={room_id}: {exc}")
        return jsonify({'message': 'Failed to fetch game result'}), 500
    if not result:
        return jsonify({'message': 'Game result not found'}), 404
    return jsonify(result.to_dict())
