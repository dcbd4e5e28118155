from flask import Blueprint, current_app, jsonify

from typerace.services.race import RoomNotFound

rooms = Blueprint('rooms', __name__)


def _store():
    return current_app.extensions['race_store']


@rooms.route('', methods=['GET'])
def list_rooms():
    return jsonify(_store().list_rooms())


@rooms.route('/<string:room_id>', methods=['GET'])
def get_room(room_id):
    """
    Returns the same snapshot members receive as room_state.
    """
    snapshot = _store().get(room_id)
    if snapshot is None:
        return jsonify({'error': 'Room not found'}), 404
    return jsonify(snapshot)


@rooms.route('/<string:room_id>/results', methods=['GET'])
def get_results(room_id):
    """
    Returns the standings of the room, finished players first.
    """
    try:
        return jsonify(_store().results(room_id))
    except RoomNotFound:
        return jsonify({'error': 'Room not found'}), 404
