from flask import Blueprint, current_app, jsonify

main = Blueprint('main', __name__)


def _coordinator():
    return current_app.extensions['drawguess']


@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the draw-and-guess server!'})


@main.route('/api/rooms')
def list_rooms():
    return jsonify(_coordinator().rooms())


@main.route('/api/rooms/<string:room_id>')
def room_state(room_id):
    """Public state of one room. The secret word is never included."""
    state = _coordinator().room_state(room_id)
    if state is None:
        return jsonify({'error': 'Room not found'}), 404
    return jsonify(state)
