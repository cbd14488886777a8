from flask import current_app, request
from flask_socketio import emit, join_room, leave_room

from drawguess.services.games.broadcast import BroadcastGateway


def _coordinator():
    return current_app.extensions['drawguess']


def _get_sid() -> str:
    # request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _fields(data, *names, allow_empty=()):
    """Pull required string fields from a payload, or None if any is missing.

    Empty strings count as missing unless the field is named in ``allow_empty``.
    """
    if not isinstance(data, dict):
        return None
    values = []
    for name in names:
        value = data.get(name)
        if not isinstance(value, str) or (value == '' and name not in allow_empty):
            return None
        values.append(value)
    return values


def _reject(event: str, message: str) -> None:
    current_app.logger.warning(f"[bad-payload] event={event} sid={_get_sid()} {message}")
    emit('error', {'event': event, 'message': message})


def handle_connect(auth=None):
    current_app.logger.info(f"[connect] sid={_get_sid()}")


def handle_disconnect(reason=None):
    sid = _get_sid()
    affected = _coordinator().leave(sid)
    current_app.logger.info(f"[disconnect] sid={sid} rooms={[room_id for room_id, _ in affected]}")


def handle_join_room(data):
    fields = _fields(data, 'roomId', 'username', allow_empty=('username',))
    if fields is None:
        _reject('joinRoom', 'roomId and username are required')
        return
    room_id, username = fields
    join_room(BroadcastGateway.channel(room_id))
    _coordinator().join(room_id, _get_sid(), username)


def handle_leave_room(data):
    fields = _fields(data, 'roomId')
    if fields is None:
        _reject('leaveRoom', 'roomId is required')
        return
    room_id, = fields
    leave_room(BroadcastGateway.channel(room_id))
    _coordinator().leave_room(room_id, _get_sid())


def handle_guess(data):
    fields = _fields(data, 'roomId', 'guess', allow_empty=('guess',))
    if fields is None:
        _reject('guess', 'roomId and guess are required')
        return
    room_id, text = fields
    username = data.get('username')
    if not isinstance(username, str):
        username = None
    _coordinator().guess(room_id, _get_sid(), text, display_name=username)


def handle_drawing(data):
    fields = _fields(data, 'roomId')
    if fields is None or 'data' not in data:
        _reject('drawing', 'roomId and data are required')
        return
    room_id, = fields
    _coordinator().draw(room_id, _get_sid(), data['data'])


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register Socket.IO event handlers on the given namespace."""
    from drawguess import socketio

    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('joinRoom', handle_join_room, namespace=namespace)
    socketio.on_event('leaveRoom', handle_leave_room, namespace=namespace)
    socketio.on_event('guess', handle_guess, namespace=namespace)
    socketio.on_event('drawing', handle_drawing, namespace=namespace)
