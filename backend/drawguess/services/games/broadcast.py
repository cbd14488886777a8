class BroadcastGateway:
    """Single exit point for outbound Socket.IO events.

    Three addressing modes: a whole room, a room minus the sender, or one
    connection. Ordering is whatever the transport provides.
    """

    def __init__(self, socketio, namespace: str = '/'):
        self.socketio = socketio
        self.namespace = namespace

    @staticmethod
    def channel(room_id: str) -> str:
        return f"room:{room_id}"

    def to_room(self, room_id: str, event: str, payload) -> None:
        self.socketio.emit(event, payload, to=self.channel(room_id), namespace=self.namespace)

    def to_room_except(self, room_id: str, sender: str, event: str, payload) -> None:
        self.socketio.emit(
            event, payload, to=self.channel(room_id), skip_sid=sender, namespace=self.namespace
        )

    def to_connection(self, connection_id: str, event: str, payload) -> None:
        self.socketio.emit(event, payload, to=connection_id, namespace=self.namespace)

    def relay_drawing(self, room_id: str, sender: str, stroke_data) -> None:
        # Stroke payloads are opaque; forwarded untouched
        self.to_room_except(room_id, sender, 'drawing', stroke_data)
