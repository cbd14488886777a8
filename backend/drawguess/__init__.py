import logging

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from config import Config

socketio = SocketIO(async_mode=None)


def create_app(config_class=Config, timer=None):
    """Build the Flask app, its Socket.IO server and the game coordinator.

    ``timer`` replaces the background countdown clock; tests pass a manual
    one so rounds can be stepped tick by tick.
    """
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(getattr(logging, str(flask_app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO))

    origins = flask_app.config.get('CORS_ALLOWED_ORIGINS', '*')
    CORS(flask_app, origins=origins)
    socketio.init_app(flask_app, cors_allowed_origins=origins)

    from drawguess.services.games import build_coordinator
    flask_app.extensions['drawguess'] = build_coordinator(flask_app, socketio, timer=timer)

    from drawguess.main import main
    flask_app.register_blueprint(main)

    from drawguess.socketio_events import register_socketio_handlers
    register_socketio_handlers(namespace=flask_app.config.get('SOCKETIO_NAMESPACE', '/'))

    return flask_app
