import os


def _origins(raw):
    if raw.strip() == '*':
        return '*'
    return [o.strip() for o in raw.split(',') if o.strip()]


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    HOST = os.environ.get('HOST', '0.0.0.0')
    PORT = int(os.environ.get('PORT', '3001'))
    CORS_ALLOWED_ORIGINS = _origins(os.environ.get('CORS_ALLOWED_ORIGINS', '*'))
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/')
    # Round timing (seconds) and game length
    ROUND_DURATION_SEC = int(os.environ.get('ROUND_DURATION_SEC', '60'))
    MAX_ROUNDS = int(os.environ.get('MAX_ROUNDS', '5'))
    # Points per correct guess
    GUESS_POINTS = int(os.environ.get('GUESS_POINTS', '10'))
    DRAWER_POINTS = int(os.environ.get('DRAWER_POINTS', '5'))
    # Abort the running round when its drawer disconnects
    END_ROUND_ON_DRAWER_LEAVE = os.environ.get('END_ROUND_ON_DRAWER_LEAVE', '1') != '0'
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
