import os


def _split_origins(raw):
    return [origin.strip() for origin in raw.split(',') if origin.strip()]


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Posts allowed per turn before the turn auto-advances. Fixed by the game rules.
    MESSAGES_PER_TURN = 3
    CORS_ALLOWED_ORIGINS = _split_origins(
        os.environ.get('CORS_ALLOWED_ORIGINS')
        or 'http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173,http://127.0.0.1:5173'
    )
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/ws')
    HOST = os.environ.get('HOST', '127.0.0.1')
    PORT = int(os.environ.get('PORT', '3000'))
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
