from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from config import Config

socketio = SocketIO(async_mode=None)


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = flask_app.config.get('CORS_ALLOWED_ORIGINS') or []
    namespace = flask_app.config.get('SOCKETIO_NAMESPACE', '/ws')
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from turnchat.socketio_events import make_sender, register_socketio_handlers
    from turnchat.services.session import SessionCoordinator

    # One session per process, created with the app and never persisted
    flask_app.extensions['turn_session'] = SessionCoordinator(
        send=make_sender(namespace),
        messages_per_turn=flask_app.config.get('MESSAGES_PER_TURN', 3),
        logger=flask_app.logger,
    )

    from turnchat.main import main
    flask_app.register_blueprint(main)

    from turnchat.api.session import session_api
    flask_app.register_blueprint(session_api, url_prefix='/api/session')

    register_socketio_handlers(namespace=namespace)

    flask_app.logger.info(f"[startup] namespace={namespace} messages_per_turn={flask_app.config.get('MESSAGES_PER_TURN', 3)}")
    return flask_app
