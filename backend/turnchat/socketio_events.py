from flask import current_app, request
from turnchat import socketio
from turnchat.protocol import FrameError, JoinFrame, KeepaliveFrame, PostFrame, decode_frame
from turnchat.services.session import SessionCoordinator


def handle_connect(auth=None):
    # Late joiners get history and the current turn before sending anything
    _session().connect(_get_sid())


def handle_disconnect(reason=None):
    _session().disconnect(_get_sid())


def handle_frame(data):
    sid = _get_sid()
    try:
        frame = decode_frame(data)
    except FrameError as exc:
        current_app.logger.warning(f"[frame-drop] handle={sid} {exc}")
        return

    if isinstance(frame, KeepaliveFrame):
        return
    if isinstance(frame, JoinFrame):
        _session().join(sid, frame.name)
    elif isinstance(frame, PostFrame):
        _session().post(sid, frame.content)


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _session() -> SessionCoordinator:
    return current_app.extensions['turn_session']


def make_sender(namespace: str):
    """Build the outbound hook the coordinator uses to reach one connection."""
    def _send(sid, envelope):
        socketio.emit('message', envelope, to=sid, namespace=namespace)
    return _send


def register_socketio_handlers(namespace: str = '/ws') -> None:
    """Register Socket.IO event handlers on ``namespace``.

    Frames arrive on the 'message' event (client ``send``); the 'json'
    event is routed the same way for clients that send with json=True.
    """
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('message', handle_frame, namespace=namespace)
    socketio.on_event('json', handle_frame, namespace=namespace)
