from flask_socketio import emit
from flask import current_app, request
from timer_challenge import socketio
from timer_challenge.services.challenges import ChallengeSession, ChallengeStateError
from typing import Any, Dict


class SocketIOSurface:
    """Overlay surface for one challenge's result modal: the client's own room."""

    def __init__(self, sid: str, namespace: str, key: str) -> None:
        self.sid = sid
        self.namespace = namespace
        self.key = key

    def show(self, result: Dict[str, Any]) -> None:
        # Use socketio.emit since ticks may run in a background task
        socketio.emit('result_modal', {'key': self.key, 'open': True, 'result': result},
                      to=self.sid, namespace=self.namespace)

    def hide(self) -> None:
        socketio.emit('result_modal', {'key': self.key, 'open': False},
                      to=self.sid, namespace=self.namespace)


# ---- Per-connection sessions ----

_sessions: Dict[str, ChallengeSession] = {}


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _open_session(sid: str, namespace: str) -> ChallengeSession:
    def surface_factory(key: str) -> SocketIOSurface:
        return SocketIOSurface(sid, namespace, key)

    def on_change(session: ChallengeSession) -> None:
        socketio.emit('state_update', session.view(), to=sid, namespace=namespace)

    session = ChallengeSession.from_app_config(
        current_app.config,
        current_app.extensions['tick_scheduler'],
        surface_factory,
        on_change=on_change,
    )
    _sessions[sid] = session
    current_app.logger.info(f"[session-open] sid={sid} challenges={list(session.challenges)}")
    return session


def _close_session(sid: str) -> None:
    session = _sessions.pop(sid, None)
    if not session:
        return
    session.close()
    current_app.logger.info(f"[session-close] sid={sid}")


def _current_session():
    session = _sessions.get(_get_sid())
    if session is None:
        emit('error', {'message': 'No active session'})
    return session


def _challenge_key(data):
    key = (data or {}).get('key')
    if not key:
        emit('error', {'message': 'key is required'})
    return key


def _text(data):
    text = (data or {}).get('text')
    if text is not None and not isinstance(text, str):
        emit('error', {'message': 'text must be a string'})
        return False, None
    return True, text


def handle_connect():
    session = _open_session(_get_sid(), request.namespace)
    emit('connected', {'message': 'Connected to /ws'})
    emit('state_update', session.view())


def handle_disconnect(*args):
    _close_session(_get_sid())


def handle_input_change(data):
    session = _current_session()
    if not session:
        return
    ok, text = _text(data)
    if ok:
        session.on_input_change(text or '')


def handle_set_name(data):
    session = _current_session()
    if not session:
        return
    ok, text = _text(data)
    if ok:
        session.on_input_confirm(text)


def _run_challenge_action(data, action: str) -> None:
    session = _current_session()
    if not session:
        return
    key = _challenge_key(data)
    if not key:
        return
    try:
        if action == 'start':
            session.on_challenge_start(key)
        elif action == 'stop':
            session.on_challenge_stop(key)
        else:
            session.on_result_dismiss(key)
    except KeyError:
        emit('error', {'message': f'Unknown challenge: {key}'})
    except ChallengeStateError as exc:
        current_app.logger.warning(f"[invalid-transition] sid={_get_sid()} key={key} action={action}: {exc}")
        emit('error', {'message': str(exc)})


def handle_start_challenge(data):
    _run_challenge_action(data, 'start')


def handle_stop_challenge(data):
    _run_challenge_action(data, 'stop')


def handle_dismiss_result(data):
    _run_challenge_action(data, 'dismiss')


def handle_get_state(data=None):
    session = _current_session()
    if session:
        emit('state_update', session.view())


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    namespaces = ['/ws', '/'] if testing else ['/ws']
    for namespace in namespaces:
        socketio.on_event('connect', handle_connect, namespace=namespace)
        socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
        socketio.on_event('input_change', handle_input_change, namespace=namespace)
        socketio.on_event('set_name', handle_set_name, namespace=namespace)
        socketio.on_event('start_challenge', handle_start_challenge, namespace=namespace)
        socketio.on_event('stop_challenge', handle_stop_challenge, namespace=namespace)
        socketio.on_event('dismiss_result', handle_dismiss_result, namespace=namespace)
        socketio.on_event('get_state', handle_get_state, namespace=namespace)
