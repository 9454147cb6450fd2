import time

from timer_challenge import socketio
from timer_challenge.services.challenges import ChallengeConfig, SocketIOScheduler, TimerChallenge


class RecordingSocketIOScheduler(SocketIOScheduler):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.handles = []

    def schedule_repeating(self, callback, interval_ms, name=''):
        handle = super().schedule_repeating(callback, interval_ms, name)
        self.handles.append(handle)
        return handle


def test_background_ticks_stop_after_stop(flask_app, surface):
    scheduler = RecordingSocketIOScheduler(socketio)
    challenge = TimerChallenge(ChallengeConfig('Not easy', 5), scheduler, surface)
    challenge.start()
    time.sleep(0.3)
    challenge.stop()

    remaining = challenge.time_remaining
    assert 0 < remaining < 5000
    assert scheduler.handles[0].cancelled is True
    time.sleep(0.1)
    # no decrements once the schedule is cancelled
    assert challenge.time_remaining == remaining
    assert surface.last['remaining_ms'] == remaining


def test_background_ticks_expire_short_challenge(flask_app, surface):
    scheduler = RecordingSocketIOScheduler(socketio)
    challenge = TimerChallenge(ChallengeConfig('Blink', 0.05), scheduler, surface)
    challenge.start()
    deadline = time.time() + 3.0
    while time.time() < deadline and challenge.phase != 'expired':
        time.sleep(0.02)

    assert challenge.phase == 'expired'
    assert challenge.time_remaining == 0
    assert scheduler.handles[0].cancelled is True
    assert surface.last['user_lost'] is True
