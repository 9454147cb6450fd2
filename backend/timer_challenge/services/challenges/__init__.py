"""Timer challenge domain: countdown engine, result modal, player identity.

Nothing here knows about HTTP or Socket.IO. Transports pass in a scheduler
for ticks and a surface for the result overlay, and call the operations
exposed by ``ChallengeSession``.
"""

from .countdown import ChallengeConfig, TimerChallenge, IDLE, RUNNING, STOPPED, EXPIRED
from .errors import ChallengeStateError
from .player import PlayerIdentity, PLACEHOLDER_NAME
from .result import ResultModal, ResultModalHandle
from .scheduler import ManualScheduler, SocketIOScheduler, TickHandle
from .scoring import evaluate_result, format_remaining, score_for
from .session import ChallengeSession, build_configs
