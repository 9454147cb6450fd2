import os


def _parse_challenges(raw):
    """Parse ``Title:seconds,Title:seconds`` into ``[(title, seconds), ...]``."""
    challenges = []
    for item in raw.split(','):
        if not item.strip():
            continue
        title, _, seconds = item.rpartition(':')
        challenges.append((title.strip(), float(seconds)))
    return challenges


DEFAULT_CHALLENGES = [
    ('Easy', 1),
    ('Not easy', 5),
    ('Getting tough', 10),
    ('Pros only', 15),
]


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Countdown step and tick period (milliseconds)
    TICK_INTERVAL_MS = int(os.environ.get('TICK_INTERVAL_MS', '10'))
    # 'fixed' decrements one step per tick, 'elapsed' follows wall time in whole steps
    TICK_MODE = os.environ.get('TICK_MODE', 'fixed')
    # Optional: heartbeat interval for timer worker logs (sec). 0 disables.
    TIMER_HEARTBEAT_SEC = int(os.environ.get('TIMER_HEARTBEAT_SEC', '0'))
    CHALLENGES = _parse_challenges(os.environ['CHALLENGES']) if os.environ.get('CHALLENGES') else DEFAULT_CHALLENGES
    CORS_ORIGINS = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:5174",
        "http://127.0.0.1:5174",
    ]
