import math
from typing import Any, Dict


def total_ms(target_time: float) -> int:
    return int(round(target_time * 1000))


def user_lost(remaining_ms: float) -> bool:
    return remaining_ms <= 0


def score_for(target_time: float, remaining_ms: float) -> int:
    """Percentage of the target time used up before the timer was stopped.

    Halves round up, so a stop at exactly 0.5% scores 1.
    """
    ratio = 1 - remaining_ms / (target_time * 1000)
    return int(math.floor(ratio * 100 + 0.5))


def format_remaining(remaining_ms: float) -> str:
    """Remaining time in seconds with two decimals, e.g. 2000 -> '2.00'."""
    return f"{remaining_ms / 1000:.2f}"


def evaluate_result(target_time: float, remaining_ms: float) -> Dict[str, Any]:
    lost = user_lost(remaining_ms)
    score = None if lost else score_for(target_time, remaining_ms)
    return {
        'target_time': target_time,
        'remaining_ms': remaining_ms,
        'user_lost': lost,
        'outcome': 'lost' if lost else 'scored',
        'score': score,
        'formatted_remaining_time': format_remaining(remaining_ms),
        'heading': 'You lost' if lost else f'Your Score: {score}',
    }
