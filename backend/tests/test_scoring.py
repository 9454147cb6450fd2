import pytest

from timer_challenge.services.challenges.scoring import (
    evaluate_result,
    format_remaining,
    score_for,
    total_ms,
)


def test_stop_at_two_seconds_of_ten():
    result = evaluate_result(10, 2000)
    assert result['user_lost'] is False
    assert result['outcome'] == 'scored'
    assert result['score'] == 80
    assert result['formatted_remaining_time'] == '2.00'
    assert result['heading'] == 'Your Score: 80'


def test_zero_remaining_is_lost():
    result = evaluate_result(1, 0)
    assert result['user_lost'] is True
    assert result['outcome'] == 'lost'
    assert result['score'] is None
    assert result['formatted_remaining_time'] == '0.00'
    assert result['heading'] == 'You lost'


def test_score_is_idempotent():
    assert score_for(15, 4370) == score_for(15, 4370)


def test_half_percent_rounds_up():
    # 1 - 9950/10000 = 0.005 -> 0.5% -> 1
    assert score_for(10, 9950) == 1
    # 1 - 9850/10000 = 0.015 -> 1.5% -> 2
    assert score_for(10, 9850) == 2


@pytest.mark.parametrize('target_time', [1, 5, 10, 15])
def test_score_range_for_any_stop(target_time):
    total = total_ms(target_time)
    for remaining in range(10, total, 10):
        assert 0 <= score_for(target_time, remaining) <= 100


def test_last_step_on_long_target_rounds_to_full_score():
    # 1 - 10/15000 = 0.99933... which rounds to 100 even though the timer did not expire
    assert score_for(15, 10) == 100
    assert score_for(1, 10) == 99


def test_format_remaining():
    assert format_remaining(12340) == '12.34'
    assert format_remaining(10) == '0.01'


def test_total_ms_handles_fractional_targets():
    assert total_ms(2.5) == 2500
