import pytest

from conftest import TestConfig
from timer_challenge import create_app


def test_index(client):
    res = client.get('/')
    assert res.status_code == 200
    assert 'message' in res.get_json()


def test_list_challenges(client):
    res = client.get('/api/challenges')
    assert res.status_code == 200
    data = res.get_json()
    assert [c['key'] for c in data] == ['easy', 'not-easy', 'getting-tough', 'pros-only']
    assert data[0] == {'key': 'easy', 'title': 'Easy', 'target_time': 1, 'target_label': '1 second'}


def test_score_scenario(client):
    res = client.get('/api/challenges/score?target_time=10&remaining=2000')
    assert res.status_code == 200
    data = res.get_json()
    assert data['score'] == 80
    assert data['formatted_remaining_time'] == '2.00'
    assert data['user_lost'] is False


def test_score_lost(client):
    data = client.get('/api/challenges/score?target_time=1&remaining=0').get_json()
    assert data['outcome'] == 'lost'
    assert data['heading'] == 'You lost'


def test_score_rejects_bad_input(client):
    assert client.get('/api/challenges/score').status_code == 400
    assert client.get('/api/challenges/score?target_time=abc&remaining=1').status_code == 400
    assert client.get('/api/challenges/score?target_time=0&remaining=0').status_code == 400
    assert client.get('/api/challenges/score?target_time=1&remaining=5000').status_code == 400
    res = client.get('/api/challenges/score?target_time=1&remaining=-10')
    assert res.status_code == 400
    assert 'error' in res.get_json()


def test_cli_lists_challenges(flask_app):
    runner = flask_app.test_cli_runner()
    result = runner.invoke(args=['challenges'])
    assert result.exit_code == 0
    assert 'getting-tough\tGetting tough\t10 seconds' in result.output


def test_bad_challenge_config_fails_at_startup():
    class BrokenConfig(TestConfig):
        CHALLENGES = [('Broken', 0)]

    with pytest.raises(ValueError):
        create_app(BrokenConfig)
