from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from .countdown import ChallengeConfig, TimerChallenge
from .player import PlayerIdentity


def build_configs(challenges: Iterable[Tuple[str, float]]) -> List[ChallengeConfig]:
    """Turn ``(title, target_time)`` pairs into configs with unique keys."""
    configs = []
    seen = set()
    for title, target_time in challenges:
        config = ChallengeConfig(title=title, target_time=target_time)
        key = config.key
        n = 2
        while key in seen:
            key = f'{config.key}-{n}'
            n += 1
        seen.add(key)
        if key != config.key:
            config = ChallengeConfig(title=title, target_time=target_time, key=key)
        configs.append(config)
    return configs


class ChallengeSession:
    """One player and their set of challenges; lives as long as a client connection.

    ``surface_factory(key)`` returns the overlay surface for a challenge's
    result modal. ``on_change(session)`` fires whenever something visible
    changes.
    """

    def __init__(self, configs: Iterable[ChallengeConfig], scheduler,
                 surface_factory: Callable[[str], Any],
                 tick_interval_ms: int = 10, tick_mode: str = 'fixed', heartbeat_sec: int = 0,
                 on_change: Optional[Callable[['ChallengeSession'], None]] = None) -> None:
        self.player = PlayerIdentity()
        self._on_change = on_change
        self.challenges: Dict[str, TimerChallenge] = {}
        for config in configs:
            if config.key in self.challenges:
                raise ValueError(f'duplicate challenge key {config.key!r}')
            self.challenges[config.key] = TimerChallenge(
                config,
                scheduler,
                surface_factory(config.key),
                tick_interval_ms=tick_interval_ms,
                tick_mode=tick_mode,
                heartbeat_sec=heartbeat_sec,
                on_change=self._challenge_changed,
            )

    @classmethod
    def from_app_config(cls, config, scheduler, surface_factory, on_change=None) -> 'ChallengeSession':
        return cls(
            build_configs(config.get('CHALLENGES', [])),
            scheduler,
            surface_factory,
            tick_interval_ms=int(config.get('TICK_INTERVAL_MS', 10)),
            tick_mode=config.get('TICK_MODE', 'fixed'),
            heartbeat_sec=int(config.get('TIMER_HEARTBEAT_SEC', 0)),
            on_change=on_change,
        )

    def challenge(self, key: str) -> TimerChallenge:
        try:
            return self.challenges[key]
        except KeyError:
            raise KeyError(f'Unknown challenge: {key}') from None

    def on_input_change(self, text: str) -> None:
        self.player.set_field(text)

    def on_input_confirm(self, text: Optional[str] = None) -> str:
        name = self.player.confirm(text)
        self._notify()
        return name

    def on_challenge_start(self, key: str) -> bool:
        return self.challenge(key).start()

    def on_challenge_stop(self, key: str) -> None:
        self.challenge(key).stop()

    def on_result_dismiss(self, key: str) -> None:
        self.challenge(key).dismiss_result()

    def view(self) -> Dict[str, Any]:
        return {
            'player': self.player.to_dict(),
            'challenges': [c.to_dict() for c in self.challenges.values()],
        }

    def close(self) -> None:
        for challenge in self.challenges.values():
            challenge.close()

    def _challenge_changed(self, _challenge: TimerChallenge) -> None:
        self._notify()

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change(self)
