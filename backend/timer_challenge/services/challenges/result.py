from typing import Any, Callable, Dict

from .errors import ChallengeStateError
from .scoring import evaluate_result


class ResultModalHandle:
    """The only thing a parent challenge holds: a way to open its modal."""

    def __init__(self, open_fn: Callable[[], None]) -> None:
        self._open = open_fn

    def open(self) -> None:
        self._open()


class ResultModal:
    """Result overlay for a single challenge.

    The overlay is drawn onto ``surface`` rather than into its parent, so the
    parent only needs the ``handle`` created here. ``surface`` must provide
    ``show(payload)`` and ``hide()``.

    ``remaining_time`` is read at open time, so the rendered result always
    reflects the countdown value at the moment the modal was shown.
    """

    def __init__(self, surface, target_time: float, remaining_time: Callable[[], int],
                 on_reset: Callable[[], None]) -> None:
        self.surface = surface
        self.target_time = target_time
        self._remaining_time = remaining_time
        self._on_reset = on_reset
        self.visible = False
        self.handle = ResultModalHandle(self.open)

    def render(self) -> Dict[str, Any]:
        return evaluate_result(self.target_time, self._remaining_time())

    def open(self) -> None:
        self.visible = True
        self.surface.show(self.render())

    def close(self) -> None:
        """Hide without notifying the parent."""
        if self.visible:
            self.visible = False
            self.surface.hide()

    def dismiss(self) -> None:
        """Confirm action: hide the overlay and reset the parent challenge."""
        if not self.visible:
            raise ChallengeStateError('result modal is not open')
        self.close()
        self._on_reset()
