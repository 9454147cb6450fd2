import logging
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

PLACEHOLDER_NAME = 'unknown entity'


class PlayerIdentity:
    """Name entry form: a text field plus the last confirmed name.

    ``entered_name`` stays ``None`` until the first confirm. Confirming an
    empty field stores ``''``, which is displayed as-is rather than as the
    placeholder.
    """

    def __init__(self) -> None:
        self.field_value = ''
        self.entered_name: Optional[str] = None

    def set_field(self, text: str) -> None:
        self.field_value = text

    def confirm(self, text: Optional[str] = None) -> str:
        if text is not None:
            self.field_value = text
        self.entered_name = self.field_value
        self.field_value = ''
        logger.info(f"[name-set] name={self.entered_name!r}")
        return self.entered_name

    @property
    def display_name(self) -> str:
        return PLACEHOLDER_NAME if self.entered_name is None else self.entered_name

    @property
    def greeting(self) -> str:
        return f'Welcome {self.display_name}'

    def to_dict(self) -> Dict[str, Any]:
        return {
            'entered_name': self.entered_name,
            'display_name': self.display_name,
            'greeting': self.greeting,
            'field_value': self.field_value,
        }
