"""Top-level screen state machine."""
from __future__ import annotations
import logging
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)


class Screen(Enum):
    LOADING = "loading"
    LOGIN = "login"
    ERROR = "error"
    MAIN = "main"


class ScreenStateMachine:
    """Exactly one screen is active; the last requested one wins.

    The active screen is a single value, so two visible screens (or none)
    cannot be represented. Any screen may request any other.
    """

    def __init__(self, initial: Screen = Screen.LOADING):
        self.current = initial
        self.error_title: Optional[str] = None
        self.error_details: Optional[str] = None

    def show(self, screen: Screen) -> None:
        if screen is not Screen.ERROR:
            self.error_title = None
            self.error_details = None
        if screen is not self.current:
            logger.debug(f"Screen {self.current.value} -> {screen.value}")
        self.current = screen

    def show_error(self, title: str, details: str) -> None:
        """Switch to the error screen with a title and explanation."""
        self.error_title = title
        self.error_details = details
        self.show(Screen.ERROR)

    def is_visible(self, screen: Screen) -> bool:
        return self.current is screen

    def visibility(self) -> dict[Screen, bool]:
        """Visibility of every screen, for renderers that toggle each one."""
        return {screen: screen is self.current for screen in Screen}
