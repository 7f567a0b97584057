"""Explicit application state owned by a single console controller."""
from __future__ import annotations
import logging
from typing import Callable, Optional

from .api.client import InFlightIndicator
from .models import Alert, Session, TenantConfig
from .screens import Screen, ScreenStateMachine

logger = logging.getLogger(__name__)


class ConsoleState:
    """Session, tenant config, screen, banner and in-flight indicator.

    Session and TenantConfig are stored and cleared together; there is no
    way to hold one without the other.
    """

    def __init__(
        self,
        initial_screen: Screen = Screen.LOADING,
        on_alert: Optional[Callable[[Alert], None]] = None,
        indicator: Optional[InFlightIndicator] = None,
    ):
        self.screens = ScreenStateMachine(initial_screen)
        self.indicator = indicator or InFlightIndicator()
        self.alert: Optional[Alert] = None
        self.on_alert = on_alert
        self._session: Optional[Session] = None
        self._tenant_config: Optional[TenantConfig] = None

    @property
    def session(self) -> Optional[Session]:
        return self._session

    @property
    def tenant_config(self) -> Optional[TenantConfig]:
        return self._tenant_config

    @property
    def is_authenticated(self) -> bool:
        return self._session is not None

    @property
    def is_high_privilege(self) -> bool:
        return bool(self._session and self._session.is_high_privilege)

    @property
    def in_flight(self) -> bool:
        return self.indicator.active

    def sign_in(self, session: Session, tenant_config: TenantConfig) -> None:
        self._session = session
        self._tenant_config = tenant_config

    def sign_out(self) -> None:
        self._session = None
        self._tenant_config = None

    def show_alert(self, message: str, level: str = "danger") -> Alert:
        """Replace the banner and notify the front-end."""
        self.alert = Alert(message=message, level=level)
        if level == "danger":
            logger.warning(message)
        if self.on_alert:
            self.on_alert(self.alert)
        return self.alert

    def dismiss_alert(self) -> None:
        self.alert = None
