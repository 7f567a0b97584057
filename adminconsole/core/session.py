"""Operator session lifecycle: identity, tenant settings and screen flow."""
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

from .api.client import ApiGateway
from .api.exceptions import ApiError
from .models import Filter, Session, TenantConfig
from .screens import Screen
from .state import ConsoleState

logger = logging.getLogger(__name__)

ACCESS_DENIED_TITLE = "Access Denied"
ACCESS_DENIED_FALLBACK = "You are not authorized to access this portal."
CONNECTION_ERROR_TITLE = "Connection Error"


@dataclass
class MainScreenContext:
    """What the main screen shows once a session is established"""
    user_name: str = ""
    domains: list[str] = field(default_factory=list)
    selected_domain: str = ""
    can_create: bool = False


class SessionController:
    """Resolves the caller and tenant settings and drives the screen machine.

    Failure presentation is the only difference between the two entry
    points: ``auto_login`` falls back silently to the login screen, while
    ``login`` shows the error screen with the failure detail. The liveness
    healthcheck, when enabled, runs before both and always reports a connection
    error.
    """

    def __init__(
        self,
        gateway: ApiGateway,
        state: ConsoleState,
        on_established: Callable[[Filter], None],
        on_ended: Optional[Callable[[], None]] = None,
        healthcheck: bool = True,
    ):
        self.gateway = gateway
        self.state = state
        self.on_established = on_established
        self.on_ended = on_ended
        self.healthcheck = healthcheck
        self.main = MainScreenContext()

    def auto_login(self) -> bool:
        self.state.screens.show(Screen.LOADING)
        return self.establish_session(interactive=False)

    def login(self) -> bool:
        return self.establish_session(interactive=True)

    def establish_session(self, interactive: bool) -> bool:
        """Check liveness, authenticate and load tenant settings.

        Args:
            interactive: True for an operator-initiated login

        Returns:
            True when the main screen is active
        """
        if self.healthcheck:
            try:
                self.gateway.get("/healthcheck")
            except ApiError as exc:
                self.state.sign_out()
                logger.warning(f"API healthcheck failed: {exc.display_text}")
                self.state.screens.show_error(
                    CONNECTION_ERROR_TITLE,
                    f"Could not connect to the API. {exc.display_text}",
                )
                return False

        try:
            session = Session.from_json(self.gateway.get("/auth/me") or {})
            tenant = TenantConfig.from_json(self.gateway.get("/config/settings") or {})
        except ApiError as exc:
            self.state.sign_out()
            logger.info(f"Session not established ({'login' if interactive else 'auto'}): {exc.display_text}")
            if interactive:
                self.state.screens.show_error(ACCESS_DENIED_TITLE, exc.detail or exc.message or ACCESS_DENIED_FALLBACK)
            else:
                self.state.screens.show(Screen.LOGIN)
            return False

        self.state.sign_in(session, tenant)
        self.main = MainScreenContext(
            user_name=session.name,
            domains=list(tenant.domains),
            selected_domain=tenant.domains[0] if tenant.domains else "",
            can_create=session.is_high_privilege,
        )
        logger.info(f"Session established for {session.name} (high privilege: {session.is_high_privilege})")
        self.state.screens.show(Screen.MAIN)
        self.on_established(Filter(domain=self.main.selected_domain))
        return True

    def end_session(self) -> None:
        """Local logout: no network call is made."""
        self.state.sign_out()
        self.state.dismiss_alert()
        self.main = MainScreenContext()
        if self.on_ended:
            self.on_ended()
        self.state.screens.show(Screen.LOGIN)

    def try_again(self) -> None:
        self.state.screens.show(Screen.LOGIN)
