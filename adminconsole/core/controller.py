"""Console controller: one instance owns the state and wires the services."""
from __future__ import annotations
import logging
from datetime import date
from typing import Callable, Optional

from adminconsole.config.settings import ConsoleConfig
from .actions import ActionDispatcher, ClipboardFn, ConfirmFn
from .api.client import ApiGateway
from .api.exceptions import ValidationError
from .modals import ModalCoordinator, ModalKind
from .models import Alert, Filter
from .screens import Screen
from .search import DirectorySearchService, RowAction, SearchResult
from .session import SessionController
from .state import ConsoleState

logger = logging.getLogger(__name__)


def _decline(prompt: str) -> bool:
    return False


class ConsoleController:
    """Administration console for directory accounts.

    Usage:
        console = ConsoleController.from_config(load_settings(), confirm=ask_yes_no)
        console.start()
        console.search(Filter(domain="contoso", name_filter="doe"))
        console.dispatch(RowAction.UNLOCK, "jdoe")
    """

    def __init__(
        self,
        gateway: ApiGateway,
        confirm: ConfirmFn = _decline,
        on_alert: Optional[Callable[[Alert], None]] = None,
        clipboard: Optional[ClipboardFn] = None,
        today: Callable[[], date] = date.today,
        healthcheck: bool = True,
        auto_login: bool = True,
    ):
        self.state = ConsoleState(
            Screen.LOADING if auto_login else Screen.LOGIN,
            on_alert=on_alert,
            indicator=gateway.indicator,
        )
        self.gateway = gateway
        self.auto_login_enabled = auto_login
        self.modals = ModalCoordinator()
        self.directory = DirectorySearchService(gateway)
        self.actions = ActionDispatcher(
            gateway, self.state, self.directory, self.modals,
            confirm=confirm, clipboard=clipboard, today=today,
        )
        self.session = SessionController(
            gateway, self.state,
            on_established=self._initial_search,
            on_ended=self._clear_screen_data,
            healthcheck=healthcheck,
        )

    @classmethod
    def from_config(cls, cfg: ConsoleConfig, **kwargs) -> "ConsoleController":
        gateway = ApiGateway(
            cfg.api_base_url,
            timeout=cfg.request_timeout,
            verify_tls=cfg.verify_tls,
            auth_cookie=cfg.auth_cookie,
        )
        kwargs.setdefault("healthcheck", cfg.healthcheck)
        kwargs.setdefault("auto_login", cfg.auto_login)
        return cls(gateway, **kwargs)

    # ─────────────────────────────────────────────────────────────────────────
    # Session
    # ─────────────────────────────────────────────────────────────────────────
    def start(self) -> bool:
        """Startup: silent auto-login when enabled, else show the login screen."""
        if self.auto_login_enabled:
            return self.session.auto_login()
        self.state.screens.show(Screen.LOGIN)
        return False

    def login(self) -> bool:
        return self.session.login()

    def logout(self) -> None:
        self.session.end_session()

    def try_again(self) -> None:
        self.session.try_again()

    @property
    def screen(self) -> Screen:
        return self.state.screens.current

    # ─────────────────────────────────────────────────────────────────────────
    # Search
    # ─────────────────────────────────────────────────────────────────────────
    def search(self, search_filter: Optional[Filter] = None) -> SearchResult:
        """Operator-initiated search; a missing domain is rejected locally."""
        return self.directory.search(search_filter)

    def _initial_search(self, search_filter: Filter) -> None:
        if not search_filter.domain:
            logger.warning("Tenant configuration lists no domains; skipping initial search")
            return
        self.directory.search(search_filter)

    def _clear_screen_data(self) -> None:
        self.directory.reset()
        self.modals.close_all()

    # ─────────────────────────────────────────────────────────────────────────
    # Row actions
    # ─────────────────────────────────────────────────────────────────────────
    def dispatch(self, action: RowAction, sam: str, domain: Optional[str] = None):
        """Route a row button to its workflow.

        The domain defaults to the active filter's domain, read when the
        action fires.
        """
        if domain is None:
            if self.directory.filter is None:
                raise ValidationError({"domain": "Select a domain before acting on an account"})
            domain = self.directory.filter.domain
        handlers = {
            RowAction.EDIT: self.actions.open_edit_form,
            RowAction.RESET_PASSWORD: self.actions.reset_password,
            RowAction.UNLOCK: self.actions.unlock,
            RowAction.DISABLE: self.actions.disable,
            RowAction.ENABLE: self.actions.enable,
        }
        return handlers[action](sam, domain)

    # ─────────────────────────────────────────────────────────────────────────
    # Forms and dialogs
    # ─────────────────────────────────────────────────────────────────────────
    def open_create_form(self):
        if not self.session.main.can_create:
            raise PermissionError("Creating accounts requires a high-privilege session")
        return self.actions.open_create_form()

    def submit_create(self, form):
        return self.actions.submit_create(form)

    def submit_edit(self, form):
        return self.actions.submit_edit(form)

    def copy_reset_password(self) -> bool:
        return self.actions.copy_reset_password()

    def close_dialog(self, kind: ModalKind) -> None:
        self.modals.close(kind)
