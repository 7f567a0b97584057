"""Mutating account workflows: confirm, call, refresh, notify."""
from __future__ import annotations
import logging
from datetime import date
from typing import Callable, Optional

from .api.client import ApiGateway, NO_CONTENT, UNEXPECTED_RESPONSE_DETAIL
from .api.exceptions import ApiError
from .forms import CreateUserForm, EditUserForm
from .modals import ModalCoordinator, ModalHandle, ModalKind
from .models import AccountDetail, CreateResult, PasswordResetResult
from .search import DirectorySearchService
from .state import ConsoleState

logger = logging.getLogger(__name__)

ConfirmFn = Callable[[str], bool]
ClipboardFn = Callable[[str], None]


def _failure_text(prefix: str, exc: ApiError, include_fields: bool = False) -> str:
    text = f"{prefix}: {exc.display_text}"
    if include_fields and exc.field_errors:
        text = f"{text} {exc.flattened_field_errors()}"
    return text


class ActionDispatcher:
    """Runs the row actions and form submissions of the console.

    Each workflow isolates its own failure: an ``ApiError`` becomes a danger
    alert and is not re-raised. Confirmation is asked before any request of
    a destructive or generative action.
    """

    def __init__(
        self,
        gateway: ApiGateway,
        state: ConsoleState,
        search: DirectorySearchService,
        modals: ModalCoordinator,
        confirm: ConfirmFn,
        clipboard: Optional[ClipboardFn] = None,
        today: Callable[[], date] = date.today,
    ):
        self.gateway = gateway
        self.state = state
        self.search = search
        self.modals = modals
        self.confirm = confirm
        self.clipboard = clipboard
        self.today = today

    # ─────────────────────────────────────────────────────────────────────────
    # Row actions
    # ─────────────────────────────────────────────────────────────────────────
    def unlock(self, sam: str, domain: str) -> bool:
        return self._account_action(
            "/users/unlock", sam, domain,
            prompt=f"Are you sure you want to unlock the account for {sam}?",
            success=f"Successfully unlocked account: {sam}",
            failure="Failed to unlock account",
        )

    def disable(self, sam: str, domain: str) -> bool:
        return self._account_action(
            "/users/disable", sam, domain,
            prompt=f"Are you sure you want to DISABLE the account for {sam}?",
            success=f"Successfully disabled account: {sam}",
            failure="Failed to disable account",
        )

    def enable(self, sam: str, domain: str) -> bool:
        return self._account_action(
            "/users/enable", sam, domain,
            prompt=f"Are you sure you want to ENABLE the account for {sam}?",
            success=f"Successfully enabled account: {sam}",
            failure="Failed to enable account",
        )

    def _account_action(self, endpoint: str, sam: str, domain: str, *, prompt: str, success: str, failure: str) -> bool:
        if not self.confirm(prompt):
            return False
        try:
            self.gateway.post(endpoint, {"domain": domain, "samAccountName": sam})
        except ApiError as exc:
            self.state.show_alert(_failure_text(failure, exc))
            return False
        logger.info(f"{endpoint} succeeded for {domain}\\{sam}")
        self.state.show_alert(success, "success")
        self.search.refresh()
        return True

    def reset_password(self, sam: str, domain: str) -> Optional[ModalHandle]:
        """Generate a new password and show it; the account list is not refreshed."""
        prompt = f"Are you sure you want to reset the password for {sam}? A new random password will be generated."
        if not self.confirm(prompt):
            return None
        try:
            data = self.gateway.post("/users/reset-password", {"domain": domain, "samAccountName": sam})
        except ApiError as exc:
            self.state.show_alert(_failure_text("Failed to reset password", exc))
            return None
        if not isinstance(data, dict) or not data.get("newPassword"):
            self.state.show_alert(f"Failed to reset password: {UNEXPECTED_RESPONSE_DETAIL}")
            return None
        result = PasswordResetResult.from_json(data)
        logger.info(f"Password reset for {domain}\\{result.sam_account_name}")
        return self.modals.open(ModalKind.RESET_PASSWORD_RESULT, result)

    def copy_reset_password(self) -> bool:
        """Copy the password shown in the reset dialog to the clipboard."""
        handle = self.modals.get(ModalKind.RESET_PASSWORD_RESULT)
        if handle is None or not isinstance(handle.payload, PasswordResetResult) or self.clipboard is None:
            return False
        self.clipboard(handle.payload.new_password)
        self.state.show_alert("Password copied to clipboard!", "success")
        return True

    # ─────────────────────────────────────────────────────────────────────────
    # Create
    # ─────────────────────────────────────────────────────────────────────────
    def open_create_form(self) -> ModalHandle:
        """Open a blank create dialog gated on the session's privilege."""
        tenant = self.state.tenant_config
        if tenant is None:
            raise RuntimeError("Cannot open the create form without an active session")
        form = CreateUserForm.blank(tenant, self.state.is_high_privilege, self.today())
        return self.modals.open(ModalKind.CREATE_FORM, form)

    def submit_create(self, form: CreateUserForm) -> Optional[CreateResult]:
        tenant = self.state.tenant_config
        domains = tenant.domains if tenant else []
        if not form.check_validity(self.today(), domains):
            logger.debug(f"Create form rejected locally: {form.errors}")
            return None
        try:
            data = self.gateway.post("/users/create", form.to_payload())
        except ApiError as exc:
            self.state.show_alert(_failure_text("Failed to create user", exc, include_fields=True))
            return None
        result = CreateResult.from_json(data if isinstance(data, dict) else {})
        self.modals.close(ModalKind.CREATE_FORM)
        self.modals.open(ModalKind.CREATE_RESULT, result)
        logger.info(f"Created account {form.sam_account_name} in {form.domain}")
        self.search.refresh()
        return result

    # ─────────────────────────────────────────────────────────────────────────
    # Edit
    # ─────────────────────────────────────────────────────────────────────────
    def open_edit_form(self, sam: str, domain: str) -> Optional[ModalHandle]:
        """Load account detail and open the edit dialog.

        A 204 or empty detail means the account is gone or out of scope: a
        warning is shown and the dialog stays closed.
        """
        with self.modals.scoped(ModalKind.EDIT_FORM) as handle:
            try:
                data = self.gateway.get(f"/users/details/{domain}/{sam}")
            except ApiError as exc:
                self.state.show_alert(_failure_text("Failed to load user details", exc))
                return None
            if data is NO_CONTENT or not data or not isinstance(data, dict):
                self.state.show_alert(
                    f"Could not find details for user '{sam}'. The user may have been deleted "
                    f"or is outside the configured search scope.",
                    "warning",
                )
                return None
            detail = AccountDetail.from_json(data, domain)
            tenant = self.state.tenant_config
            if tenant is None:
                return None
            handle.payload = EditUserForm.from_detail(detail, tenant, self.state.is_high_privilege, self.today())
            handle.show()
        return handle

    def submit_edit(self, form: EditUserForm) -> bool:
        tenant = self.state.tenant_config
        domains = tenant.domains if tenant else []
        if not form.check_validity(self.today(), domains):
            logger.debug(f"Edit form rejected locally: {form.errors}")
            return False
        try:
            self.gateway.put("/users/update", form.to_payload())
        except ApiError as exc:
            self.state.show_alert(_failure_text("Failed to update user", exc, include_fields=True))
            return False
        self.modals.close(ModalKind.EDIT_FORM)
        self.state.show_alert(f"Successfully updated user: {form.sam_account_name}", "success")
        self.search.refresh()
        return True
