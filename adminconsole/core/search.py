"""Directory search and result-row rendering."""
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .api.client import ApiGateway, UNEXPECTED_RESPONSE_DETAIL
from .api.exceptions import ApiError, ValidationError
from .models import AccountSummary, Filter, format_display_date

logger = logging.getLogger(__name__)

RESULT_COLUMNS = 7
SEARCHING_TEXT = "Searching..."
NO_RESULTS_TEXT = "No users found."


class RowAction(Enum):
    EDIT = "edit"
    RESET_PASSWORD = "reset-pw"
    UNLOCK = "unlock"
    DISABLE = "disable"
    ENABLE = "enable"


class ToggleAction(Enum):
    """The one status-dependent affordance of a row"""
    DISABLE = RowAction.DISABLE
    ENABLE = RowAction.ENABLE

    @classmethod
    def for_account(cls, enabled: bool) -> "ToggleAction":
        return cls.DISABLE if enabled else cls.ENABLE


ALWAYS_PRESENT = (RowAction.EDIT, RowAction.RESET_PASSWORD, RowAction.UNLOCK)


def row_actions(account: AccountSummary) -> tuple[RowAction, ...]:
    return ALWAYS_PRESENT + (ToggleAction.for_account(account.enabled).value,)


@dataclass(frozen=True)
class AccountRow:
    """Rendered result row"""
    account: AccountSummary
    actions: tuple[RowAction, ...]

    @classmethod
    def render(cls, account: AccountSummary) -> "AccountRow":
        return cls(account=account, actions=row_actions(account))

    @property
    def cells(self) -> tuple[str, ...]:
        acc = self.account
        return (
            acc.display_name,
            acc.sam_account_name,
            acc.domain,
            "Enabled" if acc.enabled else "Disabled",
            "✔" if acc.has_admin_account else "",
            format_display_date(acc.account_expiration_date),
        )


@dataclass(frozen=True)
class SearchResult:
    """Snapshot of the result area: rows, or a single placeholder spanning all columns."""
    rows: tuple[AccountRow, ...] = ()
    placeholder: Optional[str] = None
    failed: bool = False
    colspan: int = field(default=RESULT_COLUMNS)

    @property
    def accounts(self) -> list[AccountSummary]:
        return [row.account for row in self.rows]


class DirectorySearchService:
    """Runs account searches and owns the active filter and result snapshot."""

    def __init__(self, gateway: ApiGateway):
        self.gateway = gateway
        self.filter: Optional[Filter] = None
        self.result = SearchResult()

    def search(self, search_filter: Optional[Filter] = None) -> SearchResult:
        """Query ``/users/list`` and replace the result snapshot.

        Args:
            search_filter: New constraints; the active filter is reused when omitted

        Returns:
            The new result snapshot

        Raises:
            ValidationError: If no domain is selected (no request is made)
        """
        active = search_filter if search_filter is not None else self.filter
        if active is None or not active.domain:
            raise ValidationError({"domain": "Select a domain before searching"})

        self.filter = active
        self.result = SearchResult(placeholder=SEARCHING_TEXT)
        try:
            users = self.gateway.get("/users/list", params=active.to_params())
        except ApiError as exc:
            logger.info(f"Search in {active.domain} failed: {exc.display_text}")
            self.result = SearchResult(placeholder=f"Failed to load users: {exc.display_text}", failed=True)
            return self.result

        if not users:
            self.result = SearchResult(placeholder=NO_RESULTS_TEXT)
            return self.result
        if not isinstance(users, list) or not all(isinstance(user, dict) for user in users):
            logger.warning(f"Search in {active.domain} returned an unexpected payload: {type(users).__name__}")
            self.result = SearchResult(placeholder=f"Failed to load users: {UNEXPECTED_RESPONSE_DETAIL}", failed=True)
            return self.result

        rows = tuple(AccountRow.render(AccountSummary.from_json(user, active.domain)) for user in users)
        self.result = SearchResult(rows=rows)
        logger.debug(f"Search in {active.domain} returned {len(rows)} row(s)")
        return self.result

    def refresh(self) -> Optional[SearchResult]:
        """Re-run the active filter; no-op when nothing has been searched yet."""
        if self.filter is None:
            return None
        return self.search()

    def reset(self) -> None:
        self.filter = None
        self.result = SearchResult()
