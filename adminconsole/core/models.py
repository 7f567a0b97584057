"""Data models exchanged with the administrative API."""
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Optional


def parse_api_date(value: Any) -> Optional[date]:
    """Parse an API date or timestamp ("2025-06-30" or "2025-06-30T00:00:00Z")."""
    if not value or not isinstance(value, str):
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def format_display_date(value: Optional[date]) -> str:
    """Expiration column text."""
    return value.isoformat() if value else "Never"


class StatusFilter(Enum):
    """Account status constraint for searches"""
    ENABLED = "enabled"
    DISABLED = "disabled"


@dataclass(frozen=True)
class Session:
    """Authenticated operator as asserted by the identity endpoint"""
    name: str
    is_high_privilege: bool = False

    @classmethod
    def from_json(cls, data: dict) -> "Session":
        return cls(name=data.get("name") or "", is_high_privilege=bool(data.get("isHighPrivilege")))


@dataclass(frozen=True)
class TenantConfig:
    """Tenant settings fetched once per login"""
    domains: list[str] = field(default_factory=list)
    optional_groups_for_high_privilege: list[str] = field(default_factory=list)

    @classmethod
    def from_json(cls, data: dict) -> "TenantConfig":
        groups: list[str] = []
        for group in data.get("optionalGroupsForHighPrivilege") or []:
            if group not in groups:
                groups.append(group)
        return cls(domains=list(data.get("domains") or []), optional_groups_for_high_privilege=groups)


@dataclass(frozen=True)
class AccountSummary:
    """One row of a directory search"""
    display_name: str
    sam_account_name: str
    domain: str
    enabled: bool = False
    has_admin_account: bool = False
    account_expiration_date: Optional[date] = None

    @classmethod
    def from_json(cls, data: dict, domain: str) -> "AccountSummary":
        return cls(
            display_name=data.get("displayName") or "",
            sam_account_name=data.get("samAccountName") or "",
            domain=domain,
            enabled=bool(data.get("enabled")),
            has_admin_account=bool(data.get("hasAdminAccount")),
            account_expiration_date=parse_api_date(data.get("accountExpirationDate")),
        )


@dataclass(frozen=True)
class AccountDetail(AccountSummary):
    """Full account record loaded for the edit form"""
    given_name: str = ""
    surname: str = ""
    member_of: frozenset[str] = frozenset()

    @classmethod
    def from_json(cls, data: dict, domain: str) -> "AccountDetail":
        summary = AccountSummary.from_json(data, domain)
        return cls(
            display_name=summary.display_name,
            sam_account_name=summary.sam_account_name,
            domain=domain,
            enabled=summary.enabled,
            has_admin_account=summary.has_admin_account,
            account_expiration_date=summary.account_expiration_date,
            given_name=data.get("givenName") or "",
            surname=data.get("sn") or "",
            member_of=frozenset(data.get("memberOf") or []),
        )


@dataclass(frozen=True)
class Filter:
    """Search constraints; only ``domain`` is mandatory"""
    domain: str = ""
    name_filter: Optional[str] = None
    status_filter: Optional[StatusFilter] = None
    admin_filter: Optional[bool] = None

    def to_params(self) -> dict[str, str]:
        """Query string for ``/users/list``; absent constraints are omitted."""
        params = {"domain": self.domain}
        if self.name_filter:
            params["nameFilter"] = self.name_filter
        if self.status_filter is not None:
            params["statusFilter"] = self.status_filter.value
        if self.admin_filter is not None:
            params["hasAdminAccount"] = "true" if self.admin_filter else "false"
        return params


@dataclass(frozen=True)
class CreatedAccount:
    """Identity provisioned by a create call"""
    sam_account_name: str
    display_name: str
    initial_password: str

    @classmethod
    def from_json(cls, data: Optional[dict]) -> Optional["CreatedAccount"]:
        if not data:
            return None
        return cls(
            sam_account_name=data.get("samAccountName") or "",
            display_name=data.get("displayName") or "",
            initial_password=data.get("initialPassword") or "",
        )


@dataclass(frozen=True)
class CreateResult:
    message: str = ""
    user_account: Optional[CreatedAccount] = None
    admin_account: Optional[CreatedAccount] = None
    groups_associated: list[str] = field(default_factory=list)

    @classmethod
    def from_json(cls, data: dict) -> "CreateResult":
        return cls(
            message=data.get("message") or "",
            user_account=CreatedAccount.from_json(data.get("userAccount")),
            admin_account=CreatedAccount.from_json(data.get("adminAccount")),
            groups_associated=list(data.get("groupsAssociated") or []),
        )


@dataclass(frozen=True)
class PasswordResetResult:
    sam_account_name: str
    new_password: str

    @classmethod
    def from_json(cls, data: dict) -> "PasswordResetResult":
        return cls(sam_account_name=data.get("samAccountName") or "", new_password=data.get("newPassword") or "")


@dataclass(frozen=True)
class Alert:
    """Dismissible banner; a new alert replaces the previous one"""
    message: str
    level: str = "danger"
