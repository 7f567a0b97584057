"""Create and edit form models with local validity checks."""
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from . import validators
from .models import AccountDetail, TenantConfig


@dataclass
class AccountForm:
    """Fields shared by the create and edit dialogs.

    ``show_privileged`` controls whether the admin-account toggle and the
    optional-group checklist exist at all; when False they are neither shown
    nor sent.
    """
    domain: str = ""
    first_name: str = ""
    last_name: str = ""
    sam_account_name: str = ""
    account_expiration_date: Optional[date] = None
    admin_account: bool = False
    available_groups: list[str] = field(default_factory=list)
    selected_groups: list[str] = field(default_factory=list)
    show_privileged: bool = False
    min_expiration: Optional[date] = None
    max_expiration: Optional[date] = None
    was_validated: bool = False
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def show_groups(self) -> bool:
        return self.show_privileged and bool(self.available_groups)

    def set_window(self, today: date) -> None:
        self.min_expiration, self.max_expiration = validators.expiration_bounds(today)

    def select_groups(self, groups: list[str]) -> None:
        """Check the given groups; groups not offered to the operator are ignored."""
        self.selected_groups = [g for g in self.available_groups if g in set(groups)]

    def check_validity(self, today: date, domains: list[str]) -> bool:
        """Run local checks, marking the form validated; True when valid."""
        errors: dict[str, str] = {}
        checks = (
            ("domain", lambda: validators.validate_domain(self.domain, domains)),
            ("first_name", lambda: validators.clean_person_name(self.first_name, "First name")),
            ("last_name", lambda: validators.clean_person_name(self.last_name, "Last name")),
            ("sam_account_name", lambda: validators.normalize_sam_account_name(self.sam_account_name)),
            ("account_expiration_date", lambda: validators.validate_expiration(self.account_expiration_date, today)),
        )
        for name, check in checks:
            try:
                check()
            except ValueError as exc:
                errors[name] = str(exc)
        self.errors = errors
        self.was_validated = True
        return not errors

    def _privileged_fields(self, admin_key: str) -> dict:
        if not self.show_privileged:
            return {}
        groups = self.selected_groups if self.show_groups else []
        return {"optionalGroups": list(groups), admin_key: self.admin_account}

    def _expiration_text(self) -> Optional[str]:
        return self.account_expiration_date.isoformat() if self.account_expiration_date else None


@dataclass
class CreateUserForm(AccountForm):

    @classmethod
    def blank(cls, tenant: TenantConfig, high_privilege: bool, today: date) -> "CreateUserForm":
        form = cls(
            domain=tenant.domains[0] if tenant.domains else "",
            available_groups=list(tenant.optional_groups_for_high_privilege) if high_privilege else [],
            show_privileged=high_privilege,
        )
        form.set_window(today)
        form.account_expiration_date = form.max_expiration
        return form

    def to_payload(self) -> dict:
        payload = {
            "domain": self.domain,
            "firstName": self.first_name.strip(),
            "lastName": self.last_name.strip(),
            "samAccountName": self.sam_account_name.strip(),
        }
        payload.update(self._privileged_fields("createAdminAccount"))
        payload["accountExpirationDate"] = self._expiration_text()
        return payload


@dataclass
class EditUserForm(AccountForm):
    display_name: str = ""

    @classmethod
    def from_detail(
        cls, detail: AccountDetail, tenant: TenantConfig, high_privilege: bool, today: date
    ) -> "EditUserForm":
        form = cls(
            domain=detail.domain,
            sam_account_name=detail.sam_account_name,
            display_name=detail.sam_account_name,
            first_name=detail.given_name,
            last_name=detail.surname,
            show_privileged=high_privilege,
        )
        form.set_window(today)
        form.account_expiration_date = detail.account_expiration_date or form.max_expiration
        if high_privilege:
            form.admin_account = detail.has_admin_account
            form.available_groups = list(tenant.optional_groups_for_high_privilege)
            form.select_groups(sorted(detail.member_of))
        return form

    def to_payload(self) -> dict:
        payload = {
            "domain": self.domain,
            "samAccountName": self.sam_account_name,
            "firstName": self.first_name.strip(),
            "lastName": self.last_name.strip(),
        }
        payload.update(self._privileged_fields("manageAdminAccount"))
        payload["accountExpirationDate"] = self._expiration_text()
        return payload
