"""Input validation helpers for account forms."""
from __future__ import annotations
from datetime import date
from typing import Optional

SAM_ACCOUNT_NAME_MAX = 20
NAME_MAX_LENGTH = 64
SAM_INVALID_CHARS = set('"/\\[]:;|=,+*?<>@')


def one_year_from(today: date) -> date:
    """Same calendar day next year (Feb 29 maps to Feb 28)."""
    try:
        return today.replace(year=today.year + 1)
    except ValueError:
        return today.replace(year=today.year + 1, day=28)


def expiration_bounds(today: date) -> tuple[date, date]:
    """Inclusive window an account expiration date may be set to."""
    return today, one_year_from(today)


def normalize_sam_account_name(raw: str) -> str:
    """Normalize and validate a directory logon name.

    Args:
        raw: Raw account name input

    Returns:
        Trimmed account name

    Raises:
        ValueError: If the account name is invalid
    """
    normalized = (raw or "").strip()
    if not normalized:
        raise ValueError("Username is required")
    if len(normalized) > SAM_ACCOUNT_NAME_MAX:
        raise ValueError(f"Username must not exceed {SAM_ACCOUNT_NAME_MAX} characters")
    if any(char in SAM_INVALID_CHARS for char in normalized) or normalized.endswith("."):
        raise ValueError("Username contains invalid characters")
    return normalized


def clean_person_name(value: str, label: str) -> str:
    """Trimmed given name or surname; ``label`` starts the error message."""
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValueError(f"{label} is required")
    if len(cleaned) > NAME_MAX_LENGTH:
        raise ValueError(f"{label} must not exceed {NAME_MAX_LENGTH} characters")
    return cleaned


def validate_expiration(value: Optional[date], today: date) -> date:
    """Check that an expiration date lies between today and one year from today.

    Raises:
        ValueError: If the date is missing or outside the window
    """
    if value is None:
        raise ValueError("Expiration date is required")
    earliest, latest = expiration_bounds(today)
    if value < earliest:
        raise ValueError(f"Expiration date cannot be before {earliest.isoformat()}")
    if value > latest:
        raise ValueError(f"Expiration date cannot be after {latest.isoformat()}")
    return value


def validate_domain(domain: str, domains: list[str]) -> str:
    """Require a domain from the tenant configuration."""
    if not domain:
        raise ValueError("Domain is required")
    if domains and domain not in domains:
        raise ValueError(f"Unknown domain '{domain}'")
    return domain


def parse_form_date(raw: str) -> Optional[date]:
    """Parse a YYYY-MM-DD form value; blank yields None."""
    raw = (raw or "").strip()
    if not raw:
        return None
    try:
        return date.fromisoformat(raw)
    except ValueError:
        raise ValueError("Expiration date must be formatted YYYY-MM-DD")

