"""Settings loader with environment variable and Docker secrets integration."""
from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_API_BASE_URL = "http://localhost:5000/api"
DEFAULT_REQUEST_TIMEOUT = 15.0
SECRETS_DIR = "/run/secrets"


def _read_secret(secret_name: str, env_var: str | None = None) -> str | None:
    """Docker secret mounted under /run/secrets wins over the environment variable."""
    mounted = Path(SECRETS_DIR) / secret_name
    if mounted.is_file():
        try:
            value = mounted.read_text().strip()
        except OSError as exc:
            logger.warning(f"Ignoring unreadable secret {mounted}: {exc}")
            value = ""
        if value:
            logger.debug(f"Using {secret_name} from {SECRETS_DIR}")
            return value

    value = os.getenv(env_var, "").strip() if env_var else ""
    return value or None


def _env_flag(var_name: str, default: bool) -> bool:
    return os.environ.get(var_name, str(default)).strip().lower() == "true"


@dataclass
class ConsoleConfig:
    """Console configuration container."""
    api_base_url: str = DEFAULT_API_BASE_URL
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    auto_login: bool = True
    healthcheck: bool = True
    verify_tls: bool = True

    # Pre-provisioned authentication cookie (optional)
    auth_cookie_name: str = ""
    auth_cookie_value: str = ""

    log_level: str = "WARNING"

    @property
    def auth_cookie(self) -> Optional[tuple[str, str]]:
        """Cookie to seed into the transport, when both name and value are set."""
        if self.auth_cookie_name and self.auth_cookie_value:
            return self.auth_cookie_name, self.auth_cookie_value
        return None


def load_settings() -> ConsoleConfig:
    """Load console settings from environment and /run/secrets."""
    api_base_url = os.environ.get("CONSOLE_API_BASE_URL", DEFAULT_API_BASE_URL).strip().rstrip("/")
    if not api_base_url.startswith(("http://", "https://")):
        raise RuntimeError(f"CONSOLE_API_BASE_URL must be an http(s) URL, got '{api_base_url}'")

    raw_timeout = os.environ.get("CONSOLE_REQUEST_TIMEOUT", str(DEFAULT_REQUEST_TIMEOUT))
    try:
        request_timeout = float(raw_timeout)
    except ValueError:
        raise RuntimeError(f"CONSOLE_REQUEST_TIMEOUT must be a number of seconds, got '{raw_timeout}'")
    if request_timeout <= 0:
        raise RuntimeError("CONSOLE_REQUEST_TIMEOUT must be positive")

    auth_cookie_name = os.environ.get("CONSOLE_AUTH_COOKIE_NAME", "").strip()
    auth_cookie_value = ""
    if auth_cookie_name:
        auth_cookie_value = _read_secret("console_auth_cookie", "CONSOLE_AUTH_COOKIE") or ""
        if not auth_cookie_value:
            logger.warning("CONSOLE_AUTH_COOKIE_NAME is set but no cookie value was found")

    cfg = ConsoleConfig(
        api_base_url=api_base_url,
        request_timeout=request_timeout,
        auto_login=_env_flag("CONSOLE_AUTO_LOGIN", True),
        healthcheck=_env_flag("CONSOLE_HEALTHCHECK", True),
        verify_tls=_env_flag("CONSOLE_VERIFY_TLS", True),
        auth_cookie_name=auth_cookie_name,
        auth_cookie_value=auth_cookie_value,
        log_level=os.environ.get("CONSOLE_LOG_LEVEL", "WARNING").strip().upper() or "WARNING",
    )
    logger.info(f"API={cfg.api_base_url}; timeout={cfg.request_timeout}s; healthcheck={cfg.healthcheck}")
    if not cfg.verify_tls:
        logger.warning("TLS verification disabled. Do not use against production endpoints.")
    return cfg
