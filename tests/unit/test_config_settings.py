import pytest

from adminconsole.config import settings

CONSOLE_VARS = [
    "CONSOLE_API_BASE_URL",
    "CONSOLE_REQUEST_TIMEOUT",
    "CONSOLE_AUTO_LOGIN",
    "CONSOLE_HEALTHCHECK",
    "CONSOLE_VERIFY_TLS",
    "CONSOLE_AUTH_COOKIE_NAME",
    "CONSOLE_AUTH_COOKIE",
    "CONSOLE_LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for var in CONSOLE_VARS:
        monkeypatch.delenv(var, raising=False)

    # Point /run/secrets to an empty temp directory
    real_path = settings.Path

    def fake_path(target):
        if str(target) == "/run/secrets":
            return tmp_path
        return real_path(target)

    monkeypatch.setattr(settings, "Path", fake_path)
    return tmp_path


def test_defaults():
    cfg = settings.load_settings()
    assert cfg.api_base_url == "http://localhost:5000/api"
    assert cfg.request_timeout == 15.0
    assert cfg.auto_login is True
    assert cfg.healthcheck is True
    assert cfg.verify_tls is True
    assert cfg.auth_cookie is None
    assert cfg.log_level == "WARNING"


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("CONSOLE_API_BASE_URL", "https://admin.example.com/api/")
    monkeypatch.setenv("CONSOLE_REQUEST_TIMEOUT", "30")
    monkeypatch.setenv("CONSOLE_AUTO_LOGIN", "false")
    monkeypatch.setenv("CONSOLE_HEALTHCHECK", "False")
    monkeypatch.setenv("CONSOLE_LOG_LEVEL", "debug")

    cfg = settings.load_settings()

    assert cfg.api_base_url == "https://admin.example.com/api"
    assert cfg.request_timeout == 30.0
    assert cfg.auto_login is False
    assert cfg.healthcheck is False
    assert cfg.log_level == "DEBUG"


@pytest.mark.parametrize("url", ["localhost:5000/api", "ftp://example.com"])
def test_rejects_non_http_url(monkeypatch, url):
    monkeypatch.setenv("CONSOLE_API_BASE_URL", url)
    with pytest.raises(RuntimeError):
        settings.load_settings()


@pytest.mark.parametrize("timeout", ["soon", "0", "-5"])
def test_rejects_invalid_timeout(monkeypatch, timeout):
    monkeypatch.setenv("CONSOLE_REQUEST_TIMEOUT", timeout)
    with pytest.raises(RuntimeError):
        settings.load_settings()


def test_auth_cookie_reads_from_run_secrets(monkeypatch, clean_env):
    (clean_env / "console_auth_cookie").write_text("file-cookie\n")
    monkeypatch.setenv("CONSOLE_AUTH_COOKIE_NAME", "ConsoleAuth")
    monkeypatch.setenv("CONSOLE_AUTH_COOKIE", "env-cookie")

    cfg = settings.load_settings()

    assert cfg.auth_cookie == ("ConsoleAuth", "file-cookie")


def test_auth_cookie_falls_back_to_env(monkeypatch):
    monkeypatch.setenv("CONSOLE_AUTH_COOKIE_NAME", "ConsoleAuth")
    monkeypatch.setenv("CONSOLE_AUTH_COOKIE", "env-cookie")

    assert settings.load_settings().auth_cookie == ("ConsoleAuth", "env-cookie")


def test_auth_cookie_requires_name(monkeypatch):
    monkeypatch.setenv("CONSOLE_AUTH_COOKIE", "env-cookie")
    cfg = settings.load_settings()
    assert cfg.auth_cookie_value == ""
    assert cfg.auth_cookie is None


def test_read_secret_missing_returns_none():
    assert settings._read_secret("nothing_here", "CONSOLE_AUTH_COOKIE") is None
