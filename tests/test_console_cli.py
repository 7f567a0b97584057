import pytest
import requests

import scripts.console as console_cli
from tests.helpers.fakes import API_URL, DEFAULT_ME, DEFAULT_SETTINGS, StubResponse


@pytest.fixture(autouse=True)
def cli_env(monkeypatch, fake_api, _block_real_http):
    """Route the CLI's real requests.Session through the fake API."""
    for var in ("CONSOLE_AUTH_COOKIE_NAME", "CONSOLE_AUTO_LOGIN", "CONSOLE_LOG_LEVEL", "CONSOLE_REQUEST_TIMEOUT",
                "CONSOLE_HEALTHCHECK", "CONSOLE_VERIFY_TLS"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("CONSOLE_API_BASE_URL", API_URL)

    def fake_request(self, method, url, **kwargs):
        return fake_api(method, url, **kwargs)

    monkeypatch.setattr(requests.Session, "request", fake_request)
    return fake_api


def test_no_command_prints_help(capsys, fake_api):
    assert console_cli.main([]) == 0
    assert "usage" in capsys.readouterr().out
    assert fake_api.calls == []


def test_whoami(capsys):
    assert console_cli.main(["whoami"]) == 0
    out = capsys.readouterr().out
    assert "Jane Operator (high privilege: yes)" in out
    assert "Domains: contoso, fabrikam" in out


def test_login_failure_exits_non_zero(capsys, fake_api):
    fake_api.add("GET", "/auth/me", StubResponse(status_code=401, text=""))

    assert console_cli.main(["whoami"]) == 1
    assert "Access Denied: Authentication failed." in capsys.readouterr().err


def test_search_prints_table(capsys, fake_api):
    fake_api.add("GET", "/users/list", [
        {"displayName": "John Doe", "samAccountName": "jdoe", "enabled": True, "accountExpirationDate": None},
    ])

    assert console_cli.main(["search", "--domain", "fabrikam", "--name", "doe", "--admin", "no"]) == 0

    out = capsys.readouterr().out
    assert "jdoe" in out and "Never" in out and "disable" in out
    assert fake_api.calls_to("/users/list")[-1]["params"] == {
        "domain": "fabrikam", "nameFilter": "doe", "hasAdminAccount": "false",
    }


def test_api_url_option_overrides_environment(fake_api):
    other = "http://other.test/api"
    fake_api.add("GET", f"{other}/auth/me", DEFAULT_ME)
    fake_api.add("GET", f"{other}/config/settings", DEFAULT_SETTINGS)
    fake_api.add("GET", f"{other}/users/list", [])

    assert console_cli.main(["--api-url", other, "--no-healthcheck", "whoami"]) == 0
    assert fake_api.calls[0]["path"] == "http://other.test/api/auth/me"


def test_unlock_with_yes_skips_prompt(monkeypatch, capsys, fake_api):
    fake_api.add("POST", "/users/unlock", {"message": "ok"})
    monkeypatch.setattr("builtins.input", lambda prompt: pytest.fail("should not prompt"))

    assert console_cli.main(["unlock", "--username", "jdoe", "--yes"]) == 0

    assert fake_api.calls_to("/users/unlock")[0]["body"] == {"domain": "contoso", "samAccountName": "jdoe"}
    assert "Successfully unlocked account: jdoe" in capsys.readouterr().out


def test_declined_disable_makes_no_request(monkeypatch, fake_api):
    monkeypatch.setattr("builtins.input", lambda prompt: "n")

    assert console_cli.main(["disable", "--username", "jdoe"]) == 1
    assert fake_api.calls_to("/users/disable") == []


def test_reset_password_prints_new_password(capsys, fake_api):
    fake_api.add("POST", "/users/reset-password", {"samAccountName": "jdoe", "newPassword": "Xy7!qRt2"})

    assert console_cli.main(["reset-password", "--username", "jdoe", "--yes"]) == 0
    assert "New password for jdoe: Xy7!qRt2" in capsys.readouterr().out


def test_create_reports_invalid_fields(capsys, fake_api):
    assert console_cli.main(
        ["create", "--username", "bad/name", "--first", "Mary", "--last", "Major"]
    ) == 1
    assert "sam_account_name" in capsys.readouterr().err
    assert fake_api.calls_to("/users/create") == []


def test_create_prints_credentials(capsys, fake_api):
    fake_api.add("POST", "/users/create", {
        "message": "User created",
        "userAccount": {"samAccountName": "mmajor", "displayName": "Mary Major", "initialPassword": "P@ss1"},
        "groupsAssociated": ["VPN Users"],
    })

    assert console_cli.main(
        ["create", "--username", "mmajor", "--first", "Mary", "--last", "Major", "--group", "VPN Users"]
    ) == 0

    out = capsys.readouterr().out
    assert "temporary password: P@ss1" in out
    assert fake_api.calls_to("/users/create")[0]["body"]["optionalGroups"] == ["VPN Users"]


def test_edit_missing_user_exits_non_zero(capsys, fake_api):
    fake_api.add("GET", "/users/details/contoso/gone", StubResponse(status_code=204))

    assert console_cli.main(["edit", "--username", "gone", "--first", "Ghost"]) == 1
    assert "Could not find details for user 'gone'" in capsys.readouterr().out
