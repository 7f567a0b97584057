"""Pytest shared fixtures for console tests."""
import pathlib
import sys
from typing import Callable

# Add project root to Python path
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest
import requests

from adminconsole.core.api import ApiGateway
from adminconsole.core.controller import ConsoleController
from tests.helpers.fakes import API_URL, DEFAULT_ME, DEFAULT_SETTINGS, TODAY, FakeApi, Recorder


# ─────────────────────────────────────────────────────────────────────────────
# Network Guard Rails
# ─────────────────────────────────────────────────────────────────────────────
@pytest.fixture(autouse=True)
def _block_real_http(monkeypatch, request):
    """
    Prevent unit tests from reaching a live API.

    Integration tests (@pytest.mark.integration) and loopback tests
    (@pytest.mark.loopback) are allowed to perform real HTTP calls by
    skipping this fixture.
    """
    if request.node.get_closest_marker("integration") or request.node.get_closest_marker("loopback"):
        return

    def _refuse(self, method, url, *args, **kwargs):
        raise RuntimeError(f"Unexpected HTTP {method} in unit test: {url}")

    monkeypatch.setattr(requests.Session, "request", _refuse)


# ─────────────────────────────────────────────────────────────────────────────
# Fake API and Console
# ─────────────────────────────────────────────────────────────────────────────
@pytest.fixture()
def fake_api():
    api = FakeApi()
    api.add("GET", "/healthcheck", {"status": "Healthy"})
    api.add("GET", "/auth/me", DEFAULT_ME)
    api.add("GET", "/config/settings", DEFAULT_SETTINGS)
    api.add("GET", "/users/list", [])
    return api


@pytest.fixture()
def gateway(fake_api):
    gw = ApiGateway(API_URL)
    gw.http.request = fake_api
    return gw


@pytest.fixture()
def ui():
    return Recorder()


@pytest.fixture()
def make_console(gateway, ui) -> Callable[..., ConsoleController]:
    def _make(**kwargs) -> ConsoleController:
        kwargs.setdefault("confirm", ui.confirm)
        kwargs.setdefault("on_alert", ui.alerts.append)
        kwargs.setdefault("clipboard", ui.copy)
        kwargs.setdefault("today", lambda: TODAY)
        return ConsoleController(gateway, **kwargs)
    return _make


@pytest.fixture()
def console(make_console, fake_api):
    """Console with an established high-privilege session; call log cleared."""
    ctl = make_console()
    assert ctl.start() is True
    fake_api.calls.clear()
    return ctl
