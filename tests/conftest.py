"""Shared pytest fixtures."""

import subprocess
from pathlib import Path

import pytest

from screenshot_menu import emit
from screenshot_menu.config import Config


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep tests away from the real home, config file and stderr events."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("XDG_SCREENSHOTS_DIR", raising=False)
    monkeypatch.setenv("SCREENSHOT_MENU_CONFIG", str(tmp_path / "missing-config.yaml"))
    for key in ("GRIMBLAST", "ROFI", "NOTIFY_SEND", "HYPRPICKER", "FREEZE_SCREEN",
                "NOTIFY_TIMEOUT_MS", "DEFAULT_FORMAT", "ROFI_CONFIG"):
        monkeypatch.delenv(f"SCREENSHOT_MENU_{key}", raising=False)
    monkeypatch.setattr(emit, "_stderr_enabled", False)
    monkeypatch.setattr(emit, "_handlers", [])
    return home


@pytest.fixture
def home(isolated_env: Path) -> Path:
    return isolated_env


@pytest.fixture
def config() -> Config:
    return Config()


@pytest.fixture
def events() -> list[dict]:
    """Events emitted during the test."""
    collected: list[dict] = []
    emit.add_handler(collected.append)
    return collected


@pytest.fixture
def notifications(monkeypatch: pytest.MonkeyPatch) -> list[tuple[str, str]]:
    """Capture notify.send calls instead of running notify-send."""
    from screenshot_menu import notify

    sent: list[tuple[str, str]] = []
    monkeypatch.setattr(notify, "send", lambda title, body, config=None: sent.append((title, body)))
    return sent


class FakeProcess:
    """Stand-in for a subprocess.Popen helper."""

    instances: list["FakeProcess"] = []

    def __init__(self, cmd, **kwargs):
        self.cmd = cmd
        self.kwargs = kwargs
        self.pid = 4242
        self.killed = False
        FakeProcess.instances.append(self)

    def kill(self):
        self.killed = True


@pytest.fixture
def fake_popen(monkeypatch: pytest.MonkeyPatch) -> list[FakeProcess]:
    FakeProcess.instances = []
    monkeypatch.setattr(subprocess, "Popen", FakeProcess)
    return FakeProcess.instances


@pytest.fixture
def which(monkeypatch: pytest.MonkeyPatch):
    """Control which programs appear to be on PATH.

    Returns the set of available program names; tests add or remove entries.
    """
    from screenshot_menu import tools

    available = {"grimblast", "rofi", "notify-send", "hyprpicker"}
    monkeypatch.setattr(
        tools.shutil, "which",
        lambda name: f"/usr/bin/{name}" if name in available else None,
    )
    return available
