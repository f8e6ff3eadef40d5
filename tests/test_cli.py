"""Tests for the command-line entry point."""

import errno
import json
import logging
from pathlib import Path

import pytest

from screenshot_menu import capture as capture_mod
from screenshot_menu import cli, menu
from screenshot_menu.capture import CaptureError, DestinationMode, ImageFormat, RegionMode
from screenshot_menu.menu import PromptCancelled


@pytest.fixture
def captures(monkeypatch):
    requests = []

    def fake_capture(request, config=None):
        requests.append(request)
        return request.target_dir / "screenshot.png"

    monkeypatch.setattr(cli, "capture", fake_capture)
    return requests


@pytest.fixture
def interactive_runs(monkeypatch):
    runs = []

    def fake_run(target_dir, image_format=ImageFormat.PNG, rofi_config=None, config=None):
        runs.append((target_dir, image_format, rofi_config))
        return None

    monkeypatch.setattr(cli, "run_interactive", fake_run)
    return runs


def test_instant_full_screen_save(tmp_path, which, captures, interactive_runs):
    assert cli.main(["--instant", "--no-events", str(tmp_path / "shots")]) == 0

    request = captures[0]
    assert request.region is RegionMode.FULL_SCREEN
    assert request.destination is DestinationMode.SAVE
    assert request.target_dir == tmp_path / "shots"
    assert request.target_dir.is_dir()
    assert interactive_runs == []


def test_instant_area(which, captures, interactive_runs, home):
    assert cli.main(["--instant-area", "--no-events"]) == 0
    assert captures[0].region is RegionMode.AREA_SELECTION
    assert captures[0].destination is DestinationMode.SAVE
    assert captures[0].target_dir == home / "Pictures"
    assert interactive_runs == []


def test_interactive_is_default(which, captures, interactive_runs, home, monkeypatch):
    monkeypatch.setenv("XDG_SCREENSHOTS_DIR", "$HOME/Screens")
    assert cli.main(["--no-events", "--format", "JPEG", "--rofi-config", "/tmp/shot.rasi"]) == 0

    assert captures == []
    assert interactive_runs == [(home / "Screens", ImageFormat.JPEG, Path("/tmp/shot.rasi"))]


def test_explicit_interactive_flag(which, interactive_runs):
    assert cli.main(["--interactive", "--no-events"]) == 0
    assert interactive_runs[0][1] is ImageFormat.PNG


def test_instant_modes_are_exclusive(capsys):
    with pytest.raises(SystemExit):
        cli.main(["--instant", "--instant-area"])


def test_missing_tool_aborts_before_capture(which, captures, interactive_runs, events):
    which.discard("grimblast")
    assert cli.main(["--instant"]) == 1
    assert captures == []
    assert interactive_runs == []
    errors = [e for e in events if e["event_type"] == "error.handled"]
    assert errors[0]["data"]["error_type"] == "MissingToolError"


def test_missing_freeze_helper_is_fine(which, captures):
    which.discard("hyprpicker")
    assert cli.main(["--instant-area", "--no-events"]) == 0


def test_capture_error_exit_status(which, monkeypatch, events):
    def failing(request, config=None):
        raise CaptureError("grimblast failed (exit 1)")

    monkeypatch.setattr(cli, "capture", failing)
    assert cli.main(["--instant"]) == 1

    completed = [e for e in events if e["event_type"] == "operation.completed"]
    assert completed[0]["data"]["success"] is False
    assert completed[0]["data"]["error_message"] == "grimblast failed (exit 1)"


def test_cancelled_menu_exit_status(which, monkeypatch):
    def cancelled(*args, **kwargs):
        raise PromptCancelled("Take screenshot")

    monkeypatch.setattr(cli, "run_interactive", cancelled)
    assert cli.main(["--no-events"]) == 1


def test_operation_events(which, captures, events):
    cli.main(["--instant"])
    types = [e["event_type"] for e in events]
    assert types == ["config.resolved", "operation.started", "operation.completed"]
    assert events[2]["data"]["success"] is True
    assert events[1]["data"]["operation_id"] == events[2]["data"]["operation_id"]


def test_print_defaults(capsys):
    assert cli.main(["--print-defaults"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["grimblast"] == "grimblast"
    assert data["notify_timeout_ms"] == 1000


def test_print_event_catalog(capsys):
    assert cli.main(["--print-event-catalog"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert "artifact.created" in [entry["event_type"] for entry in data["catalog"]]


def test_validate_config(tmp_path, capsys):
    path = tmp_path / "config.yaml"
    path.write_text("notify_timeout_ms: -5\n")
    assert cli.main(["--config", str(path), "--validate-config"]) == 1
    assert "notify_timeout_ms must be >= 0" in capsys.readouterr().err

    path.write_text("notify_timeout_ms: 5\n")
    assert cli.main(["--config", str(path), "--validate-config"]) == 0


def test_print_resolved_uses_config_file(tmp_path, capsys):
    path = tmp_path / "config.yaml"
    path.write_text("rofi: my-rofi\n")
    assert cli.main(["--config", str(path), "--print-resolved"]) == 0
    assert json.loads(capsys.readouterr().out)["rofi"] == "my-rofi"


def test_config_file_format_used_when_flag_absent(tmp_path, which, interactive_runs):
    path = tmp_path / "config.yaml"
    path.write_text("default_format: jpeg\n")
    assert cli.main(["--config", str(path), "--no-events"]) == 0
    assert interactive_runs[0][1] is ImageFormat.JPEG


def test_unrunnable_grimblast_exit_status(which, monkeypatch, events):
    def bad_binary(cmd, **kwargs):
        raise OSError(errno.ENOEXEC, "Exec format error", cmd[0])

    monkeypatch.setattr(capture_mod.subprocess, "run", bad_binary)
    assert cli.main(["--instant"]) == 1

    errors = [e for e in events if e["event_type"] == "error.handled"]
    assert errors[0]["data"]["error_type"] == "CaptureError"
    completed = [e for e in events if e["event_type"] == "operation.completed"]
    assert completed[0]["data"]["success"] is False


def test_unrunnable_rofi_exit_status(which, monkeypatch, events):
    def denied(cmd, **kwargs):
        raise PermissionError(13, "Permission denied", cmd[0])

    monkeypatch.setattr(menu.subprocess, "run", denied)
    assert cli.main([]) == 1

    errors = [e for e in events if e["event_type"] == "error.handled"]
    assert errors[0]["data"]["error_type"] == "MenuError"


def test_bad_config_value_does_not_crash(tmp_path, which, interactive_runs):
    path = tmp_path / "config.yaml"
    path.write_text("rofi_config: 5\n")
    assert cli.main(["--config", str(path), "--no-events"]) == 0
    assert interactive_runs[0][2] is None


def test_no_events_logs_events_at_debug(which, captures, caplog):
    with caplog.at_level(logging.DEBUG, logger="screenshot_menu.cli"):
        assert cli.main(["--instant", "--no-events", "--debug"]) == 0
    assert "event operation.completed" in caplog.text
