"""Regression tests for optional CLI UI dependencies (rich/questionary).

These tests verify that parsing, dispatch and error reporting keep
working when the optional UI packages are missing, and that prompting
fails cleanly only when a question is actually asked.
"""

from __future__ import annotations

import logging
import sys

import pytest

from opam_cli.cli import exit_codes
from opam_cli.cli.app import cli, main
from opam_cli.exceptions import EnvironmentError

from conftest import RecordingClient

_RICH_MODULES = (
    "rich",
    "rich.console",
    "rich.logging",
    "rich.markup",
    "rich.table",
    "rich.traceback",
)


def _hide_rich(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _RICH_MODULES:
        monkeypatch.setitem(sys.modules, name, None)


def _hide_questionary(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setitem(sys.modules, "questionary", None)


@pytest.fixture(autouse=True)
def _reset_logger():
    yield
    logging.getLogger("opam_cli").handlers.clear()


def test_help_works_without_rich_or_questionary(monkeypatch: pytest.MonkeyPatch) -> None:
    _hide_rich(monkeypatch)
    _hide_questionary(monkeypatch)

    with pytest.raises(SystemExit) as exc_info:
        main(["--help"])
    assert exc_info.value.code == 0


def test_version_works_without_rich_or_questionary(monkeypatch: pytest.MonkeyPatch) -> None:
    _hide_rich(monkeypatch)
    _hide_questionary(monkeypatch)

    with pytest.raises(SystemExit) as exc_info:
        main(["--version"])
    assert exc_info.value.code == 0


def test_dispatch_works_without_rich(
    monkeypatch: pytest.MonkeyPatch, client: RecordingClient, config
) -> None:
    _hide_rich(monkeypatch)

    assert main(["install", "lwt", "--debug"], client=client, config=config) == exit_codes.SUCCESS
    assert len(client.calls) == 1


def test_dry_run_prints_plain_text_without_rich(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    _hide_rich(monkeypatch)

    assert main(["pin", "lwt", "2.4.0"]) == exit_codes.SUCCESS
    out = capsys.readouterr().out
    assert out.startswith("pin (switch: default)")
    assert "version(version=2.4.0)" in out


def test_errors_reported_without_rich(
    monkeypatch: pytest.MonkeyPatch,
    client: RecordingClient,
    capsys: pytest.CaptureFixture[str],
) -> None:
    _hide_rich(monkeypatch)

    with pytest.raises(SystemExit) as exc_info:
        cli(["frobnicate"], client=client)
    assert exc_info.value.code == exit_codes.GENERAL_ERROR
    assert "unknown command 'frobnicate'" in capsys.readouterr().err


def test_confirm_errors_cleanly_when_questionary_missing(
    monkeypatch: pytest.MonkeyPatch, client: RecordingClient, config
) -> None:
    _hide_questionary(monkeypatch)

    main(["install", "lwt"], client=client, config=config)
    with pytest.raises(EnvironmentError, match="questionary is not installed"):
        client.session.confirm("Continue?")


def test_assume_yes_never_needs_questionary(
    monkeypatch: pytest.MonkeyPatch, client: RecordingClient, config
) -> None:
    _hide_questionary(monkeypatch)

    main(["install", "lwt", "--yes"], client=client, config=config)
    assert client.session.confirm("Continue?") is True
