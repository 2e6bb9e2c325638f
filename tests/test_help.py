"""Tests for ``opam help`` and help topic resolution (cli/help.py)."""

from __future__ import annotations

from collections.abc import Callable, Sequence

import pytest

from opam_cli.cli.commands import REGISTRY
from opam_cli.cli.help import CommandHelp, ProgramHelp, TopicList, resolve_topic
from opam_cli.exceptions import UsageError

from conftest import RecordingClient

Run = Callable[[Sequence[str]], int]


class TestResolveTopic:
    def test_no_topic(self) -> None:
        assert resolve_topic(None, ("list",)) == ProgramHelp()

    def test_topics(self) -> None:
        assert resolve_topic("topics", ("list", "pin")) == TopicList(("list", "pin"))

    def test_command(self) -> None:
        assert resolve_topic("pin", ("list", "pin")) == CommandHelp("pin")

    def test_unknown(self) -> None:
        with pytest.raises(UsageError, match="unknown help topic") as exc_info:
            resolve_topic("frobnicate", ("list", "pin"))
        assert exc_info.value.hint == "Must be one of: topics, list, pin."


class TestHelpCommand:
    def test_program_help(
        self, run: Run, client: RecordingClient, capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert run(["help"]) == 0
        out = capsys.readouterr().out
        assert "COMMANDS:" in out
        assert client.calls == []

    def test_topics_lists_every_command(
        self, run: Run, capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert run(["help", "topics"]) == 0
        assert capsys.readouterr().out.split() == list(REGISTRY.names)

    def test_command_help(self, run: Run, capsys: pytest.CaptureFixture[str]) -> None:
        assert run(["help", "switch"]) == 0
        out = capsys.readouterr().out
        assert "usage: opam switch" in out
        assert "--alias-of" in out

    def test_alias_topic(self, run: Run, capsys: pytest.CaptureFixture[str]) -> None:
        assert run(["help", "remote"]) == 0
        assert "usage: opam remote" in capsys.readouterr().out

    def test_unknown_topic(self, run: Run) -> None:
        with pytest.raises(UsageError):
            run(["help", "frobnicate"])
