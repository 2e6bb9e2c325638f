"""Shared pytest fixtures and configuration for the opam-cli test suite.

Guidelines
----------
* No internet access in any test.
* The engine is replaced by :class:`RecordingClient` at the protocol boundary.
* Tests never read the real ``OPAM*`` environment nor touch ``~/.opam``.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Sequence
from pathlib import Path

import pytest

from opam_cli.cli.app import main
from opam_cli.core.actions import Action
from opam_cli.core.options import Configuration
from opam_cli.core.protocols import Session


class RecordingClient:
    """Engine double: records every action and returns a fixed outcome."""

    def __init__(self, outcome: int | None = None) -> None:
        self.outcome = outcome
        self.calls: list[tuple[Action, Session]] = []

    @property
    def actions(self) -> list[Action]:
        return [action for action, _ in self.calls]

    @property
    def last(self) -> Action:
        assert self.calls, "the engine was never invoked"
        return self.calls[-1][0]

    @property
    def session(self) -> Session:
        assert self.calls, "the engine was never invoked"
        return self.calls[-1][1]

    def run(self, action: Action, session: Session) -> int | None:
        self.calls.append((action, session))
        return self.outcome


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Strip ``OPAM*`` variables and point the root at a temporary directory."""
    for name in list(os.environ):
        if name.startswith("OPAM"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("OPAMROOT", str(tmp_path / "opam-root"))


@pytest.fixture()
def config(tmp_path: Path) -> Configuration:
    return Configuration(root_dir=str(tmp_path / "opam-root"))


@pytest.fixture()
def client() -> RecordingClient:
    return RecordingClient()


@pytest.fixture()
def run(
    client: RecordingClient, config: Configuration
) -> Callable[[Sequence[str]], int]:
    """Run ``main`` with the recording engine and the test configuration."""

    def _run(argv: Sequence[str]) -> int:
        return main(list(argv), client=client, config=config)

    return _run
