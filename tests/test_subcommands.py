"""Tests for the sub-verb router (cli/subcommands.py)."""

from __future__ import annotations

from enum import Enum

import pytest

from opam_cli.cli.subcommands import Arity, SubcommandRouter, SubVerb
from opam_cli.exceptions import UsageError


class Verb(str, Enum):
    ADD = "add"
    REMOVE = "remove"
    LIST = "list"


class Tool(str, Enum):
    USE = "use"
    SHOW = "show"


def _router() -> SubcommandRouter[Verb]:
    return SubcommandRouter(
        "repository",
        [
            SubVerb(Verb.ADD, ("add",), Arity.exactly(2), "NAME ADDRESS", "Add."),
            SubVerb(Verb.REMOVE, ("remove", "rm"), Arity.exactly(1), "NAME", "Remove."),
            SubVerb(Verb.LIST, ("list",), Arity(), "", "List."),
        ],
    )


# ---------------------------------------------------------------------------
# Arity
# ---------------------------------------------------------------------------

class TestArity:
    def test_exactly(self) -> None:
        arity = Arity.exactly(2)
        assert [arity.accepts(n) for n in range(4)] == [False, False, True, False]

    def test_default_is_unbounded(self) -> None:
        assert Arity().accepts(0)
        assert Arity().accepts(7)


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------

class TestConstruction:
    def test_duplicate_names_rejected(self) -> None:
        with pytest.raises(ValueError, match="declared twice"):
            SubcommandRouter(
                "tool",
                [
                    SubVerb(Tool.USE, ("use",), Arity(), "", ""),
                    SubVerb(Tool.SHOW, ("use",), Arity(), "", ""),
                ],
            )

    def test_every_tag_must_be_declared(self) -> None:
        with pytest.raises(ValueError, match="no sub-verb declared"):
            SubcommandRouter("tool", [SubVerb(Tool.USE, ("use",), Arity(), "", "")])

    def test_fallback_counts_as_declared(self) -> None:
        router = SubcommandRouter(
            "tool",
            [SubVerb(Tool.SHOW, ("show",), Arity(), "", "")],
            fallback=SubVerb(Tool.USE, (), Arity.exactly(1), "NAME", ""),
        )
        assert router.names == ("show",)


# ---------------------------------------------------------------------------
# Routing
# ---------------------------------------------------------------------------

class TestRoute:
    def test_matches_name_and_keeps_params(self) -> None:
        route = _router().route("add", ["myrepo", "http://x"])
        assert route.tag is Verb.ADD
        assert route.params == ("myrepo", "http://x")

    def test_alias_resolves_to_same_verb(self) -> None:
        assert _router().route("rm", ["x"]).tag is Verb.REMOVE

    def test_match_is_case_sensitive(self) -> None:
        with pytest.raises(UsageError, match="invalid sub-command 'ADD'"):
            _router().route("ADD", ["a", "b"])

    def test_unknown_lists_accepted_names(self) -> None:
        with pytest.raises(UsageError) as exc_info:
            _router().route("frobnicate", [])
        assert exc_info.value.hint == "Must be one of: add, remove, rm, list."

    def test_missing_sub_verb(self) -> None:
        with pytest.raises(UsageError, match="requires a sub-command"):
            _router().route(None, [])

    def test_too_few(self) -> None:
        with pytest.raises(UsageError, match="too few parameters for `repository add'") as exc_info:
            _router().route("add", ["myrepo"])
        assert exc_info.value.hint == "Expected: repository add NAME ADDRESS"

    def test_too_many(self) -> None:
        with pytest.raises(UsageError, match="too many parameters"):
            _router().route("remove", ["a", "b"])

    def test_fallback_takes_token_as_parameter(self) -> None:
        router = SubcommandRouter(
            "switch",
            [SubVerb(Tool.SHOW, ("show",), Arity(), "", "")],
            fallback=SubVerb(Tool.USE, (), Arity.exactly(1), "SWITCH", ""),
        )
        route = router.route("4.01.0", [])
        assert route.tag is Tool.USE
        assert route.params == ("4.01.0",)

    def test_fallback_arity_error_uses_command_name(self) -> None:
        router = SubcommandRouter(
            "switch",
            [SubVerb(Tool.SHOW, ("show",), Arity(), "", "")],
            fallback=SubVerb(Tool.USE, (), Arity.exactly(1), "SWITCH", ""),
        )
        with pytest.raises(UsageError, match="too many parameters for `switch'"):
            router.route("4.01.0", ["extra"])


def test_describe_lists_every_verb() -> None:
    text = _router().describe()
    assert text.startswith("COMMANDS:")
    assert "remove, rm" in text
