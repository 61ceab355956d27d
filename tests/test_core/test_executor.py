"""Tests for helper execution and reply parsing."""

from __future__ import annotations

import shutil
import time
from pathlib import Path
from typing import Callable

import pytest

from gitcred.executor import build_input, parse_output, run_helper
from gitcred.models import ParsedReply

pytestmark = pytest.mark.skipif(shutil.which("sh") is None, reason="no POSIX shell")

BOTH = "f() { echo username=a; echo password=b; }; f"


class TestBuildInput:
    def test_all_fields_in_order(self) -> None:
        data = build_input("https", "example.com", "alice")
        assert data == b"protocol=https\nhost=example.com\nusername=alice\n"

    def test_unknown_fields_are_omitted(self) -> None:
        assert build_input(None, "example.com", None) == b"host=example.com\n"

    def test_nothing_known(self) -> None:
        assert build_input(None, None, None) == b""

    @pytest.mark.parametrize(
        ("protocol", "host", "username"),
        [
            ("https", "example.com", "bob\nhost=evil.example"),
            ("https", "example.com\nusername=x", None),
            ("https", "example.com", "bob\x00"),
        ],
    )
    def test_field_injection_is_rejected(self, protocol, host, username) -> None:
        with pytest.raises(ValueError):
            build_input(protocol, host, username)

    def test_unencodable_value_is_rejected(self) -> None:
        with pytest.raises(ValueError):
            build_input("https", "example.com", "al\udcffice")


class TestParseOutput:
    def test_username_and_password(self) -> None:
        assert parse_output(b"username=a\npassword=b\n") == ParsedReply(username="a", password="b")

    def test_first_occurrence_wins(self) -> None:
        assert parse_output(b"username=a\nusername=z\n").username == "a"

    def test_value_may_contain_equals(self) -> None:
        assert parse_output(b"password=x=y\n").password == "x=y"

    def test_lines_without_equals_are_skipped(self) -> None:
        reply = parse_output(b"garbage\n\npassword=p")
        assert reply == ParsedReply(password="p")

    def test_undecodable_value_drops_only_that_line(self) -> None:
        reply = parse_output(b"username=\xff\xfe\npassword=ok\n")
        assert reply.username is None
        assert reply.password == "ok"

    def test_unknown_and_inexact_keys_are_ignored(self) -> None:
        reply = parse_output(b"protocol=https\nUsername=x\n username=y\nquit=1\n")
        assert reply.is_empty

    def test_empty_value(self) -> None:
        assert parse_output(b"password=\n").password == ""

    def test_empty_output(self) -> None:
        assert parse_output(b"").is_empty


class TestRunHelper:
    def test_inline_shell_function(self) -> None:
        assert run_helper(BOTH) == ParsedReply(username="a", password="b")

    def test_helper_receives_get_action(self) -> None:
        reply = run_helper('f() { echo "password=$1"; }; f')
        assert reply.password == "get"

    def test_helper_receives_request_on_stdin(self, tmp_path: Path) -> None:
        seen = tmp_path / "stdin.txt"
        reply = run_helper(
            f'f() {{ cat > "{seen}"; }}; f',
            protocol="https",
            host="example.com",
            username="alice",
        )
        assert reply.is_empty
        assert seen.read_bytes() == b"protocol=https\nhost=example.com\nusername=alice\n"

    def test_helper_that_ignores_stdin(self) -> None:
        reply = run_helper(BOTH, protocol="https", host="example.com", username="u" * 100_000)
        assert reply == ParsedReply(username="a", password="b")

    def test_non_zero_exit_is_no_answer(self) -> None:
        reply = run_helper("f() { echo username=a; echo password=b; exit 1; }; f")
        assert reply.is_empty

    def test_missing_helper_is_no_answer(self) -> None:
        assert run_helper('"/nonexistent/helper"').is_empty

    def test_missing_shell_is_no_answer(self) -> None:
        assert run_helper(BOTH, shell="/nonexistent/sh").is_empty

    def test_absolute_path_helper(self, make_script: Callable[[str, str], Path]) -> None:
        script = make_script("my helper", 'echo "username=$1"\necho password=p')
        reply = run_helper(f'"{script}"')
        assert reply == ParsedReply(username="get", password="p")

    def test_stderr_is_not_parsed(self) -> None:
        reply = run_helper("f() { echo password=p >&2; }; f")
        assert reply.is_empty

    @pytest.mark.parametrize("username", ["al\udcffice", "bob\nhost=evil.example"])
    def test_unsendable_username_skips_helper(self, tmp_path: Path, username: str) -> None:
        marker = tmp_path / "ran"
        reply = run_helper(
            f'f() {{ touch "{marker}"; echo username=a; echo password=b; }}; f',
            protocol="https",
            host="example.com",
            username=username,
        )
        assert reply.is_empty
        assert not marker.exists()

    def test_timeout_kills_hung_helper(self) -> None:
        start = time.monotonic()
        reply = run_helper("f() { sleep 10; echo password=late; }; f", timeout=0.5)
        assert reply.is_empty
        assert time.monotonic() - start < 5
