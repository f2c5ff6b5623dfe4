"""Tests for stderr diagnostics."""
from __future__ import annotations

import io

from dotlocal.core.ui import NullReporter, Reporter, get_reporter


class _Utf8Stream(io.StringIO):
    encoding = "utf-8"


def test_ascii_fallback_for_streams_without_encoding() -> None:
    stream = io.StringIO()
    Reporter(stream).success("linked")
    assert stream.getvalue() == "[OK] linked\n"


def test_unicode_symbols_on_utf8_streams() -> None:
    stream = _Utf8Stream()
    ui = Reporter(stream)
    ui.error("boom")
    assert stream.getvalue() == "✗ boom\n"
    assert ui.arrow == "→"


def test_ascii_only_forces_plain_prefixes() -> None:
    stream = _Utf8Stream()
    Reporter(stream, ascii_only=True).warning("careful")
    assert stream.getvalue() == "[!] careful\n"


def test_summary_block() -> None:
    stream = io.StringIO()
    Reporter(stream).summary("Done", {"Public configs": 2, "Local overrides": 1})
    assert stream.getvalue().splitlines() == [
        "",
        "> Done",
        "    Public configs: 2",
        "    Local overrides: 1",
    ]


def test_default_stream_is_stderr(capsys) -> None:
    Reporter().info("hello")
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "hello" in captured.err


def test_null_reporter_is_silent(capsys) -> None:
    ui = NullReporter()
    ui.header("Title")
    ui.info("x")
    ui.error("y")
    captured = capsys.readouterr()
    assert captured.out == "" and captured.err == ""


def test_get_reporter() -> None:
    mine = Reporter(io.StringIO())
    assert isinstance(get_reporter(False, mine), NullReporter)
    assert get_reporter(True, mine) is mine
    assert type(get_reporter(True)) is Reporter
