"""Unit tests for lazy pattern cells."""

from __future__ import annotations

import re
import threading

import pytest
from structlog.testing import capture_logs

from strype import Err, Regex, define_string_type
from strype.errors import PatternCompileError
from strype.validation.patterns import LazyPattern, strict_end_anchors


def test_cell_compiles_on_first_use_only() -> None:
    cell = LazyPattern("Rgb8Hex", "HexOnly", "^[0-9a-f]{6}$")
    assert cell.builds == 0
    assert not cell.ready

    assert cell("ff0000")
    assert not cell("zz0000")
    assert cell.get() is cell.get()
    assert cell.builds == 1
    assert cell.ready


def test_concurrent_first_use_builds_once() -> None:
    cell = LazyPattern("Rgb8Hex", "HexOnly", "^[0-9a-f]{6}$")
    workers = 16
    barrier = threading.Barrier(workers)
    results: list[bool] = []
    lock = threading.Lock()

    def run() -> None:
        barrier.wait()
        outcome = cell("00ff00")
        with lock:
            results.append(outcome)

    threads = [threading.Thread(target=run) for _ in range(workers)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert results == [True] * workers
    assert cell.builds == 1


def test_invalid_pattern_fails_every_time_without_recompiling() -> None:
    cell = LazyPattern("Broken", "Unclosed", "([a-z")
    with capture_logs() as logs:
        with pytest.raises(PatternCompileError) as first:
            cell("abc")
        with pytest.raises(PatternCompileError):
            cell("abc")

    assert cell.builds == 1
    assert cell.stats.failed
    assert not cell.ready
    assert first.value.tag == "Unclosed"
    assert first.value.pattern == "([a-z"
    assert "Broken::Unclosed" in str(first.value)
    assert [entry["event"] for entry in logs] == ["pattern_invalid"]


def test_compiled_event_is_logged() -> None:
    cell = LazyPattern("Rgb8Hex", "HexOnly", "^[0-9a-f]{6}$")
    with capture_logs() as logs:
        cell.get()
    assert logs[0]["event"] == "pattern_compiled"
    assert logs[0]["check"] == "HexOnly"
    assert logs[0]["log_level"] == "debug"


def test_cells_are_scoped_per_type() -> None:
    pattern = Regex("^[a-z]+$")
    first = define_string_type("Slug", checks={"Lower": pattern})
    second = define_string_type("Handle", checks={"Lower": pattern})

    assert first.is_valid("abc")
    assert first.pattern_builds() == {"Lower": 1}
    assert second.pattern_builds() == {"Lower": 0}


def test_eager_definition_surfaces_bad_pattern() -> None:
    with pytest.raises(PatternCompileError):
        define_string_type("Broken", checks={"Bad": Regex("(")}, eager=True)


def test_lazy_definition_defers_bad_pattern() -> None:
    broken = define_string_type("Broken", checks={"Bad": Regex("(")}, eager=False)
    with pytest.raises(PatternCompileError):
        broken.new("x")


def test_eager_setting(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STRYPE_EAGER_PATTERNS", "true")
    warmed = define_string_type("Digits", checks={"Digits": Regex("^[0-9]+$")})
    assert warmed.pattern_builds() == {"Digits": 1}


def test_stats_snapshot() -> None:
    cell = LazyPattern("Rgb8Hex", "HexOnly", "^[0-9a-f]{6}$")
    cell.get()
    stats = cell.stats
    assert (stats.type_name, stats.tag, stats.builds, stats.ready, stats.failed) == (
        "Rgb8Hex",
        "HexOnly",
        1,
        True,
        False,
    )


@pytest.mark.parametrize("value", ["ff0000\n", "ff0000\r\n"])
def test_end_anchor_rejects_trailing_newline(value: str) -> None:
    hex6 = define_string_type("Hex6", checks={"HexOnly": Regex("^[0-9a-f]{6}$")})
    assert hex6.parse(value) == Err(hex6.Error.HexOnly)
    assert hex6.parse("ff0000").is_ok()


def test_cell_end_anchor_is_end_of_text() -> None:
    cell = LazyPattern("Hex6", "HexOnly", "^[0-9a-f]{6}$")
    assert cell("ff0000")
    assert not cell("ff0000\n")
    assert cell.pattern == "^[0-9a-f]{6}$"


@pytest.mark.parametrize(
    ("pattern", "flags", "rewritten"),
    [
        ("^abc$", 0, r"^abc\Z"),
        ("a$|b$", 0, r"a\Z|b\Z"),
        (r"cost \$5$", 0, r"cost \$5\Z"),
        ("[$]$", 0, r"[$]\Z"),
        ("[]$]x$", 0, r"[]$]x\Z"),
        ("[^]$]$", 0, r"[^]$]\Z"),
        ("^abc$", re.MULTILINE, "^abc$"),
        ("(?m)^abc$", 0, "(?m)^abc$"),
        ("no anchor", 0, "no anchor"),
    ],
)
def test_strict_end_anchors(pattern: str, flags: int, rewritten: str) -> None:
    assert strict_end_anchors(pattern, flags) == rewritten


def test_multiline_patterns_keep_line_anchors() -> None:
    lines = define_string_type("Lines", checks={"EndsWithDigit": Regex("[0-9]$", re.MULTILINE)})
    assert lines.is_valid("a1\nb")
