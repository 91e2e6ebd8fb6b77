"""Lazy Pattern Cells

One cell per (type, check) pair. The first caller compiles the pattern under
the cell's lock; callers racing with it wait on the lock and then read the
compiled matcher. Once built the matcher is immutable and the read path takes
no lock.

A pattern that fails to compile is remembered: every later use raises
PatternCompileError again without recompiling.
"""
from __future__ import annotations

import re
import threading
from dataclasses import dataclass

from strype.errors import PatternCompileError
from strype.logging import pattern_logger

# (?m) or a scoped (?im:...) group: $ then means end of line, leave it alone
_INLINE_MULTILINE = re.compile(r"\(\?[aiLmsux-]*m")


def strict_end_anchors(pattern: str, flags: int = 0) -> str:
    """Rewrite each bare $ anchor as \\Z so it only matches at the end of the text.

    Python's $ also matches before a trailing newline; JSON Schema and most
    other regex engines do not. Escaped \\$ and $ inside a character class
    are literals and stay as they are. Multiline patterns are returned
    unchanged.
    """
    if flags & re.MULTILINE or _INLINE_MULTILINE.search(pattern):
        return pattern
    out: list[str] = []
    in_class = False
    i, size = 0, len(pattern)
    while i < size:
        ch = pattern[i]
        if ch == "\\":
            out.append(pattern[i:i + 2])
            i += 2
            continue
        if in_class:
            in_class = ch != "]"
        elif ch == "[":
            # A ] right after [ or [^ is a literal member
            j = i + 1
            if j < size and pattern[j] == "^":
                j += 1
            if j < size and pattern[j] == "]":
                j += 1
            out.append(pattern[i:j])
            in_class = True
            i = j
            continue
        elif ch == "$":
            out.append(r"\Z")
            i += 1
            continue
        out.append(ch)
        i += 1
    return "".join(out)


@dataclass(frozen=True, slots=True)
class PatternStats:
    """Snapshot of a pattern cell."""
    type_name: str
    tag: str
    pattern: str
    builds: int
    ready: bool
    failed: bool


class LazyPattern:
    """Compile-once matcher for a single pattern check.

    Usage:
        cell = LazyPattern("Rgb8Hex", "HexOnly", "^[0-9a-f]{6}$")
        cell("ff0000")  # compiles on first call
        cell.builds     # 1
    """

    __slots__ = ("type_name", "tag", "pattern", "flags", "_compiled", "_failure", "_builds", "_lock")

    def __init__(self, type_name: str, tag: str, pattern: str, flags: int = 0):
        self.type_name = type_name
        self.tag = tag
        self.pattern = pattern
        self.flags = flags
        self._compiled: re.Pattern[str] | None = None
        self._failure: re.error | None = None
        self._builds = 0
        self._lock = threading.Lock()

    @property
    def builds(self) -> int:
        """Number of compile attempts. Never exceeds 1."""
        return self._builds

    @property
    def ready(self) -> bool:
        return self._compiled is not None

    @property
    def stats(self) -> PatternStats:
        return PatternStats(
            type_name=self.type_name,
            tag=self.tag,
            pattern=self.pattern,
            builds=self._builds,
            ready=self._compiled is not None,
            failed=self._failure is not None,
        )

    def get(self) -> re.Pattern[str]:
        """Return the compiled matcher, compiling it on first use."""
        compiled = self._compiled
        if compiled is not None:
            return compiled
        with self._lock:
            if self._compiled is None:
                if self._failure is None:
                    self._build()
                if self._failure is not None:
                    raise PatternCompileError(self.type_name, self.tag, self.pattern, self._failure)
            return self._compiled

    def _build(self) -> None:
        self._builds += 1
        try:
            self._compiled = re.compile(strict_end_anchors(self.pattern, self.flags), self.flags)
        except re.error as e:
            self._failure = e
            pattern_logger().error(
                "pattern_invalid",
                type=self.type_name,
                check=self.tag,
                pattern=self.pattern,
                error=str(e),
            )
            return
        pattern_logger().debug("pattern_compiled", type=self.type_name, check=self.tag, pattern=self.pattern)

    def __call__(self, value: str) -> bool:
        return self.get().search(value) is not None

    def __repr__(self) -> str:
        return f"LazyPattern({self.type_name}::{self.tag}, {self.pattern!r}, ready={self.ready})"
