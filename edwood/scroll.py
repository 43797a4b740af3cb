"""How far a mouse scroll wheel click moves the text."""

from __future__ import annotations

import functools
import os
import re
import struct
from dataclasses import dataclass

_INT_RE = re.compile(r"[+-]?[0-9]+")


def _parse_float32(text: str) -> float | None:
    if not text or text != text.strip() or "_" in text:
        return None
    try:
        value = float(text)
        return struct.unpack("f", struct.pack("f", value))[0]
    except (ValueError, OverflowError):
        return None


def _parse_int(text: str) -> int | None:
    if not _INT_RE.fullmatch(text):
        return None
    return int(text)


@dataclass(frozen=True)
class ScrollSetting:
    """A scroll increment: a fixed number of lines or a percentage of the window."""

    lines: int = 0
    percent: float = 0.0

    @classmethod
    def parse(cls, value):
        """Parse a setting such as ``"3"`` or ``"50%"``; bad values give the default."""
        if not value:
            return cls()
        if value.endswith("%"):
            pct = _parse_float32(value[:-1])
            if pct is None or not pct > 0:
                return cls()
            return cls(percent=min(pct, 100.0))
        n = _parse_int(value)
        if n is None or n <= 0:
            return cls()
        return cls(lines=n)

    def lines_for(self, maxlines):
        """Return the number of lines to scroll in a window showing ``maxlines``."""
        if self.lines > 0:
            return self.lines
        if self.percent > 0:
            return int(self.percent * maxlines / 100.0)
        return 1


@functools.lru_cache(maxsize=None)
def _environment_setting() -> ScrollSetting:
    return ScrollSetting.parse(os.environ.get("mousescrollsize", ""))


def mouse_scroll_size(maxlines, setting=None):
    """Return the lines to scroll per wheel click.

    Without an explicit setting, ``$mousescrollsize`` is read once and reused.
    """
    if setting is None:
        setting = _environment_setting()
    return setting.lines_for(maxlines)