"""Reading and writing the file that records the editor's state.

The current format is JSON with a version number.  The older line-based
format can still be read with :func:`load_legacy`.
"""

from __future__ import annotations

import enum
import json
import math
import os
import re
from dataclasses import dataclass, field
from typing import IO, Any

VERSION = 1


class DumpfileError(Exception):
    """A dump file could not be read or parsed."""


class WindowType(enum.IntEnum):
    """The kind of window recorded in a dump file."""

    SAVED = 0  # a file or directory stored on disk
    UNSAVED = 1  # a buffer whose contents are not on disk
    ZEROX = 2  # a copy of a saved or unsaved window
    EXEC = 3  # a window controlled by an outside process


# ---------------------------------------------------------------------------
# JSON field helpers


def _field(obj: dict, name: str, default: Any) -> Any:
    if name in obj:
        value = obj[name]
    else:
        folded = name.lower()
        value = next((v for k, v in obj.items() if k.lower() == folded), None)
    return default if value is None else value


def _as_str(value: Any, name: str) -> str:
    if not isinstance(value, str):
        raise DumpfileError(f"field {name}: expected a string, got {value!r}")
    return value


def _as_int(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise DumpfileError(f"field {name}: expected an integer, got {value!r}")
    return value


def _as_float(value: Any, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DumpfileError(f"field {name}: expected a number, got {value!r}")
    return float(value)


def _as_object(value: Any, name: str) -> dict:
    if not isinstance(value, dict):
        raise DumpfileError(f"field {name}: expected an object, got {value!r}")
    return value


def _as_list(value: Any, name: str) -> list:
    if not isinstance(value, list):
        raise DumpfileError(f"field {name}: expected an array, got {value!r}")
    return value


def _number(value: float) -> int | float:
    if math.isfinite(value) and value.is_integer():
        return int(value)
    return value


# ---------------------------------------------------------------------------
# The model


@dataclass
class Text:
    """UTF-8 text with a selection given in rune (character) positions."""

    buffer: str = ""
    q0: int = 0
    q1: int = 0

    def _to_json(self) -> dict:
        out: dict[str, Any] = {}
        if self.buffer:
            out["Buffer"] = self.buffer
        out["Q0"] = self.q0
        out["Q1"] = self.q1
        return out

    @classmethod
    def _from_json(cls, obj: Any, name: str) -> "Text":
        obj = _as_object(obj, name)
        return cls(
            buffer=_as_str(_field(obj, "Buffer", ""), "Buffer"),
            q0=_as_int(_field(obj, "Q0", 0), "Q0"),
            q1=_as_int(_field(obj, "Q1", 0), "Q1"),
        )


@dataclass
class Column:
    """A column of the row: its position in percent and its tag."""

    position: float = 0.0
    tag: Text = field(default_factory=Text)

    def _to_json(self) -> dict:
        return {"Position": _number(self.position), "Tag": self.tag._to_json()}

    @classmethod
    def _from_json(cls, obj: Any) -> "Column":
        obj = _as_object(obj, "Columns")
        return cls(
            position=_as_float(_field(obj, "Position", 0.0), "Position"),
            tag=Text._from_json(_field(obj, "Tag", {}), "Tag"),
        )


@dataclass
class Window:
    """A window: its column, position within the column, tag and body."""

    type: WindowType = WindowType.SAVED
    column: int = 0
    position: float = 0.0
    font: str = ""
    tag: Text = field(default_factory=Text)
    body: Text = field(default_factory=Text)
    exec_dir: str = ""
    exec_command: str = ""

    def _to_json(self) -> dict:
        out: dict[str, Any] = {
            "Type": int(self.type),
            "Column": self.column,
            "Position": _number(self.position),
        }
        if self.font:
            out["Font"] = self.font
        out["Tag"] = self.tag._to_json()
        out["Body"] = self.body._to_json()
        if self.exec_dir:
            out["ExecDir"] = self.exec_dir
        if self.exec_command:
            out["ExecCommand"] = self.exec_command
        return out

    @classmethod
    def _from_json(cls, obj: Any) -> "Window":
        obj = _as_object(obj, "Windows")
        kind = _as_int(_field(obj, "Type", 0), "Type")
        try:
            window_type = WindowType(kind)
        except ValueError as exc:
            raise DumpfileError(f"unknown window type {kind}") from exc
        return cls(
            type=window_type,
            column=_as_int(_field(obj, "Column", 0), "Column"),
            position=_as_float(_field(obj, "Position", 0.0), "Position"),
            font=_as_str(_field(obj, "Font", ""), "Font"),
            tag=Text._from_json(_field(obj, "Tag", {}), "Tag"),
            body=Text._from_json(_field(obj, "Body", {}), "Body"),
            exec_dir=_as_str(_field(obj, "ExecDir", ""), "ExecDir"),
            exec_command=_as_str(_field(obj, "ExecCommand", ""), "ExecCommand"),
        )


@dataclass
class Content:
    """The whole saved state of the editor."""

    current_dir: str = ""
    var_font: str = ""
    fixed_font: str = ""
    row_tag: Text = field(default_factory=Text)
    columns: list[Column] = field(default_factory=list)
    windows: list[Window] = field(default_factory=list)

    def _to_json(self) -> dict:
        return {
            "Version": VERSION,
            "CurrentDir": self.current_dir,
            "VarFont": self.var_font,
            "FixedFont": self.fixed_font,
            "RowTag": self.row_tag._to_json(),
            "Columns": [c._to_json() for c in self.columns],
            "Windows": [w._to_json() for w in self.windows],
        }

    @classmethod
    def _from_json(cls, obj: dict) -> "Content":
        return cls(
            current_dir=_as_str(_field(obj, "CurrentDir", ""), "CurrentDir"),
            var_font=_as_str(_field(obj, "VarFont", ""), "VarFont"),
            fixed_font=_as_str(_field(obj, "FixedFont", ""), "FixedFont"),
            row_tag=Text._from_json(_field(obj, "RowTag", {}), "RowTag"),
            columns=[
                Column._from_json(c)
                for c in _as_list(_field(obj, "Columns", []), "Columns")
            ],
            windows=[
                Window._from_json(w)
                for w in _as_list(_field(obj, "Windows", []), "Windows")
            ],
        )

    def encode(self, stream):
        """Write this content as versioned, tab-indented JSON to a text stream."""
        stream.write(json.dumps(self._to_json(), indent="\t", ensure_ascii=False))
        stream.write("\n")

    def save(self, path):
        """Write this content to ``path``, creating it with mode 0600."""
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with open(fd, "w", encoding="utf-8") as stream:
            self.encode(stream)


def decode(stream):
    """Parse a JSON dump from a stream of text or bytes."""
    data = stream.read()
    if isinstance(data, bytes):
        data = data.decode("utf-8")
    text = data.lstrip(" \t\r\n")
    if not text:
        raise DumpfileError("EOF")
    try:
        obj, _ = json.JSONDecoder().raw_decode(text)
    except json.JSONDecodeError as exc:
        raise DumpfileError(str(exc)) from exc
    if obj is None:
        obj = {}
    if not isinstance(obj, dict):
        raise DumpfileError("dump file does not hold a JSON object")
    version = _as_int(_field(obj, "Version", 0), "Version")
    if version != VERSION:
        raise DumpfileError(f"dump file format {version}; expected {VERSION}")
    return Content._from_json(obj)


def load(path):
    """Read and parse the JSON dump file at ``path``."""
    with open(path, encoding="utf-8") as stream:
        return decode(stream)


# ---------------------------------------------------------------------------
# The legacy line-based format

_ESCAPES = {
    "\a": r"\a",
    "\b": r"\b",
    "\f": r"\f",
    "\n": r"\n",
    "\r": r"\r",
    "\t": r"\t",
    "\v": r"\v",
    "\\": r"\\",
    '"': r"\"",
}


def _quote(s: str) -> str:
    parts = []
    for ch in s:
        if ch in _ESCAPES:
            parts.append(_ESCAPES[ch])
        elif ch.isprintable():
            parts.append(ch)
        else:
            code = ord(ch)
            if code < 0x80:
                parts.append(f"\\x{code:02x}")
            elif code < 0x10000:
                parts.append(f"\\u{code:04x}")
            else:
                parts.append(f"\\U{code:08x}")
    return '"' + "".join(parts) + '"'


_INT_RE = re.compile(r"[+-]?[0-9]+")
_FLOAT_RE = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf(?:inity)?|nan)",
    re.IGNORECASE,
)


def _parse_int(s: str) -> int:
    if not _INT_RE.fullmatch(s):
        raise ValueError(f"strconv.ParseInt: parsing {_quote(s)}: invalid syntax")
    value = int(s)
    if not -(2**63) <= value < 2**63:
        raise ValueError(f"strconv.ParseInt: parsing {_quote(s)}: value out of range")
    return value


def _parse_float(s: str) -> float:
    if not _FLOAT_RE.fullmatch(s):
        raise ValueError(f"strconv.ParseFloat: parsing {_quote(s)}: invalid syntax")
    value = float(s)
    if math.isinf(value) and "inf" not in s.lower():
        raise ValueError(f"strconv.ParseFloat: parsing {_quote(s)}: value out of range")
    return value


_SPLIT_RE = re.compile(r"[ \t]+")


def _splitline(line: str, count: int) -> list[str]:
    """Split on runs of blanks into at most ``count`` fields (all if negative)."""
    return _SPLIT_RE.split(line.lstrip("\t "), maxsplit=max(count - 1, 0))


class _LegacyReader:
    def __init__(self, stream: IO[bytes]) -> None:
        self._stream = stream

    def readtrim(self) -> str:
        """Return the next line without its ending; "" once the file is exhausted."""
        raw = self._stream.readline()
        if not raw:
            return ""
        if not raw.endswith(b"\n"):
            raise DumpfileError("EOF")
        return raw.decode("utf-8", "replace").rstrip("\r\n")

    def read(self, n: int) -> bytes:
        return self._stream.read(n)


def _bad_line(line: str) -> DumpfileError:
    return DumpfileError(f"bad line {_quote(line)} in dumpfile")


def _load_window(
    reader: _LegacyReader,
    line: str,
    fields: list[str],
    fontname: str,
    numcol: int,
    ndumped: int,
    wintype: WindowType,
) -> Window:
    try:
        column = _parse_int(fields[1])
        column_error = "<nil>"
    except ValueError as exc:
        column, column_error = -1, str(exc)
    if column < 0 or column > 10:
        raise DumpfileError(f"cant't parse column id {fields[1]}: {column_error}")
    column = min(column, numcol)

    try:
        q0 = _parse_int(fields[3])
    except ValueError as exc:
        raise DumpfileError(f"cant't parse q0 {fields[3]} because {exc}") from exc
    try:
        q1 = _parse_int(fields[4])
    except ValueError as exc:
        raise DumpfileError(f"cant't parse q1 {fields[4]} because {exc}") from exc
    try:
        percent = _parse_float(fields[5])
    except ValueError as exc:
        raise DumpfileError(f"cant't parse percent {fields[5]} because {exc}") from exc

    tagline = reader.readtrim()
    tagfields = _splitline(tagline, 6)
    if len(tagfields) < 6:
        raise _bad_line(tagline)

    dumped = reader.read(ndumped) if ndumped > 0 else b""
    if len(dumped) != ndumped:
        reason = "EOF" if not dumped else "<nil>"
        raise DumpfileError(f"can't load dumped file contents {reason}")

    return Window(
        type=wintype,
        column=column,
        position=percent,
        font=fontname,
        tag=Text(buffer=tagfields[5]),
        body=Text(buffer=dumped.decode("utf-8", "replace"), q0=q0, q1=q1),
    )


def _byte_len(line: str) -> int:
    return len(line.encode("utf-8"))


def _parse_legacy(reader: _LegacyReader, home: str) -> Content:
    content = Content(
        current_dir=reader.readtrim(),
        var_font=reader.readtrim(),
        fixed_font=reader.readtrim(),
    )

    widths_line = reader.readtrim()
    widths = _splitline(widths_line, -1)
    if len(widths) > 10:
        raise DumpfileError(
            f"bad number of column widths {len(widths)} in {_quote(widths_line)}"
        )
    for width in widths:
        try:
            position = _parse_float(width)
        except ValueError as exc:
            raise DumpfileError(
                f"parsing column width in {_quote(widths_line)} had error {exc}"
            ) from exc
        content.columns.append(Column(position=position))

    numcol = len(content.columns)
    while True:
        line = reader.readtrim()
        if line == "":
            return content
        kind = line[0]
        if kind == "c":
            fields = _splitline(line, 3)
            if len(fields) < 3:
                raise _bad_line(line)
            try:
                index = _parse_int(fields[1])
            except ValueError as exc:
                raise DumpfileError(
                    f"parsing column id in {_quote(line)} had error {exc}"
                ) from exc
            if not 0 <= index < numcol:
                raise DumpfileError(f"column id {index} out of range in {_quote(line)}")
            content.columns[index].tag = Text(buffer=fields[2])
        elif kind == "w":
            content.row_tag = Text(buffer=line[1:].lstrip(" \t"))
        elif kind == "e":
            if _byte_len(line) < 1 + 5 * 12 + 1:
                raise _bad_line(line)
            reader.readtrim()  # ctl line, not needed
            exec_dir = reader.readtrim() or home
            exec_command = reader.readtrim()
            content.windows.append(
                Window(
                    type=WindowType.EXEC,
                    column=numcol - 1,
                    exec_dir=exec_dir,
                    exec_command=exec_command,
                )
            )
        elif kind in "fx":
            if _byte_len(line) < 1 + 5 * 12 + 1:
                raise _bad_line(line)
            fields = _splitline(line, 7)
            if len(fields) < 7:
                raise _bad_line(line)
            wintype = WindowType.SAVED if kind == "f" else WindowType.ZEROX
            content.windows.append(
                _load_window(reader, line, fields, fields[6], numcol, 0, wintype)
            )
        elif kind == "F":
            if _byte_len(line) < 1 + 6 * 12 + 1:
                raise _bad_line(line)
            fields = _splitline(line, 8)
            if len(fields) < 8:
                raise _bad_line(line)
            try:
                ndumped = _parse_int(fields[6])
            except ValueError as exc:
                raise DumpfileError(
                    f"bad count of unsaved text from line {_quote(line)} in dumpfile"
                ) from exc
            if ndumped < 0:
                raise DumpfileError(
                    f"bad count of unsaved text from line {_quote(line)} in dumpfile"
                )
            content.windows.append(
                _load_window(
                    reader, line, fields, fields[7], numcol, ndumped, WindowType.UNSAVED
                )
            )
        else:
            raise DumpfileError(f"default bad line {_quote(line)} in dumpfile")


def load_legacy(path, home):
    """Read a dump file in the old line-based format.

    ``home`` stands in for the directory of a command window that recorded none.
    """
    try:
        stream = open(path, "rb")
    except OSError as exc:
        reason = exc.strerror or str(exc)
        reason = reason[:1].lower() + reason[1:]
        raise DumpfileError(
            f"loading old dumpfile file {path} failed: open {path}: {reason}"
        ) from exc
    with stream:
        return _parse_legacy(_LegacyReader(stream), home)