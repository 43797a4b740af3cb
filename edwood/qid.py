"""Identifiers of the files served by the editor's file server.

A file's Qid path packs the window id above the low eight bits, which hold
the :class:`FileId` of the file within that window's directory.
"""

from __future__ import annotations

import enum
import posixpath

_FILE_MASK = 0xFF
_WINDOW_MASK = 0xFFFFFF
_PATH_MASK = (1 << 64) - 1


class FileId(enum.IntEnum):
    """The files and directories of the file server."""

    QDIR = 0
    QACME = 1
    QCONS = 2
    QCONSCTL = 3
    QDRAW = 4
    QEDITOUT = 5
    QINDEX = 6
    QLABEL = 7
    QLOG = 8
    QNEW = 9
    QWADDR = 10
    QWBODY = 11
    QWCTL = 12
    QWDATA = 13
    QWEDITOUT = 14
    QWERRORS = 15
    QWEVENT = 16
    QWRDSEL = 17
    QWWRSEL = 18
    QWTAG = 19
    QWXDATA = 20
    QMAX = 21


def window_of(path):
    """Return the window id held in a Qid path."""
    return (path >> 8) & _WINDOW_MASK


def file_of(path):
    """Return the file identifier held in a Qid path."""
    value = path & _FILE_MASK
    try:
        return FileId(value)
    except ValueError:
        return value


def qid_path(window_id, file_id):
    """Build a Qid path from a window id and a file identifier."""
    return ((window_id << 8) | int(file_id)) & _PATH_MASK


def _clean(name: str) -> str:
    cleaned = posixpath.normpath(name)
    if cleaned.startswith("//"):
        cleaned = "/" + cleaned.lstrip("/")
    return cleaned


def is_mountpoint(filename, mtpt):
    """Report whether ``filename`` lies at or below the mount point ``mtpt``."""
    if not mtpt:
        return False
    s = _clean(filename)
    if not s.startswith(mtpt):
        return False
    return mtpt.endswith("/") or len(s) == len(mtpt) or s[len(mtpt)] == "/"