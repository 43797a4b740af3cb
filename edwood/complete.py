"""File name completion within a single directory."""

from __future__ import annotations

import os
from dataclasses import dataclass, field


@dataclass
class Completion:
    """Analysis of the file names in a directory that start with a prefix.

    ``advance`` reports whether the prefix can be extended without changing
    the set of matching files.  ``complete`` reports whether exactly one file
    matched.  ``string`` is the extension that may be appended to the prefix;
    when ``complete`` is true it ends with a path separator for a directory
    or a blank for any other file.  ``nmatch`` counts the matches, and
    ``filenames`` lists them, or lists every entry of the directory when
    nothing matched.  Directory names carry a trailing separator.
    """

    advance: bool = False
    complete: bool = False
    string: str = ""
    nmatch: int = 0
    filenames: list[str] = field(default_factory=list)


def _with_separator(name: str, is_dir: bool) -> str:
    return name + os.sep if is_dir else name


def complete(directory, prefix):
    """Complete the file name ``prefix`` against the entries of ``directory``.

    Raises ValueError if the prefix contains a path separator and OSError if
    the directory cannot be read.
    """
    if os.sep in prefix:
        raise ValueError("path separator in name argument to complete()")

    with os.scandir(directory) as it:
        entries = sorted(
            ((entry.name, entry.is_dir(follow_symlinks=False)) for entry in it),
            key=lambda item: item[0],
        )

    matches = [(name, is_dir) for name, is_dir in entries if name.startswith(prefix)]
    if not matches:
        return Completion(
            advance=False,
            complete=False,
            string="",
            nmatch=0,
            filenames=[_with_separator(name, is_dir) for name, is_dir in entries],
        )

    common = os.path.commonprefix([name for name, _ in matches])
    unique = len(matches) == 1
    extension = common[len(prefix):]
    if unique:
        extension += os.sep if matches[0][1] else " "
    return Completion(
        advance=unique or len(common) > len(prefix),
        complete=unique,
        string=extension,
        nmatch=len(matches),
        filenames=[_with_separator(name, is_dir) for name, is_dir in matches],
    )