"""Parser for the commands of the Edit language.

Commands are parsed into trees of :class:`Cmd` nodes whose addresses are
trees of :class:`Addr` nodes.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional

LINEX = "\n"
WORDX = "\t\n"

# "cd" is parsed as a single two-character command.
CD_COMMAND = chr(ord("c") | 0x100)


class EditParseError(Exception):
    """An Edit command could not be parsed."""


class InvalidCommandError(EditParseError):
    """The command character is not known."""

    def __init__(self, command: str) -> None:
        super().__init__(f"unknown command {command}")
        self.command = command


class BadDelimiterError(EditParseError):
    """A character that may not delimit text or a regular expression was used."""

    def __init__(self, delimiter: str) -> None:
        super().__init__(f"bad delimiter {delimiter}")
        self.delimiter = delimiter


BAD_ADDR = "bad address"
BAD_ADDR_SYNTAX = "bad address syntax"
ADDRESS_MISSING = "no address"
ADDR_NOT_REQUIRED = "command takes no address"
REGEXP_MISSING = "no regular expression defined"
LEFT_BRACE_MISSING = "right brace with no left brace"
BAD_RHS = "bad right hand side"


class DefaultAddress(enum.Enum):
    """The address a command uses when none is given."""

    NO = 0
    DOT = 1
    ALL = 2


class CountType(enum.Enum):
    """Whether a command takes a count, such as the 2 in ``s2/a/b/``."""

    NO = 0
    UNSIGNED = 1
    SIGNED = 2


@dataclass(frozen=True)
class CommandSpec:
    """How a command character is parsed."""

    cmdc: str
    text: bool = False
    regexp: bool = False
    addr: bool = False
    defcmd: str = ""
    defaddr: DefaultAddress = DefaultAddress.DOT
    count: CountType = CountType.NO
    token: str = ""


_D = DefaultAddress
_C = CountType

COMMANDS = (
    CommandSpec("\n"),
    CommandSpec("a", text=True),
    CommandSpec("b", defaddr=_D.NO, token=LINEX),
    CommandSpec("c", text=True),
    CommandSpec("d"),
    CommandSpec("e", defaddr=_D.NO, token=WORDX),
    CommandSpec("f", defaddr=_D.NO, token=WORDX),
    CommandSpec("g", regexp=True, defcmd="p"),
    CommandSpec("i", text=True),
    CommandSpec("m", addr=True),
    CommandSpec("p"),
    CommandSpec("r", defaddr=_D.NO, token=WORDX),
    CommandSpec("s", regexp=True, count=_C.UNSIGNED),
    CommandSpec("t", addr=True),
    CommandSpec("u", defaddr=_D.NO, count=_C.SIGNED),
    CommandSpec("v", regexp=True, defcmd="p"),
    CommandSpec("w", defaddr=_D.ALL, token=WORDX),
    CommandSpec("x", regexp=True, defcmd="p"),
    CommandSpec("y", regexp=True, defcmd="p"),
    CommandSpec("=", token=LINEX),
    CommandSpec("B", defaddr=_D.NO, token=LINEX),
    CommandSpec("D", defaddr=_D.NO, token=LINEX),
    CommandSpec("X", regexp=True, defcmd="f", defaddr=_D.NO),
    CommandSpec("Y", regexp=True, defcmd="f", defaddr=_D.NO),
    CommandSpec("<", token=LINEX),
    CommandSpec("|", token=LINEX),
    CommandSpec(">", token=LINEX),
)

_BY_CHAR = {spec.cmdc: spec for spec in COMMANDS}


def cmdlookup(c):
    """Return the :class:`CommandSpec` for command character ``c``, or None."""
    return _BY_CHAR.get(c)


def okdelim(c):
    """Report whether ``c`` may delimit text or a regular expression."""
    if c is None:
        return True
    return not (c == "\\" or "a" <= c <= "z" or "A" <= c <= "Z" or "0" <= c <= "9")


def _isdigit(c: Optional[str]) -> bool:
    return c is not None and "0" <= c <= "9"


def _live(c: Optional[str]) -> bool:
    return c is not None and c != "\0"


@dataclass
class Addr:
    """An address: ``typ`` is one of ``# l / ? " . $ + - ' , ;``."""

    typ: str = ""
    re: str = ""
    left: Optional["Addr"] = None  # left side of , and ;
    num: int = 0
    next: Optional["Addr"] = None  # following address, or right side of , and ;


@dataclass
class Cmd:
    """A parsed command."""

    addr: Optional[Addr] = None
    re: str = ""
    cmd: Optional["Cmd"] = None  # target of x, g, { and the like
    text: str = ""  # text of a, c, i; right-hand side of s
    mtaddr: Optional[Addr] = None  # destination address of m and t
    next: Optional["Cmd"] = None  # next command within braces
    num: int = 0
    flag: str = ""
    cmdc: str = ""


class CmdParser:
    """Parses Edit commands from a string.

    ``lastpat`` holds the most recent regular expression, which an empty
    pattern refers back to.
    """

    def __init__(self, text: str, lastpat: str = "") -> None:
        self.buf = text
        self.pos = 0
        self.lastpat = lastpat

    def _getch(self) -> Optional[str]:
        if self.pos == len(self.buf):
            return None
        c = self.buf[self.pos]
        self.pos += 1
        return c

    def _nextc(self) -> Optional[str]:
        if self.pos == len(self.buf):
            return None
        return self.buf[self.pos]

    def _ungetch(self) -> None:
        self.pos -= 1
        if self.pos < 0:
            raise EditParseError("ungetch before start of command")

    def _skipbl(self) -> Optional[str]:
        while True:
            c = self._getch()
            if c not in (" ", "\t"):
                break
        if c is not None:
            self._ungetch()
        return c

    def _atnl(self) -> None:
        self._skipbl()
        c = self._getch()
        if c != "\n":
            raise EditParseError(f"newline expected (saw {c if c is not None else 'EOF'})")

    def getnum(self, signok):
        """Read a decimal number, optionally signed; a missing number is 1."""
        sign = 1
        if signok and self._nextc() == "-":
            sign = -1
            self._getch()
        if not _isdigit(self._nextc()):
            return sign
        n = 0
        while True:
            c = self._getch()
            if not _isdigit(c):
                break
            n = n * 10 + ord(c) - ord("0")
        self._ungetch()
        return sign * n

    def getrhs(self, delim, cmd):
        """Read text up to ``delim`` or a newline, interpreting backslashes."""
        parts = []
        while True:
            c = self._getch()
            if not (_live(c) and c != delim and c != "\n"):
                break
            if c == "\\":
                c = self._getch()
                if not _live(c):
                    raise EditParseError(BAD_RHS)
                if c == "\n":
                    self._ungetch()
                    c = "\\"
                elif c == "n":
                    c = "\n"
                elif c != delim and (cmd == "s" or c != "\\"):
                    parts.append("\\")  # s interprets its own escapes
            parts.append(c)
        self._ungetch()  # the caller looks at the delimiter or newline
        return "".join(parts)

    def collecttoken(self, end):
        """Read leading blanks and then text up to a character of ``end``."""
        parts = []
        while self._nextc() in (" ", "\t"):
            parts.append(self._getch())  # blanks are significant for file names
        while True:
            c = self._getch()
            if not _live(c) or c in end:
                break
            parts.append(c)
        if c != "\n":
            self._atnl()
        return "".join(parts)

    def collecttext(self):
        """Read the text of a, c or i: delimited, or lines ended by a lone ``.``."""
        if self._skipbl() == "\n":
            self._getch()
            s = ""
            i = 0
            while True:
                begline = i
                while True:
                    c = self._getch()
                    if not (_live(c) and c != "\n"):
                        break
                    i += 1
                    s += c
                i += 1
                s += "\n"
                if c is None:
                    return s
                if s[begline] == "." and s[begline + 1] == "\n":
                    break
            return s[:-2]
        delim = self._getch()
        if not okdelim(delim):
            raise BadDelimiterError(delim)
        s = self.getrhs(delim, "a")
        if self._nextc() == delim:
            self._getch()
        self._atnl()
        return s

    def getregexp(self, delim):
        """Read a regular expression ended by ``delim`` or a newline.

        An empty expression stands for the previous one.
        """
        parts = []
        while True:
            c = self._getch()
            if c is None:
                break
            if c == "\\":
                if self._nextc() == delim:
                    c = self._getch()
                elif self._nextc() == "\\":
                    parts.append(c)
                    c = self._getch()
            elif c == delim or c == "\n":
                break
            parts.append(c)
        if c is not None and c != delim and c != "\0":
            self._ungetch()
        if parts:
            self.lastpat = "".join(parts)
        if not self.lastpat:
            raise EditParseError(REGEXP_MISSING)
        return self.lastpat

    def simpleaddr(self):
        """Parse a simple address, or return None if there is none."""
        c = self._skipbl()
        addr = Addr()
        if c == "#":
            addr.typ = self._getch()
            addr.num = self.getnum(False)
        elif _isdigit(c):
            addr.typ = "l"
            addr.num = self.getnum(False)
        elif c is not None and c in "/?\"":
            addr.typ = self._getch()
            addr.re = self.getregexp(addr.typ)
        elif c is not None and c in ".$+-'":
            addr.typ = self._getch()
        else:
            return None

        addr.next = self.simpleaddr()
        nxt = addr.next
        if nxt is not None:
            if nxt.typ in (".", "$", "'"):
                if addr.typ != '"':
                    raise EditParseError(BAD_ADDR_SYNTAX)
            elif nxt.typ == '"':
                raise EditParseError(BAD_ADDR_SYNTAX)
            elif nxt.typ in ("l", "#", "/", "?"):
                if nxt.typ in ("l", "#") and addr.typ == '"':
                    pass
                elif addr.typ not in ("+", "-"):
                    addr.next = Addr(typ="+", next=nxt)  # the implied '+'
            elif nxt.typ not in ("+", "-"):
                raise EditParseError(BAD_ADDR_SYNTAX)
        return addr

    def compoundaddr(self):
        """Parse an address joined with ``,`` or ``;``, or return None."""
        left = self.simpleaddr()
        typ = self._skipbl()
        if typ not in (",", ";"):
            return left
        self._getch()
        nxt = self.compoundaddr()
        if nxt is not None and nxt.typ in (",", ";") and nxt.left is None:
            raise EditParseError(BAD_ADDR_SYNTAX)
        return Addr(typ=typ, left=left, next=nxt)

    def parse(self, nest=0):
        """Parse one command; return None at the end of input or a closing brace."""
        cmd = Cmd()
        cmd.addr = self.compoundaddr()
        if self._skipbl() is None:
            return None
        c = self._getch()
        if c is None:
            return None
        cmd.cmdc = c
        if c == "c" and self._nextc() == "d":
            self._getch()
            cmd.cmdc = CD_COMMAND

        spec = cmdlookup(cmd.cmdc)
        if spec is not None:
            if cmd.cmdc == "\n":
                return cmd  # the newline command works out its own address
            if spec.defaddr is DefaultAddress.NO and cmd.addr is not None:
                raise EditParseError(ADDR_NOT_REQUIRED)
            if spec.count is not CountType.NO:
                cmd.num = self.getnum(spec.count is CountType.SIGNED)
            if spec.regexp:
                # x without a pattern means each line; X without one means all files
                c = self._nextc()
                if spec.cmdc not in ("x", "X") or c not in (" ", "\t", "\n"):
                    self._skipbl()
                    c = self._getch()
                    if c == "\n" or c is None:
                        raise EditParseError(ADDRESS_MISSING)
                    if not okdelim(c):
                        raise BadDelimiterError(c)
                    cmd.re = self.getregexp(c)
                    if spec.cmdc == "s":
                        cmd.text = self.getrhs(c, "s")
                        if self._nextc() == c:
                            self._getch()
                            if self._nextc() == "g":
                                cmd.flag = self._getch()
            if spec.addr:
                cmd.mtaddr = self.simpleaddr()
                if cmd.mtaddr is None:
                    raise EditParseError(BAD_ADDR)
            if spec.defcmd:
                if self._skipbl() == "\n":
                    self._getch()
                    cmd.cmd = Cmd(cmdc=spec.defcmd)
                else:
                    cmd.cmd = self.parse(nest)
                    if cmd.cmd is None:
                        raise EditParseError(f"missing command after {spec.cmdc}")
            elif spec.text:
                cmd.text = self.collecttext()
            elif spec.token:
                cmd.text = self.collecttoken(spec.token)
            else:
                self._atnl()
        elif cmd.cmdc == "{":
            last = None
            while True:
                if self._skipbl() == "\n":
                    self._getch()
                inner = self.parse(nest + 1)
                if last is not None:
                    last.next = inner
                else:
                    cmd.cmd = inner
                last = inner
                if inner is None:
                    break
        elif cmd.cmdc == "}":
            self._atnl()
            if nest == 0:
                raise EditParseError(LEFT_BRACE_MISSING)
            return None
        else:
            raise InvalidCommandError(cmd.cmdc)
        return cmd


def parse_commands(text):
    """Parse every command in ``text``, which gains a final newline if it lacks one."""
    if not text:
        return []
    if not text.endswith("\n"):
        text += "\n"
    parser = CmdParser(text)
    commands = []
    while True:
        cmd = parser.parse(0)
        if cmd is None:
            return commands
        commands.append(cmd)