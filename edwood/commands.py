"""Bookkeeping for the external commands the editor has started.

The tracker keeps the list of running commands and shows their names in
the row tag. It also copes with a command that exits before anyone has
told it that the command started.
"""

from __future__ import annotations

import signal
import subprocess
import threading
from dataclasses import dataclass, field
from typing import Callable, Optional

_SIGNAL_NAMES = {
    getattr(signal, name): text
    for name, text in (
        ("SIGHUP", "hangup"),
        ("SIGINT", "interrupt"),
        ("SIGQUIT", "quit"),
        ("SIGILL", "illegal instruction"),
        ("SIGABRT", "aborted"),
        ("SIGFPE", "floating point exception"),
        ("SIGKILL", "killed"),
        ("SIGSEGV", "segmentation fault"),
        ("SIGPIPE", "broken pipe"),
        ("SIGALRM", "alarm clock"),
        ("SIGTERM", "terminated"),
    )
    if hasattr(signal, name)
}


@dataclass(frozen=True)
class ProcessState:
    """How a process ended.

    A negative ``returncode`` means the process was ended by that signal.
    """

    pid: int
    returncode: int = 0

    @classmethod
    def from_popen(cls, process: subprocess.Popen) -> "ProcessState":
        """Wait for ``process`` and describe how it ended."""
        returncode = process.wait()
        return cls(pid=process.pid, returncode=returncode)

    @property
    def success(self) -> bool:
        """True if the process exited with status zero."""
        return self.returncode == 0

    def __str__(self) -> str:
        if self.returncode < 0:
            signum = -self.returncode
            return "signal: " + _SIGNAL_NAMES.get(signum, f"signal {signum}")
        return f"exit status {self.returncode}"


@dataclass(eq=False)
class Command:
    """An external command started by the editor."""

    pid: int
    name: str
    process: Optional[subprocess.Popen] = None
    text: str = ""
    args: list[str] = field(default_factory=list)
    is_edit_command: bool = False


class CommandTracker:
    """Tracks running commands and reports their fate as warnings.

    ``tag`` mirrors the row tag, which lists the names of running commands.
    ``on_edit_done`` is called whenever a command started from an Edit
    command has finished.
    """

    def __init__(
        self,
        tag: str = "",
        on_edit_done: Optional[Callable[[Command], None]] = None,
    ) -> None:
        self.commands: list[Command] = []
        self.warnings: list[str] = []
        self.tag = tag
        self._on_edit_done = on_edit_done
        self._early_exits: dict[int, ProcessState] = {}
        self._lock = threading.RLock()

    def _warn(self, message: str) -> None:
        self.warnings.append(message)

    def _free(self, command: Command) -> None:
        if command.is_edit_command and self._on_edit_done is not None:
            self._on_edit_done(command)

    def started(self, command):
        """Record that ``command`` has started."""
        with self._lock:
            state = self._early_exits.pop(command.pid, None)
            if state is not None:
                message = str(state)
                if message:
                    self._warn(message + "\n")
                self._free(command)
                return
            self.commands.append(command)
            self.tag = command.name + self.tag

    def exited(self, state):
        """Record that the process described by ``state`` has ended."""
        with self._lock:
            command = next((c for c in self.commands if c.pid == state.pid), None)
            if command is None:
                # The process ended before it was reported as started.
                self._early_exits[state.pid] = state
                return
            self.commands.remove(command)
            if command.name and command.name in self.tag:
                self.tag = self.tag.replace(command.name, "", 1)
            if not state.success:
                self._warn(f"{command.name}: {state}\n")
        self._free(command)

    def kill(self, name):
        """Kill every running command called ``name``."""
        with self._lock:
            found = False
            for command in self.commands:
                if command.name != name + " ":
                    continue
                found = True
                try:
                    if command.process is None:
                        raise ProcessLookupError("process not available")
                    command.process.kill()
                except OSError as exc:
                    self._warn(f"kill {name}: {exc}\n")
            if not found:
                self._warn(f"Kill: no process {name}\n")

    def kill_all(self):
        """Kill every running command, ignoring failures."""
        with self._lock:
            for command in self.commands:
                if command.process is None:
                    continue
                try:
                    command.process.kill()
                except OSError:
                    pass