from __future__ import annotations

import random
from dataclasses import dataclass
from typing import List, Optional

from .config import ROOT_PROCESS, SHELL_BANNER, SHELL_PROMPT


@dataclass(frozen=True)
class ShellProcess:
    pid: int
    name: str
    ppid: int


class MiniShell:
    """
    Toy command interpreter with a fake process table.
    """

    COMMANDS = ("ls", "fork", "ps", "clear", "whoami")

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.rng = rng or random.Random()
        pid, name, ppid = ROOT_PROCESS
        self.processes: List[ShellProcess] = [ShellProcess(pid, name, ppid)]
        self.history: List[str] = list(SHELL_BANNER)

    def execute(self, line: str) -> List[str]:
        """
        Run one command line and return the output lines it produced.
        """
        cmd = line.strip().lower()

        if cmd == "clear":
            self.history = []
            return []

        if cmd == "help":
            output = ["Available: " + ", ".join(self.COMMANDS)]
        elif cmd == "ls":
            output = ["bin/  boot/  dev/  etc/  home/  proc/  root/"]
        elif cmd == "whoami":
            output = ["root (System Administrator)"]
        elif cmd == "ps":
            output = ["PID\tPPID\tCMD"]
            output += [f"{p.pid}\t{p.ppid}\t{p.name}" for p in self.processes]
        elif cmd == "fork":
            output = [self._fork()]
        else:
            output = [f"sh: command not found: {cmd}"]

        self.history.append(f"{SHELL_PROMPT} {line}")
        self.history.extend(output)
        return output

    def _fork(self) -> str:
        root_pid = self.processes[0].pid
        new_pid = self.processes[-1].pid + self.rng.randint(1, 10)
        self.processes.append(ShellProcess(new_pid, "child_proc", root_pid))
        return f"[SYSCALL] fork() successful. New Child PID: {new_pid}"
