"""Interactive launchers: run a command inside a visible terminal.

The signer may need to prompt for a passphrase, so interactive starts are
hosted in a terminal emulator. Each host has its own launcher; each launcher
tries an ordered list of emulators and the first one that accepts the spawn
wins.
"""

import logging
import shlex
import subprocess
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from signerctl.core.errors import NoTerminalAvailable
from signerctl.utils.detection import detect_os

logger = logging.getLogger(__name__)

LINUX_TERMINALS = ("gnome-terminal", "konsole", "xterm")
MACOS_TERMINALS = ("Terminal",)


class InteractiveLauncher(ABC):
    """Spawns a command where the user can see and answer it."""

    candidates: Sequence[str]

    @abstractmethod
    def spawn_interactive(self, command: Sequence[str]) -> str:
        """
        Start `command` in a terminal.

        Returns:
            Name of the terminal that accepted the command

        Raises:
            NoTerminalAvailable: If none of the candidates could be used
        """

    def _give_up(self, failures: List[str]) -> NoTerminalAvailable:
        tried = "; ".join(failures) or "no candidates configured"
        return NoTerminalAvailable(
            f"No terminal emulator found ({tried}). "
            f"Please install one of: {', '.join(self.candidates)}."
        )


class LinuxTerminalLauncher(InteractiveLauncher):
    """Tries X11/Wayland terminal emulators in preference order."""

    def __init__(self, candidates: Optional[Sequence[str]] = None):
        self.candidates = tuple(candidates or LINUX_TERMINALS)

    @staticmethod
    def build_argv(terminal: str, command: Sequence[str]) -> List[str]:
        # gnome-terminal takes the argv after "--"; the rest want one -e string.
        if terminal == "gnome-terminal":
            return [terminal, "--", *command]
        return [terminal, "-e", shlex.join(command)]

    def spawn_interactive(self, command: Sequence[str]) -> str:
        failures = []
        for terminal in self.candidates:
            argv = self.build_argv(terminal, command)
            try:
                subprocess.Popen(argv)
            except OSError as e:
                logger.info(f"Terminal {terminal} unavailable: {e}")
                failures.append(f"{terminal}: {e}")
                continue

            logger.info(f"Launched {shlex.join(command)} in {terminal}")
            return terminal

        raise self._give_up(failures)


class MacTerminalLauncher(InteractiveLauncher):
    """Drives terminal applications through AppleScript (osascript)."""

    def __init__(self, candidates: Optional[Sequence[str]] = None):
        self.candidates = tuple(candidates or MACOS_TERMINALS)

    @staticmethod
    def build_script(application: str, command: Sequence[str]) -> str:
        command_line = shlex.join(command).replace("\\", "\\\\").replace('"', '\\"')
        return (
            f'tell application "{application}"\n'
            "activate\n"
            f'do script "{command_line}"\n'
            "end tell"
        )

    def spawn_interactive(self, command: Sequence[str]) -> str:
        failures = []
        for application in self.candidates:
            script = self.build_script(application, command)
            try:
                result = subprocess.run(
                    ["osascript", "-e", script],
                    capture_output=True,
                    text=True,
                )
            except OSError as e:
                failures.append(f"{application}: {e}")
                continue

            if result.returncode != 0:
                failures.append(f"{application}: osascript failed: {result.stderr.strip()}")
                continue

            logger.info(f"Launched {shlex.join(command)} in {application}")
            return application

        raise self._give_up(failures)


class UnsupportedHostLauncher(InteractiveLauncher):
    """Placeholder for hosts without a terminal integration."""

    def __init__(self, os_family: str):
        self.os_family = os_family
        self.candidates = ()

    def spawn_interactive(self, command: Sequence[str]) -> str:
        raise NoTerminalAvailable(
            f"Interactive launch is not supported on {self.os_family}"
        )


def get_interactive_launcher(
    os_family: Optional[str] = None,
    candidates: Optional[Sequence[str]] = None,
) -> InteractiveLauncher:
    """Pick the launcher for the host OS."""
    os_family = os_family or detect_os()

    if os_family == "Linux":
        return LinuxTerminalLauncher(candidates)
    if os_family == "MacOS":
        return MacTerminalLauncher(candidates)
    return UnsupportedHostLauncher(os_family)
