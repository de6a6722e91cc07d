"""Start and stop signer daemon processes.

Background starts detach the daemon into its own session with no inherited
standard streams, so closing the launching UI does not take it down.
Interactive starts are delegated to an InteractiveLauncher.
"""

import logging
import re
import subprocess
from enum import Enum
from pathlib import Path
from typing import List, Optional

from signerctl.core.errors import DaemonSpawnError, InvalidModeError
from signerctl.daemon.terminals import InteractiveLauncher

logger = logging.getLogger(__name__)

# POSIX extended regex metacharacters, as understood by pkill.
_ERE_SPECIAL = re.compile(r"([.\[\]()*+?{}|^$\\])")


class LaunchMode(str, Enum):
    """Signer subcommands this launcher may start."""
    INITIALIZE = "init"
    RUN_DAEMON = "daemon"
    ADD_ACCOUNT = "add-account"

    @classmethod
    def parse(cls, value: "str | LaunchMode") -> "LaunchMode":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise InvalidModeError(f"Invalid mode: {value}") from None


def build_command(binary: Path, mode: LaunchMode) -> List[str]:
    return [str(binary), mode.value]


def daemon_kill_pattern(binary_name: str) -> str:
    """
    Regex handed to `pkill -f` that matches `<binary> daemon` invocations.

    `init` and `add-account` invocations are not matched.
    """
    name = _ERE_SPECIAL.sub(r"\\\1", binary_name)
    return f"{name}[[:space:]]+{LaunchMode.RUN_DAEMON.value}([[:space:]]|$)"


class DaemonProcessController:
    """
    Process-level control of the signer.

    Does not confirm reachability; see monitor.await_socket and DaemonClient.
    """

    def __init__(self, binary_name: str, launcher: InteractiveLauncher):
        self.binary_name = binary_name
        self.launcher = launcher

    def start_background(self, binary: Path, mode: LaunchMode) -> subprocess.Popen:
        """
        Spawn the signer detached from this process and return immediately.

        Raises:
            DaemonSpawnError: If the executable cannot be started
        """
        command = build_command(binary, mode)
        try:
            process = subprocess.Popen(
                command,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError as e:
            raise DaemonSpawnError(
                f"Failed to launch signer in background ({binary}): {e}"
            ) from e

        logger.info(f"Background signer started (PID: {process.pid})")
        return process

    def start_interactive(self, binary: Path, mode: LaunchMode) -> str:
        """Run the signer in a visible terminal; returns the terminal used."""
        return self.launcher.spawn_interactive(build_command(binary, mode))

    def terminate(self) -> bool:
        """
        Kill every running `<binary> daemon` process.

        Returns:
            True if a process was signalled, False if none was running

        Raises:
            DaemonSpawnError: If pkill is missing or fails
        """
        pattern = daemon_kill_pattern(self.binary_name)
        try:
            result = subprocess.run(
                ["pkill", "-f", pattern],
                capture_output=True,
                text=True,
            )
        except OSError as e:
            raise DaemonSpawnError(f"Failed to kill signer daemon process: {e}") from e

        # pkill: 0 = matched, 1 = nothing matched
        if result.returncode == 0:
            logger.info("Killed signer daemon process")
            return True
        if result.returncode == 1:
            logger.info("No signer daemon process found to kill")
            return False

        raise DaemonSpawnError(
            f"pkill exited with status {result.returncode}: {result.stderr.strip()}"
        )

    @staticmethod
    def stop(process: Optional[subprocess.Popen], timeout: float = 1.0) -> None:
        """Terminate a background child we started, if it is still running."""
        if process is None or process.poll() is not None:
            return
        logger.info(f"Stopping background signer (PID: {process.pid})")
        process.terminate()
        try:
            process.wait(timeout=timeout)
        except subprocess.TimeoutExpired:
            process.kill()
