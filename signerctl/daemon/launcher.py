"""Launch orchestration: get a running, reachable signer with minimal prompting.

    validate mode -> ensure binary -> decide
        decide: mode == daemon, trust session valid, socket absent
            -> background attempt
                socket appears in time -> done (background)
                otherwise -> invalidate trust session -> interactive
        otherwise -> interactive

An interactive start ends the call: the user completes setup in the terminal
and this module does not wait for the daemon afterwards.

Failures are raised as SignerError subclasses. Background failures are never
raised; they are recovered by falling back to the interactive start.
"""

import logging
import subprocess
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

from signerctl.core.configs import LauncherConfig
from signerctl.core.errors import DaemonSpawnError
from signerctl.core.provisioner import BinaryProvisioner, sidecar_candidates
from signerctl.core.trust_session import TrustSessionStore
from signerctl.daemon.monitor import await_socket
from signerctl.daemon.process import DaemonProcessController, LaunchMode
from signerctl.daemon.terminals import get_interactive_launcher

logger = logging.getLogger(__name__)


class LaunchState(str, Enum):
    BACKGROUND = "background"
    INTERACTIVE = "interactive"


@dataclass
class LaunchResult:
    """Outcome of a successful launch."""
    mode: LaunchMode
    state: LaunchState
    binary: Path
    message: str
    terminal: Optional[str] = None
    trust_invalidated: bool = False


class LaunchOrchestrator:
    """
    Composes provisioner, trust store, process controller and socket monitor.

    Not serialized: a second concurrent launch is the caller's to prevent.
    """

    def __init__(
        self,
        provisioner: BinaryProvisioner,
        trust_store: TrustSessionStore,
        controller: DaemonProcessController,
        socket_path: Path,
        socket_wait_timeout: float = 3.0,
        poll_interval: float = 0.1,
        wait_for_socket: Callable[..., bool] = await_socket,
    ):
        self.provisioner = provisioner
        self.trust_store = trust_store
        self.controller = controller
        self.socket_path = socket_path
        self.socket_wait_timeout = socket_wait_timeout
        self.poll_interval = poll_interval
        self.wait_for_socket = wait_for_socket

    @classmethod
    def from_config(cls, config: LauncherConfig) -> "LaunchOrchestrator":
        """Wire the real collaborators for the current host."""
        provisioner = BinaryProvisioner(
            config.binary_path,
            sidecar_candidates(config.sidecar_dirs, config.binary_name),
        )
        controller = DaemonProcessController(
            config.binary_name,
            get_interactive_launcher(candidates=config.terminals),
        )
        return cls(
            provisioner=provisioner,
            trust_store=TrustSessionStore(config.trust_session_path),
            controller=controller,
            socket_path=config.socket_path,
            socket_wait_timeout=config.socket_wait_timeout,
            poll_interval=config.poll_interval,
        )

    def launch(self, mode: "str | LaunchMode") -> LaunchResult:
        """
        Start the signer in the requested mode.

        Args:
            mode: "init", "daemon" or "add-account"

        Returns:
            LaunchResult describing how the signer was started

        Raises:
            InvalidModeError: Unknown mode, raised before anything is spawned
            ProvisioningError: The binary is missing and cannot be installed
            NoTerminalAvailable: Interactive start found no usable terminal
        """
        mode = LaunchMode.parse(mode)
        binary = self.provisioner.ensure_installed()
        logger.info(f"Launching signer: {binary} {mode.value}")

        if mode is not LaunchMode.RUN_DAEMON:
            return self._start_interactive(binary, mode)

        has_trust_session = self.trust_store.is_valid()
        daemon_already_running = self.socket_path.exists()
        logger.info(f"Trust session valid: {has_trust_session}")
        logger.info(f"Daemon socket present: {daemon_already_running}")

        if not has_trust_session or daemon_already_running:
            return self._start_interactive(binary, mode)

        result = self._attempt_background(binary, mode)
        if result is not None:
            return result

        invalidated = self.trust_store.invalidate()
        result = self._start_interactive(binary, mode)
        result.trust_invalidated = invalidated
        return result

    def _attempt_background(self, binary: Path, mode: LaunchMode) -> Optional[LaunchResult]:
        logger.info("Trust session valid and daemon not running - attempting background launch")
        try:
            process = self.controller.start_background(binary, mode)
        except DaemonSpawnError as e:
            logger.warning(f"Background launch failed, falling back to terminal: {e}")
            return None

        if self.wait_for_socket(
            self.socket_path,
            timeout=self.socket_wait_timeout,
            interval=self.poll_interval,
        ):
            logger.info("Socket appeared - daemon started in background")
            return LaunchResult(
                mode=mode,
                state=LaunchState.BACKGROUND,
                binary=binary,
                message=f"Signer daemon started in background ({self.socket_path})",
            )

        logger.warning(
            f"Socket did not appear within {self.socket_wait_timeout}s - "
            "trust session likely no longer valid, falling back to terminal launch"
        )
        self._stop_quietly(process)
        return None

    def _stop_quietly(self, process: subprocess.Popen) -> None:
        # A leftover child could bind the socket under the interactive one.
        try:
            self.controller.stop(process)
        except OSError as e:
            logger.warning(f"Could not stop background signer: {e}")

    def _start_interactive(self, binary: Path, mode: LaunchMode) -> LaunchResult:
        logger.info("Launching in terminal for user input")
        terminal = self.controller.start_interactive(binary, mode)
        return LaunchResult(
            mode=mode,
            state=LaunchState.INTERACTIVE,
            binary=binary,
            message=f"Signer '{mode.value}' opened in {terminal}",
            terminal=terminal,
        )
