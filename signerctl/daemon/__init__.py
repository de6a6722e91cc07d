"""Signer daemon control and IPC.

- DaemonClient: line-framed request/response over a Unix socket
- DaemonProcessController: background, interactive and kill operations
- LaunchOrchestrator: trust-aware launch with interactive fallback
- await_socket: bounded wait for the daemon socket to appear
"""

from signerctl.daemon.client import DaemonClient, send_request
from signerctl.daemon.launcher import LaunchOrchestrator, LaunchResult, LaunchState
from signerctl.daemon.monitor import await_socket
from signerctl.daemon.process import DaemonProcessController, LaunchMode

__all__ = [
    "DaemonClient",
    "send_request",
    "LaunchOrchestrator",
    "LaunchResult",
    "LaunchState",
    "await_socket",
    "DaemonProcessController",
    "LaunchMode",
]
