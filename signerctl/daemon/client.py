"""Lightweight client for signer daemon communication.

One connection carries exactly one exchange: the request line goes out
terminated by a newline, one response line comes back. The payload (JSON-RPC
in practice) is opaque here; only framing and timing are enforced.

Usage:
    client = DaemonClient(config.socket_path)
    response = client.send('{"method": "get_public_key"}')

Errors are surfaced as-is and never retried. Reconnecting, relaunching or
giving up is the caller's decision.
"""

import logging
import socket
from pathlib import Path
from typing import Optional

from signerctl.core.errors import (
    DaemonUnreachable,
    RequestSendFailed,
    RequestTimedOut,
    ResponseReadFailed,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 10.0


class DaemonClient:
    """
    Line-framed request/response client over a Unix socket.

    Uses stdlib socket only; no pooling, no connection reuse.
    """

    def __init__(
        self,
        socket_path: Path,
        timeout: float = DEFAULT_TIMEOUT_S,
    ):
        """
        Initialize client.

        Args:
            socket_path: Path to the daemon's Unix socket
            timeout: Read and write timeout in seconds
        """
        self.socket_path = socket_path
        self.timeout = timeout

    def is_socket_present(self) -> bool:
        """Cheap hint that a daemon may be running (the socket path exists)."""
        return self.socket_path.exists()

    def send(self, request: str, timeout: Optional[float] = None) -> str:
        """
        Send one request line and return the response line.

        Args:
            request: Serialized request, without the trailing newline
            timeout: Overrides the client timeout for this call

        Returns:
            The response with trailing line terminators removed

        Raises:
            DaemonUnreachable: Nothing accepted the connection
            RequestSendFailed: Writing the request failed
            RequestTimedOut: No response arrived within the timeout
            ResponseReadFailed: Reading the response failed otherwise
        """
        timeout = self.timeout if timeout is None else timeout
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        # Applies to connect, send and recv alike.
        sock.settimeout(timeout)

        try:
            try:
                sock.connect(str(self.socket_path))
            except OSError as e:
                raise DaemonUnreachable(
                    f"Failed to connect to signer daemon at {self.socket_path}: {e}. "
                    "Is the daemon running?"
                ) from e

            try:
                sock.sendall(f"{request}\n".encode("utf-8"))
            except OSError as e:
                raise RequestSendFailed(
                    f"Failed to send request to {self.socket_path}: {e}"
                ) from e

            try:
                with sock.makefile("rb") as reader:
                    line = reader.readline()
            except socket.timeout as e:
                raise RequestTimedOut(
                    f"Request to {self.socket_path} timed out after {timeout}s - "
                    "daemon may have crashed or is unresponsive"
                ) from e
            except OSError as e:
                raise ResponseReadFailed(
                    f"Failed to read response from {self.socket_path}: {e}"
                ) from e

        finally:
            sock.close()

        logger.debug(f"Received {len(line)} bytes from {self.socket_path}")
        return line.decode("utf-8", errors="replace").rstrip("\r\n")


def send_request(
    request: str,
    socket_path: Path,
    timeout: float = DEFAULT_TIMEOUT_S,
) -> str:
    """Send a single request with a throwaway client."""
    return DaemonClient(socket_path, timeout=timeout).send(request)
