"""Error taxonomy for signer launch and daemon IPC.

Every message carries the attempted path and the underlying OS error text so
a failure can be diagnosed from the message alone.
"""


class SignerError(Exception):
    """Base class for all signerctl failures."""


class ProvisioningError(SignerError):
    """Raised when the signer binary is missing or cannot be installed."""


class InvalidModeError(SignerError, ValueError):
    """Raised for an unrecognized launch mode (caller bug, never retried)."""


class DaemonSpawnError(SignerError):
    """Raised when a signer or pkill process cannot be spawned."""


class NoTerminalAvailable(SignerError):
    """Raised when no terminal emulator could host an interactive start."""


class DaemonUnreachable(SignerError):
    """Raised when nothing is listening on the daemon socket."""


class RequestSendFailed(SignerError):
    """Raised when writing a request to the daemon fails."""


class RequestTimedOut(SignerError):
    """Raised when the daemon accepted a connection but did not answer in time."""


class ResponseReadFailed(SignerError):
    """Raised when reading the daemon response fails for a reason other than a timeout."""
