"""signerctl - launch and talk to a local key signer daemon.

Architecture:
- BinaryProvisioner: installs the bundled signer binary
- TrustSessionStore: decides whether a silent (no prompt) start is allowed
- LaunchOrchestrator: background start with interactive fallback
- DaemonClient: one-line request/response over the daemon's Unix socket
"""

__version__ = "0.1.0"
