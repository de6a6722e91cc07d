"""
Host Detection Utilities

Helpers that map the running platform onto the names the launcher needs:
the OS family (to choose an interactive launcher) and the target triple
(to find the bundled signer sidecar).
"""

import platform
from typing import Optional

_ARCH_ALIASES = {
    "amd64": "x86_64",
    "x86_64": "x86_64",
    "arm64": "aarch64",
    "aarch64": "aarch64",
}


def detect_os() -> str:
    """
    Auto-detect OS family.

    Returns:
        str: Short name (MacOS, Linux, Windows) or the raw platform.system()
    """
    system = platform.system()

    if system == "Darwin":
        return "MacOS"
    elif system == "Linux":
        return "Linux"
    elif system == "Windows":
        return "Windows"

    return system


def detect_target_triple(
    os_family: Optional[str] = None,
    machine: Optional[str] = None,
) -> Optional[str]:
    """
    Return the target triple the sidecar is suffixed with.

    Returns None for hosts no sidecar is built for.
    """
    os_family = os_family or detect_os()
    arch = _ARCH_ALIASES.get((machine or platform.machine()).lower())
    if arch is None:
        return None

    if os_family == "Linux":
        return f"{arch}-unknown-linux-gnu"
    if os_family == "MacOS":
        return f"{arch}-apple-darwin"
    return None
