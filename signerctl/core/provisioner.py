"""Install the signer binary at its well-known location.

The application ships the daemon as a sidecar next to its own executable,
either under its plain name or suffixed with the host target triple. On first
use the sidecar is copied into the install directory and marked executable.
"""

import logging
import os
import shutil
import stat
from pathlib import Path
from typing import Iterable, List, Optional

from signerctl.core.errors import ProvisioningError
from signerctl.utils.detection import detect_target_triple

logger = logging.getLogger(__name__)

EXECUTABLE_MODE = 0o755


def sidecar_candidates(
    search_dirs: Iterable[Path],
    binary_name: str,
    target_triple: Optional[str] = None,
) -> List[Path]:
    """
    List the places a bundled sidecar may live, in search order.

    Args:
        search_dirs: Directories to search (usually the program directory)
        binary_name: Base name of the signer binary
        target_triple: Host triple, detected when omitted

    Returns:
        Candidate paths; each directory contributes `<name>`,
        `<name>-<triple>`, then the triple-suffixed name under
        `../Resources` (macOS app bundle) and `../../binaries` (dev build)
    """
    triple = target_triple if target_triple is not None else detect_target_triple()

    candidates = []
    for directory in search_dirs:
        directory = Path(directory)
        candidates.append(directory / binary_name)
        if triple:
            suffixed = f"{binary_name}-{triple}"
            candidates.extend([
                directory / suffixed,
                directory / ".." / "Resources" / suffixed,
                directory / ".." / ".." / "binaries" / suffixed,
            ])
    return candidates


class BinaryProvisioner:
    """Ensures the signer executable exists at `install_path`."""

    def __init__(self, install_path: Path, candidates: Iterable[Path]):
        self.install_path = install_path
        self.candidates = list(candidates)

    def find_source(self) -> Path:
        for path in self.candidates:
            if path.is_file():
                return path

        searched = ", ".join(str(p) for p in self.candidates) or "<no search paths>"
        raise ProvisioningError(
            f"Signer sidecar not found. Searched: {searched}"
        )

    def ensure_installed(self) -> Path:
        """
        Install the binary if needed and return its path.

        Idempotent: an existing binary is returned without copying; only a
        missing executable bit is repaired.

        Raises:
            ProvisioningError: If no sidecar exists or the copy/chmod fails
        """
        target_dir = self.install_path.parent
        try:
            target_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ProvisioningError(f"Failed to create directory {target_dir}: {e}") from e

        if self.install_path.exists():
            logger.info(f"Signer already installed at {self.install_path}")
            if not os.access(self.install_path, os.X_OK):
                self._make_executable()
            return self.install_path

        source = self.find_source()
        logger.info(f"Found signer sidecar at {source}")

        try:
            shutil.copyfile(source, self.install_path)
        except OSError as e:
            raise ProvisioningError(
                f"Failed to copy signer from {source} to {self.install_path}: {e}"
            ) from e

        self._make_executable()
        logger.info(f"Signer installed to {self.install_path}")
        return self.install_path

    def _make_executable(self) -> None:
        try:
            os.chmod(self.install_path, EXECUTABLE_MODE)
        except OSError as e:
            raise ProvisioningError(
                f"Failed to set executable permission on {self.install_path}: {e}"
            ) from e

    def is_installed(self) -> bool:
        path = self.install_path
        return path.is_file() and bool(path.stat().st_mode & stat.S_IXUSR)
