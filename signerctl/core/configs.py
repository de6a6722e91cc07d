"""Configuration management for signerctl.

Loads user settings from ~/.config/signerctl/config.cfg, then applies
SIGNERCTL_* overrides from a .env file beside it and from the process
environment. Provides LauncherConfig, the single place every filesystem
path and timeout is resolved.
"""

import configparser
from dataclasses import dataclass, field
import os
from pathlib import Path
import sys
from typing import Dict, Optional, Tuple

from dotenv import dotenv_values

# Default location for user configuration.
CONFIG_PATH = Path.home() / ".config" / "signerctl" / "config.cfg"

ENV_PREFIX = "SIGNERCTL_"

DEFAULT_BINARY_NAME = "keysigner"
DEFAULT_SOCKET_WAIT_S = 3.0
DEFAULT_POLL_INTERVAL_S = 0.1
DEFAULT_REQUEST_TIMEOUT_S = 10.0


@dataclass
class LauncherConfig:
    binary_name: str
    install_dir: Path
    signer_dir: Path
    socket_path: Path
    trust_session_path: Path
    sidecar_dirs: Tuple[Path, ...] = field(default_factory=tuple)
    socket_wait_timeout: float = DEFAULT_SOCKET_WAIT_S
    poll_interval: float = DEFAULT_POLL_INTERVAL_S
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT_S
    terminals: Optional[Tuple[str, ...]] = None

    @property
    def binary_path(self) -> Path:
        return self.install_dir / self.binary_name

    @classmethod
    def from_home(cls, home: Path, binary_name: str = DEFAULT_BINARY_NAME) -> "LauncherConfig":
        """
        Build the default layout rooted at a home directory.

        ~/.signerctl/bin/<binary>     installed daemon executable
        ~/.<binary>/<binary>.sock     daemon socket
        ~/.<binary>/trust_session     trust grant written by the daemon
        """
        signer_dir = home / f".{binary_name}"
        return cls(
            binary_name=binary_name,
            install_dir=home / ".signerctl" / "bin",
            signer_dir=signer_dir,
            socket_path=signer_dir / f"{binary_name}.sock",
            trust_session_path=signer_dir / "trust_session",
            sidecar_dirs=(_program_dir(),),
        )


def _program_dir() -> Path:
    return Path(sys.argv[0] or sys.executable).resolve().parent


def load_raw_config(path: Path = CONFIG_PATH) -> Dict[str, str]:
    """
    Load configuration values from the standard config path.
    Values are returned with lowercase keys for convenience.
    """
    cfg = configparser.ConfigParser()
    data: Dict[str, str] = {}

    if path.exists():
        cfg.read(path)
        data.update({k.lower(): v for k, v in cfg["DEFAULT"].items()})
        for section in ("PATHS", "TIMEOUTS"):
            if section in cfg:
                data.update({k.lower(): v for k, v in cfg[section].items()})

    return data


def load_env_overrides(env_path: Optional[Path] = None) -> Dict[str, str]:
    """
    Collect SIGNERCTL_* overrides as lowercase config keys.

    The process environment wins over the .env file.
    """
    env_path = env_path or CONFIG_PATH.with_name(".env")
    merged: Dict[str, str] = {}
    if env_path.exists():
        merged.update({k: v for k, v in dotenv_values(env_path).items() if v is not None})
    merged.update(os.environ)

    return {
        key[len(ENV_PREFIX):].lower(): value
        for key, value in merged.items()
        if key.startswith(ENV_PREFIX)
    }


def _get_float(raw: Dict[str, str], key: str, default: float) -> float:
    value = raw.get(key)
    if value is None or str(value).strip() == "":
        return default
    try:
        parsed = float(value)
    except ValueError:
        raise ValueError(f"Invalid value for '{key}': {value!r} is not a number")
    if parsed <= 0:
        raise ValueError(f"Invalid value for '{key}': must be positive, got {value!r}")
    return parsed


def _get_list(raw: Dict[str, str], key: str) -> Optional[Tuple[str, ...]]:
    value = raw.get(key, "")
    items = tuple(item.strip() for item in str(value).split(",") if item.strip())
    return items or None


def get_launcher_config(
    raw: Optional[Dict[str, str]] = None,
    home: Optional[Path] = None,
) -> LauncherConfig:
    """
    Build a LauncherConfig from raw configuration values.

    Without arguments, reads the config file and environment overrides.
    Raises ValueError if a timeout is not a positive number.
    """
    if raw is None:
        raw = load_raw_config()
        raw.update(load_env_overrides())

    binary_name = raw.get("binary_name", "").strip() or DEFAULT_BINARY_NAME
    config = LauncherConfig.from_home(home or Path.home(), binary_name=binary_name)

    if raw.get("install_dir"):
        config.install_dir = Path(raw["install_dir"]).expanduser()
    if raw.get("signer_dir"):
        config.signer_dir = Path(raw["signer_dir"]).expanduser()
        config.socket_path = config.signer_dir / f"{binary_name}.sock"
        config.trust_session_path = config.signer_dir / "trust_session"
    if raw.get("socket_path"):
        config.socket_path = Path(raw["socket_path"]).expanduser()
    if raw.get("trust_session_path"):
        config.trust_session_path = Path(raw["trust_session_path"]).expanduser()

    sidecar_dirs = _get_list(raw, "sidecar_dirs")
    if sidecar_dirs:
        config.sidecar_dirs = tuple(Path(d).expanduser() for d in sidecar_dirs)

    config.socket_wait_timeout = _get_float(raw, "socket_wait_s", DEFAULT_SOCKET_WAIT_S)
    config.poll_interval = _get_float(raw, "poll_interval_s", DEFAULT_POLL_INTERVAL_S)
    config.request_timeout = _get_float(raw, "request_timeout_s", DEFAULT_REQUEST_TIMEOUT_S)
    config.terminals = _get_list(raw, "terminals")

    return config
