"""
Tests for launcher configuration loading and overrides.
"""

import os
import shutil
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from signerctl.core.configs import (
    DEFAULT_REQUEST_TIMEOUT_S,
    DEFAULT_SOCKET_WAIT_S,
    LauncherConfig,
    get_launcher_config,
    load_env_overrides,
    load_raw_config,
)


class TestLauncherConfig(unittest.TestCase):
    """Test cases for configuration helpers."""

    def setUp(self):
        self.temp_dir = Path(tempfile.mkdtemp())
        self.config_file = self.temp_dir / "config.cfg"

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def _write_config(self, text: str) -> None:
        self.config_file.write_text(text)

    def test_from_home_layout(self):
        config = LauncherConfig.from_home(self.temp_dir, binary_name="keysigner")

        self.assertEqual(config.binary_path, self.temp_dir / ".signerctl" / "bin" / "keysigner")
        self.assertEqual(config.socket_path, self.temp_dir / ".keysigner" / "keysigner.sock")
        self.assertEqual(config.trust_session_path, self.temp_dir / ".keysigner" / "trust_session")
        self.assertEqual(config.socket_wait_timeout, DEFAULT_SOCKET_WAIT_S)
        self.assertEqual(config.request_timeout, DEFAULT_REQUEST_TIMEOUT_S)

    def test_load_raw_config_merges_sections(self):
        self._write_config(
            "[DEFAULT]\nBINARY_NAME = mysigner\n\n"
            "[PATHS]\nsocket_path = /tmp/custom.sock\n\n"
            "[TIMEOUTS]\nrequest_timeout_s = 4\n"
        )

        raw = load_raw_config(self.config_file)
        self.assertEqual(raw["binary_name"], "mysigner")
        self.assertEqual(raw["socket_path"], "/tmp/custom.sock")
        self.assertEqual(raw["request_timeout_s"], "4")

    def test_load_raw_config_missing_file_returns_empty_dict(self):
        self.assertEqual(load_raw_config(self.config_file), {})

    def test_get_launcher_config_applies_values(self):
        config = get_launcher_config(
            {
                "binary_name": "mysigner",
                "signer_dir": str(self.temp_dir / "state"),
                "request_timeout_s": "2.5",
                "terminals": "kitty, xterm",
            },
            home=self.temp_dir,
        )

        self.assertEqual(config.binary_name, "mysigner")
        self.assertEqual(config.socket_path, self.temp_dir / "state" / "mysigner.sock")
        self.assertEqual(config.trust_session_path, self.temp_dir / "state" / "trust_session")
        self.assertEqual(config.request_timeout, 2.5)
        self.assertEqual(config.terminals, ("kitty", "xterm"))

    def test_explicit_socket_path_wins_over_signer_dir(self):
        config = get_launcher_config(
            {"signer_dir": str(self.temp_dir / "state"), "socket_path": "/tmp/s.sock"},
            home=self.temp_dir,
        )
        self.assertEqual(config.socket_path, Path("/tmp/s.sock"))

    def test_invalid_timeout_raises(self):
        with self.assertRaises(ValueError) as context:
            get_launcher_config({"socket_wait_s": "soon"}, home=self.temp_dir)
        self.assertIn("socket_wait_s", str(context.exception))

        with self.assertRaises(ValueError):
            get_launcher_config({"request_timeout_s": "0"}, home=self.temp_dir)

    def test_env_overrides_beat_dotenv(self):
        env_file = self.temp_dir / ".env"
        env_file.write_text(
            "SIGNERCTL_REQUEST_TIMEOUT_S=3\nSIGNERCTL_BINARY_NAME=fromdotenv\nOTHER=1\n"
        )

        with patch.dict(os.environ, {"SIGNERCTL_REQUEST_TIMEOUT_S": "7"}, clear=False):
            overrides = load_env_overrides(env_file)

        self.assertEqual(overrides["request_timeout_s"], "7")
        self.assertEqual(overrides["binary_name"], "fromdotenv")
        self.assertNotIn("other", overrides)


if __name__ == "__main__":
    unittest.main()
