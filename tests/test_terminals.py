"""
Tests for interactive (terminal-hosted) launchers.
"""

import subprocess
import unittest
from unittest.mock import patch

from signerctl.core.errors import NoTerminalAvailable
from signerctl.daemon.terminals import (
    LinuxTerminalLauncher,
    MacTerminalLauncher,
    UnsupportedHostLauncher,
    get_interactive_launcher,
)

COMMAND = ["/home/u/.signerctl/bin/keysigner", "daemon"]


class TestLinuxTerminalLauncher(unittest.TestCase):

    def test_argv_per_terminal(self):
        self.assertEqual(
            LinuxTerminalLauncher.build_argv("gnome-terminal", COMMAND),
            ["gnome-terminal", "--", *COMMAND],
        )
        self.assertEqual(
            LinuxTerminalLauncher.build_argv("xterm", COMMAND),
            ["xterm", "-e", "/home/u/.signerctl/bin/keysigner daemon"],
        )

    @patch("signerctl.daemon.terminals.subprocess.Popen")
    def test_first_available_terminal_wins(self, mock_popen):
        mock_popen.side_effect = [FileNotFoundError("gnome-terminal"), object()]

        terminal = LinuxTerminalLauncher().spawn_interactive(COMMAND)

        self.assertEqual(terminal, "konsole")
        self.assertEqual(mock_popen.call_count, 2)
        self.assertEqual(mock_popen.call_args[0][0][0], "konsole")

    @patch("signerctl.daemon.terminals.subprocess.Popen", side_effect=FileNotFoundError("missing"))
    def test_no_terminal_available(self, mock_popen):
        with self.assertRaises(NoTerminalAvailable) as context:
            LinuxTerminalLauncher().spawn_interactive(COMMAND)

        self.assertEqual(mock_popen.call_count, 3)
        message = str(context.exception)
        for name in ("gnome-terminal", "konsole", "xterm"):
            self.assertIn(name, message)

    @patch("signerctl.daemon.terminals.subprocess.Popen")
    def test_custom_candidates(self, mock_popen):
        terminal = LinuxTerminalLauncher(["kitty"]).spawn_interactive(COMMAND)

        self.assertEqual(terminal, "kitty")
        mock_popen.assert_called_once_with(["kitty", "-e", "/home/u/.signerctl/bin/keysigner daemon"])


class TestMacTerminalLauncher(unittest.TestCase):

    def test_script_quotes_command(self):
        script = MacTerminalLauncher.build_script("Terminal", ["/Users/a b/keysigner", "init"])

        self.assertIn('tell application "Terminal"', script)
        self.assertIn("do script \"'/Users/a b/keysigner' init\"", script)

    @patch("signerctl.daemon.terminals.subprocess.run")
    def test_osascript_success(self, mock_run):
        mock_run.return_value = subprocess.CompletedProcess([], 0, "", "")

        self.assertEqual(MacTerminalLauncher().spawn_interactive(COMMAND), "Terminal")
        self.assertEqual(mock_run.call_args[0][0][:2], ["osascript", "-e"])

    @patch("signerctl.daemon.terminals.subprocess.run")
    def test_osascript_failure(self, mock_run):
        mock_run.return_value = subprocess.CompletedProcess([], 1, "", "not allowed")

        with self.assertRaises(NoTerminalAvailable) as context:
            MacTerminalLauncher().spawn_interactive(COMMAND)
        self.assertIn("not allowed", str(context.exception))


class TestLauncherSelection(unittest.TestCase):

    def test_selection_by_os(self):
        self.assertIsInstance(get_interactive_launcher("Linux"), LinuxTerminalLauncher)
        self.assertIsInstance(get_interactive_launcher("MacOS"), MacTerminalLauncher)

    def test_unsupported_host(self):
        launcher = get_interactive_launcher("Windows")

        self.assertIsInstance(launcher, UnsupportedHostLauncher)
        with self.assertRaises(NoTerminalAvailable):
            launcher.spawn_interactive(COMMAND)


if __name__ == "__main__":
    unittest.main()
