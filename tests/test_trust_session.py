"""
Tests for the trust session store.

A session is valid only with exactly four fields and an expiry strictly in
the future; everything else reads as "no valid session".
"""

import shutil
import tempfile
import time
import unittest
from pathlib import Path
from unittest.mock import patch

from signerctl.core.trust_session import TrustSession, TrustSessionStore


class TestTrustSessionParsing(unittest.TestCase):

    def test_parse_four_fields(self):
        session = TrustSession.parse("npub1abc:1700000000:cli:deadbeef\n")
        self.assertEqual(session.subject_id, "npub1abc")
        self.assertEqual(session.expires_at, 1700000000)
        self.assertEqual(session.issuer_tag, "cli")
        self.assertEqual(session.seal, "deadbeef")

    def test_wrong_field_counts_rejected(self):
        for content in ["", "a", "a:1", "a:1:b", "a:1:b:c:d", "a:1:b:c:d:e:f"]:
            with self.subTest(content=content):
                self.assertIsNone(TrustSession.parse(content))

    def test_non_numeric_expiry_rejected(self):
        for expiry in ["tomorrow", "9_999_999_999", " 17 ", "+17", "17.5", "", "１７"]:
            with self.subTest(expiry=expiry):
                self.assertIsNone(TrustSession.parse(f"a:{expiry}:b:c"))

    def test_negative_expiry_parses_as_expired(self):
        session = TrustSession.parse("a:-5:b:c")
        self.assertEqual(session.expires_at, -5)
        self.assertFalse(session.is_valid())

    def test_expiry_boundary(self):
        session = TrustSession("a", 1000, "b", "c")
        self.assertTrue(session.is_valid(now=999))
        self.assertFalse(session.is_valid(now=1000))
        self.assertFalse(session.is_valid(now=1001))


class TestTrustSessionStore(unittest.TestCase):

    def setUp(self):
        self.temp_dir = Path(tempfile.mkdtemp())
        self.path = self.temp_dir / "trust_session"
        self.store = TrustSessionStore(self.path)

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_missing_file_is_invalid(self):
        self.assertIsNone(self.store.load())
        self.assertFalse(self.store.is_valid())

    def test_future_expiry_is_valid(self):
        self.path.write_text(f"sub:{int(time.time()) + 3600}:cli:seal")
        self.assertTrue(self.store.is_valid())

    def test_past_expiry_is_invalid(self):
        self.path.write_text(f"sub:{int(time.time()) - 1}:cli:seal")
        self.assertFalse(self.store.is_valid())

    def test_malformed_file_is_invalid(self):
        self.path.write_text("sub:9999999999:cli")
        self.assertFalse(self.store.is_valid())

        self.path.write_bytes(b"\xff\xfe:garbage")
        self.assertFalse(self.store.is_valid())

    def test_unreadable_path_is_invalid(self):
        # A directory where the file should be makes read_text fail.
        self.path.mkdir()
        self.assertFalse(self.store.is_valid())

    def test_invalidate_removes_file(self):
        self.path.write_text("sub:1:cli:seal")
        self.assertTrue(self.store.invalidate())
        self.assertFalse(self.path.exists())

    def test_invalidate_is_best_effort(self):
        self.assertFalse(self.store.invalidate())

        with patch.object(Path, "unlink", side_effect=PermissionError("denied")):
            self.assertFalse(self.store.invalidate())


if __name__ == "__main__":
    unittest.main()
