"""Trust session store.

The signer daemon writes a trust grant after an interactive setup:
one line, four colon-separated fields, the second a Unix expiry timestamp.

    <subject_id>:<expires_at>:<issuer_tag>:<seal>

This module only reads and deletes that file. Anything that cannot be parsed
is treated as "no valid session" so the launcher falls back to the
interactive path rather than trusting a stale or corrupted grant.
"""

import logging
import re
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

FIELD_COUNT = 4

# Decimal seconds only: optional leading "-", no "+", whitespace or underscores.
_EXPIRY_RE = re.compile(r"-?[0-9]+")


@dataclass
class TrustSession:
    """Parsed trust grant."""
    subject_id: str
    expires_at: int
    issuer_tag: str
    seal: str

    @classmethod
    def parse(cls, content: str) -> Optional["TrustSession"]:
        """Parse a trust session line, returning None if it is malformed."""
        parts = content.strip().split(":")
        if len(parts) != FIELD_COUNT:
            return None
        if not _EXPIRY_RE.fullmatch(parts[1]):
            return None
        expires_at = int(parts[1])
        return cls(
            subject_id=parts[0],
            expires_at=expires_at,
            issuer_tag=parts[2],
            seal=parts[3],
        )

    def is_valid(self, now: Optional[float] = None) -> bool:
        """
        True while the grant has not expired.

        The comparison is strict: at now == expires_at the grant is expired.
        """
        if now is None:
            now = time.time()
        return int(now) < self.expires_at


class TrustSessionStore:
    """Read-only view (plus delete) of the persisted trust grant."""

    def __init__(self, path: Path):
        self.path = path

    def load(self) -> Optional[TrustSession]:
        """
        Load the trust session from disk.

        Returns:
            TrustSession if the file exists and parses, None otherwise
        """
        try:
            content = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Could not read trust session {self.path}: {e}")
            return None

        session = TrustSession.parse(content)
        if session is None:
            logger.warning(f"Ignoring malformed trust session at {self.path}")
        return session

    def is_valid(self, now: Optional[float] = None) -> bool:
        """Check whether a passive (no prompt) start is currently allowed."""
        session = self.load()
        return session is not None and session.is_valid(now)

    def invalidate(self) -> bool:
        """
        Delete the trust session file (best effort).

        Returns True if a file was removed. Failures are logged, never raised,
        so the caller's fallback path always continues.
        """
        try:
            self.path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.warning(f"Failed to remove trust session {self.path}: {e}")
            return False

        logger.info(f"Removed trust session {self.path}")
        return True
