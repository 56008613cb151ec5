"""
Content integrity checks.

The registry manifest names the algorithm on the wire ("sha256"),
so the algorithm is a versioned constant rather than configuration.
Changing it invalidates every previously published manifest.
"""

from __future__ import annotations

import hashlib
import hmac

from .errors import HashMismatch

HASH_ALGORITHM = "sha256"


class IntegrityVerifier:
    """Computes and checks digests of retrieved file bytes."""

    algorithm = HASH_ALGORITHM

    def digest(self, data: bytes) -> str:
        """Return the lowercase hex digest of data."""
        return hashlib.new(self.algorithm, data).hexdigest()

    def verify(self, data: bytes, expected: str) -> bool:
        """Check data against an expected hex digest.

        Hex case is ignored; anything else must match exactly. A digest
        with non-hex characters simply does not match.
        """
        return hmac.compare_digest(
            self.digest(data).encode("ascii"),
            expected.lower().encode("utf-8"),
        )

    def require(self, path: str, data: bytes, expected: str) -> None:
        """Like verify, but raise on mismatch.

        Raises:
            HashMismatch: If data does not digest to expected.
        """
        if not self.verify(data, expected):
            raise HashMismatch(path, expected.lower(), self.digest(data))
