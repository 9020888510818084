"""Password verification on top of ``werkzeug.security``."""

from __future__ import annotations

import logging

from werkzeug.security import check_password_hash, generate_password_hash

log = logging.getLogger(__name__)


class PasswordVerifier:
    """
    Check a candidate password against a stored salted hash.

    Comparison is delegated to werkzeug, which compares digests in constant
    time. Verification fails closed: an empty, malformed or unsupported hash
    yields ``False`` instead of an error.
    """

    def verify(self, password: str, stored_hash: str | None) -> bool:
        """
        :param password: Candidate password from the client.
        :param stored_hash: Hash recorded for the account.
        :returns: ``True`` only when the password matches.
        """
        if not stored_hash or not isinstance(password, str):
            return False
        try:
            return check_password_hash(stored_hash, password)
        except (ValueError, TypeError, LookupError):
            log.warning("Unverifiable password hash format")
            return False

    def hash(self, password: str) -> str:
        """Return a new salted hash for ``password``."""
        return generate_password_hash(password)
