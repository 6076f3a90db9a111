# backend/tests/services/auth/test_password.py
"""
Tests for password hashing service.

Tests:
- Password hashing with bcrypt
- Password verification (correct/incorrect)
"""

from portfolio_tracker.services.auth.password import PasswordService


# =============================================================================
# TEST: PASSWORD HASHING
# =============================================================================


class TestPasswordHashing:
    """Tests for password hashing."""

    def test_hash_has_bcrypt_prefix(self):
        hashed = PasswordService.hash_password("mypassword123")

        assert hashed.startswith("$2b$")
        assert hashed != "mypassword123"

    def test_same_password_different_hashes(self):
        """Same password should produce different hashes (due to salt)."""
        assert PasswordService.hash_password("pw") != PasswordService.hash_password("pw")

    def test_fresh_hash_needs_no_rehash(self):
        assert PasswordService.needs_rehash(PasswordService.hash_password("pw")) is False


# =============================================================================
# TEST: PASSWORD VERIFICATION
# =============================================================================


class TestPasswordVerification:

    def test_correct_password(self):
        hashed = PasswordService.hash_password("correct horse")

        assert PasswordService.verify_password("correct horse", hashed) is True

    def test_wrong_password(self):
        hashed = PasswordService.hash_password("correct horse")

        assert PasswordService.verify_password("battery staple", hashed) is False

    def test_case_sensitive(self):
        hashed = PasswordService.hash_password("Secret")

        assert PasswordService.verify_password("secret", hashed) is False
