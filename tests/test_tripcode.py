"""
Tests for Tripcode Generation

Tests cover separator detection, name/secret splitting, salt derivation for
the DES tripcode, the salted MD5 secure tripcode and determinism.
"""

import hashlib
import pytest
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from utils.tripcode import generate_tripcode, normal_tripcode, secure_tripcode


SALT = "saltX"


class RecordingCrypt:
    """LegacyCrypt that records its arguments and returns a fixed 13 char hash."""

    def __init__(self):
        self.calls = []

    def crypt(self, secret, salt):
        self.calls.append((secret, salt))
        return salt + "ABCDEFGHIJK"


def md5_part(secret, salt=SALT):
    return hashlib.md5((secret + salt).encode("utf-8")).hexdigest()[2:12]


# =============================================================================
# Name Splitting Tests
# =============================================================================

class TestNameSplitting:
    """Tests for separator handling."""

    def test_no_separator_returns_input(self):
        """Names without '!' or '#' pass through untouched."""
        assert generate_tripcode("Anonymous", SALT) == ("Anonymous", None)

    def test_empty_name(self):
        assert generate_tripcode("", SALT) == ("", None)

    def test_hash_separator(self):
        crypt = RecordingCrypt()
        name, trip = generate_tripcode("Anon#secret", SALT, crypt)

        assert name == "Anon"
        assert crypt.calls[0][0] == "secret"
        assert trip == "BCDEFGHIJK"

    def test_bang_separator(self):
        crypt = RecordingCrypt()
        name, trip = generate_tripcode("Anon!secret", SALT, crypt)

        assert name == "Anon"
        assert crypt.calls[0][0] == "secret"

    def test_earliest_separator_wins(self):
        """With both separators present the first one starts the secret."""
        crypt = RecordingCrypt()
        name, trip = generate_tripcode("Anon!pass#secret2", SALT, crypt)

        assert name == "Anon"
        # '#' inside a '!' secret is part of the normal secret, translated to ' '
        assert crypt.calls[0][0] == "pass secret2"
        assert "!!" not in trip

    def test_second_separator_splits_secure_secret(self):
        crypt = RecordingCrypt()
        name, trip = generate_tripcode("Anon#pass#secret2", SALT, crypt)

        assert name == "Anon"
        assert crypt.calls[0][0] == "pass"
        assert trip == "BCDEFGHIJK!!" + md5_part("secret2")

    def test_last_repeated_separator_splits(self):
        """Only the last repeat of the separator starts the secure secret."""
        crypt = RecordingCrypt()
        name, trip = generate_tripcode("Anon#a#b#c", SALT, crypt)

        assert name == "Anon"
        assert crypt.calls[0][0] == "a b"
        assert trip.endswith("!!" + md5_part("c"))

    def test_secure_only(self):
        """An empty normal secret yields a single '!' before the secure part."""
        crypt = RecordingCrypt()
        name, trip = generate_tripcode("Anon##secret", SALT, crypt)

        assert name == "Anon"
        assert crypt.calls == []
        assert trip == "!" + md5_part("secret")

    def test_empty_secrets_return_input(self):
        """A bare separator produces no tripcode and keeps the raw input."""
        assert generate_tripcode("Anon#", SALT) == ("Anon#", None)
        assert generate_tripcode("Anon##", SALT) == ("Anon##", None)

    def test_name_may_be_empty(self):
        name, trip = generate_tripcode("#secret", SALT, RecordingCrypt())
        assert name == ""
        assert trip is not None


# =============================================================================
# Salt Derivation Tests
# =============================================================================

class TestNormalTripcode:
    """Tests for DES salt derivation."""

    @pytest.mark.parametrize("secret, expected_salt", [
        ("secret", "ec"),
        ("a", "H."),        # padded with "H."
        ("ab", "bH"),
        ("x~~", ".."),      # outside '.'..'z' becomes '.'
        ("x:;", "AB"),      # ':;' map to 'AB'
        ("x[`", "af"),      # '[' -> 'a', '`' -> 'f'
        ("x@_", "Ge"),
    ])
    def test_salt(self, secret, expected_salt):
        crypt = RecordingCrypt()
        normal_tripcode(secret, crypt)
        assert crypt.calls[0][1] == expected_salt

    def test_salt_uses_utf8_bytes(self):
        """Multi-byte characters contribute their UTF-8 bytes to the salt."""
        crypt = RecordingCrypt()
        normal_tripcode("aé", crypt)
        assert crypt.calls[0] == ("aé", "..")

    def test_salt_second_character_multibyte(self):
        crypt = RecordingCrypt()
        normal_tripcode("éa", crypt)
        # bytes c3 a9 61: salt is a9 61 -> ".a"
        assert crypt.calls[0][1] == ".a"

    def test_ampersand_translation(self):
        """'&' in the secret is translated to ',' before hashing."""
        crypt = RecordingCrypt()
        normal_tripcode("a&b", crypt)
        # ',' sits below '.' so the salt character becomes '.'
        assert crypt.calls[0] == ("a,b", ".b")

    def test_keeps_last_ten_characters(self):
        assert normal_tripcode("secret", RecordingCrypt()) == "BCDEFGHIJK"

    @pytest.mark.parametrize("raw, expected", [
        ("Anon#password", ("Anon", "ozOtJW9BFA")),
        ("Anon#aé", ("Anon", "7pgaIzlAyo")),
    ])
    def test_known_des_tripcodes(self, raw, expected):
        """Real DES output matches tripcodes issued by earlier deployments."""
        assert generate_tripcode(raw, SALT) == expected

    def test_real_des_is_ten_hash64_chars(self):
        trip = normal_tripcode("secret")
        assert len(trip) == 10
        assert all(c.isalnum() or c in "./" for c in trip)


class TestSecureTripcode:
    """Tests for the salted MD5 tripcode."""

    def test_md5_slice(self):
        assert secure_tripcode("secret", SALT) == md5_part("secret")
        assert len(secure_tripcode("secret", SALT)) == 10

    def test_server_salt_changes_result(self):
        assert secure_tripcode("secret", "one") != secure_tripcode("secret", "two")


# =============================================================================
# Determinism Tests
# =============================================================================

class TestDeterminism:
    """The same input and salt always give the same result."""

    @pytest.mark.parametrize("raw", [
        "Anon#secret",
        "Anon#pass#secret2",
        "Anon!pass!secret2",
        "#日本語",
    ])
    def test_repeatable(self, raw):
        assert generate_tripcode(raw, SALT) == generate_tripcode(raw, SALT)

    def test_only_first_eight_characters_matter(self):
        """DES crypt ignores characters past the eighth."""
        _, first = generate_tripcode("#abcdefgh", SALT)
        _, second = generate_tripcode("#abcdefghXYZ", SALT)
        assert first == second

    def test_different_secrets_differ(self):
        _, first = generate_tripcode("#secret", SALT)
        _, second = generate_tripcode("#secrets", SALT)
        assert first != second
