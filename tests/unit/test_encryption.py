"""Tests for at-rest encryption of env var values."""

import base64

import pytest

from src.portal.core.security import EncryptionError, decrypt, encrypt, is_encrypted
from src.portal.core.security.encryption import IV_LENGTH, SALT_LENGTH, TAG_LENGTH

pytestmark = pytest.mark.unit


class TestEncrypt:
    def test_format_has_four_base64_parts(self):
        parts = encrypt("postgres://user:pw@db/app").split(":")

        assert len(parts) == 4
        salt, iv, tag, _ = (base64.b64decode(p) for p in parts)
        assert (len(salt), len(iv), len(tag)) == (SALT_LENGTH, IV_LENGTH, TAG_LENGTH)

    def test_same_plaintext_encrypts_differently(self):
        assert encrypt("value") != encrypt("value")

    def test_round_trip_unicode(self):
        assert decrypt(encrypt("pässwörd ✓")) == "pässwörd ✓"

    def test_empty_value_rejected(self):
        with pytest.raises(EncryptionError, match="empty"):
            encrypt("")


class TestDecrypt:
    def test_wrong_key_fails(self):
        encrypted = encrypt("value", master_key="k" * 32)

        with pytest.raises(EncryptionError, match="corrupted or key is wrong"):
            decrypt(encrypted, master_key="x" * 32)

    def test_tampered_ciphertext_fails(self):
        salt, iv, tag, ciphertext = encrypt("value").split(":")
        raw = bytearray(base64.b64decode(ciphertext))
        raw[0] ^= 0xFF
        tampered = ":".join([salt, iv, tag, base64.b64encode(bytes(raw)).decode()])

        with pytest.raises(EncryptionError):
            decrypt(tampered)

    @pytest.mark.parametrize("value", ["", "plaintext", "a:b:c", "a:b:c:d:e", "!!:!!:!!:!!"])
    def test_malformed_input_fails(self, value: str):
        with pytest.raises(EncryptionError):
            decrypt(value)


def test_is_encrypted():
    assert is_encrypted(encrypt("value"))
    assert not is_encrypted("plain")
    assert not is_encrypted("")
