"""
Tests for commitment decoding.
"""

import pytest

from balance_prover.commitment import (
    decode_balance,
    decode_blob,
    decode_prefix,
    encode_commitment,
)
from balance_prover.errors import UnparsableCommitment


class TestDecodeBalance:
    """Tests for two-stage balance decoding."""

    def test_hex_prefix_with_suffix(self):
        """First 16 hex chars are the balance, the suffix is ignored."""
        assert decode_balance("00000000000003e8secret_nonce_123") == 1000
        assert decode_balance("0000000000000064secret_nonce_123") == 100

    def test_exact_16_chars(self):
        assert decode_balance("00000000000003e8") == 1000

    def test_uppercase_hex(self):
        assert decode_balance("00000000000003E8") == 1000

    def test_max_u64(self):
        assert decode_balance("ffffffffffffffff") == (1 << 64) - 1

    def test_leading_plus_sign(self):
        """A single leading "+" is accepted; the prefix is still 16 chars."""
        assert decode_balance("+00000000000003e8") == 0x3E
        assert decode_prefix("+000000000000001suffix") == 1

    @pytest.mark.parametrize("commitment", ["-00000000000003e8", "++0000000000003e8", "+0x000000000003e8"])
    def test_other_sign_forms_rejected(self, commitment):
        with pytest.raises(UnparsableCommitment):
            decode_balance(commitment)

    def test_suffix_need_not_be_hex(self):
        """Suffix may contain anything, including non-ASCII."""
        assert decode_balance("0000000000000001 späce & ünïcode") == 1

    def test_prefix_and_blob_agree(self):
        """Both stages decode the same value when both apply."""
        for commitment in ("00000000000003e8", "00000000000003e8ff00ff00", "deadbeefcafebabe"):
            assert decode_prefix(commitment) == decode_blob(commitment)
            assert decode_balance(commitment) == decode_blob(commitment)

    def test_blob_rejects_short_input(self):
        """Fewer than 8 decoded bytes cannot hold a balance."""
        assert decode_blob("00000000000003") is None

    def test_blob_rejects_odd_length_and_whitespace(self):
        assert decode_blob("00000000000003e8f") is None
        assert decode_blob("00 00 00 00 00 00 03 e8") is None

    @pytest.mark.parametrize(
        "commitment",
        [
            "",
            "abc",
            "00000000000003e",  # 15 chars
            "zzzzzzzzzzzzzzzzsecret",
            "0x00000000000003e8",
            " 00000000000003e8",
            "0000_0000_0000_03e8",
        ],
    )
    def test_unparsable(self, commitment):
        """Commitments neither stage can decode are rejected."""
        with pytest.raises(UnparsableCommitment) as exc_info:
            decode_balance(commitment)
        assert str(exc_info.value) == "Cannot extract balance from commitment"

    def test_unparsable_is_value_error(self):
        with pytest.raises(ValueError):
            decode_balance("nope")


class TestEncodeCommitment:
    """Tests for commitment encoding."""

    def test_encode_with_suffix(self):
        assert encode_commitment(1000, "secret_nonce_123") == "00000000000003e8secret_nonce_123"

    def test_encode_without_suffix(self):
        assert encode_commitment(100) == "0000000000000064"

    def test_encoded_commitment_decodes(self):
        assert decode_balance(encode_commitment(123456789, "nonce")) == 123456789

    def test_encode_out_of_range(self):
        with pytest.raises(ValueError):
            encode_commitment(-1)
        with pytest.raises(ValueError):
            encode_commitment(1 << 64)
