"""
Tests for secure token generation.
"""

import re
from unittest.mock import patch

import pytest

from opensourcer.tokens import generate_token

HEX_UPPER = re.compile(r"^[0-9A-F]*$")


class TestGenerateToken:
    """Test generated credential shape and randomness."""

    @pytest.mark.parametrize("length", [0, 1, 12, 16, 47, 48])
    def test_length_and_alphabet(self, length):
        token = generate_token(length)
        assert len(token) == length
        assert HEX_UPPER.match(token)

    def test_consecutive_tokens_differ(self):
        tokens = [generate_token(12) for _ in range(500)]
        assert all(a != b for a, b in zip(tokens, tokens[1:]))
        assert len(set(tokens)) == len(tokens)

    def test_byte_count(self):
        """ceil(length / 2) + 1 bytes are drawn per call."""
        with patch("opensourcer.tokens.secrets.token_bytes", return_value=b"\xab" * 9) as mock_bytes:
            assert generate_token(16) == "AB" * 8
            mock_bytes.assert_called_once_with(9)

    @pytest.mark.parametrize("length,expected_bytes", [(1, 2), (11, 7), (47, 25)])
    def test_byte_count_odd_length(self, length, expected_bytes):
        with patch("opensourcer.tokens.secrets.token_bytes", side_effect=lambda n: b"\xcd" * n) as mock_bytes:
            token = generate_token(length)
        mock_bytes.assert_called_once_with(expected_bytes)
        assert token == ("CD" * expected_bytes)[:length]

    def test_random_source_failure_propagates(self):
        with patch("opensourcer.tokens.secrets.token_bytes", side_effect=NotImplementedError("no urandom")):
            with pytest.raises(NotImplementedError):
                generate_token(12)

    def test_negative_length(self):
        with pytest.raises(ValueError):
            generate_token(-1)
