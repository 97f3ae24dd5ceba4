"""
Unit tests for BasicCodec.
"""

import pytest

from sheetstore.codec import BasicCodec


class TestBasicCodec:
    """Test suite for BasicCodec."""

    def test_encode(self):
        codec = BasicCodec()
        assert codec.encode("value") == "!value"
        assert codec.encode("") == "!"

    def test_decode(self):
        codec = BasicCodec()
        assert codec.decode("!value") == "value"
        assert codec.decode("!") == ""
        assert codec.decode("!!x") == "!x"

    def test_decode_empty(self):
        with pytest.raises(ValueError, match="can't be empty"):
            BasicCodec().decode("")

    def test_decode_without_prefix(self):
        with pytest.raises(ValueError, match="malformed"):
            BasicCodec().decode("value")
