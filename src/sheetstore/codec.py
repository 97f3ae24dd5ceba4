"""
Codecs turning key-value payloads into cell strings and back.
"""

from typing import Protocol


class Codec(Protocol):
    """Protocol for payload codecs used by the key-value store."""

    def encode(self, data: str) -> str:
        ...

    def decode(self, data: str) -> str:
        ...


class BasicCodec:
    """Encodes data by prefixing it with an exclamation mark.

    The prefix keeps an empty payload ("!") distinguishable from an empty
    cell, which the key-value store reads as a missing key.
    """

    PREFIX = "!"

    def encode(self, data: str) -> str:
        return self.PREFIX + data

    def decode(self, data: str) -> str:
        """Decode data produced by :meth:`encode`.

        Raises:
            ValueError: If the data is empty or does not carry the prefix
        """
        if not data:
            raise ValueError("data can't be empty")
        if not data.startswith(self.PREFIX):
            raise ValueError("malformed data")
        return data[len(self.PREFIX):]
