"""Exceptions raised while converting between block documents and HTML."""

from __future__ import annotations


class ParserError(ValueError):
    """Raised when a document cannot be converted deterministically."""


class EmptyInputError(ParserError):
    """Raised when the HTML or JSON source is empty or unusable."""


class NoBlocksError(ParserError):
    """Raised when a document carries no blocks to convert."""


class UnknownBlockTypeError(ParserError):
    """Raised when a block type has no registered handler."""

    def __init__(self, block_type: str) -> None:
        super().__init__(f"Unknown block {block_type}")
        self.block_type = block_type


class MalformedBlockDataError(ParserError):
    """Raised when a registered block is missing a required field."""

    def __init__(self, block_type: str, message: str) -> None:
        super().__init__(f"Malformed {block_type} block: {message}")
        self.block_type = block_type


class SerializationError(ParserError):
    """Raised when the JSON or HTML codec rejects the data."""


__all__ = [
    "EmptyInputError",
    "MalformedBlockDataError",
    "NoBlocksError",
    "ParserError",
    "SerializationError",
    "UnknownBlockTypeError",
]
