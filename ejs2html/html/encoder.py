"""Encode block documents as marked HTML fragments."""

from __future__ import annotations

from typing import Any, Mapping

from ejs2html.config import DEFAULT_PREFIX, ConverterConfig
from ejs2html.document.elements import BlockDocument
from ejs2html.errors import NoBlocksError, SerializationError
from ejs2html.html.fragments import HtmlBuilder
from ejs2html.html.registry import get_handler
from ejs2html.utils.logging import NullLogger, WarningLogger


class HtmlEncoder:
    """Render each block through its registered handler, in document order."""

    def __init__(
        self,
        config: ConverterConfig | None = None,
        *,
        logger: WarningLogger | None = None,
    ) -> None:
        self.config = config or ConverterConfig()
        self.logger = logger or NullLogger()

    def encode(
        self,
        document: BlockDocument | Mapping[str, Any],
        *,
        source_file: str = "",
    ) -> str:
        """Encode a block document into an HTML fragment.

        Args:
            document: Typed document, or a parsed JSON envelope.
            source_file: Name reported alongside warnings.

        Returns:
            str: One top-level element per block, in block order.

        Raises:
            NoBlocksError: If the document has no blocks.
            UnknownBlockTypeError: If a block type is not registered.
            SerializationError: If the element tree cannot be rendered.
        """

        if not isinstance(document, BlockDocument):
            document = BlockDocument.from_dict(document)
        if not document.blocks:
            raise NoBlocksError("No blocks to parse")

        builder = HtmlBuilder(self.config.prefix, logger=self.logger, source_file=source_file)
        for block in document.blocks:
            handler = get_handler(block.type)
            builder.add(handler.encode(block, builder))

        try:
            return builder.render()
        except (TypeError, ValueError) as exc:
            raise SerializationError(f"Cannot render HTML: {exc}") from exc


def encode_blocks(
    document: BlockDocument | Mapping[str, Any],
    prefix: str = DEFAULT_PREFIX,
    *,
    logger: WarningLogger | None = None,
) -> str:
    """Encode ``document`` using a one-off encoder for ``prefix``."""

    return HtmlEncoder(ConverterConfig(prefix=prefix), logger=logger).encode(document)


__all__ = ["HtmlEncoder", "encode_blocks"]
