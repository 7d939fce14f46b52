"""Decode marked HTML fragments back into block documents."""

from __future__ import annotations

from typing import List

from bs4 import Tag

from ejs2html.config import DEFAULT_PREFIX, ConverterConfig
from ejs2html.document.elements import Block, BlockDocument, current_time_ms
from ejs2html.errors import EmptyInputError
from ejs2html.html.fragments import css_string, parse_html
from ejs2html.html.markers import Marker, parse_marker
from ejs2html.html.registry import BlockHandler, get_handler
from ejs2html.utils.logging import NullLogger, WarningLogger


class HtmlDecoder:
    """Walk an HTML document and rebuild the blocks its markers describe."""

    def __init__(
        self,
        config: ConverterConfig | None = None,
        *,
        logger: WarningLogger | None = None,
    ) -> None:
        self.config = config or ConverterConfig()
        self.logger = logger or NullLogger()

    def decode(
        self,
        html: str,
        *,
        time: int | None = None,
        version: str | None = None,
        source_file: str = "",
    ) -> BlockDocument:
        """Decode an HTML fragment into a block document.

        Args:
            html: Fragment produced by the encoder (or marked the same way).
            time: Envelope timestamp; defaults to the current epoch milliseconds.
            version: Envelope version; defaults to the configured version.
            source_file: Name reported alongside warnings.

        Returns:
            BlockDocument: Blocks in document order.

        Raises:
            EmptyInputError: If the input is empty or contains no blocks.
            UnknownBlockTypeError: If an element carries an unregistered type.
            MalformedBlockDataError: If a marked element lacks required structure.
        """

        if not html or not html.strip():
            raise EmptyInputError("No HTML to parse")

        soup = parse_html(html)
        blocks: List[Block] = []
        opaque_ids: set[int] = set()
        for element in soup.select(f'[class*="{css_string(self.config.prefix)}"]'):
            marker = parse_marker(element.get("class") or [], self.config.prefix)
            if marker is None:
                continue
            if opaque_ids and any(id(parent) in opaque_ids for parent in element.parents):
                continue
            handler = get_handler(marker.type)
            if handler.opaque:
                opaque_ids.add(id(element))
            self._check_styles(element, marker, handler, source_file)
            blocks.append(handler.decode(element, marker.styles, self.config.prefix))

        if not blocks:
            raise EmptyInputError("No HTML to parse")

        return BlockDocument(
            blocks=tuple(blocks),
            time=time if time is not None else current_time_ms(),
            version=version or self.config.version,
        )

    def _check_styles(
        self, element: Tag, marker: Marker, handler: BlockHandler, source_file: str
    ) -> None:
        for style in marker.styles:
            if style in handler.known_styles:
                continue
            self.logger.warn(
                filename=source_file,
                line=element.sourceline,
                element_type=handler.name,
                message=f"ignoring unrecognized style '{style}'",
                code="unknown-style",
            )


def decode_html(
    html: str,
    prefix: str = DEFAULT_PREFIX,
    *,
    time: int | None = None,
    version: str | None = None,
    logger: WarningLogger | None = None,
) -> BlockDocument:
    """Decode ``html`` using a one-off decoder for ``prefix``."""

    return HtmlDecoder(ConverterConfig(prefix=prefix), logger=logger).decode(
        html, time=time, version=version
    )


__all__ = ["HtmlDecoder", "decode_html"]
