"""Closed table of block handlers shared by the decoder and the encoder.

Every registered block type maps to a ``decode`` function (marked element to
typed record) and an ``encode`` function (typed record to element tree). The
decoder and encoder never dispatch any other way, so a class emitted by one
side is always recognised by the other.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Mapping, Sequence

from bs4 import Tag

from ejs2html.document.elements import (
    ALERT_TYPES,
    ALIGNMENTS,
    DEFAULT_ALIGNMENT,
    EMBED_SERVICES,
    LIST_STYLES,
    Alert,
    Block,
    Code,
    Delimiter,
    Embed,
    FileImage,
    Header,
    Image,
    LinkTool,
    ListBlock,
    Paragraph,
    Quote,
    Raw,
    Table,
    WarningBlock,
)
from ejs2html.errors import MalformedBlockDataError, UnknownBlockTypeError
from ejs2html.html.fragments import HtmlBuilder, find_by_class, inner_html, require
from ejs2html.html.markers import style_token

DecodeFn = Callable[[Tag, Sequence[str], str], Block]
EncodeFn = Callable[[Any, HtmlBuilder], Tag]

IMAGE_FLAGS = ("withborder", "withbackground", "stretched")
FILE_IMAGE_STYLE = "file"
TABLE_HEADINGS_STYLE = "withheadings"
YOUTUBE_ALLOW = "accelerometer; autoplay; encrypted-media; gyroscope; picture-in-picture"


@dataclass(frozen=True)
class BlockHandler:
    """Decode/encode pair registered for one block type."""

    name: str
    decode: DecodeFn
    encode: EncodeFn
    known_styles: frozenset[str] = frozenset()
    # Content is kept verbatim; markers inside it are not separate blocks.
    opaque: bool = False


def _alignment(styles: Sequence[str]) -> str:
    return _first_of(styles, ALIGNMENTS, DEFAULT_ALIGNMENT)


def _first_of(styles: Sequence[str], choices: Sequence[str], default: str) -> str:
    return next((style for style in styles if style in choices), default)


def _decode_header(element: Tag, styles: Sequence[str], prefix: str) -> Header:
    name = element.name or ""
    if len(name) != 2 or name[0] != "h" or name[1] not in "123456":
        raise MalformedBlockDataError("header", f"<{name}> is not a heading element")
    return Header(text=inner_html(element), level=int(name[1]), alignment=_alignment(styles))


def _encode_header(block: Header, builder: HtmlBuilder) -> Tag:
    tag = builder.marked(f"h{block.level}", block.type, block.alignment)
    return builder.append_fragment(tag, block.text)


def _decode_paragraph(element: Tag, styles: Sequence[str], prefix: str) -> Paragraph:
    return Paragraph(text=inner_html(element), alignment=_alignment(styles))


def _encode_paragraph(block: Paragraph, builder: HtmlBuilder) -> Tag:
    tag = builder.marked("p", block.type, block.alignment)
    return builder.append_fragment(tag, block.text)


def _decode_list(element: Tag, styles: Sequence[str], prefix: str) -> ListBlock:
    ordered = "ordered" in styles or ("unordered" not in styles and element.name == "ol")
    items = tuple(inner_html(item) for item in element.find_all("li", recursive=False))
    return ListBlock(items=items, style="ordered" if ordered else "unordered")


def _encode_list(block: ListBlock, builder: HtmlBuilder) -> Tag:
    tag = builder.marked("ol" if block.style == "ordered" else "ul", block.type, block.style)
    for item in block.items:
        builder.append_fragment(builder.child(tag, "li"), item)
    return tag


def _decode_raw(element: Tag, styles: Sequence[str], prefix: str) -> Raw:
    return Raw(html=inner_html(element))


def _encode_raw(block: Raw, builder: HtmlBuilder) -> Tag:
    return builder.append_fragment(builder.marked("div", block.type), block.html)


def _decode_link_tool(element: Tag, styles: Sequence[str], prefix: str) -> LinkTool:
    anchor = require(element, "a", "linkTool")
    title = find_by_class(element, "p", style_token("title", prefix))
    if title is None:
        raise MalformedBlockDataError("linkTool", "missing title paragraph")
    description = find_by_class(element, "p", style_token("description", prefix))
    if description is None:
        raise MalformedBlockDataError("linkTool", "missing description paragraph")
    site_name = find_by_class(element, "p", style_token("site_name", prefix))
    image = element.find("img")
    return LinkTool(
        link=str(anchor.get("href", "")),
        title=title.get_text(),
        description=description.get_text(),
        site_name=site_name.get_text() if site_name is not None else "",
        image_url=str(image.get("src", "")) if isinstance(image, Tag) else "",
    )


def _encode_link_tool(block: LinkTool, builder: HtmlBuilder) -> Tag:
    figure = builder.marked("figure", block.type)
    anchor = builder.child(figure, "a", {"href": block.link, "target": "_blank"})
    if block.image_url:
        builder.child(anchor, "img", {"src": block.image_url})
    for style, value in (("title", block.title), ("description", block.description)):
        paragraph = builder.styled("p", style)
        anchor.append(builder.append_text(paragraph, value))
    if block.site_name:
        paragraph = builder.styled("p", "site_name")
        anchor.append(builder.append_text(paragraph, block.site_name))
    return figure


def _decode_delimiter(element: Tag, styles: Sequence[str], prefix: str) -> Delimiter:
    return Delimiter()


def _encode_delimiter(block: Delimiter, builder: HtmlBuilder) -> Tag:
    return builder.marked("hr", block.type)


def _decode_alert(element: Tag, styles: Sequence[str], prefix: str) -> Alert:
    return Alert(
        message=inner_html(element),
        alert_type=_first_of(styles, ALERT_TYPES, "primary"),
        align=_alignment(styles),
    )


def _encode_alert(block: Alert, builder: HtmlBuilder) -> Tag:
    tag = builder.marked("p", block.type, block.align, block.alert_type)
    return builder.append_fragment(tag, block.message)


def _decode_table(element: Tag, styles: Sequence[str], prefix: str) -> Table:
    rows: list[tuple[str, ...]] = []
    thead = element.find("thead", recursive=False)
    if isinstance(thead, Tag):
        heading = thead.find("tr")
        if isinstance(heading, Tag):
            rows.append(_row_cells(heading))
    tbody = element.find("tbody", recursive=False)
    body = tbody if isinstance(tbody, Tag) else element
    rows.extend(_row_cells(row) for row in body.find_all("tr", recursive=False))
    with_headings = isinstance(thead, Tag) or TABLE_HEADINGS_STYLE in styles
    return Table(content=tuple(rows), with_headings=with_headings)


def _row_cells(row: Tag) -> tuple[str, ...]:
    return tuple(inner_html(cell) for cell in row.find_all(["th", "td"], recursive=False))


def _encode_table(block: Table, builder: HtmlBuilder) -> Tag:
    widths = {len(row) for row in block.content}
    if len(widths) > 1:
        builder.warn("Table", f"rows have differing cell counts {sorted(widths)}", "ragged-table")

    headings_style = TABLE_HEADINGS_STYLE if block.with_headings else ""
    table = builder.marked("table", block.type, headings_style)
    if block.heading is not None:
        heading_row = builder.child(builder.child(table, "thead"), "tr")
        for cell in block.heading:
            builder.append_fragment(builder.child(heading_row, "th"), cell)
    tbody = builder.child(table, "tbody")
    for row in block.body:
        body_row = builder.child(tbody, "tr")
        for cell in row:
            builder.append_fragment(builder.child(body_row, "td"), cell)
    return table


def _decode_code(element: Tag, styles: Sequence[str], prefix: str) -> Code:
    return Code(code=require(element, "code", "code").get_text())


def _encode_code(block: Code, builder: HtmlBuilder) -> Tag:
    pre = builder.marked("pre", block.type)
    builder.append_text(builder.child(pre, "code"), block.code)
    return pre


def _decode_quote(element: Tag, styles: Sequence[str], prefix: str) -> Quote:
    caption = element.find("figcaption")
    return Quote(
        text=inner_html(require(element, "blockquote", "quote")),
        caption=inner_html(caption) if isinstance(caption, Tag) else "",
        alignment=_alignment(styles),
    )


def _encode_quote(block: Quote, builder: HtmlBuilder) -> Tag:
    figure = builder.marked("figure", block.type, block.alignment)
    builder.append_fragment(builder.child(figure, "blockquote"), block.text)
    if block.caption:
        builder.append_fragment(builder.child(figure, "figcaption"), block.caption)
    return figure


def _decode_embed(element: Tag, styles: Sequence[str], prefix: str) -> Embed:
    iframe = require(element, "iframe", "embed")
    caption = element.find("figcaption")
    embed = str(iframe.get("src", ""))
    return Embed(
        embed=embed,
        source=str(iframe.get("data-source", embed)),
        service=_first_of(styles, EMBED_SERVICES, ""),
        width=str(iframe.get("width", "")),
        height=str(iframe.get("height", "")),
        caption=inner_html(caption) if isinstance(caption, Tag) else "",
    )


def _encode_embed(block: Embed, builder: HtmlBuilder) -> Tag:
    service = block.service
    if service and service not in EMBED_SERVICES:
        builder.warn("Embed", f"dropping unknown embed service '{service}'", "unknown-service")
        service = ""

    figure = builder.marked("figure", block.type, service)
    attrs: dict[str, str] = {"src": block.embed}
    if block.source and block.source != block.embed:
        attrs["data-source"] = block.source
    if block.width:
        attrs["width"] = block.width
    if block.height:
        attrs["height"] = block.height
    if service == "youtube":
        attrs["allow"] = YOUTUBE_ALLOW
        attrs["allowfullscreen"] = ""
    builder.child(figure, "iframe", attrs)
    if block.caption:
        builder.append_fragment(builder.child(figure, "figcaption"), block.caption)
    return figure


def _decode_image(element: Tag, styles: Sequence[str], prefix: str) -> Image:
    image = require(element, "img", "image")
    caption = element.find("figcaption")
    image_class = FileImage if FILE_IMAGE_STYLE in styles else Image
    return image_class(
        url=str(image.get("src", "")),
        caption=inner_html(caption) if isinstance(caption, Tag) else "",
        with_border="withborder" in styles,
        with_background="withbackground" in styles,
        stretched="stretched" in styles,
    )


def _encode_image(block: Image, builder: HtmlBuilder) -> Tag:
    flags = [
        flag
        for flag, enabled in zip(
            IMAGE_FLAGS, (block.with_border, block.with_background, block.stretched)
        )
        if enabled
    ]
    if isinstance(block, FileImage):
        flags.append(FILE_IMAGE_STYLE)
    figure = builder.marked("figure", block.type, *flags)
    builder.child(figure, "img", {"src": block.url})
    if block.caption:
        builder.append_fragment(builder.child(figure, "figcaption"), block.caption)
    return figure


def _decode_warning(element: Tag, styles: Sequence[str], prefix: str) -> WarningBlock:
    message = element.find("p")
    return WarningBlock(
        title=require(element, "h4", "warning").get_text(),
        message=message.get_text() if isinstance(message, Tag) else "",
    )


def _encode_warning(block: WarningBlock, builder: HtmlBuilder) -> Tag:
    wrapper = builder.marked("div", block.type)
    builder.append_text(builder.child(wrapper, "h4"), block.title)
    builder.append_text(builder.child(wrapper, "p"), block.message)
    return wrapper


REGISTRY: Mapping[str, BlockHandler] = MappingProxyType(
    {
        handler.name: handler
        for handler in (
            BlockHandler("header", _decode_header, _encode_header, frozenset(ALIGNMENTS)),
            BlockHandler(
                "paragraph", _decode_paragraph, _encode_paragraph, frozenset(ALIGNMENTS)
            ),
            BlockHandler("list", _decode_list, _encode_list, frozenset(LIST_STYLES)),
            BlockHandler("raw", _decode_raw, _encode_raw, opaque=True),
            BlockHandler("linkTool", _decode_link_tool, _encode_link_tool),
            BlockHandler("delimiter", _decode_delimiter, _encode_delimiter),
            BlockHandler(
                "alert", _decode_alert, _encode_alert, frozenset(ALIGNMENTS + ALERT_TYPES)
            ),
            BlockHandler(
                "table", _decode_table, _encode_table, frozenset({TABLE_HEADINGS_STYLE})
            ),
            BlockHandler("code", _decode_code, _encode_code),
            BlockHandler("quote", _decode_quote, _encode_quote, frozenset(ALIGNMENTS)),
            BlockHandler("embed", _decode_embed, _encode_embed, frozenset(EMBED_SERVICES)),
            BlockHandler(
                "image",
                _decode_image,
                _encode_image,
                frozenset(IMAGE_FLAGS + (FILE_IMAGE_STYLE,)),
            ),
            BlockHandler("warning", _decode_warning, _encode_warning),
        )
    }
)


def get_handler(block_type: str) -> BlockHandler:
    """Return the handler for ``block_type`` or raise ``UnknownBlockTypeError``."""

    handler = REGISTRY.get(block_type)
    if handler is None:
        raise UnknownBlockTypeError(block_type)
    return handler


__all__ = ["BlockHandler", "REGISTRY", "get_handler"]
