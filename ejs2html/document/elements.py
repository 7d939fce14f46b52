"""Typed block records mirroring the editor's JSON block schema.

Each block type is its own frozen dataclass tagged with a ``type`` class
variable. ``from_data`` builds a record from the JSON ``data`` mapping and
applies the documented defaults; ``to_editorjs`` returns the JSON shape again.
"""

from __future__ import annotations

import time as _time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, ClassVar, Mapping, Sequence

from ejs2html.config import DEFAULT_VERSION
from ejs2html.errors import MalformedBlockDataError, UnknownBlockTypeError

ALIGNMENTS = ("left", "center", "right", "justify")
DEFAULT_ALIGNMENT = "left"
LIST_STYLES = ("ordered", "unordered")
ALERT_TYPES = (
    "primary",
    "secondary",
    "info",
    "success",
    "warning",
    "danger",
    "light",
    "dark",
)
EMBED_SERVICES = (
    "facebook",
    "instagram",
    "youtube",
    "twitter",
    "twitch-video",
    "miro",
    "vimeo",
    "gfycat",
    "imgur",
    "vine",
    "aparat",
    "yandex-music-track",
    "yandex-music-album",
    "yandex-music-playlist",
    "coub",
    "codepen",
    "pinterest",
    "github",
)


@dataclass(frozen=True)
class Block(ABC):
    """Base block carrying the type tag shared by every record."""

    type: ClassVar[str]

    def to_editorjs(self) -> dict[str, Any]:
        """Serialize the block into the editor's ``{type, data}`` shape."""

        return {"type": self.type, "data": self._serialize()}

    @abstractmethod
    def _serialize(self) -> dict[str, Any]:
        """Return block-specific data fields."""

    @classmethod
    @abstractmethod
    def from_data(cls, data: Mapping[str, Any]) -> "Block":
        """Build the record from a JSON ``data`` mapping."""


@dataclass(frozen=True)
class Header(Block):
    """Heading block supporting levels 1–6."""

    text: str
    level: int = 2
    alignment: str = DEFAULT_ALIGNMENT
    type: ClassVar[str] = "header"

    def __post_init__(self) -> None:
        if not 1 <= self.level <= 6:
            raise MalformedBlockDataError(self.type, f"level {self.level} is not in 1-6")

    def _serialize(self) -> dict[str, Any]:
        return {"text": self.text, "level": self.level, "alignment": self.alignment}

    @classmethod
    def from_data(cls, data: Mapping[str, Any]) -> "Header":
        try:
            level = int(data.get("level", 2))
        except (TypeError, ValueError) as exc:
            raise MalformedBlockDataError(cls.type, f"invalid level {data.get('level')!r}") from exc
        return cls(
            text=_text(_require(data, "text", cls.type)),
            level=level,
            alignment=_choice(data.get("alignment"), ALIGNMENTS, DEFAULT_ALIGNMENT),
        )


@dataclass(frozen=True)
class Paragraph(Block):
    """Paragraph block holding rich text."""

    text: str
    alignment: str = DEFAULT_ALIGNMENT
    type: ClassVar[str] = "paragraph"

    def _serialize(self) -> dict[str, Any]:
        return {"text": self.text, "alignment": self.alignment}

    @classmethod
    def from_data(cls, data: Mapping[str, Any]) -> "Paragraph":
        return cls(
            text=_text(_require(data, "text", cls.type)),
            alignment=_choice(data.get("alignment"), ALIGNMENTS, DEFAULT_ALIGNMENT),
        )


@dataclass(frozen=True)
class ListBlock(Block):
    """Ordered or unordered list of rich-text items."""

    items: tuple[str, ...] = field(default_factory=tuple)
    style: str = "unordered"
    type: ClassVar[str] = "list"

    def _serialize(self) -> dict[str, Any]:
        return {"style": self.style, "items": list(self.items)}

    @classmethod
    def from_data(cls, data: Mapping[str, Any]) -> "ListBlock":
        items = data.get("items") or []
        if not isinstance(items, Sequence) or isinstance(items, str):
            raise MalformedBlockDataError(cls.type, "items must be a list")
        return cls(
            items=tuple(_list_item(item) for item in items),
            style=_choice(data.get("style"), LIST_STYLES, "unordered"),
        )


@dataclass(frozen=True)
class Raw(Block):
    """Raw HTML passthrough block."""

    html: str
    type: ClassVar[str] = "raw"

    def _serialize(self) -> dict[str, Any]:
        return {"html": self.html}

    @classmethod
    def from_data(cls, data: Mapping[str, Any]) -> "Raw":
        return cls(html=_text(_require(data, "html", cls.type)))


@dataclass(frozen=True)
class LinkTool(Block):
    """Link preview card with fetched page metadata."""

    link: str
    title: str = ""
    description: str = ""
    site_name: str = ""
    image_url: str = ""
    type: ClassVar[str] = "linkTool"

    def _serialize(self) -> dict[str, Any]:
        return {
            "link": self.link,
            "meta": {
                "title": self.title,
                "description": self.description,
                "site_name": self.site_name,
                "image": {"url": self.image_url},
                "url": self.link,
            },
        }

    @classmethod
    def from_data(cls, data: Mapping[str, Any]) -> "LinkTool":
        meta = data.get("meta") or {}
        if not isinstance(meta, Mapping):
            raise MalformedBlockDataError(cls.type, "meta must be an object")
        image = meta.get("image") or {}
        image_url = image.get("url") if isinstance(image, Mapping) else image
        return cls(
            link=_text(_require(data, "link", cls.type)),
            title=_text(meta.get("title")),
            description=_text(meta.get("description")),
            site_name=_text(meta.get("site_name")),
            image_url=_text(image_url),
        )


@dataclass(frozen=True)
class Delimiter(Block):
    """Horizontal rule delimiter."""

    type: ClassVar[str] = "delimiter"

    def _serialize(self) -> dict[str, Any]:
        return {}

    @classmethod
    def from_data(cls, data: Mapping[str, Any]) -> "Delimiter":
        return cls()


@dataclass(frozen=True)
class Alert(Block):
    """Coloured alert box with a rich-text message."""

    message: str
    alert_type: str = "primary"
    align: str = DEFAULT_ALIGNMENT
    type: ClassVar[str] = "alert"

    def _serialize(self) -> dict[str, Any]:
        return {"type": self.alert_type, "align": self.align, "message": self.message}

    @classmethod
    def from_data(cls, data: Mapping[str, Any]) -> "Alert":
        return cls(
            message=_text(data.get("message")),
            alert_type=_choice(data.get("type"), ALERT_TYPES, "primary"),
            align=_choice(data.get("align"), ALIGNMENTS, DEFAULT_ALIGNMENT),
        )


@dataclass(frozen=True)
class Table(Block):
    """Table of rich-text cells; row 0 is the heading row when flagged."""

    content: tuple[tuple[str, ...], ...] = field(default_factory=tuple)
    with_headings: bool = False
    type: ClassVar[str] = "table"

    @property
    def heading(self) -> tuple[str, ...] | None:
        if self.with_headings and self.content:
            return self.content[0]
        return None

    @property
    def body(self) -> tuple[tuple[str, ...], ...]:
        return self.content[1:] if self.with_headings else self.content

    def _serialize(self) -> dict[str, Any]:
        return {
            "withHeadings": self.with_headings,
            "content": [list(row) for row in self.content],
        }

    @classmethod
    def from_data(cls, data: Mapping[str, Any]) -> "Table":
        rows = data.get("content") or []
        if not isinstance(rows, Sequence) or isinstance(rows, str):
            raise MalformedBlockDataError(cls.type, "content must be a list of rows")
        content = []
        for row in rows:
            if not isinstance(row, Sequence) or isinstance(row, str):
                raise MalformedBlockDataError(cls.type, "each row must be a list of cells")
            content.append(tuple(_text(cell) for cell in row))
        return cls(content=tuple(content), with_headings=bool(data.get("withHeadings")))


@dataclass(frozen=True)
class Code(Block):
    """Plain-text code listing."""

    code: str
    type: ClassVar[str] = "code"

    def _serialize(self) -> dict[str, Any]:
        return {"code": self.code}

    @classmethod
    def from_data(cls, data: Mapping[str, Any]) -> "Code":
        return cls(code=_text(_require(data, "code", cls.type)))


@dataclass(frozen=True)
class Quote(Block):
    """Block quote with an optional caption."""

    text: str
    caption: str = ""
    alignment: str = DEFAULT_ALIGNMENT
    type: ClassVar[str] = "quote"

    def _serialize(self) -> dict[str, Any]:
        return {"text": self.text, "caption": self.caption, "alignment": self.alignment}

    @classmethod
    def from_data(cls, data: Mapping[str, Any]) -> "Quote":
        return cls(
            text=_text(_require(data, "text", cls.type)),
            caption=_text(data.get("caption")),
            alignment=_choice(data.get("alignment"), ALIGNMENTS, DEFAULT_ALIGNMENT),
        )


@dataclass(frozen=True)
class Embed(Block):
    """Embedded third-party player rendered as an iframe."""

    embed: str
    source: str = ""
    service: str = ""
    width: str = ""
    height: str = ""
    caption: str = ""
    type: ClassVar[str] = "embed"

    def _serialize(self) -> dict[str, Any]:
        return {
            "service": self.service,
            "source": self.source,
            "embed": self.embed,
            "width": self.width,
            "height": self.height,
            "caption": self.caption,
        }

    @classmethod
    def from_data(cls, data: Mapping[str, Any]) -> "Embed":
        embed = data.get("embed") or data.get("source")
        if not embed:
            raise MalformedBlockDataError(cls.type, "missing field 'embed'")
        return cls(
            embed=_text(embed),
            source=_text(data.get("source") or embed),
            service=_choice(data.get("service"), EMBED_SERVICES, ""),
            width=_text(data.get("width")),
            height=_text(data.get("height")),
            caption=_text(data.get("caption")),
        )


@dataclass(frozen=True)
class Image(Block):
    """Image referenced by a plain ``url`` field."""

    url: str
    caption: str = ""
    with_border: bool = False
    with_background: bool = False
    stretched: bool = False
    type: ClassVar[str] = "image"

    def _serialize(self) -> dict[str, Any]:
        return {"url": self.url, **self._serialize_options()}

    def _serialize_options(self) -> dict[str, Any]:
        return {
            "caption": self.caption,
            "withBorder": self.with_border,
            "withBackground": self.with_background,
            "stretched": self.stretched,
        }

    @classmethod
    def from_data(cls, data: Mapping[str, Any]) -> "Image":
        file_info = data.get("file")
        if isinstance(file_info, Mapping):
            return FileImage.from_data(data)
        return cls(
            url=_text(_require(data, "url", cls.type)),
            caption=_text(data.get("caption")),
            with_border=bool(data.get("withBorder")),
            with_background=bool(data.get("withBackground")),
            stretched=bool(data.get("stretched")),
        )


@dataclass(frozen=True)
class FileImage(Image):
    """Uploaded image whose URL lives under ``file.url``."""

    def _serialize(self) -> dict[str, Any]:
        return {"file": {"url": self.url}, **self._serialize_options()}

    @classmethod
    def from_data(cls, data: Mapping[str, Any]) -> "FileImage":
        file_info = data.get("file")
        if not isinstance(file_info, Mapping):
            raise MalformedBlockDataError(cls.type, "missing field 'file'")
        return cls(
            url=_text(_require(file_info, "url", cls.type)),
            caption=_text(data.get("caption")),
            with_border=bool(data.get("withBorder")),
            with_background=bool(data.get("withBackground")),
            stretched=bool(data.get("stretched")),
        )


@dataclass(frozen=True)
class WarningBlock(Block):
    """Warning notice with a plain-text title and message."""

    title: str
    message: str = ""
    type: ClassVar[str] = "warning"

    def _serialize(self) -> dict[str, Any]:
        return {"title": self.title, "message": self.message}

    @classmethod
    def from_data(cls, data: Mapping[str, Any]) -> "WarningBlock":
        return cls(
            title=_text(_require(data, "title", cls.type)),
            message=_text(data.get("message")),
        )


BLOCK_TYPES: Mapping[str, type[Block]] = MappingProxyType(
    {
        block_class.type: block_class
        for block_class in (
            Header,
            Paragraph,
            ListBlock,
            Raw,
            LinkTool,
            Delimiter,
            Alert,
            Table,
            Code,
            Quote,
            Embed,
            Image,
            WarningBlock,
        )
    }
)


def current_time_ms() -> int:
    """Return the current epoch time in milliseconds."""

    return int(round(_time.time() * 1000))


@dataclass(frozen=True)
class BlockDocument:
    """Ordered blocks plus the ``time``/``version`` envelope metadata."""

    blocks: tuple[Block, ...]
    time: int = field(default_factory=current_time_ms)
    version: str = DEFAULT_VERSION

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON envelope for this document."""

        return {
            "time": self.time,
            "blocks": [block.to_editorjs() for block in self.blocks],
            "version": self.version,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "BlockDocument":
        """Build a document from a parsed JSON envelope.

        Args:
            payload: Mapping with ``time``, ``version`` and ``blocks`` keys.

        Returns:
            BlockDocument: Typed blocks in their original order.

        Raises:
            MalformedBlockDataError: If ``blocks`` is not a list of objects.
            UnknownBlockTypeError: If a block type is not registered.
        """

        if not isinstance(payload, Mapping):
            raise MalformedBlockDataError("document", "top level must be an object")
        raw_blocks = payload.get("blocks") or []
        if not isinstance(raw_blocks, list):
            raise MalformedBlockDataError("document", "blocks must be a list")
        raw_time = payload.get("time")
        try:
            stamp = int(raw_time) if raw_time is not None else current_time_ms()
        except (TypeError, ValueError) as exc:
            raise MalformedBlockDataError("document", f"invalid time {raw_time!r}") from exc
        return cls(
            blocks=tuple(block_from_editorjs(item) for item in raw_blocks),
            time=stamp,
            version=_text(payload.get("version")) or DEFAULT_VERSION,
        )


def block_from_editorjs(payload: Mapping[str, Any]) -> Block:
    """Route a ``{type, data}`` mapping to its typed record."""

    if not isinstance(payload, Mapping):
        raise MalformedBlockDataError("document", "each block must be an object")
    block_type = payload.get("type")
    block_class = BLOCK_TYPES.get(block_type) if isinstance(block_type, str) else None
    if block_class is None:
        raise UnknownBlockTypeError(str(block_type))
    data = payload.get("data") or {}
    if not isinstance(data, Mapping):
        raise MalformedBlockDataError(block_type, "data must be an object")
    return block_class.from_data(data)


def _require(data: Mapping[str, Any], key: str, block_type: str) -> Any:
    value = data.get(key)
    if value is None:
        raise MalformedBlockDataError(block_type, f"missing field '{key}'")
    return value


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _choice(value: Any, choices: Sequence[str], default: str) -> str:
    return value if value in choices else default


def _list_item(item: Any) -> str:
    # Nested-list payloads carry each item as {"content": ..., "items": [...]}.
    if isinstance(item, Mapping):
        return _text(item.get("content"))
    return _text(item)


__all__ = [
    "ALERT_TYPES",
    "ALIGNMENTS",
    "Alert",
    "BLOCK_TYPES",
    "Block",
    "BlockDocument",
    "Code",
    "DEFAULT_ALIGNMENT",
    "Delimiter",
    "EMBED_SERVICES",
    "Embed",
    "FileImage",
    "Header",
    "Image",
    "LIST_STYLES",
    "LinkTool",
    "ListBlock",
    "Paragraph",
    "Quote",
    "Raw",
    "Table",
    "WarningBlock",
    "block_from_editorjs",
    "current_time_ms",
]
