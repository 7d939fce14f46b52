"""BeautifulSoup helpers for building and reading marked HTML fragments."""

from __future__ import annotations

from typing import Any

from bs4 import BeautifulSoup, Tag
from bs4.dammit import EntitySubstitution
from bs4.formatter import HTMLFormatter

from ejs2html.errors import MalformedBlockDataError
from ejs2html.html.markers import add_marker, style_token
from ejs2html.utils.logging import NullLogger, WarningLogger

PARSER = "html.parser"

# Escape only &, < and >; every other character is written as UTF-8.
OUTPUT_FORMATTER = HTMLFormatter(
    entity_substitution=EntitySubstitution.substitute_xml,
    void_element_close_prefix=None,
    empty_attributes_are_booleans=True,
)


def parse_html(html: str) -> BeautifulSoup:
    """Parse an HTML string leniently with the standard library tree builder."""

    return BeautifulSoup(html, PARSER)


class HtmlBuilder:
    """Create marked elements inside a single output document."""

    def __init__(
        self,
        prefix: str,
        *,
        logger: WarningLogger | None = None,
        source_file: str = "",
    ) -> None:
        self.prefix = prefix
        self.soup = BeautifulSoup("", PARSER)
        self.logger = logger or NullLogger()
        self.source_file = source_file

    def marked(self, name: str, block_type: str, *styles: str, **attrs: str) -> Tag:
        """Create an element carrying the block's type marker and styles."""

        classes = add_marker(block_type, *styles, prefix=self.prefix)
        return self.element(name, {"class": classes, **attrs})

    def element(self, name: str, attrs: dict[str, Any] | None = None) -> Tag:
        return self.soup.new_tag(name, attrs=attrs or {})

    def styled(self, name: str, style: str) -> Tag:
        """Create an element tagged only with a style token (no block type)."""

        return self.element(name, {"class": style_token(style, self.prefix)})

    def append_fragment(self, parent: Tag, html: str) -> Tag:
        """Parse ``html`` and append its nodes to ``parent`` as markup."""

        fragment = parse_html(html)
        for node in list(fragment.contents):
            parent.append(node.extract())
        return parent

    def append_text(self, parent: Tag, text: str) -> Tag:
        """Append ``text`` as an escaped text node."""

        if text:
            parent.append(text)
        return parent

    def child(self, parent: Tag, name: str, attrs: dict[str, Any] | None = None) -> Tag:
        tag = self.element(name, attrs)
        parent.append(tag)
        return tag

    def add(self, tag: Tag) -> None:
        """Append a finished block element as a top-level sibling."""

        self.soup.append(tag)

    def render(self) -> str:
        return self.soup.decode(formatter=OUTPUT_FORMATTER)

    def warn(self, element_type: str, message: str, code: str) -> None:
        self.logger.warn(
            filename=self.source_file,
            line=None,
            element_type=element_type,
            message=message,
            code=code,
        )


def inner_html(tag: Tag | None) -> str:
    """Return the markup between a tag's opening and closing tags."""

    if tag is None:
        return ""
    return tag.decode_contents(formatter=OUTPUT_FORMATTER)


def require(element: Tag, name: str, block_type: str) -> Tag:
    """Return the first ``name`` descendant or fail with a malformed-block error."""

    found = element.find(name)
    if not isinstance(found, Tag):
        raise MalformedBlockDataError(block_type, f"missing <{name}> element")
    return found


def find_by_class(element: Tag, name: str, class_token: str) -> Tag | None:
    """Return the first ``name`` descendant whose class contains ``class_token``."""

    return element.select_one(f'{name}[class*="{css_string(class_token)}"]')


def css_string(value: str) -> str:
    """Escape a value for use inside a double-quoted CSS attribute selector."""

    return value.replace("\\", "\\\\").replace('"', '\\"')


__all__ = [
    "HtmlBuilder",
    "OUTPUT_FORMATTER",
    "PARSER",
    "css_string",
    "find_by_class",
    "inner_html",
    "parse_html",
    "require",
]
