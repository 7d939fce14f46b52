"""Class-name markers that tag HTML elements with their block type and styles.

An element's ``class`` attribute holds exactly one type marker,
``<prefix>-<type>``, followed by zero or more style tokens,
``<prefix>_<value>`` (alignment, visual style, boolean tunes).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from ejs2html.config import DEFAULT_PREFIX


@dataclass(frozen=True)
class Marker:
    """Block type and style values recovered from a class list."""

    type: str
    styles: tuple[str, ...] = field(default_factory=tuple)


def add_marker(block_type: str, *styles: str, prefix: str = DEFAULT_PREFIX) -> str:
    """Return the class attribute value for a block type and its styles.

    The type marker always comes first; empty style values are dropped.
    """

    tokens = [type_token(block_type, prefix)]
    tokens.extend(style_token(style, prefix) for style in styles if style)
    return " ".join(tokens)


def parse_marker(classes: str | Iterable[str], prefix: str = DEFAULT_PREFIX) -> Marker | None:
    """Split a class list into its type marker and style values.

    Args:
        classes: Raw ``class`` attribute value or an iterable of tokens.
        prefix: Marker namespace.

    Returns:
        Marker | None: ``None`` when no type marker is present.
    """

    tokens = classes.split() if isinstance(classes, str) else list(classes)
    type_prefix = f"{prefix}-"
    style_prefix = f"{prefix}_"

    block_type = next(
        (
            token[len(type_prefix):]
            for token in tokens
            if token.startswith(type_prefix) and len(token) > len(type_prefix)
        ),
        None,
    )
    if block_type is None:
        return None
    styles = tuple(
        token[len(style_prefix):]
        for token in tokens
        if token.startswith(style_prefix) and len(token) > len(style_prefix)
    )
    return Marker(type=block_type, styles=styles)


def type_token(block_type: str, prefix: str = DEFAULT_PREFIX) -> str:
    return f"{prefix}-{block_type}"


def style_token(value: str, prefix: str = DEFAULT_PREFIX) -> str:
    return f"{prefix}_{value}"


__all__ = ["Marker", "add_marker", "parse_marker", "style_token", "type_token"]
