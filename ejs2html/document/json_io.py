"""Read and write the JSON envelope of a block document."""

from __future__ import annotations

import json

from ejs2html.document.elements import BlockDocument
from ejs2html.errors import EmptyInputError, SerializationError


def loads_document(text: str) -> BlockDocument:
    """Parse JSON text into a typed block document.

    Accepts compact or pretty-printed JSON.

    Raises:
        EmptyInputError: If the text is empty or not valid JSON.
        MalformedBlockDataError: If the envelope or a block is malformed.
        UnknownBlockTypeError: If a block type is not registered.
    """

    if not text or not text.strip():
        raise EmptyInputError("No JSON to parse")
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise EmptyInputError(f"Invalid JSON: {exc.msg} (line {exc.lineno})") from exc
    return BlockDocument.from_dict(payload)


def dumps_document(document: BlockDocument) -> str:
    """Serialize a document as pretty-printed JSON with unescaped Unicode."""

    try:
        text = json.dumps(document.to_dict(), indent=4, ensure_ascii=False)
        # Lone surrogates survive json.dumps but cannot be written as UTF-8.
        text.encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise SerializationError(f"Cannot serialize document: {exc}") from exc
    return text


__all__ = ["dumps_document", "loads_document"]
