import json

import pytest

from ejs2html.document.elements import BlockDocument, Delimiter, Header
from ejs2html.document.json_io import dumps_document, loads_document
from ejs2html.errors import (
    EmptyInputError,
    MalformedBlockDataError,
    SerializationError,
    UnknownBlockTypeError,
)


def test_loads_accepts_compact_and_pretty_json() -> None:
    payload = {
        "time": 10,
        "version": "2.28.2",
        "blocks": [{"type": "header", "data": {"text": "Hi", "level": 1}}],
    }

    compact = loads_document(json.dumps(payload))
    pretty = loads_document(json.dumps(payload, indent=2))

    assert compact == pretty
    assert compact.blocks == (Header(text="Hi", level=1),)


@pytest.mark.parametrize("text", ["", "  \n"])
def test_loads_rejects_empty_text(text: str) -> None:
    with pytest.raises(EmptyInputError, match="No JSON to parse"):
        loads_document(text)


def test_loads_rejects_invalid_json() -> None:
    with pytest.raises(EmptyInputError, match="Invalid JSON"):
        loads_document("{not json")


def test_loads_rejects_unknown_block(fixtures_path) -> None:
    text = (fixtures_path / "invalid-blocks.json").read_text(encoding="utf-8")

    with pytest.raises(UnknownBlockTypeError, match="Unknown block hello"):
        loads_document(text)


def test_loads_rejects_non_list_blocks() -> None:
    with pytest.raises(MalformedBlockDataError):
        loads_document('{"blocks": {"type": "delimiter"}}')


def test_dumps_uses_four_space_indent_and_envelope_order() -> None:
    text = dumps_document(BlockDocument(blocks=(Delimiter(),), time=7, version="1.0"))

    assert list(json.loads(text)) == ["time", "blocks", "version"]
    assert '\n    "time": 7' in text


def test_dumps_rejects_lone_surrogates() -> None:
    document = BlockDocument(blocks=(Header(text="bad \ud800"),), time=1)

    with pytest.raises(SerializationError):
        dumps_document(document)
