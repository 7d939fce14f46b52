import pytest

from ejs2html.document.elements import BLOCK_TYPES
from ejs2html.errors import UnknownBlockTypeError
from ejs2html.html.registry import REGISTRY, get_handler


def test_registry_covers_every_block_type() -> None:
    assert set(REGISTRY) == set(BLOCK_TYPES)
    assert len(REGISTRY) == 13


def test_handlers_are_named_after_their_key() -> None:
    for name, handler in REGISTRY.items():
        assert handler.name == name
        assert get_handler(name) is handler


def test_unknown_handler_lookup_raises() -> None:
    with pytest.raises(UnknownBlockTypeError) as excinfo:
        get_handler("hello")

    assert excinfo.value.block_type == "hello"
    assert str(excinfo.value) == "Unknown block hello"


def test_registry_is_read_only() -> None:
    with pytest.raises(TypeError):
        REGISTRY["custom"] = REGISTRY["paragraph"]  # type: ignore[index]
