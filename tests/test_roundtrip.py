import pytest

from ejs2html.document.elements import (
    BlockDocument,
    Code,
    Embed,
    Paragraph,
    Raw,
    Table,
    block_from_editorjs,
)
from ejs2html.document.json_io import dumps_document, loads_document
from ejs2html.html.decoder import decode_html
from ejs2html.html.encoder import HtmlEncoder, encode_blocks
from ejs2html.utils.logging import NullLogger


def _round_trip(document: BlockDocument, prefix: str = "prs") -> BlockDocument:
    html = encode_blocks(document, prefix)
    return decode_html(html, prefix, time=document.time, version=document.version)


def test_seed_document_survives_html_round_trip(seed_json: str) -> None:
    document = loads_document(seed_json)

    restored = _round_trip(document)

    assert restored == document
    assert len(restored.blocks) == 14


def test_seed_document_survives_custom_prefix(seed_json: str) -> None:
    document = loads_document(seed_json)

    assert _round_trip(document, "trd") == document


def test_html_to_json_to_html_is_stable(seed_json: str) -> None:
    html = encode_blocks(loads_document(seed_json))

    again = encode_blocks(decode_html(html))

    assert again == html


def test_table_with_headings_round_trips() -> None:
    document = BlockDocument(
        blocks=(
            Table(
                content=(("Kine", "Pigs", "Chicken"), ("1 pcs", "3 pcs", "12 pcs")),
                with_headings=True,
            ),
        ),
        time=1,
    )

    html = encode_blocks(document)

    assert html.count("<th>") == 3
    assert html.count("<td>") == 3
    assert _round_trip(document) == document


def test_escaped_code_round_trips_as_literal_text() -> None:
    document = BlockDocument(blocks=(Code(code="<script>alert(1)</script>"),), time=1)

    assert _round_trip(document) == document


def test_json_text_round_trip_preserves_unicode() -> None:
    document = BlockDocument(blocks=(Paragraph(text="Grüße 👋"),), time=5, version="2.28.2")

    text = dumps_document(document)

    assert "Grüße 👋" in text
    assert loads_document(text) == document


@pytest.mark.parametrize("service", ["myspace", "my space"])
def test_unknown_embed_service_falls_back_to_no_service(service: str) -> None:
    block = block_from_editorjs(
        {"type": "embed", "data": {"embed": "https://x.test/e", "service": service}}
    )
    document = BlockDocument(blocks=(block,), time=1)

    assert block == Embed(embed="https://x.test/e", source="https://x.test/e")
    assert _round_trip(document) == document


@pytest.mark.parametrize("service", ["myspace", "my space"])
def test_unknown_embed_service_is_dropped_from_markers(service: str) -> None:
    logger = NullLogger()
    document = BlockDocument(blocks=(Embed(embed="https://x.test/e", service=service),), time=1)

    html = HtmlEncoder(logger=logger).encode(document)

    assert '<figure class="prs-embed">' in html
    assert [entry.code for entry in logger.warnings] == ["W002"]
    (block,) = decode_html(html).blocks
    assert block == Embed(embed="https://x.test/e", source="https://x.test/e")


def test_markers_inside_raw_html_stay_part_of_the_raw_block() -> None:
    document = BlockDocument(
        blocks=(
            Raw(html='<p class="prs-paragraph">x</p><p class="prs-hello">y</p>'),
            Paragraph(text="after"),
        ),
        time=1,
    )

    assert _round_trip(document) == document


def test_bare_ampersand_in_rich_text_comes_back_escaped() -> None:
    document = BlockDocument(blocks=(Paragraph(text="a & b"),), time=1)

    (block,) = _round_trip(document).blocks

    assert block == Paragraph(text="a &amp; b")
