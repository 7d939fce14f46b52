import json

import pytest
from bs4 import BeautifulSoup

from ejs2html.config import ConverterConfig
from ejs2html.document.elements import (
    BlockDocument,
    Code,
    Delimiter,
    Embed,
    FileImage,
    Header,
    LinkTool,
    Paragraph,
    Table,
    WarningBlock,
)
from ejs2html.errors import NoBlocksError, UnknownBlockTypeError
from ejs2html.html.encoder import HtmlEncoder, encode_blocks
from ejs2html.utils.logging import NullLogger


def _encode(*blocks, prefix: str = "prs") -> str:
    return encode_blocks(BlockDocument(blocks=tuple(blocks)), prefix)


def test_rich_text_is_embedded_as_markup() -> None:
    html = _encode(Paragraph(text="<b>bold</b> move"))

    assert html == '<p class="prs-paragraph prs_left"><b>bold</b> move</p>'


def test_plain_code_is_escaped_never_interpreted() -> None:
    html = _encode(Code(code="<script>alert(1)</script>"))

    assert html == (
        '<pre class="prs-code"><code>&lt;script&gt;alert(1)&lt;/script&gt;</code></pre>'
    )
    assert BeautifulSoup(html, "html.parser").find("script") is None


def test_warning_title_is_plain_text() -> None:
    html = _encode(WarningBlock(title="<em>Heads up</em>", message="a < b"))

    soup = BeautifulSoup(html, "html.parser")
    assert soup.find("em") is None
    assert soup.h4.get_text() == "<em>Heads up</em>"
    assert soup.p.get_text() == "a < b"


def test_blocks_become_top_level_siblings_in_order() -> None:
    blocks = [Paragraph(text=f"p{index}") for index in range(12)]

    soup = BeautifulSoup(_encode(*blocks), "html.parser")

    assert [tag.get_text() for tag in soup.find_all(recursive=False)] == [
        f"p{index}" for index in range(12)
    ]


def test_header_uses_level_tag_and_alignment_marker() -> None:
    html = _encode(Header(text="Title", level=3, alignment="right"))

    assert html == '<h3 class="prs-header prs_right">Title</h3>'


def test_table_with_headings_splits_thead_and_tbody() -> None:
    table = Table(content=(("A", "B"), ("1", "2"), ("3", "4")), with_headings=True)

    html = _encode(table)

    assert html == (
        '<table class="prs-table prs_withheadings">'
        "<thead><tr><th>A</th><th>B</th></tr></thead>"
        "<tbody><tr><td>1</td><td>2</td></tr><tr><td>3</td><td>4</td></tr></tbody>"
        "</table>"
    )


def test_table_without_headings_has_no_thead() -> None:
    html = _encode(Table(content=(("A", "B"), ("1", "2"))))

    soup = BeautifulSoup(html, "html.parser")
    assert soup.find("thead") is None
    assert len(soup.tbody.find_all("tr")) == 2
    assert soup.table["class"] == ["prs-table"]


def test_link_tool_structure_uses_style_tokens() -> None:
    block = LinkTool(
        link="https://codex.so",
        title="CodeX",
        description="Web <development>",
        site_name="codex.so",
        image_url="https://codex.so/logo.png",
    )

    soup = BeautifulSoup(_encode(block), "html.parser")

    figure = soup.figure
    assert figure["class"] == ["prs-linkTool"]
    assert figure.a["href"] == "https://codex.so"
    assert figure.img["src"] == "https://codex.so/logo.png"
    assert soup.select_one("p.prs_title").get_text() == "CodeX"
    assert soup.select_one("p.prs_description").get_text() == "Web <development>"
    assert soup.select_one("p.prs_site_name").get_text() == "codex.so"


def test_youtube_embed_allows_fullscreen() -> None:
    block = Embed(
        embed="https://www.youtube.com/embed/abc",
        source="https://www.youtube.com/watch?v=abc",
        service="youtube",
        width="580",
        height="320",
    )

    soup = BeautifulSoup(_encode(block), "html.parser")

    iframe = soup.iframe
    assert soup.figure["class"] == ["prs-embed", "prs_youtube"]
    assert iframe["src"] == "https://www.youtube.com/embed/abc"
    assert iframe["data-source"] == "https://www.youtube.com/watch?v=abc"
    assert iframe["width"] == "580"
    assert iframe.has_attr("allowfullscreen")
    assert soup.find("figcaption") is None


def test_unknown_embed_service_warns() -> None:
    logger = NullLogger()
    encoder = HtmlEncoder(logger=logger)

    encoder.encode(BlockDocument(blocks=(Embed(embed="https://x.test", service="myspace"),)))

    assert logger.warnings[0].code == "W002"
    assert "myspace" in logger.warnings[0].message


def test_ragged_table_warns() -> None:
    logger = NullLogger()

    HtmlEncoder(logger=logger).encode(
        BlockDocument(blocks=(Table(content=(("a", "b"), ("c",))),))
    )

    assert [entry.code for entry in logger.warnings] == ["W003"]


def test_file_image_flags_follow_fixed_order() -> None:
    block = FileImage(url="dog.jpg", with_border=True, stretched=True)

    soup = BeautifulSoup(_encode(block), "html.parser")

    assert soup.figure["class"] == ["prs-image", "prs_withborder", "prs_stretched", "prs_file"]
    assert soup.img["src"] == "dog.jpg"


def test_delimiter_is_a_void_element() -> None:
    assert _encode(Delimiter()) == '<hr class="prs-delimiter">'


def test_non_ascii_text_is_emitted_literally() -> None:
    html = _encode(Paragraph(text="Ünïcødé 日本語 “quotes”"))

    assert "Ünïcødé 日本語 “quotes”" in html
    assert "&#" not in html


def test_custom_prefix_is_used_for_every_marker() -> None:
    encoder = HtmlEncoder(ConverterConfig(prefix="trd"))

    html = encoder.encode(BlockDocument(blocks=(Paragraph(text="x", alignment="center"),)))

    assert html == '<p class="trd-paragraph trd_center">x</p>'


def test_empty_block_list_is_rejected(fixtures_path) -> None:
    payload = json.loads((fixtures_path / "empty-blocks.json").read_text(encoding="utf-8"))

    with pytest.raises(NoBlocksError, match="No blocks to parse"):
        encode_blocks(payload)


def test_unknown_block_type_is_rejected(fixtures_path) -> None:
    payload = json.loads((fixtures_path / "invalid-blocks.json").read_text(encoding="utf-8"))

    with pytest.raises(UnknownBlockTypeError, match="Unknown block hello"):
        encode_blocks(payload)
