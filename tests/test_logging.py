from pathlib import Path

from ejs2html.html.decoder import HtmlDecoder
from ejs2html.utils.logging import NullLogger, WarningLogger


def test_logger_reports_paths_from_source_root(tmp_path: Path) -> None:
    site_dir = tmp_path / "site_source"
    site_dir.mkdir()
    file_path = site_dir / "guide" / "page.html"
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_text('<p class="prs-paragraph prs_shiny">Hi</p>', encoding="utf-8")

    logger = WarningLogger("site_source", source_root=site_dir, log_dir=tmp_path / "logs")
    HtmlDecoder(logger=logger).decode(file_path.read_text(), source_file="guide/page.html")

    assert logger.warnings
    entry = logger.warnings[0]
    assert entry.filename == "site_source/guide/page.html"
    assert entry.format() == (
        "site_source/guide/page.html:1 [W001][paragraph] ignoring unrecognized style 'shiny'"
    )


def test_logger_appends_to_timestamped_file(tmp_path: Path) -> None:
    logger = WarningLogger("my site!", log_dir=tmp_path / "logs")

    logger.warn(
        filename="a.json",
        line=None,
        element_type="Table",
        message="rows have differing cell counts [1, 2]",
        code="ragged-table",
    )

    assert logger.log_path.parent == tmp_path / "logs"
    assert logger.log_path.name.startswith("my_site__")
    assert logger.log_path.read_text(encoding="utf-8") == (
        "a.json [W003][Table] rows have differing cell counts [1, 2]\n"
    )


def test_summary_counts_warnings_by_code(tmp_path: Path) -> None:
    logger = WarningLogger("docs", log_dir=tmp_path)
    for code in ("unknown-style", "unknown-style", "unknown-service"):
        logger.warn(filename="", line=None, element_type="X", message="m", code=code)

    assert logger.summary().startswith("Found 3 warnings (W001: 2, W002: 1). See docs_")


def test_null_logger_keeps_entries_in_memory(tmp_path: Path) -> None:
    logger = NullLogger()

    logger.warn(filename="", line=3, element_type="Embed", message="m", code="custom")

    assert logger.has_warnings()
    assert logger.warnings[0].format() == "<input>:3 [custom][Embed] m"
    assert not (tmp_path / "logs").exists()
