from io import StringIO
from pathlib import Path

from rich.console import Console

from ejs2html.cli import RichConvertProgress
from ejs2html.loaders.directory import SourceDocument


def test_rich_progress_keeps_final_status_visible() -> None:
    console_file = StringIO()
    console = Console(
        file=console_file,
        force_terminal=True,
        color_system=None,
        width=120,
    )
    progress = RichConvertProgress(console, "Encoding")
    document = SourceDocument(
        path=Path("content/post.json"),
        relative_path="post.json",
        content="{}",
    )

    progress.start(1)
    assert progress._progress is not None
    assert progress._progress.live.transient is False

    progress.advance(document)
    progress.finish()

    output = console_file.getvalue()
    assert "1/1" in output
    assert "Encoding finished: 1 document(s)" in output
    assert progress.completed == 1
    assert progress._progress is None


def test_rich_progress_ignores_advance_before_start() -> None:
    console_file = StringIO()
    progress = RichConvertProgress(Console(file=console_file), "Decoding")

    progress.advance(SourceDocument(path=Path("a.html"), relative_path="a.html", content=""))
    progress.finish()

    assert progress.completed == 0
    assert console_file.getvalue() == ""
