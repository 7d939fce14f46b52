from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Optional

import typer
from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)

from .config import load_config
from .runner import ConvertProgress, run_to_blocks, run_to_html, run_validate

if TYPE_CHECKING:
    from .loaders.directory import SourceDocument

app = typer.Typer(
    name="ejs2html",
    help="Convert editor block documents (JSON) to marked HTML and back.",
    add_completion=True,
)

console = Console()

SOURCE_HELP = "A single file or a directory scanned recursively for sources."
PREFIX_HELP = "Marker class prefix (overrides EJS2HTML_PREFIX, default 'prs')."
ENV_FILE_HELP = "Optional .env file providing EJS2HTML_* defaults."


class RichConvertProgress(ConvertProgress):
    """Animated progress bar for a batch conversion, followed by a one-line tally."""

    def __init__(self, console: Console, verb: str = "Converting") -> None:
        self.console = console
        self.verb = verb
        self.completed = 0
        self._progress: Optional[Progress] = None
        self._task_id: Optional[TaskID] = None

    def start(self, total: int) -> None:
        self.completed = 0
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            TextColumn("documents"),
            TimeElapsedColumn(),
            console=self.console,
            transient=False,
        )
        self._progress.start()
        self._task_id = self._progress.add_task(self.verb, total=total)

    def advance(self, document: "SourceDocument") -> None:
        if self._progress is None or self._task_id is None:
            return

        self.completed += 1
        self._progress.update(
            self._task_id,
            advance=1,
            description=f"{self.verb} {document.relative_path}",
        )

    def finish(self) -> None:
        if self._progress is None:
            return

        self._progress.stop()
        self.console.print(f"{self.verb} finished: {self.completed} document(s)")
        self._progress = None
        self._task_id = None


@app.command("to-html")
def to_html(
    source: Path = typer.Argument(..., exists=True, help=SOURCE_HELP),
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        file_okay=False,
        dir_okay=True,
        help="Directory for the generated .html files (defaults to next to each source).",
    ),
    prefix: str | None = typer.Option(None, "--prefix", help=PREFIX_HELP),
    env_file: Path | None = typer.Option(None, "--env-file", help=ENV_FILE_HELP),
    strict: bool = typer.Option(
        False,
        "--strict",
        help="Fail without writing any file when warnings or conversion errors occur.",
    ),
) -> None:
    """
    Encode JSON block documents as HTML fragments.

    Examples:
        ejs2html to-html post.json
        ejs2html to-html content/ --output site/
        ejs2html to-html content/ --prefix trd --strict
    """
    config = load_config(env_file=env_file, prefix=prefix)
    run_to_html(
        source,
        output,
        config=config,
        progress=RichConvertProgress(console, "Encoding"),
        strict=strict,
    )


@app.command("to-blocks")
def to_blocks(
    source: Path = typer.Argument(..., exists=True, help=SOURCE_HELP),
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        file_okay=False,
        dir_okay=True,
        help="Directory for the generated .json files (defaults to next to each source).",
    ),
    prefix: str | None = typer.Option(None, "--prefix", help=PREFIX_HELP),
    version_tag: str | None = typer.Option(
        None,
        "--version-tag",
        help="Version stamped into the documents (overrides EJS2HTML_VERSION).",
    ),
    time: int | None = typer.Option(
        None,
        "--time",
        help="Epoch milliseconds stamped into the documents (defaults to now).",
    ),
    env_file: Path | None = typer.Option(None, "--env-file", help=ENV_FILE_HELP),
    strict: bool = typer.Option(
        False,
        "--strict",
        help="Fail without writing any file when warnings or conversion errors occur.",
    ),
) -> None:
    """
    Decode marked HTML fragments into JSON block documents.

    Examples:
        ejs2html to-blocks post.html
        ejs2html to-blocks site/ --output content/ --version-tag 2.30.0
    """
    config = load_config(env_file=env_file, prefix=prefix, version=version_tag)
    run_to_blocks(
        source,
        output,
        config=config,
        time=time,
        progress=RichConvertProgress(console, "Decoding"),
        strict=strict,
    )


@app.command("validate")
def validate(
    source: Path = typer.Argument(..., exists=True, help=SOURCE_HELP),
    prefix: str | None = typer.Option(None, "--prefix", help=PREFIX_HELP),
    env_file: Path | None = typer.Option(None, "--env-file", help=ENV_FILE_HELP),
    strict: bool = typer.Option(
        False,
        "--strict",
        help="Exit with code 1 when warnings are present.",
    ),
) -> None:
    """
    Check that JSON and HTML sources convert and round-trip without changes.

    Checks (fails with code 1 when ``--strict`` is set and warnings exist):
    - readable source files
    - every block type is registered and well formed
    - JSON -> HTML -> JSON reproduces the same blocks
    - HTML -> JSON -> HTML -> JSON reproduces the same blocks
    """
    config = load_config(env_file=env_file, prefix=prefix)
    exit_code = run_validate(source, config=config, strict=strict)
    if exit_code:
        raise typer.Exit(code=exit_code)


def main() -> None:
    """Entry point for Python -m execution."""
    app()


if __name__ == "__main__":
    main()
