"""Entry points for converting files and directories of documents."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Protocol

from .config import ConverterConfig
from .document.json_io import dumps_document, loads_document
from .errors import ParserError, SerializationError
from .html.decoder import HtmlDecoder
from .html.encoder import HtmlEncoder
from .loaders.directory import SourceDocument, SourceTree, load_sources
from .utils.logging import WarningLogger

JSON_SUFFIX = ".json"
HTML_SUFFIX = ".html"


class ConvertProgress(Protocol):
    """Reporting hook for batch conversion progress."""

    def start(self, total: int) -> None:
        """Begin tracking conversion progress.

        Args:
            total: Total number of documents that will be converted.
        """

    def advance(self, document: SourceDocument) -> None:
        """Advance the progress tracker when a document is converted.

        Args:
            document: Document that has just been converted.
        """

    def finish(self) -> None:
        """Finalize progress tracking."""


@dataclass
class ConvertedDocument:
    """Converted content waiting to be written to disk."""

    source: SourceDocument
    destination: Path
    content: str


def run_to_html(
    source: Path,
    output: Optional[Path] = None,
    *,
    config: ConverterConfig | None = None,
    progress: ConvertProgress | None = None,
    strict: bool = False,
    logger: WarningLogger | None = None,
) -> WarningLogger:
    """Encode every JSON block document under ``source`` as HTML.

    Args:
        source: A ``.json`` file or a directory scanned for ``.json`` files.
        output: Optional directory for the ``.html`` files; defaults to
            writing next to each source.
        config: Converter configuration (marker prefix).
        progress: Optional reporter for batch progress.
        strict: When True, abort before writing if any warning was logged.
        logger: Optional warning logger to reuse.

    Returns:
        WarningLogger: Warnings captured while converting.

    Raises:
        SystemExit: If ``strict`` is True and warnings were captured.
    """

    encoder = HtmlEncoder(config or ConverterConfig())
    tree = load_sources(source, JSON_SUFFIX)
    active_logger = logger or WarningLogger(tree.root.name, source_root=tree.root)
    encoder.logger = active_logger

    def _convert(document: SourceDocument) -> str:
        return encoder.encode(loads_document(document.content), source_file=document.relative_path)

    print(f"📄 Encoding {len(tree.documents)} JSON document(s) from {tree.root}")
    return _run_batch(tree, _convert, HTML_SUFFIX, output, progress, strict, active_logger)


def run_to_blocks(
    source: Path,
    output: Optional[Path] = None,
    *,
    config: ConverterConfig | None = None,
    time: int | None = None,
    version: str | None = None,
    progress: ConvertProgress | None = None,
    strict: bool = False,
    logger: WarningLogger | None = None,
) -> WarningLogger:
    """Decode every HTML fragment under ``source`` into a JSON block document.

    Args:
        source: An ``.html`` file or a directory scanned for ``.html`` files.
        output: Optional directory for the ``.json`` files; defaults to
            writing next to each source.
        config: Converter configuration (marker prefix, default version).
        time: Envelope timestamp; defaults to the conversion time.
        version: Envelope version; defaults to ``config.version``.
        progress: Optional reporter for batch progress.
        strict: When True, abort before writing if any warning was logged.
        logger: Optional warning logger to reuse.

    Returns:
        WarningLogger: Warnings captured while converting.

    Raises:
        SystemExit: If ``strict`` is True and warnings were captured.
    """

    decoder = HtmlDecoder(config or ConverterConfig())
    tree = load_sources(source, HTML_SUFFIX)
    active_logger = logger or WarningLogger(tree.root.name, source_root=tree.root)
    decoder.logger = active_logger

    def _convert(document: SourceDocument) -> str:
        decoded = decoder.decode(
            document.content,
            time=time,
            version=version,
            source_file=document.relative_path,
        )
        return dumps_document(decoded) + "\n"

    print(f"📄 Decoding {len(tree.documents)} HTML document(s) from {tree.root}")
    return _run_batch(tree, _convert, JSON_SUFFIX, output, progress, strict, active_logger)


def run_validate(
    source: Path, *, config: ConverterConfig | None = None, strict: bool = False
) -> int:
    """Check that every JSON and HTML source converts and round-trips cleanly.

    JSON documents are encoded and decoded again; HTML fragments are decoded,
    re-encoded and decoded again. Both must reproduce the same blocks.

    Args:
        source: A file or a directory containing ``.json``/``.html`` sources.
        config: Converter configuration (marker prefix).
        strict: When True, treat warnings as failures.

    Returns:
        int: 0 when all checks pass; 1 when errors or strict warnings occur.
    """

    print("🔧 Validating documents…")
    if strict:
        print("Strict mode enabled: warnings will block validation.")
    active_config = config or ConverterConfig()
    json_tree = load_sources(source, JSON_SUFFIX)
    html_tree = load_sources(source, HTML_SUFFIX)
    logger = WarningLogger(json_tree.root.name, source_root=json_tree.root)
    encoder = HtmlEncoder(active_config, logger=logger)
    decoder = HtmlDecoder(active_config, logger=logger)

    errors: list[str] = []
    for document in json_tree.unreadable() + html_tree.unreadable():
        errors.append(f"{document.relative_path}: unreadable file")

    for document in json_tree.readable():
        try:
            original = loads_document(document.content)
            html = encoder.encode(original, source_file=document.relative_path)
            restored = decoder.decode(html, source_file=document.relative_path)
        except ParserError as exc:
            errors.append(f"{document.relative_path}: {exc}")
            continue
        if restored.blocks != original.blocks:
            errors.append(f"{document.relative_path}: blocks changed after HTML round trip")

    for document in html_tree.readable():
        try:
            decoded = decoder.decode(document.content, source_file=document.relative_path)
            restored = decoder.decode(encoder.encode(decoded), source_file=document.relative_path)
        except ParserError as exc:
            errors.append(f"{document.relative_path}: {exc}")
            continue
        if restored.blocks != decoded.blocks:
            errors.append(f"{document.relative_path}: blocks changed after re-encoding")

    checked = len(json_tree.documents) + len(html_tree.documents)
    if logger.has_warnings():
        for warning in logger.warnings:
            print(f" - {warning.format()}")
        print(logger.summary())

    if errors:
        print("❌ Validation errors:")
        for error in errors:
            print(f" - {error}")
        print(f"Found {len(errors)} validation error(s).")
        return 1

    if strict and logger.has_warnings():
        return 1

    print(f"✅ All checks passed ({checked} document(s)).")
    return 0


def _run_batch(
    tree: SourceTree,
    convert: Callable[[SourceDocument], str],
    suffix: str,
    output: Optional[Path],
    progress: ConvertProgress | None,
    strict: bool,
    logger: WarningLogger,
) -> WarningLogger:
    for document in tree.unreadable():
        logger.warn(
            filename=document.relative_path,
            line=None,
            element_type="File",
            message="could not read source file",
            code="file-io-warning",
        )

    converted: list[ConvertedDocument] = []
    readable = tree.readable()
    if progress:
        progress.start(len(readable))
    try:
        for document in readable:
            try:
                content = convert(document)
            except ParserError as exc:
                logger.warn(
                    filename=document.relative_path,
                    line=None,
                    element_type=type(exc).__name__,
                    message=str(exc),
                    code="conversion-error",
                )
            else:
                converted.append(
                    ConvertedDocument(
                        source=document,
                        destination=document.output_path(suffix, output),
                        content=content,
                    )
                )
            if progress:
                progress.advance(document)
    finally:
        if progress:
            progress.finish()

    if strict and logger.has_warnings():
        print(logger.summary())
        raise SystemExit(1)

    for item in converted:
        _write(item)

    if logger.has_warnings():
        print(logger.summary())
    print(f"✅ Converted {len(converted)}/{len(tree.documents)} document(s).")
    return logger


def _write(item: ConvertedDocument) -> None:
    item.destination.parent.mkdir(parents=True, exist_ok=True)
    try:
        item.destination.write_text(item.content, encoding="utf-8")
    except UnicodeEncodeError as exc:
        raise SerializationError(
            f"{item.source.relative_path}: cannot write {item.destination.name}: {exc}"
        ) from exc


__all__ = [
    "ConvertProgress",
    "ConvertedDocument",
    "run_to_blocks",
    "run_to_html",
    "run_validate",
]
