"""Discover JSON and HTML sources on disk."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

HIDDEN_PREFIX = "."


@dataclass
class SourceDocument:
    """A single source file queued for conversion."""

    path: Path
    relative_path: str
    content: str
    read_error: bool = False

    def output_path(self, suffix: str, output_root: Path | None = None) -> Path:
        """Return where the converted file should be written.

        Args:
            suffix: Extension of the converted file, e.g. ``".html"``.
            output_root: Optional directory mirroring the source layout. When
                omitted the converted file sits next to its source.

        Returns:
            Path: Destination path for the converted content.
        """

        if output_root is None:
            return self.path.with_suffix(suffix)
        return (output_root / self.relative_path).with_suffix(suffix)


@dataclass
class SourceTree:
    """Sources found under a root directory (or a single file)."""

    root: Path
    documents: list[SourceDocument]

    def readable(self) -> list[SourceDocument]:
        return [doc for doc in self.documents if not doc.read_error]

    def unreadable(self) -> list[SourceDocument]:
        return [doc for doc in self.documents if doc.read_error]


def load_sources(source: Path, suffix: str) -> SourceTree:
    """Load every ``suffix`` file beneath ``source``.

    Args:
        source: A directory to scan recursively, or a single file (kept only
            when its extension matches ``suffix``).
        suffix: File extension to collect, e.g. ``".json"``.

    Returns:
        SourceTree: Documents sorted by relative path; hidden entries skipped.
    """

    if source.is_file():
        documents = [_read(source, source.parent)] if source.suffix == suffix else []
        return SourceTree(root=source.parent, documents=documents)

    documents: list[SourceDocument] = []
    for dirpath, dirnames, filenames in os.walk(source):
        dirnames[:] = [d for d in dirnames if not d.startswith(HIDDEN_PREFIX)]
        for filename in filenames:
            if filename.startswith(HIDDEN_PREFIX) or not filename.endswith(suffix):
                continue
            documents.append(_read(Path(dirpath) / filename, source))

    documents.sort(key=lambda d: d.relative_path)
    return SourceTree(root=source, documents=documents)


def _read(path: Path, root: Path) -> SourceDocument:
    content = ""
    read_error = False
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        read_error = True
    return SourceDocument(
        path=path,
        relative_path=PurePosixPath(path.relative_to(root)).as_posix(),
        content=content,
        read_error=read_error,
    )


__all__ = ["SourceDocument", "SourceTree", "load_sources"]
