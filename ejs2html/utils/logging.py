"""Compiler-style conversion warnings collected per run."""

from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List

WARN_CODES = {
    "unknown-style": "W001",
    "unknown-service": "W002",
    "ragged-table": "W003",
    "file-io-warning": "W004",
    "conversion-error": "W005",
}


@dataclass(frozen=True)
class WarningEntry:
    """Captured warning with minimal metadata."""

    filename: str
    line: int | None
    element_type: str
    message: str
    code: str

    def format(self) -> str:
        location = self.filename or "<input>"
        if self.line is not None:
            location = f"{location}:{self.line}"
        return f"{location} [{self.code}][{self.element_type}] {self.message}"


class WarningLogger:
    """Collect warnings and append them to a timestamped log file."""

    def __init__(
        self,
        root_name: str,
        *,
        source_root: Path | None = None,
        log_dir: Path = Path("logs"),
    ) -> None:
        sanitized = re.sub(r"[^A-Za-z0-9_-]", "_", root_name) or "ejs2html"
        timestamp = datetime.now().strftime("%Y-%m-%d-%H%M")
        self.log_path = log_dir / f"{sanitized}_{timestamp}.log"
        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        self._source_root = source_root.resolve() if source_root else None
        self._warnings: List[WarningEntry] = []

    @property
    def warnings(self) -> list[WarningEntry]:
        return list(self._warnings)

    def warn(
        self,
        *,
        filename: str,
        line: int | None,
        element_type: str,
        message: str,
        code: str,
    ) -> None:
        entry = self._record(filename, line, element_type, message, code)
        with self.log_path.open("a", encoding="utf-8") as handle:
            handle.write(f"{entry.format()}\n")

    def summary(self) -> str:
        counts = Counter(entry.code for entry in self._warnings)
        breakdown = ", ".join(f"{code}: {count}" for code, count in sorted(counts.items()))
        detail = f" ({breakdown})" if breakdown else ""
        return f"Found {len(self._warnings)} warnings{detail}. See {self.log_path.name}"

    def has_warnings(self) -> bool:
        return bool(self._warnings)

    def _record(
        self, filename: str, line: int | None, element_type: str, message: str, code: str
    ) -> WarningEntry:
        entry = WarningEntry(
            filename=self._format_filename(filename),
            line=line,
            element_type=element_type,
            message=message,
            code=WARN_CODES.get(code, code),
        )
        self._warnings.append(entry)
        return entry

    def _format_filename(self, filename: str) -> str:
        if not filename:
            return ""
        path = Path(filename)
        if self._source_root:
            candidate = path if path.is_absolute() else (self._source_root / path).resolve()
            try:
                relative = candidate.relative_to(self._source_root)
                return (Path(self._source_root.name) / relative).as_posix()
            except ValueError:
                return candidate.as_posix()
        return path.as_posix()


class NullLogger(WarningLogger):
    """Logger that keeps warnings in memory and never touches the filesystem."""

    def __init__(self, source_root: Path | None = None) -> None:
        self.log_path = Path("/dev/null")
        self._source_root = source_root.resolve() if source_root else None
        self._warnings: list[WarningEntry] = []

    def warn(
        self,
        *,
        filename: str,
        line: int | None,
        element_type: str,
        message: str,
        code: str,
    ) -> None:
        self._record(filename, line, element_type, message, code)


__all__ = ["WarningLogger", "WarningEntry", "NullLogger", "WARN_CODES"]
