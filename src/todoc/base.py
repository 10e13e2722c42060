"""Base parser for todoc languages.

Provides the shared file-reading entry point and the exception hierarchy
used by LuaParser and the no-op parsers for unsupported languages.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from pathlib import Path

from .models import ExtractionResult, LanguageId

log = logging.getLogger(__name__)


class TodocError(Exception):
    """Base exception for todoc operations."""

    def __init__(self, message: str, path: str | Path | None = None):
        super().__init__(message)
        self.path = str(path) if path is not None else None


class SourceReadError(TodocError):
    """Raised when a source file is missing, unreadable, or not UTF-8."""

    pass


class UnsupportedLanguageError(TodocError):
    """Raised when a file extension maps to no known language."""

    pass


class FileParser(ABC):
    """Abstract base class for per-language documentation parsers.

    Subclasses must define:
    - language: The LanguageId handled by the parser
    - parse_lines(): Turn an iterable of source lines into an ExtractionResult

    A parser instance holds per-file state; create a new one per file.
    """

    language: LanguageId = LanguageId.NONE

    @abstractmethod
    def parse_lines(
        self, lines: Iterable[str], source_file: str = ""
    ) -> ExtractionResult:
        """Extract documentation from source lines (without line endings)."""

    def parse_text(self, text: str, source_file: str = "") -> ExtractionResult:
        return self.parse_lines(text.splitlines(), source_file)

    def parse_file(self, path: Path, root: Path | None = None) -> ExtractionResult:
        """Read a UTF-8 source file and extract its documentation.

        Args:
            path: Source file to read
            root: Optional project root; the result's source_file is made
                relative to it when possible

        Raises:
            SourceReadError: If the file cannot be read or decoded.
        """
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise SourceReadError(f"File not found: {path}", path) from e
        except UnicodeDecodeError as e:
            raise SourceReadError(f"Not valid UTF-8: {path}: {e.reason}", path) from e
        except OSError as e:
            raise SourceReadError(f"Cannot read {path}: {e.strerror}", path) from e

        return self.parse_text(text, _relative_path(path, root))


class NullParser(FileParser):
    """Parser for languages without doc-comment support. Always empty."""

    def __init__(self, language: LanguageId = LanguageId.NONE) -> None:
        self.language = language

    def parse_lines(
        self, lines: Iterable[str], source_file: str = ""
    ) -> ExtractionResult:
        log.debug("no doc-comment parser for %s: %s", self.language.name, source_file)
        return ExtractionResult(source_file=source_file, language=self.language)


def _relative_path(path: Path, root: Path | None) -> str:
    """Convert absolute path to relative from project root."""
    if root is None:
        return str(path)
    try:
        return str(path.resolve().relative_to(root.resolve()))
    except ValueError:
        return str(path)
