"""Data models for documentation extraction."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum


class LanguageId(Enum):
    """Source languages known to todoc, keyed by file extension."""

    NONE = "none"
    LUA = "lua"
    C = "c"
    CPP = "cpp"
    RUST = "rs"
    PYTHON = "py"

    @classmethod
    def from_extension(cls, ext: str | None) -> LanguageId:
        """Map a file extension ("lua", ".cc", "RS") to a language.

        Unknown or empty extensions map to NONE.
        """
        if not ext:
            return cls.NONE
        return _EXTENSIONS.get(ext.lower().lstrip("."), cls.NONE)

    @property
    def extension(self) -> str:
        """Canonical extension token ("" for NONE)."""
        if self is LanguageId.NONE:
            return ""
        return self.value


_EXTENSIONS: dict[str, LanguageId] = {
    "lua": LanguageId.LUA,
    "c": LanguageId.C,
    "cpp": LanguageId.CPP,
    "cc": LanguageId.CPP,
    "rs": LanguageId.RUST,
    "py": LanguageId.PYTHON,
}


class FormulaKind(Enum):
    INLINE = "inline"
    BLOCK = "block"


class DescriptionKind(Enum):
    TEXT = "text"
    CODE = "code"
    FORMULA = "formula"
    BULLET = "bullet"
    HTML_LINK = "html"


@dataclass
class Parameter:
    """A documented parameter or return value."""

    name: str  # "" for return values
    type_name: str
    description: str = ""
    number: int = 0  # Zero-based declaration order


@dataclass
class DescriptionItem:
    """One entry of a @description block."""

    kind: DescriptionKind
    body: str
    language: LanguageId = LanguageId.NONE  # CODE only
    formula: FormulaKind = FormulaKind.INLINE  # FORMULA only
    indent: int = 0  # BULLET only

    @property
    def content(self) -> str:
        return self.body

    @classmethod
    def text(cls, body: str) -> DescriptionItem:
        return cls(DescriptionKind.TEXT, body)

    @classmethod
    def code(cls, body: str, language: LanguageId = LanguageId.NONE) -> DescriptionItem:
        return cls(DescriptionKind.CODE, body, language=language)

    @classmethod
    def math(
        cls, body: str, formula: FormulaKind = FormulaKind.INLINE
    ) -> DescriptionItem:
        return cls(DescriptionKind.FORMULA, body, formula=formula)

    @classmethod
    def bullet(cls, body: str, indent: int = 0) -> DescriptionItem:
        return cls(DescriptionKind.BULLET, body, indent=indent)

    @classmethod
    def link(cls, url: str) -> DescriptionItem:
        return cls(DescriptionKind.HTML_LINK, url)


_NAME_RE = re.compile(r"^(?:local\s+)?function\s+([^\s(]+)")


def declared_name(signature: str) -> str:
    """Function name from a declaration, e.g. "Obj:method" ("" if unrecognised)."""
    match = _NAME_RE.match(signature.strip())
    return match.group(1) if match else ""


@dataclass
class Document:
    """Extracted documentation for one function declaration."""

    signature: str = ""  # Joined declaration text, verbatim
    brief: str = ""
    note: str = ""
    includes: list[str] = field(default_factory=list)
    parameters: list[Parameter] = field(default_factory=list)
    return_value: Parameter | None = None
    descriptions: list[DescriptionItem] = field(default_factory=list)
    owner_object: str = ""
    is_local: bool = False
    is_member: bool = False
    line_number: int = 0  # First line of the declaration, 1-based

    @property
    def name(self) -> str:
        return declared_name(self.signature)

    @property
    def is_documented(self) -> bool:
        return bool(
            self.brief
            or self.note
            or self.includes
            or self.parameters
            or self.return_value
            or self.descriptions
        )


@dataclass
class ValidationResult:
    """Results from documentation validation."""

    errors: list[str] = field(default_factory=list)  # Build fails if non-empty
    warnings: list[str] = field(default_factory=list)  # Printed but allowed


@dataclass
class ExtractionResult:
    """Results from extracting documentation from one source file."""

    source_file: str
    language: LanguageId
    documents: list[Document] = field(default_factory=list)
    all_declarations: list[str] = field(default_factory=list)
