"""Documentation extractors for Lua doc-comments.

Doc-comments are runs of `--` lines carrying @tags, placed directly above a
function declaration:

    -- @brief Add two numbers
    -- @param x number first operand
    -- @param y number second operand
    -- @return number the sum
    -- @description
    --     \\text Works on integers and floats.
    --     \\code{lua} print(add(1, 2))
    function M.add(x, y)

Parsing is two-level: top-level @tags fill Document fields, and inside an
@description tag the \\subtags each produce one DescriptionItem.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from pathlib import Path

from .base import FileParser, NullParser, UnsupportedLanguageError
from .models import (
    DescriptionItem,
    Document,
    ExtractionResult,
    FormulaKind,
    LanguageId,
    Parameter,
    declared_name,
)
from .scanner import NORMAL, ScanState, long_bracket_end, scan_line

log = logging.getLogger(__name__)

DOC_MARKERS = ("---@", "--@", "-- @")

_DECLARATION = re.compile(r"^(?:local\s+)?function\b")
_LOCAL_DECLARATION = re.compile(r"^local\s+function\b")
_GLOBAL_DECLARATION = re.compile(r"^function\b")
_ENDS_WITH_END = re.compile(r"\bend$")
_QUALIFIED_SUBTAG = re.compile(r"^(\w+)\{([^}]*)\}$")


def is_doc_comment(line: str, markers: Iterable[str] = DOC_MARKERS) -> bool:
    """Check if a raw line starts a documentation comment."""
    return line.lstrip().startswith(tuple(markers))


def is_comment(line: str) -> bool:
    return line.lstrip().startswith("--")


def is_declaration(code: str) -> bool:
    """Check if comment-free code starts a `function` or `local function`."""
    return bool(_DECLARATION.match(code))


def is_declaration_complete(code: str) -> bool:
    """Check if a (joined) declaration has reached its terminal line.

    A declaration is complete once it ends with `)` or `end`, or once the
    parameter list opened by its first `(` has been closed.
    """
    code = code.rstrip()
    if code.endswith(")") or _ENDS_WITH_END.search(code):
        return True
    paren = code.find("(")
    return paren >= 0 and ")" in code[paren:]


def _line_content(line: str) -> str:
    """Text of a doc line from its first @tag or \\subtag, or without markers."""
    at = line.find("@")
    if at >= 0:
        return line[at:]
    backslash = line.find("\\")
    if backslash >= 0:
        return line[backslash:]
    return line.lstrip().lstrip("-").strip()


def _split_directive(content: str) -> tuple[str, str]:
    """Split "@tag body" or "\\subtag body" into (tag, body)."""
    parts = content[1:].split(None, 1)
    if not parts:
        return "", ""
    body = parts[1].strip() if len(parts) > 1 else ""
    return parts[0], body


def _description_item(subtag: str, body: str) -> DescriptionItem | None:
    """Map a \\subtag (optionally brace-qualified) to a DescriptionItem."""
    qualifier = ""
    m = _QUALIFIED_SUBTAG.match(subtag)
    if m:
        subtag, qualifier = m.group(1), m.group(2).strip()

    if subtag == "text":
        return DescriptionItem.text(body)
    if subtag == "code":
        return DescriptionItem.code(body, LanguageId.from_extension(qualifier))
    if subtag == "formula":
        kind = FormulaKind.BLOCK if qualifier.lower() == "block" else FormulaKind.INLINE
        return DescriptionItem.math(body, kind)
    if subtag == "list":
        return DescriptionItem.bullet(body)
    if subtag == "html":
        return DescriptionItem.link(body)
    return None


def build_document(lines: Iterable[str]) -> Document:
    """Parse buffered doc-comment lines into a Document.

    Lines still carry their comment markers. The returned Document has every
    field set except signature, owner_object, is_local and is_member, which
    come from the declaration.
    """
    doc = Document()
    current_tag = ""
    current_subtag = ""

    for line in lines:
        content = _line_content(line)

        if content.startswith("@"):
            tag, body = _split_directive(content)
            current_tag = tag
            current_subtag = ""

            if tag == "brief":
                doc.brief = body
            elif tag == "param":
                tokens = body.split()
                if len(tokens) >= 2:
                    doc.parameters.append(
                        Parameter(
                            name=tokens[0],
                            type_name=tokens[1],
                            description=" ".join(tokens[2:]),
                            number=len(doc.parameters),
                        )
                    )
                else:
                    log.debug("ignoring @param without name and type: %r", line)
            elif tag == "return":
                tokens = body.split()
                if tokens:
                    doc.return_value = Parameter(
                        name="",
                        type_name=tokens[0],
                        description=" ".join(tokens[1:]),
                    )
            elif tag == "includes":
                doc.includes.extend(piece.strip() for piece in body.split(","))
            elif tag == "note":
                doc.note = body
            elif tag == "description":
                pass
            else:
                log.debug("unknown tag @%s", tag)

        elif content.startswith("\\"):
            if current_tag != "description":
                continue
            subtag, body = _split_directive(content)
            item = _description_item(subtag, body)
            if item is None:
                log.debug("unknown description subtag \\%s", subtag)
                continue
            current_subtag = subtag.split("{", 1)[0]
            doc.descriptions.append(item)

        elif (
            current_tag == "description"
            and current_subtag == "list"
            and content.startswith("-")
        ):
            doc.descriptions.append(DescriptionItem.bullet(content, indent=1))

    return doc


def parameter_names(text: str) -> list[str]:
    """Parameter names from the first parenthesised list in `text`."""
    start = text.find("(")
    if start < 0:
        return []
    end = text.find(")", start)
    inner = text[start + 1 :] if end < 0 else text[start + 1 : end]
    return [p.strip() for p in inner.split(",") if p.strip()]


def classify_signature(signature: str) -> tuple[str, bool, bool]:
    """Derive (owner_object, is_local, is_member) from a declaration.

    `function Obj:m()` is always a member of Obj. `function Obj.f(...)` is a
    member only when its first parameter is Obj itself. Local functions
    never have an owner.
    """
    sig = signature.strip()
    if _LOCAL_DECLARATION.match(sig):
        return "", True, False

    m = _GLOBAL_DECLARATION.match(sig)
    if not m:
        return "", False, False

    rest = sig[m.end() :].strip()
    paren = rest.find("(")
    name = rest if paren < 0 else rest[:paren]
    separator = re.search(r"[.:]", name)
    if not separator:
        return "", False, False

    owner = name[: separator.start()].strip()
    if ":" in name:
        return owner, False, True

    params = parameter_names(rest)
    return owner, False, bool(params) and params[0] == owner


class LuaParser(FileParser):
    """Line-by-line doc-comment automaton for Lua sources.

    Each line either extends the current documentation run, contributes to a
    (possibly multi-line) function declaration, or resets the buffers. A
    documentation run is attached to the declaration that immediately
    follows it; a blank line or any other code in between discards it.
    """

    language = LanguageId.LUA

    def __init__(self, doc_markers: Iterable[str] = DOC_MARKERS) -> None:
        self.doc_markers = tuple(doc_markers)
        self._start()

    def _start(self) -> None:
        self._state: ScanState = NORMAL
        self._buffer: list[str] = []
        self._signature: list[str] = []
        self._multiline = False
        self._severed = False  # A documentation run was cut off by a blank line
        self._declaration_line = 0
        self._documents: list[Document] = []
        self._declarations: list[str] = []

    def parse_lines(
        self, lines: Iterable[str], source_file: str = ""
    ) -> ExtractionResult:
        self._start()
        for lineno, line in enumerate(lines, start=1):
            self._feed(line.rstrip("\r\n"), lineno)

        if self._multiline:
            log.debug(
                "%s:%s: unterminated declaration dropped: %s",
                source_file,
                self._declaration_line,
                " ".join(self._signature),
            )

        return ExtractionResult(
            source_file=source_file,
            language=self.language,
            documents=self._documents,
            all_declarations=self._declarations,
        )

    def _feed(self, line: str, lineno: int) -> None:
        before = self._state
        code, self._state = scan_line(line, before)

        if before.in_long_comment or before.in_long_string:
            # Continuation of a --[[ ... ]] comment or [[ ... ]] string
            if before.in_long_comment and self._buffer:
                self._buffer.append(line)
            end = long_bracket_end(line, before)
            if end is None:
                return
            # Only the text after the closer is code
            code, _ = scan_line(line[end:])
            if code:
                self._handle_code(code, lineno)
            return

        if not line.strip():
            self._reset()
            return
        if is_comment(line):
            if self._multiline:
                log.debug(
                    "line %s: comment inside declaration ignored: %s",
                    lineno,
                    line.strip(),
                )
                return
            if is_doc_comment(line, self.doc_markers) or self._buffer:
                self._buffer.append(line)
                return

        self._handle_code(code, lineno)

    def _handle_code(self, code: str, lineno: int) -> None:
        if is_declaration(code):
            if self._multiline:
                log.debug(
                    "line %s: declaration interrupted: %s",
                    lineno,
                    " ".join(self._signature),
                )
            self._signature = [code]
            self._declaration_line = lineno
            if is_declaration_complete(code):
                self._finalize()
            else:
                self._multiline = True
        elif self._multiline:
            if code:
                self._signature.append(code)
            if is_declaration_complete(" ".join(self._signature)):
                self._finalize()
        elif code:
            # Documentation not immediately followed by a declaration
            self._buffer = []
            self._severed = False

    def _reset(self) -> None:
        if self._buffer:
            self._severed = True
        if self._multiline:
            log.debug("declaration cut by blank line: %s", " ".join(self._signature))
        self._buffer = []
        self._signature = []
        self._multiline = False

    def _finalize(self) -> None:
        signature = " ".join(self._signature)

        if self._buffer or self._severed:
            doc = build_document(self._buffer)
            doc.signature = signature
            doc.owner_object, doc.is_local, doc.is_member = classify_signature(
                signature
            )
            doc.line_number = self._declaration_line
            self._documents.append(doc)
        self._declarations.append(declared_name(signature) or signature)

        self._buffer = []
        self._signature = []
        self._multiline = False
        self._severed = False


_PARSERS: dict[LanguageId, type[FileParser]] = {
    LanguageId.LUA: LuaParser,
}


def create_parser(language: LanguageId) -> FileParser:
    """Return a fresh parser for `language` (a no-op parser if unsupported)."""
    parser_cls = _PARSERS.get(language)
    if parser_cls is None:
        log.info("not supported code file: %s", language.extension or language.name)
        return NullParser(language)
    return parser_cls()


def extract_docs(path: Path, root: Path | None = None) -> ExtractionResult:
    """Extract documentation from a source file, choosing the parser by extension.

    Raises:
        UnsupportedLanguageError: If the extension maps to no known language.
        SourceReadError: If the file cannot be read.
    """
    language = LanguageId.from_extension(path.suffix)
    if language is LanguageId.NONE:
        raise UnsupportedLanguageError(f"Unsupported file type: {path.name}", path)
    return create_parser(language).parse_file(path, root)
