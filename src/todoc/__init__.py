"""todoc - Markdown reference pages from Lua doc-comments."""

__version__ = "0.1.0"

from todoc.extractors import LuaParser, build_document, classify_signature, extract_docs
from todoc.generators import render_document, render_documents
from todoc.models import Document, ExtractionResult, LanguageId
from todoc.scanner import strip_comment

__all__ = [
    "Document",
    "ExtractionResult",
    "LanguageId",
    "LuaParser",
    "build_document",
    "classify_signature",
    "extract_docs",
    "render_document",
    "render_documents",
    "strip_comment",
    "__version__",
]
