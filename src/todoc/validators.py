"""Documentation validation and quality checks."""

from __future__ import annotations

from collections import Counter

from .extractors import parameter_names
from .models import ExtractionResult, ValidationResult


def validate_docs(
    results: list[ExtractionResult],
    strict: bool = False,
) -> ValidationResult:
    """Validate extracted documentation.

    Checks:
    1. Declared functions should be documented (warning, error in strict)
    2. Documented functions should have @brief (warning, error in strict)
    3. @param names should match the declared parameter list (warning)

    Args:
        results: Extraction results, one per source file
        strict: If True, missing docs are errors instead of warnings

    Returns:
        ValidationResult with errors and warnings
    """
    result = ValidationResult()
    missing = result.errors if strict else result.warnings

    for r in results:
        documented = Counter(doc.name or doc.signature for doc in r.documents)
        for name in r.all_declarations:
            if documented[name]:
                documented[name] -= 1
            else:
                missing.append(f"{r.source_file}: {name}: undocumented")

        for doc in r.documents:
            where = f"{r.source_file}:{doc.line_number}: {doc.name or doc.signature}"
            if not doc.brief:
                missing.append(f"{where}: missing @brief")

            declared = parameter_names(doc.signature)
            for p in doc.parameters:
                if p.name not in declared:
                    result.warnings.append(
                        f"{where}: @param {p.name} is not in the signature"
                    )
            documented_params = {p.name for p in doc.parameters}
            if doc.parameters:
                for name in declared:
                    if name != "..." and name not in documented_params:
                        result.warnings.append(f"{where}: parameter {name} undocumented")

    return result


def compute_coverage(results: list[ExtractionResult]) -> dict[str, float]:
    """Compute documentation coverage by language.

    A function counts as documented when it carries a @brief.

    Returns:
        Dict of language extension -> coverage (0.0 - 1.0)
    """
    totals: Counter[str] = Counter()
    documented: Counter[str] = Counter()
    for r in results:
        lang = r.language.extension or r.language.name.lower()
        totals[lang] += len(r.all_declarations)
        documented[lang] += sum(1 for doc in r.documents if doc.brief)

    return {
        lang: documented[lang] / totals[lang] if totals[lang] > 0 else 1.0
        for lang in sorted(set(totals) | set(documented))
    }
