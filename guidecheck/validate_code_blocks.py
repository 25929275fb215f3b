from guidecheck.config import Config
from guidecheck.document import Document


def validate_code_blocks(doc: Document, config: Config) -> tuple[list[str], list[str]]:
    """Every fence needs a recognized language tag. Returns (errors, warnings)."""
    errors = []
    warnings = []

    for block in doc.code_blocks:
        where = doc.where(block.line)
        if not block.language:
            errors.append(f"{where} Code block has no language tag")
        elif block.language.lower() not in config.languages:
            errors.append(f"{where} Unrecognized language tag '{block.language}'")

        if block.closed and not block.content.strip():
            warnings.append(f"{where} Empty code block")

    return errors, warnings


def language_counts(docs: list) -> dict:
    counts = {}
    for doc in docs:
        for block in doc.code_blocks:
            lang = block.language.lower() or "(none)"
            counts[lang] = counts.get(lang, 0) + 1
    return counts
