"""
Structural well-formedness of a guide's Markdown.

CommonMark itself accepts almost anything, so "valid" here means the
things a renderer silently gets wrong: fences that swallow the rest of the
file, unbalanced <details>/<JuniorVsSenior> blocks and broken heading
outlines.
"""

from guidecheck.document import Document


def check_fences(doc: Document) -> list[str]:
    errors = []
    for block in doc.code_blocks:
        if not block.closed:
            errors.append(f"{doc.where(block.line)} Code fence opened here is never closed")
    return errors


def check_tags(doc: Document) -> list[str]:
    """Match opening and closing block tags per tag name."""
    errors = []
    stack = []
    for tag in doc.tags:
        if not tag.closing:
            stack.append(tag)
            continue
        # Find the nearest open tag of the same name
        for pos in range(len(stack) - 1, -1, -1):
            if stack[pos].name == tag.name:
                for unclosed in stack[pos + 1 :]:
                    errors.append(
                        f"{doc.where(unclosed.line)} <{unclosed.name}> is not closed before </{tag.name}> on line {tag.line}"
                    )
                del stack[pos:]
                break
        else:
            errors.append(f"{doc.where(tag.line)} </{tag.name}> has no matching <{tag.name}>")

    for unclosed in stack:
        errors.append(f"{doc.where(unclosed.line)} <{unclosed.name}> is never closed")
    return errors


def check_headings(doc: Document) -> list[str]:
    warnings = []
    if not doc.headings:
        warnings.append(f"{doc.where(1)} Document has no headings")
        return warnings

    h1 = [h for h in doc.headings if h.level == 1]
    if len(h1) > 1:
        lines = ", ".join(str(h.line) for h in h1)
        warnings.append(f"{doc.where(h1[1].line)} Multiple level-1 headings (lines {lines})")

    prev = None
    for h in doc.headings:
        if not h.text:
            warnings.append(f"{doc.where(h.line)} Empty heading")
        if prev is not None and h.level > prev.level + 1:
            warnings.append(
                f"{doc.where(h.line)} Heading level jumps from {prev.level} to {h.level}: '{h.text}'"
            )
        prev = h
    return warnings


def validate_markdown(doc: Document) -> tuple[list[str], list[str]]:
    """Returns (errors, warnings)."""
    errors = check_fences(doc) + check_tags(doc)
    warnings = check_headings(doc)
    return errors, warnings
