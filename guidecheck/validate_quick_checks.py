"""
Quick Check quizzes: one correct option, one "See Answer" block.

Expected shape:

    ### Quick Check

    **Q1:** Which probe restarts a container?
    - A) readinessProbe
    - B) livenessProbe ✅
    - C) startupProbe

    <details>
    <summary>See Answer</summary>
    ...
    </details>
"""

from guidecheck.config import Config
from guidecheck.document import Document


def validate_quick_checks(doc: Document, config: Config) -> tuple[list[str], list[str]]:
    """Returns (errors, warnings)."""
    errors = []
    warnings = []

    for qc in doc.quick_checks:
        if not qc.questions:
            warnings.append(f"{doc.where(qc.line)} Quick Check '{qc.heading.text}' has no questions")
            continue

        for q in qc.questions:
            where = doc.where(q.line)
            prompt = q.prompt[:50]
            if not q.options:
                errors.append(f"{where} Question '{prompt}' has no answer options")
            else:
                if len(q.correct) == 0:
                    errors.append(f"{where} Question '{prompt}' has no option marked correct")
                elif len(q.correct) > 1:
                    errors.append(
                        f"{where} Question '{prompt}' has {len(q.correct)} options marked correct (want exactly 1)"
                    )
                if len(q.options) < config.min_options:
                    warnings.append(
                        f"{where} Question '{prompt}' has {len(q.options)} options (want >={config.min_options})"
                    )

            if not q.has_answer_block:
                errors.append(f"{where} Question '{prompt}' has no 'See Answer' block")

    return errors, warnings


def question_count(docs: list) -> int:
    return sum(len(qc.questions) for doc in docs for qc in doc.quick_checks)
