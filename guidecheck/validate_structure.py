from guidecheck.config import Config
from guidecheck.document import Document
from guidecheck.validate_links import is_external


def validate_structure(doc: Document, config: Config) -> tuple[list[str], list[str]]:
    """Check that a guide has the sections its kind calls for.

    Interview guides walk through a scenario, a challenge and a Quick Check;
    roadmaps are laid out in numbered phases with outside resources.
    Everything here is a warning. Returns (errors, warnings).
    """
    errors = []
    warnings = []
    where = doc.where(1)
    heading_text = [h.text.lower() for h in doc.headings]

    for section in config.required_sections.get(doc.kind, []):
        if not any(section.lower() in text for text in heading_text):
            warnings.append(f"{where} Missing '{section}' section")

    if doc.kind == "interview-guide":
        if not any(qc.questions for qc in doc.quick_checks):
            warnings.append(f"{where} Interview guide has no Quick Check questions")

    elif doc.kind == "roadmap":
        phase_re = config.phase_re
        if not any(phase_re.search(h.text) for h in doc.headings):
            warnings.append(f"{where} Roadmap has no phase headings (e.g. 'Month 1')")
        if not any(is_external(link.target) for link in doc.links):
            warnings.append(f"{where} Roadmap links to no external resources")

    return errors, warnings
