from pathlib import Path
from typing import Optional
from urllib.parse import unquote

from guidecheck.config import Config
from guidecheck.validate_links import has_scheme, resolve_target


def linked_documents(docs: list, root: Path) -> set:
    """rel_paths of every document some *other* document links to."""
    root = root.resolve()
    linked = set()
    for doc in docs:
        for link in doc.links:
            target = link.target.strip()
            if not target or has_scheme(target) or target.startswith(("#", "//")):
                continue
            path_part = unquote(target.split("#", 1)[0].split("?", 1)[0])
            resolved = resolve_target(doc, root, path_part)
            if resolved.is_dir():
                resolved = resolved / "README.md"
            if not resolved.is_relative_to(root):
                continue
            rel = resolved.relative_to(root).as_posix()
            if rel != doc.rel_path:
                linked.add(rel)
    return linked


def check_orphans(docs: list, root: Path, config: Config, only: Optional[list] = None) -> list[str]:
    """Documents nothing links to (entry points excepted). Returns warnings.

    Links are collected from all of `docs`; only documents in `only` (default:
    all of them) are reported.
    """
    linked = linked_documents(docs, root)
    entry_points = set(config.entry_points)

    orphans = [
        doc for doc in (docs if only is None else only)
        if doc.rel_path not in linked and doc.rel_path not in entry_points
    ]
    return [f"{doc.where(1)} Orphaned document (no other document links to it)" for doc in sorted(orphans, key=lambda d: d.rel_path)]
