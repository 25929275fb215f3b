import os
import re
from collections import defaultdict
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from urllib.parse import unquote, urlparse

import requests

from guidecheck.config import HTTP_TIMEOUT, USER_AGENT, Config
from guidecheck.document import Document

SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]+:")


def is_external(target: str) -> bool:
    return urlparse(target).scheme in ("http", "https")


def has_scheme(target: str) -> bool:
    return bool(SCHEME_RE.match(target))


def resolve_target(doc: Document, root: Path, path_part: str) -> Path:
    # lexical, so a symlinked document is addressed by its path in the tree
    if path_part.startswith("/"):
        return Path(os.path.normpath(root / path_part.lstrip("/")))
    return Path(os.path.normpath((root / doc.rel_path).parent / path_part))


def validate_links(doc: Document, root: Path, index: dict) -> tuple[list[str], list[str]]:
    """Check every internal link of `doc`. `index` maps rel_path -> Document.

    Returns (errors, warnings).
    """
    errors = []
    warnings = []
    root = root.resolve()

    for link in doc.links:
        target = link.target.strip()
        where = doc.where(link.line)
        if not target:
            warnings.append(f"{where} Empty link target for '{link.text}'")
            continue
        if has_scheme(target) or target.startswith("//"):
            continue

        path_part, _, fragment = target.partition("#")
        path_part = unquote(path_part.split("?", 1)[0])
        fragment = unquote(fragment).lower()

        if not path_part:
            if fragment and fragment not in doc.anchors:
                errors.append(f"{where} Anchor '#{fragment}' not found in this document")
            continue

        resolved = resolve_target(doc, root, path_part)
        if not resolved.is_relative_to(root):
            errors.append(f"{where} Link '{target}' points outside the collection")
            continue
        if not resolved.exists():
            errors.append(f"{where} Broken link '{target}' (no such file)")
            continue

        if fragment and resolved.suffix.lower() == ".md":
            target_doc = index.get(resolved.relative_to(root).as_posix())
            if target_doc is not None and fragment not in target_doc.anchors:
                errors.append(f"{where} Anchor '#{fragment}' not found in {target_doc.rel_path}")

    return errors, warnings


def check_url(url: str, timeout: float = HTTP_TIMEOUT):
    try:
        headers = {"User-Agent": USER_AGENT}
        # Try HEAD first for speed
        response = requests.head(url, headers=headers, timeout=timeout, allow_redirects=True)
        if response.status_code >= 400:
            # Fallback to GET for sites that block HEAD
            response = requests.get(url, headers=headers, timeout=timeout, allow_redirects=True)
        return url, response.status_code
    except requests.RequestException as e:
        return url, str(e)


def collect_external_urls(docs: list) -> dict:
    """Map each unique external URL to the places it is used."""
    urls = defaultdict(list)
    for doc in docs:
        for link in doc.links:
            target = link.target.strip()
            if is_external(target):
                # Clean trailing punctuation
                urls[target.rstrip(".,")].append(doc.where(link.line))
    return urls


def validate_external_links(docs: list, config: Config) -> list[str]:
    """Check all external links in parallel. Returns warnings."""
    urls = collect_external_urls(docs)
    if not urls:
        return []

    print(f"Found {len(urls)} unique external URLs. Validating in parallel...")
    with ThreadPoolExecutor(max_workers=config.max_workers) as executor:
        results = list(executor.map(lambda u: check_url(u, config.http_timeout), sorted(urls)))

    warnings = []
    for url, status in results:
        if isinstance(status, int) and status < 400:
            continue
        for where in urls[url]:
            warnings.append(f"{where} External link returned {status}: {url}")
    return warnings
