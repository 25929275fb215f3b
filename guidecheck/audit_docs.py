#!/usr/bin/env python3
"""
Audit a collection of interview guides and roadmaps.

Checks:
- markdown:     fences closed, <details>/<JuniorVsSenior> balanced, heading outline
- links:        internal relative links and #anchors resolve (--external for http links)
- code-blocks:  every fenced block has a recognized language tag
- quick-checks: every question has exactly one correct option and a "See Answer" block
- structure:    interview guides / roadmaps have the sections their kind expects
- orphans:      every document is linked from somewhere

Usage:
    guidecheck
    guidecheck path/to/guides --strict          # treat warnings as errors
    guidecheck --only links quick-checks
    guidecheck --file interview-questions/kubernetes.md
    guidecheck --external --report audit_report.json
"""

import argparse
import fnmatch
import json
import re
import sys
from collections import defaultdict
from pathlib import Path
from typing import Optional

from guidecheck.check_orphans import check_orphans
from guidecheck.config import Config, ConfigError, load_config
from guidecheck.document import Document, parse_document
from guidecheck.validate_code_blocks import language_counts, validate_code_blocks
from guidecheck.validate_links import has_scheme, is_external, validate_external_links, validate_links
from guidecheck.validate_markdown import validate_markdown
from guidecheck.validate_quick_checks import question_count, validate_quick_checks
from guidecheck.validate_structure import validate_structure

CHECKS = ["markdown", "links", "code-blocks", "quick-checks", "structure", "orphans"]

MAX_LISTED = 30

LOCATION_RE = re.compile(r"^\[(.+?):\d+\]")


def discover_files(root: Path, config: Config) -> list[Path]:
    """All Markdown files under root, minus ignored globs."""
    files = []
    for path in sorted(root.rglob("*.md")):
        rel = path.relative_to(root).as_posix()
        if any(fnmatch.fnmatch(rel, pattern) for pattern in config.ignore):
            continue
        if path.is_file():
            files.append(path)
    return files


def load_documents(paths: list, root: Path, config: Config) -> tuple[list[Document], dict]:
    """Parse files. Returns (documents, {rel_path: [errors]}) for unreadable ones."""
    docs = []
    failures = {}
    for path in paths:
        rel = path.relative_to(root).as_posix()
        try:
            docs.append(parse_document(path, root, config))
        except UnicodeDecodeError as e:
            failures[rel] = [f"[{rel}:1] File is not valid UTF-8: {e.reason} at byte {e.start}"]
        except OSError as e:
            failures[rel] = [f"[{rel}:1] Cannot read file: {e}"]
    return docs, failures


def check_document(doc: Document, root: Path, index: dict, config: Config, checks: list) -> tuple[list[str], list[str]]:
    errors = []
    warnings = []

    def run(result):
        errors.extend(result[0])
        warnings.extend(result[1])

    if "markdown" in checks:
        run(validate_markdown(doc))
    if "links" in checks:
        run(validate_links(doc, root, index))
    if "code-blocks" in checks:
        run(validate_code_blocks(doc, config))
    if "quick-checks" in checks:
        run(validate_quick_checks(doc, config))
    if "structure" in checks:
        run(validate_structure(doc, config))
    return errors, warnings


def audit(
    root: Path,
    config: Config,
    checks: Optional[list] = None,
    files: Optional[list] = None,
    kind: Optional[str] = None,
    external: bool = False,
) -> dict:
    """Run the audit and return a JSON-serializable result."""
    checks = checks or CHECKS
    root = root.resolve()

    docs, failures = load_documents(discover_files(root, config), root, config)
    index = {doc.rel_path: doc for doc in docs}

    selected = docs
    if files:
        wanted = {Path(f).as_posix().removeprefix("./") for f in files}
        missing = wanted - set(index) - set(failures)
        if missing:
            raise ConfigError(f"Not a Markdown file in the collection: {', '.join(sorted(missing))}")
        selected = [doc for doc in docs if doc.rel_path in wanted]
        failures = {rel: errs for rel, errs in failures.items() if rel in wanted}
    if kind:
        if kind != "other" and kind not in config.kinds:
            known = ", ".join(sorted([*config.kinds, "other"]))
            raise ConfigError(f"Unknown kind '{kind}' (expected one of: {known})")
        selected = [doc for doc in selected if doc.kind == kind]

    results = {}
    for rel, errs in failures.items():
        results[rel] = {"kind": "unknown", "errors": list(errs), "warnings": []}

    for doc in selected:
        errors, warnings = check_document(doc, root, index, config, checks)
        results[doc.rel_path] = {"kind": doc.kind, "errors": errors, "warnings": warnings}

    global_warnings = []
    if "orphans" in checks and not files:
        global_warnings.extend(check_orphans(docs, root, config, only=selected))
    if "links" in checks and external:
        global_warnings.extend(validate_external_links(selected, config))

    for warning in global_warnings:
        m = LOCATION_RE.match(warning)
        if m and m.group(1) in results:
            results[m.group(1)]["warnings"].append(warning)

    by_kind = defaultdict(int)
    for doc in selected:
        by_kind[doc.kind] += 1

    return {
        "root": str(root),
        "checks": checks,
        "files": dict(sorted(results.items())),
        "stats": {
            "documents": len(selected) + len(failures),
            "by_kind": dict(sorted(by_kind.items())),
            "code_blocks_by_language": dict(sorted(language_counts(selected).items())),
            "quick_check_questions": question_count(selected),
            "internal_links": sum(1 for d in selected for link in d.links if not has_scheme(link.target.strip())),
            "external_links": sum(1 for d in selected for link in d.links if is_external(link.target)),
        },
    }


def all_issues(result: dict) -> tuple[list[str], list[str]]:
    errors = [e for f in result["files"].values() for e in f["errors"]]
    warnings = [w for f in result["files"].values() for w in f["warnings"]]
    return errors, warnings


def print_report(result: dict, strict: bool = False) -> None:
    for rel, entry in result["files"].items():
        n_err = len(entry["errors"])
        n_warn = len(entry["warnings"])
        issue_count = n_err + (n_warn if strict else 0)
        if issue_count > 0:
            status = "✗" if n_err else "⚠"
            print(f"{status} {rel}: {n_err} errors, {n_warn} warnings")
        else:
            print(f"✓ {rel}")

    print()
    print("=" * 50)

    errors, warnings = all_issues(result)
    if warnings:
        print(f"\n⚠ {len(warnings)} WARNINGS:")
        for w in warnings[:MAX_LISTED]:
            print(f"  {w}")
        if len(warnings) > MAX_LISTED:
            print(f"  ... and {len(warnings) - MAX_LISTED} more")

    if errors:
        print(f"\n✗ {len(errors)} ERRORS:")
        for e in errors[:MAX_LISTED]:
            print(f"  {e}")
        if len(errors) > MAX_LISTED:
            print(f"  ... and {len(errors) - MAX_LISTED} more")

    stats = result["stats"]
    print(f"\n--- STATS ---")
    print(f"Documents audited: {stats['documents']}")
    print(f"\nBy Kind:")
    for k, c in stats["by_kind"].items():
        print(f"  {k}: {c}")
    print(f"\nCode Blocks By Language:")
    for lang, c in stats["code_blocks_by_language"].items():
        print(f"  {lang}: {c}")
    print(f"\nQuick Check questions: {stats['quick_check_questions']}")
    print(f"Links: {stats['internal_links']} internal, {stats['external_links']} external")


def exit_code(result: dict, strict: bool = False) -> int:
    errors, warnings = all_issues(result)
    total_issues = len(errors) + (len(warnings) if strict else 0)
    return 0 if total_issues == 0 else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="guidecheck", description="Audit interview guides and roadmaps")
    parser.add_argument("root", nargs="?", default=".", help="Collection root (default: current directory)")
    parser.add_argument("--strict", action="store_true", help="Treat warnings as errors")
    parser.add_argument("--external", action="store_true", help="Also check http(s) links over the network")
    parser.add_argument("--only", nargs="+", choices=CHECKS, metavar="CHECK", help=f"Run only these checks ({', '.join(CHECKS)})")
    parser.add_argument("--file", nargs="+", dest="files", metavar="PATH", help="Audit specific files (relative to root)")
    parser.add_argument("--kind", help="Filter by document kind (interview-guide, roadmap, other)")
    parser.add_argument("--report", type=Path, help="Write the full result as JSON")
    parser.add_argument("--config", type=Path, help="Config file (default: ROOT/guidecheck.yaml)")
    return parser


def main(argv: Optional[list] = None) -> int:
    args = build_parser().parse_args(argv)
    root = Path(args.root)

    try:
        if not root.is_dir():
            raise ConfigError(f"Not a directory: {root}")
        config = load_config(root, args.config)
        print(f"Auditing Markdown in {root.resolve()}...")
        print()
        result = audit(root, config, checks=args.only, files=args.files, kind=args.kind, external=args.external)
    except ConfigError as e:
        print(f"✗ {e}", file=sys.stderr)
        return 2

    print_report(result, strict=args.strict)

    if args.report:
        args.report.parent.mkdir(parents=True, exist_ok=True)
        args.report.write_text(json.dumps(result, indent=2, ensure_ascii=False), encoding="utf-8")
        print(f"\nReport written to {args.report}")

    code = exit_code(result, strict=args.strict)
    errors, warnings = all_issues(result)
    if code == 0:
        print(f"\n✓ ALL CHECKS PASSED ({len(warnings)} warnings)")
    else:
        print(f"\n✗ AUDIT FAILED: {len(errors)} errors, {len(warnings)} warnings")
    return code


if __name__ == "__main__":
    sys.exit(main())
