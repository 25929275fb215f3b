"""
Lightweight document model for guide Markdown files.

This is not a renderer. The scanner walks the file line by line and keeps
only what the checks need: headings (with their anchors), fenced code
blocks, links, block-level HTML/component tags and Quick Check quizzes.
Anything inside a fenced code block is opaque.
"""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from guidecheck.config import Config

FENCE_RE = re.compile(r"^(\s*)(`{3,}|~{3,})(.*)$")
HEADING_RE = re.compile(r"^ {0,3}(#{1,6})(?:[ \t]+(.*?))?[ \t]*$")
SETEXT_RE = re.compile(r"^ {0,3}(=+|-+)[ \t]*$")
PARAGRAPH_BREAK_RE = re.compile(r"^\s*(?:[-*+]\s|\d+[.)]\s|>|<|\||(?:[*_]\s*){3,}$)")
LIST_ITEM_RE = re.compile(r"^\s*(?:[-*+]|\d+[.)]|[A-Ha-h][.)])\s+(.*)$")
INLINE_CODE_RE = re.compile(r"(`+)(.+?)\1")
TAG_RE = re.compile(r"<(/?)([A-Za-z][\w-]*)\b[^<>]*?(/?)>")
OPEN_TAG_START_RE = re.compile(r"<([A-Za-z][\w-]*)\b[^<>]*$")
REF_DEF_RE = re.compile(r"^ {0,3}\[([^\]^][^\]]*)\]:\s*<?([^\s>]+)>?")
HTML_ATTR_RE = re.compile(r"\b(?:href|src)\s*=\s*[\"']([^\"']*)[\"']", re.IGNORECASE)
AUTOLINK_RE = re.compile(r"<((?:https?|mailto):[^>\s]+)>")
INLINE_LINK_RE = re.compile(
    r"(!?)\[((?:[^\[\]]|\[[^\]]*\])*)\]"
    r"\(\s*<?((?:[^()\s<>]|\([^()\s]*\))*)>?(?:\s+(?:\"[^\"]*\"|'[^']*'|\([^)]*\)))?\s*\)"
)
QUICK_CHECK_RE = re.compile(r"quick\s*check", re.IGNORECASE)


@dataclass
class Heading:
    level: int
    text: str
    line: int
    anchor: str = ""


@dataclass
class CodeBlock:
    language: str
    info: str
    line: int
    end_line: int
    closed: bool = True
    content: str = ""


@dataclass
class Link:
    target: str
    text: str
    line: int
    is_image: bool = False


@dataclass
class Tag:
    name: str
    line: int
    closing: bool = False


@dataclass
class QuickCheckQuestion:
    prompt: str
    line: int
    options: list = field(default_factory=list)
    correct: list = field(default_factory=list)
    has_answer_block: bool = False


@dataclass
class QuickCheck:
    heading: Heading
    questions: list = field(default_factory=list)

    @property
    def line(self) -> int:
        return self.heading.line


@dataclass
class Document:
    path: Path
    rel_path: str
    kind: str
    text: str
    lines: list
    headings: list = field(default_factory=list)
    code_blocks: list = field(default_factory=list)
    links: list = field(default_factory=list)
    tags: list = field(default_factory=list)
    quick_checks: list = field(default_factory=list)

    @property
    def anchors(self) -> set:
        return {h.anchor for h in self.headings}

    def where(self, line: int) -> str:
        return f"[{self.rel_path}:{line}]"


def slugify(text: str) -> str:
    """GitHub-style heading anchor."""
    text = re.sub(r"`([^`]*)`", r"\1", text)
    text = re.sub(r"!?\[([^\]]*)\]\([^)]*\)", r"\1", text)
    text = re.sub(r"<[^>]+>", "", text)
    slug = text.strip().lower()
    slug = re.sub(r"[^\w\- ]", "", slug)
    return slug.replace(" ", "-")


def document_kind(rel_path: str, config: Config) -> str:
    parts = Path(rel_path).parts[:-1]
    for kind, dirs in config.kinds.items():
        for d in dirs:
            d_parts = Path(d).parts
            for i in range(len(parts) - len(d_parts) + 1):
                if tuple(parts[i : i + len(d_parts)]) == d_parts:
                    return kind
    return "other"


def strip_inline_code(line: str) -> str:
    return INLINE_CODE_RE.sub(lambda m: " " * len(m.group(0)), line)


def _extract_inline_links(text: str, line_no: int) -> list:
    links = []
    for m in INLINE_LINK_RE.finditer(text):
        links.append(Link(target=m.group(3), text=m.group(2), line=line_no, is_image=bool(m.group(1))))
        # [![badge](img.svg)](target)
        links.extend(_extract_inline_links(m.group(2), line_no))
    return links


def _extract_links(line: str, line_no: int) -> list:
    ref = REF_DEF_RE.match(line)
    if ref:
        return [Link(target=ref.group(2), text=ref.group(1), line=line_no)]

    links = _extract_inline_links(line, line_no)
    for m in AUTOLINK_RE.finditer(line):
        links.append(Link(target=m.group(1), text=m.group(1), line=line_no))
    for m in HTML_ATTR_RE.finditer(line):
        links.append(Link(target=m.group(1), text="", line=line_no))
    return links


def _unique_anchors(headings: list) -> None:
    seen = {}
    for h in headings:
        base = slugify(h.text)
        count = seen.get(base, 0)
        h.anchor = base if count == 0 else f"{base}-{count}"
        seen[base] = count + 1


def _front_matter_lines(lines: list) -> set:
    """Line numbers of a leading YAML front matter block."""
    if not lines or lines[0].strip() != "---":
        return set()
    for j, line in enumerate(lines[1:], start=2):
        if line.strip() in ("---", "..."):
            return set(range(1, j + 1))
    return set()


def _scan(doc: Document, config: Config) -> set:
    """Fill headings, code blocks, links and tags. Returns code line numbers."""
    tag_names = {t.lower(): t for t in config.block_tags}
    code_lines = set()
    fence: Optional[tuple] = None
    block: Optional[CodeBlock] = None
    body = []
    in_comment = False
    pending_tag: Optional[Tag] = None
    paragraph = []
    front_matter = _front_matter_lines(doc.lines)

    for i, line in enumerate(doc.lines, start=1):
        if i in front_matter:
            continue

        if fence:
            m = FENCE_RE.match(line)
            char, length = fence
            if m and m.group(2)[0] == char and len(m.group(2)) >= length and not m.group(3).strip():
                block.end_line = i
                block.content = "\n".join(body)
                fence = None
            else:
                body.append(line)
            code_lines.add(i)
            continue

        if in_comment:
            if "-->" in line:
                in_comment = False
                line = line.split("-->", 1)[1]
            else:
                continue

        m = FENCE_RE.match(line)
        if m and not (m.group(2)[0] == "`" and "`" in m.group(3)):
            info = m.group(3).strip()
            block = CodeBlock(
                language=info.split()[0] if info else "",
                info=info,
                line=i,
                end_line=len(doc.lines),
                closed=True,
            )
            doc.code_blocks.append(block)
            fence = (m.group(2)[0], len(m.group(2)))
            body = []
            paragraph = []
            code_lines.add(i)
            continue

        line = re.sub(r"<!--.*?-->", "", line)
        if "<!--" in line:
            line = line.split("<!--", 1)[0]
            in_comment = True

        # Title
        # =====
        if SETEXT_RE.match(line):
            if paragraph:
                level = 1 if line.strip()[0] == "=" else 2
                text = " ".join(t for _, t in paragraph)
                doc.headings.append(Heading(level=level, text=text, line=paragraph[0][0]))
            paragraph = []
            continue

        h = HEADING_RE.match(line)
        if h:
            text = re.sub(r"[ \t]+#+$", "", h.group(2) or "")
            if text.strip("#") == "":
                text = ""
            doc.headings.append(Heading(level=len(h.group(1)), text=text.strip(), line=i))

        if h or pending_tag or not line.strip() or PARAGRAPH_BREAK_RE.match(line):
            paragraph = []
        else:
            paragraph.append((i, line.strip()))

        visible = strip_inline_code(line)
        doc.links.extend(_extract_links(visible, i))

        # <JuniorVsSenior
        #   junior="..."
        # >
        if pending_tag:
            if ">" not in visible:
                continue
            head, visible = visible.split(">", 1)
            if not head.rstrip().endswith("/"):
                doc.tags.append(pending_tag)
            pending_tag = None

        for t in TAG_RE.finditer(visible):
            closing, name, self_closing = t.groups()
            if self_closing or name.lower() not in tag_names:
                continue
            doc.tags.append(Tag(name=tag_names[name.lower()], line=i, closing=bool(closing)))

        start = OPEN_TAG_START_RE.search(visible)
        if start and start.group(1).lower() in tag_names:
            pending_tag = Tag(name=tag_names[start.group(1).lower()], line=i)

    if fence:
        block.closed = False
        block.content = "\n".join(body)
    if pending_tag:
        doc.tags.append(pending_tag)

    _unique_anchors(doc.headings)
    return code_lines


def _scan_quick_checks(doc: Document, config: Config, code_lines: set) -> None:
    question_re = config.question_re
    answer_summary = config.answer_summary.strip().lower()
    headings_by_line = {h.line: h for h in doc.headings}

    for idx, heading in enumerate(doc.headings):
        if not QUICK_CHECK_RE.search(heading.text):
            continue
        end = len(doc.lines)
        for later in doc.headings[idx + 1 :]:
            if later.level <= heading.level or QUICK_CHECK_RE.search(later.text):
                end = later.line - 1
                break

        qc = QuickCheck(heading=heading)
        current = None
        details_depth = 0
        in_summary = False

        for i in range(heading.line + 1, end + 1):
            if i in code_lines:
                continue
            line = doc.lines[i - 1]
            visible = strip_inline_code(line)
            stripped = visible.strip()

            sub = headings_by_line.get(i)
            if sub:
                if question_re.search(sub.text):
                    current = QuickCheckQuestion(prompt=sub.text, line=i)
                    qc.questions.append(current)
                continue

            lowered = stripped.lower()
            opened = len(re.findall(r"<details\b", lowered))
            closed = len(re.findall(r"</details>", lowered))

            if details_depth == 0 and opened == 0:
                item = LIST_ITEM_RE.match(line)
                if item:
                    if current is not None and not current.has_answer_block:
                        text = item.group(1).strip()
                        current.options.append(text)
                        if any(marker in text for marker in config.correct_markers):
                            current.correct.append(text)
                    continue
                if question_re.search(stripped):
                    current = QuickCheckQuestion(prompt=line.strip(), line=i)
                    qc.questions.append(current)
                    continue

            details_depth += opened
            if "<summary" in lowered:
                in_summary = True
            if in_summary and answer_summary in lowered and current is not None:
                current.has_answer_block = True
            if "</summary>" in lowered:
                in_summary = False
            details_depth = max(0, details_depth - closed)

        doc.quick_checks.append(qc)


def parse_text(text: str, rel_path: str, config: Config, path: Optional[Path] = None) -> Document:
    doc = Document(
        path=path or Path(rel_path),
        rel_path=rel_path,
        kind=document_kind(rel_path, config),
        text=text,
        lines=text.splitlines(),
    )
    code_lines = _scan(doc, config)
    _scan_quick_checks(doc, config, code_lines)
    return doc


def parse_document(path: Path, root: Path, config: Config) -> Document:
    """Read and parse a Markdown file. Raises UnicodeDecodeError on bad input."""
    text = path.read_text(encoding="utf-8")
    # unresolved, so symlinks pointing outside the root keep their in-tree path
    rel_path = path.relative_to(root).as_posix()
    return parse_text(text, rel_path, config, path=path)
