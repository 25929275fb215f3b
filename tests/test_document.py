import textwrap

from guidecheck.config import Config
from guidecheck.document import document_kind, parse_text, slugify


def _parse(text, rel_path="interview-questions/kubernetes.md", **overrides):
    return parse_text(textwrap.dedent(text).lstrip(), rel_path, Config(**overrides))


def test_slugify_strips_markup_and_punctuation():
    assert slugify("Step 2: Fix the `OOMKilled` Pod!") == "step-2-fix-the-oomkilled-pod"


def test_slugify_keeps_link_text():
    assert slugify("See [Autograd](https://pytorch.org) docs") == "see-autograd-docs"


def test_duplicate_headings_get_numbered_anchors():
    doc = _parse("""
        # Guide
        ## Setup
        ## Setup
        ## Setup
    """)
    assert [h.anchor for h in doc.headings] == ["guide", "setup", "setup-1", "setup-2"]


def test_closing_hashes_are_not_part_of_heading():
    doc = _parse("## Scenario ##\n")
    assert doc.headings[0].text == "Scenario"


def test_hashtag_is_not_a_heading():
    doc = _parse("#pytorch is great\n")
    assert doc.headings == []


def test_fenced_code_blocks_are_collected():
    doc = _parse("""
        # T

        ```python
        x = 1
        ```

        ~~~bash title="run"
        echo hi
        ~~~
    """)
    assert [b.language for b in doc.code_blocks] == ["python", "bash"]
    assert doc.code_blocks[0].content == "x = 1"
    assert doc.code_blocks[1].info == 'bash title="run"'
    assert all(b.closed for b in doc.code_blocks)


def test_code_content_is_opaque():
    doc = _parse("""
        # T

        ```yaml
        # not a heading
        link: [x](nope.md)
        ```
    """)
    assert [h.text for h in doc.headings] == ["T"]
    assert doc.links == []


def test_shorter_fence_does_not_close_longer_one():
    doc = _parse("""
        ````markdown
        ```
        inner
        ```
        ````
    """)
    assert len(doc.code_blocks) == 1
    assert doc.code_blocks[0].closed
    assert "inner" in doc.code_blocks[0].content


def test_unclosed_fence_runs_to_end_of_file():
    doc = _parse("""
        # T

        ```python
        x = 1
        ## swallowed
    """)
    assert not doc.code_blocks[0].closed
    assert [h.text for h in doc.headings] == ["T"]


def test_links_are_collected_from_all_forms():
    doc = _parse("""
        See [guide](../roadmaps/devops.md "DevOps") and ![diagram](img/arch.png).
        Code like `[fake](nope.md)` is ignored.
        <a href="tensorflow.md">TF</a> and <https://pytorch.org>

        [hf]: https://huggingface.co/docs
    """)
    targets = [link.target for link in doc.links]
    assert targets == [
        "../roadmaps/devops.md",
        "img/arch.png",
        "https://pytorch.org",
        "tensorflow.md",
        "https://huggingface.co/docs",
    ]
    assert doc.links[1].is_image


def test_badge_inside_link_yields_both_targets():
    doc = _parse("[![ci](badge.svg)](ci.md)\n")
    assert {link.target for link in doc.links} == {"ci.md", "badge.svg"}


def test_links_in_html_comments_are_ignored():
    doc = _parse("""
        <!-- [old](removed.md)
        [older](gone.md) -->
        [kept](kept.md)
    """)
    assert [link.target for link in doc.links] == ["kept.md"]


def test_document_kind_from_directory():
    config = Config()
    assert document_kind("interview-questions/pytorch.md", config) == "interview-guide"
    assert document_kind("roadmaps/cloud-engineer.md", config) == "roadmap"
    assert document_kind("docs/roadmaps/devops.md", config) == "roadmap"
    assert document_kind("README.md", config) == "other"
    assert document_kind("roadmaps.md", config) == "other"


def test_block_tags_are_recorded():
    doc = _parse("""
        <details>
        <summary>Why?</summary>
        </details>
        <br/>
    """)
    assert [(t.name, t.closing) for t in doc.tags] == [
        ("details", False),
        ("summary", False),
        ("summary", True),
        ("details", True),
    ]


def test_multiline_component_tag():
    doc = _parse("""
        <JuniorVsSenior
          junior="Restarts the pod"
        >
        Body
        </JuniorVsSenior>

        <JuniorVsSenior
          senior="Checks events"
        />
    """)
    assert [(t.name, t.line, t.closing) for t in doc.tags] == [
        ("JuniorVsSenior", 1, False),
        ("JuniorVsSenior", 5, True),
    ]


def test_quick_check_questions_and_answers():
    doc = _parse("""
        ## Quick Check

        **Q1:** Which probe restarts a container?
        - A) readinessProbe
        - B) livenessProbe ✅
        - C) startupProbe

        <details>
        <summary>See Answer</summary>

        Liveness probes restart the container.
        - this bullet belongs to the explanation
        </details>

        **Q2:** What does `kubectl rollout undo` do?
        - [ ] Deletes the deployment
        - [x] Rolls back to the previous revision

        ## Next Section

        - [x] not an option
    """)
    assert len(doc.quick_checks) == 1
    q1, q2 = doc.quick_checks[0].questions
    assert q1.line == 3
    assert len(q1.options) == 3
    assert q1.correct == ["B) livenessProbe ✅"]
    assert q1.has_answer_block
    assert len(q2.options) == 2
    assert q2.correct == ["[x] Rolls back to the previous revision"]
    assert not q2.has_answer_block


def test_quick_check_questions_as_subheadings():
    doc = _parse("""
        ### Quick Check

        #### Question 1

        Which tokenizer call pads a batch?
        - `tokenizer(batch, padding=True)` (correct)
        - `tokenizer.pad_token`

        <details><summary>See Answer</summary>Padding happens at call time.</details>
    """)
    (question,) = doc.quick_checks[0].questions
    assert question.prompt == "Question 1"
    assert len(question.options) == 2
    assert len(question.correct) == 1
    assert question.has_answer_block


def test_quick_check_section_without_questions():
    doc = _parse("""
        ## Quick Check

        Coming soon.

        ## Summary
    """)
    assert doc.quick_checks[0].questions == []


def test_setext_headings():
    doc = _parse("""
        Kubernetes Interview
        Guide
        ====================

        Intro text.

        Setup
        -----
    """)
    assert [(h.level, h.text, h.line, h.anchor) for h in doc.headings] == [
        (1, "Kubernetes Interview Guide", 1, "kubernetes-interview-guide"),
        (2, "Setup", 7, "setup"),
    ]


def test_thematic_break_and_list_are_not_setext_headings():
    doc = _parse("""
        # Guide

        ---

        - item
        ---
        ```text
        code
        ```
        ---
    """)
    assert [h.text for h in doc.headings] == ["Guide"]


def test_front_matter_is_skipped():
    doc = _parse("""
        ---
        title: Kubernetes
        ---
        # Kubernetes
    """)
    assert [(h.level, h.text) for h in doc.headings] == [(1, "Kubernetes")]


def test_custom_answer_summary():
    text = """
        ## Quick Check

        **Q1:** Which probe restarts a container?
        - A) livenessProbe ✅
        - B) readinessProbe

        <details><summary>Show solution</summary>Liveness.</details>
    """
    (question,) = _parse(text).quick_checks[0].questions
    assert not question.has_answer_block
    (question,) = _parse(text, answer_summary="Show Solution").quick_checks[0].questions
    assert question.has_answer_block
