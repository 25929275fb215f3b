import textwrap

import pytest


@pytest.fixture
def write(tmp_path):
    """Write a dedented Markdown file under tmp_path and return its path."""

    def _write(rel_path, text):
        path = tmp_path / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(text).lstrip(), encoding="utf-8")
        return path

    return _write


README = """
    # Guides

    - [Kubernetes](interview-questions/kubernetes.md)
    - [DevOps roadmap](roadmaps/devops.md)
"""

KUBERNETES_GUIDE = """
    # Kubernetes Interview Guide

    ## Scenario

    A pod keeps restarting with `CrashLoopBackOff`.

    ## Challenge

    Find out why before touching anything.

    ```bash
    kubectl describe pod web-0
    ```

    <JuniorVsSenior
      junior="Deletes the pod"
      senior="Reads the events first"
    />

    ## Quick Check

    **Q1:** Which probe restarts a container?
    - A) readinessProbe
    - B) livenessProbe ✅

    <details>
    <summary>See Answer</summary>

    The liveness probe. Readiness only removes the pod from Service endpoints.
    </details>

    Back to the [roadmap](../roadmaps/devops.md#month-1).
"""

DEVOPS_ROADMAP = """
    # DevOps Engineer Roadmap

    ## Month 1

    Learn Linux with [The Linux Command Line](https://linuxcommand.org/tlcl.php).

    ## Month 2

    Containers. See the [Kubernetes guide](../interview-questions/kubernetes.md).
"""


@pytest.fixture
def collection(tmp_path, write):
    """A small collection with no errors and no warnings."""
    write("README.md", README)
    write("interview-questions/kubernetes.md", KUBERNETES_GUIDE)
    write("roadmaps/devops.md", DEVOPS_ROADMAP)
    return tmp_path
