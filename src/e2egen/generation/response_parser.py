"""Response parsing — recovers named test files from free-form model output.

A file is a fenced code block whose first non-blank line is a marker::

    ```typescript
    // [Filename: login.spec.ts]
    test(...)
    ```

A marker on the last non-blank line just before the opening fence is
accepted too. Blocks without a marker and unclosed fences are ignored.

A block closes at the first bare fence at least as long as its opening
fence. A body that itself contains a bare ``` line (a Markdown template
literal, say) must therefore be opened with a longer fence such as ````;
with a three-backtick opening it is cut at that line.
"""

from __future__ import annotations

import logging
import re

from e2egen.schemas.generation import Artifact

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"^[ \t]*(`{3,})([^\n`]*)$", re.MULTILINE)
_MARKER_RE = re.compile(r"^\s*//\s*\[Filename:\s*([^\]]+?)\s*\]\s*$")


def _marker(line: str) -> str | None:
    m = _MARKER_RE.match(line)
    return m.group(1) if m else None


def _split_marker(body: str) -> tuple[str | None, str]:
    """Pop a leading marker line off a block body."""
    lines = body.split("\n")
    for i, line in enumerate(lines):
        if not line.strip():
            continue
        name = _marker(line)
        if name is None:
            return None, body
        return name, "\n".join(lines[i + 1 :])
    return None, body


def _marker_before(text: str) -> str | None:
    for line in reversed(text.split("\n")):
        if line.strip():
            return _marker(line)
    return None


def _fenced_blocks(text: str) -> list[tuple[re.Match[str], re.Match[str]]]:
    """Pair each opening fence with the next bare fence at least as long as it."""
    blocks = []
    opening = None
    for fence in _FENCE_RE.finditer(text):
        if opening is None:
            opening = fence
        elif not fence.group(2).strip() and len(fence.group(1)) >= len(opening.group(1)):
            blocks.append((opening, fence))
            opening = None
    if opening is not None:
        logger.debug("Ignoring unclosed code fence")
    return blocks


def parse_artifacts(text: str) -> list[Artifact]:
    """Return every marked, closed fenced block in ``text``, in order."""
    artifacts: list[Artifact] = []
    previous_end = 0
    for opening, closing in _fenced_blocks(text):
        body = text[opening.end() + 1 : closing.start()]
        name, body = _split_marker(body)
        if name is None:
            name = _marker_before(text[previous_end : opening.start()])
        previous_end = closing.end()

        if name is None:
            logger.debug("Skipping fenced block without a filename marker")
            continue
        artifacts.append(Artifact(filename=name, content=body.strip()))
    return artifacts
