"""Prompt assembly — renders the system and per-chunk user messages."""

from __future__ import annotations

from collections import Counter
from pathlib import Path, PurePath

from jinja2 import Environment, FileSystemLoader

from e2egen.schemas.analysis import FrameworkInfo
from e2egen.schemas.generation import CodeContext

_TEMPLATE_DIR = Path(__file__).parent / "templates"

MAX_UI_FILES = 5
MAX_FALLBACK_FILES = 3
EXAMPLE_FILENAME = "login.spec.ts"

_FENCE_LANGUAGES = {
    ".js": "javascript",
    ".jsx": "jsx",
    ".ts": "typescript",
    ".tsx": "tsx",
    ".vue": "vue",
    ".svelte": "svelte",
}

_env = Environment(
    loader=FileSystemLoader(str(_TEMPLATE_DIR)),
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
)


def extension_histogram(contexts: list[CodeContext]) -> list[tuple[str, int]]:
    """(extension, count) pairs, most common first, ties broken by name."""
    counts = Counter(PurePath(ctx.file).suffix or "(none)" for ctx in contexts)
    return sorted(counts.items(), key=lambda item: (-item[1], item[0]))


def priority_subset(chunk: list[CodeContext]) -> list[CodeContext]:
    """UI files get their full source shown; with none, the first few files do."""
    ui = [ctx for ctx in chunk if ctx.is_component]
    if ui:
        return ui[:MAX_UI_FILES]
    return chunk[:MAX_FALLBACK_FILES]


class PromptAssembler:
    """Builds the messages for one generation run.

    The system prompt describes the whole selection; user prompts describe
    one chunk each.
    """

    def __init__(self, contexts: list[CodeContext], framework: FrameworkInfo | None = None) -> None:
        self.contexts = contexts
        self.framework = framework

    def system_prompt(self) -> str:
        framework = self.framework if self.framework and self.framework.type != "unknown" else None
        return _env.get_template("system.j2").render(
            extensions=extension_histogram(self.contexts),
            framework=framework,
            hooks=(framework.patterns.get("hooks") or []) if framework else [],
            example_filename=EXAMPLE_FILENAME,
        )

    def user_prompt(self, chunk: list[CodeContext], index: int, total: int) -> str:
        """Render the message for chunk ``index`` (1-based) of ``total``."""
        priority = [
            {
                "file": ctx.file,
                "content": ctx.content,
                "language": _FENCE_LANGUAGES.get(PurePath(ctx.file).suffix, ""),
            }
            for ctx in priority_subset(chunk)
        ]
        return _env.get_template("user.j2").render(
            chunk=chunk,
            index=index,
            total=total,
            priority=priority,
        )
