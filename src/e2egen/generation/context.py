"""Context extraction — turns prioritized files into size-sorted CodeContexts."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from e2egen.exceptions import SourceParseError
from e2egen.generation.prioritizer import UI_INDICATORS, is_ui_path
from e2egen.indexer.syntax import SourceTree
from e2egen.schemas.generation import CodeContext

logger = logging.getLogger(__name__)

MAX_SUMMARY_CHARS = 240
MAX_FILE_SIZE = 1_000_000  # 1 MB

_EXPORT_RE = re.compile(
    r"^\s*export\s+(?:default\s+)?(?:async\s+)?"
    r"(?:function\*?\s+|abstract\s+class\s+|class\s+|const\s+|let\s+|var\s+"
    r"|interface\s+|type\s+|enum\s+)?"
    r"([A-Za-z_$][\w$]*)",
    re.MULTILINE,
)
_NOT_A_NAME = {
    "function", "class", "const", "let", "var", "interface", "type", "enum",
    "async", "abstract", "default", "from", "new",
}
_BLANK_RUN_RE = re.compile(r"\n{3,}")


def scan_exports(text: str) -> list[str]:
    """Line-regex export scan for files the parser rejects (TypeScript, mostly)."""
    names = [name for name in _EXPORT_RE.findall(text) if name not in _NOT_A_NAME]
    return list(dict.fromkeys(names))


def sanitize(text: str) -> str:
    """Strip comments and trailing whitespace and collapse blank-line runs.

    Quote-aware: comment markers inside '...', "..." and `...` are kept.
    Single and double quotes never span lines, so a stray apostrophe can't
    swallow the rest of the file.
    """
    out: list[str] = []
    i, n = 0, len(text)
    quote = ""
    while i < n:
        ch = text[i]
        if quote:
            out.append(ch)
            if ch == "\\" and i + 1 < n:
                out.append(text[i + 1])
                i += 2
                continue
            if ch == quote or (ch == "\n" and quote != "`"):
                quote = ""
            i += 1
            continue

        if ch in "'\"`":
            quote = ch
            out.append(ch)
            i += 1
        elif text.startswith("/*", i):
            end = text.find("*/", i + 2)
            i = n if end == -1 else end + 2
            out.append(" ")
        elif text.startswith("//", i):
            end = text.find("\n", i)
            i = n if end == -1 else end
        else:
            out.append(ch)
            i += 1

    lines = [line.rstrip() for line in "".join(out).split("\n")]
    return _BLANK_RUN_RE.sub("\n\n", "\n".join(lines)).strip("\n")


def _summarize(rel: str, kind: str, line_count: int, exports: list[str]) -> str:
    noun = "line" if line_count == 1 else "lines"
    summary = f"{rel} ({kind}, {line_count} {noun})"
    if exports:
        summary += f"; exports: {', '.join(exports)}"
    if len(summary) > MAX_SUMMARY_CHARS:
        summary = summary[: MAX_SUMMARY_CHARS - 3] + "..."
    return summary


class ContextExtractor:
    """Build one CodeContext per readable file, relative to a codebase root."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root).resolve()

    def _relative(self, path: Path) -> str:
        try:
            return path.resolve().relative_to(self.root).as_posix()
        except ValueError:
            return path.as_posix()

    def extract_one(self, path: str | Path) -> CodeContext | None:
        path = Path(path)
        try:
            if path.stat().st_size > MAX_FILE_SIZE:
                logger.warning("Skipping %s: larger than %d bytes", path, MAX_FILE_SIZE)
                return None
            text = path.read_text(errors="replace")
        except OSError as exc:
            logger.warning("Could not read %s: %s", path, exc)
            return None

        try:
            exports = SourceTree(text, str(path)).exported_names()
        except SourceParseError:
            logger.debug("Parse failed for %s, scanning exports by regex", path)
            exports = scan_exports(text)

        rel = self._relative(path)
        is_component = is_ui_path(rel) or any(
            token in name.lower() for name in exports for token in UI_INDICATORS
        )
        content = sanitize(text)
        return CodeContext(
            file=rel,
            summary=_summarize(
                rel,
                "component" if is_component else "module",
                len(text.splitlines()),
                exports,
            ),
            exported_items=exports,
            content=content,
            size=len(content),
            is_component=is_component,
        )

    def extract(self, files: list[str]) -> list[CodeContext]:
        """Extract every file, skipping unreadable ones, smallest first."""
        contexts = [ctx for ctx in map(self.extract_one, files) if ctx is not None]
        contexts.sort(key=lambda ctx: ctx.size)
        logger.info("Extracted %d contexts (%d chars)", len(contexts), sum(c.size for c in contexts))
        return contexts
