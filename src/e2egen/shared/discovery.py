"""Gitignore-aware file discovery driven by include/exclude glob patterns."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import pathspec

from e2egen.exceptions import DiscoveryError

logger = logging.getLogger(__name__)

# Hard-coded exclusions that are never walked
_ALWAYS_IGNORE = {
    ".git",
    "node_modules",
    "__pycache__",
    ".next",
    ".nuxt",
    "dist",
    "build",
    ".cache",
    ".turbo",
    "coverage",
    ".venv",
    "venv",
}


def expand_braces(pattern: str) -> list[str]:
    """Expand ``{a,b}`` alternatives, which gitignore-style patterns lack.

    ``src/**/*.{js,jsx}`` becomes ``["src/**/*.js", "src/**/*.jsx"]``.
    Nested groups are supported; an unbalanced brace raises ``DiscoveryError``.
    """
    start = pattern.find("{")
    if start == -1:
        if "}" in pattern:
            raise DiscoveryError(f"Unbalanced '}}' in pattern: {pattern!r}")
        return [pattern]

    depth = 0
    for end in range(start, len(pattern)):
        if pattern[end] == "{":
            depth += 1
        elif pattern[end] == "}":
            depth -= 1
            if depth == 0:
                break
    else:
        raise DiscoveryError(f"Unbalanced '{{' in pattern: {pattern!r}")

    options: list[str] = []
    current = ""
    depth = 0
    for ch in pattern[start + 1 : end]:
        if ch == "," and depth == 0:
            options.append(current)
            current = ""
            continue
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
        current += ch
    options.append(current)

    prefix, suffix = pattern[:start], pattern[end + 1 :]
    expanded: list[str] = []
    for option in options:
        expanded.extend(expand_braces(prefix + option + suffix))
    return expanded


def _compile(patterns: list[str]) -> pathspec.PathSpec:
    lines: list[str] = []
    for pattern in patterns:
        lines.extend(expand_braces(pattern))
    try:
        return pathspec.PathSpec.from_lines("gitwildmatch", lines)
    except ValueError as exc:
        raise DiscoveryError(f"Invalid glob pattern in {patterns!r}: {exc}") from exc


class FileDiscoverer:
    """Resolve glob patterns against a codebase root, respecting .gitignore rules."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root).resolve()
        if not self.root.is_dir():
            raise DiscoveryError(f"Codebase root is not a directory: {self.root}")
        self._gitignore = self._load_gitignore()

    def _load_gitignore(self) -> pathspec.PathSpec | None:
        gi = self.root / ".gitignore"
        if gi.exists():
            return pathspec.PathSpec.from_lines("gitwildmatch", gi.read_text().splitlines())
        return None

    def _is_ignored(self, rel: Path, is_dir: bool = False) -> bool:
        """Check if a path should be ignored."""
        # Always-ignore dirs
        for part in rel.parts:
            if part in _ALWAYS_IGNORE:
                return True
        # Gitignore spec
        posix = rel.as_posix() + ("/" if is_dir else "")
        if self._gitignore and self._gitignore.match_file(posix):
            return True
        return False

    def discover(self, include: list[str], exclude: list[str] | None = None) -> list[str]:
        """Return absolute paths matching any include pattern and no exclude pattern.

        Results follow include-pattern order, then walk order within a pattern.
        Every pattern is compiled before the walk, so a malformed pattern fails
        the whole call.
        """
        include_specs = [(pattern, _compile([pattern])) for pattern in include]
        exclude_spec = _compile(exclude or [])

        files = self._walk_files()
        found: list[str] = []
        seen: set[str] = set()
        for pattern, spec in include_specs:
            matched = 0
            for rel in files:
                posix = rel.as_posix()
                if not spec.match_file(posix) or exclude_spec.match_file(posix):
                    continue
                matched += 1
                absolute = str(self.root / rel)
                if absolute not in seen:
                    seen.add(absolute)
                    found.append(absolute)
            logger.debug("Pattern %r matched %d files", pattern, matched)

        logger.info("Discovered %d files under %s", len(found), self.root)
        return found

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _walk_files(self) -> list[Path]:
        """Walk all non-ignored files, returning paths relative to the root.

        Ignored directories are pruned before they are entered.
        """
        files: list[Path] = []
        for dirpath, dirnames, filenames in os.walk(self.root):
            base = Path(dirpath).relative_to(self.root)
            dirnames[:] = [d for d in dirnames if not self._is_ignored(base / d, is_dir=True)]
            for name in filenames:
                rel = base / name
                if not self._is_ignored(rel):
                    files.append(rel)
        return sorted(files)
