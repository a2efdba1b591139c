"""File prioritization — decides which discovered files are worth sending."""

from __future__ import annotations

import logging
from pathlib import Path, PurePath

logger = logging.getLogger(__name__)

MAX_PRIORITIZED_FILES = 30

# Path fragments that suggest a file renders UI; covers components/ and pages/
UI_INDICATORS = (
    "component",
    "button",
    "form",
    "page",
    "view",
    "modal",
    "dialog",
    "card",
    "panel",
    "input",
    "select",
)

ENTRY_MARKERS = ("index", "main", "app")


def _relative(path: str, root: str | Path | None) -> str:
    if root is None:
        return Path(path).as_posix()
    try:
        return Path(path).relative_to(root).as_posix()
    except ValueError:
        return Path(path).as_posix()


def is_ui_path(path: str) -> bool:
    lowered = path.lower()
    return any(token in lowered for token in UI_INDICATORS)


def is_entry_file(path: str) -> bool:
    name = PurePath(path).name.lower()
    return any(marker in name for marker in ENTRY_MARKERS)


def prioritize_files(
    files: list[str],
    root: str | Path | None = None,
    max_files: int = MAX_PRIORITIZED_FILES,
) -> list[str]:
    """Pick at most ``max_files`` files: UI paths first, then entry points, then the rest.

    ``max_files`` is clamped to ``MAX_PRIORITIZED_FILES``.

    Matching runs against the path relative to ``root`` (when given) so the
    location of the checkout doesn't leak into the tiers. Within a tier,
    discovery order is preserved and each file is taken at most once.
    """
    max_files = min(max_files, MAX_PRIORITIZED_FILES)
    rel = {path: _relative(path, root) for path in files}
    selected: list[str] = []
    seen: set[str] = set()

    def take(path: str) -> None:
        if path not in seen and len(selected) < max_files:
            seen.add(path)
            selected.append(path)

    for path in files:
        if is_ui_path(rel[path]):
            take(path)
    for path in files:
        if is_entry_file(rel[path]):
            take(path)
    for path in files:
        if len(selected) >= max_files:
            break
        take(path)

    logger.info("Prioritized %d of %d files", len(selected), len(files))
    return selected
