"""Framework detection — classifies a file's UI stack from imports and text."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from e2egen.exceptions import SourceParseError
from e2egen.indexer.syntax import SourceTree, scan_imports
from e2egen.schemas.analysis import FrameworkInfo

logger = logging.getLogger(__name__)

_REACT_IMPORTS = {"react", "react-dom", "next"}
_CLASS_COMPONENT_RE = re.compile(r"class\s+\w+\s+extends\s+(?:React\.)?(?:Pure)?Component\b")
_HOOK_RE = re.compile(r"\buse[A-Z]\w*(?=\s*\()")


def _package(spec: str) -> str:
    """'react-dom/client' -> 'react-dom', '@angular/core' -> '@angular/core'."""
    parts = spec.split("/")
    if spec.startswith("@"):
        return "/".join(parts[:2])
    return parts[0]


def detect_framework(imports: list[str], text: str) -> FrameworkInfo:
    """Classify a file by its import specifiers and source text.

    Rules are checked in order and the first match wins: React, Vue, Angular,
    Svelte, then ``unknown``.
    """
    packages = {_package(spec) for spec in imports}

    if packages & _REACT_IMPORTS or "React." in text:
        style = "class" if _CLASS_COMPONENT_RE.search(text) else "function"
        hooks = list(dict.fromkeys(_HOOK_RE.findall(text)))
        return FrameworkInfo(type="reactive-component", component_style=style, patterns={"hooks": hooks})

    if "vue" in packages or "@Vue" in text or "<template>" in text:
        style = "function" if "setup(" in text or "<script setup" in text else "template"
        return FrameworkInfo(type="template-based", component_style=style)

    if any(p.startswith("@angular/") for p in packages) or "@Component(" in text or "@Injectable(" in text:
        return FrameworkInfo(type="class-annotated", component_style="class")

    if ("<script" in text and "<style" in text) or any(p.startswith("svelte") for p in packages):
        return FrameworkInfo(type="hybrid-template", component_style="template")

    return FrameworkInfo()


def detect_framework_for_file(path: str | Path) -> FrameworkInfo:
    """Read one file and classify it; unparseable files fall back to a regex import scan."""
    path = Path(path)
    text = path.read_text(errors="replace")
    try:
        imports = SourceTree(text, str(path)).imports()
    except SourceParseError:
        logger.debug("Falling back to import scan for %s", path)
        imports = scan_imports(text)
    info = detect_framework(imports, text)
    logger.info("Detected framework %s (%s) from %s", info.type, info.component_style, path.name)
    return info
