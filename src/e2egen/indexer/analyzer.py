"""Codebase indexer — runs the structural analyzer over every discovered file."""

from __future__ import annotations

import logging
from pathlib import Path

from e2egen.exceptions import SourceParseError
from e2egen.indexer.framework import detect_framework_for_file
from e2egen.indexer.structural import analyze_file
from e2egen.schemas.analysis import AnalysisResult, AnalysisSummary, ComponentAnalysis
from e2egen.schemas.config import GeneratorConfig
from e2egen.shared.discovery import FileDiscoverer

logger = logging.getLogger(__name__)


def _summarize(components: list[ComponentAnalysis]) -> AnalysisSummary:
    return AnalysisSummary(
        total_files=len(components),
        total_elements=sum(len(c.elements) for c in components),
        total_states=sum(c.state_count for c in components),
        interactive_elements=sum(1 for c in components for e in c.elements if e.has_events),
    )


def analyze_codebase(
    root: str | Path,
    include: list[str] | None = None,
    exclude: list[str] | None = None,
) -> AnalysisResult:
    """Analyze every matching file under ``root``.

    Files that fail to read or parse are logged and left out; files without
    any markup are skipped silently. The framework is detected from the first
    discovered file.
    """
    defaults = GeneratorConfig()
    files = FileDiscoverer(root).discover(
        include or defaults.include_patterns,
        defaults.exclude_patterns if exclude is None else exclude,
    )

    components: list[ComponentAnalysis] = []
    for path in files:
        try:
            analysis = analyze_file(path)
        except SourceParseError as exc:
            logger.warning("Skipping %s: %s", path, exc)
            continue
        except OSError as exc:
            logger.warning("Could not read %s: %s", path, exc)
            continue
        if analysis is not None:
            components.append(analysis)

    framework = None
    if files:
        try:
            framework = detect_framework_for_file(files[0])
        except OSError as exc:
            logger.warning("Framework detection failed for %s: %s", files[0], exc)

    result = AnalysisResult(components=components, framework=framework, summary=_summarize(components))
    logger.info(
        "Analyzed %d/%d files: %d elements, %d interactive",
        result.summary.total_files, len(files),
        result.summary.total_elements, result.summary.interactive_elements,
    )
    return result
