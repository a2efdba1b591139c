"""Tests for the Markdown analysis report."""

from pathlib import Path

from e2egen.indexer.analyzer import analyze_codebase
from e2egen.output.markdown import render_analysis_report
from e2egen.schemas.analysis import AnalysisResult


class TestRenderAnalysisReport:

    def test_empty_result(self) -> None:
        md = render_analysis_report(AnalysisResult())
        assert md.startswith("# UI Analysis Report")
        assert "No UI elements found" in md
        assert "**Framework:**" not in md

    def test_full_report(self, sample_codebase: Path) -> None:
        md = render_analysis_report(analyze_codebase(sample_codebase, ["src/**/*.jsx"]))
        assert "- **Files with UI:** 2" in md
        assert "- **Framework:** reactive-component (function)" in md
        assert "LoginForm.jsx" in md
        assert "test id `submit-btn`" in md
        assert "⚡ click" in md
        assert "- **APIs:** /api/login" in md
        assert "**Form 1** (handler `submit`)" in md
        assert "- `email`: required" in md
        assert "- `password`: min=8" in md
