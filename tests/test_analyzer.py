"""Tests for whole-codebase analysis."""

from pathlib import Path

from e2egen.indexer.analyzer import analyze_codebase


class TestAnalyzeCodebase:

    def test_totals(self, sample_codebase: Path) -> None:
        result = analyze_codebase(sample_codebase, ["src/**/*.jsx"])
        files = sorted(Path(c.file).name for c in result.components)
        assert files == ["Button.jsx", "LoginForm.jsx"]
        assert result.summary.total_files == 2
        assert result.summary.total_elements == 7
        assert result.summary.total_states == 2
        assert result.summary.interactive_elements == 4

    def test_framework_from_first_file(self, sample_codebase: Path) -> None:
        result = analyze_codebase(sample_codebase, ["src/**/*.jsx"])
        assert result.framework is not None
        assert result.framework.type == "reactive-component"

    def test_files_without_markup_skipped(self, sample_codebase: Path) -> None:
        result = analyze_codebase(sample_codebase, ["src/*.js"])
        assert result.components == []
        assert result.summary.total_files == 0

    def test_unparseable_file_skipped(self, sample_codebase: Path) -> None:
        (sample_codebase / "src" / "components" / "Broken.jsx").write_text("const x = <div>;\n")
        result = analyze_codebase(sample_codebase, ["src/**/*.jsx"])
        assert "Broken.jsx" not in {Path(c.file).name for c in result.components}
        assert result.summary.total_files == 2

    def test_empty_codebase(self, tmp_path: Path) -> None:
        result = analyze_codebase(tmp_path)
        assert result.components == []
        assert result.framework is None

    def test_tsx_project_with_default_patterns(self, tmp_path: Path) -> None:
        src = tmp_path / "src"
        src.mkdir()
        (src / "App.tsx").write_text(
            "import React from 'react';\n"
            "type Props = { title?: string };\n"
            "export default function App({ title }: Props) {\n"
            "  return <><h1>{title ?? 'Home'}</h1><button onClick={() => alert(1)}>Go</button></>;\n"
            "}\n"
        )
        result = analyze_codebase(tmp_path)
        assert result.summary.total_files == 1
        assert [e.tag for e in result.components[0].elements] == ["<h1>", "<button>"]
        assert result.framework.type == "reactive-component"
