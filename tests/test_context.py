"""Tests for context extraction and sanitization."""

from pathlib import Path

from e2egen.generation.context import MAX_SUMMARY_CHARS, ContextExtractor, sanitize, scan_exports


class TestSanitize:

    def test_strips_comments(self) -> None:
        text = "/* header */\nconst a = 1; // trailing\n// whole line\nconst b = 2;\n"
        assert sanitize(text) == "const a = 1;\n\nconst b = 2;"

    def test_keeps_comment_markers_in_strings(self) -> None:
        text = "const url = 'http://example.com';\nconst s = \"/* not a comment */\";\n"
        assert sanitize(text) == text.strip("\n")

    def test_template_literal(self) -> None:
        text = "const t = `line // one\nline /* two */`;"
        assert sanitize(text) == text

    def test_apostrophe_does_not_swallow_file(self) -> None:
        text = "const s = 'unterminated\n// comment\nconst b = 2;"
        assert sanitize(text) == "const s = 'unterminated\n\nconst b = 2;"

    def test_collapses_blank_runs_and_trailing_space(self) -> None:
        text = "a   \n\n\n\n\nb\t\n"
        assert sanitize(text) == "a\n\nb"

    def test_idempotent(self) -> None:
        samples = [
            "/* a */ x = 1; // b\n\n\n\ny = '//';\n",
            "const s = 'it''s' /* c\n */ + `t ${a}` // end",
            "/*/ odd */ a / b //* c\n",
        ]
        for text in samples:
            once = sanitize(text)
            assert sanitize(once) == once


class TestScanExports:

    def test_typescript_exports(self) -> None:
        text = (
            "export interface Props { label: string }\n"
            "export default function Card(props: Props) {}\n"
            "export const useCard = () => {};\n"
            "export type Size = 'sm' | 'lg';\n"
        )
        assert scan_exports(text) == ["Props", "Card", "useCard", "Size"]

    def test_ignores_keywords(self) -> None:
        assert scan_exports("export default {\n};\n") == []


class TestContextExtractor:

    def test_sorted_by_size(self, sample_codebase: Path) -> None:
        files = [
            str(sample_codebase / "src" / "components" / "LoginForm.jsx"),
            str(sample_codebase / "src" / "utils.js"),
            str(sample_codebase / "src" / "components" / "Button.jsx"),
        ]
        contexts = ContextExtractor(sample_codebase).extract(files)
        assert [c.file for c in contexts] == [
            "src/utils.js", "src/components/Button.jsx", "src/components/LoginForm.jsx",
        ]
        assert all(c.size == len(c.content) for c in contexts)

    def test_parsed_exports_and_classification(self, sample_codebase: Path) -> None:
        ctx = ContextExtractor(sample_codebase).extract_one(
            sample_codebase / "src" / "components" / "LoginForm.jsx"
        )
        assert ctx.exported_items == ["LoginForm"]
        assert ctx.is_component is True
        assert ctx.summary.startswith("src/components/LoginForm.jsx (component, ")
        assert "exports: LoginForm" in ctx.summary

    def test_module_kind(self, sample_codebase: Path) -> None:
        ctx = ContextExtractor(sample_codebase).extract_one(sample_codebase / "src" / "utils.js")
        assert ctx.is_component is False
        assert ctx.exported_items == ["add"]
        assert ctx.summary == "src/utils.js (module, 1 line); exports: add"

    def test_typescript_exports_parsed(self, tmp_path: Path) -> None:
        f = tmp_path / "Card.tsx"
        f.write_text("export const Card = (p: { title: string }) => <div>{p.title}</div>;\n")
        ctx = ContextExtractor(tmp_path).extract_one(f)
        assert ctx.exported_items == ["Card"]
        assert ctx.is_component is True

    def test_unparseable_falls_back_to_regex(self, tmp_path: Path) -> None:
        f = tmp_path / "broken.ts"
        f.write_text("export const A = ;\nexport function B() {\n")
        assert ContextExtractor(tmp_path).extract_one(f).exported_items == ["A", "B"]

    def test_summary_is_bounded(self, tmp_path: Path) -> None:
        f = tmp_path / "many.js"
        f.write_text("".join(f"export const value{i} = {i};\n" for i in range(100)))
        ctx = ContextExtractor(tmp_path).extract_one(f)
        assert len(ctx.summary) <= MAX_SUMMARY_CHARS
        assert len(ctx.exported_items) == 100

    def test_unreadable_file_skipped(self, tmp_path: Path) -> None:
        assert ContextExtractor(tmp_path).extract([str(tmp_path / "missing.js")]) == []
