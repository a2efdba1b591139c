"""Tests for framework detection."""

from pathlib import Path

from e2egen.indexer.framework import detect_framework, detect_framework_for_file


class TestDetectFramework:

    def test_react_function_components(self) -> None:
        text = "import { useState, useEffect } from 'react';\nuseState(0); useEffect(() => {}); useState(1);"
        info = detect_framework(["react"], text)
        assert info.type == "reactive-component"
        assert info.component_style == "function"
        assert info.patterns == {"hooks": ["useState", "useEffect"]}

    def test_react_class_components(self) -> None:
        text = "class App extends React.Component { render() { return null; } }"
        info = detect_framework(["react"], text)
        assert info.component_style == "class"

    def test_react_subpath_import(self) -> None:
        assert detect_framework(["react-dom/client"], "").type == "reactive-component"

    def test_react_namespace_usage_without_import(self) -> None:
        assert detect_framework([], "React.createElement('div')").type == "reactive-component"

    def test_vue_options_api(self) -> None:
        info = detect_framework([], "<template><div /></template>")
        assert info.type == "template-based"
        assert info.component_style == "template"

    def test_vue_script_setup(self) -> None:
        info = detect_framework(["vue"], "<script setup>\nconst a = 1;\n</script>")
        assert info.component_style == "function"

    def test_angular(self) -> None:
        info = detect_framework(["@angular/core"], "@Component({ selector: 'x' })")
        assert info.type == "class-annotated"
        assert info.component_style == "class"

    def test_svelte(self) -> None:
        info = detect_framework([], "<script>let n = 0;</script>\n<style>p {}</style>")
        assert info.type == "hybrid-template"
        assert info.component_style == "template"

    def test_unknown(self) -> None:
        info = detect_framework(["lodash"], "export const x = 1;")
        assert info.type == "unknown"
        assert info.component_style is None
        assert info.patterns == {}


class TestDetectFrameworkForFile:

    def test_parsed_imports(self, tmp_path: Path) -> None:
        f = tmp_path / "App.jsx"
        f.write_text("import React from 'react';\nexport default () => <div />;\n")
        assert detect_framework_for_file(f).type == "reactive-component"

    def test_regex_fallback_for_typescript(self, tmp_path: Path) -> None:
        f = tmp_path / "app.component.ts"
        f.write_text(
            "import { Component } from '@angular/core';\n"
            "@Component({ selector: 'app-root' })\n"
            "export class AppComponent { title: string = 'x'; }\n"
        )
        assert detect_framework_for_file(f).type == "class-annotated"
