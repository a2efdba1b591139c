"""TSX-aware syntax trees built on tree-sitter, with pre-order indexing and source slices.

Every file is parsed with the ``tsx`` grammar from tree-sitter-typescript, which
covers plain JavaScript, JSX and TypeScript in one pass. Files with a ``.ts``
suffix use the ``typescript`` grammar instead, since ``<T>value`` casts are not
legal TSX. Only named nodes are indexed; punctuation tokens are skipped.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterator

import tree_sitter_typescript
from tree_sitter import Language, Node, Parser

from e2egen.exceptions import SourceParseError

_TSX = Language(tree_sitter_typescript.language_tsx())
_TYPESCRIPT = Language(tree_sitter_typescript.language_typescript())
_TYPESCRIPT_SUFFIXES = {".ts", ".mts", ".cts"}

_DECLARATION_LISTS = {"lexical_declaration", "variable_declaration"}

# import x from 'y' / import {a} from "y" / import 'y'
_IMPORT_RE = re.compile(
    r"""^\s*import\s+(?:[\w$*{}\s,]+?\s+from\s+)?['"]([^'"]+)['"]""",
    re.MULTILINE,
)


def scan_imports(text: str) -> list[str]:
    """Regex fallback for import specifiers when a file won't parse."""
    return _IMPORT_RE.findall(text)


def unquote(text: str) -> str:
    """Strip the delimiters from a string literal's source text."""
    return text[1:-1] if len(text) >= 2 and text[0] == text[-1] and text[0] in "'\"`" else text


def _language_for(path: str) -> Language:
    return _TYPESCRIPT if Path(path).suffix.lower() in _TYPESCRIPT_SUFFIXES else _TSX


def _first_error(root: Node) -> Node | None:
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            return node
        stack.extend(reversed(node.children))
    return None


class SourceTree:
    """A parsed module plus the lookups the analyzers need."""

    def __init__(self, source: str, path: str = "") -> None:
        self.source = source
        self.path = path
        self._bytes = source.encode("utf-8")
        self.program = Parser(_language_for(path)).parse(self._bytes).root_node
        if self.program.has_error:
            bad = _first_error(self.program)
            where = f"line {bad.start_point[0] + 1}" if bad is not None else "unknown position"
            raise SourceParseError(f"Could not parse {path or '<source>'}: syntax error at {where}")

        self.nodes: list[Node] = []  # pre-order
        stack = [self.program]
        while stack:
            node = stack.pop()
            self.nodes.append(node)
            stack.extend(reversed(node.named_children))

    @classmethod
    def from_file(cls, path: str | Path) -> "SourceTree":
        path = Path(path)
        return cls(path.read_text(errors="replace"), str(path))

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def children(self, node: Node) -> list[Node]:
        return node.named_children

    def parent(self, node: Node) -> Node | None:
        return node.parent

    def ancestors(self, node: Node) -> Iterator[Node]:
        """Yield ancestors from the nearest outwards."""
        current = node.parent
        while current is not None:
            yield current
            current = current.parent

    def descendants(self, node: Node) -> Iterator[Node]:
        """Yield named descendants of ``node`` in pre-order, excluding ``node`` itself."""
        stack = list(reversed(node.named_children))
        while stack:
            current = stack.pop()
            yield current
            stack.extend(reversed(current.named_children))

    def text(self, node: Node) -> str:
        return self._bytes[node.start_byte:node.end_byte].decode("utf-8", errors="replace")

    # ------------------------------------------------------------------
    # Module-level facts
    # ------------------------------------------------------------------

    def imports(self) -> list[str]:
        """Module specifiers of every import statement, in source order."""
        specs: list[str] = []
        for stmt in self.program.named_children:
            source = stmt.child_by_field_name("source") if stmt.type == "import_statement" else None
            if source is not None:
                specs.append(unquote(self.text(source)))
        return specs

    def _declared_names(self, decl: Node) -> list[str]:
        if decl.type in _DECLARATION_LISTS:
            names = []
            for declarator in decl.named_children:
                name = declarator.child_by_field_name("name")
                if name is not None and name.type == "identifier":
                    names.append(self.text(name))
            return names
        name = decl.child_by_field_name("name")
        return [self.text(name)] if name is not None else []

    def exported_names(self) -> list[str]:
        """Names exported by this module; an anonymous default export is ``default``."""
        names: list[str] = []
        for stmt in self.program.named_children:
            if stmt.type != "export_statement":
                continue
            is_default = any(child.type == "default" for child in stmt.children)
            decl = stmt.child_by_field_name("declaration")
            if decl is None:
                decl = stmt.child_by_field_name("value")
            if decl is not None:
                if decl.type == "identifier":
                    declared = [self.text(decl)]
                else:
                    declared = self._declared_names(decl)
                names.extend(declared or (["default"] if is_default else []))
            for clause in stmt.named_children:
                if clause.type != "export_clause":
                    continue
                for spec in clause.named_children:
                    exported = spec.child_by_field_name("alias")
                    if exported is None:
                        exported = spec.child_by_field_name("name")
                    if exported is not None:
                        names.append(self.text(exported))
        return list(dict.fromkeys(names))

    def variable_init(self, name: str) -> str | None:
        """Source text of the initializer of the first variable called ``name``."""
        for node in self.nodes:
            if node.type != "variable_declarator":
                continue
            ident = node.child_by_field_name("name")
            value = node.child_by_field_name("value")
            if ident is not None and value is not None and ident.type == "identifier" and self.text(ident) == name:
                return self.text(value)
        return None
