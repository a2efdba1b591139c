"""Structural analyzer — walks a TSX syntax tree and builds a ComponentAnalysis.

Several passes here are textual heuristics over node source rather than
semantic analysis: state counting, error-state detection, API detection and
validation-schema parsing. Each is a named pass whose result is approximate.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from tree_sitter import Node

from e2egen.indexer.syntax import SourceTree, unquote
from e2egen.schemas.analysis import (
    ComponentAnalysis,
    Dependencies,
    ElementSelectors,
    FormAction,
    FormInfo,
    UIElement,
    ValidationRule,
)

logger = logging.getLogger(__name__)

_FIELD_TAGS = {"<input>", "<select>", "<textarea>"}
_VALIDATED_TAG_WORDS = ("input", "textarea", "select")
_INTERACTIVE_TAG_WORDS = ("button", "link", "menu")
_NETWORK_MARKERS = ("fetch(", "axios.", "/api/")
_STATE_CALLEES = {"useState", "React.useState"}
_LOCAL_IMPORT_PREFIXES = (".", "/", "@", "~")
_TAG_NODES = {"jsx_opening_element", "jsx_closing_element"}

_API_PATH_RE = re.compile(r"""['"`](/api/[^'"`\s]+)['"`]""")
_METHOD_RE = re.compile(r"""method\s*[:=]\s*\{?\s*['"]([A-Za-z]+)['"]""")
_AXIOS_VERB_RE = re.compile(r"axios\.(get|post|put|patch|delete)\b", re.IGNORECASE)
_ERROR_WORD_RE = re.compile(r"error|failed", re.IGNORECASE)
_STATE_TYPE_RE = re.compile(r"useState\s*<\s*(.+?)\s*>\s*\(", re.DOTALL)
_SCHEMA_REF_RE = re.compile(
    r"(?:validationSchema\s*[:=]\s*\{?\s*|[Rr]esolver\(\s*)([A-Za-z_$][\w$]*)"
)
_INTEGER_RE = re.compile(r"-?\d+")

_YUP_RE = re.compile(r"\byup\.")
_ZOD_RE = re.compile(r"\bz\.")
_MIN_RE = re.compile(r"\.min\((\d+)")
_MAX_RE = re.compile(r"\.max\((\d+)")
_REQUIRED_MESSAGE_RE = re.compile(r"""\.required\(\s*['"`]([^'"`]*)['"`]""")


def parse_validation_schema(text: str) -> list[ValidationRule]:
    """Recognize yup and zod schema calls by substring and map them to rules."""
    rules: list[ValidationRule] = []

    if _YUP_RE.search(text):
        if ".required(" in text:
            message = _REQUIRED_MESSAGE_RE.search(text)
            rules.append(ValidationRule(type="required", message=message.group(1) if message else None))
        if ".email(" in text:
            rules.append(ValidationRule(type="pattern", value="email"))
        if ".matches(" in text:
            rules.append(ValidationRule(type="pattern", value="matches"))
        if m := _MIN_RE.search(text):
            rules.append(ValidationRule(type="min", value=int(m.group(1))))
        if m := _MAX_RE.search(text):
            rules.append(ValidationRule(type="max", value=int(m.group(1))))

    if _ZOD_RE.search(text):
        if ".nonempty(" in text:
            rules.append(ValidationRule(type="required"))
        if ".email(" in text:
            rules.append(ValidationRule(type="pattern", value="email"))
        if ".regex(" in text:
            rules.append(ValidationRule(type="pattern", value="regex"))
        if m := _MIN_RE.search(text):
            rules.append(ValidationRule(type="min", value=int(m.group(1))))
        if m := _MAX_RE.search(text):
            rules.append(ValidationRule(type="max", value=int(m.group(1))))

    return rules


def _coerce(value: str) -> int | str:
    return int(value) if _INTEGER_RE.fullmatch(value) else value


def _opening(node: Node) -> Node | None:
    if node.type == "jsx_self_closing_element":
        return node
    if node.type == "jsx_element":
        return next((c for c in node.named_children if c.type == "jsx_opening_element"), None)
    return None


def _is_element(node: Node) -> bool:
    # fragments are jsx_elements whose opening tag has no name
    opening = _opening(node)
    return opening is not None and opening.child_by_field_name("name") is not None


def _body(node: Node) -> list[Node]:
    """Named children between an element's opening and closing tags."""
    if node.type != "jsx_element":
        return []
    return [c for c in node.named_children if c.type not in _TAG_NODES]


def _expression(container: Node) -> Node | None:
    """The expression inside ``{...}``, or ``None`` when it is empty."""
    return next((c for c in container.named_children if c.type != "comment"), None)


class StructuralAnalyzer:
    """Extract UI elements, forms, state and dependencies from one SourceTree."""

    def __init__(self, tree: SourceTree) -> None:
        self.tree = tree
        self._elements: dict[int, UIElement] = {}
        self._schema_rules: dict[int, list[ValidationRule]] = {}

    def analyze(self) -> ComponentAnalysis | None:
        """Return the file's analysis, or ``None`` when it has no markup."""
        jsx_nodes = [node for node in self.tree.nodes if _is_element(node)]
        if not jsx_nodes:
            return None

        state_calls = [node for node in self.tree.nodes if self._is_state_call(node)]
        return ComponentAnalysis(
            file=self.tree.path,
            elements=[self.element(node) for node in jsx_nodes],
            forms=self._forms(jsx_nodes),
            state_count=len(state_calls),
            error_states=self._error_states(state_calls),
            dependencies=Dependencies(
                apis=list(dict.fromkeys(_API_PATH_RE.findall(self.tree.source))),
                components=[
                    spec for spec in self.tree.imports()
                    if not spec.startswith(_LOCAL_IMPORT_PREFIXES)
                ],
            ),
        )

    # ------------------------------------------------------------------
    # Elements
    # ------------------------------------------------------------------

    def element(self, node: Node) -> UIElement:
        """Build (once per node) the UIElement for a JSX element node."""
        cached = self._elements.get(node.id)
        if cached is not None:
            return cached

        tag_name = self._tag_name(node)
        tag = f"<{tag_name} />" if tag_name[:1].isupper() else f"<{tag_name.lower()}>"
        attributes = self._attributes(node)
        values = dict(attributes)
        props = {name: value for name, value in attributes if name and value}

        event_attributes = [name for name, _ in attributes if name.startswith("on")]
        has_events = (
            bool(event_attributes)
            or "onClick" in values
            or "href" in values
            or any(word in tag_name.lower() for word in _INTERACTIVE_TAG_WORDS)
        )
        if event_attributes:
            event_type = event_attributes[0][2:].lower()
        else:
            event_type = "interaction" if has_events else None

        validation: list[ValidationRule] = []
        if any(word in tag_name.lower() for word in _VALIDATED_TAG_WORDS):
            validation = self._validation(node, values)

        element = UIElement(
            tag=tag,
            type=values.get("type"),
            selectors=ElementSelectors(
                test_id=values.get("data-testid"),
                name=values.get("name"),
                label=values.get("aria-label") or self._labelled_by(values.get("aria-labelledby")),
                text=self._inner_text(node),
                role=values.get("role"),
                props=props,
            ),
            validation=validation,
            has_events=has_events,
            event_type=event_type,
            children=[self.element(child) for child in self._child_elements(node)],
        )
        self._elements[node.id] = element
        return element

    def _tag_name(self, node: Node) -> str:
        name = _opening(node).child_by_field_name("name")
        return self.tree.text(name).split("\n")[0].strip()

    def _attributes(self, node: Node) -> list[tuple[str, str | None]]:
        """(name, value) pairs of the element's own attributes; spreads are skipped."""
        pairs: list[tuple[str, str | None]] = []
        for attr in _opening(node).named_children:
            if attr.type != "jsx_attribute":
                continue
            parts = attr.named_children
            value = self._attribute_value(parts[1]) if len(parts) > 1 else None
            pairs.append((self.tree.text(parts[0]), value))
        return pairs

    def _attribute_value(self, value: Node) -> str:
        if value.type == "string":
            return unquote(self.tree.text(value))
        if value.type == "jsx_expression":
            expression = _expression(value)
            if expression is None:
                return ""
            if expression.type == "string":
                return unquote(self.tree.text(expression))
            return self.tree.text(expression)
        return self.tree.text(value)

    def _inner_text(self, node: Node) -> str | None:
        for child in _body(node):
            if child.type == "jsx_text" and self.tree.text(child).strip():
                return " ".join(self.tree.text(child).split())
            if child.type == "jsx_expression":
                expression = _expression(child)
                if expression is not None and expression.type == "string":
                    return unquote(self.tree.text(expression)).strip() or None
        return None

    def _labelled_by(self, label_id: str | None) -> str | None:
        if not label_id:
            return None
        for node in self.tree.nodes:
            if _is_element(node) and dict(self._attributes(node)).get("id") == label_id:
                return self._inner_text(node)
        return None

    def _child_elements(self, node: Node) -> list[Node]:
        """Nearest JSX elements nested in the body, looking through expressions."""
        found: list[Node] = []
        stack = list(reversed(_body(node)))
        while stack:
            current = stack.pop()
            if _is_element(current):
                found.append(current)
                continue
            stack.extend(reversed(self.tree.children(current)))
        return found

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def _validation(self, node: Node, values: dict[str, str | None]) -> list[ValidationRule]:
        rules: list[ValidationRule] = []
        if "required" in values and values["required"] != "false":
            rules.append(ValidationRule(type="required"))
        for attr, kind in (("minLength", "min"), ("min", "min"), ("maxLength", "max"), ("max", "max")):
            if values.get(attr):
                rules.append(ValidationRule(type=kind, value=_coerce(values[attr])))
        if values.get("pattern"):
            rules.append(ValidationRule(type="pattern", value=values["pattern"]))
        rules.extend(self._schema_rules_for(node))
        return rules

    def _schema_rules_for(self, node: Node) -> list[ValidationRule]:
        scope = next(
            (
                ancestor for ancestor in self.tree.ancestors(node)
                if "useForm" in self.tree.text(ancestor)
                or "validationSchema" in self.tree.text(ancestor)
            ),
            None,
        )
        if scope is None:
            return []
        if scope.id not in self._schema_rules:
            text = self.tree.text(scope)
            ref = _SCHEMA_REF_RE.search(text)
            declared = self.tree.variable_init(ref.group(1)) if ref else None
            self._schema_rules[scope.id] = parse_validation_schema(declared or text)
        return list(self._schema_rules[scope.id])

    # ------------------------------------------------------------------
    # Forms
    # ------------------------------------------------------------------

    def _is_form_like(self, node: Node) -> bool:
        return _is_element(node) and (
            "form" in self._tag_name(node).lower()
            or any(name == "onSubmit" for name, _ in self._attributes(node))
        )

    def _form_owner(self, node: Node) -> Node | None:
        """Walk up to the nearest form-like or onSubmit-bearing element."""
        return next((a for a in self.tree.ancestors(node) if self._is_form_like(a)), None)

    def _owner_id(self, node: Node) -> int | None:
        owner = self._form_owner(node)
        return owner.id if owner is not None else None

    def _forms(self, jsx_nodes: list[Node]) -> list[FormInfo]:
        forms: list[FormInfo] = []
        for node in jsx_nodes:
            if "form" not in self._tag_name(node).lower():
                continue
            fields = [
                self.element(d)
                for d in self.tree.descendants(node)
                if _is_element(d)
                and self.element(d).tag in _FIELD_TAGS
                and self._owner_id(d) == node.id
            ]
            forms.append(FormInfo(action=self._form_action(node), fields=fields))
        return forms

    def _form_action(self, node: Node) -> FormAction:
        action = FormAction(handler=dict(self._attributes(node)).get("onSubmit") or "onSubmit")
        text = self.tree.text(node)
        if not any(marker in text for marker in _NETWORK_MARKERS):
            return action

        if m := _API_PATH_RE.search(text):
            action.endpoint = m.group(1)
        if m := _METHOD_RE.search(text):
            action.method = m.group(1).upper()
        elif m := _AXIOS_VERB_RE.search(text):
            action.method = m.group(1).upper()
        return action

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    def _is_state_call(self, node: Node) -> bool:
        if node.type != "call_expression":
            return False
        callee = node.child_by_field_name("function")
        return callee is not None and self.tree.text(callee) in _STATE_CALLEES

    def _error_states(self, state_calls: list[Node]) -> list[str]:
        states: list[str] = []
        for call in state_calls:
            owner = self.tree.parent(call)
            if owner is None or owner.type != "variable_declarator":
                owner = call
            text = self.tree.text(owner)
            if not _ERROR_WORD_RE.search(text):
                continue
            if typed := _STATE_TYPE_RE.search(text):
                states.append(typed.group(1))
                continue
            target = owner.child_by_field_name("name")
            if target is not None and target.type == "array_pattern" and target.named_children:
                first = target.named_children[0]
                if first.type == "identifier":
                    states.append(self.tree.text(first))
        return states


def analyze_source(source: str, path: str = "") -> ComponentAnalysis | None:
    """Parse and analyze source text; raises ``SourceParseError`` on bad syntax."""
    return StructuralAnalyzer(SourceTree(source, path)).analyze()


def analyze_file(path: str | Path) -> ComponentAnalysis | None:
    """Read, parse and analyze one file."""
    return StructuralAnalyzer(SourceTree.from_file(path)).analyze()
