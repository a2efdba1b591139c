"""Markdown report builder — renders an AnalysisResult for humans."""

from __future__ import annotations

from e2egen.schemas.analysis import AnalysisResult, ComponentAnalysis, UIElement


def _describe_element(element: UIElement) -> str:
    sel = element.selectors
    parts = [f"`{element.tag}`"]
    if element.type:
        parts.append(f"type={element.type}")
    if sel.test_id:
        parts.append(f"test id `{sel.test_id}`")
    if sel.role:
        parts.append(f"role={sel.role}")
    if sel.label:
        parts.append(f'label "{sel.label}"')
    if sel.text:
        parts.append(f'"{sel.text}"')
    if element.has_events:
        parts.append(f"⚡ {element.event_type}")
    return " ".join(parts)


def _render_component(component: ComponentAnalysis) -> list[str]:
    sections = [f"### {component.file}\n"]
    sections.append(
        f"- **Elements:** {len(component.elements)} | **State hooks:** {component.state_count}"
        f" | **Forms:** {len(component.forms)}"
    )
    if component.error_states:
        sections.append(f"- **Error states:** {', '.join(component.error_states)}")
    if component.dependencies.apis:
        sections.append(f"- **APIs:** {', '.join(component.dependencies.apis)}")
    if component.dependencies.components:
        sections.append(f"- **Imports:** {', '.join(component.dependencies.components)}")
    sections.append("")

    interactive = [e for e in component.elements if e.has_events]
    if interactive:
        sections.append("**Interactive elements:**")
        for element in interactive:
            sections.append(f"- {_describe_element(element)}")
        sections.append("")

    for i, form in enumerate(component.forms, 1):
        action = form.action
        target = f" → {action.method or 'POST'} {action.endpoint}" if action.endpoint else ""
        sections.append(f"**Form {i}** (handler `{action.handler}`{target})")
        for field in form.fields:
            rules = ", ".join(
                f"{rule.type}={rule.value}" if rule.value is not None else rule.type
                for rule in field.validation
            )
            name = field.selectors.name or field.selectors.test_id or field.tag
            sections.append(f"- `{name}`" + (f": {rules}" if rules else ""))
        sections.append("")
    return sections


def render_analysis_report(result: AnalysisResult) -> str:
    """Render an AnalysisResult into a Markdown string."""
    sections: list[str] = ["# UI Analysis Report\n"]

    summary = result.summary
    sections.append("## Summary\n")
    sections.append(f"- **Files with UI:** {summary.total_files}")
    sections.append(f"- **Elements:** {summary.total_elements}")
    sections.append(f"- **Interactive elements:** {summary.interactive_elements}")
    sections.append(f"- **State hooks:** {summary.total_states}")
    if result.framework:
        style = f" ({result.framework.component_style})" if result.framework.component_style else ""
        sections.append(f"- **Framework:** {result.framework.type}{style}")
    sections.append("")

    if result.components:
        sections.append("## Components\n")
        for component in result.components:
            sections.extend(_render_component(component))
    else:
        sections.append("*No UI elements found.*\n")

    return "\n".join(sections)
