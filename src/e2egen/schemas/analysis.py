"""Pydantic models for the structural UI analysis."""

from typing import Any, Literal

from pydantic import BaseModel, Field


class ValidationRule(BaseModel):
    """A single validation constraint on a form field."""

    type: Literal["required", "min", "max", "pattern", "custom"]
    value: int | str | None = None
    message: str | None = None


class ElementSelectors(BaseModel):
    """Ways a test could locate an element."""

    test_id: str | None = None  # data-testid
    name: str | None = None
    label: str | None = None  # aria-label, or text of the aria-labelledby target
    text: str | None = None
    role: str | None = None
    props: dict[str, str] = {}


class UIElement(BaseModel):
    """One markup element occurrence found in a source file."""

    tag: str  # "<button>" for native tags, "<Button />" for component references
    type: str | None = None
    selectors: ElementSelectors = Field(default_factory=ElementSelectors)
    validation: list[ValidationRule] = []
    has_events: bool = False
    event_type: str | None = None
    children: list["UIElement"] = []


UIElement.model_rebuild()


class FormAction(BaseModel):
    """Where a form submits to."""

    handler: str
    endpoint: str | None = None
    method: str | None = None


class FormInfo(BaseModel):
    """A form candidate and the fields it owns."""

    action: FormAction
    fields: list[UIElement] = []


class Dependencies(BaseModel):
    """External things a component talks to."""

    apis: list[str] = []
    components: list[str] = []


class ComponentAnalysis(BaseModel):
    """Structural analysis of a single source file.

    ``elements`` is a flat log of every element in document order; nested
    elements also appear in their parent's ``children``.
    """

    file: str
    elements: list[UIElement]
    forms: list[FormInfo] = []
    state_count: int = 0
    error_states: list[str] = []
    dependencies: Dependencies = Field(default_factory=Dependencies)


class FrameworkInfo(BaseModel):
    """Advisory classification of a file's UI dialect."""

    type: Literal[
        "reactive-component",
        "template-based",
        "class-annotated",
        "hybrid-template",
        "unknown",
    ] = "unknown"
    component_style: Literal["class", "function", "template"] | None = None
    patterns: dict[str, Any] = {}


class AnalysisSummary(BaseModel):
    """Totals across every analyzed file."""

    total_files: int = 0
    total_elements: int = 0
    total_states: int = 0
    interactive_elements: int = 0


class AnalysisResult(BaseModel):
    """Output of analyzing a whole codebase."""

    components: list[ComponentAnalysis] = []
    framework: FrameworkInfo | None = None
    summary: AnalysisSummary = Field(default_factory=AnalysisSummary)
