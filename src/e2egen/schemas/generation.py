"""Pydantic models flowing through the generation pipeline."""

from pydantic import BaseModel


class CodeContext(BaseModel):
    """A size-bounded view of one source file, ready to be sent to the model."""

    file: str
    summary: str
    exported_items: list[str] = []
    content: str  # sanitized source
    size: int  # len(content), stands in for a token count
    is_component: bool = False


class Artifact(BaseModel):
    """A named output file reconstructed from generated text."""

    filename: str
    content: str


class WriteResult(BaseModel):
    """Outcome of persisting a single artifact."""

    filename: str
    path: str = ""
    error: str = ""

    @property
    def ok(self) -> bool:
        return not self.error
