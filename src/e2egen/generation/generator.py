"""Generation pipeline — discover, prioritize, extract, chunk, prompt, parse, write."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

from rich.markup import escape

from e2egen.exceptions import GenerationError, GenerationRateLimitError
from e2egen.generation.chunker import chunk_budget, chunk_contexts
from e2egen.generation.context import ContextExtractor
from e2egen.generation.prioritizer import prioritize_files
from e2egen.generation.prompts import PromptAssembler
from e2egen.generation.response_parser import parse_artifacts
from e2egen.generation.writer import ArtifactWriter
from e2egen.indexer.framework import detect_framework_for_file
from e2egen.schemas.analysis import FrameworkInfo
from e2egen.schemas.config import GeneratorConfig
from e2egen.schemas.generation import Artifact
from e2egen.shared.discovery import FileDiscoverer
from e2egen.shared.openai_client import TextGenerator

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str], None]
"""Called with a short status message as the run advances."""


class E2EGenerator:
    """Drives one generation run over a codebase.

    Chunks are sent one at a time. A rate-limit failure aborts the run;
    any other failure costs only its own chunk.
    """

    def __init__(
        self,
        config: GeneratorConfig,
        client: TextGenerator,
        writer: ArtifactWriter | None = None,
        on_progress: ProgressCallback | None = None,
        on_event: ProgressCallback | None = None,
    ) -> None:
        self.config = config
        self.client = client
        self.writer = writer or ArtifactWriter(config.output_dir)
        self._on_progress = on_progress
        self._on_event = on_event

    def _progress(self, message: str) -> None:
        if self._on_progress:
            self._on_progress(message)

    def _event(self, message: str, style: str | None = None) -> None:
        """Log ``message`` plainly; only the event callback sees rich markup."""
        logger.info(message)
        if self._on_event:
            self._on_event(f"[{style}]{escape(message)}[/]" if style else message)

    def _framework(self, path: str) -> FrameworkInfo | None:
        try:
            return detect_framework_for_file(path)
        except OSError as exc:
            logger.warning("Framework detection failed for %s: %s", path, exc)
            return None

    def _persist(self, artifacts: list[Artifact]) -> None:
        for result in self.writer.write_all(artifacts):
            if result.ok:
                self._event(f"Wrote {result.filename}")
            else:
                self._event(f"Failed to write {result.filename}: {result.error}", style="red")

    async def generate_tests(self, codebase_dir: str | Path) -> list[Artifact]:
        """Run the whole pipeline and return every artifact parsed from responses.

        Artifacts are written as soon as their chunk is parsed, so a run that
        is aborted by a rate limit keeps what it already produced on disk.
        """
        root = Path(codebase_dir).resolve()

        self._progress("Discovering files…")
        files = FileDiscoverer(root).discover(
            self.config.include_patterns, self.config.exclude_patterns,
        )
        selected = prioritize_files(files, root=root, max_files=self.config.max_files)
        self._event(f"Selected {len(selected)} of {len(files)} files")
        if not selected:
            return []

        self._progress("Extracting context…")
        contexts = ContextExtractor(root).extract(selected)
        if not contexts:
            return []

        framework = self._framework(selected[0])
        chunks = chunk_contexts(contexts, chunk_budget(self.config.max_tokens_per_request))
        assembler = PromptAssembler(contexts, framework)
        system = assembler.system_prompt()
        self._event(f"Split {len(contexts)} files into {len(chunks)} chunk(s)")

        artifacts: list[Artifact] = []
        for index, chunk in enumerate(chunks, 1):
            self._progress(f"Generating chunk {index}/{len(chunks)}…")
            try:
                response = await self.client.generate(system, assembler.user_prompt(chunk, index, len(chunks)))
            except GenerationRateLimitError:
                logger.error("Rate limit exceeded on chunk %d/%d, aborting", index, len(chunks))
                raise
            except GenerationError as exc:
                logger.error("Chunk %d/%d failed: %s", index, len(chunks), exc)
                self._event(f"Chunk {index} failed: {exc}", style="red")
                continue

            parsed = parse_artifacts(response)
            self._event(f"Chunk {index}: {len(parsed)} test file(s)")
            if not parsed and self.config.save_raw_responses:
                self._persist([Artifact(filename=f"raw/chunk-{index}.md", content=response)])
            self._persist(parsed)
            artifacts.extend(parsed)

        return artifacts
