"""Artifact persistence — atomic writes confined to one output directory."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from e2egen.schemas.generation import Artifact, WriteResult

logger = logging.getLogger(__name__)


class ArtifactWriter:
    """Writes artifacts under ``output_dir``; a failed write never stops the next one."""

    def __init__(self, output_dir: str | Path) -> None:
        self.output_dir = Path(output_dir).resolve()

    def _target(self, filename: str) -> Path:
        target = (self.output_dir / filename).resolve()
        if target == self.output_dir or not target.is_relative_to(self.output_dir):
            raise ValueError(f"Refusing to write outside {self.output_dir}: {filename}")
        return target

    def write(self, artifact: Artifact) -> WriteResult:
        try:
            target = self._target(artifact.filename)
            target.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=target.parent, prefix=".", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    fh.write(artifact.content)
                    if not artifact.content.endswith("\n"):
                        fh.write("\n")
                os.replace(tmp, target)
            except BaseException:
                Path(tmp).unlink(missing_ok=True)
                raise
        except (OSError, ValueError) as exc:
            logger.error("Failed to write %s: %s", artifact.filename, exc)
            return WriteResult(filename=artifact.filename, error=str(exc))

        logger.info("Wrote %s", target)
        return WriteResult(filename=artifact.filename, path=str(target))

    def write_all(self, artifacts: list[Artifact]) -> list[WriteResult]:
        return [self.write(artifact) for artifact in artifacts]
