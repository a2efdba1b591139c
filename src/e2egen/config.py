"""YAML config loader — reads e2egen.yml into GeneratorConfig."""

import os
from pathlib import Path
from typing import Any

import yaml

from e2egen.schemas.config import GeneratorConfig

API_KEY_ENV = "OPENAI_API_KEY"


def load_config(path: str | Path) -> GeneratorConfig:
    """Load and validate a generator config file.

    Raises ``FileNotFoundError`` if the path doesn't exist and
    ``pydantic.ValidationError`` if the YAML content is invalid.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    raw = yaml.safe_load(path.read_text())
    if not isinstance(raw, dict):
        raise ValueError(f"Config file must be a YAML mapping, got {type(raw).__name__}")

    # YAML loads lists with only commented-out items as None; drop them so the
    # model defaults apply. Also strip empty-string or None items from actual lists.
    for key in ("include_patterns", "exclude_patterns"):
        if key in raw:
            if raw[key] is None:
                del raw[key]
            elif isinstance(raw[key], list):
                raw[key] = [item for item in raw[key] if item]

    return GeneratorConfig(**raw)


def build_config(base: GeneratorConfig | None = None, **overrides: Any) -> GeneratorConfig:
    """Apply CLI overrides (``None`` means "not given") on top of a base config."""
    data = (base or GeneratorConfig()).model_dump()
    data["api_key"] = base.api_key if base else ""
    data.update({key: value for key, value in overrides.items() if value not in (None, [])})
    return GeneratorConfig(**data)


def resolve_api_key(config: GeneratorConfig) -> str:
    """Return the API key from the config, falling back to the environment."""
    return config.api_key or os.environ.get(API_KEY_ENV, "")
