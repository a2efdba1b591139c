"""Configuration schema — validates e2egen.yml and CLI overrides."""

from pydantic import BaseModel, Field, field_validator


class GeneratorConfig(BaseModel):
    """Settings for a test-generation run.

    Loaded from YAML by ``e2egen.config.load_config`` and/or assembled from
    CLI flags. ``api_key`` is never serialized.
    """

    # Output
    output_dir: str = "./playwright-tests"

    # File selection
    include_patterns: list[str] = ["src/**/*.{js,jsx,ts,tsx}"]
    exclude_patterns: list[str] = ["**/*.test.{js,jsx,ts,tsx}", "**/node_modules/**"]
    max_files: int = Field(default=30, le=30)

    # Model
    model: str = "gpt-4o"
    max_tokens_per_request: int = 8000  # drives the per-chunk character budget
    api_key: str = Field(default="", repr=False, exclude=True)

    # Persist the raw response when a chunk yields no parseable artifacts
    save_raw_responses: bool = False

    @field_validator("max_tokens_per_request", "max_files")
    @classmethod
    def check_positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("must be a positive integer")
        return value

    @field_validator("include_patterns")
    @classmethod
    def check_has_include(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("At least one include pattern is required")
        return value
