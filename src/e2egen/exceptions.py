"""Custom exception classes for e2egen."""


class E2EGenError(Exception):
    """Base exception for e2egen errors."""

    def __init__(self, message: str, code: str = "internal", detail: str = ""):
        self.message = message
        self.code = code
        self.detail = detail
        super().__init__(message)


class ConfigurationError(E2EGenError):
    """The run cannot start with the given configuration."""

    def __init__(self, message: str, detail: str = ""):
        super().__init__(message, code="config", detail=detail)


class DiscoveryError(E2EGenError):
    """An include or exclude pattern could not be compiled."""

    def __init__(self, message: str, detail: str = ""):
        super().__init__(message, code="discovery", detail=detail)


class SourceParseError(E2EGenError):
    """A source file could not be parsed into a syntax tree."""

    def __init__(self, message: str, detail: str = ""):
        super().__init__(message, code="parse", detail=detail)


class GenerationError(E2EGenError):
    """A request to the text-generation service failed."""

    def __init__(self, message: str, code: str = "generation", detail: str = ""):
        super().__init__(message, code=code, detail=detail)


class GenerationRateLimitError(GenerationError):
    """Rate limit still exceeded after retrying."""

    def __init__(self, message: str = "Rate limit exceeded", detail: str = ""):
        super().__init__(message, code="rate_limit", detail=detail)
