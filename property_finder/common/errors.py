"""Domain errors and failure typing."""


class PipelineError(Exception):
    """Base class for pipeline failures."""

    error_code = "PIPELINE_ERROR"


class ConfigError(PipelineError):
    """Raised for invalid or missing configuration."""

    error_code = "CONFIG_ERROR"


class DatasetError(PipelineError):
    """Raised when the persisted suburb dataset cannot be read or parsed."""

    error_code = "DATASET_ERROR"


class StageError(PipelineError):
    """Raised for stage failures that should halt in strict mode."""

    error_code = "STAGE_ERROR"


class ValidationError(PipelineError):
    """Raised for malformed caller input, before any external call."""

    error_code = "VALIDATION_ERROR"


class UpstreamUnavailable(StageError):
    """Non-2xx status, network failure or timeout talking to an upstream."""

    error_code = "UPSTREAM_UNAVAILABLE"

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RetryableUpstreamError(UpstreamUnavailable):
    pass


class UpstreamDegraded(StageError):
    """The transport succeeded but the body was not the structured data we asked for."""

    error_code = "UPSTREAM_DEGRADED"


class BlockedOrChallenged(StageError):
    """A listing site answered with an anti-automation page."""

    error_code = "BLOCKED_OR_CHALLENGED"

    def __init__(self, message: str, *, suggested_suburb: str | None = None, guidance: str | None = None) -> None:
        super().__init__(message)
        self.suggested_suburb = suggested_suburb
        self.guidance = guidance
