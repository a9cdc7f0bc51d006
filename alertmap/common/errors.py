"""Domain errors and failure typing."""


class PipelineError(Exception):
    """Base class for alert map failures."""

    error_code = "PIPELINE_ERROR"


class ConfigError(PipelineError):
    """Raised for invalid or missing configuration."""

    error_code = "CONFIG_ERROR"


class ValidationError(PipelineError):
    """Raised when caller-supplied parameters are missing or malformed."""

    error_code = "VALIDATION_ERROR"


class UpstreamError(PipelineError):
    """Raised when the alert history source fails; aborts the whole fetch."""

    error_code = "UPSTREAM_ERROR"


class ParseError(PipelineError):
    """Raised for malformed alert, coordinate or apartment data."""

    error_code = "PARSE_ERROR"


class GeocodeError(PipelineError):
    error_code = "GEOCODE_ERROR"
