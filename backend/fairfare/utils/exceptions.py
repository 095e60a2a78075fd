"""
Pipeline exception taxonomy.

WHAT: Domain-specific exceptions raised inside the negotiation pipeline
WHY: Distinguish programming, upstream, parse and schema failures from a rejected item
HOW: Small exception hierarchy carrying an error code and optional details
"""

from typing import Optional, Any


class PipelineError(Exception):
    """Base class for negotiation pipeline failures."""

    code = "PIPELINE_ERROR"

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ConfigurationError(PipelineError):
    """Raised when a persona (vibe) has no entry in the persona table."""

    code = "CONFIGURATION_ERROR"


class UpstreamError(PipelineError):
    """Raised when the text-generation provider fails, times out or answers non-2xx."""

    code = "UPSTREAM_ERROR"


class ParseError(PipelineError):
    """Raised when no JSON object can be extracted from generated text."""

    code = "PARSE_ERROR"


class SchemaError(PipelineError):
    """Raised when parsed JSON lacks the discriminant or the fields it requires."""

    code = "SCHEMA_ERROR"

    def __init__(self, message: str, missing_fields: Optional[list[str]] = None):
        super().__init__(
            message,
            details={"missing_fields": missing_fields} if missing_fields else None
        )
        self.missing_fields = missing_fields or []
