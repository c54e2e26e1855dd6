from __future__ import annotations


class TripPipelineError(Exception):
    """Base class for failures that terminate a trip-creation request."""

    kind = "pipeline"


class ValidationError(TripPipelineError):
    kind = "validation"


class ConfigurationError(TripPipelineError):
    kind = "configuration"


class GenerationError(TripPipelineError):
    kind = "generation"


class SchemaError(TripPipelineError):
    kind = "schema"


class PersistenceError(TripPipelineError):
    kind = "persistence"


class ImageSearchError(Exception):
    """Image lookup failed; never fatal to a request."""


class DocumentStoreError(Exception):
    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
