"""Exceptions raised outside the request/response validation path.

Validation itself never raises: problems with traffic or with a compiled
document come back as ValidationError values.
"""


class Swagger2ValidateError(Exception):
    """Base class for errors raised by swagger2-validate."""


class DocumentLoadError(Swagger2ValidateError):
    """Raised when a document cannot be read or is not a mapping."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"{source}: {reason}")
