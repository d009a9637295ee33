"""Compiled document models and validation results.

The compiler produces these from a dereferenced Swagger document; the
validator consumes them. Nothing here points back into the caller's
document object, so compiled models can be shared freely.
"""

import re
from typing import Any, Callable

from pydantic import BaseModel, ConfigDict

# (valid, detail) pair returned by every compiled predicate
CheckResult = tuple[bool, str | None]
Predicate = Callable[[Any], CheckResult]


class Check(BaseModel):
    """A predicate plus the schema facts reported when it fails."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    validator: Predicate
    declared_schema: Any = None  # reported as expected["schema"]
    type: str | None = None
    format: str | None = None


class CompiledParameter(Check):
    """One resolved parameter of an operation."""

    name: str
    location: str  # query / path / header / body / formData
    required: bool = False
    definition: dict[str, Any]


class CompiledResponse(Check):
    """The declared response for one status code (or `default`)."""

    status: str


class CompiledOperation(BaseModel):
    """One method under one path template, with its compiled checks."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    method: str
    definition: dict[str, Any]
    resolved_parameters: list[CompiledParameter]
    responses: dict[str, CompiledResponse]


class CompiledPath(BaseModel):
    """A path template compiled into a matcher, plus its operations."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str  # template, e.g. /pets/{petId}
    regex: re.Pattern
    path: dict[str, Any]
    expected: list[str]
    base_path: str = ""
    operations: dict[str, CompiledOperation] = {}
    placeholders: dict[str, str] = {}  # regex group -> template placeholder name
    request_path: str | None = None
    captures: dict[str, str] = {}

    def operation(self, method: str) -> CompiledOperation | None:
        return self.operations.get(method.lower())


class ValidationError(BaseModel):
    """A single request or response validation failure."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    where: str | None = None  # query / path / header / body / formData
    name: str | None = None
    actual: Any = None
    expected: Any = None
    error: Any = None

    def to_dict(self) -> dict[str, Any]:
        """Render the error as reported: actual/expected always, the rest when set.

        Parameter errors always carry `name`, for body and formData as well as
        query, header and path, so a finding can be traced to its parameter.
        """
        data: dict[str, Any] = {}
        if self.where is not None:
            data["where"] = self.where
        if self.name is not None:
            data["name"] = self.name
        data["actual"] = self.actual
        data["expected"] = self.expected
        if self.error is not None:
            data["error"] = self.error
        return data
