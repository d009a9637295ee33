"""Structural (JSON Schema) predicates for Swagger 2.0 schemas.

Swagger 2.0 schemas are a Draft 4 dialect, so predicates are built on
jsonschema's Draft4Validator. A predicate never raises: an invalid schema
or a reference that cannot be followed makes it fail closed.
"""

from typing import Any

from jsonschema import Draft4Validator, FormatChecker
from jsonschema.exceptions import SchemaError
from referencing.exceptions import Unresolvable

from swagger2_validate.engine.models import CheckResult, Predicate

# Keys that describe a parameter rather than the value it carries
PARAMETER_KEYS = {"name", "in", "required", "description", "collectionFormat", "allowEmptyValue"}


def parameter_schema(parameter: dict[str, Any]) -> dict[str, Any]:
    """Strip parameter-only keys so the rest can be used as a schema."""
    return {
        key: value
        for key, value in parameter.items()
        if key not in PARAMETER_KEYS and not key.startswith("x-")
    }


def error_location(error) -> str:
    return ".".join(["data", *(str(p) for p in error.absolute_path)])


def build_validator(
    schema: dict[str, Any],
    definitions: dict[str, Any] | None = None,
    check_formats: bool = True,
) -> Predicate:
    """Build a predicate checking values against `schema`.

    `definitions` is made available to `#/definitions/...` pointers left in
    the schema by the dereferencer (recursive models).
    """
    if not isinstance(schema, dict):
        reason = f"schema is not an object: {schema!r}"
        return lambda value: (False, reason)

    try:
        Draft4Validator.check_schema(schema)
    except SchemaError as e:
        reason = f"invalid schema: {e.message}"
        return lambda value: (False, reason)

    root = schema
    if definitions and "definitions" not in schema:
        root = {**schema, "definitions": definitions}
    validator = Draft4Validator(root, format_checker=FormatChecker() if check_formats else None)

    def check(value: Any) -> CheckResult:
        try:
            errors = sorted(validator.iter_errors(value), key=lambda e: list(map(str, e.absolute_path)))
        except Unresolvable as e:
            return False, f"unresolvable reference: {e}"
        if not errors:
            return True, None
        return False, "\n".join(f"{error_location(e)}: {e.message}" for e in errors)

    return check


def optional(predicate: Predicate, required: bool) -> Predicate:
    """Wrap `predicate` so an absent value (None) passes unless required."""

    def check(value: Any) -> CheckResult:
        if value is None:
            if required:
                return False, None
            return True, None
        return predicate(value)

    return check
