"""Validates live requests and responses against a compiled path.

Both entry points return their findings rather than raising:
- validate_request: list of errors ([] when valid), or None when the path
  or method does not exist
- validate_response: a single error, or None when valid
"""

from typing import Any

from swagger2_validate.engine.models import Check, CompiledPath, ValidationError


def is_empty(value: Any) -> tuple[bool, None]:
    """Accept None, an empty string, an empty collection or a bare scalar.

    Numbers and booleans have no content of their own, so they count as empty.
    """
    if value is None or value == "":
        return True, None
    if isinstance(value, (bool, int, float)):
        return True, None
    if isinstance(value, (dict, list, tuple)):
        return not value, None
    return False, None


EMPTY_BODY = Check(validator=is_empty)

UNDEFINED_PATH = "UNDEFINED_PATH"


def check_value(value: Any, check: Check | None) -> ValidationError | None:
    """Run `check` on `value`, describing the failure if there is one.

    A missing check fails closed: nothing was declared, so nothing passes.
    """
    if check is None:
        return ValidationError(actual=value, expected={"schema": None})

    valid, detail = check.validator(value)
    if valid:
        return None

    expected = {
        key: fact
        for key, fact in (
            ("schema", check.declared_schema),
            ("type", check.type),
            ("format", check.format),
        )
        if fact is not None
    }
    return ValidationError(actual=value, expected=expected or None, error=detail)


def path_value(compiled_path: CompiledPath, name: str, path_parameters: dict[str, Any] | None) -> Any:
    """Find the value of path parameter `name`.

    Explicit parameters win, then the segments captured when the path was
    matched, then the segment at the placeholder's position in the template.
    """
    if path_parameters is not None:
        return path_parameters.get(name)
    if name in compiled_path.captures:
        return compiled_path.captures[name]

    segments = [s for s in (compiled_path.request_path or "").split("/") if s]
    placeholder = "{" + name + "}"
    if placeholder not in compiled_path.expected:
        return None
    index = compiled_path.expected.index(placeholder)
    return segments[index] if index < len(segments) else None


def header_value(headers: dict[str, Any] | None, name: str) -> Any:
    if not headers:
        return None
    if name in headers:
        return headers[name]
    lowered = name.lower()
    for key, value in headers.items():
        if str(key).lower() == lowered:
            return value
    return None


def validate_request(
    compiled_path: CompiledPath | None,
    method: str,
    query: dict[str, Any] | None = None,
    body: Any = None,
    headers: dict[str, Any] | None = None,
    path_parameters: dict[str, Any] | None = None,
) -> list[ValidationError] | None:
    """Validate a request's parameters and body.

    Returns None when the path is unknown (404) or the method is not
    declared for it (405); otherwise the list of errors found.
    """
    if compiled_path is None:
        return None

    operation = compiled_path.operation(method)
    if operation is None:
        return None

    errors: list[ValidationError] = []

    if not operation.resolved_parameters:
        error = check_value(body, EMPTY_BODY)
        if error is not None:
            errors.append(error.model_copy(update={"where": "body"}))
        # nothing was declared, so no query parameter is acceptable
        for key, value in (query or {}).items():
            errors.append(ValidationError(where="query", name=key, actual=value, expected={}))
        return errors

    body_defined = False
    for parameter in operation.resolved_parameters:
        if parameter.location == "query":
            value = (query or {}).get(parameter.name)
        elif parameter.location == "header":
            value = header_value(headers, parameter.name)
        elif parameter.location == "path":
            value = path_value(compiled_path, parameter.name, path_parameters)
        elif parameter.location == "body":
            value = body
            body_defined = True
        elif parameter.location == "formData":
            value = body.get(parameter.name) if isinstance(body, dict) else None
            body_defined = True
        else:
            value = None

        error = check_value(value, parameter)
        if error is not None:
            errors.append(error.model_copy(update={"where": parameter.location, "name": parameter.name}))

    if not body_defined and body is not None:
        error = check_value(body, EMPTY_BODY)
        if error is not None:
            errors.append(error.model_copy(update={"where": "body"}))

    return errors


def validate_response(
    compiled_path: CompiledPath | None,
    method: str,
    status: int | str,
    body: Any = None,
) -> ValidationError | None:
    """Validate a response body against the declared response for `status`.

    Falls back to the `default` response. Returns None when the body is valid.
    """
    if compiled_path is None:
        return ValidationError(actual=UNDEFINED_PATH, expected="PATH")

    operation = compiled_path.operation(method)
    responses = operation.responses if operation is not None else {}
    check = responses.get(str(status))
    if check is None:
        check = responses.get("default")
    return check_value(body, check)
