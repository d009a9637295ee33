"""Compile a Swagger 2.0 document into a path matcher with validators.

Compilation is done once per document. The result is a CompiledDocument:
call it with a concrete request path to get the CompiledPath describing
the template it matches, or None when the path is not routable.
"""

import logging
import re
from typing import Any

from swagger2_validate.config import Settings
from swagger2_validate.document.deref import dereference
from swagger2_validate.engine.coercion import string_validator
from swagger2_validate.engine.models import (
    CheckResult,
    CompiledOperation,
    CompiledParameter,
    CompiledPath,
    CompiledResponse,
)
from swagger2_validate.engine.schema import build_validator, optional, parameter_schema

logger = logging.getLogger(__name__)

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch")
STRING_LOCATIONS = ("query", "header", "path")

PLACEHOLDER = re.compile(r"\{([^}]*)\}")


class CompiledDocument:
    """Routes concrete request paths to their compiled path templates."""

    def __init__(self, base_path: str, paths: list[CompiledPath]):
        self.base_path = base_path
        self.paths = paths

    @property
    def templates(self) -> list[str]:
        return [compiled.name for compiled in self.paths]

    def __call__(self, path: str) -> CompiledPath | None:
        matches = []
        for compiled in self.paths:
            match = compiled.regex.fullmatch(path)
            if match:
                matches.append((compiled, match))

        # a path matching several templates is as unroutable as one matching none
        if len(matches) != 1:
            if matches:
                logger.debug(
                    "Path %s is ambiguous between %s",
                    path,
                    ", ".join(compiled.name for compiled, _ in matches),
                )
            return None

        compiled, match = matches[0]
        captures = {compiled.placeholders[group]: value for group, value in match.groupdict().items()}
        return compiled.model_copy(
            update={"request_path": path[len(self.base_path):], "captures": captures}
        )


def compile_document(document: dict[str, Any], settings: Settings | None = None) -> CompiledDocument:
    """Compile a (meta-validated) Swagger document.

    The document is dereferenced first; the caller's object is left as is.
    """
    settings = settings or Settings.from_env()
    swagger = dereference(document)
    definitions = swagger.get("definitions") or {}
    base_path = (swagger.get("basePath") or "").rstrip("/")

    compiled_paths = []
    for name, path_item in (swagger.get("paths") or {}).items():
        if not isinstance(path_item, dict) or not name.startswith("/"):
            continue
        operations = {
            method: _compile_operation(method, path_item, path_item[method], definitions, settings)
            for method in HTTP_METHODS
            if isinstance(path_item.get(method), dict)
        }
        compiled_paths.append(_compile_path(name, path_item, base_path, operations))

    logger.debug("Compiled %d path templates under %r", len(compiled_paths), base_path)
    return CompiledDocument(base_path, compiled_paths)


def path_regex(base_path: str, template: str) -> tuple[re.Pattern, dict[str, str]]:
    """Build the matcher for `template`, returning it with its group names.

    Each `{placeholder}` becomes a named group matching one path segment.
    Group names are generated since placeholder names need not be valid
    Python identifiers.
    """
    placeholders: dict[str, str] = {}
    parts = ["^", re.escape(base_path)]
    position = 0
    for match in PLACEHOLDER.finditer(template):
        group = f"p{len(placeholders)}"
        placeholders[group] = match.group(1)
        parts.append(re.escape(template[position:match.start()]))
        parts.append(f"(?P<{group}>[^/]+)")
        position = match.end()
    parts.append(re.escape(template[position:]))
    parts.append("/?$")
    return re.compile("".join(parts)), placeholders


def resolve_parameters(path_item: dict[str, Any], operation: dict[str, Any]) -> list[dict[str, Any]]:
    """Merge path-level and operation-level parameters.

    Operation-level entries replace path-level ones with the same name and
    location, keeping the position of the first one seen.
    """
    parameters: dict[tuple[Any, Any], dict[str, Any]] = {}
    for parameter in [*(path_item.get("parameters") or []), *(operation.get("parameters") or [])]:
        if isinstance(parameter, dict):
            parameters[(parameter.get("name"), parameter.get("in"))] = parameter
    return list(parameters.values())


def _compile_path(
    name: str,
    path_item: dict[str, Any],
    base_path: str,
    operations: dict[str, CompiledOperation],
) -> CompiledPath:
    regex, placeholders = path_regex(base_path, name)
    return CompiledPath(
        name=name,
        regex=regex,
        path=path_item,
        expected=[segment for segment in name.split("/") if segment],
        base_path=base_path,
        operations=operations,
        placeholders=placeholders,
    )


def _compile_operation(
    method: str,
    path_item: dict[str, Any],
    operation: dict[str, Any],
    definitions: dict[str, Any],
    settings: Settings,
) -> CompiledOperation:
    parameters = [
        _compile_parameter(parameter, definitions, settings)
        for parameter in resolve_parameters(path_item, operation)
    ]
    responses = {
        str(status): _compile_response(str(status), response, definitions, settings)
        for status, response in (operation.get("responses") or {}).items()
        if isinstance(response, dict)
    }
    return CompiledOperation(
        method=method,
        definition=operation,
        resolved_parameters=parameters,
        responses=responses,
    )


def _compile_parameter(
    parameter: dict[str, Any],
    definitions: dict[str, Any],
    settings: Settings,
) -> CompiledParameter:
    location = parameter.get("in")
    required = bool(parameter.get("required"))

    if location in STRING_LOCATIONS:
        validator = string_validator(parameter, check_formats=settings.check_formats)
    else:
        schema = parameter.get("schema") or parameter_schema(parameter)
        structural = build_validator(schema, definitions, check_formats=settings.check_formats)
        validator = optional(structural, required)

    return CompiledParameter(
        name=str(parameter.get("name")),
        location=str(location),
        required=required,
        definition=parameter,
        validator=validator,
        declared_schema=parameter.get("schema"),
        type=parameter.get("type"),
        format=parameter.get("format"),
    )


def no_body(body: Any) -> CheckResult:
    """Accept only an absent body: no schema declared means no content."""
    return (body is None or body == ""), None


def _compile_response(
    status: str,
    response: dict[str, Any],
    definitions: dict[str, Any],
    settings: Settings,
) -> CompiledResponse:
    schema = response.get("schema")
    if schema is not None:
        validator = build_validator(schema, definitions, check_formats=settings.check_formats)
    else:
        validator = no_body

    return CompiledResponse(
        status=status,
        validator=validator,
        declared_schema=schema,
        type=response.get("type"),
        format=response.get("format"),
    )
