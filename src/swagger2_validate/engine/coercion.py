"""Coerce wire-level strings into the types their parameters declare.

Query, header and path parameters always arrive as strings (or lists of
strings for repeated query keys). They are converted before structural
validation so that `minimum`, `enum`, `maxItems` and friends apply to the
typed value. Strings that do not convert are left alone and the structural
validator reports the type mismatch.
"""

import re
from typing import Any

from swagger2_validate.engine.models import CheckResult, Predicate
from swagger2_validate.engine.schema import build_validator, optional, parameter_schema

NUMBER_PATTERN = re.compile(r"\s*[-+]?(\d+(\.\d*)?|\.\d+)([eE][-+]?\d+)?\s*")
INTEGER_PATTERN = re.compile(r"\s*[-+]?\d+\s*")

COLLECTION_DELIMITERS = {
    "csv": ",",
    "ssv": " ",
    "tsv": "\t",
    "pipes": "|",
}


def to_number(value: Any) -> Any:
    if isinstance(value, str):
        if INTEGER_PATTERN.fullmatch(value):
            return int(value)
        if NUMBER_PATTERN.fullmatch(value):
            number = float(value)
            return int(number) if number.is_integer() else number
    return value


def to_boolean(value: Any) -> Any:
    if value == "true":
        return True
    if value == "false":
        return False
    return value


def wire_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def split_collection(value: Any, collection_format: str | None) -> list[Any]:
    """Split a delimited string into a list according to `collectionFormat`.

    `multi` values arrive as lists already (one entry per repeated key), so
    a lone value is wrapped rather than split. Other scalars are split in
    their wire form, so `5` becomes `["5"]` and `True` becomes `["true"]`.
    """
    if isinstance(value, (list, tuple)):
        return list(value)
    delimiter = COLLECTION_DELIMITERS.get(collection_format or "csv")
    if delimiter is None:
        return [value]
    return wire_text(value).split(delimiter)


def coerce_scalar(value: Any, declared_type: str | None) -> Any:
    if declared_type in ("number", "integer"):
        return to_number(value)
    if declared_type == "boolean":
        return to_boolean(value)
    return value


def coerce(value: Any, schema: dict[str, Any]) -> Any:
    """Convert `value` to the type declared by `schema`, where possible."""
    declared_type = schema.get("type")
    if declared_type != "array":
        return coerce_scalar(value, declared_type)

    items = split_collection(value, schema.get("collectionFormat"))
    item_type = (schema.get("items") or {}).get("type")
    return [coerce_scalar(item, item_type) for item in items]


def string_validator(parameter: dict[str, Any], check_formats: bool = True) -> Predicate:
    """Build the predicate for a query, header or path parameter."""
    structural = build_validator(parameter_schema(parameter), check_formats=check_formats)

    def check(value: Any) -> CheckResult:
        return structural(coerce(value, parameter))

    return optional(check, bool(parameter.get("required")))
