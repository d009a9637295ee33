"""Meta-schema validation of Swagger 2.0 documents."""

import logging
from typing import Any

from openapi_spec_validator import OpenAPIV2SpecValidator

logger = logging.getLogger(__name__)


def document_errors(raw: Any) -> list[str]:
    """Return the reasons `raw` is not a valid Swagger 2.0 document.

    An empty list means the document is valid.
    """
    if not isinstance(raw, dict):
        return ["document is not a mapping"]
    if raw.get("swagger") != "2.0":
        return [f"unsupported swagger version: {raw.get('swagger')!r}"]

    errors = []
    for error in OpenAPIV2SpecValidator(raw).iter_errors():
        location = "/".join(str(p) for p in getattr(error, "absolute_path", []))
        message = getattr(error, "message", str(error))
        errors.append(f"{location}: {message}" if location else message)
    return errors


def validate_document(raw: Any) -> dict[str, Any] | None:
    """Return `raw` if it is a valid Swagger 2.0 document, else None."""
    errors = document_errors(raw)
    if errors:
        for message in errors:
            logger.warning("Invalid Swagger document: %s", message)
        return None
    return raw
