"""Expand internal `$ref` pointers of a Swagger document.

Handles:
- References anywhere in the document (`#/definitions/...`,
  `#/parameters/...`, `#/responses/...`)
- Chained references (a definition that is itself a `$ref`)
- Recursive definitions: expanded once, then left as a `$ref` pointer
- Unresolvable and external references: left in place, logged
"""

import logging
from typing import Any

from referencing import Registry, Resource
from referencing.exceptions import Unresolvable
from referencing.jsonschema import DRAFT4

logger = logging.getLogger(__name__)

DOCUMENT_URI = "urn:swagger2-validate:document"


def dereference(document: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of `document` with its internal `$ref`s inlined.

    The input is not modified. Each inlined target is a fresh copy, so the
    result shares no mutable state with the input.
    """
    resource = Resource.from_contents(document, default_specification=DRAFT4)
    resolver = Registry().with_resource(DOCUMENT_URI, resource).resolver(base_uri=DOCUMENT_URI)

    def expand(node: Any, seen: frozenset[str]) -> Any:
        if isinstance(node, list):
            return [expand(item, seen) for item in node]
        if not isinstance(node, dict):
            return node

        ref = node.get("$ref")
        if not isinstance(ref, str):
            return {key: expand(value, seen) for key, value in node.items()}

        if not ref.startswith("#"):
            logger.warning("External reference %s left unresolved", ref)
            return dict(node)
        if ref in seen:
            return dict(node)
        try:
            target = resolver.lookup(ref).contents
        except Unresolvable:
            logger.warning("Reference %s does not resolve", ref)
            return dict(node)
        return expand(target, seen | {ref})

    return expand(document, frozenset())
