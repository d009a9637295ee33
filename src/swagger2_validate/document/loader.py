"""Swagger 2.0 document loader.

Reads YAML or JSON text into a plain mapping. Structure is not checked
here; see document.meta for that.
"""

import json
from pathlib import Path
from typing import Any

import yaml

from swagger2_validate.errors import DocumentLoadError


def load_document(file_path: Path) -> dict[str, Any]:
    """Load a Swagger document from a YAML or JSON file."""
    file_path = Path(file_path)
    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as e:
        raise DocumentLoadError(str(file_path), e.strerror or str(e)) from e
    return parse_document(text, source=str(file_path))


def parse_document(text: str, source: str = "<string>") -> dict[str, Any]:
    """Parse YAML or JSON text into a document mapping."""
    try:
        doc = yaml.safe_load(text)
    except yaml.YAMLError as yaml_error:
        # JSON with tab indentation is not valid YAML
        try:
            doc = json.loads(text)
        except ValueError:
            raise DocumentLoadError(source, f"not well-formed YAML or JSON ({yaml_error})") from yaml_error

    if not isinstance(doc, dict):
        raise DocumentLoadError(source, "top level is not a mapping")
    return doc
