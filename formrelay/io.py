"""Loading raw requests and collaborator fixtures from JSON files."""

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from formrelay.input.request import RawRequest


def parse_request(data: Any, source: str = "request") -> RawRequest:
    """Validate decoded JSON as a RawRequest.

    Raises:
        ValueError: If the data does not describe a request.
    """
    try:
        return RawRequest.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Invalid {source}: {e.error_count()} validation errors") from e


def load_request(path: Path | str) -> RawRequest:
    """Load a single request from a JSON file.

    Raises:
        ValueError: If the file is not valid JSON or not a request.
    """
    with open(path) as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e
    return parse_request(data, source=str(path))


def load_json_mapping(path: Path | str) -> dict[str, Any]:
    """Load a JSON object file (form details, settings fixtures).

    Raises:
        ValueError: If the file does not hold a JSON object.
    """
    with open(path) as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object in {path}")
    return data
