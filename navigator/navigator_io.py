"""
I/O helpers for schemas and message construction.

PURPOSE: Central place for JSON schema validation and error formatting used by the
         pipeline and the HTTP handler.
CONTEXT: Requests and recommendation sets are checked against the JSON schemas in
         ./schemas so the front-end always receives the same shape.
CREDITS: Original work – no external code reuse.
"""

from __future__ import annotations

import json
import pathlib
from functools import lru_cache
from typing import Any, Dict

from jsonschema import Draft7Validator, ValidationError

# Repository root (the directory that holds ./schemas).
_PROJECT_ROOT = pathlib.Path(__file__).resolve().parent.parent

REQUEST_SCHEMA = "schemas/recommend_request.schema.json"
RESULT_SCHEMA = "schemas/recommendation_set.schema.json"


# -------------------- Schema loading utilities -------------------- #

@lru_cache(maxsize=64)
def _load_schema_cached(abs_path: str) -> Dict[str, Any]:
    """
    Read and parse a JSON schema file, cached per absolute path.

    parameters:
    - abs_path: str – full absolute path to the schema file.

    returns:
    - dict – parsed JSON schema content.
    """
    p = pathlib.Path(abs_path)
    text = p.read_text(encoding="utf-8")
    return json.loads(text)


def load_schema(path: str) -> Dict[str, Any]:
    """
    Load a JSON schema from a relative or absolute path (with caching).

    parameters:
    - path: str – relative or absolute path to schema.

    returns:
    - dict – schema as a Python dictionary.

    raises:
    - FileNotFoundError – if the file cannot be located.
    - json.JSONDecodeError – if the file is not valid JSON.

    notes:
    - Relative paths are tried from the working directory first, then from the
      repository root, so the handler works wherever it is started from.
    """
    p = pathlib.Path(path)
    if not p.exists():
        alt = _PROJECT_ROOT.joinpath(path)
        if not alt.exists():
            raise FileNotFoundError(f"Schema not found at: {path}")
        p = alt
    return _load_schema_cached(str(p.resolve()))


# -------------------- Validation helpers -------------------- #

def validate_with_schema(instance: Dict[str, Any], schema: Dict[str, Any]) -> None:
    """
    Validate a given instance against a provided schema.

    raises:
    - ValidationError – if instance fails to meet schema requirements.
    """
    Draft7Validator(schema).validate(instance)


class InvalidRequest(ValueError):
    """The caller sent a malformed request (maps to HTTP 400)."""


def validate_request(payload: Dict[str, Any]) -> None:
    """
    Validate a recommendation request body.

    raises:
    - InvalidRequest – with a path-qualified message when the body breaks the schema.
    """
    try:
        validate_with_schema(payload, load_schema(REQUEST_SCHEMA))
    except ValidationError as e:
        raise InvalidRequest(error_to_string(e)) from e


def validate_recommendation_set(result: Dict[str, Any]) -> None:
    """Validate the final recommendation set before it leaves the service."""
    validate_with_schema(result, load_schema(RESULT_SCHEMA))


# -------------------- Error formatting -------------------- #

def error_to_string(err: Exception) -> str:
    """
    Convert exceptions into readable strings for user-facing error messages.

    notes:
    - ValidationError messages include a pointer path showing where validation failed.
    """
    if isinstance(err, ValidationError):
        path = "$" + "".join(f"[{repr(p)}]" if isinstance(p, int) else f".{p}" for p in err.path)
        return f"{err.message} at {path}"
    return f"{type(err).__name__}: {err}"


__all__ = [
    "load_schema",
    "validate_with_schema",
    "validate_request",
    "validate_recommendation_set",
    "InvalidRequest",
    "error_to_string",
]
