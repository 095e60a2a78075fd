"""
Generator output parsing and contract enforcement.

WHAT: Extract a JSON object from generated text and validate it against the plan contract
WHY: The generator is an untrusted, non-deterministic text source
HOW: Single-pass brace scanner, json.loads, then discriminant-driven pydantic validation
"""

import json
from typing import Any

from pydantic import ValidationError

from ..models.negotiation import NegotiationPlan, VibeAnalysis
from ..utils.exceptions import ParseError, SchemaError
from ..utils.logger import get_logger

logger = get_logger(__name__)

_VALID_PLAN_FIELDS = ("priceRange", "reasoning", "scripts")
_REJECTED_PLAN_FIELDS = ("reason",)
_VIBE_ANALYSIS_FIELDS = ("vibe", "key_phrases", "strategy_tip", "emoji")


def extract_json_object(text: str) -> str:
    """
    Return the first balanced top-level {...} span in text.

    The scan starts at the first '{' and tracks nesting depth, skipping braces
    inside JSON string literals (with backslash escapes). It visits each
    character at most once, so the worst case is O(len(text)).

    Raises:
        ParseError: no '{' in text, or the first object never closes
    """
    start = text.find("{")
    if start == -1:
        raise ParseError("No JSON object found in generated text")

    depth = 0
    in_string = False
    escaped = False

    for index in range(start, len(text)):
        char = text[index]

        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue

        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[start:index + 1]

    raise ParseError("Unbalanced JSON object in generated text")


def _load_object(text: str, *, structured: bool) -> dict[str, Any]:
    """Decode the JSON document (structured) or the extracted object (free text)."""
    candidate = text.strip() if structured else extract_json_object(text)

    try:
        document = json.loads(candidate)
    except json.JSONDecodeError as e:
        logger.warning(f"Generated text is not valid JSON ({e}): {candidate[:200]!r}")
        raise ParseError(f"Generated JSON does not parse: {e.msg}") from e

    if not isinstance(document, dict):
        raise ParseError(f"Generated JSON is a {type(document).__name__}, expected an object")

    return document


def _missing(document: dict[str, Any], fields: tuple[str, ...]) -> list[str]:
    return [field for field in fields if document.get(field) is None]


def parse_plan(text: str, *, structured: bool) -> NegotiationPlan:
    """
    Parse generated text into a NegotiationPlan.

    Args:
        text: Raw generation output
        structured: True when the provider ran in strict-JSON mode; the whole
            text is then the document. False extracts the first object from prose.

    Raises:
        ParseError: no JSON object, or it does not decode
        SchemaError: isValid missing/non-boolean, or fields required by its value missing/malformed
    """
    document = _load_object(text, structured=structured)

    if "isValid" not in document:
        raise SchemaError("Generated plan lacks the isValid discriminant", missing_fields=["isValid"])

    is_valid = document["isValid"]
    if not isinstance(is_valid, bool):
        raise SchemaError(f"isValid must be a boolean, got {type(is_valid).__name__}")

    required = _VALID_PLAN_FIELDS if is_valid else _REJECTED_PLAN_FIELDS
    missing = _missing(document, required)
    if missing:
        raise SchemaError(
            f"Generated plan with isValid={str(is_valid).lower()} is missing {', '.join(missing)}",
            missing_fields=missing,
        )

    # Only the fields owned by the discriminant value are carried over.
    payload = {"isValid": is_valid, **{field: document[field] for field in required}}

    try:
        return NegotiationPlan.model_validate(payload)
    except ValidationError as e:
        logger.warning(f"Generated plan failed schema validation: {e.errors(include_url=False)}")
        raise SchemaError(f"Generated plan does not match the contract: {e.error_count()} error(s)") from e


def parse_vibe_analysis(text: str) -> VibeAnalysis:
    """
    Parse the live seller-vibe analysis from free text.

    Raises:
        ParseError: no JSON object, or it does not decode
        SchemaError: required analysis fields missing or mistyped
    """
    document = _load_object(text, structured=False)

    missing = _missing(document, _VIBE_ANALYSIS_FIELDS)
    if missing:
        raise SchemaError(f"Vibe analysis is missing {', '.join(missing)}", missing_fields=missing)

    try:
        return VibeAnalysis.model_validate({field: document[field] for field in _VIBE_ANALYSIS_FIELDS})
    except ValidationError as e:
        raise SchemaError(f"Vibe analysis does not match the contract: {e.error_count()} error(s)") from e
