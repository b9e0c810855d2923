"""JSON parsing utilities for classifier responses.

Contains:
- parse_json_response: Parse a raw LLM response as a JSON object
"""

import json

from hunksplit.llm.exceptions import JSONParseError


def parse_json_response(raw_response: str) -> dict:
    """Parse the LLM response as JSON.

    Args:
        raw_response: The raw text response from the LLM.

    Returns:
        The parsed JSON as a dictionary.

    Raises:
        JSONParseError: If parsing fails or the result is not an object.
    """
    cleaned = (raw_response or "").strip()

    # Models sometimes wrap the JSON in markdown fences despite instructions
    if cleaned.startswith("```"):
        lines = cleaned.split("\n")
        lines = lines[1:]
        if lines and lines[-1].strip() == "```":
            lines = lines[:-1]
        cleaned = "\n".join(lines)

    # Keep only the outermost object if there is chatter around it
    first_brace = cleaned.find("{")
    last_brace = cleaned.rfind("}")

    if first_brace != -1 and last_brace != -1 and last_brace > first_brace:
        cleaned = cleaned[first_brace:last_brace + 1]

    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise JSONParseError(
            f"Failed to parse LLM response as JSON.\n"
            f"Error: {e}\n"
            f"Raw response:\n{raw_response}"
        )

    if not isinstance(parsed, dict):
        raise JSONParseError(
            f"Expected a JSON object, got {type(parsed).__name__}.\n"
            f"Raw response:\n{raw_response}"
        )
    return parsed
