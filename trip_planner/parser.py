from __future__ import annotations

import json
import re
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from trip_planner.errors import SchemaError
from trip_planner.schemas import TripPlan


# ```json\n ... \n```  with an optional (possibly space-led) language tag; both markers required.
_FENCE = re.compile(r"\A```[ \t]*[\w+-]*[ \t]*\n?(?P<body>.*?)\n?[ \t]*```\Z", re.DOTALL)


def strip_fence(text: str) -> str:
    """Remove a markdown code fence that wraps the whole text.

    Only a clearly delimited fence is stripped: an opening marker without a
    closing one (or the reverse) leaves the text unchanged apart from the
    surrounding whitespace.
    """
    stripped = text.strip()
    match = _FENCE.match(stripped)
    if match is None:
        return stripped
    return match.group("body").strip()


def decode_json(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise SchemaError(f"Invalid trip data from model: {exc.msg}") from exc


def parse_trip_plan(raw_text: str) -> TripPlan:
    data = decode_json(strip_fence(raw_text))
    if not isinstance(data, dict):
        raise SchemaError("Invalid trip data structure from model")
    if not data.get("name") or data.get("itinerary") is None:
        raise SchemaError("Invalid trip data structure from model")
    try:
        return TripPlan.model_validate(data)
    except PydanticValidationError as exc:
        raise SchemaError(f"Invalid trip data structure from model: {exc.error_count()} errors") from exc
