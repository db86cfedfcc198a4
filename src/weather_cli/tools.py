"""The get_weather tool as the model sees it, plus argument parsing."""

from __future__ import annotations
import json
from dataclasses import dataclass
from typing import Any, Dict, List

from .errors import ToolArgumentError
from .weather_client import CELSIUS, UNITS, normalize_unit

GET_WEATHER = "get_weather"

WEATHER_TOOLS: List[Dict[str, Any]] = [
    {
        "type": "function",
        "function": {
            "name": GET_WEATHER,
            "description": "Get the current weather for a location",
            "parameters": {
                "type": "object",
                "properties": {
                    "location": {
                        "type": "string",
                        "description": "The city and state, e.g. San Francisco, CA or Paris, France",
                    },
                    "unit": {
                        "type": "string",
                        "enum": list(UNITS),
                        "description": "The unit of temperature to return",
                    },
                },
                "required": ["location"],
            },
        },
    }
]


@dataclass
class WeatherQueryArgs:
    location: str
    unit: str = CELSIUS


def parse_weather_args(raw: Any) -> WeatherQueryArgs:
    """Decode a tool call's ``arguments`` string.

    Only the JSON shape is checked here; an empty location is left for the
    weather lookup to report.
    """
    try:
        args = json.loads(raw or "{}")
    except (TypeError, json.JSONDecodeError) as e:
        raise ToolArgumentError(f"Bad tool args: {e}") from e
    if not isinstance(args, dict):
        raise ToolArgumentError(f"Bad tool args: expected a JSON object, got {type(args).__name__}")

    location = args.get("location")
    return WeatherQueryArgs(
        location=location.strip() if isinstance(location, str) else "",
        unit=normalize_unit(args.get("unit")),
    )
