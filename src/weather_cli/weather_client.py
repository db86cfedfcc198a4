"""OpenWeatherMap current-weather client returning normalized records."""

from __future__ import annotations
from typing import Any, Dict, Optional
import httpx

from .config import Settings
from .errors import WeatherError
from .logger import get_logger

logger = get_logger(__name__)

CELSIUS = "celsius"
FAHRENHEIT = "fahrenheit"
UNITS = (CELSIUS, FAHRENHEIT)

# unit -> (OpenWeatherMap "units" value, temperature suffix, wind suffix)
_UNIT_TABLE = {
    CELSIUS: ("metric", "°C", "m/s"),
    FAHRENHEIT: ("imperial", "°F", "mph"),
}

MISSING_KEY_MESSAGE = "WEATHER_API_KEY is not set in .env file"


def _number(value: Any) -> Any:
    """18.0 -> 18; the provider sends whole numbers as floats at times."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def normalize_unit(unit: Any) -> str:
    if isinstance(unit, str) and unit.strip().lower() in UNITS:
        return unit.strip().lower()
    return CELSIUS


def normalize_weather(data: Dict[str, Any], unit: str = CELSIUS) -> Dict[str, str]:
    """Flatten a provider payload into the display record.

    Raises ``WeatherError`` when the payload lacks the expected fields.
    """
    _, temp_suffix, wind_suffix = _UNIT_TABLE[normalize_unit(unit)]
    try:
        main = data["main"]
        return {
            "location": f"{data['name']}, {data['sys']['country']}",
            "temperature": f"{_number(main['temp'])}{temp_suffix}",
            "description": data["weather"][0]["description"],
            "feels_like": f"{_number(main['feels_like'])}{temp_suffix}",
            "humidity": f"{_number(main['humidity'])}%",
            "wind_speed": f"{_number(data['wind']['speed'])} {wind_suffix}",
        }
    except (KeyError, IndexError, TypeError) as e:
        raise WeatherError(f"Unexpected weather API response: missing {e}") from e


class WeatherClient:
    def __init__(self, settings: Settings, http: Optional[httpx.Client] = None):
        self.api_key = settings.weather_api_key
        self.base_url = settings.weather_base_url.rstrip("/")
        self.http = http or httpx.Client(timeout=settings.http_timeout)

    def close(self) -> None:
        self.http.close()

    def __enter__(self) -> "WeatherClient":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def lookup(self, location: Any, unit: Any = CELSIUS) -> Dict[str, str]:
        """Current weather for ``location``; failures come back as ``{"error": ...}``."""
        unit = normalize_unit(unit)
        try:
            if not self.api_key:
                raise WeatherError(MISSING_KEY_MESSAGE)
            if not isinstance(location, str) or not location.strip():
                raise WeatherError("A location is required to look up the weather")
            data = self._get("weather", {"q": location.strip(), "units": _UNIT_TABLE[unit][0]})
            return normalize_weather(data, unit)
        except WeatherError as e:
            logger.warning("weather_lookup_failed", location=repr(location), unit=unit, error=str(e))
            return {"error": str(e)}

    def _get(self, path: str, params: Dict[str, Any]) -> Dict[str, Any]:
        try:
            r = self.http.get(f"{self.base_url}/{path}", params={**params, "appid": self.api_key})
        except httpx.HTTPError as e:
            raise WeatherError(f"Network error contacting weather API: {e}") from e
        except UnicodeError as e:
            raise WeatherError(f"Invalid location: {getattr(e, 'reason', e)}") from e

        if r.status_code < 200 or r.status_code >= 300:
            raise WeatherError(f"Weather API error: {r.status_code} {r.reason_phrase}".rstrip())

        try:
            doc = r.json()
        except ValueError as e:
            raise WeatherError(f"Invalid JSON from weather API: {e}") from e
        if not isinstance(doc, dict):
            raise WeatherError("Unexpected weather API response: body is not a JSON object")
        return doc
