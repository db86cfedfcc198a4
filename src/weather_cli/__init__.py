"""Terminal weather assistant built on OpenAI tool calling."""

from .assistant import TurnResult, TurnState, WeatherAssistant
from .config import Settings
from .weather_client import WeatherClient

__all__ = ["Settings", "TurnResult", "TurnState", "WeatherAssistant", "WeatherClient"]
__version__ = "0.1.0"
