import dataclasses
import io
from typing import Any, Callable, List, Optional
from unittest.mock import MagicMock

import httpx
import pytest

from weather_cli.config import Settings
from weather_cli.console import Console
from weather_cli.weather_client import WeatherClient


TOKYO_PAYLOAD = {
    "name": "Tokyo",
    "sys": {"country": "JP"},
    "main": {"temp": 18, "feels_like": 17, "humidity": 60},
    "weather": [{"description": "clear sky"}],
    "wind": {"speed": 3},
}


def make_tool_call(name: str, arguments: str, call_id: str = "call_1") -> MagicMock:
    tc = MagicMock()
    tc.id = call_id
    tc.function.name = name
    tc.function.arguments = arguments
    return tc


def make_message(content: Optional[str] = None, tool_calls: Optional[List[Any]] = None) -> MagicMock:
    msg = MagicMock()
    msg.content = content
    msg.tool_calls = tool_calls
    return msg


class FakeLLM:
    """Stands in for the OpenAI client; replies (or raises) from a queue."""

    def __init__(self, *replies: Any):
        self.chat = MagicMock()
        self.chat.completions.create.side_effect = [
            r if isinstance(r, Exception) else self._wrap(r) for r in replies
        ]

    @staticmethod
    def _wrap(message: Any) -> MagicMock:
        resp = MagicMock()
        resp.choices = [MagicMock(message=message)]
        return resp

    @property
    def calls(self):
        return self.chat.completions.create.call_args_list


@pytest.fixture
def settings() -> Settings:
    return Settings(openai_api_key="sk-test", weather_api_key="wk-test", model="test-model")


@pytest.fixture
def console() -> Console:
    return Console(stream=io.StringIO(), color=False)


@pytest.fixture
def weather_requests() -> List[httpx.Request]:
    return []


@pytest.fixture
def weather_factory(settings, weather_requests) -> Callable[..., WeatherClient]:
    """Build a WeatherClient whose HTTP calls are answered by ``handler``."""

    def build(handler: Optional[Callable[[httpx.Request], httpx.Response]] = None, **overrides: Any) -> WeatherClient:
        handler = handler or (lambda request: httpx.Response(200, json=TOKYO_PAYLOAD))

        def record(request: httpx.Request) -> httpx.Response:
            weather_requests.append(request)
            return handler(request)

        cfg = dataclasses.replace(settings, **overrides)
        return WeatherClient(cfg, http=httpx.Client(transport=httpx.MockTransport(record)))

    return build
