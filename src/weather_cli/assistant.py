"""One question in, one answer out: the two-pass OpenAI tool-calling turn."""

from __future__ import annotations
import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from openai import OpenAIError

from .config import Settings, build_openai_client
from .console import Console
from .logger import get_logger
from .tools import GET_WEATHER, WEATHER_TOOLS, WeatherQueryArgs, parse_weather_args
from .weather_client import WeatherClient

logger = get_logger(__name__)

FIRST_PASS_PROMPT = (
    "You are a helpful AI assistant. You can use the get_weather function "
    "to provide accurate weather information."
)
SECOND_PASS_PROMPT = (
    "You are a helpful weather assistant. Provide weather information "
    "in a friendly, concise way."
)


class TurnState(str, Enum):
    START = "start"
    AWAITING_FIRST_RESPONSE = "awaiting_first_response"
    AWAITING_TOOL_EXECUTION = "awaiting_tool_execution"
    AWAITING_SECOND_RESPONSE = "awaiting_second_response"
    DIRECT_ANSWER = "direct_answer"
    TOOL_ANSWER = "tool_answer"
    ABORTED = "aborted"


TERMINAL_STATES = frozenset({TurnState.DIRECT_ANSWER, TurnState.TOOL_ANSWER, TurnState.ABORTED})


@dataclass
class TurnResult:
    utterance: str
    state: TurnState = TurnState.START
    reply: Optional[str] = None
    weather: Optional[Dict[str, str]] = None
    error: Optional[str] = None
    llm_calls: int = 0

    # working data carried between states
    message: Any = field(default=None, repr=False)
    tool_call: Any = field(default=None, repr=False)
    args: Optional[WeatherQueryArgs] = field(default=None, repr=False)


def tool_call_message(message: Any, tool_call: Any) -> Dict[str, Any]:
    """The assistant turn being answered, trimmed to the one call we execute."""
    return {
        "role": "assistant",
        "content": message.content,
        "tool_calls": [
            {
                "id": tool_call.id,
                "type": "function",
                "function": {
                    "name": tool_call.function.name,
                    "arguments": tool_call.function.arguments,
                },
            }
        ],
    }


class WeatherAssistant:
    def __init__(
        self,
        settings: Settings,
        llm: Any = None,
        weather: Optional[WeatherClient] = None,
        console: Optional[Console] = None,
    ):
        self.model = settings.model
        self.llm = llm if llm is not None else build_openai_client(settings)
        self.weather = weather or WeatherClient(settings)
        self.console = console or Console()
        self._handlers: Dict[TurnState, Callable[[TurnResult], TurnState]] = {
            TurnState.START: self._start,
            TurnState.AWAITING_FIRST_RESPONSE: self._first_pass,
            TurnState.AWAITING_TOOL_EXECUTION: self._run_tool,
            TurnState.AWAITING_SECOND_RESPONSE: self._second_pass,
        }

    def handle_turn(self, utterance: str) -> TurnResult:
        """Run one turn to a terminal state, printing as it goes.

        ``ToolArgumentError`` is not caught here; the interaction loop reports it.
        """
        turn = TurnResult(utterance=utterance)
        while turn.state not in TERMINAL_STATES:
            turn.state = self._handlers[turn.state](turn)
        logger.debug("turn_finished", state=turn.state.value, llm_calls=turn.llm_calls)
        return turn

    def _chat(self, turn: TurnResult, messages: List[Dict[str, Any]], **kwargs: Any) -> Any:
        turn.llm_calls += 1
        logger.debug("chat_request", call=turn.llm_calls, model=self.model, tools=bool(kwargs.get("tools")))
        resp = self.llm.chat.completions.create(model=self.model, messages=messages, **kwargs)
        return resp.choices[0].message

    def _abort(self, turn: TurnResult, message: str) -> TurnState:
        turn.error = message
        self.console.error(message)
        return TurnState.ABORTED

    def _start(self, turn: TurnResult) -> TurnState:
        self.console.thinking()
        return TurnState.AWAITING_FIRST_RESPONSE

    def _first_pass(self, turn: TurnResult) -> TurnState:
        messages = [
            {"role": "system", "content": FIRST_PASS_PROMPT},
            {"role": "user", "content": turn.utterance},
        ]
        try:
            msg = self._chat(turn, messages, tools=WEATHER_TOOLS, tool_choice="auto")
        except OpenAIError as e:
            logger.warning("chat_failed", call=turn.llm_calls, error=str(e))
            return self._abort(turn, str(e))
        turn.message = msg

        tool_calls = getattr(msg, "tool_calls", None) or []
        if not tool_calls:
            turn.reply = msg.content or ""
            self.console.direct_answer(turn.reply)
            return TurnState.DIRECT_ANSWER

        if len(tool_calls) > 1:
            logger.warning("extra_tool_calls_ignored", ignored=[tc.id for tc in tool_calls[1:]])
        tc = tool_calls[0]
        logger.debug("tool_call", id=tc.id, name=tc.function.name, arguments=tc.function.arguments)
        if tc.function.name != GET_WEATHER:
            return self._abort(turn, f"Unsupported tool requested: {tc.function.name}")

        turn.tool_call = tc
        turn.args = parse_weather_args(tc.function.arguments)
        return TurnState.AWAITING_TOOL_EXECUTION

    def _run_tool(self, turn: TurnResult) -> TurnState:
        args = turn.args
        self.console.fetching(args.location)
        result = self.weather.lookup(args.location, args.unit)
        if "error" in result:
            return self._abort(turn, result["error"])
        logger.debug("weather_result", **result)
        turn.weather = result
        return TurnState.AWAITING_SECOND_RESPONSE

    def _second_pass(self, turn: TurnResult) -> TurnState:
        messages = [
            {"role": "system", "content": SECOND_PASS_PROMPT},
            {"role": "user", "content": turn.utterance},
            tool_call_message(turn.message, turn.tool_call),
            {
                "role": "tool",
                "tool_call_id": turn.tool_call.id,
                "content": json.dumps(turn.weather, ensure_ascii=False),
            },
        ]
        try:
            msg = self._chat(turn, messages)
        except OpenAIError as e:
            logger.warning("chat_failed", call=turn.llm_calls, error=str(e))
            return self._abort(turn, str(e))

        turn.reply = msg.content or ""
        self.console.weather_block(turn.weather)
        self.console.interpretation(turn.reply)
        return TurnState.TOOL_ANSWER
