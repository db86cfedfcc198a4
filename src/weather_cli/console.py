"""Colored terminal output for the assistant."""

from __future__ import annotations
import os
import sys
from typing import Dict, Optional, TextIO

from colorama import Fore, Style

EXAMPLE_QUESTIONS = (
    "What's the weather like in Tokyo?",
    "Should I bring an umbrella in London today?",
    "How hot is it in Dubai in Fahrenheit?",
)

# (label, record key, color) in display order
_WEATHER_FIELDS = (
    ("📍 Location", "location", Fore.CYAN),
    ("🌡️  Temperature", "temperature", Fore.YELLOW),
    ("🤔 Feels like", "feels_like", Fore.BLUE),
    ("💧 Humidity", "humidity", Fore.MAGENTA),
    ("💨 Wind", "wind_speed", Fore.WHITE),
    ("🔍 Description", "description", Fore.LIGHTBLACK_EX),
)


class Console:
    def __init__(self, stream: Optional[TextIO] = None, color: Optional[bool] = None, err_stream: Optional[TextIO] = None):
        # errors go to stderr unless a single explicit stream was given
        self.err_stream = err_stream or (stream if stream is not None else sys.stderr)
        self.stream = stream or sys.stdout
        if color is None:
            color = not os.getenv("NO_COLOR") and getattr(self.stream, "isatty", lambda: False)()
        self.color = color

    def _paint(self, text: str, style: str) -> str:
        return f"{style}{text}{Style.RESET_ALL}" if self.color else text

    def write(self, text: str = "", style: str = "", stream: Optional[TextIO] = None) -> None:
        stream = stream or self.stream
        # lone surrogates from model output cannot be encoded by the terminal
        text = text.encode("utf-8", "replace").decode("utf-8")
        if stream is not self.stream:
            self.stream.flush()
        stream.write(self._paint(text, style) if style else text)
        stream.write("\n")
        stream.flush()

    def banner(self) -> None:
        self.write("\n🌦️  Weather CLI Assistant 🌦️\n", Style.BRIGHT + Fore.GREEN)
        self.write("Ask about the weather anywhere! Try:", Fore.BLUE)
        for question in EXAMPLE_QUESTIONS:
            self.write(f'- "{question}"', Fore.LIGHTBLACK_EX)
        self.write()

    def thinking(self) -> None:
        self.write("Thinking...", Fore.BLUE)

    def fetching(self, location: str) -> None:
        self.write(f"Fetching weather for {location}...", Fore.BLUE)

    def weather_block(self, result: Dict[str, str]) -> None:
        self.write("\n🌤️  Weather Information:", Fore.GREEN)
        for label, key, style in _WEATHER_FIELDS:
            self.write(f"{label}: {result.get(key, 'n/a')}", style)
        self.write()

    def interpretation(self, text: str) -> None:
        self.write("AI Interpretation:", Fore.GREEN)
        self.write(text)

    def direct_answer(self, text: str) -> None:
        self.write("\nAssistant:", Fore.GREEN)
        self.write(text)

    def error(self, message: str) -> None:
        self.write(f"Error: {message}", Fore.RED, self.err_stream)

    def fatal(self, message: str) -> None:
        self.write(f"Fatal error: {message}", Fore.RED, self.err_stream)

    def goodbye(self) -> None:
        self.write("\nGoodbye! 👋\n", Fore.YELLOW)
