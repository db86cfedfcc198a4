"""Interactive runner: one question per line until "exit"."""

from __future__ import annotations
from typing import Callable, Optional

from colorama import just_fix_windows_console
from dotenv import load_dotenv

from .assistant import WeatherAssistant
from .config import Settings, build_openai_client
from .console import Console
from .logger import get_logger, init_logger
from .weather_client import WeatherClient

logger = get_logger(__name__)

PROMPT = 'Ask about weather (or type "exit" to quit): '
EXIT_SENTINEL = "exit"


def run(assistant: WeatherAssistant, console: Console, read_line: Optional[Callable[[str], str]] = None) -> int:
    read_line = read_line or input
    while True:
        try:
            q = read_line(PROMPT).strip()
        except (EOFError, KeyboardInterrupt):
            console.goodbye()
            return 0

        if q.lower() == EXIT_SENTINEL:
            console.goodbye()
            return 0
        if not q:
            continue

        try:
            assistant.handle_turn(q)
        except KeyboardInterrupt:
            console.goodbye()
            return 0
        except Exception as e:
            logger.warning("turn_failed", error=repr(e))
            console.error(str(e) or type(e).__name__)


def main() -> int:
    console = None
    try:
        load_dotenv()
        just_fix_windows_console()
        console = Console()
        settings = Settings.from_env()
        init_logger(settings.log_level)

        console.banner()
        with WeatherClient(settings) as weather:
            assistant = WeatherAssistant(
                settings,
                llm=build_openai_client(settings),
                weather=weather,
                console=console,
            )
            return run(assistant, console)
    except Exception as e:
        (console or Console()).fatal(str(e))
        return 1
