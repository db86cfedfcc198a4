import builtins
import io
from unittest.mock import MagicMock

import pytest

from weather_cli import interactive
from weather_cli.errors import ConfigurationError, ToolArgumentError
from weather_cli.interactive import PROMPT, main, run

from conftest import FakeLLM, make_message


def scripted(*lines):
    """read_line stand-in that replays ``lines`` and records each prompt."""
    prompts = []
    queue = list(lines)

    def read_line(prompt):
        prompts.append(prompt)
        if not queue:
            raise EOFError
        return queue.pop(0)

    read_line.prompts = prompts
    return read_line


@pytest.mark.parametrize("sentinel", ["exit", "EXIT", "Exit", "  eXiT  "])
def test_exit_sentinel_stops_loop(console, sentinel):
    assistant = MagicMock()
    read_line = scripted(sentinel, "never read")

    assert run(assistant, console, read_line) == 0
    assistant.handle_turn.assert_not_called()
    assert read_line.prompts == [PROMPT]
    assert "Goodbye!" in console.stream.getvalue()


def test_exit_must_match_exactly(console):
    assistant = MagicMock()

    run(assistant, console, scripted("exit now", "exit"))

    assistant.handle_turn.assert_called_once_with("exit now")


def test_turns_run_in_order(console):
    assistant = MagicMock()

    run(assistant, console, scripted("first", "second", "third", "exit"))

    assert [c.args[0] for c in assistant.handle_turn.call_args_list] == ["first", "second", "third"]


def test_blank_lines_are_skipped(console):
    assistant = MagicMock()

    run(assistant, console, scripted("", "   ", "hello", "exit"))

    assistant.handle_turn.assert_called_once_with("hello")


def test_end_of_input_exits_cleanly(console):
    assistant = MagicMock()

    assert run(assistant, console, scripted("hello")) == 0
    assert "Goodbye!" in console.stream.getvalue()


def test_turn_error_is_reported_and_loop_continues(console):
    assistant = MagicMock()
    assistant.handle_turn.side_effect = [ToolArgumentError("Bad tool args: Expecting value"), None]

    assert run(assistant, console, scripted("one", "two", "exit")) == 0
    assert assistant.handle_turn.call_count == 2
    assert "Error: Bad tool args: Expecting value" in console.stream.getvalue()


def test_main_runs_until_exit(monkeypatch, capsys):
    monkeypatch.setattr(interactive, "load_dotenv", lambda: None)
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("NO_COLOR", "1")
    llm = FakeLLM(make_message(content="Hi! Ask me about the weather."))
    monkeypatch.setattr(interactive, "build_openai_client", lambda settings: llm)
    lines = iter(["hello", "exit"])
    monkeypatch.setattr(builtins, "input", lambda prompt: next(lines))

    assert main() == 0

    out = capsys.readouterr().out
    assert "Weather CLI Assistant" in out
    assert "Hi! Ask me about the weather." in out
    assert "Goodbye!" in out


def test_main_startup_failure_exits_1(monkeypatch, capsys):
    monkeypatch.setattr(interactive, "load_dotenv", lambda: None)

    def broken(env=None):
        raise ConfigurationError("WEATHER_TIMEOUT must be a number")

    monkeypatch.setattr(interactive.Settings, "from_env", broken)

    assert main() == 1
    captured = capsys.readouterr()
    assert "Fatal error: WEATHER_TIMEOUT must be a number" in captured.err
    assert "Fatal error" not in captured.out


def test_no_color_from_dotenv_applies_to_console(monkeypatch):
    class Tty(io.StringIO):
        def isatty(self):
            return True

    out, err = Tty(), Tty()
    monkeypatch.setattr("sys.stdout", out)
    monkeypatch.setattr("sys.stderr", err)
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.setattr(interactive, "load_dotenv", lambda: monkeypatch.setenv("NO_COLOR", "1"))

    def broken(env=None):
        raise ConfigurationError("bad config")

    monkeypatch.setattr(interactive.Settings, "from_env", broken)

    assert main() == 1
    assert err.getvalue() == "Fatal error: bad config\n"
