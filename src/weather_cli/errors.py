"""Exceptions raised inside weather_cli."""


class WeatherCliError(RuntimeError):
    pass


class ConfigurationError(WeatherCliError):
    pass


class WeatherError(WeatherCliError):
    """The weather provider could not be reached or answered badly."""


class ToolArgumentError(WeatherCliError):
    """A tool call carried arguments that are not a JSON object."""
