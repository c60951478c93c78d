"""Rich rendering of component debug callbacks."""

from datetime import datetime

from rich.console import Console

from ..config import LogLevel

_LEVEL_COLORS = {
    LogLevel.DEBUG: "dim white",
    LogLevel.INFO: "cyan",
    LogLevel.WARNING: "yellow",
    LogLevel.ERROR: "red",
}

_COMPONENT_COLORS = {
    "chat": "green",
    "persona": "magenta",
    "fanout": "bright_blue",
    "group": "bright_yellow",
    "language": "bright_cyan",
    "memory": "bright_green",
    "battle": "bright_magenta",
}


class ConsoleLog:
    """Debug callback that prints timestamped log lines to a Rich console.

    Messages below the threshold are dropped. Pass an instance to any
    ``set_debug_callback``.
    """

    def __init__(self, console: Console, log_level: int = LogLevel.INFO) -> None:
        self._console = console
        self._log_level = log_level

    @property
    def log_level(self) -> int:
        return self._log_level

    def __call__(self, level: str, component: str, message: str) -> None:
        numeric = LogLevel.from_string(level)
        if numeric < self._log_level:
            return

        timestamp = datetime.now().strftime("%H:%M:%S")
        level_color = _LEVEL_COLORS.get(numeric, "white")
        comp_color = _COMPONENT_COLORS.get(component, "white")

        self._console.print(
            f"[dim]{timestamp}[/] "
            f"[{level_color}]{LogLevel.name(numeric):<7}[/] "
            f"[{comp_color}]{component:<8}[/] "
            f"{message}",
            highlight=False,
        )
