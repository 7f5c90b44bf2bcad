"""Console output for verbose simulations.

Every line is ``<tag> [<scope>] <message>``. The tag names the kind of
update (drift and progress, surfaced events, rejected input, completions,
bookkeeping) so the output stays readable without color; the scope names the
component that produced it (Team, Projects, Events, Input, Tick N).

ANSI colors are added unless NPCVERSE_NO_COLOR is set at call time.
"""

import os
from enum import Enum
from typing import Optional

LOG_TAG_DETERMINISTIC = "[•]"
LOG_TAG_EVENT = "[~]"
LOG_TAG_ERROR = "[!]"
LOG_TAG_SUCCESS = "[✓]"
LOG_TAG_INFO = "[i]"


class Color(Enum):
    """ANSI escape sequences."""

    BLUE = "\033[94m"
    YELLOW = "\033[93m"
    RED = "\033[91m"
    GREEN = "\033[92m"
    CYAN = "\033[96m"
    BOLD = "\033[1m"
    RESET = "\033[0m"


class LogKind(Enum):
    """Kind of simulation update, as (tag, color)."""

    DETERMINISTIC = (LOG_TAG_DETERMINISTIC, Color.BLUE)
    EVENT = (LOG_TAG_EVENT, Color.YELLOW)
    ERROR = (LOG_TAG_ERROR, Color.RED)
    SUCCESS = (LOG_TAG_SUCCESS, Color.GREEN)
    INFO = (LOG_TAG_INFO, Color.CYAN)

    @property
    def tag(self) -> str:
        return self.value[0]

    @property
    def color(self) -> Color:
        return self.value[1]


def colors_enabled() -> bool:
    return not os.getenv("NPCVERSE_NO_COLOR")


def colored(text: str, color: Color, bold: bool = False) -> str:
    """Wrap ``text`` in ``color`` (and bold) when colors are enabled."""
    if not colors_enabled():
        return text
    prefix = (Color.BOLD.value if bold else "") + color.value
    return f"{prefix}{text}{Color.RESET.value}"


def format_line(kind: LogKind, message: str, scope: Optional[str] = None) -> str:
    """Plain (uncolored) log line for ``message``."""
    if scope:
        return f"{kind.tag} [{scope}] {message}"
    return f"{kind.tag} {message}"


def log(kind: LogKind, message: str, scope: Optional[str] = None) -> None:
    print(colored(format_line(kind, message, scope), kind.color, bold=kind is LogKind.ERROR))


def log_deterministic(message: str, scope: Optional[str] = None) -> None:
    log(LogKind.DETERMINISTIC, message, scope)


def log_event(message: str, scope: Optional[str] = None) -> None:
    log(LogKind.EVENT, message, scope)


def log_error(message: str, scope: Optional[str] = None) -> None:
    log(LogKind.ERROR, message, scope)


def log_success(message: str, scope: Optional[str] = None) -> None:
    log(LogKind.SUCCESS, message, scope)


def log_info(message: str, scope: Optional[str] = None) -> None:
    log(LogKind.INFO, message, scope)
