"""Command parser: raw message text -> Command.

Pure prefix matching, no side effects. The order of the checks matters:
``/ad`` is tested before ``/done`` and a bare number only becomes a guess
when no slash command matched.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

_INTEGER = re.compile(r"[+-]?[0-9]+")


class CommandKind(Enum):
    START = "start"
    CLICK = "click"
    POINTS = "points"
    BEGIN_VIDEO = "begin_video"
    BEGIN_AD = "begin_ad"
    DONE_VIDEO = "done_video"
    DONE_AD = "done_ad"
    BEGIN_GUESS = "begin_guess"
    SUBMIT_GUESS = "submit_guess"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Command:
    kind: CommandKind
    number: Optional[int] = None  # only for SUBMIT_GUESS


_PREFIXES = [
    ("/start", CommandKind.START),
    ("/points", CommandKind.POINTS),
    ("/click", CommandKind.CLICK),
    ("/video", CommandKind.BEGIN_VIDEO),
    ("/ad", CommandKind.BEGIN_AD),
]


def parse_int(text: str) -> Optional[int]:
    """Strict base-10 integer, or None. "3.5", "1_000" and "٣" are rejected."""
    if not _INTEGER.fullmatch(text):
        return None
    try:
        return int(text)
    except ValueError:
        # больше sys.get_int_max_str_digits() цифр
        return None


def parse_command(text: str) -> Command:
    text = (text or "").strip()

    for prefix, kind in _PREFIXES:
        if text.startswith(prefix):
            return Command(kind)

    if text.startswith("/done"):
        rest = text[len("/done"):]
        if "video" in rest:
            return Command(CommandKind.DONE_VIDEO)
        if "ad" in rest:
            return Command(CommandKind.DONE_AD)
        return Command(CommandKind.UNKNOWN)

    if text.startswith("/guess"):
        return Command(CommandKind.BEGIN_GUESS)

    number = parse_int(text)
    if number is not None:
        return Command(CommandKind.SUBMIT_GUESS, number)

    return Command(CommandKind.UNKNOWN)
