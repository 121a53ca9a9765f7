"""Small text, environment and terminal helpers."""

from __future__ import annotations

import math
import os
import re
import struct
import sys
import tempfile
import time
import uuid
from datetime import datetime
from enum import IntEnum
from pathlib import Path

APP_NAME = "llmtools"

CODE_BLOCK_RE = re.compile(r"```\w*(.*)```", re.MULTILINE | re.DOTALL)
THINK_TAG_RE = re.compile(r"^\s*<think>.*?</think>(\s*|$)", re.DOTALL)

_IDEO = "\u3040-\u309f\u3400-\u4dbf\u4e00-\u9fff\uf900-\ufaff"
_WORD_CHAR = rf"(?:(?![{_IDEO}])\w)"
_WORD_RE = re.compile(
    rf"[{_IDEO}]|{_WORD_CHAR}+(?:[.:'\u2019]{_WORD_CHAR}+)*"
)

_ANSI_RESET = "\x1b[0m"

_SYSTEM_COLORS = [
    (0, 0, 0),
    (205, 0, 0),
    (0, 205, 0),
    (205, 205, 0),
    (0, 0, 238),
    (205, 0, 205),
    (0, 205, 205),
    (229, 229, 229),
    (127, 127, 127),
    (255, 0, 0),
    (0, 255, 0),
    (255, 255, 0),
    (92, 92, 255),
    (255, 0, 255),
    (0, 255, 255),
    (255, 255, 255),
]
_CUBE_LEVELS = (0, 95, 135, 175, 215, 255)


class Color(IntEnum):
    """Foreground colours as ANSI SGR codes."""

    BLACK = 30
    RED = 31
    GREEN = 32
    YELLOW = 33
    BLUE = 34
    PURPLE = 35
    CYAN = 36
    WHITE = 37


def is_stdout_terminal() -> bool:
    """Whether standard output is attached to a terminal."""
    try:
        return bool(sys.stdout.isatty())
    except (AttributeError, ValueError):
        return False


def no_color() -> bool:
    """Whether coloured output is disabled."""
    return bool(parse_bool(os.environ.get("NO_COLOR", ""))) or not is_stdout_terminal()


def now() -> str:
    """Current local time in RFC 3339 form with second precision."""
    return datetime.now().astimezone().isoformat(timespec="seconds")


def now_timestamp() -> int:
    """Current Unix timestamp in seconds."""
    return int(time.time())


def _ascii_upper(value: str) -> str:
    return "".join(ch.upper() if ch.isascii() else ch for ch in value)


def get_env_name(key: str) -> str:
    """Name of the application's environment variable for ``key``."""
    return _ascii_upper(f"{APP_NAME}_{key}")


def normalize_env_name(value: str) -> str:
    return _ascii_upper(value.replace("-", "_"))


def parse_bool(value: str) -> bool | None:
    if value in ("1", "true"):
        return True
    if value in ("0", "false"):
        return False
    return None


def _f32(value: float) -> float:
    return struct.unpack("f", struct.pack("f", value))[0]


_ASCII_WORD_WEIGHT = _f32(1.3)


def _unicode_words(text: str) -> list[str]:
    return [w for w in _WORD_RE.findall(text) if any(ch.isalnum() for ch in w)]


def estimate_token_length(text: str) -> int:
    """Rough estimate of how many tokens ``text`` takes."""
    output = 0.0
    for word in _unicode_words(text):
        if word.isascii():
            increment = _ASCII_WORD_WEIGHT
        elif len(word) == 1:
            increment = 1.0
        else:
            increment = _f32(len(word) * 0.5)
        output = _f32(output + increment)
    return math.ceil(output)


def _rgb_from_ansi256(index: int) -> tuple[int, int, int]:
    if index < 16:
        return _SYSTEM_COLORS[index]
    if index < 232:
        index -= 16
        return (
            _CUBE_LEVELS[index // 36],
            _CUBE_LEVELS[(index // 6) % 6],
            _CUBE_LEVELS[index % 6],
        )
    grey = 8 + 10 * (index - 232)
    return (grey, grey, grey)


def light_theme_from_colorfgbg(colorfgbg: str) -> bool | None:
    """Guess from a COLORFGBG value whether the terminal background is light."""
    parts = colorfgbg.split(";")
    if len(parts) == 2:
        bg = parts[1]
    elif len(parts) == 3:
        bg = parts[2]
    else:
        return None
    if not re.fullmatch(r"\+?[0-9]+", bg):
        return None
    index = int(bg)
    if index > 255:
        return None
    r, g, b = _rgb_from_ansi256(index)
    luminance = 0.2126 * r + 0.7152 * g + 0.0722 * b
    return luminance > 128.0


def strip_think_tag(text: str) -> str:
    return THINK_TAG_RE.sub("", text)


def extract_code_block(text: str) -> str:
    """Contents of the first fenced code block, or ``text`` when there is none."""
    match = CODE_BLOCK_RE.search(text)
    if match is None:
        return text
    return match.group(1).strip()


def convert_option_string(value: str) -> str | None:
    return value or None


def _error_causes(err: BaseException) -> list[BaseException]:
    causes = []
    seen = {id(err)}
    current = err
    while True:
        nxt = current.__cause__
        if nxt is None and not current.__suppress_context__:
            nxt = current.__context__
        if nxt is None or id(nxt) in seen:
            break
        seen.add(id(nxt))
        causes.append(nxt)
        current = nxt
    return causes


def pretty_error(err: BaseException) -> str:
    """Format an exception and its chain of causes for display."""
    output = [f"Error: {err}"]
    causes = _error_causes(err)
    if causes:
        output.append("\nCaused by:")
        if len(causes) == 1:
            output.append(f"    {indent_text(causes[0], 4).strip()}")
        else:
            for i, cause in enumerate(causes):
                output.append(f"{i:5}: {indent_text(cause, 7).strip()}")
    return "\n".join(output)


def indent_text(s: object, size: int) -> str:
    indent = " " * size
    return "\n".join(f"{indent}{line}" for line in str(s).split("\n"))


def error_text(text: str) -> str:
    return color_text(text, Color.RED)


def warning_text(text: str) -> str:
    return color_text(text, Color.YELLOW)


def color_text(text: str, color: Color) -> str:
    if no_color():
        return text
    return f"\x1b[{int(color)}m{text}{_ANSI_RESET}"


def dimmed_text(text: str) -> str:
    if no_color():
        return text
    return f"\x1b[2m{text}{_ANSI_RESET}"


def multiline_text(text: str) -> str:
    first, *rest = text.split("\n")
    return "\n".join([first, *(f".. {line}" for line in rest)])


def temp_file(prefix: str, suffix: str) -> Path:
    """A unique, not yet created path in the temporary directory."""
    name = f"{APP_NAME.lower()}-{os.getpid()}{prefix}{uuid.uuid4()}{suffix}"
    return Path(tempfile.gettempdir()) / name


def is_url(path: str) -> bool:
    return path.startswith("http://") or path.startswith("https://")