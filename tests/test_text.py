import os
import sys
import tempfile
import time
from datetime import datetime
from pathlib import Path

import pytest

from llmtools.text import (
    Color,
    color_text,
    convert_option_string,
    dimmed_text,
    error_text,
    estimate_token_length,
    extract_code_block,
    get_env_name,
    indent_text,
    is_stdout_terminal,
    is_url,
    light_theme_from_colorfgbg,
    multiline_text,
    no_color,
    normalize_env_name,
    now,
    now_timestamp,
    parse_bool,
    pretty_error,
    strip_think_tag,
    temp_file,
    warning_text,
)


class _FakeTTY:
    def isatty(self):
        return True

    def write(self, data):
        return len(data)

    def flush(self):
        pass


@pytest.fixture
def tty_stdout(monkeypatch):
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.setattr(sys, "stdout", _FakeTTY())


def test_now_is_rfc3339_with_offset():
    value = now()
    parsed = datetime.fromisoformat(value)
    assert parsed.tzinfo is not None
    assert parsed.microsecond == 0


def test_now_timestamp_matches_clock():
    assert abs(now_timestamp() - time.time()) < 5


def test_get_env_name_is_upper_and_keyed():
    name = get_env_name("shell")
    assert name == name.upper()
    assert name.endswith("_SHELL")
    assert get_env_name("Shell") == name


def test_normalize_env_name():
    assert normalize_env_name("foo-bar") == "FOO_BAR"


@pytest.mark.parametrize(
    "value,expected",
    [("1", True), ("true", True), ("0", False), ("false", False), ("yes", None), ("", None)],
)
def test_parse_bool(value, expected):
    assert parse_bool(value) is expected


def test_estimate_token_length_empty():
    assert estimate_token_length("") == 0
    assert estimate_token_length("  !! ") == 0


def test_estimate_token_length_two_words():
    assert estimate_token_length("hello world") == 3


def test_estimate_token_length_grows_with_words():
    short = estimate_token_length("one two")
    longer = estimate_token_length("one two three four five six")
    assert longer > short


def test_estimate_token_length_single_ideograph_equals_ascii_word_count():
    assert estimate_token_length("\u4e2d") == estimate_token_length("\u4e2d!")
    assert estimate_token_length("\u4e2d\u6587") == 2 * estimate_token_length("\u4e2d")


@pytest.mark.parametrize(
    "value,expected",
    [
        ("15;0", False),
        ("0;15", True),
        ("0;default;15", True),
        ("15;default;0", False),
        ("0;231", True),
        ("15;16", False),
    ],
)
def test_light_theme_from_colorfgbg(value, expected):
    assert light_theme_from_colorfgbg(value) is expected


@pytest.mark.parametrize("value", ["abc", "1;2;3;4", "0;256", "0;x", "0;-1"])
def test_light_theme_from_colorfgbg_invalid(value):
    assert light_theme_from_colorfgbg(value) is None


def test_strip_think_tag():
    assert strip_think_tag("<think>reasoning\nmore</think>\nanswer") == "answer"
    assert strip_think_tag("  <think>x</think>answer") == "answer"


def test_strip_think_tag_only_at_start():
    text = "answer <think>x</think>"
    assert strip_think_tag(text) == text


def test_extract_code_block():
    assert extract_code_block("text\n```python\nprint(1)\n```\nmore") == "print(1)"


def test_extract_code_block_without_fence():
    assert extract_code_block("ls -la") == "ls -la"


def test_convert_option_string():
    assert convert_option_string("") is None
    assert convert_option_string("value") == "value"


def test_pretty_error_without_cause():
    assert pretty_error(ValueError("boom")) == "Error: boom"


def test_pretty_error_with_single_cause():
    try:
        try:
            raise RuntimeError("inner")
        except RuntimeError as inner:
            raise ValueError("outer") from inner
    except ValueError as err:
        text = pretty_error(err)
    lines = text.split("\n")
    assert lines[0] == "Error: outer"
    assert lines[1] == ""
    assert lines[2] == "Caused by:"
    assert lines[3].strip() == "inner"
    assert lines[3].startswith("    ")


def test_pretty_error_with_many_causes():
    try:
        try:
            try:
                raise KeyError("deep")
            except KeyError as deep:
                raise RuntimeError("middle") from deep
        except RuntimeError as middle:
            raise ValueError("outer") from middle
    except ValueError as err:
        text = pretty_error(err)
    lines = text.split("\n")
    assert lines[0] == "Error: outer"
    assert lines[3].split(":", 1)[0].strip() == "0"
    assert lines[3].endswith("middle")
    assert lines[4].split(":", 1)[0].strip() == "1"
    assert len(lines[3].split(":", 1)[0]) == 5


def test_indent_text():
    assert indent_text("a\nb", 2) == "  a\n  b"
    assert indent_text(12, 1) == " 12"


def test_multiline_text():
    assert multiline_text("a\nb\nc") == "a\n.. b\n.. c"
    assert multiline_text("single") == "single"


def test_no_color_env(monkeypatch):
    monkeypatch.setattr(sys, "stdout", _FakeTTY())
    monkeypatch.setenv("NO_COLOR", "1")
    assert no_color() is True
    assert error_text("plain") == "plain"
    assert dimmed_text("plain") == "plain"


def test_temp_file_is_unique_and_named():
    first = temp_file("-output-", ".txt")
    second = temp_file("-output-", ".txt")
    assert first != second
    assert first.parent == Path(tempfile.gettempdir())
    assert first.name.endswith(".txt")
    assert f"-{os.getpid()}-output-" in first.name
    assert not first.exists()


def test_is_url():
    assert is_url("http://example.com")
    assert is_url("https://example.com")
    assert not is_url("ftp://example.com")
    assert not is_url("/tmp/file")