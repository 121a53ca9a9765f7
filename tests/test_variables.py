import os
from datetime import datetime, timezone

from llmtools.variables import interpolate_variables


def test_text_without_placeholders_is_unchanged():
    text = "plain text with {single} braces"
    assert interpolate_variables(text) == text


def test_unknown_placeholder_is_kept():
    assert interpolate_variables("a {{foo}} b") == "a {{foo}} b"


def test_spaced_placeholder_is_not_matched():
    assert interpolate_variables("{{ __os__ }}") == "{{ __os__ }}"


def test_cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert interpolate_variables("dir={{__cwd__}}") == f"dir={os.getcwd()}"


def test_shell(monkeypatch):
    monkeypatch.setenv("LLMTOOLS_SHELL", "/usr/bin/fish")
    assert interpolate_variables("{{__shell__}}") == "fish"


def test_os_family():
    expected = "windows" if os.name == "nt" else "unix"
    assert interpolate_variables("{{__os_family__}}") == expected


def test_now_is_rfc3339():
    value = interpolate_variables("{{__now__}}")
    parsed = datetime.fromisoformat(value)
    assert parsed.tzinfo is not None
    assert parsed.microsecond == 0
    delta = abs((datetime.now(timezone.utc) - parsed).total_seconds())
    assert delta < 60


def test_locale_from_env(monkeypatch):
    monkeypatch.setenv("LC_ALL", "de_DE.UTF-8")
    assert interpolate_variables("{{__locale__}}") == "de-DE"


def test_multiple_placeholders(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("LLMTOOLS_SHELL", "/bin/zsh")
    result = interpolate_variables("{{__shell__}}:{{__cwd__}}:{{x}}")
    assert result == f"zsh:{os.getcwd()}:{{{{x}}}}"