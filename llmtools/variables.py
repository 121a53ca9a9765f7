"""Expansion of ``{{__name__}}`` placeholders describing the environment."""

from __future__ import annotations

import locale
import os
import platform
import re
import sys

from llmtools.command import detect_shell
from llmtools.text import now

RE_VARIABLE = re.compile(r"\{\{(\w+)\}\}")

_ARCH_ALIASES = {
    "amd64": "x86_64",
    "x64": "x86_64",
    "arm64": "aarch64",
    "i386": "x86",
    "i686": "x86",
}


def _os_name() -> str:
    if sys.platform.startswith("linux"):
        return "linux"
    if sys.platform == "darwin":
        return "macos"
    if sys.platform == "win32":
        return "windows"
    return sys.platform


def _os_distro() -> str:
    os_name = _os_name()
    if os_name == "linux":
        try:
            release = platform.freedesktop_os_release()
            name = release.get("PRETTY_NAME") or release.get("NAME") or "Linux"
        except OSError:
            name = "Linux"
        return f"{name} (linux)"
    if os_name == "macos":
        return f"Mac OS {platform.mac_ver()[0]}".strip()
    return f"{platform.system()} {platform.release()}".strip()


def _arch() -> str:
    machine = platform.machine().lower()
    return _ARCH_ALIASES.get(machine, machine)


def _locale() -> str:
    for name in ("LC_ALL", "LC_MESSAGES", "LANG"):
        value = os.environ.get(name)
        if value:
            value = value.split(".")[0].split("@")[0]
            if value and value not in ("C", "POSIX"):
                return value.replace("_", "-")
    try:
        language = locale.getlocale()[0]
    except ValueError:
        language = None
    return language.replace("_", "-") if language else ""


def _cwd() -> str:
    try:
        return os.getcwd()
    except OSError:
        return ""


_RESOLVERS = {
    "__os__": _os_name,
    "__os_distro__": _os_distro,
    "__os_family__": lambda: "windows" if os.name == "nt" else "unix",
    "__arch__": _arch,
    "__shell__": lambda: detect_shell().name,
    "__locale__": _locale,
    "__now__": now,
    "__cwd__": _cwd,
}


def interpolate_variables(text: str) -> str:
    """Replace known ``{{__name__}}`` placeholders; leave unknown ones as they are."""

    def replace(match: re.Match[str]) -> str:
        resolver = _RESOLVERS.get(match.group(1))
        return resolver() if resolver else match.group(0)

    return RE_VARIABLE.sub(replace, text)