"""Path joining, glob parsing and file listing helpers."""

from __future__ import annotations

import os
from pathlib import Path, PurePath
from typing import Iterable, NamedTuple


class GlobPattern(NamedTuple):
    base: str
    suffixes: list[str] | None
    current_only: bool


def safe_join_path(base_path: str | os.PathLike, sub_path: str | os.PathLike) -> Path | None:
    """Join ``sub_path`` under ``base_path``, or None if it would escape it."""
    base = Path(base_path)
    sub = Path(sub_path)
    if sub.is_absolute() or sub.anchor:
        return None
    if ".." in sub.parts:
        return None
    joined = base.joinpath(*sub.parts)
    if joined == base or base in joined.parents:
        return joined
    return None


def _find_any(text: str, *needles: str) -> int | None:
    for needle in needles:
        index = text.find(needle)
        if index >= 0:
            return index
    return None


def _locate_glob(path_str: str) -> tuple[int, int, bool] | None:
    start = _find_any(path_str, "/**/*.", "\\**\\*.")
    if start is not None:
        return start, 6, False
    start = _find_any(path_str, "**/*.", "**\\*.")
    if start is not None:
        return (start, 5, False) if start == 0 else None
    start = _find_any(path_str, "/*.", "\\*.")
    if start is not None:
        return start, 3, True
    start = _find_any(path_str, "*.")
    if start is not None:
        return (start, 2, True) if start == 0 else None
    return None


def parse_glob(path_str: str) -> GlobPattern:
    """Split a simple glob into base directory, extensions and recursion flag."""
    located = _locate_glob(path_str)
    if located is None:
        if path_str.endswith("/**") or path_str.endswith("\\**"):
            return GlobPattern(path_str[:-3], None, False)
        return GlobPattern(path_str, None, False)

    start, offset, current_only = located
    base = path_str[:start] or ("/" if path_str.startswith("/") else ".")
    brace = path_str[start:].find("}")
    if brace >= 0:
        end = start + brace
        spec = path_str[start + offset : end + 1]
        if not (spec.startswith("{") and spec.endswith("}")):
            raise ValueError(f"Invalid path '{path_str}'")
        extensions = spec[1:-1].split(",")
    else:
        extensions = [path_str[start + offset :]]
    return GlobPattern(base, extensions or None, current_only)


def expand_glob_paths(paths: Iterable[str], bail_non_exist: bool) -> list[str]:
    """Expand glob patterns into a de-duplicated, ordered list of file paths."""
    found: dict[str, None] = {}
    for path in paths:
        base, suffixes, current_only = parse_glob(path)
        _list_files(found, base, suffixes, current_only, bail_non_exist)
    return list(found)


def _list_files(
    found: dict[str, None],
    entry_path: str,
    suffixes: list[str] | None,
    current_only: bool,
    bail_non_exist: bool,
) -> None:
    if not os.path.exists(entry_path):
        if bail_non_exist:
            raise FileNotFoundError(f"Not found '{entry_path}'")
        return
    if not os.path.isdir(entry_path):
        _add_file(found, suffixes, entry_path)
        return
    with os.scandir(entry_path) as entries:
        for entry in entries:
            child = os.path.join(entry_path, entry.name)
            if os.path.isdir(child):
                if not current_only:
                    _list_files(found, child, suffixes, current_only, bail_non_exist)
            else:
                _add_file(found, suffixes, child)


def _add_file(found: dict[str, None], suffixes: list[str] | None, path: str) -> None:
    if _is_valid_extension(suffixes, path):
        found.setdefault(path, None)


def _extension(path: str) -> str | None:
    name = PurePath(path).name
    if name in ("", ".."):
        return None
    index = name.rfind(".")
    if index <= 0:
        return None
    return name[index + 1 :]


def _is_valid_extension(suffixes: list[str] | None, path: str) -> bool:
    if not suffixes:
        return True
    extension = _extension(path)
    return extension is not None and extension in suffixes


def list_file_names(directory: str | os.PathLike, ext: str) -> list[str]:
    """Sorted names in ``directory`` that end with ``ext``, with ``ext`` removed."""
    try:
        names = os.listdir(directory)
    except OSError:
        return []
    return sorted(name[: len(name) - len(ext)] for name in names if name.endswith(ext))


def get_patch_extension(path: str) -> str | None:
    extension = _extension(path)
    return extension.lower() if extension is not None else None


def to_absolute_path(path: str) -> str:
    return os.path.abspath(path)


def resolve_home_dir(path: str) -> str:
    """Replace a leading ``~`` with the user's home directory."""
    if path.startswith("~/") or path.startswith("~\\"):
        try:
            home = Path.home()
        except (RuntimeError, KeyError):
            return path
        return f"{home}{path[1:]}"
    return path