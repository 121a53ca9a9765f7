"""Shell detection, running external commands and shell history."""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Sequence

from llmtools.text import get_env_name, now_timestamp, temp_file

logger = logging.getLogger(__name__)

_IS_WINDOWS = sys.platform == "win32"


class CommandError(RuntimeError):
    """Raised when an external command cannot run or fails."""


@dataclass(frozen=True)
class Shell:
    name: str
    cmd: str
    arg: str


def _shell_from_windows_env() -> str | None:
    ps_module_path = os.environ.get("PSModulePath")
    if ps_module_path is None:
        return None
    ps_module_path = ps_module_path.lower()
    if ps_module_path.startswith("c:\\users"):
        if "\\powershell\\7\\" in ps_module_path:
            return "pwsh.exe"
        return "powershell.exe"
    return None


def detect_shell() -> Shell:
    """Work out which shell the user runs."""
    cmd = os.environ.get(get_env_name("shell"))
    if cmd is None:
        cmd = _shell_from_windows_env() if _IS_WINDOWS else os.environ.get("SHELL")

    name = None
    if cmd is not None:
        stem = Path(cmd).stem
        if stem:
            name = "nushell" if stem == "nu" else stem.lower()

    if cmd is None or name is None:
        cmd, name = ("cmd.exe", "cmd") if _IS_WINDOWS else ("/bin/sh", "sh")

    arg = {"powershel": "-Command", "cmd": "/C"}.get(name, "-c")
    return Shell(name, cmd, arg)


def _merged_env(envs: Mapping[str, str] | None) -> dict[str, str] | None:
    if not envs:
        return None
    return {**os.environ, **envs}


def run_command(
    cmd: str, args: Sequence[str], envs: Mapping[str, str] | None = None
) -> int:
    """Run a command attached to the terminal and return its exit code."""
    completed = subprocess.run([cmd, *args], env=_merged_env(envs), check=False)
    return max(completed.returncode, 0)


def run_command_with_output(
    cmd: str, args: Sequence[str], envs: Mapping[str, str] | None = None
) -> tuple[bool, str, str]:
    """Run a command and return whether it succeeded, its stdout and its stderr."""
    completed = subprocess.run(
        [cmd, *args], env=_merged_env(envs), capture_output=True, check=False
    )
    try:
        stdout = completed.stdout.decode("utf-8")
    except UnicodeDecodeError as err:
        raise ValueError("Invalid UTF-8 in stdout") from err
    try:
        stderr = completed.stderr.decode("utf-8")
    except UnicodeDecodeError as err:
        raise ValueError("Invalid UTF-8 in stderr") from err
    return completed.returncode == 0, stdout, stderr


def run_loader_command(path: str, extension: str, loader_command: str) -> str:
    """Run a document loader command and return the text it produced.

    ``$1`` in the command stands for the input path; when ``$2`` is present
    the output is read from the file it names instead of standard output.
    """
    invalid = f"Invalid document loader '{extension}': `{loader_command}`"
    try:
        parts = shlex.split(loader_command)
    except ValueError as err:
        raise ValueError(invalid) from err
    if not parts:
        raise ValueError(invalid)

    outpath = str(temp_file("-output-", ""))
    use_stdout = True
    cmd_args = []
    for part in parts:
        if "$1" in part:
            part = part.replace("$1", path)
        if "$2" in part:
            use_stdout = False
            part = part.replace("$2", outpath)
        cmd_args.append(part)

    cmd_eval = shlex.join(cmd_args)
    logger.debug("run `%s`", cmd_eval)
    cmd, *args = cmd_args
    unable = f"Unable to run `{cmd_eval}`, Perhaps '{cmd}' is not installed?"

    if use_stdout:
        try:
            success, stdout, stderr = run_command_with_output(cmd, args)
        except (OSError, ValueError) as err:
            raise CommandError(unable) from err
        if not success:
            raise CommandError(stderr or f"The command `{cmd_eval}` exited with non-zero.")
        return stdout

    try:
        status = run_command(cmd, args)
    except OSError as err:
        raise CommandError(unable) from err
    if status != 0:
        raise CommandError(f"The command `{cmd_eval}` exited with non-zero.")
    try:
        return Path(outpath).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as err:
        raise CommandError("Failed to read file generated by the loader") from err


def edit_file(editor: str, path: str | os.PathLike) -> None:
    """Open ``path`` in ``editor`` and wait for it to exit."""
    subprocess.run([editor, os.fspath(path)], check=False)


def append_to_shell_history(shell: str, command: str, exit_code: int) -> None:
    """Add ``command`` to the history file of ``shell``, if it has one."""
    history_file = get_history_file(shell)
    if history_file is None:
        return
    command = command.replace("\n", " ")
    now = now_timestamp()
    if shell == "fish":
        entry = f"- cmd: {command}\n  when: {now}"
    elif shell == "zsh":
        entry = f": {now}:{exit_code};{command}"
    else:
        entry = command
    with open(history_file, "a", encoding="utf-8", newline="") as fh:
        fh.write(f"{entry}\n")


def _home_dir() -> Path | None:
    try:
        return Path.home()
    except (RuntimeError, KeyError):
        return None


def _config_dir() -> Path | None:
    if _IS_WINDOWS:
        appdata = os.environ.get("APPDATA")
        return Path(appdata) if appdata else None
    home = _home_dir()
    if sys.platform == "darwin":
        return home / "Library" / "Application Support" if home else None
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg and os.path.isabs(xdg):
        return Path(xdg)
    return home / ".config" if home else None


def get_history_file(shell: str) -> Path | None:
    """Location of the history file for ``shell``, or None if unknown."""
    if shell in ("bash", "sh", "zsh"):
        home = _home_dir()
        if home is None:
            return None
        histfile = os.environ.get("HISTFILE")
        if histfile is not None:
            return Path(histfile)
        return home / (".zsh_history" if shell == "zsh" else ".bash_history")
    if shell == "nushell":
        config = _config_dir()
        return config / "nushell" / "history.txt" if config else None
    if shell in ("powershell", "pwsh"):
        if _IS_WINDOWS:
            appdata = os.environ.get("APPDATA")
            if not appdata:
                return None
            base = Path(appdata) / "Microsoft" / "Windows" / "PowerShell"
        else:
            home = _home_dir()
            if home is None:
                return None
            base = home / ".local" / "share" / "powershell"
        return base / "PSReadLine" / "ConsoleHost_history.txt"
    relative = {
        "fish": Path(".local") / "share" / "fish" / "fish_history",
        "ksh": Path(".ksh_history"),
        "tcsh": Path(".history"),
    }.get(shell)
    if relative is None:
        return None
    home = _home_dir()
    return home / relative if home else None