# llmtools

A small library of helpers for building LLM command-line tools. It needs
only the standard library.

## Modules

- `llmtools.render_prompt`: `render_prompt(template, variables)` renders
  prompt templates made of plain text and `{...}` expressions:
  - `{var}` inserts the value of `var`, or nothing when it is missing;
  - `{?var <template>}` renders the inner template when `var` is true;
  - `{!var <template>}` renders it when `var` is false.

  A value is false when it is empty, `"0"` or `"false"`.
- `llmtools.paths`: `safe_join_path` joins a relative path under a base and
  returns `None` if the path is absolute or contains `..`. `parse_glob` splits
  patterns such as `dir/**/*.{md,txt}` or `*.md` into a `GlobPattern` of base
  directory, extensions and a flag for "current directory only". It raises
  `ValueError` for a malformed `{...}` list. `expand_glob_paths` turns
  patterns into an ordered list of files without duplicates. It raises
  `FileNotFoundError` for a missing path when asked to. The module also has
  `list_file_names`, `get_patch_extension` (the lower-cased extension),
  `to_absolute_path` and `resolve_home_dir` (expands a leading `~/`).
- `llmtools.text`: token-length estimates, `parse_bool`, `strip_think_tag`,
  `extract_code_block`, `pretty_error` (formats an exception with its chain
  of causes), `indent_text`, `multiline_text` and `temp_file`. It also holds
  `is_url`, `get_env_name` (gives `LLMTOOLS_<KEY>`), `normalize_env_name` and
  `light_theme_from_colorfgbg`. Colour helpers (`color_text` with the `Color`
  enum, `error_text`, `warning_text` and `dimmed_text`) return plain text when
  `NO_COLOR` is set to `1`/`true` or when standard output is not a terminal.
- `llmtools.crypto`: `sha256`, `hmac_sha256`, `hex_encode`, `encode_uri`
  (percent-encodes each `/`-separated segment), `base64_encode` and
  `base64_decode`.
- `llmtools.abort_signal`: `AbortSignal` records Ctrl-C and Ctrl-D abort
  requests in a thread-safe way. `create_abort_signal` makes a new one.
  `wait_abort_signal` is a coroutine that returns once either request has
  been set.
- `llmtools.clipboard`: `set_text` copies text to the clipboard by writing
  the OSC 52 escape sequence (see `osc52_sequence`) to standard output. It
  raises `ClipboardError` if that fails.
- `llmtools.command`: `detect_shell` returns a `Shell`. It checks
  `LLMTOOLS_SHELL` first, then `SHELL` (on Windows, `PSModulePath`), and falls
  back to `/bin/sh` or `cmd.exe`. The module also has `run_command`,
  `run_command_with_output`, `edit_file`, `append_to_shell_history` and
  `get_history_file`. `run_loader_command` runs a document loader command in
  which `$1` stands for the input path. When the command contains `$2`, the
  output is read from a temporary file that `$2` names; otherwise it comes
  from standard output. Failures raise `CommandError`.
- `llmtools.loader`: `LoadedDocument`, `load_file` (reads a file, or runs the
  loader command configured for its extension), `is_loader_protocol` and
  `load_protocol_path`. The last one runs the loader for a `protocol:path`
  and accepts either a JSON list of documents or plain text.
- `llmtools.variables`: `interpolate_variables` fills in `{{__os__}}`,
  `{{__os_distro__}}`, `{{__os_family__}}`, `{{__arch__}}`, `{{__shell__}}`,
  `{{__locale__}}`, `{{__now__}}` and `{{__cwd__}}`. It leaves unknown
  placeholders as they are.
- `llmtools.spinner`: `SpinnerState` draws spinner frames on a terminal
  stream. `Spinner`, started with `spawn_spinner`, animates on a background
  thread until `stop()` is called. `abortable_run_with_spinner(task, message,
  abort_signal)` awaits an awaitable with a spinner shown, and raises
  `AbortedError` on Ctrl-C or when the abort signal is set. Without a
  terminal it simply awaits the task.

## Example

```python
from llmtools.render_prompt import render_prompt
from llmtools.paths import parse_glob

prompt = "{?session {session}{?role /}}{role}{?session )}{!session >}"
render_prompt(prompt, {"role": "coder"})                      # "coder>"
render_prompt(prompt, {"session": "temp", "role": "coder"})   # "temp/coder)"

parse_glob("dir/**/*.{md,txt}")  # GlobPattern(base='dir', suffixes=['md', 'txt'], current_only=False)
```

## What it does not do

These are building blocks only. The package has no command-line program, no
chat or model client, and no HTTP server. It does not fetch or crawl URLs:
documents come only from local files or from configured loader commands.
The clipboard is reached only through the terminal's OSC 52 support. There
is no native clipboard access.

## Running the tests

```
pip install -e ".[test]"
pytest
```