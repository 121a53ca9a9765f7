"""Loading documents from files and loader commands."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from llmtools.command import run_loader_command
from llmtools.paths import get_patch_extension

EXTENSION_METADATA = "__extension__"
DEFAULT_EXTENSION = "txt"


@dataclass
class LoadedDocument:
    path: str
    contents: str
    metadata: dict[str, str] = field(default_factory=dict)


def load_file(loaders: Mapping[str, str], path: str) -> LoadedDocument:
    """Load a file, through its extension's loader command if one is configured."""
    extension = get_patch_extension(path) or DEFAULT_EXTENSION
    loader_command = loaders.get(extension)
    if loader_command is not None:
        contents = run_loader_command(path, extension, loader_command)
        return LoadedDocument(path, contents, {EXTENSION_METADATA: DEFAULT_EXTENSION})
    contents = Path(path).read_text(encoding="utf-8")
    return LoadedDocument(path, contents, {EXTENSION_METADATA: extension})


def is_loader_protocol(loaders: Mapping[str, str], path: str) -> bool:
    """Whether ``path`` has the form ``protocol:rest`` with a known protocol."""
    protocol, sep, _ = path.partition(":")
    return bool(sep) and protocol in loaders


def _document_from_value(value: Any) -> LoadedDocument | None:
    if not isinstance(value, dict):
        return None
    path = value.get("path")
    contents = value.get("contents")
    if not isinstance(path, str) or not isinstance(contents, str):
        return None
    metadata = value.get("metadata", {})
    if not isinstance(metadata, dict) or not all(isinstance(v, str) for v in metadata.values()):
        return None
    return LoadedDocument(path, contents, dict(metadata))


def _parse_documents(contents: str) -> list[LoadedDocument] | None:
    try:
        data = json.loads(contents)
    except ValueError:
        return None
    if not isinstance(data, list):
        return None
    documents = [_document_from_value(item) for item in data]
    if any(doc is None for doc in documents):
        return None
    return documents


def load_protocol_path(loaders: Mapping[str, str], path: str) -> list[LoadedDocument]:
    """Load ``protocol:rest`` with the protocol's loader command.

    The loader may print a JSON list of documents; otherwise its whole output
    becomes a single document.
    """
    protocol, sep, new_path = path.partition(":")
    loader_command = loaders.get(protocol) if sep else None
    if loader_command is None:
        raise ValueError(f"No document loader for '{path}'")
    contents = run_loader_command(new_path, protocol, loader_command)
    documents = _parse_documents(contents)
    if documents is None:
        return [LoadedDocument(path, contents, {})]
    for doc in documents:
        if doc.path.startswith(path):
            continue
        if doc.path.startswith(new_path):
            doc.path = f"{protocol}:{doc.path}"
        else:
            doc.path = f"{path}/{doc.path}"
    return documents