"""Core data types and configuration for nsloader."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

DEFAULT_BASE_DIR = "src"
DEFAULT_SOURCE_EXT = ".py"
EXCEPTIONS_SEGMENT = "exceptions"
EXCEPTION_EXTENSION = "exception"


@dataclass(frozen=True)
class NamespaceMapping:
    """One registry entry: where a namespace prefix lives and its file suffix."""
    prefix: str
    directory: str
    extension: str


@dataclass
class NamespaceConfig:
    """Arguments of a single ``register`` call."""
    namespace: str
    directory: str | None = None
    extension: str | None = None


@dataclass
class LoaderConfig:
    base_namespace: str = ""
    base_dir: str = DEFAULT_BASE_DIR
    abspath: str | None = None
    source_ext: str = DEFAULT_SOURCE_EXT
    cross_mapping_fallback: bool = True
    namespaces: list[NamespaceConfig] = field(default_factory=list)
    exception_shadows: list[str] = field(default_factory=list)


def _namespace_from_raw(raw: Any) -> NamespaceConfig:
    if isinstance(raw, str):
        return NamespaceConfig(namespace=raw)
    if not isinstance(raw, dict) or "namespace" not in raw:
        raise ValueError(f"Invalid namespace entry: {raw!r}")
    return NamespaceConfig(
        namespace=raw["namespace"],
        directory=raw.get("directory"),
        extension=raw.get("extension"),
    )


def config_from_dict(data: dict[str, Any], root: str | None = None) -> LoaderConfig:
    """Build a LoaderConfig from parsed JSON.

    A relative ``abspath`` is taken relative to ``root`` (the directory of
    the config file) when one is given.
    """
    if not isinstance(data, dict):
        raise ValueError("Loader configuration must be a JSON object")

    abspath = data.get("abspath")
    if root is not None:
        abspath = str(Path(root) / abspath) if abspath else root

    shadows = data.get("exception_shadows", [])
    if isinstance(shadows, str):
        shadows = [shadows]

    return LoaderConfig(
        base_namespace=data.get("base_namespace", ""),
        base_dir=data.get("base_dir", DEFAULT_BASE_DIR),
        abspath=abspath,
        source_ext=data.get("source_ext", DEFAULT_SOURCE_EXT),
        cross_mapping_fallback=bool(data.get("cross_mapping_fallback", True)),
        namespaces=[_namespace_from_raw(raw) for raw in data.get("namespaces", [])],
        exception_shadows=list(shadows),
    )


def load_config(path: str | Path) -> LoaderConfig:
    """Read a JSON loader configuration file."""
    config_path = Path(path)
    try:
        data = json.loads(config_path.read_text())
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {config_path}: {e}") from e
    return config_from_dict(data, root=str(config_path.resolve().parent))
