"""File-system collaborator: existence checks and executing source files."""

from __future__ import annotations

import importlib.machinery
import importlib.util
import logging
import os
from types import ModuleType
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class FileLoader(Protocol):
    """Protocol the resolver uses to probe and execute class files.

    Loading is split in two so the resolver can record a module before its
    code runs: ``create`` builds an empty module for a path and ``execute``
    runs the file's code in it. Neither touches sys.modules.
    """

    def exists(self, path: str) -> bool:
        """Return True if ``path`` is an existing file."""
        ...

    def create(self, path: str, module_name: str) -> ModuleType:
        """Return a new, not yet executed module for ``path``."""
        ...

    def execute(self, module: ModuleType) -> None:
        """Run the module's source file in its namespace."""
        ...


class FileSystemLoader:
    """Executes class files as Python modules, whatever their extension."""

    def exists(self, path: str) -> bool:
        return os.path.isfile(path)

    def create(self, path: str, module_name: str) -> ModuleType:
        loader = importlib.machinery.SourceFileLoader(module_name, path)
        spec = importlib.util.spec_from_file_location(module_name, path, loader=loader)
        if spec is None or spec.loader is None:
            raise ImportError(f"Cannot load {module_name} from {path}")
        return importlib.util.module_from_spec(spec)

    def execute(self, module: ModuleType) -> None:
        module.__spec__.loader.exec_module(module)
        logger.info(f"Loaded {module.__name__} from {module.__file__}")
