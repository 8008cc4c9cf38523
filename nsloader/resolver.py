"""Class resolution: longest namespace prefix first, then the filename convention."""

from __future__ import annotations

import logging
import os
import sys
import threading
from collections.abc import Iterator
from dataclasses import dataclass
from types import ModuleType

from nsloader.config import DEFAULT_SOURCE_EXT, LoaderConfig, NamespaceMapping
from nsloader.files import FileLoader, FileSystemLoader
from nsloader.naming import (
    NAMESPACE_SEPARATOR,
    ascii_lower,
    class_filename,
    normalize_namespace,
    split_namespace,
    to_module_name,
)
from nsloader.registry import NamespaceRegistry

logger = logging.getLogger(__name__)

# Per-path load states
_CREATED = "created"
_RUNNING = "running"
_DONE = "done"


@dataclass(frozen=True)
class Candidate:
    """One file the resolver would probe for a class name."""
    prefix: str
    relative_class: str
    mapping: NamespaceMapping
    path: str


class ClassResolver:
    """Finds and loads the file defining a fully-qualified class name.

    The namespace is walked from the most specific prefix to the least
    specific one (``app\\models\\admin\\`` before ``app\\models\\``). A prefix
    is only considered when it is registered, but once it is, every
    registered mapping is tried in registration order so a class can be
    found under another mapping's directory and extension. Set
    ``cross_mapping_fallback=False`` to only try the matched mapping.

    Each file is executed at most once; resolving a second name that lands
    on the same file reuses the loaded module.
    """

    def __init__(
        self,
        registry: NamespaceRegistry,
        file_loader: FileLoader | None = None,
        *,
        source_ext: str = DEFAULT_SOURCE_EXT,
        cross_mapping_fallback: bool = True,
    ) -> None:
        self.registry = registry
        self.file_loader = file_loader if file_loader is not None else FileSystemLoader()
        self.source_ext = source_ext if source_ext.startswith(".") else f".{source_ext}"
        self.cross_mapping_fallback = cross_mapping_fallback
        self._modules: dict[str, ModuleType] = {}
        self._states: dict[str, str] = {}
        self._lock = threading.RLock()

    @classmethod
    def from_config(
        cls, config: LoaderConfig, file_loader: FileLoader | None = None
    ) -> ClassResolver:
        """Build a registry from the config, register its namespaces and wrap it."""
        registry = NamespaceRegistry(
            base_namespace=config.base_namespace,
            base_dir=config.base_dir,
            abspath=config.abspath,
        )
        for ns in config.namespaces:
            registry.register(ns.namespace, ns.directory, ns.extension)
        if config.exception_shadows:
            registry.register_exception_shadow(config.exception_shadows)

        return cls(
            registry,
            file_loader,
            source_ext=config.source_ext,
            cross_mapping_fallback=config.cross_mapping_fallback,
        )

    def __call__(self, name: str) -> bool:
        return self.resolve(name)

    # --- Probe plan ---

    def _splits(self, name: str) -> Iterator[tuple[str, str]]:
        """Yield (prefix, relative_class) pairs, most specific prefix first."""
        segments = split_namespace(name)
        for i in range(len(segments) - 1, 0, -1):
            prefix = NAMESPACE_SEPARATOR.join(segments[:i]) + NAMESPACE_SEPARATOR
            yield prefix, NAMESPACE_SEPARATOR.join(segments[i:])

    def _mappings_for(self, prefix: str) -> list[NamespaceMapping]:
        matched = self.registry.lookup(prefix)
        if matched is None:
            return []
        if not self.cross_mapping_fallback:
            return [matched]
        return self.registry.mappings()

    def build_path(self, mapping: NamespaceMapping, relative_class: str) -> str:
        return mapping.directory + class_filename(relative_class, mapping.extension, self.source_ext)

    def candidates(self, name: str) -> list[Candidate]:
        """Every path resolution of ``name`` would probe, in probe order."""
        plan = []
        for prefix, relative in self._splits(name):
            for mapping in self._mappings_for(prefix):
                plan.append(Candidate(prefix, relative, mapping, self.build_path(mapping, relative)))
        return plan

    # --- Resolution ---

    def _find(self, prefix: str, relative_class: str) -> str | None:
        for mapping in self._mappings_for(prefix):
            path = self.build_path(mapping, relative_class)
            logger.debug(f"Probing {path} for {prefix}{relative_class}")
            if self.file_loader.exists(path):
                return path
        return None

    def locate(self, name: str) -> str | None:
        """Return the file that defines ``name`` without loading it."""
        for prefix, relative in self._splits(name):
            path = self._find(prefix, relative)
            if path is not None:
                return path
        return None

    def try_load(
        self, prefix: str, relative_class: str, module_name: str | None = None
    ) -> bool:
        """Load ``relative_class`` under a single candidate prefix."""
        path = self._find(prefix, relative_class)
        if path is None:
            return False
        self.require(path, module_name or to_module_name(prefix + relative_class))
        return True

    def resolve(self, name: str) -> bool:
        """Load the file defining ``name``. Returns False when none is found."""
        return self.load_module(name) is not None

    def load_module(self, name: str) -> ModuleType | None:
        path = self.locate(name)
        if path is None:
            logger.debug(f"No class file found for {name}")
            return None
        return self.require(path, to_module_name(name))

    def require(self, path: str, module_name: str) -> ModuleType:
        """Execute ``path`` unless it was already loaded, then return its module."""
        module = self.prepare(path, module_name)
        self.execute(path)
        return module

    def prepare(self, path: str, module_name: str) -> ModuleType:
        """Return the module for ``path``, creating it without running it.

        The module is recorded before any of its code runs, so a resolution
        that comes back to the file while it executes gets this module
        instead of running the file again. ``module_name`` is bound to it in
        sys.modules unless that name already holds another module.
        """
        with self._lock:
            module = self._modules.get(path)
            if module is None:
                module = self.file_loader.create(path, module_name)
                self._modules[path] = module
                self._states[path] = _CREATED
            self._bind(module_name, module)
            return module

    def execute(self, path: str) -> None:
        """Run a prepared file. Only the first call runs it, later ones return at once.

        The lock is not held while the file runs: its code may import other
        class files, from this thread or while other threads do the same. A
        caller reaching a file that is still running gets the partially
        initialised module, as with a circular import.
        """
        with self._lock:
            if self._states.get(path) != _CREATED:
                return
            self._states[path] = _RUNNING
            module = self._modules[path]

        try:
            self.file_loader.execute(module)
        except BaseException:
            self._discard(path, module)
            raise

        with self._lock:
            self._states[path] = _DONE

    def _bind(self, module_name: str, module: ModuleType) -> None:
        bound = sys.modules.get(module_name)
        if bound is None:
            sys.modules[module_name] = module
        elif bound is not module:
            logger.warning(f"{module_name} already names another module; not replacing it")

    def _discard(self, path: str, module: ModuleType) -> None:
        with self._lock:
            self._modules.pop(path, None)
            self._states.pop(path, None)
            for name, bound in list(sys.modules.items()):
                if bound is module:
                    del sys.modules[name]

    def is_loaded(self, path: str) -> bool:
        with self._lock:
            return self._states.get(path) == _DONE

    def load_class(self, name: str) -> type | None:
        """Resolve ``name`` and return the class it names, matched case-insensitively."""
        module = self.load_module(name)
        if module is None:
            return None

        wanted = split_namespace(name)[-1]
        for attr, value in vars(module).items():
            if isinstance(value, type) and ascii_lower(attr) == wanted:
                return value
        logger.warning(f"{module.__name__} was loaded but defines no class named {wanted}")
        return None

    def package_directories(self, name: str) -> list[str]:
        """Directories the namespace ``name`` maps to under registered prefixes."""
        namespace = normalize_namespace(name)
        dirs = []
        for mapping in self.registry.mappings():
            if not namespace.startswith(mapping.prefix):
                continue
            relative = namespace[len(mapping.prefix):]
            dirs.append(mapping.directory + relative.replace(NAMESPACE_SEPARATOR, os.sep))
        return dirs
