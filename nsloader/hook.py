"""Installation of a resolver into the import system and plain callback chains."""

from __future__ import annotations

import importlib.abc
import importlib.machinery
import logging
import os
import sys
from collections.abc import Callable
from types import ModuleType

from nsloader.naming import normalize_namespace
from nsloader.resolver import ClassResolver

logger = logging.getLogger(__name__)

ResolutionHook = Callable[[str], bool]


class NamespaceFinder(importlib.abc.MetaPathFinder, importlib.abc.Loader):
    """Meta path finder backed by a ClassResolver.

    ``import app.models.book`` loads the class file the resolver locates for
    ``app\\models\\book``. Registered prefixes, their parents and existing
    sub-directories of registered directories import as empty packages so
    dotted imports can reach the class files below them.
    """

    def __init__(self, resolver: ClassResolver) -> None:
        self.resolver = resolver

    def find_spec(self, fullname, path=None, target=None):
        located = self.resolver.locate(fullname)
        if located is not None:
            spec = importlib.machinery.ModuleSpec(fullname, self, origin=located)
            spec.has_location = True
            return spec

        if self._is_namespace(fullname):
            return importlib.machinery.ModuleSpec(fullname, self, is_package=True)
        return None

    def _is_namespace(self, fullname: str) -> bool:
        prefix = normalize_namespace(fullname)
        if not prefix:
            return False
        if any(registered.startswith(prefix) for registered in self.resolver.registry):
            return True
        return any(os.path.isdir(d) for d in self.resolver.package_directories(fullname))

    def create_module(self, spec) -> ModuleType | None:
        if not spec.has_location:
            return None
        return self.resolver.prepare(spec.origin, spec.name)

    def exec_module(self, module: ModuleType) -> None:
        # Packages have no file; a file loaded before is not run again.
        path = getattr(module, "__file__", None)
        if path is not None:
            self.resolver.execute(path)


def _installed_finder(resolver: ClassResolver) -> NamespaceFinder | None:
    for finder in sys.meta_path:
        if isinstance(finder, NamespaceFinder) and finder.resolver is resolver:
            return finder
    return None


def install(
    resolver: ClassResolver, prepend: bool = False, freeze: bool = False
) -> NamespaceFinder:
    """Add a finder for ``resolver`` to sys.meta_path, once per resolver.

    Appended by default so regular imports are tried first. With
    ``freeze=True`` the registry is made read-only before installation.
    """
    if freeze:
        resolver.registry.freeze()

    finder = _installed_finder(resolver)
    if finder is not None:
        return finder

    finder = NamespaceFinder(resolver)
    if prepend:
        sys.meta_path.insert(0, finder)
    else:
        sys.meta_path.append(finder)
    logger.debug(f"Installed namespace finder with {len(resolver.registry)} prefixes")
    return finder


def uninstall(resolver: ClassResolver) -> bool:
    """Remove the resolver's finder from sys.meta_path. Returns False if absent."""
    finder = _installed_finder(resolver)
    if finder is None:
        return False
    sys.meta_path.remove(finder)
    return True


class HookChain:
    """Ordered ``(name) -> bool`` callbacks, tried until one resolves the name."""

    def __init__(self) -> None:
        self._hooks: list[ResolutionHook] = []

    def register(self, hook: ResolutionHook, prepend: bool = False) -> None:
        if hook in self._hooks:
            return
        if prepend:
            self._hooks.insert(0, hook)
        else:
            self._hooks.append(hook)

    def unregister(self, hook: ResolutionHook) -> bool:
        if hook not in self._hooks:
            return False
        self._hooks.remove(hook)
        return True

    def resolve(self, name: str) -> bool:
        for hook in list(self._hooks):
            if hook(name):
                return True
        return False

    def hooks(self) -> list[ResolutionHook]:
        return list(self._hooks)

    def __len__(self) -> int:
        return len(self._hooks)
