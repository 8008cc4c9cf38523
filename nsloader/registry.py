"""Namespace prefix registry: prefix -> directory and file extension."""

from __future__ import annotations

import logging
import os
import threading
from collections.abc import Iterable, Iterator, Mapping

from nsloader.config import (
    DEFAULT_BASE_DIR,
    EXCEPTION_EXTENSION,
    EXCEPTIONS_SEGMENT,
    NamespaceMapping,
)
from nsloader.naming import (
    NAMESPACE_SEPARATOR,
    ascii_lower,
    last_segment,
    namespace_to_path,
    normalize_directory,
    normalize_namespace,
    normalize_root,
)

logger = logging.getLogger(__name__)


class MissingPrefixError(ValueError):
    """Raised when a namespace prefix that must already exist is not registered."""

    def __init__(self, prefix: str) -> None:
        super().__init__(f'The namespace prefix "{prefix}" is not set.')
        self.prefix = prefix


class RegistryFrozenError(RuntimeError):
    """Raised when a frozen registry is mutated."""


class NamespaceRegistry:
    """Maps namespace prefixes to a directory and a file extension.

    Every registered prefix is qualified with the base namespace and every
    directory with the project root and base directory, so no mapping can
    point outside of them. Registration and lookup share one lock;
    ``freeze()`` makes the registry read-only once resolution starts.
    """

    def __init__(
        self,
        base_namespace: str = "",
        base_dir: str = DEFAULT_BASE_DIR,
        abspath: str | None = None,
    ) -> None:
        self.base_namespace = normalize_namespace(base_namespace)
        self.base_dir = normalize_directory(base_dir)
        self.abspath = normalize_root(abspath if abspath is not None else os.getcwd())
        self._prefixes: dict[str, NamespaceMapping] = {}
        self._lock = threading.RLock()
        self._frozen = False

    def qualify_namespace(self, namespace: str) -> str:
        return self.base_namespace + normalize_namespace(namespace)

    def qualify_directory(self, directory: str) -> str:
        return self.abspath + self.base_dir + normalize_directory(directory)

    # --- Registration ---

    def register(
        self,
        namespace: str,
        directory: str | None = None,
        extension: str | None = None,
    ) -> NamespaceMapping:
        """Link a namespace to a directory and a file extension.

        With only a namespace, the directory is the namespace turned into a
        path (``Admin\\Models`` -> ``Admin/Models``). Without an extension,
        the last segment of the directory is used (``Admin/Models`` ->
        ``models``). An existing mapping for the same prefix is replaced.
        """
        if not normalize_namespace(namespace):
            raise ValueError("A namespace is required to register a prefix")

        if directory is None:
            directory = namespace_to_path(namespace)
        if not extension:
            extension = last_segment(directory)
        extension = ascii_lower(extension.strip())
        if not extension:
            raise ValueError(f"Cannot derive a file extension for namespace {namespace!r}")

        mapping = NamespaceMapping(
            prefix=self.qualify_namespace(namespace),
            directory=self.qualify_directory(directory),
            extension=extension,
        )
        with self._lock:
            self._check_mutable()
            self._prefixes[mapping.prefix] = mapping
        logger.debug(f"Registered {mapping.prefix} -> {mapping.directory} (.{mapping.extension})")
        return mapping

    def register_exception_shadow(self, namespaces: str | Iterable[str]) -> list[NamespaceMapping]:
        """Add an ``exceptions`` child mapping for already registered namespaces.

        ``Models`` -> prefix ``<base>\\models\\exceptions\\``, directory
        ``<models dir>/exceptions/``, extension ``exception``. Raises
        MissingPrefixError before registering anything when one of the
        parents is not set.
        """
        if isinstance(namespaces, str):
            namespaces = [namespaces]

        with self._lock:
            self._check_mutable()
            parents = []
            for namespace in namespaces:
                parent = self.qualify_namespace(namespace)
                if parent not in self._prefixes:
                    raise MissingPrefixError(parent)
                parents.append(self._prefixes[parent])

            shadows = []
            for parent in parents:
                shadow = NamespaceMapping(
                    prefix=parent.prefix + EXCEPTIONS_SEGMENT + NAMESPACE_SEPARATOR,
                    directory=parent.directory + EXCEPTIONS_SEGMENT + os.sep,
                    extension=EXCEPTION_EXTENSION,
                )
                self._prefixes[shadow.prefix] = shadow
                shadows.append(shadow)
                logger.debug(f"Registered exception shadow {shadow.prefix} -> {shadow.directory}")
        return shadows

    def replace_all(self, mappings: Mapping[str, NamespaceMapping]) -> None:
        """Replace every registered mapping. Keys are re-normalised."""
        prefixes = {}
        for prefix, mapping in mappings.items():
            key = normalize_namespace(prefix)
            prefixes[key] = NamespaceMapping(
                prefix=key,
                directory=mapping.directory,
                extension=ascii_lower(mapping.extension),
            )
        with self._lock:
            self._check_mutable()
            self._prefixes = prefixes

    def freeze(self) -> None:
        with self._lock:
            self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def _check_mutable(self) -> None:
        if self._frozen:
            raise RegistryFrozenError("The namespace registry is frozen")

    # --- Lookup ---

    def get_all(self) -> dict[str, NamespaceMapping]:
        with self._lock:
            return dict(self._prefixes)

    def lookup(self, prefix: str) -> NamespaceMapping | None:
        with self._lock:
            return self._prefixes.get(prefix)

    def mappings(self) -> list[NamespaceMapping]:
        """Snapshot of all mappings in registration order."""
        with self._lock:
            return list(self._prefixes.values())

    def __contains__(self, prefix: object) -> bool:
        with self._lock:
            return prefix in self._prefixes

    def __iter__(self) -> Iterator[str]:
        return iter(self.get_all())

    def __len__(self) -> int:
        with self._lock:
            return len(self._prefixes)
