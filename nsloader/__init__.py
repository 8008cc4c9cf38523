"""nsloader - load classes on first use from namespace-mapped directories."""

from nsloader.config import LoaderConfig, NamespaceConfig, NamespaceMapping, load_config
from nsloader.files import FileLoader, FileSystemLoader
from nsloader.hook import HookChain, NamespaceFinder, install, uninstall
from nsloader.registry import MissingPrefixError, NamespaceRegistry, RegistryFrozenError
from nsloader.resolver import Candidate, ClassResolver

__version__ = "1.0.0"
__all__ = [
    "Candidate",
    "ClassResolver",
    "FileLoader",
    "FileSystemLoader",
    "HookChain",
    "LoaderConfig",
    "MissingPrefixError",
    "NamespaceConfig",
    "NamespaceFinder",
    "NamespaceMapping",
    "NamespaceRegistry",
    "RegistryFrozenError",
    "install",
    "load_config",
    "uninstall",
]
