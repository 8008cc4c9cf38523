"""Namespace and directory normalisation plus the filename convention."""

from __future__ import annotations

import os
import string

NAMESPACE_SEPARATOR = "\\"
NAMESPACE_SEPARATORS = ("\\", ".")
PATH_SEPARATORS = ("\\", "/")

_ASCII_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)


def ascii_lower(value: str) -> str:
    """Lowercase ASCII letters only, independent of locale."""
    return value.translate(_ASCII_LOWER)


def _canonical_separators(value: str) -> str:
    for sep in NAMESPACE_SEPARATORS:
        if sep != NAMESPACE_SEPARATOR:
            value = value.replace(sep, NAMESPACE_SEPARATOR)
    return value


def split_namespace(name: str) -> list[str]:
    """Split a namespace or class name into lowercase segments.

    Both ``\\`` and ``.`` count as separators. Leading and trailing
    separators are ignored, so ``"\\App\\Models\\"`` gives
    ``["app", "models"]``.
    """
    name = ascii_lower(_canonical_separators(name.strip()))
    name = name.strip(NAMESPACE_SEPARATOR)
    if not name:
        return []
    return name.split(NAMESPACE_SEPARATOR)


def normalize_namespace(namespace: str) -> str:
    """Lowercase, trim separators and append exactly one trailing separator."""
    segments = split_namespace(namespace)
    if not segments:
        return ""
    return NAMESPACE_SEPARATOR.join(segments) + NAMESPACE_SEPARATOR


def normalize_directory(directory: str) -> str:
    """Lowercase, use ``os.sep`` and append exactly one trailing separator."""
    for sep in PATH_SEPARATORS:
        directory = directory.replace(sep, os.sep)
    directory = ascii_lower(directory.strip()).strip(os.sep)
    if not directory:
        return ""
    return directory + os.sep


def normalize_root(path: str) -> str:
    """Absolute project root with one trailing separator. Case is preserved."""
    root = os.path.abspath(path)
    return root.rstrip(os.sep) + os.sep


def namespace_to_path(namespace: str) -> str:
    """``App\\Controllers`` -> ``App/Controllers`` (case preserved)."""
    value = _canonical_separators(namespace.strip()).strip(NAMESPACE_SEPARATOR)
    return value.replace(NAMESPACE_SEPARATOR, "/")


def last_segment(directory: str) -> str:
    """Final segment of a directory, ignoring trailing separators."""
    return os.path.basename(normalize_directory(directory).rstrip(os.sep))


def class_filename(relative_class: str, extension: str, source_ext: str) -> str:
    """Relative file path for a class under a mapping's directory.

    The standard class of a type is named after the extension itself and
    gets no extra suffix: ``model`` -> ``model.py``, ``book`` ->
    ``book.model.py``. Namespace separators inside the relative class map to
    path separators.
    """
    relative_path = relative_class.replace(NAMESPACE_SEPARATOR, os.sep)
    if relative_class == extension:
        return f"{relative_path}{source_ext}"
    return f"{relative_path}.{extension}{source_ext}"


def to_module_name(name: str) -> str:
    """Dotted module name for a class name, case preserved."""
    value = _canonical_separators(name.strip()).strip(NAMESPACE_SEPARATOR)
    return value.replace(NAMESPACE_SEPARATOR, ".")
