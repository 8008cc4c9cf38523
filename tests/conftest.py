"""Shared fixtures: probe-recording loader and import-state isolation."""

from __future__ import annotations

import os
import sys
import types

import pytest

FIXTURES_DIR = os.path.join(os.path.dirname(os.path.realpath(__file__)), "fixtures")
PROJECT_DIR = os.path.join(FIXTURES_DIR, "project")
ROOT = os.path.abspath(os.sep + "project") + os.sep


def root_path(*parts: str) -> str:
    """Absolute path under the fake ``/project`` root used by in-memory tests."""
    return ROOT + os.sep.join(parts)


class RecordingLoader:
    """FileLoader that only knows a fixed set of files and records every call."""

    def __init__(self, existing=()):
        self.existing = set(existing)
        self.probed: list[str] = []
        self.loaded: list[str] = []

    def exists(self, path: str) -> bool:
        self.probed.append(path)
        return path in self.existing

    def create(self, path: str, module_name: str) -> types.ModuleType:
        module = types.ModuleType(module_name)
        module.__file__ = path
        return module

    def execute(self, module: types.ModuleType) -> None:
        self.loaded.append(module.__file__)


@pytest.fixture(autouse=True)
def isolate_imports():
    """Drop fixture modules and installed finders after each test."""
    meta_path = list(sys.meta_path)
    before = set(sys.modules)
    yield
    sys.meta_path[:] = meta_path
    for name in set(sys.modules) - before:
        if name.split(".")[0].lower() == "app":
            del sys.modules[name]
