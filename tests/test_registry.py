"""Tests for NamespaceRegistry."""

from __future__ import annotations

import os

import pytest

from conftest import ROOT, root_path
from nsloader.config import NamespaceMapping
from nsloader.registry import MissingPrefixError, NamespaceRegistry, RegistryFrozenError


def _registry() -> NamespaceRegistry:
    return NamespaceRegistry("App", "src", abspath=ROOT)


class TestRegister:
    def test_defaults_from_namespace(self):
        reg = _registry()
        mapping = reg.register("Models")

        assert mapping.prefix == "app\\models\\"
        assert mapping.directory == root_path("src", "models") + os.sep
        assert mapping.extension == "models"
        assert reg.get_all() == {"app\\models\\": mapping}

    def test_extension_defaults_to_last_directory_segment(self):
        mapping = _registry().register("Controllers", "app/controllers")
        assert mapping.directory == root_path("src", "app", "controllers") + os.sep
        assert mapping.extension == "controllers"

    def test_explicit_extension_is_lowercased(self):
        mapping = _registry().register("Models", "models", "Model")
        assert mapping.extension == "model"

    def test_nested_namespace_default_directory(self):
        mapping = _registry().register("Models\\Admin")
        assert mapping.prefix == "app\\models\\admin\\"
        assert mapping.directory == root_path("src", "models", "admin") + os.sep
        assert mapping.extension == "admin"

    def test_double_registration_overwrites(self):
        reg = _registry()
        reg.register("Models", "models", "model")
        reg.register("MODELS", "entities", "entity")

        assert len(reg) == 1
        mapping = reg.lookup("app\\models\\")
        assert mapping.directory == root_path("src", "entities") + os.sep
        assert mapping.extension == "entity"

    def test_empty_namespace_rejected(self):
        with pytest.raises(ValueError):
            _registry().register("\\")

    def test_no_extension_derivable(self):
        with pytest.raises(ValueError):
            _registry().register("Models", "/")

    def test_empty_base_namespace_and_directory(self):
        reg = NamespaceRegistry("", "", abspath=ROOT)
        mapping = reg.register("Models")
        assert mapping.prefix == "models\\"
        assert mapping.directory == root_path("models") + os.sep

    def test_abspath_defaults_to_cwd(self):
        reg = NamespaceRegistry("App")
        assert reg.abspath == os.path.abspath(os.getcwd()).rstrip(os.sep) + os.sep
        assert reg.base_dir == "src" + os.sep

    def test_no_existence_check(self):
        mapping = _registry().register("Ghosts", "does/not/exist", "ghost")
        assert not os.path.isdir(mapping.directory)


class TestExceptionShadow:
    def test_child_mapping(self):
        reg = _registry()
        reg.register("Models", "models", "model")
        (shadow,) = reg.register_exception_shadow("Models")

        assert shadow.prefix == "app\\models\\exceptions\\"
        assert shadow.directory == root_path("src", "models", "exceptions") + os.sep
        assert shadow.extension == "exception"
        assert "app\\models\\exceptions\\" in reg

    def test_multiple_parents(self):
        reg = _registry()
        reg.register("Models", "models", "model")
        reg.register("Controllers", "controllers", "controller")
        reg.register_exception_shadow(["Models", "Controllers"])

        assert "app\\models\\exceptions\\" in reg
        assert "app\\controllers\\exceptions\\" in reg
        assert len(reg) == 4

    def test_missing_parent_fails_without_mutation(self):
        reg = _registry()
        reg.register("Models", "models", "model")
        before = reg.get_all()

        with pytest.raises(MissingPrefixError) as exc_info:
            reg.register_exception_shadow(["Models", "Views"])

        assert exc_info.value.prefix == "app\\views\\"
        assert reg.get_all() == before

    def test_missing_prefix_is_configuration_error(self):
        assert issubclass(MissingPrefixError, ValueError)


class TestBulkAccess:
    def test_replace_all_round_trip(self):
        reg = _registry()
        reg.register("Models", "models", "model")
        reg.register("Controllers", "controllers", "controller")
        snapshot = reg.get_all()

        other = _registry()
        other.replace_all(snapshot)
        assert other.get_all() == snapshot

    def test_replace_all_normalises_keys(self):
        reg = _registry()
        reg.register("Models")
        reg.replace_all({
            "App\\Other": NamespaceMapping("App\\Other", root_path("other") + os.sep, "Thing"),
        })

        assert list(reg) == ["app\\other\\"]
        mapping = reg.lookup("app\\other\\")
        assert mapping.prefix == "app\\other\\"
        assert mapping.extension == "thing"

    def test_get_all_is_a_copy(self):
        reg = _registry()
        reg.register("Models")
        reg.get_all().clear()
        assert len(reg) == 1

    def test_mappings_keep_registration_order(self):
        reg = _registry()
        reg.register("Zeta")
        reg.register("Alpha")
        assert [m.prefix for m in reg.mappings()] == ["app\\zeta\\", "app\\alpha\\"]


class TestFreeze:
    def test_frozen_registry_rejects_mutation(self):
        reg = _registry()
        reg.register("Models", "models", "model")
        reg.freeze()

        assert reg.frozen
        with pytest.raises(RegistryFrozenError):
            reg.register("Controllers")
        with pytest.raises(RegistryFrozenError):
            reg.register_exception_shadow("Models")
        with pytest.raises(RegistryFrozenError):
            reg.replace_all({})

    def test_frozen_registry_still_readable(self):
        reg = _registry()
        reg.register("Models", "models", "model")
        reg.freeze()
        assert reg.lookup("app\\models\\").extension == "model"
