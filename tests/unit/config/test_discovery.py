from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from openspec.config import (
    find_project_root,
    get_change_dir,
    get_config_path_candidates,
    get_global_data_dir,
    get_package_schemas_dir,
    get_project_schemas_dir,
    get_user_schemas_dir,
    resolve_project_root,
)

if TYPE_CHECKING:
    from pyfakefs.fake_filesystem import FakeFilesystem


class TestFindProjectRoot:
    def test_finds_project_root_in_current_directory(self, fs: FakeFilesystem) -> None:
        fs.create_dir("/project/openspec")

        assert find_project_root(Path("/project")) == Path("/project")

    def test_finds_project_root_in_parent_directory(self, fs: FakeFilesystem) -> None:
        fs.create_dir("/project/openspec")
        fs.create_dir("/project/src/deep")

        assert find_project_root(Path("/project/src/deep")) == Path("/project")

    def test_nearest_ancestor_wins(self, fs: FakeFilesystem) -> None:
        fs.create_dir("/outer/openspec")
        fs.create_dir("/outer/inner/openspec")

        assert find_project_root(Path("/outer/inner")) == Path("/outer/inner")

    def test_openspec_file_is_not_a_marker(self, fs: FakeFilesystem) -> None:
        fs.create_file("/project/openspec")

        assert find_project_root(Path("/project")) is None

    def test_returns_none_when_no_project_root_found(self, fs: FakeFilesystem) -> None:
        fs.create_dir("/some/path")

        assert find_project_root(Path("/some/path")) is None

    def test_uses_cwd_when_start_is_none(self, fs: FakeFilesystem) -> None:
        fs.create_dir("/cwd/openspec")
        fs.cwd = "/cwd"

        assert find_project_root(None) == Path("/cwd")


class TestResolveProjectRoot:
    def test_explicit_root_wins(self, fs: FakeFilesystem) -> None:
        fs.create_dir("/cwd/openspec")
        fs.create_dir("/elsewhere")
        fs.cwd = "/cwd"

        assert resolve_project_root(Path("/elsewhere")) == Path("/elsewhere")

    def test_discovered_root(self, fs: FakeFilesystem) -> None:
        fs.create_dir("/project/openspec")
        fs.create_dir("/project/sub")
        fs.cwd = "/project/sub"

        assert resolve_project_root() == Path("/project")

    def test_falls_back_to_cwd(self, fs: FakeFilesystem) -> None:
        fs.create_dir("/plain")
        fs.cwd = "/plain"

        assert resolve_project_root() == Path("/plain")


class TestPaths:
    def test_project_paths(self) -> None:
        root = Path("/project")

        assert get_change_dir(root, "add-auth") == Path("/project/openspec/changes/add-auth")
        assert get_project_schemas_dir(root) == Path("/project/openspec/schemas")
        assert get_config_path_candidates(root) == (
            Path("/project/openspec/config.yaml"),
            Path("/project/openspec/config.yml"),
        )

    def test_global_data_dir_honors_xdg(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("XDG_DATA_HOME", "/xdg")

        assert get_global_data_dir() == Path("/xdg/openspec")
        assert get_user_schemas_dir() == Path("/xdg/openspec/schemas")

    def test_global_data_dir_without_xdg(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("XDG_DATA_HOME")

        assert get_global_data_dir().name == "openspec"

    def test_package_schemas_dir_ships_default_schema(self) -> None:
        assert (get_package_schemas_dir() / "spec-driven" / "schema.yaml").is_file()
