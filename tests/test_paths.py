"""Tests for path normalization and aliasing."""

from pathlib import Path

import pytest
from manifest_require.errors import ConfigurationError
from manifest_require.paths import alias_request
from manifest_require.paths import is_package_request
from manifest_require.paths import normalize_asset_path
from manifest_require.paths import uniform_path


class TestNormalizeAssetPath:
    """Tests for normalize_asset_path."""

    def test_project_file(self, project: Path) -> None:
        """Files inside the project get a single ./ prefix."""
        key = normalize_asset_path(project / "styles" / "app.css", project)
        assert key == "./styles/app.css"

    def test_same_file_different_spellings(self, project: Path) -> None:
        """Dot segments collapse to the same key."""
        plain = normalize_asset_path(f"{project}/styles/app.css", project)
        dotted = normalize_asset_path(f"{project}/./styles/app.css", project)
        detour = normalize_asset_path(f"{project}/other/../styles/app.css", project)
        assert plain == dotted == detour == "./styles/app.css"

    def test_windows_separators(self) -> None:
        """Backslashes and forward slashes normalize identically."""
        backslashes = normalize_asset_path(r"C:\proj\styles\app.css", r"C:\proj")
        forward = normalize_asset_path("C:/proj/styles/app.css", "C:/proj")
        mixed = normalize_asset_path("C:/proj\\styles/app.css", "C:\\proj")
        assert backslashes == forward == mixed == "./styles/app.css"

    def test_outside_project(self, project: Path) -> None:
        """Files above the project keep a single ../ prefix."""
        key = normalize_asset_path(project.parent / "shared" / "x.css", project)
        assert key == "../shared/x.css"

    def test_dependency_directory(self, project: Path) -> None:
        """node_modules paths are left unfolded."""
        path = project / "node_modules" / "lib" / "index.css"
        assert normalize_asset_path(path, project) == "./node_modules/lib/index.css"

    @pytest.mark.parametrize("project_path", [None, ""])
    def test_requires_project_path(self, project_path) -> None:
        """Normalizing before setup is a configuration error."""
        with pytest.raises(ConfigurationError):
            normalize_asset_path("/srv/app/styles/app.css", project_path)


class TestUniformPath:
    """Tests for uniform_path."""

    def test_adds_prefix(self) -> None:
        assert uniform_path("styles/app.css") == "./styles/app.css"

    def test_never_duplicates_prefix(self) -> None:
        assert uniform_path("./styles/app.css") == "./styles/app.css"
        assert uniform_path("../styles/app.css") == "../styles/app.css"

    def test_converts_separators(self) -> None:
        assert uniform_path("styles\\img\\a.png") == "./styles/img/a.png"


class TestAliasRequest:
    """Tests for alias_request."""

    def test_relative_target(self, project: Path) -> None:
        """Relative alias targets resolve against the project path."""
        result = alias_request("styles/app.css", {"styles": "./src/styles"}, project)
        assert result == f"{project.as_posix()}/src/styles/app.css"

    def test_whole_module_name(self) -> None:
        """A request equal to the alias key maps to the target itself."""
        assert alias_request("lib", {"lib": "/opt/lib"}, None) == "/opt/lib"

    def test_prefix_must_be_a_whole_segment(self) -> None:
        """'library/x' does not match the 'lib' alias."""
        assert alias_request("library/x", {"lib": "/opt/lib"}, None) is None

    def test_relative_and_absolute_requests_untouched(self) -> None:
        aliases = {"styles": "/opt/styles"}
        assert alias_request("./styles/app.css", aliases, None) is None
        assert alias_request("/styles/app.css", aliases, None) is None

    def test_no_aliases(self) -> None:
        assert alias_request("styles/app.css", None, None) is None

    def test_relative_target_requires_project_path(self) -> None:
        with pytest.raises(ConfigurationError):
            alias_request("styles/app.css", {"styles": "./src/styles"}, None)


def test_is_package_request() -> None:
    """Bare requests are package requests, paths are not."""
    assert is_package_request("lodash/fp")
    assert not is_package_request("./lodash")
    assert not is_package_request("/lodash")
    assert not is_package_request("C:/lodash")
