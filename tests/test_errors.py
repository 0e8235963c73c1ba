"""Tests for the error taxonomy."""

from manifest_require.errors import AssetNotFound
from manifest_require.errors import ConfigurationError
from manifest_require.errors import InvalidModeError
from manifest_require.errors import ManifestMissing
from manifest_require.errors import ManifestNotReady
from manifest_require.errors import ManifestRequireError


def test_all_errors_share_a_base() -> None:
    errors = [
        ConfigurationError("setup not completed"),
        ManifestMissing("missing", path="/srv/webpack-assets.json"),
        ManifestNotReady("not yet", source="http://localhost:3001/"),
        AssetNotFound("asset not found: ./a.css", key="./a.css"),
        InvalidModeError("production"),
    ]
    for err in errors:
        assert isinstance(err, ManifestRequireError), type(err).__name__


def test_attributes() -> None:
    assert ManifestMissing("m", path="/srv/m.json").path == "/srv/m.json"
    assert ManifestNotReady("m").source is None

    err = AssetNotFound("asset not found: ./a.css", key="./a.css")
    assert str(err) == "asset not found: ./a.css"
    assert err.key == "./a.css"
    assert err.candidates == []
