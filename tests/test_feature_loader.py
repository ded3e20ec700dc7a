"""
Tests for the feature loader — reading, caching, start-order normalization.
"""

import json
from pathlib import Path

import pytest

from featurelauncher.core.errors import ParseError, ResolutionError, VariableError
from featurelauncher.core.models import Artifact, ArtifactId
from featurelauncher.core.services.feature_loader import (
    create_application,
    normalize_start_orders,
    read_feature,
)

APP = {
    "id": "org.example:app:slingosgifeature:1.0.0",
    "variables": {"port": "8080"},
    "bundles": [
        "org.example:core:1.0.0",
        {"id": "org.example:web:1.0.0", "start-level": "10"},
        {"id": "org.example:api:1.0.0", "start-order": 7, "start-level": "99"},
    ],
    "framework-properties": {"http.port": "${port}"},
}


class TestReadFeature:
    def test_absolute_path(self, write_feature, manager):
        path = write_feature(APP)
        f = read_feature(str(path), manager)
        assert str(f.id) == APP["id"]
        assert f.location == path.resolve().as_uri()

    def test_relative_path_made_absolute(self, write_feature, manager, tmp_path, monkeypatch):
        write_feature(APP, "relative.json")
        monkeypatch.chdir(tmp_path)
        f = read_feature("relative.json", manager)
        assert str(f.id) == APP["id"]

    @pytest.mark.parametrize("name", [":app.json", "C:app.json"])
    def test_colon_before_index_two_is_a_path(self, write_feature, manager, tmp_path, monkeypatch, name):
        write_feature(APP, name)
        monkeypatch.chdir(tmp_path)
        seen = []
        resolve = manager.resolve
        monkeypatch.setattr(manager, "resolve", lambda location: seen.append(location) or resolve(location))

        f = read_feature(name, manager)
        assert seen == [str(Path.cwd() / name)]
        assert str(f.id) == APP["id"]

    def test_coordinate_resolved_through_repositories(self, manager, mock_provider):
        aid = ArtifactId.parse("org.example:app:slingosgifeature:1.0.0")
        target = mock_provider.file_for(aid)
        target.parent.mkdir(parents=True)
        target.write_text(json.dumps(APP))

        f = read_feature(str(aid), manager)
        assert f.id == aid
        assert mock_provider.call_log == [aid.to_mvn_path()]

    def test_variables_resolved_with_overrides(self, write_feature, manager):
        f = read_feature(str(write_feature(APP)), manager, {"port": "9090"})
        assert f.framework_properties["http.port"] == "9090"

    def test_missing_file_raises_resolution_error(self, tmp_path, manager):
        with pytest.raises(ResolutionError):
            read_feature(str(tmp_path / "missing.json"), manager)

    def test_unresolvable_coordinate_raises(self, manager, mock_provider):
        mock_provider.set_missing(ArtifactId.parse("org.example:gone:slingosgifeature:1"))
        with pytest.raises(ResolutionError):
            read_feature("org.example:gone:slingosgifeature:1", manager)

    def test_malformed_content_raises_parse_error(self, tmp_path, manager):
        path = tmp_path / "broken.json"
        path.write_text("{ nope")
        with pytest.raises(ParseError):
            read_feature(str(path), manager)

    def test_unresolved_variable_raises(self, write_feature, manager):
        path = write_feature({
            "id": "g:app:1",
            "variables": {"secret": None},
            "framework-properties": {"pw": "${secret}"},
        })
        with pytest.raises(VariableError):
            read_feature(str(path), manager)


class TestCreateApplication:
    def test_explicit_feature_is_cached(self, write_feature, manager, launcher_config):
        config = launcher_config.model_copy(update={
            "application_file": str(write_feature(APP)),
            "variables": {"port": "1234"},
        })
        app = create_application(config, manager)

        cache = config.application_cache_path
        assert cache == config.home_directory / "resources" / "provisioning" / "application.json"
        assert cache.is_file()
        cached = json.loads(cache.read_text())
        assert cached["id"] == APP["id"]
        assert cached["framework-properties"] == {"http.port": "1234"}
        assert app.framework_properties == {"http.port": "1234"}

    def test_cached_feature_used_without_explicit_location(self, write_feature, manager, launcher_config):
        first = launcher_config.model_copy(update={"application_file": str(write_feature(APP))})
        create_application(first, manager)

        app = create_application(launcher_config, manager)
        assert str(app.id) == APP["id"]

    def test_no_location_and_no_cache_fails(self, manager, launcher_config):
        with pytest.raises(ResolutionError):
            create_application(launcher_config, manager)

    def test_start_orders_normalized(self, write_feature, manager, launcher_config):
        config = launcher_config.model_copy(update={"application_file": str(write_feature(APP))})
        app = create_application(config, manager)
        assert [b.start_order for b in app.bundles] == [1, 10, 7]

    def test_cache_write_failure_exits(self, write_feature, manager, launcher_config):
        home = launcher_config.home_directory
        home.mkdir(parents=True)
        (home / "resources").write_text("not a directory")
        config = launcher_config.model_copy(update={"application_file": str(write_feature(APP))})

        with pytest.raises(SystemExit) as exc:
            create_application(config, manager)
        assert exc.value.code == 1


class TestNormalizeStartOrders:
    def test_start_level_metadata(self):
        bundles = [Artifact.of("g:a:1", metadata={"start-level": "5"})]
        normalize_start_orders(bundles)
        assert bundles[0].start_order == 5

    def test_default_is_one(self):
        bundles = [Artifact.of("g:a:1"), Artifact.of("g:b:1", metadata={"other": "x"})]
        normalize_start_orders(bundles)
        assert [b.start_order for b in bundles] == [1, 1]

    def test_declared_order_kept(self):
        bundles = [Artifact.of("g:a:1", start_order=30, metadata={"start-level": "5"})]
        normalize_start_orders(bundles)
        assert bundles[0].start_order == 30

    @pytest.mark.parametrize("level", ["abc", "0", "-3"])
    def test_bad_start_level_raises(self, level):
        with pytest.raises(ParseError):
            normalize_start_orders([Artifact.of("g:a:1", metadata={"start-level": level})])
