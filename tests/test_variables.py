"""
Tests for variable substitution.
"""

import json

import pytest

from featurelauncher.core.errors import ParseError, VariableError
from featurelauncher.core.persistence.feature_json import parse_feature
from featurelauncher.core.services.variables import resolve_variables, substitute


def _feature(**extra):
    data = {"id": "g:app:1", "variables": {"port": "8080", "host": "localhost", "secret": None}}
    data.update(extra)
    return parse_feature(json.dumps(data))


class TestSubstitute:
    def test_known_variable(self):
        assert substitute("http://${host}:${port}", {"host": "h", "port": "1"}) == "http://h:1"

    def test_unknown_placeholder_left_alone(self):
        assert substitute("${nope}", {}) == "${nope}"

    def test_variable_without_value_raises(self):
        with pytest.raises(VariableError, match="secret"):
            substitute("${secret}", {"secret": None})

    def test_variable_error_is_parse_error(self):
        assert issubclass(VariableError, ParseError)


class TestResolveVariables:
    def test_framework_properties(self):
        f = resolve_variables(_feature(**{"framework-properties": {"http.port": "${port}"}}))
        assert f.framework_properties == {"http.port": "8080"}

    def test_overrides_replace_declared_values(self):
        f = resolve_variables(
            _feature(**{"framework-properties": {"http.port": "${port}"}}),
            {"port": "9090"},
        )
        assert f.framework_properties["http.port"] == "9090"
        assert f.variables["port"] == "9090"

    def test_override_for_undeclared_variable_ignored(self):
        f = resolve_variables(_feature(), {"other": "x"})
        assert "other" not in f.variables

    def test_override_supplies_missing_value(self):
        f = resolve_variables(
            _feature(configurations={"pid": {"password": "${secret}"}}),
            {"secret": "s3cr3t"},
        )
        assert f.configurations[0].properties == {"password": "s3cr3t"}

    def test_missing_value_raises(self):
        with pytest.raises(VariableError):
            resolve_variables(_feature(configurations={"pid": {"password": "${secret}"}}))

    def test_nested_configuration_values(self):
        f = resolve_variables(_feature(configurations={
            "pid": {"urls": ["http://${host}", "x"], "count": 3, "inner": {"h": "${host}"}},
        }))
        assert f.configurations[0].properties == {
            "urls": ["http://localhost", "x"], "count": 3, "inner": {"h": "localhost"},
        }

    def test_bundle_metadata(self):
        f = resolve_variables(_feature(bundles=[{"id": "g:b:1", "start-level": "${port}"}]))
        assert f.bundles[0].metadata["start-level"] == "8080"

    def test_text_and_json_extensions(self):
        f = resolve_variables(_feature(**{
            "repoinit:TEXT|false": "create user ${host}",
            "scripts:JSON|false": ["a ${host}", {"k": "${port}"}],
        }))
        assert f.extensions[0].text == "create user localhost"
        assert f.extensions[1].content == ["a localhost", {"k": "8080"}]
