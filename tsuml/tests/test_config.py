"""Tests for configuration: YAML settings, tsconfig handling and input globs."""

import os

import pytest
from tsuml.core import ConfigurationError
from tsuml.core.config import expand_inputs, find_tsconfig_file, load_config, parse_jsonc, read_tsconfig

FIXTURES = os.path.join(os.path.dirname(__file__), "fixtures")


# =========================================================================
# YAML config
# =========================================================================


class TestLoadConfig:
    def test_missing_default_is_empty(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert load_config() == {}

    def test_default_file(self, tmp_path, monkeypatch):
        (tmp_path / "tsuml.yaml").write_text("associations: true\ninput: src/*.ts\n")
        monkeypatch.chdir(tmp_path)
        assert load_config() == {"associations": True, "input": "src/*.ts"}

    def test_dashed_keys_and_unknown_keys(self, tmp_path):
        path = tmp_path / "custom.yaml"
        path.write_text("colored-association-lines: true\nfavourite_color: blue\n")
        assert load_config(str(path)) == {"colored_association_lines": True}

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(str(path)) == {}

    def test_explicit_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_config(str(tmp_path / "nope.yaml"))

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("input: [unclosed\n")
        with pytest.raises(ConfigurationError):
            load_config(str(path))

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigurationError):
            load_config(str(path))


# =========================================================================
# tsconfig
# =========================================================================


class TestTsconfig:
    def test_parse_jsonc(self):
        text = '''{
            // line comment
            "a": "http://example.com/*not a comment*/",
            /* block */
            "b": [1, 2,],
        }'''
        assert parse_jsonc(text) == {"a": "http://example.com/*not a comment*/", "b": [1, 2]}

    def test_read_fixture(self):
        options = read_tsconfig(os.path.join(FIXTURES, "paths", "tsconfig.json"))
        assert options.base_url == os.path.join(FIXTURES, "paths", "src")
        assert options.paths == {"@models/*": ["models/*"]}

    def test_extends(self, tmp_path):
        (tmp_path / "base.json").write_text('{"compilerOptions": {"baseUrl": "lib", "paths": {"a/*": ["x/*"]}}}')
        (tmp_path / "tsconfig.json").write_text('{"extends": "./base", "compilerOptions": {"paths": {"b/*": ["y/*"]}}}')
        options = read_tsconfig(str(tmp_path / "tsconfig.json"))
        assert options.paths == {"a/*": ["x/*"], "b/*": ["y/*"]}
        assert options.base_url is not None

    def test_circular_extends(self, tmp_path):
        (tmp_path / "a.json").write_text('{"extends": "./b.json"}')
        (tmp_path / "b.json").write_text('{"extends": "./a.json"}')
        with pytest.raises(ConfigurationError):
            read_tsconfig(str(tmp_path / "a.json"))

    def test_unreadable(self, tmp_path):
        path = tmp_path / "tsconfig.json"
        path.write_text("{ not json")
        with pytest.raises(ConfigurationError):
            read_tsconfig(str(path))

    def test_find_explicit_project_directory(self):
        project = os.path.join(FIXTURES, "paths")
        found = find_tsconfig_file("anything.ts", project)
        assert found == os.path.join(project, "tsconfig.json")

    def test_find_next_to_input(self):
        input_path = os.path.join(FIXTURES, "paths", "main.ts")
        assert find_tsconfig_file(input_path) == os.path.join(FIXTURES, "paths", "tsconfig.json")

    def test_find_nothing(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert find_tsconfig_file(str(tmp_path / "main.ts")) is None


# =========================================================================
# Inputs
# =========================================================================


class TestExpandInputs:
    def test_glob(self):
        pattern = os.path.join(FIXTURES, "inheritance", "*.ts")
        names = [os.path.basename(f) for f in expand_inputs([pattern])]
        assert names == ["Animal.ts", "Horse.ts", "Snake.ts", "index.ts"]

    def test_recursive_glob_deduplicates(self):
        names = expand_inputs([
            os.path.join(FIXTURES, "paths", "**", "*.ts"),
            os.path.join(FIXTURES, "paths", "src", "main.ts"),
        ])
        assert names == [
            os.path.join(FIXTURES, "paths", "src", "main.ts"),
            os.path.join(FIXTURES, "paths", "src", "models", "User.ts"),
        ]

    def test_literal_path_kept(self):
        assert expand_inputs(["missing.ts"]) == ["missing.ts"]

    def test_unmatched_glob(self):
        assert expand_inputs([os.path.join(FIXTURES, "*.nothing")]) == []
