"""Tests for the command-line interface."""

import os
from unittest import mock

import pytest
from tsuml import __main__ as cli
from tsuml.core import ConfigurationError

FIXTURES = os.path.join(os.path.dirname(__file__), "fixtures")
GREETER = os.path.join(FIXTURES, "greeter.ts")


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    """Run every CLI test away from any tsuml.yaml or tsconfig.json."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


class TestArguments:
    def test_flags_default_to_unset(self):
        args = cli.build_parser().parse_args(["-i", "a.ts"])
        assert args.input == ["a.ts"]
        assert args.associations is None
        assert args.colored_association_lines is None
        assert args.format is None

    def test_repeatable_input(self):
        args = cli.build_parser().parse_args(["-i", "a.ts", "--input", "b/*.ts", "-A", "-L", "-f", "MERMAID"])
        assert args.input == ["a.ts", "b/*.ts"]
        assert args.associations is True
        assert args.colored_association_lines is True
        assert args.format == "mermaid"

    def test_merge_settings(self):
        args = cli.build_parser().parse_args(["-F", "-T", "Animal"])
        config = {"input": "src/*.ts", "associations": True, "target_class": "Other"}
        settings = cli.merge_settings(args, config)
        assert settings["input"] == ["src/*.ts"]
        assert settings["associations"] is True
        assert settings["field_associations"] is True
        assert settings["target_class"] == "Animal"
        assert "log_level" not in settings


class TestRun:
    def test_prints_plantuml(self, capsys):
        assert cli.run(["-i", GREETER]) == 0
        out = capsys.readouterr().out
        assert out.startswith("@startuml\nclass Greeter {")
        assert out.rstrip().endswith("@enduml")

    def test_writes_markup_file(self, isolated_cwd):
        output = isolated_cwd / "diagram.puml"
        assert cli.run(["-i", GREETER, "-o", str(output)]) == 0
        assert "class Greeter {" in output.read_text(encoding="utf-8")

    def test_mermaid(self, capsys):
        cli.run(["-i", GREETER, "-f", "mermaid"])
        assert capsys.readouterr().out.startswith("classDiagram")

    def test_yaml_config(self, isolated_cwd, capsys):
        (isolated_cwd / "tsuml.yaml").write_text(f"input:\n  - {GREETER}\nformat: mermaid\n")
        cli.run([])
        assert capsys.readouterr().out.startswith("classDiagram")

    def test_cli_overrides_yaml(self, isolated_cwd, capsys):
        (isolated_cwd / "tsuml.yaml").write_text(f"input: {GREETER}\nformat: mermaid\n")
        cli.run(["-f", "plantuml"])
        assert capsys.readouterr().out.startswith("@startuml")

    def test_paths_from_tsconfig(self, capsys):
        main = os.path.join(FIXTURES, "paths", "src", "main.ts")
        cli.run(["-i", main, "-p", os.path.join(FIXTURES, "paths"), "-A"])
        out = capsys.readouterr().out
        assert "interface User {" in out
        assert 'UserService --> "*" User' in out

    def test_image_output_renders(self, isolated_cwd):
        output = isolated_cwd / "diagram.svg"
        with mock.patch.object(cli, "render_plantuml", return_value=b"<svg/>") as render:
            cli.run(["-i", GREETER, "-o", str(output)])
        assert output.read_bytes() == b"<svg/>"
        assert render.call_args.args[1] == "svg"

    def test_image_output_requires_plantuml(self, isolated_cwd):
        with pytest.raises(ConfigurationError):
            cli.run(["-i", GREETER, "-f", "mermaid", "-o", str(isolated_cwd / "diagram.png")])

    def test_missing_input(self):
        with pytest.raises(ConfigurationError):
            cli.run([])

    def test_unmatched_glob(self):
        with pytest.raises(ConfigurationError):
            cli.run(["-i", os.path.join(FIXTURES, "*.nothing")])

    def test_conflicting_filters(self):
        with pytest.raises(ConfigurationError):
            cli.run(["-i", GREETER, "-I", "-C"])


class TestMain:
    def test_error_exit_code(self, capsys):
        with mock.patch("sys.argv", ["tsuml", "-i", "missing.ts"]):
            with pytest.raises(SystemExit) as exc_info:
                cli.main()
        assert exc_info.value.code == 1
        assert capsys.readouterr().err.startswith("error:")

    def test_success_exit_code(self, capsys):
        with mock.patch("sys.argv", ["tsuml", "-i", GREETER]):
            with pytest.raises(SystemExit) as exc_info:
                cli.main()
        assert exc_info.value.code == 0
