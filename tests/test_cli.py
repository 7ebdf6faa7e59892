"""Tests for the command-line entry point.

WHY: The batch mode runs in build pipelines; its exit codes decide
whether a build fails. Config problems and compile problems must both
exit non-zero with a readable message on stderr.

HOW: Writes a config and sources into tmp_path and calls main() with an
explicit argv. The interactive path is covered by test_interactive.py.
"""

import json

import pytest

from resx_compiler.cli import EXIT_CONFIG_ERROR, EXIT_FAILURE, build_parser, main


def _write_project(tmp_path, chunks):
    config = {
        "tabSize": 4,
        "srcFolder": "src",
        "distFolder": "dist",
        "resxPrefix": "prefix",
        "jsNamespace": "Resx",
        "tsGlobInterface": "ResxGlobal",
        "languages": ["en", "ru"],
        "defaultLang": "en",
        "currentLangNS": "Current",
    }
    config_path = tmp_path / "resx.config.json"
    config_path.write_text(json.dumps(config), encoding="utf-8")
    src = tmp_path / "src"
    src.mkdir()
    for name, entries in chunks.items():
        (src / "{}.json".format(name)).write_text(json.dumps(entries), encoding="utf-8")
    return config_path


class TestParser:

    def test_defaults(self):
        args = build_parser().parse_args([])
        assert args.dogood is False
        assert args.log_level in {"DEBUG", "INFO", "WARNING", "ERROR"}

    def test_short_dogood_flag(self):
        assert build_parser().parse_args(["-d"]).dogood is True

    def test_log_level_case_insensitive(self):
        assert build_parser().parse_args(["--log-level", "debug"]).log_level == "DEBUG"


class TestBatchMode:

    def test_dogood_generates_everything(self, tmp_path, capsys):
        config_path = _write_project(tmp_path, {
            "greeting": {"hello": {"en": "Hello", "ru": "Привет"}, "hello2": {"en": "Bye"}},
        })

        main(["--config", str(config_path), "--dogood"])

        ru = (tmp_path / "dist" / "resx" / "greeting.ru.properties").read_text(encoding="utf-8")
        assert "prefix.greeting.hello=Привет\n" in ru
        assert "prefix.greeting.hello2=Bye\n" in ru
        assert (tmp_path / "dist" / "ts" / "greeting.d.ts").is_file()
        assert "Done! Compiled 1 chunk(s), 5 artifact(s)." in capsys.readouterr().err

    def test_dogood_normalizes_sources(self, tmp_path):
        config_path = _write_project(tmp_path, {"c": {"k": {"ru": "К", "en": "K"}}})
        main(["--config", str(config_path), "-d"])

        text = (tmp_path / "src" / "c.json").read_text(encoding="utf-8")
        assert text.index('"en"') < text.index('"ru"')
        assert text.endswith("}\n")

    def test_invalid_source_exits_non_zero(self, tmp_path, capsys):
        config_path = _write_project(tmp_path, {"broken": {"k": {"ru": "x"}}})

        with pytest.raises(SystemExit) as exc_info:
            main(["--config", str(config_path), "--dogood"])

        assert exc_info.value.code == EXIT_FAILURE
        assert "Error: Invalid source data in 'broken'" in capsys.readouterr().err
        assert not (tmp_path / "dist").exists()

    def test_missing_config_exits_with_config_code(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--config", str(tmp_path / "missing.json"), "--dogood"])

        assert exc_info.value.code == EXIT_CONFIG_ERROR
        assert "Configuration file not found" in capsys.readouterr().err
