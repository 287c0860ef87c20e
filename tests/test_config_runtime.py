"""Tests for runtime configuration loading."""

import json

from paramscope.config_runtime import DEFAULTS, load_runtime_config


def write_config(root, data):
    config_dir = root / ".paramscope"
    config_dir.mkdir(exist_ok=True)
    (config_dir / "config.json").write_text(data if isinstance(data, str) else json.dumps(data))


class TestLoadRuntimeConfig:

    def test_defaults(self, tmp_path):
        cfg = load_runtime_config(str(tmp_path))
        assert cfg["paths"]["controllers_dir"] == "app/controllers"
        assert cfg["paths"]["routes_table"] == "routes.txt"
        assert cfg["limits"]["workers"] == 4
        assert "StandardError" in cfg["analysis"]["exception_bases"]

    def test_file_overrides(self, tmp_path):
        write_config(tmp_path, {
            "paths": {"routes_table": "tmp/routes.txt"},
            "limits": {"workers": 8},
            "analysis": {"ignored_macros": ["wrap_parameters"]},
        })
        cfg = load_runtime_config(str(tmp_path))
        assert cfg["paths"]["routes_table"] == "tmp/routes.txt"
        assert cfg["limits"]["workers"] == 8
        assert cfg["analysis"]["ignored_macros"] == ["wrap_parameters"]

    def test_file_values_of_wrong_type_are_ignored(self, tmp_path):
        write_config(tmp_path, {"limits": {"workers": "many"}, "unknown": {"x": 1}})
        cfg = load_runtime_config(str(tmp_path))
        assert cfg["limits"]["workers"] == 4
        assert "unknown" not in cfg

    def test_malformed_file_falls_back_to_defaults(self, tmp_path):
        write_config(tmp_path, "{not json")
        cfg = load_runtime_config(str(tmp_path))
        assert cfg == DEFAULTS

    def test_environment_overrides_file(self, tmp_path, monkeypatch):
        write_config(tmp_path, {"limits": {"workers": 8}})
        monkeypatch.setenv("PARAMSCOPE_LIMITS_WORKERS", "2")
        monkeypatch.setenv("PARAMSCOPE_ANALYSIS_IGNORED_MACROS", "wrap_parameters, before_render")
        monkeypatch.setenv("PARAMSCOPE_PATHS_VIEWS_DIR", "app/api_views")

        cfg = load_runtime_config(str(tmp_path))
        assert cfg["limits"]["workers"] == 2
        assert cfg["analysis"]["ignored_macros"] == ["wrap_parameters", "before_render"]
        assert cfg["paths"]["views_dir"] == "app/api_views"

    def test_invalid_environment_int_keeps_value(self, tmp_path, monkeypatch):
        monkeypatch.setenv("PARAMSCOPE_LIMITS_MAX_FILE_SIZE", "huge")
        cfg = load_runtime_config(str(tmp_path))
        assert cfg["limits"]["max_file_size"] == DEFAULTS["limits"]["max_file_size"]

    def test_defaults_are_not_mutated(self, tmp_path):
        cfg = load_runtime_config(str(tmp_path))
        cfg["limits"]["workers"] = 99
        cfg["analysis"]["ignored_macros"].append("x")
        assert DEFAULTS["limits"]["workers"] == 4
        assert DEFAULTS["analysis"]["ignored_macros"] == []
